"""Check definitions, the ``@check`` decorator and the global registry."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from httpways._internal.errors import CheckError, CheckFailure

if TYPE_CHECKING:
    from collections.abc import Callable

    from httpways._internal.config import HttpWaysConfig
    from httpways.clients.builder import HttpBuilder


class Mechanism(Enum):
    """The client style a check exercises."""

    URLFETCH = "urllib"
    CONNECTION = "http.client"
    BUILDER = "builder"
    POOLED = "pooled"


@dataclass
class CheckContext:
    """Setup shared by every check in a run.

    Attributes:
        config: Where the demo application lives.
        builder: One open builder client reused across checks.
    """

    config: HttpWaysConfig
    builder: HttpBuilder


class CheckFunc(Protocol):
    """Protocol for check coroutines: ``async def fn(ctx) -> None``."""

    @property
    def __name__(self) -> str:
        """Function name."""
        ...

    async def __call__(self, ctx: CheckContext) -> None:
        """Run the check, raising on failure."""
        ...


@dataclass
class CheckDefinition:
    """A single registered check.

    Attributes:
        name: Human-readable, unique name.
        mechanism: The client style exercised.
        func: The check coroutine.
        requires_network: True when the check reaches beyond the demo
            application to the public internet.
    """

    name: str
    mechanism: Mechanism
    func: CheckFunc
    requires_network: bool = False


class CheckRegistry:
    """Registry of check definitions, in registration order."""

    def __init__(self) -> None:
        self._checks: dict[str, CheckDefinition] = {}

    def register(self, definition: CheckDefinition) -> None:
        """Register a check definition.

        Raises:
            CheckError: If a check with the same name is already registered.
        """
        if definition.name in self._checks:
            msg = f"Check {definition.name!r} is already registered"
            raise CheckError(msg)
        self._checks[definition.name] = definition

    def get(self, name: str) -> CheckDefinition | None:
        """Look up a check by name."""
        return self._checks.get(name)

    def get_all(self) -> list[CheckDefinition]:
        """Return all registered checks."""
        return list(self._checks.values())

    def clear(self) -> None:
        """Remove all registered checks. Primarily for testing."""
        self._checks.clear()

    def __len__(self) -> int:
        return len(self._checks)


# Global singleton registry, filled by httpways.checks.catalog.
registry = CheckRegistry()


def check(
    *,
    name: str,
    mechanism: Mechanism,
    requires_network: bool = False,
    target: CheckRegistry | None = None,
) -> Callable[[CheckFunc], CheckFunc]:
    """Register a coroutine function as a check.

    The function itself is returned unchanged so it can still be awaited
    directly.

    Args:
        name: Unique name shown in reports.
        mechanism: The client style the check exercises.
        requires_network: Whether the check needs public internet access.
        target: Registry to add to; defaults to the global registry.

    Raises:
        CheckError: If the function is not a coroutine function or the
            name is taken.
    """

    def decorator(func: CheckFunc) -> CheckFunc:
        if not inspect.iscoroutinefunction(func):
            msg = f"Check {func.__name__} must be an async function"
            raise CheckError(msg)
        (target if target is not None else registry).register(
            CheckDefinition(
                name=name,
                mechanism=mechanism,
                func=func,
                requires_network=requires_network,
            )
        )
        return func

    return decorator


def expect_equal(actual: object, expected: object, what: str) -> None:
    """Raise :class:`CheckFailure` unless ``actual == expected``."""
    if actual != expected:
        msg = f"{what}: expected {expected!r}, got {actual!r}"
        raise CheckFailure(msg)


def expect_raises(
    error_type: type[BaseException],
    func: Callable[[], object],
    what: str,
) -> BaseException:
    """Call ``func`` and require it to raise ``error_type``.

    Returns:
        The raised exception.

    Raises:
        CheckFailure: If ``func`` returns normally or raises something else.
    """
    try:
        func()
    except error_type as exc:
        return exc
    except Exception as exc:
        msg = f"{what}: expected {error_type.__name__}, got {type(exc).__name__}: {exc}"
        raise CheckFailure(msg) from exc
    msg = f"{what}: expected {error_type.__name__}, nothing was raised"
    raise CheckFailure(msg)
