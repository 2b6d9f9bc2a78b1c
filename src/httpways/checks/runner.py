"""Sequential execution of registered checks against one deployment."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpways.checks.catalog  # noqa: F401  (registers the built-in checks)
from httpways._internal.errors import CheckError, CheckFailure
from httpways._internal.logging import get_logger
from httpways.checks.registry import CheckContext, CheckRegistry, registry
from httpways.clients.builder import HttpBuilder

if TYPE_CHECKING:
    from collections.abc import Sequence

    from httpways._internal.config import HttpWaysConfig
    from httpways.checks.registry import CheckDefinition, Mechanism

logger = get_logger("checks.runner")


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one check.

    Attributes:
        name: The check's name.
        mechanism: The client style it exercised.
        passed: True when the check ran and every expectation held.
        skipped: True when the check was not run (e.g. needs network).
        duration_ms: Wall time spent in the check.
        error: Failure description, None when passed or skipped.
    """

    name: str
    mechanism: Mechanism
    passed: bool
    skipped: bool = False
    duration_ms: float = 0.0
    error: str | None = None


def select_checks(
    names: Sequence[str] | None = None,
    source: CheckRegistry | None = None,
) -> list[CheckDefinition]:
    """Pick checks by name, keeping registration order.

    Raises:
        CheckError: If a requested name is not registered.
    """
    source = source if source is not None else registry
    if not names:
        return source.get_all()

    unknown = [name for name in names if source.get(name) is None]
    if unknown:
        msg = f"Unknown check(s): {', '.join(unknown)}"
        raise CheckError(msg)
    wanted = set(names)
    return [definition for definition in source.get_all() if definition.name in wanted]


async def _run_one(definition: CheckDefinition, ctx: CheckContext) -> CheckResult:
    start = time.monotonic()
    error: str | None = None
    try:
        await definition.func(ctx)
    except CheckFailure as exc:
        error = str(exc)
    except Exception as exc:
        error = f"{type(exc).__name__}: {exc}"
    duration_ms = (time.monotonic() - start) * 1000

    if error is None:
        logger.info("PASS %s (%.1fms)", definition.name, duration_ms)
    else:
        logger.warning("FAIL %s: %s", definition.name, error)

    return CheckResult(
        name=definition.name,
        mechanism=definition.mechanism,
        passed=error is None,
        duration_ms=duration_ms,
        error=error,
    )


async def run_checks(
    config: HttpWaysConfig,
    names: Sequence[str] | None = None,
    *,
    include_network: bool = False,
    source: CheckRegistry | None = None,
) -> list[CheckResult]:
    """Run checks one after another with a shared builder client.

    A failing check never stops the run; its error is recorded in the
    result. Checks needing public internet access are reported as skipped
    unless ``include_network`` is set.

    Args:
        config: Location of the demo application.
        names: Restrict the run to these check names.
        include_network: Also run checks that reach the public internet.
        source: Registry to draw from; defaults to the global registry.

    Returns:
        One result per selected check, in registration order.
    """
    selected = select_checks(names, source)
    results: list[CheckResult] = []

    async with HttpBuilder(config.base_url, timeout=config.request_timeout) as builder:
        ctx = CheckContext(config=config, builder=builder)
        for definition in selected:
            if definition.requires_network and not include_network:
                logger.info("SKIP %s (needs network)", definition.name)
                results.append(
                    CheckResult(
                        name=definition.name,
                        mechanism=definition.mechanism,
                        passed=False,
                        skipped=True,
                    )
                )
                continue
            results.append(await _run_one(definition, ctx))

    return results
