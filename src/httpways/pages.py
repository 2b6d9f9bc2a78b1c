"""Typed views over the demo application's fixed responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from httpways._internal.errors import ResponseParseError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from xml.etree.ElementTree import Element

    from lxml.html import HtmlElement

HELLO_WORLD_HTML = """\
<html>
  <body>
    <p>hello world</p>
  </body>
</html>"""

HELLO_WORLD_JSON: dict[str, Any] = {"html": {"body": {"p": "hello world"}}}

POST_RESPONSE = "Successfully posted [arg:[foo]] with method POST"


@dataclass(frozen=True)
class HelloPage:
    """The ``helloWorld`` / ``indexJson`` document.

    Attributes:
        paragraph: Text of the ``body > p`` node.
    """

    paragraph: str

    @classmethod
    def from_tree(cls, root: Element | HtmlElement) -> HelloPage:
        """Read the page from a parsed ``<html>`` element tree (ElementTree or lxml).

        Raises:
            ResponseParseError: If the tree has no ``body/p`` node.
        """
        node = root.find("body/p")
        if node is None:
            msg = f"<{root.tag}> document has no body/p node"
            raise ResponseParseError(msg)
        return cls(paragraph=(node.text or "").strip())

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> HelloPage:
        """Read the page from its JSON form ``{"html": {"body": {"p": ...}}}``.

        Raises:
            ResponseParseError: If any level of the nesting is missing.
        """
        try:
            paragraph = data["html"]["body"]["p"]
        except (KeyError, TypeError) as exc:
            msg = f"JSON document has no html.body.p field: {exc}"
            raise ResponseParseError(msg) from exc
        return cls(paragraph=str(paragraph))


def post_receipt(params: Mapping[str, Sequence[str]], method: str) -> str:
    """Render the acknowledgement the ``post`` page answers with.

    Parameters are listed in the order received, each with all its values::

        >>> post_receipt({"arg": ["foo"]}, "POST")
        'Successfully posted [arg:[foo]] with method POST'
    """
    # An empty map renders as [:]
    rendered = ", ".join(f"{key}:[{', '.join(values)}]" for key, values in params.items()) or ":"
    return f"Successfully posted [{rendered}] with method {method}"
