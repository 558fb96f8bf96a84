"""Render invoker: call a render function and inject its result.

Injection is plain text substitution against two fixed placeholders in
the HTML template. There is no HTML parsing. A missing placeholder skips
that injection.

The render function is called with ``(url, query)`` and may be sync or
async. Whatever it raises propagates to the caller unchanged: a request
handler turns it into a 5xx, the export pipeline aborts.
"""

import json
import logging
import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from storefront._internal.invoke import invoke
from storefront.errors import RenderFailure

logger = logging.getLogger("storefront.render")

HEAD_PLACEHOLDER = "<!--app-head-->"
BODY_PLACEHOLDER = "<!--app-html-->"

INITIAL_DATA_PATTERN = re.compile(
    r"<script[^>]*>window\.__INITIAL_DATA__\s*=\s*[^<]*</script>",
    re.IGNORECASE,
)

RenderFunction: TypeAlias = Callable[[str, Mapping[str, str]], "RenderValue | Awaitable[RenderValue]"]


@dataclass(frozen=True, slots=True)
class RenderResult:
    """What a render function produces for one URL."""

    html: str = ""
    head: str | None = None
    data: Any = None

    @classmethod
    def from_value(cls, value: "RenderValue") -> "RenderResult":
        """Normalize a render return value.

        Accepts a ``RenderResult`` or a mapping with ``html``, ``head``
        and ``data`` keys (all optional). Raises ``RenderFailure`` for
        anything else.
        """
        if isinstance(value, RenderResult):
            return value
        if isinstance(value, Mapping):
            html = value.get("html")
            head = value.get("head")
            if html is not None and not isinstance(html, str):
                msg = f"Render result 'html' must be a string, got {type(html).__name__}"
                raise RenderFailure(msg)
            if head is not None and not isinstance(head, str):
                msg = f"Render result 'head' must be a string, got {type(head).__name__}"
                raise RenderFailure(msg)
            return cls(html=html or "", head=head, data=value.get("data"))
        msg = f"Render function returned {type(value).__name__}, expected a mapping or RenderResult"
        raise RenderFailure(msg)


RenderValue: TypeAlias = RenderResult | Mapping[str, Any]


def initial_data_script(data: Any) -> str:
    """Serialize *data* into the ``window.__INITIAL_DATA__`` script block.

    ``<`` is escaped so the payload cannot close its own element and
    ``INITIAL_DATA_PATTERN`` always matches the whole block.
    """
    payload = json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    payload = payload.replace("<", "\\u003c")
    return f"<script>window.__INITIAL_DATA__ = {payload};</script>"


def strip_initial_data(template: str) -> str:
    """Remove every initial-data script block. No-op when there is none."""
    return INITIAL_DATA_PATTERN.sub("", template)


def inject_rendered(template: str, result: RenderResult) -> str:
    """Inject a render result into *template* and return the document.

    Order: stale initial-data blocks are stripped, then the head fragment
    (plus the initial-data block when ``data`` is not ``None``) replaces
    the head placeholder, then the html fragment replaces the body
    placeholder.

    A document that was already injected has no head placeholder left;
    there the new initial-data block takes the place of the first stale
    one, so the result still carries exactly one block with the newest
    data.
    """
    script = initial_data_script(result.data) if result.data is not None else ""

    if HEAD_PLACEHOLDER in template:
        head = result.head or ""
        if script:
            head = f"{head} {script}"
        document = strip_initial_data(template).replace(HEAD_PLACEHOLDER, head, 1)
    else:
        match = INITIAL_DATA_PATTERN.search(template)
        if match is None:
            document = template
        else:
            rest = strip_initial_data(template[match.end():])
            document = template[:match.start()] + script + rest

    return document.replace(BODY_PLACEHOLDER, result.html, 1)


async def render_document(
    template: str,
    url: str,
    query: Mapping[str, str],
    render: RenderFunction,
) -> str:
    """Render *url* with *render* and inject the result into *template*."""
    value = await invoke(render, url, dict(query))
    result = RenderResult.from_value(value)
    logger.debug("Rendered %s (%d bytes of html)", url, len(result.html))
    return inject_rendered(template, result)
