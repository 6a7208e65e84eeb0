"""Pull the generated document out of the result frame's srcdoc.

The srcdoc attribute holds an entity-escaped wrapper page; the generated code sits
inside it. Decoding happens twice: once for the attribute as a whole, and once more
(literal replacements only) for the selected fragment, which may carry its own
escaped entities.
"""

from __future__ import annotations

import html
import re
from typing import Callable

from chatforge.generate.errors import ExtractionFailure
from chatforge.session.base import RenderSession

MIN_ARTIFACT_CHARS = 100
ERROR_MARKER = "ERROR:"

_TAGGED_DOCUMENT = re.compile(r'<html lang="en">[\s\S]*?</html>', re.IGNORECASE)
_DOCTYPE_DOCUMENT = re.compile(r"<!DOCTYPE html>[\s\S]*?</html>", re.IGNORECASE)

# Order matters: &amp; is handled after &lt;/&gt; so "&amp;lt;" ends up as "&lt;".
_LITERAL_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&#39;", "'"),
)


def decode_markup(raw: str) -> str:
    """Resolve HTML character references, leaving tags as literal text.

    Line endings are normalized to ``\\n`` as the HTML parser does.
    """
    return html.unescape(raw.replace("\r\n", "\n").replace("\r", "\n"))


def _match_tagged(text: str) -> str | None:
    m = _TAGGED_DOCUMENT.search(text)
    return m.group(0) if m else None


def _match_doctype(text: str) -> str | None:
    m = _DOCTYPE_DOCUMENT.search(text)
    return m.group(0) if m else None


SELECTION_STRATEGIES: tuple[Callable[[str], str | None], ...] = (_match_tagged, _match_doctype)


def select_document(decoded: str) -> str:
    """First matching strategy wins; the whole text is the fallback."""
    for strategy in SELECTION_STRATEGIES:
        found = strategy(decoded)
        if found is not None:
            return found
    return decoded


def clean_entities(text: str) -> str:
    for entity, char in _LITERAL_ENTITIES:
        text = text.replace(entity, char)
    return text.strip()


def validate_payload(payload: str | None, min_chars: int = MIN_ARTIFACT_CHARS) -> str:
    """Return ``payload`` if usable, else raise ExtractionFailure."""
    if not payload or len(payload) < min_chars or payload.startswith(ERROR_MARKER):
        raise ExtractionFailure("Extraction failed: code too short or empty")
    return payload


async def extract_payload(session: RenderSession) -> str | None:
    """Read and decode the result frame; None when the frame or its srcdoc is missing."""
    raw = await session.read_artifact_attribute()
    if not raw:
        return None
    return select_document(decode_markup(raw))
