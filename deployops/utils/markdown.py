"""Escaping for Telegram MarkdownV2 captions."""

from __future__ import annotations

import re

from deployops.constants.telegram import MARKDOWN_V2_RESERVED

_RESERVED_RE = re.compile(f"([{re.escape(MARKDOWN_V2_RESERVED)}])")


def escape_markdown(text: str) -> str:
    """Prefix each MarkdownV2 reserved character with a backslash."""
    return _RESERVED_RE.sub(r"\\\1", text)
