"""Escaping for workspace XML handed to the editor as a quoted script literal."""

from __future__ import annotations

import re

_ESCAPED_RE = re.compile(r"\\([\\\"'])")


def escape_characters(text: str) -> str:
    # Backslashes first, or the quote escapes would be doubled.
    escaped = str(text or "").replace("\\", "\\\\")
    escaped = escaped.replace('"', '\\"')
    return escaped.replace("'", "\\'")


def unescape_characters(text: str) -> str:
    return _ESCAPED_RE.sub(r"\1", str(text or ""))
