from __future__ import annotations

from typing import Optional


class UIParseError(SyntaxError):
    """Base class for failures while importing ``ParseUI`` source text."""

    kind = "parse"

    def __init__(self, message: str, *, line: Optional[int] = None, col: Optional[int] = None):
        if line is not None and col is not None:
            message = f"[line {line}, col {col}] {message}"
        super().__init__(message)
        self.line = line
        self.col = col

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""


class StructuralError(UIParseError):
    """Missing call marker, unbalanced delimiters, missing comma, non-object argument."""

    kind = "structural"


class LexicalError(UIParseError):
    """Unterminated string or comment, invalid number, unexpected character."""

    kind = "lexical"


class SemanticError(UIParseError):
    """Unknown enum member or unsupported qualified identifier."""

    kind = "semantic"


def with_source_snippet(err: UIParseError, text: str) -> Optional[UIParseError]:
    """Return a copy of ``err`` with the offending source line and a caret appended."""

    if err.line is None or err.col is None or "\n" in err.message:
        return None
    lines = text.splitlines()
    if not 1 <= err.line <= len(lines):
        return None
    line_text = lines[err.line - 1].rstrip()
    if not line_text:
        return None
    caret_line = " " * (max(err.col, 1) - 1) + "^"
    augmented = type(err)(f"{err.message}\n    {line_text}\n    {caret_line}")
    augmented.line = err.line
    augmented.col = err.col
    return augmented
