from __future__ import annotations
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    MALFORMED_NUMBER = "malformed_number"
    MALFORMED_INDEXED_VALUE = "malformed_indexed_value"
    MALFORMED_ARTICLE_BLOCK = "malformed_article_block"
    MALFORMED_LINE = "malformed_line"


class ParseError(ValueError):
    """
    A grammar rule failed to match.

    kind:  which family of rule failed (see ErrorKind)
    pos:   byte offset into the line where the failing rule started
    rule:  name of the rule / line-parser state, e.g. "user_clicked"
    """

    def __init__(self, kind: ErrorKind, pos: int, message: str, rule: Optional[str] = None):
        self.kind = kind
        self.pos = pos
        self.rule = rule
        self.message = message
        self.lineno: Optional[int] = None  # set by callers iterating over a file
        super().__init__(str(self))

    def __str__(self) -> str:
        where = f"{self.rule} " if self.rule else ""
        return f"{self.kind.value} at byte {self.pos}: {where}{self.message}".rstrip()
