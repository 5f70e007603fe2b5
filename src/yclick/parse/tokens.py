from __future__ import annotations
import math
from typing import Callable, List, Optional, TypeVar, Union

from yclick.data.errors import ErrorKind, ParseError
from yclick.data.schema import IndexedValue

T = TypeVar("T")

_DIGITS = frozenset(b"0123456789")

UINT8_BITS = 8
UINT32_BITS = 32


class Cursor:
    """
    Read position over one complete log line.

    Rules either consume bytes and advance pos, or raise ParseError and leave
    pos where the rule started.
    """

    __slots__ = ("data", "pos")

    def __init__(self, data: Union[bytes, bytearray, str], pos: int = 0):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.data = bytes(data)
        self.pos = pos

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def peek(self) -> Optional[int]:
        return None if self.at_end() else self.data[self.pos]

    def startswith(self, literal: bytes) -> bool:
        return self.data.startswith(literal, self.pos)

    def rest(self) -> bytes:
        return self.data[self.pos:]

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos}, rest={self.rest()[:24]!r})"


def expect_literal(cur: Cursor, literal: bytes, kind: ErrorKind, rule: str) -> None:
    if not cur.startswith(literal):
        found = cur.rest()[: len(literal)]
        raise ParseError(kind, cur.pos, f"expected {literal!r}, found {found!r}", rule=rule)
    cur.pos += len(literal)


def is_digit(b: Optional[int]) -> bool:
    return b is not None and b in _DIGITS


# ---- numeric tokens ----

def parse_digits(cur: Cursor) -> str:
    """One or more ASCII digits, returned as text."""
    start = cur.pos
    end = start
    data = cur.data
    while end < len(data) and data[end] in _DIGITS:
        end += 1
    if end == start:
        raise ParseError(
            ErrorKind.MALFORMED_NUMBER, start,
            f"expected digit, found {data[start:start + 1]!r}", rule="digits",
        )
    cur.pos = end
    return data[start:end].decode("ascii")


def parse_uint(cur: Cursor, bits: int = UINT32_BITS) -> int:
    start = cur.pos
    text = parse_digits(cur)
    # bound the run before int(); huge runs hit the interpreter's digit limit
    significant = text.lstrip("0") or "0"
    limit = 1 << bits
    if len(significant) > len(str(limit - 1)) or int(significant) >= limit:
        cur.pos = start
        shown = text if len(text) <= 24 else f"{text[:20]}...({len(text)} digits)"
        raise ParseError(
            ErrorKind.MALFORMED_NUMBER, start,
            f"{shown} does not fit in an unsigned {bits}-bit integer", rule=f"uint{bits}",
        )
    return int(significant)


def parse_decimal(cur: Cursor) -> float:
    """digits "." digits -> float. No sign, no exponent."""
    start = cur.pos
    try:
        parse_digits(cur)
        expect_literal(cur, b".", ErrorKind.MALFORMED_NUMBER, "decimal")
        parse_digits(cur)
    except ParseError as e:
        cur.pos = start
        raise ParseError(ErrorKind.MALFORMED_NUMBER, start, f"bad decimal ({e.message})", rule="decimal") from e

    text = cur.data[start:cur.pos].decode("ascii")
    value = float(text)
    if not math.isfinite(value):
        cur.pos = start
        raise ParseError(ErrorKind.MALFORMED_NUMBER, start, f"{text} overflows a 64-bit float", rule="decimal")
    return value


# ---- index:value ----

def parse_indexed_value(cur: Cursor) -> IndexedValue:
    start = cur.pos
    try:
        index = parse_uint(cur, UINT32_BITS)
        expect_literal(cur, b":", ErrorKind.MALFORMED_INDEXED_VALUE, "indexed_value")
        value = parse_decimal(cur)
    except ParseError as e:
        cur.pos = start
        raise ParseError(
            ErrorKind.MALFORMED_INDEXED_VALUE, start,
            f"expected <index>:<decimal> ({e})", rule="indexed_value",
        ) from e
    return IndexedValue(index=index, value=value)


# ---- combinators ----

def parse_separated_list(
    cur: Cursor,
    sep: bytes,
    item: Callable[[Cursor], T],
    starts_item: Callable[[Optional[int]], bool],
) -> List[T]:
    """
    Zero or more items separated by sep.

    The list commits to an item once the byte after the separator can start
    one (starts_item); otherwise the separator is left unconsumed for the
    caller. Errors inside a committed item propagate.
    """
    out: List[T] = []
    if not starts_item(cur.peek()):
        return out
    out.append(item(cur))

    while cur.startswith(sep):
        mark = cur.pos
        cur.pos += len(sep)
        if not starts_item(cur.peek()):
            cur.pos = mark
            break
        out.append(item(cur))
    return out
