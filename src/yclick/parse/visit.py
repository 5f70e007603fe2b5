from __future__ import annotations
from typing import List, NamedTuple, Optional, Union

from yclick.data.assembler import assemble_visit
from yclick.data.errors import ErrorKind, ParseError
from yclick.data.schema import ArticleContext, Visit
from yclick.features.dense import FEATURE_DIM, materialize_dense, to_feature_list
from yclick.parse.tokens import (
    UINT8_BITS,
    UINT32_BITS,
    Cursor,
    expect_literal,
    is_digit,
    parse_digits,
    parse_indexed_value,
    parse_separated_list,
    parse_uint,
)

SPACE = b" "
ARTICLE_MARK = b"|"
USER_MARKER = b" |user "

_PIPE = ARTICLE_MARK[0]
_TRAILING_WS = frozenset(b" \t\r\n")


class ParsedLine(NamedTuple):
    timestamp: int
    displayed_article: str
    user_clicked: int
    user: List[float]
    articles: List[ArticleContext]


def _starts_article(b: Optional[int]) -> bool:
    return b == _PIPE


def parse_article(cur: Cursor, dim: int = FEATURE_DIM) -> ArticleContext:
    """
    "|" <article_id> " " <index:value> (" " <index:value>)*
    """
    start = cur.pos
    try:
        expect_literal(cur, ARTICLE_MARK, ErrorKind.MALFORMED_ARTICLE_BLOCK, "article")
        article_id = parse_digits(cur)
        expect_literal(cur, SPACE, ErrorKind.MALFORMED_ARTICLE_BLOCK, "article")
    except ParseError as e:
        cur.pos = start
        raise ParseError(
            ErrorKind.MALFORMED_ARTICLE_BLOCK, start,
            f"expected |<article_id> ({e.message})", rule="article",
        ) from e

    pairs = parse_separated_list(cur, SPACE, parse_indexed_value, is_digit)
    return ArticleContext(article_id=article_id, features=to_feature_list(materialize_dense(pairs, dim)))


def _field(cur: Cursor, state: str, rule, *args):
    """Run a token rule for a top-level field; numeric failures become MALFORMED_LINE."""
    try:
        return rule(cur, *args)
    except ParseError as e:
        raise ParseError(ErrorKind.MALFORMED_LINE, e.pos, e.message, rule=state) from e


def _separator(cur: Cursor, literal: bytes, state: str) -> None:
    expect_literal(cur, literal, ErrorKind.MALFORMED_LINE, state)


def parse_visit_line(line: Union[bytes, str], dim: int = FEATURE_DIM) -> ParsedLine:
    """
    Recognize one complete log line:

      <timestamp> " " <displayed_article> " " <user_clicked>
        " |user " <user features> (" "? <article block>)* <trailing whitespace>

    States run strictly left to right; the first mismatch raises ParseError
    with the byte offset and the state that failed. Nothing is recovered.
    """
    cur = Cursor(line)

    timestamp = _field(cur, "timestamp", parse_uint, UINT32_BITS)
    _separator(cur, SPACE, "timestamp")
    displayed_article = _field(cur, "displayed_article", parse_digits)
    _separator(cur, SPACE, "displayed_article")
    user_clicked = _field(cur, "user_clicked", parse_uint, UINT8_BITS)
    _separator(cur, USER_MARKER, "user_marker")

    user_pairs = parse_separated_list(cur, SPACE, parse_indexed_value, is_digit)
    user = to_feature_list(materialize_dense(user_pairs, dim))

    # blocks are delimited by their leading "|"; a single space before one is optional
    articles: List[ArticleContext] = []
    while True:
        mark = cur.pos
        if cur.startswith(SPACE):
            cur.pos += 1
        if not _starts_article(cur.peek()):
            cur.pos = mark
            break
        articles.append(parse_article(cur, dim))

    tail = cur.rest()
    if any(b not in _TRAILING_WS for b in tail):
        raise ParseError(
            ErrorKind.MALFORMED_LINE, cur.pos,
            f"unparsed trailing bytes {tail[:24]!r}", rule="articles",
        )

    return ParsedLine(
        timestamp=timestamp,
        displayed_article=displayed_article,
        user_clicked=user_clicked,
        user=user,
        articles=articles,
    )


def parse_visit(day: str, line: Union[bytes, str], dim: int = FEATURE_DIM) -> Visit:
    """(day label, raw line) -> Visit. Raises ParseError on any grammar violation."""
    parsed = parse_visit_line(line, dim=dim)
    return assemble_visit(
        day=day,
        timestamp=parsed.timestamp,
        displayed_article=parsed.displayed_article,
        user_clicked=parsed.user_clicked,
        user=parsed.user,
        articles=parsed.articles,
    )
