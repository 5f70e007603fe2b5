"""JSON Lines encoding of Visit records and the line-by-line parsing loop."""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from yclick.data.errors import ParseError
from yclick.data.schema import Visit
from yclick.features.dense import FEATURE_DIM
from yclick.parse.visit import parse_visit

logger = logging.getLogger(__name__)

ON_ERROR_POLICIES = ("skip", "raise")


@dataclass
class ParseStats:
    n_lines: int = 0
    n_visits: int = 0
    n_skipped: int = 0
    n_blank: int = 0


def visit_to_json(visit: Visit) -> str:
    return json.dumps(visit.to_dict())


def visit_from_json(text: str, dim: Optional[int] = FEATURE_DIM) -> Visit:
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"json_parse_error:{e}") from e
    return Visit.from_dict(obj, dim=dim)


def day_from_filename(name: Union[str, Path]) -> str:
    """
    Day label by convention: the second dot-separated component of the file
    name, e.g. ydata-fp-td-clicks-v1_0.20090501.gz -> "20090501".
    """
    parts = Path(name).name.split(".")
    if len(parts) < 2 or not parts[1]:
        raise ValueError(f"cannot derive a day label from file name {str(name)!r}")
    return parts[1]


def iter_visits(
    day: str,
    lines: Iterable[Union[bytes, str]],
    on_error: str = "skip",
    dim: int = FEATURE_DIM,
    stats: Optional[ParseStats] = None,
) -> Iterator[Visit]:
    """
    Parse raw log lines into Visits.

    on_error="raise" aborts on the first malformed line (the ParseError carries
    the 1-based line number in .lineno); on_error="skip" logs it and moves on.
    Blank lines are ignored under both policies.
    """
    if on_error not in ON_ERROR_POLICIES:
        raise ValueError(f"on_error must be one of {ON_ERROR_POLICIES}, got {on_error!r}")
    if stats is None:
        stats = ParseStats()

    for lineno, raw in enumerate(lines, start=1):
        stats.n_lines += 1
        line = raw.rstrip(b"\r\n") if isinstance(raw, bytes) else raw.rstrip("\r\n")
        if not line.strip():
            stats.n_blank += 1
            continue

        try:
            visit = parse_visit(day, line, dim=dim)
        except ParseError as e:
            if on_error == "raise":
                e.lineno = lineno
                raise
            stats.n_skipped += 1
            logger.warning("day=%s line %d skipped: %s", day, lineno, e)
            continue

        stats.n_visits += 1
        yield visit


def write_jsonl(visits: Iterable[Visit], out_path: Path) -> int:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    n = 0
    with open(out_path, "w", encoding="utf-8") as f:
        for v in visits:
            f.write(visit_to_json(v))
            f.write("\n")
            n += 1
    return n


def read_jsonl(path: Path, dim: Optional[int] = FEATURE_DIM) -> Iterator[Visit]:
    with open(path, "r", encoding="utf-8") as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line:
                continue
            try:
                yield visit_from_json(line, dim=dim)
            except ValueError as e:
                raise ValueError(f"{path}:{lineno}: {e}") from e
