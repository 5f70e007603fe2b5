import json
import logging

import pytest

from yclick.data.errors import ErrorKind, ParseError
from yclick.data.jsonl import (
    ParseStats,
    day_from_filename,
    iter_visits,
    read_jsonl,
    visit_from_json,
    visit_to_json,
    write_jsonl,
)
from yclick.data.schema import Visit
from yclick.parse.visit import parse_visit

GOOD = b"1000 12345 1 |user 1:0.5 3:1.2 |54321 2:0.9\n"
BAD = b"1000 12345 1 1:0.5 |54321 2:0.9\n"


def test_json_field_names_and_shapes():
    obj = json.loads(visit_to_json(parse_visit("13", GOOD)))
    assert list(obj) == ["day", "timestamp", "displayed_article", "user_clicked", "user", "articles"]
    assert obj["user"] == [0.5, 0.0, 1.2, 0.0, 0.0, 0.0]
    assert obj["articles"] == {"54321": [0.0, 0.9, 0.0, 0.0, 0.0, 0.0]}
    assert obj["timestamp"] == 1000
    assert obj["displayed_article"] == "12345"


def test_json_round_trip_is_identical(r6_line):
    visit = parse_visit("20090501", r6_line)
    again = visit_from_json(visit_to_json(visit))
    assert again == visit


def test_visit_from_json_missing_field():
    with pytest.raises(ValueError, match="missing_fields:articles"):
        visit_from_json('{"day": "1", "timestamp": 1, "displayed_article": "1", "user_clicked": 0, "user": [0,0,0,0,0,0]}')


def test_visit_from_json_wrong_vector_length():
    rec = Visit("1", 1, "1", 0, [0.0] * 5, {}).to_dict()
    with pytest.raises(ValueError, match="length 5"):
        visit_from_json(json.dumps(rec))


def test_visit_from_json_bad_json():
    with pytest.raises(ValueError, match="json_parse_error"):
        visit_from_json("{not json")


@pytest.mark.parametrize("name,day", [
    ("ydata-fp-td-clicks-v1_0.20090501.gz", "20090501"),
    ("/data/R6/ydata-fp-td-clicks-v1_0.20090510", "20090510"),
])
def test_day_from_filename(name, day):
    assert day_from_filename(name) == day


def test_day_from_filename_without_dot():
    with pytest.raises(ValueError):
        day_from_filename("clicks")


def test_iter_visits_skip_policy_logs_and_counts(caplog):
    stats = ParseStats()
    with caplog.at_level(logging.WARNING, logger="yclick.data.jsonl"):
        visits = list(iter_visits("13", [GOOD, BAD, b"\n", GOOD], on_error="skip", stats=stats))

    assert len(visits) == 2
    assert stats == ParseStats(n_lines=4, n_visits=2, n_skipped=1, n_blank=1)
    assert "line 2 skipped" in caplog.text


def test_iter_visits_raise_policy_sets_lineno():
    with pytest.raises(ParseError) as ei:
        list(iter_visits("13", [GOOD, BAD], on_error="raise"))
    assert ei.value.kind == ErrorKind.MALFORMED_LINE
    assert ei.value.lineno == 2


def test_iter_visits_accepts_text_lines():
    visits = list(iter_visits("13", [GOOD.decode("ascii")]))
    assert visits[0].user_clicked == 1


def test_iter_visits_unknown_policy():
    with pytest.raises(ValueError):
        list(iter_visits("13", [GOOD], on_error="ignore"))


def test_write_and_read_jsonl(tmp_path, r6_line):
    visits = list(iter_visits("20090501", [r6_line, GOOD]))
    out = tmp_path / "out" / "visits.jsonl"

    assert write_jsonl(visits, out) == 2
    lines = out.read_text().splitlines()
    assert len(lines) == 2
    assert list(read_jsonl(out)) == visits


def test_read_jsonl_reports_line(tmp_path):
    p = tmp_path / "bad.jsonl"
    p.write_text(visit_to_json(parse_visit("1", GOOD)) + "\n{}\n")
    with pytest.raises(ValueError, match=":2:"):
        list(read_jsonl(p))


def test_iter_visits_skips_oversized_numbers():
    lines = [
        b"9" * 5000 + b" 1 0 |user 1:0.1",
        b"1 1 0 |user " + b"1" * 5000 + b":0.5",
        GOOD,
    ]
    stats = ParseStats()
    visits = list(iter_visits("d", lines, on_error="skip", stats=stats))
    assert len(visits) == 1
    assert stats.n_skipped == 2


@pytest.mark.parametrize("field,value", [
    ("timestamp", None),
    ("user_clicked", "x"),
    ("user", [None, 0, 0, 0, 0, 0]),
])
def test_visit_from_json_bad_values_are_value_errors(field, value):
    rec = parse_visit("1", GOOD).to_dict()
    rec[field] = value
    with pytest.raises(ValueError):
        visit_from_json(json.dumps(rec))


def test_read_jsonl_null_field_keeps_line_context(tmp_path):
    rec = parse_visit("1", GOOD).to_dict()
    rec["articles"]["54321"][0] = None
    p = tmp_path / "null.jsonl"
    p.write_text(json.dumps(rec) + "\n")
    with pytest.raises(ValueError, match=":1:"):
        list(read_jsonl(p))
