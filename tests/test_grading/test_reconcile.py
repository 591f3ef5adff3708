"""Tests for the record reconciler."""

import itertools
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sport_grades.grading.records import EvaluationRecord
from sport_grades.grading.reconcile import history_for, latest_for, reconcile

T0 = datetime(2026, 3, 1, 9, 0)


def record(id, student="s1", exercise="e1", minutes=0, score=None, sequence=None, created_at=None):
    return EvaluationRecord(
        id=id,
        student_id=student,
        exercise_id=exercise,
        created_at=created_at or T0 + timedelta(minutes=minutes),
        score=score,
        sequence=sequence,
    )


def test_latest_created_at_wins():
    records = [
        record("a", minutes=0, score=Decimal("5")),
        record("b", minutes=10, score=Decimal("7")),
        record("c", minutes=5, score=Decimal("6")),
    ]
    current = reconcile(records)
    assert current[("s1", "e1")].id == "b"


def test_one_record_per_pair():
    records = [
        record("a", student="s1"),
        record("b", student="s2"),
        record("c", student="s1", exercise="e2"),
        record("d", student="s1", minutes=3),
    ]
    current = reconcile(records)
    assert set(current) == {("s1", "e1"), ("s2", "e1"), ("s1", "e2")}
    assert current[("s1", "e1")].id == "d"


def test_result_independent_of_input_order():
    records = [
        record("a", minutes=0),
        record("b", minutes=1),
        record("c", minutes=1, sequence=3),
        record("d", student="s2", minutes=2),
        record("e", student="s2", minutes=2, sequence=1),
    ]
    expected = {k: r.id for k, r in reconcile(records).items()}
    for permutation in itertools.permutations(records):
        assert {k: r.id for k, r in reconcile(permutation).items()} == expected
    assert expected == {("s1", "e1"): "c", ("s2", "e1"): "e"}


def test_equal_timestamps_fall_back_to_sequence():
    records = [record("z", sequence=1), record("a", sequence=2)]
    assert reconcile(records)[("s1", "e1")].id == "a"


def test_equal_timestamps_without_sequence_fall_back_to_id():
    records = [record("b"), record("a")]
    assert reconcile(records)[("s1", "e1")].id == "b"


def test_aware_and_naive_timestamps_compare_in_utc():
    aware = record("aware", created_at=datetime(2026, 3, 1, 11, 0, tzinfo=timezone(timedelta(hours=2))))
    naive = record("naive", created_at=datetime(2026, 3, 1, 9, 30))
    # 11:00+02:00 is 09:00 UTC
    assert reconcile([aware, naive])[("s1", "e1")].id == "naive"


def test_reconcile_is_idempotent():
    records = [record("a"), record("b", minutes=1), record("c", student="s2")]
    once = reconcile(records)
    assert reconcile(once.values()) == once


def test_empty_log():
    assert reconcile([]) == {}


def test_history_oldest_first():
    records = [
        record("b", minutes=5),
        record("x", student="s2"),
        record("a", minutes=0),
        record("c", minutes=9),
    ]
    assert [r.id for r in history_for(records, "s1", "e1")] == ["a", "b", "c"]
    assert latest_for(records, "s1", "e1").id == "c"
    assert latest_for(records, "s3", "e1") is None
