"""Tests for session markers and the session filter."""

import copy
import pickle
from datetime import datetime, timedelta, timezone

from sport_grades.grading.records import EvaluationRecord
from sport_grades.grading.reconcile import reconcile
from sport_grades.grading.session import SessionMarkers, filter_by_session

CUTOFF = datetime(2026, 3, 1, 10, 0)


def record(id, exercise="e1", created_at=CUTOFF):
    return EvaluationRecord(id=id, student_id="s1", exercise_id=exercise, created_at=created_at)


def test_records_before_cutoff_are_dropped():
    records = [
        record("old", created_at=CUTOFF - timedelta(seconds=1)),
        record("edge", created_at=CUTOFF),
        record("new", created_at=CUTOFF + timedelta(minutes=1)),
    ]
    kept = filter_by_session(records, {"e1": CUTOFF})
    assert [r.id for r in kept] == ["edge", "new"]


def test_other_exercises_are_untouched():
    records = [
        record("old-e1", created_at=CUTOFF - timedelta(days=1)),
        record("old-e2", exercise="e2", created_at=CUTOFF - timedelta(days=1)),
    ]
    kept = filter_by_session(records, {"e1": CUTOFF})
    assert [r.id for r in kept] == ["old-e2"]


def test_no_markers_keeps_everything():
    records = [record("a"), record("b", exercise="e2")]
    assert filter_by_session(records, {}) == records


def test_aware_cutoff():
    cutoff = datetime(2026, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    records = [record("before", created_at=datetime(2026, 3, 1, 9, 59))]
    assert filter_by_session(records, {"e1": cutoff}) == []


def test_filter_applies_before_reconciliation():
    """An older pair record must not resurface once the newest is cut off."""
    records = [
        record("first", created_at=CUTOFF - timedelta(hours=2)),
        record("second", created_at=CUTOFF - timedelta(hours=1)),
    ]
    assert reconcile(filter_by_session(records, {"e1": CUTOFF})) == {}


def test_reset_and_clear():
    markers = SessionMarkers()
    start = markers.reset("e1", now=CUTOFF)
    assert start == CUTOFF
    assert markers.cutoff_for("e1") == CUTOFF
    assert markers.as_mapping() == {"e1": CUTOFF}
    assert len(markers) == 1

    markers.clear("e1")
    assert markers.cutoff_for("e1") is None
    assert len(markers) == 0
    # Clearing twice is harmless
    markers.clear("e1")


def test_reset_defaults_to_now():
    markers = SessionMarkers()
    before = datetime.now(timezone.utc).replace(tzinfo=None)
    start = markers.reset("e1")
    assert start >= before
    assert start.tzinfo is None


def test_markers_are_never_serialized():
    markers = SessionMarkers()
    markers.reset("e1", now=CUTOFF)

    restored = pickle.loads(pickle.dumps(markers))
    assert len(restored) == 0
    assert len(copy.deepcopy(markers)) == 0
    # The source markers keep their cutoff
    assert markers.cutoff_for("e1") == CUTOFF
