"""Unit tests for DiffEngine using fakeredis."""

from __future__ import annotations

import pytest

from workledger.core.exceptions import RetryableConflictError
from workledger.core.protocols import IDiffEngine
from workledger.models.records import ObjectRecord
from workledger.tracking import create_tracker


@pytest.fixture
def tracker(session, clock):
    return create_tracker(session, clock=clock)


@pytest.fixture
def objects(tracker):
    return tracker[1]


@pytest.fixture
def engine(tracker):
    return tracker[2]


@pytest.fixture
def processed_x(objects):
    """Class X with processed set {o1, o2, o3}."""
    for object_id in ("o1", "o2", "o3"):
        record = ObjectRecord(object_id=object_id, class_id="X")
        objects.insert_in_process(record)
        objects.insert_processed(record)
    return objects


def test_satisfies_protocol(engine):
    assert isinstance(engine, IDiffEngine)


class TestClassification:
    def test_new_and_outdated(self, processed_x, engine):
        observed = {"o2", "o3", "o4"}
        assert engine.new_objects("X", observed) == {"o4"}
        assert engine.outdated_objects("X", observed) == {"o1"}

    def test_in_process_objects_are_not_new(self, processed_x, engine):
        processed_x.insert_in_process(ObjectRecord(object_id="o4", class_id="X"))
        assert engine.new_objects("X", {"o2", "o3", "o4"}) == set()

    def test_in_process_objects_are_never_outdated(self, processed_x, engine):
        processed_x.insert_in_process(ObjectRecord(object_id="o9", class_id="X"))
        assert engine.outdated_objects("X", set()) == {"o1", "o2", "o3"}

    def test_observing_tracked_state_yields_empty_diff(self, processed_x, engine):
        processed_x.insert_in_process(ObjectRecord(object_id="o4", class_id="X"))
        diff = engine.diff("X", processed_x.get_all_objects("X"))
        assert diff.is_empty

    def test_diff_combines_both(self, processed_x, engine):
        diff = engine.diff("X", ["o2", "o3", "o4"])
        assert diff.class_id == "X"
        assert diff.new == {"o4"}
        assert diff.outdated == {"o1"}

    def test_untracked_class_everything_is_new(self, engine):
        assert engine.new_objects("Y", {"a", "b"}) == {"a", "b"}
        assert engine.outdated_objects("Y", {"a"}) == set()

    def test_single_string_is_one_object(self, engine):
        assert engine.new_objects("Y", "abc") == {"abc"}


class TestRemoveOutdatedObjects:
    def test_removes_only_outdated(self, processed_x, engine):
        removed = engine.remove_outdated_objects("X", {"o2", "o3", "o4"})
        assert removed == {"o1"}
        assert processed_x.get_processed("X") == {"o2", "o3"}

    def test_idempotent(self, processed_x, engine):
        engine.remove_outdated_objects("X", {"o2", "o3", "o4"})
        assert engine.remove_outdated_objects("X", {"o2", "o3", "o4"}) == set()
        assert processed_x.get_processed("X") == {"o2", "o3"}

    def test_leaves_indexes_and_in_process(self, processed_x, engine, session):
        processed_x.insert_in_process(ObjectRecord(object_id="o9", class_id="X"))
        engine.remove_outdated_objects("X", set())
        assert processed_x.get_processed("X") == set()
        assert processed_x.get_in_process("X") == {"o9"}
        assert session.smembers("class:X:objects") == {"o1", "o2", "o3", "o9"}

    def test_conflict_surfaces_to_caller(self, processed_x, engine, other_session):
        original = engine._tx.execute

        def racing_execute(watch, build):
            def racing_build(pipe):
                other_session.zadd("processed-objects:class:X", {"o5": 1})
                build(pipe)

            return original(watch, racing_build)

        engine._tx.execute = racing_execute
        with pytest.raises(RetryableConflictError):
            engine.remove_outdated_objects("X", {"o3"})
        assert "o1" in processed_x.get_processed("X")
