"""Tests for TaskRepository CRUD, hierarchy and persistence behavior."""

import pytest
from datetime import datetime, timezone

from mlotasks.errors import InvalidFormatError, NotFoundError, StorageError
from mlotasks.repositories import TaskRepository


class TestTaskCreation:
    """Test TaskRepository.create()."""

    def test_create_root_task(self, task_repository):
        """Test a task without parent is a root task with defaults."""
        task = task_repository.create({"title": "Write report"})

        assert task.title == "Write report"
        assert task.parent_id is None
        assert task.order == 0
        assert task.importance == 100
        assert task.urgency == 100
        assert task.computed_score == 0
        assert task.is_completed is False
        assert task.completed_date is None
        assert task.id.startswith("task_")
        assert task in task_repository.root_tasks()

    def test_create_applies_default_title(self, task_repository):
        task = task_repository.create({"title": ""})
        assert task.title == "New Task"

    def test_create_keeps_zero_importance(self, task_repository):
        """Test importance/urgency of 0 are kept (only missing values default)."""
        task = task_repository.create(importance=0, urgency=0)
        assert task.importance == 0
        assert task.urgency == 0

    def test_create_child_registers_with_parent(self, task_repository):
        """Test scenario: A, then B under A."""
        a = task_repository.create({"title": "A"})
        b = task_repository.create({"title": "B", "parentId": a.id})

        parent = task_repository.get(a.id)
        assert parent.child_ids == [b.id]
        assert b.parent_id == a.id
        assert b.order == 0
        assert [t.id for t in task_repository.children_of(a.id)] == [b.id]
        assert b not in task_repository.root_tasks()

    def test_sibling_order_increments(self, task_repository):
        first = task_repository.create({"title": "one"})
        second = task_repository.create({"title": "two"})
        assert (first.order, second.order) == (0, 1)

    def test_create_under_missing_parent_raises(self, task_repository):
        with pytest.raises(NotFoundError):
            task_repository.create({"title": "orphan", "parent_id": "task_missing"})
        assert task_repository.tasks == []

    def test_create_persists(self, task_repository, storage):
        task = task_repository.create({"title": "Persisted"})

        reloaded = TaskRepository(storage)
        reloaded.load()
        assert [t.id for t in reloaded.tasks] == [task.id]
        assert reloaded.tasks[0].title == "Persisted"


class TestTaskUpdate:
    """Test TaskRepository.update()."""

    def test_update_merges_fields(self, task_repository):
        task = task_repository.create({"title": "Old", "notes": "keep me"})
        updated = task_repository.update(task.id, {"title": "New"})

        assert updated.title == "New"
        assert updated.notes == "keep me"
        assert updated.modified_at >= task.modified_at
        assert task_repository.get(task.id).title == "New"

    def test_update_never_changes_id(self, task_repository):
        task = task_repository.create({"title": "Stable"})
        updated = task_repository.update(task.id, {"id": "task_other", "title": "Renamed"})

        assert updated.id == task.id
        assert task_repository.get("task_other") is None

    def test_update_missing_task_raises(self, task_repository, storage):
        writes_before = storage.writes
        with pytest.raises(NotFoundError):
            task_repository.update("task_missing", {"title": "x"})
        assert storage.writes == writes_before
        assert task_repository.error is not None

    def test_update_accepts_snake_and_camel_keys(self, task_repository):
        task = task_repository.create({"title": "Keys"})
        task_repository.update(task.id, {"isStarred": True})
        updated = task_repository.update(task.id, is_in_inbox=True)

        assert updated.is_starred is True
        assert updated.is_in_inbox is True


class TestTaskDeletion:
    """Test TaskRepository.delete()."""

    def test_delete_without_cascade_leaves_dangling_children(self, task_repository):
        """Test scenario: deleting A without cascade keeps B with parentId A."""
        a = task_repository.create({"title": "A"})
        b = task_repository.create({"title": "B", "parentId": a.id})

        removed = task_repository.delete(a.id)

        assert removed == [a.id]
        assert task_repository.get(a.id) is None
        kept = task_repository.get(b.id)
        assert kept is not None
        assert kept.parent_id == a.id

    def test_cascade_removes_all_descendants(self, task_repository):
        root = task_repository.create({"title": "root"})
        child = task_repository.create({"title": "child", "parentId": root.id})
        grandchild = task_repository.create({"title": "grandchild", "parentId": child.id})
        other = task_repository.create({"title": "other"})

        removed = task_repository.delete(root.id, cascade=True)

        assert set(removed) == {root.id, child.id, grandchild.id}
        assert [t.id for t in task_repository.tasks] == [other.id]

    def test_cascade_handles_deep_hierarchy(self, task_repository):
        parent = task_repository.create({"title": "level 0"})
        top = parent
        for level in range(1, 200):
            parent = task_repository.create({"title": f"level {level}", "parentId": parent.id})

        removed = task_repository.delete(top.id, cascade=True)
        assert len(removed) == 200
        assert task_repository.tasks == []

    def test_delete_detaches_from_parent(self, task_repository):
        a = task_repository.create({"title": "A"})
        b = task_repository.create({"title": "B", "parentId": a.id})
        c = task_repository.create({"title": "C", "parentId": a.id})

        task_repository.delete(b.id)

        assert task_repository.get(a.id).child_ids == [c.id]

    def test_delete_missing_task_is_noop(self, task_repository, storage):
        task_repository.create({"title": "survivor"})
        writes_before = storage.writes

        assert task_repository.delete("task_missing") == []
        assert storage.writes == writes_before
        assert len(task_repository.tasks) == 1

    def test_delete_clears_selection_of_removed_task(self, task_repository):
        a = task_repository.create({"title": "A"})
        b = task_repository.create({"title": "B", "parentId": a.id})
        task_repository.select(b.id)

        task_repository.delete(a.id, cascade=True)

        assert task_repository.selected_task_id is None
        assert task_repository.selected_task is None

    def test_delete_keeps_unrelated_selection(self, task_repository):
        a = task_repository.create({"title": "A"})
        b = task_repository.create({"title": "B"})
        task_repository.select(b.id)

        task_repository.delete(a.id)

        assert task_repository.selected_task.id == b.id


class TestToggleComplete:
    """Test TaskRepository.toggle_complete()."""

    def test_toggle_sets_and_clears_completed_date(self, task_repository):
        task = task_repository.create({"title": "Finish"})

        done = task_repository.toggle_complete(task.id)
        assert done.is_completed is True
        assert done.completed_date is not None

        undone = task_repository.toggle_complete(task.id)
        assert undone.is_completed is False
        assert undone.completed_date is None

    def test_toggle_missing_task_returns_none(self, task_repository):
        assert task_repository.toggle_complete("task_missing") is None

    def test_due_yesterday_overdue_until_completed(self, task_repository, yesterday):
        """Test scenario: overdue task drops out of overdue after completion."""
        task = task_repository.create({"title": "Late", "dueDate": yesterday.isoformat()})
        assert [t.id for t in task_repository.overdue_tasks()] == [task.id]

        task_repository.toggle_complete(task.id)
        assert task_repository.overdue_tasks() == []


class TestMoveAndReview:
    """Test move() and mark_reviewed()."""

    def test_move_updates_both_parents(self, task_repository):
        a = task_repository.create({"title": "A"})
        b = task_repository.create({"title": "B"})
        c = task_repository.create({"title": "C", "parentId": a.id})

        moved = task_repository.move(c.id, b.id)

        assert moved.parent_id == b.id
        assert task_repository.get(a.id).child_ids == []
        assert task_repository.get(b.id).child_ids == [c.id]

    def test_move_to_root(self, task_repository):
        a = task_repository.create({"title": "A"})
        c = task_repository.create({"title": "C", "parentId": a.id})

        moved = task_repository.move(c.id, None)

        assert moved.parent_id is None
        assert moved.order == 1
        assert task_repository.get(a.id).child_ids == []

    def test_move_under_descendant_rejected(self, task_repository):
        a = task_repository.create({"title": "A"})
        b = task_repository.create({"title": "B", "parentId": a.id})

        with pytest.raises(ValueError):
            task_repository.move(a.id, b.id)
        assert task_repository.get(a.id).parent_id is None

    def test_mark_reviewed_clears_review_due(self, task_repository):
        reviewed_at = datetime(2024, 6, 1, tzinfo=timezone.utc)
        task = task_repository.create({"title": "Goal", "reviewPeriod": 7})
        assert [t.id for t in task_repository.review_tasks(now=reviewed_at)] == [task.id]

        task_repository.mark_reviewed(task.id, when=reviewed_at)

        assert task_repository.review_tasks(now=reviewed_at) == []
        assert task_repository.get(task.id).last_reviewed == reviewed_at


class TestPersistBeforeApply:
    """Test that failed writes leave in-memory state untouched."""

    def test_failed_create_keeps_collection(self, task_repository, storage):
        task_repository.create({"title": "existing"})
        storage.fail_writes = True

        with pytest.raises(StorageError):
            task_repository.create({"title": "lost"})

        assert [t.title for t in task_repository.tasks] == ["existing"]
        assert "Simulated write failure" in task_repository.error

    def test_failed_update_keeps_previous_value(self, task_repository, storage):
        task = task_repository.create({"title": "before"})
        storage.fail_writes = True

        with pytest.raises(StorageError):
            task_repository.update(task.id, {"title": "after"})

        assert task_repository.get(task.id).title == "before"

    def test_failed_delete_keeps_task(self, task_repository, storage):
        task = task_repository.create({"title": "keep"})
        storage.fail_writes = True

        with pytest.raises(StorageError):
            task_repository.delete(task.id)

        assert task_repository.get(task.id) is not None

    def test_failed_load_empties_collection(self, storage):
        storage.fail_reads = True
        repo = TaskRepository(storage)

        repo.load()

        assert repo.tasks == []
        assert repo.error is not None
        assert repo.loading is False


class TestScores:
    def test_default_scorer_writes_nothing(self, task_repository, storage):
        task_repository.create({"title": "t"})
        writes_before = storage.writes

        task_repository.recompute_scores()

        assert storage.writes == writes_before

    def test_custom_scorer_persists(self, task_repository, storage):
        task = task_repository.create({"title": "t", "importance": 40, "urgency": 60})

        task_repository.recompute_scores(lambda t: t.importance + t.urgency)

        assert task_repository.get(task.id).computed_score == 100
        assert storage.get_tasks()[0]["computedScore"] == 100


class TestExportImport:
    """Test export_all(), import_all() and clear_all()."""

    def test_round_trip_preserves_ids(self, task_repository):
        a = task_repository.create({"title": "A"})
        b = task_repository.create({"title": "B", "parentId": a.id})
        payload = task_repository.export_all()

        task_repository.clear_all()
        assert task_repository.tasks == []

        task_repository.import_all(payload)

        assert {t.id for t in task_repository.tasks} == {a.id, b.id}
        assert task_repository.get(a.id).child_ids == [b.id]

    def test_import_rejects_missing_tasks(self, task_repository):
        with pytest.raises(InvalidFormatError):
            task_repository.import_all({"version": "1.0"})

    def test_import_rejects_missing_version(self, task_repository):
        with pytest.raises(InvalidFormatError):
            task_repository.import_all({"tasks": []})

    def test_clear_all_resets_selection(self, task_repository):
        task = task_repository.create({"title": "A"})
        task_repository.select(task.id)

        task_repository.clear_all()

        assert task_repository.selected_task_id is None


class TestNonCanonicalRecords:
    """Test loading and importing records that are valid but not canonical."""

    def test_load_keeps_valid_tasks_when_one_is_invalid(self, storage):
        storage.save_tasks([
            {"id": "legacy_1", "title": "no timestamps"},
            {"id": "task_bad", "importance": "very"},
            {"id": "task_ok", "createdAt": "2024-06-01T00:00:00Z", "modifiedAt": "2024-06-01T00:00:00Z"},
        ])
        repo = TaskRepository(storage)

        repo.load()

        assert {t.id for t in repo.tasks} == {"legacy_1", "task_ok"}
        assert repo.invalid_records == [{"id": "task_bad", "importance": "very"}]
        assert "1 invalid task record" in repo.error
        assert repo.load_failed is False

    def test_invalid_records_survive_next_save(self, storage):
        storage.save_tasks([{"id": "task_bad", "importance": "very"}])
        repo = TaskRepository(storage)
        repo.load()

        repo.create({"title": "new"})

        stored_ids = [record["id"] for record in storage.get_tasks()]
        assert "task_bad" in stored_ids
        assert len(stored_ids) == 2

    def test_import_legacy_task_without_timestamps(self, task_repository):
        existing = task_repository.create({"title": "existing"})
        payload = task_repository.export_all()
        payload["tasks"].append({"id": "legacy_1", "title": "no timestamps"})

        task_repository.import_all(payload)

        assert {t.id for t in task_repository.tasks} == {existing.id, "legacy_1"}
        assert task_repository.error is None

    def test_import_keeps_progress_over_100(self, task_repository):
        task_repository.import_all({
            "version": "1.0",
            "tasks": [{"id": "task_1", "projectProgress": 150}],
        })

        assert task_repository.get("task_1").project_progress == 100
