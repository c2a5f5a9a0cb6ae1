import pytest
from datetime import time

from schedulehub.core.errors import ConflictError, NotFoundError
from schedulehub.db.models import ScheduleStatus, ShiftStatus
from schedulehub.services.scheduling.publication import (
    get_overlap_type,
    validate_schedule_for_publication,
    publish_schedule,
)
from schedulehub.services.scheduling.store import get_schedule
from schedulehub.services.scheduling.types import OverlapType

from conftest import (
    ORG_ID,
    OTHER_ORG_ID,
    get_test_monday,
    make_worker,
    make_schedule,
    add_shift,
)


class TestGetOverlapType:
    def test_complete_overlap(self):
        assert get_overlap_type(time(8, 0), time(18, 0), time(9, 0), time(17, 0)) == OverlapType.COMPLETE_OVERLAP

    def test_identical_windows_count_as_complete(self):
        assert get_overlap_type(time(9, 0), time(17, 0), time(9, 0), time(17, 0)) == OverlapType.COMPLETE_OVERLAP

    def test_contained_by(self):
        assert get_overlap_type(time(10, 0), time(12, 0), time(9, 0), time(17, 0)) == OverlapType.CONTAINED_BY

    def test_partial_end(self):
        assert get_overlap_type(time(8, 0), time(12, 0), time(10, 0), time(14, 0)) == OverlapType.PARTIAL_END

    def test_partial_start(self):
        assert get_overlap_type(time(11, 0), time(15, 0), time(9, 0), time(13, 0)) == OverlapType.PARTIAL_START

    def test_adjacent(self):
        assert get_overlap_type(time(8, 0), time(12, 0), time(12, 0), time(16, 0)) == OverlapType.ADJACENT


@pytest.fixture
def conflicting_setup(unguarded_db, cashier):
    """A published schedule and a draft that double-books Ann on Monday."""
    db = unguarded_db
    monday = get_test_monday()
    ann = make_worker(db, "Ann", "Overlap", [cashier])
    ben = make_worker(db, "Ben", "Clear", [cashier])

    live = make_schedule(db, "Live", status=ScheduleStatus.PUBLISHED)
    add_shift(db, live, ann, cashier, monday, time(9, 0), time(13, 0))

    draft = make_schedule(db, "Draft")
    clash = add_shift(db, draft, ann, cashier, monday, time(11, 0), time(15, 0))
    add_shift(db, draft, ben, cashier, monday, time(11, 0), time(15, 0))
    db.commit()
    return {"db": db, "draft": draft, "live": live, "clash": clash, "ann": ann}


class TestValidateForPublication:

    def test_reports_each_affected_shift(self, conflicting_setup):
        db = conflicting_setup["db"]
        draft = conflicting_setup["draft"]

        validation = validate_schedule_for_publication(db, draft.id, ORG_ID)
        assert validation.is_valid is False
        assert validation.total_shifts == 2
        assert validation.conflicting_shifts == 1
        assert len(validation.conflicts) == 1
        assert validation.message.startswith("Found 1 shift conflicts")

        conflict = validation.conflicts[0]
        assert conflict.shift_id == conflicting_setup["clash"].id
        assert conflict.employee_name == "Ann Overlap"
        assert [c.schedule_name for c in conflict.conflicting_shifts] == ["Live"]
        assert conflict.conflicting_shifts[0].overlap_type == OverlapType.PARTIAL_START

    def test_other_drafts_and_cancelled_shifts_ignored(self, unguarded_db, cashier):
        db = unguarded_db
        monday = get_test_monday()
        ann = make_worker(db, "Ann", "Overlap", [cashier])
        other_draft = make_schedule(db, "Other draft")
        add_shift(db, other_draft, ann, cashier, monday, time(9, 0), time(13, 0))
        live = make_schedule(db, "Live", status=ScheduleStatus.PUBLISHED)
        add_shift(db, live, ann, cashier, monday, time(9, 0), time(13, 0), status=ShiftStatus.CANCELLED)
        draft = make_schedule(db, "Draft")
        add_shift(db, draft, ann, cashier, monday, time(10, 0), time(12, 0))

        validation = validate_schedule_for_publication(db, draft.id, ORG_ID)
        assert validation.is_valid is True
        assert validation.message == "No conflicts detected. Schedule can be published safely."

    def test_unknown_schedule(self, db):
        with pytest.raises(NotFoundError):
            validate_schedule_for_publication(db, 4242, ORG_ID)


class TestPublishSchedule:

    def test_conflicts_block_and_leave_draft(self, conflicting_setup):
        db = conflicting_setup["db"]
        draft = conflicting_setup["draft"]

        with pytest.raises(ConflictError) as exc_info:
            publish_schedule(db, draft.id, ORG_ID, actor_id=5)

        details = exc_info.value.details
        assert details["conflict_count"] == 1
        assert details["total_shifts"] == 2
        assert details["conflicts"][0]["employee"]["name"] == "Ann Overlap"
        assert details["conflicts"][0]["conflicts"][0]["overlap_type"] == "partial_start"
        assert details["conflicts"][0]["conflicts"][0]["conflicting_time"] == "09:00-13:00"
        assert [o["action"] for o in details["resolution_options"]] == [
            "modify_shifts", "reassign_workers", "unpublish_conflicts",
        ]

        schedule = get_schedule(db, draft.id, ORG_ID)
        assert schedule.status == ScheduleStatus.DRAFT
        assert schedule.published_at is None

    def test_clean_draft_is_published(self, db, cashier):
        ann = make_worker(db, "Ann", "Clear", [cashier])
        draft = make_schedule(db, "Draft")
        add_shift(db, draft, ann, cashier, get_test_monday(), time(9, 0), time(13, 0))
        db.commit()

        published = publish_schedule(db, draft.id, ORG_ID, actor_id=5)
        assert published.status == ScheduleStatus.PUBLISHED
        assert published.published_by == 5
        assert published.published_at is not None

        # re-checking and re-publishing are harmless
        assert validate_schedule_for_publication(db, draft.id, ORG_ID).is_valid is True
        again = publish_schedule(db, draft.id, ORG_ID, actor_id=6)
        assert again.status == ScheduleStatus.PUBLISHED
        assert again.published_by == 5

    def test_empty_draft_can_be_published(self, db):
        draft = make_schedule(db, "Empty")
        db.commit()

        assert publish_schedule(db, draft.id, ORG_ID).status == ScheduleStatus.PUBLISHED

    def test_other_tenant_cannot_publish(self, db):
        draft = make_schedule(db, "Draft")
        db.commit()

        with pytest.raises(NotFoundError):
            publish_schedule(db, draft.id, OTHER_ORG_ID)
