from datetime import time, timedelta

from schedulehub.services.scheduling.session import GenerationSession, SessionInterval

from conftest import get_test_monday


class TestGenerationSession:
    def test_empty_session_has_no_conflicts(self):
        session = GenerationSession()
        assert len(session) == 0
        assert session.has_conflict(1, get_test_monday(), time(9, 0), time(17, 0)) is False

    def test_overlap_same_date_conflicts(self):
        monday = get_test_monday()
        session = GenerationSession()
        session.add(1, monday, time(9, 0), time(12, 0))
        assert session.has_conflict(1, monday, time(11, 0), time(14, 0)) is True

    def test_adjacent_windows_do_not_conflict(self):
        monday = get_test_monday()
        session = GenerationSession()
        session.add(1, monday, time(9, 0), time(12, 0))
        assert session.has_conflict(1, monday, time(12, 0), time(15, 0)) is False

    def test_other_date_or_employee_does_not_conflict(self):
        monday = get_test_monday()
        session = GenerationSession()
        session.add(1, monday, time(9, 0), time(12, 0))
        assert session.has_conflict(1, monday + timedelta(days=1), time(9, 0), time(12, 0)) is False
        assert session.has_conflict(2, monday, time(9, 0), time(12, 0)) is False

    def test_intervals_for_and_clear(self):
        monday = get_test_monday()
        session = GenerationSession()
        session.add(1, monday, time(9, 0), time(12, 0))
        session.add(1, monday, time(13, 0), time(15, 0))
        assert session.intervals_for(1) == [
            SessionInterval(monday, time(9, 0), time(12, 0)),
            SessionInterval(monday, time(13, 0), time(15, 0)),
        ]
        assert len(session) == 2

        session.clear()
        assert len(session) == 0
        assert session.intervals_for(1) == []

    def test_sessions_are_independent(self):
        monday = get_test_monday()
        first = GenerationSession()
        second = GenerationSession()
        first.add(1, monday, time(9, 0), time(12, 0))
        assert second.has_conflict(1, monday, time(9, 0), time(12, 0)) is False
