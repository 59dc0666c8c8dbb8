"""Tests for the recording state machine."""

import pytest

from file_open_recorder.models import INACTIVE_FILE, RecordingState
from file_open_recorder.tracker import ALREADY_STARTED, NOT_STARTED

A = "/work/project/src/a.ts"
B = "/work/project/lib/b.ts"


class TestLifecycle:
    def test_starts_stopped(self, session):
        assert session.state is RecordingState.STOPPED

    def test_start_opens_interval_for_focused_file(self, session, source):
        source.focus(A)
        result = session.start()

        assert result.accepted
        assert session.state is RecordingState.RECORDING
        assert session.status().current_file == "src/a.ts"
        assert dict(session.ledger.snapshot()) == {"src/a.ts": 0}
        assert source.subscriber_count == 1

    def test_start_without_focused_file_records_other_files(self, session):
        session.start()
        assert session.status().current_file == INACTIVE_FILE

    def test_second_start_is_rejected(self, session, source):
        session.start()
        result = session.start()

        assert not result.accepted
        assert result.message == ALREADY_STARTED
        assert source.subscriber_count == 1

    @pytest.mark.parametrize("command", ["pause", "stop"])
    def test_commands_while_stopped_are_rejected(self, session, writer, command):
        result = getattr(session, command)()

        assert not result.accepted
        assert result.message == NOT_STARTED
        assert session.state is RecordingState.STOPPED
        assert writer.writes == []
        assert dict(session.ledger.snapshot()) == {}

    def test_pause_while_paused_is_rejected(self, session):
        session.start()
        session.pause()
        result = session.pause()

        assert result.message == NOT_STARTED
        assert session.state is RecordingState.PAUSED


class TestTimeAccounting:
    def test_focus_changes_attribute_time_per_file(self, session, source, clock):
        session.start()
        source.focus(A)
        clock.advance(30)
        source.focus(B)
        clock.advance(12)
        session.pause()

        assert dict(session.ledger.snapshot()) == {
            INACTIVE_FILE: 0,
            "src/a.ts": 30,
            "lib/b.ts": 12,
        }

    def test_returning_to_a_file_adds_to_its_entry(self, session, source, clock):
        source.focus(A)
        session.start()
        clock.advance(10)
        source.focus(B)
        clock.advance(5)
        source.focus(A)
        clock.advance(7)
        session.pause()

        assert session.ledger["src/a.ts"] == 17
        assert session.ledger["lib/b.ts"] == 5

    def test_resume_does_not_count_paused_time(self, session, source, clock, writer):
        source.focus(A)
        session.start()
        clock.advance(20)
        session.pause()
        clock.advance(600)
        session.start()
        clock.advance(5)
        session.stop()

        files, totals = writer.writes[0]
        assert files == {"src/a.ts": "0h 00m 25s"}
        assert totals == {"total": "0h 00m 25s", "src/": "0h 00m 25s"}

    def test_resume_opens_interval_for_the_file_focused_now(self, session, source, clock):
        source.focus(A)
        session.start()
        clock.advance(3)
        session.pause()
        source.focus(B)
        clock.advance(100)
        session.start()
        clock.advance(4)
        session.pause()

        assert dict(session.ledger.snapshot()) == {"src/a.ts": 3, "lib/b.ts": 4}

    def test_focus_changes_while_paused_are_ignored(self, session, source, clock):
        source.focus(A)
        session.start()
        clock.advance(3)
        session.pause()

        session.handle_focus_change(B)
        clock.advance(50)

        assert source.subscriber_count == 0
        assert dict(session.ledger.snapshot()) == {"src/a.ts": 3}

    def test_focus_changes_while_stopped_are_ignored(self, session, clock):
        session.handle_focus_change(A)
        clock.advance(50)
        assert dict(session.ledger.snapshot()) == {}

    def test_backward_clock_accrues_nothing(self, session, source, clock):
        source.focus(A)
        session.start()
        clock.advance(-30)
        source.focus(B)
        clock.advance(8)
        session.pause()

        assert session.ledger["src/a.ts"] == 0
        assert session.ledger["lib/b.ts"] == 8

    def test_status_reports_the_open_interval(self, session, source, clock):
        source.focus(A)
        session.start()
        clock.advance(9)

        status = session.status()

        assert status.state is RecordingState.RECORDING
        assert status.open_seconds == 9
        assert dict(status.files) == {"src/a.ts": 0}


class TestFinalize:
    def test_stop_writes_formatted_results_and_clears(self, session, source, clock, writer):
        source.focus(A)
        session.start()
        clock.advance(3661)
        source.focus(None)
        clock.advance(5)
        result = session.stop()

        assert result.accepted
        assert writer.writes == [
            (
                {"src/a.ts": "1h 01m 01s", INACTIVE_FILE: "0h 00m 05s"},
                {"total": "1h 01m 06s", "src/": "1h 01m 01s"},
            )
        ]
        assert session.state is RecordingState.STOPPED
        assert dict(session.ledger.snapshot()) == {}
        assert session.status().current_file is None
        assert source.subscriber_count == 0

    def test_stop_from_paused_does_not_accrue_paused_time(self, session, source, clock, writer):
        source.focus(A)
        session.start()
        clock.advance(4)
        session.pause()
        clock.advance(1000)
        session.stop()

        assert writer.writes[0][0] == {"src/a.ts": "0h 00m 04s"}

    def test_start_after_stop_begins_a_fresh_ledger(self, session, source, clock):
        source.focus(A)
        session.start()
        clock.advance(10)
        session.stop()
        source.focus(B)
        session.start()
        clock.advance(2)
        session.pause()

        assert dict(session.ledger.snapshot()) == {"lib/b.ts": 2}

    def test_write_failure_keeps_the_ledger(self, session, source, clock, writer):
        source.focus(A)
        session.start()
        clock.advance(10)
        writer.fail = True

        with pytest.raises(PermissionError):
            session.stop()

        assert session.state is RecordingState.PAUSED
        assert dict(session.ledger.snapshot()) == {"src/a.ts": 10}
        assert source.subscriber_count == 0

        writer.fail = False
        clock.advance(100)
        assert session.stop().accepted
        assert writer.writes[0][0] == {"src/a.ts": "0h 00m 10s"}

    def test_teardown_writes_active_session(self, session, source, clock, writer):
        source.focus(A)
        session.start()
        clock.advance(6)

        result_dir = session.teardown()

        assert result_dir is not None
        assert writer.writes[0][0] == {"src/a.ts": "0h 00m 06s"}
        assert source.subscriber_count == 0
        assert session.teardown() is None
        assert len(writer.writes) == 1

    def test_teardown_when_stopped_writes_nothing(self, session, writer):
        assert session.teardown() is None
        assert writer.writes == []
