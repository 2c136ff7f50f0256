import pytest

from conftest import FakeView, ManualScheduler

from textcompare.core.models import ScrollMode
from textcompare.core.scroll_sync import ScrollSynchronizer


@pytest.fixture
def sync(left_view, right_view, scheduler):
    synchronizer = ScrollSynchronizer(left_view, right_view, scheduler)
    yield synchronizer
    synchronizer.dispose()


def test_starts_idle(sync):
    assert sync.mode is ScrollMode.IDLE
    assert not sync.is_pending


def test_burst_coalesces_into_one_write(sync, left_view, right_view, scheduler):
    for offset in (10, 20, 35):
        left_view.user_scroll(offset)

    assert sync.mode is ScrollMode.SYNCING
    assert len(scheduler.scheduled) == 1

    scheduler.run_pending()

    assert right_view.writes == [35]
    assert right_view.offset == 35
    assert left_view.writes == []
    assert sync.mode is ScrollMode.IDLE
    assert scheduler.pending_count == 0


def test_echo_from_driven_view_does_not_bounce(sync, left_view, right_view, scheduler):
    left_view.user_scroll(50)
    scheduler.run_pending()
    # The write fired right's listener; no new callback may result
    assert scheduler.pending_count == 0
    assert left_view.writes == []


def test_late_echo_is_suppressed(left_view, scheduler):
    right = FakeView("right", sync_echo=False)
    sync = ScrollSynchronizer(left_view, right, scheduler)

    left_view.user_scroll(40)
    scheduler.run_pending()
    right.fire()

    assert sync.mode is ScrollMode.IDLE
    assert scheduler.pending_count == 0
    assert left_view.writes == []
    sync.dispose()


def test_clamped_write_suppresses_echo_at_actual_offset(left_view, scheduler):
    right = FakeView("right", sync_echo=False, max_offset=30)
    sync = ScrollSynchronizer(left_view, right, scheduler)

    left_view.user_scroll(100)
    scheduler.run_pending()
    right.fire()

    assert right.offset == 30
    assert scheduler.pending_count == 0
    assert left_view.writes == []
    sync.dispose()


def test_events_from_driven_view_ignored_while_syncing(sync, left_view, right_view, scheduler):
    left_view.user_scroll(10)
    right_view.user_scroll(99)
    scheduler.run_pending()

    assert right_view.offset == 10
    assert left_view.writes == []


def test_both_directions(sync, left_view, right_view, scheduler):
    left_view.user_scroll(10)
    scheduler.run_pending()
    right_view.user_scroll(70)
    scheduler.run_pending()

    assert left_view.writes == [70]
    assert right_view.writes == [10]
    assert sync.mode is ScrollMode.IDLE


def test_no_write_after_dispose(sync, left_view, right_view, scheduler):
    left_view.user_scroll(10)
    callback = scheduler.scheduled[-1]

    sync.dispose()
    assert scheduler.cancelled
    assert scheduler.pending_count == 0

    # Even a callback that escaped cancellation must not write
    callback()
    left_view.user_scroll(20)

    assert right_view.writes == []
    assert left_view.listener_count == 0
    assert right_view.listener_count == 0


def test_dispose_is_idempotent(sync):
    sync.dispose()
    sync.dispose()
    assert sync.is_disposed


def test_disabling_cancels_pending_write(sync, left_view, right_view, scheduler):
    left_view.user_scroll(10)
    sync.set_enabled(False)

    assert scheduler.pending_count == 0
    assert sync.mode is ScrollMode.IDLE

    left_view.user_scroll(20)
    assert scheduler.pending_count == 0

    sync.set_enabled(True)
    left_view.user_scroll(30)
    scheduler.run_pending()
    assert right_view.writes == [30]


def test_target_disposed_mid_flight(sync, left_view, right_view, scheduler):
    left_view.user_scroll(10)
    right_view.dispose()

    scheduler.run_pending()

    assert sync.mode is ScrollMode.IDLE
    assert right_view.writes == []


def test_source_disposed_before_event_is_ignored(sync, left_view, scheduler):
    left_view.disposed = True
    left_view.fire()
    assert scheduler.pending_count == 0
    assert sync.mode is ScrollMode.IDLE
