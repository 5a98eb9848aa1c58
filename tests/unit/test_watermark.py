from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

from chatroom.domain.value_objects.timestamps import EPOCH
from chatroom.infrastructure.freshness.watermark import InMemoryWatermark
from tests.conftest import T0, FakeClock


def test_initialized_to_process_start(clock):
    watermark = InMemoryWatermark(clock=clock)
    assert watermark.value == T0


def test_initial_value_can_be_given(clock):
    start = datetime(2023, 5, 1, tzinfo=timezone.utc)
    assert InMemoryWatermark(clock=clock, initial=start).value == start


def test_advance_moves_to_now(clock):
    watermark = InMemoryWatermark(clock=clock)
    later = clock.advance(5)
    watermark.advance()
    assert watermark.value == later


def test_advance_never_moves_backwards(clock):
    watermark = InMemoryWatermark(clock=clock)
    clock.advance(10)
    watermark.advance()
    high = watermark.value

    clock.set(T0 - timedelta(hours=1))  # wall clock stepped back
    watermark.advance()

    assert watermark.value == high


def test_change_detected_for_any_write_after_cursor(clock):
    watermark = InMemoryWatermark(clock=clock)
    cursor = clock.advance(1)
    clock.advance(1)
    watermark.advance()
    assert watermark.has_changed_since(cursor) is True


def test_no_change_when_cursor_at_or_after_last_write(clock):
    watermark = InMemoryWatermark(clock=clock)
    clock.advance(1)
    watermark.advance()
    assert watermark.has_changed_since(clock.now()) is False
    assert watermark.has_changed_since(clock.advance(1)) is False


def test_epoch_cursor_always_changed(clock):
    assert InMemoryWatermark(clock=clock).has_changed_since(EPOCH) is True


def test_naive_cursor_compared_as_utc(clock):
    watermark = InMemoryWatermark(clock=clock)
    assert watermark.has_changed_since(datetime(2023, 12, 31, 23, 59)) is True
    assert watermark.has_changed_since(datetime(2024, 1, 1, 0, 1)) is False


def test_concurrent_writers_keep_the_maximum():
    class SteppingClock(FakeClock):
        def __init__(self) -> None:
            super().__init__()
            self._lock = threading.Lock()

        def now(self) -> datetime:
            with self._lock:
                return self.advance(0.001)

    clock = SteppingClock()
    watermark = InMemoryWatermark(clock=clock)

    def writer() -> None:
        for _ in range(200):
            watermark.advance()

    threads = [threading.Thread(target=writer) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert watermark.value <= clock.current
    assert watermark.value > T0
    assert watermark.has_changed_since(T0) is True
