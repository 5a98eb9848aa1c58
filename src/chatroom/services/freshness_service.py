from __future__ import annotations

from chatroom.application.dto.freshness import UpdateCheck
from chatroom.application.ports.clock import Clock
from chatroom.application.ports.watermark import FreshnessWatermark
from chatroom.domain.value_objects.timestamps import parse_cursor


def check_for_updates(
    last_update: str | None,
    watermark: FreshnessWatermark,
    clock: Clock,
) -> UpdateCheck:
    """Compare the client's cursor with the watermark.

    Read-only. A missing or unreadable cursor counts as the epoch, so the
    answer errs towards an extra refetch rather than a missed change.
    """
    cursor = parse_cursor(last_update)
    return UpdateCheck(
        has_updates=watermark.has_changed_since(cursor),
        last_check=clock.now(),
    )
