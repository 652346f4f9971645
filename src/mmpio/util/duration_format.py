from __future__ import annotations

from datetime import timedelta


def format_duration(duration: timedelta) -> str:
    total_millis = int(duration.total_seconds() * 1_000)
    if total_millis < 1_000:
        return f"{max(total_millis, 0)}ms"
    total_secs = total_millis // 1_000
    if total_secs < 60:
        return f"{total_secs}.{total_millis % 1_000:0>3}s"
    mins, secs = divmod(total_secs, 60)
    if mins < 60:
        return f"{mins}m{secs}s"
    hours, mins = divmod(mins, 60)
    return f"{hours}h{mins}m{secs}s"
