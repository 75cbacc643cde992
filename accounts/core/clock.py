from datetime import date, datetime, time, timezone


def utcnow() -> datetime:
    """Timezone-aware now; every stored timestamp goes through this."""
    return datetime.now(tz=timezone.utc)


def day_start_utc(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)
