from datetime import datetime, timezone


def get_current_timestamp() -> int:
    """Current UTC time in integer milliseconds since the Unix epoch."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def format_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).strftime("%Y-%m-%d")
