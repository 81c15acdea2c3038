from datetime import datetime


def get_now() -> datetime:
    """Current time as naive UTC. Overridden in tests to pin the clock."""
    return datetime.utcnow()
