from datetime import datetime
from src.wallet.time.time_source import TimeSource

class SystemTimeSource(TimeSource):
    """
    Production time source using the system clock.
    Returns local, timezone-aware time so record dates follow the host's day.
    """
    def now(self) -> datetime:
        return datetime.now().astimezone()
