from abc import ABC, abstractmethod
from datetime import datetime


class TimeSource(ABC):
    """
    Abstract source of time.
    Subsidy records are stamped with the calendar day of now().
    """
    @abstractmethod
    def now(self) -> datetime:
        pass

    def today(self) -> str:
        return self.now().strftime("%Y-%m-%d")
