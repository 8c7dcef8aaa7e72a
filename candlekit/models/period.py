"""Time period data model."""

from datetime import datetime, timedelta

from pydantic import BaseModel, Field, model_validator

# Display format for period boundaries, e.g. 01/02/2006T15:04:05
PERIOD_FORMAT = "%m/%d/%YT%H:%M:%S"
PERIOD_SEPARATOR = " -> "

# Supported timeframes
TIMEFRAMES = {
    "1min": timedelta(minutes=1),
    "5min": timedelta(minutes=5),
    "15min": timedelta(minutes=15),
    "30min": timedelta(minutes=30),
    "1hour": timedelta(hours=1),
    "4hour": timedelta(hours=4),
    "1day": timedelta(days=1),
}

_ONE_DAY = timedelta(days=1)


def parse_timeframe(name: str) -> timedelta:
    """Convert a timeframe name such as ``5min`` into a timedelta.

    Raises:
        ValueError: If the timeframe is not one of TIMEFRAMES.
    """
    try:
        return TIMEFRAMES[name]
    except KeyError:
        raise ValueError(
            f"Unknown timeframe '{name}', expected one of {', '.join(TIMEFRAMES)}"
        ) from None


class TimePeriod(BaseModel):
    """Represents a half-open time window ``[start, end)``."""

    start: datetime = Field(..., description="Window start (inclusive)")
    end: datetime = Field(..., description="Window end (exclusive)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def end_must_not_precede_start(self) -> "TimePeriod":
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) must be >= start ({self.start})")
        return self

    @classmethod
    def of(cls, start: datetime, length: timedelta) -> "TimePeriod":
        """Build the period of ``length`` beginning at ``start``."""
        return cls(start=start, end=start + length)

    @classmethod
    def containing(cls, instant: datetime, length: timedelta) -> "TimePeriod":
        """Return the aligned window of ``length`` that contains ``instant``.

        Windows are aligned to the instant's midnight, so ``length`` must
        divide a day evenly.

        Raises:
            ValueError: If length is not positive or does not divide a day.
        """
        if length <= timedelta(0) or _ONE_DAY % length:
            raise ValueError(f"Period length {length} must be positive and divide one day")

        midnight = instant.replace(hour=0, minute=0, second=0, microsecond=0)
        offset = (instant - midnight) // length * length
        return cls.of(midnight + offset, length)

    @classmethod
    def parse(cls, text: str) -> "TimePeriod":
        """Parse a period from its ``str()`` rendering.

        Raises:
            ValueError: If the text is not ``<start> -> <end>``.
        """
        parts = text.strip().split(PERIOD_SEPARATOR)
        if len(parts) != 2:
            raise ValueError(f"Invalid time period '{text}'")

        start, end = (datetime.strptime(part.strip(), PERIOD_FORMAT) for part in parts)
        return cls(start=start, end=end)

    @property
    def length(self) -> timedelta:
        return self.end - self.start

    def contains(self, instant: datetime) -> bool:
        """Check whether ``instant`` falls inside this period."""
        return self.start <= instant < self.end

    def advance(self, n: int = 1) -> "TimePeriod":
        """Return this period shifted forward by ``n`` of its own lengths."""
        shift = self.length * n
        return TimePeriod(start=self.start + shift, end=self.end + shift)

    def __str__(self) -> str:
        return (
            f"{self.start.strftime(PERIOD_FORMAT)}"
            f"{PERIOD_SEPARATOR}"
            f"{self.end.strftime(PERIOD_FORMAT)}"
        )
