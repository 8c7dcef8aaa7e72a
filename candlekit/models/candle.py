"""Candle (OHLCV) data model."""

import logging
from decimal import Decimal
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from candlekit.models.period import TimePeriod

logger = logging.getLogger(__name__)

ZERO = Decimal(0)

Number = Union[Decimal, int, float, str]

PriceField = Literal["open_price", "close_price", "max_price", "min_price"]

# Fields that start out unset rather than at a real price
_PRICE_FIELDS: frozenset[PriceField] = frozenset(
    {"open_price", "close_price", "max_price", "min_price"}
)


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


class Candle(BaseModel):
    """Aggregated market activity for a security over one time period.

    A candle is built incrementally, either one trade at a time with
    :meth:`add_trade` or by folding in shorter-period candles with
    :meth:`update_candle`. A 5-minute candle can be assembled from five
    1-minute candles this way.

    Price fields read as zero until written. Which of them have actually
    been written is kept in ``recorded``, which is serialized with the
    candle, so a trade at a price of exactly zero is recorded like any other.
    """

    period: TimePeriod = Field(..., frozen=True, description="Period this candle covers")
    open_price: Decimal = Field(default=ZERO, description="Price of the first trade")
    close_price: Decimal = Field(default=ZERO, description="Price of the latest trade")
    max_price: Decimal = Field(default=ZERO, description="Highest traded price")
    min_price: Decimal = Field(default=ZERO, description="Lowest traded price")
    volume: Decimal = Field(default=ZERO, description="Total traded amount")
    trade_count: int = Field(default=0, ge=0, description="Number of trades")
    recorded: Optional[frozenset[PriceField]] = Field(
        default=None, description="Price fields that hold a real price"
    )

    def model_post_init(self, __context: Any) -> None:
        if self.recorded is not None:
            return
        # Without an explicit set, a passed price counts unless it is a zero
        # placeholder on a candle that has seen no trades.
        self.recorded = frozenset(
            name for name in _PRICE_FIELDS & self.model_fields_set
            if getattr(self, name) != 0 or self.trade_count > 0
        )

    def has_price(self, field: str) -> bool:
        """Check whether a price field has been written."""
        return field in self.recorded

    @property
    def is_empty(self) -> bool:
        """Check whether no price or trade has been recorded yet."""
        return not self.recorded and self.trade_count == 0

    def add_trade(self, trade_amount: Number, trade_price: Number) -> None:
        """Add a trade to this candle.

        The first trade sets the open price and every trade sets the close.
        High and low are widened to include the price, the amount is added
        to the volume and the trade count is incremented.
        """
        amount = _to_decimal(trade_amount)
        price = _to_decimal(trade_price)

        if not self.has_price("open_price"):
            self.open_price = price
        self.close_price = price

        if not self.has_price("max_price") or price > self.max_price:
            self.max_price = price
        if not self.has_price("min_price") or price < self.min_price:
            self.min_price = price

        self.volume += amount
        self.trade_count += 1
        self.recorded = _PRICE_FIELDS

    def update_candle(self, other: Optional["Candle"]) -> bool:
        """Merge a shorter-period candle into this one.

        The merge only happens when ``other`` starts strictly inside this
        candle's period. Only the start of ``other`` is checked, so it may
        run past this candle's end. The close price is taken from ``other``,
        which means merges must be applied in chronological order.

        Args:
            other: Candle to fold in. None is ignored.

        Returns:
            True if the candle was merged, False if it was ignored.
        """
        if other is None:
            return False

        if not (self.period.start < other.period.start < self.period.end):
            logger.debug("Ignoring candle %s outside of %s", other.period, self.period)
            return False

        if other.has_price("max_price"):
            if not self.has_price("max_price") or other.max_price > self.max_price:
                self.max_price = other.max_price
            self.recorded = self.recorded | {"max_price"}

        if other.has_price("min_price"):
            if not self.has_price("min_price") or other.min_price < self.min_price:
                self.min_price = other.min_price
            self.recorded = self.recorded | {"min_price"}

        if other.has_price("close_price"):
            self.close_price = other.close_price
            self.recorded = self.recorded | {"close_price"}

        self.volume += other.volume
        self.trade_count += other.trade_count
        return True

    def render(self, precision: int = 2) -> str:
        """Render the candle as a multi-line text block.

        The trade count is not part of the output.
        """
        lines = [
            ("Time", str(self.period)),
            ("Open", f"{self.open_price:.{precision}f}"),
            ("Close", f"{self.close_price:.{precision}f}"),
            ("High", f"{self.max_price:.{precision}f}"),
            ("Low", f"{self.min_price:.{precision}f}"),
            ("Volume", f"{self.volume:.{precision}f}"),
        ]
        return "\n".join(f"{label}:\t{value}" for label, value in lines)

    def __str__(self) -> str:
        return self.render()
