"""Aggregation commands for candlekit CLI.

Reads trade files and builds OHLCV candles from them, optionally rolling
the candles up into a longer timeframe.
"""

import csv
import logging
from datetime import timedelta
from pathlib import Path
from typing import Iterable, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from candlekit.log import setup_logging
from candlekit.models import TIMEFRAMES, Candle, TimePeriod, Trade, parse_timeframe

logger = logging.getLogger(__name__)

console = Console()

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "candlekit" / "config.toml"
DEFAULT_TIMEFRAME = "1min"
DEFAULT_PRECISION = 2

TRADE_COLUMNS = ("timestamp", "amount", "price")


def _get_config(config_path: Optional[Path] = None) -> dict:
    """Lazily load configuration.

    A missing or unreadable file yields an empty config.
    """
    import toml

    config_path = config_path or DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return {}

    try:
        return toml.load(config_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Ignoring config file %s: %s", config_path, e)
        return {}


def load_trades(path: Path) -> list[Trade]:
    """Read trades from a CSV file with a timestamp,amount,price header.

    Raises:
        ValueError: If the header is missing columns or a row is invalid.
    """
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        missing = [col for col in TRADE_COLUMNS if col not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"{path}: missing column(s) {', '.join(missing)}")

        trades = []
        for row in reader:
            try:
                trades.append(Trade(**{col: row[col] for col in TRADE_COLUMNS}))
            except ValidationError as e:
                raise ValueError(f"{path}, line {reader.line_num}: {e}") from e

    logger.debug("Loaded %d trades from %s", len(trades), path)
    return trades


def build_candles(trades: Iterable[Trade], length: timedelta) -> list[Candle]:
    """Bucket trades into candles of the given length.

    Trades within a bucket are applied in timestamp order.

    Returns:
        Candles ordered by period start. Empty periods are skipped.
    """
    candles: dict[TimePeriod, Candle] = {}

    for trade in sorted(trades, key=lambda t: t.timestamp):
        period = TimePeriod.containing(trade.timestamp, length)
        candle = candles.get(period)
        if candle is None:
            candle = candles[period] = Candle(period=period)
        candle.add_trade(trade.amount, trade.price)

    return sorted(candles.values(), key=lambda c: c.period.start)


def rollup(candles: Iterable[Candle], length: timedelta) -> list[Candle]:
    """Merge shorter candles into candles of a longer length.

    The first candle in each window seeds it, later candles are merged in
    with :meth:`Candle.update_candle`.

    Raises:
        ValueError: If a candle is longer than ``length`` or does not
            divide it evenly.
    """
    merged: list[Candle] = []

    for candle in sorted(candles, key=lambda c: c.period.start):
        if not candle.period.length or length % candle.period.length:
            raise ValueError(
                f"Cannot roll up {candle.period.length} candles into {length} periods"
            )

        window = TimePeriod.containing(candle.period.start, length)
        if merged and merged[-1].period == window:
            merged[-1].update_candle(candle)
        else:
            merged.append(candle.model_copy(update={"period": window}, deep=True))

    return merged


def _print_candles(candles: list[Candle], title: str, precision: int) -> None:
    """Display candles in a table."""
    table = Table(title=title)
    table.add_column("Period", style="cyan")
    table.add_column("Open", justify="right")
    table.add_column("High", justify="right", style="green")
    table.add_column("Low", justify="right", style="red")
    table.add_column("Close", justify="right")
    table.add_column("Volume", justify="right")
    table.add_column("Trades", justify="right", style="dim")

    for candle in candles:
        table.add_row(
            str(candle.period),
            f"{candle.open_price:.{precision}f}",
            f"{candle.max_price:.{precision}f}",
            f"{candle.min_price:.{precision}f}",
            f"{candle.close_price:.{precision}f}",
            f"{candle.volume:.{precision}f}",
            str(candle.trade_count),
        )

    console.print(table)


def _error(message: str) -> None:
    console.print(Panel(
        f"[red]{message}[/red]",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


@click.command()
@click.argument("trades_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-t", "--timeframe",
    default=None,
    type=click.Choice(list(TIMEFRAMES)),
    help=f"Candle timeframe (default: {DEFAULT_TIMEFRAME})",
)
@click.option(
    "--rollup", "rollup_timeframe",
    default=None,
    type=click.Choice(list(TIMEFRAMES)),
    help="Merge the candles into a longer timeframe.",
)
@click.option(
    "-p", "--precision",
    default=None,
    type=click.IntRange(min=0),
    help=f"Decimal places for prices and volume (default: {DEFAULT_PRECISION})",
)
@click.option(
    "--config", "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to config.toml.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def aggregate(
    trades_file: Path,
    timeframe: Optional[str],
    rollup_timeframe: Optional[str],
    precision: Optional[int],
    config_path: Optional[Path],
    verbose: bool,
) -> None:
    """Aggregate a trades CSV into OHLCV candles.

    TRADES_FILE is a CSV with a timestamp,amount,price header.

    \b
    Examples:
      candlekit aggregate trades.csv                   # 1-minute candles
      candlekit aggregate trades.csv -t 15min          # 15-minute candles
      candlekit aggregate trades.csv --rollup 1hour    # 1min rolled into 1hour
    """
    setup_logging(verbose)
    config = _get_config(config_path)

    if timeframe is None:
        timeframe = config.get("aggregate", {}).get("timeframe", DEFAULT_TIMEFRAME)
    if precision is None:
        precision = config.get("display", {}).get("precision", DEFAULT_PRECISION)

    try:
        length = parse_timeframe(timeframe)
        trades = load_trades(trades_file)
        candles = build_candles(trades, length)

        title = f"{trades_file.name} ({timeframe})"
        if rollup_timeframe:
            candles = rollup(candles, parse_timeframe(rollup_timeframe))
            title = f"{trades_file.name} ({timeframe} -> {rollup_timeframe})"
    except ValueError as e:
        _error(str(e))

    if not candles:
        console.print("[yellow]No trades found.[/yellow]")
        return

    _print_candles(candles, title, precision)
    console.print(f"\n[dim]{len(trades)} trades in {len(candles)} candles[/dim]")
