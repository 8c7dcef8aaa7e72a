"""Main CLI entry point for candlekit."""

import click

from candlekit.cli.aggregate import aggregate

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="candlekit")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """candlekit - aggregate trades into OHLCV candles.

    \b
    Quick Start:
      candlekit aggregate trades.csv              # 1-minute candles
      candlekit aggregate trades.csv -t 5min      # 5-minute candles
      candlekit aggregate trades.csv --rollup 1hour
    """
    ctx.ensure_object(dict)


cli.add_command(aggregate)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
