import sys
import json
import click
import logging
from pathlib import Path
from .errors import format_error, ValidationError
from .logging import configure_logging
from .config import get_default_market, get_default_timezone, get_market_path
from .market import load_market, normalize_ticker
from .models.symbol import Symbol
from .resolver import TickerMapResolver
from .providers.tiingo import TiingoNewsDecoder
from .export import json_export, csv_export

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def _load_profile(market_path):
    """Explicit --market must exist; the default path is optional."""
    if market_path:
        return load_market(market_path)
    default_path = get_market_path()
    if Path(default_path).exists():
        logger.info(f"Using market profile {default_path}")
        return load_market(default_path)
    return None


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """tiingonews: Tiingo news feed decoder."""
    configure_logging(verbose=verbose)


@cli.command()
@click.argument("news_file", type=click.File("rb"))
@click.option("--symbol", help="Symbol every article is filed under (e.g. SPY)")
@click.option("--timezone", "zone", help="Exchange time zone (IANA name)")
@click.option("--market", "market_path", help="Market profile YAML")
@click.option("--csv", "csv_path", help="Also write records to this CSV file")
@click.option("--json", "json_path", help="Also write records to this JSON file")
def decode(news_file, symbol, zone, market_path, csv_path, json_path):
    """
    Decode a Tiingo news JSON file ('-' for stdin) and print the records.
    """
    profile = _load_profile(market_path)

    symbol = normalize_ticker(symbol) if symbol else (profile and profile["symbol"])
    if not symbol:
        raise click.UsageError("--symbol is required when the market profile has none.")

    if profile:
        market_code = profile["code"]
        zone = zone or profile["timezone"]
        resolver = TickerMapResolver.from_market(profile)
    else:
        market_code = get_default_market()
        zone = zone or get_default_timezone()
        resolver = TickerMapResolver(market=market_code)

    target = Symbol.create(symbol, market=market_code)
    decoder = TiingoNewsDecoder(target, zone, resolver)

    logger.info(f"Decoding {getattr(news_file, 'name', 'stdin')} for {target} ({zone})")
    records = decoder.decode_json(news_file.read())
    data = json_export.records_to_dicts(records)

    exports = {}
    if json_path:
        json_export.export_json(data, Path(json_path))
        exports["json"] = json_path
    if csv_path:
        csv_export.export_news_csv(records, Path(csv_path))
        exports["csv"] = csv_path

    _print_json(data, count=len(records), exports=exports)


@cli.command()
def version():
    """Print version information."""
    _print_json({"version": __version__})


def _print_json(data, **meta):
    """Helper to print standard JSON envelope."""
    payload = {
        "ok": True,
        "data": data,
        "meta": {
            "version": 1,
            **meta
        }
    }
    click.echo(json.dumps(payload, indent=2))


def main():
    """Entry point for the CLI."""
    try:
        cli(standalone_mode=False)
    except Exception as e:
        if isinstance(e, click.exceptions.Exit):
            sys.exit(e.exit_code)
        if isinstance(e, click.exceptions.Abort):
            sys.exit(130)

        if isinstance(e, click.exceptions.UsageError):
            print(format_error(ValidationError(e.format_message())))
            sys.exit(1)

        print(format_error(e))
        sys.exit(1)

if __name__ == "__main__":
    main()
