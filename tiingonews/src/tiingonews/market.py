from datetime import date
from pathlib import Path
from typing import Dict, Any, List, Tuple
import yaml
from .config import get_default_market, get_default_timezone
from .errors import ValidationError


def normalize_ticker(ticker: str) -> str:
    """Tiingo sends lower-case tickers and '-' for share classes (brk-a -> BRK.A)."""
    return ticker.strip().upper().replace("-", ".")


def _parse_rename(entry: Any, pos: int) -> Tuple[str, str, date]:
    if not isinstance(entry, dict):
        raise ValidationError(f"'market.renames[{pos}]' must be an object.")

    old, new, when = entry.get("old"), entry.get("new"), entry.get("date")
    if not isinstance(old, str) or not old.strip() or not isinstance(new, str) or not new.strip():
        raise ValidationError(f"'market.renames[{pos}]' needs non-empty 'old' and 'new' tickers.")

    if isinstance(when, str):
        try:
            when = date.fromisoformat(when.strip())
        except ValueError:
            raise ValidationError(f"'market.renames[{pos}].date' must be YYYY-MM-DD.")
    if not isinstance(when, date):
        raise ValidationError(f"'market.renames[{pos}].date' must be YYYY-MM-DD.")

    return normalize_ticker(old), normalize_ticker(new), when


def load_market(path: str = "market.yaml") -> Dict[str, Any]:
    """
    Load a market profile from YAML.
    Expected shape:
      market:
        name: "US Equities"
        code: usa
        timezone: America/New_York
        symbol: SPY
        tickers: [AAPL, META]
        renames:
          - {old: FB, new: META, date: 2022-06-09}
    Everything except the 'market' object itself is optional.
    """
    p = Path(path)
    if not p.exists():
        raise ValidationError(f"Market file not found: {path}")

    try:
        data = yaml.safe_load(p.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid market YAML: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("market"), dict):
        raise ValidationError("Market file must contain a 'market' object.")

    market = data["market"]
    name = market.get("name") or "Market"
    code = str(market.get("code") or get_default_market()).strip().lower()
    timezone = str(market.get("timezone") or get_default_timezone()).strip()

    symbol = market.get("symbol")
    if symbol is not None:
        if not isinstance(symbol, str) or not symbol.strip():
            raise ValidationError("'market.symbol' must be a non-empty string.")
        symbol = normalize_ticker(symbol)

    tickers = market.get("tickers") or []
    if not isinstance(tickers, list):
        raise ValidationError("'market.tickers' must be a list.")

    norm: List[str] = []
    for t in tickers:
        if not isinstance(t, str) or not t.strip():
            raise ValidationError("All tickers must be non-empty strings.")
        norm.append(normalize_ticker(t))

    renames = market.get("renames") or []
    if not isinstance(renames, list):
        raise ValidationError("'market.renames' must be a list.")

    return {
        "name": name,
        "code": code,
        "timezone": timezone,
        "symbol": symbol,
        "tickers": norm,
        "renames": [_parse_rename(r, i) for i, r in enumerate(renames)],
    }
