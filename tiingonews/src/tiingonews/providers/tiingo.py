"""
Tiingo news feed decoding.

Reference payload (https://api.tiingo.com/documentation/news):
  [{
    "id": 1,
    "source": "...",
    "crawlDate": "2019-01-29T22:20:01.696871Z",
    "publishedDate": "2019-01-29T22:17:00Z",
    "title": "...", "description": "...", "url": "...",
    "tags": ["..."],
    "tickers": ["aapl"]
  }]
"""
import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import (
    DecodeError,
    MalformedInputError,
    MissingFieldError,
    TimestampError,
    UnresolvableTickerError,
    UnsupportedOperationError,
    ValidationError,
)
from ..models.news import NewsRecord
from ..models.symbol import Symbol
from ..resolver import TickerMapResolver, TickerResolver

logger = logging.getLogger(__name__)

# Tiingo timestamps are always UTC; explicit offsets are not accepted
_TIMESTAMP_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?Z?$"
)

_OPTIONAL_TEXT_FIELDS = ("title", "source", "url", "description")


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def parse_timestamp(value: Any, field: str) -> datetime:
    """Parse a Tiingo UTC timestamp into a naive datetime (UTC wall clock)."""
    m = _TIMESTAMP_RE.match(value.strip()) if isinstance(value, str) else None
    if not m:
        raise TimestampError(
            f"Unparsable {field}: {value!r}", {"field": field, "value": value}
        )

    year, month, day, hour, minute, second, fraction = m.groups()
    # Python keeps microseconds only
    micros = int((fraction or "0")[:6].ljust(6, "0"))
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), micros,
        )
    except ValueError as e:
        raise TimestampError(
            f"Unparsable {field}: {value!r} ({e})", {"field": field, "value": value}
        )


def _required(article: Dict[str, Any], field: str) -> Any:
    value = article.get(field)
    if value is None:
        raise MissingFieldError(f"Missing required field '{field}'", {"field": field})
    return value


def _string_list(value: Any, field: str) -> List[str]:
    if not isinstance(value, list):
        raise MalformedInputError(
            f"Field '{field}' must be an array, got {type(value).__name__}",
            {"field": field},
        )
    return [_stringify(v) for v in value]


def extract_fields(article: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pull the scalar fields of one article, applying defaults for the
    optional ones. Raw tickers are returned under 'tickers' unresolved.
    """
    fields = {
        key: "" if article.get(key) is None else _stringify(article[key])
        for key in _OPTIONAL_TEXT_FIELDS
    }

    tags = article.get("tags")
    fields["tags"] = [] if tags is None else _string_list(tags, "tags")

    fields["article_id"] = _stringify(_required(article, "id"))
    fields["crawl_date"] = parse_timestamp(_required(article, "crawlDate"), "crawlDate")
    fields["published_date"] = parse_timestamp(
        _required(article, "publishedDate"), "publishedDate"
    )
    fields["tickers"] = _string_list(_required(article, "tickers"), "tickers")
    return fields


class TiingoNewsDecoder:
    """
    Decodes a Tiingo news payload into NewsRecord objects.

    Every record is filed under `symbol`; its `time` is the crawl date
    converted from UTC to `exchange_time_zone`. Decoding is all or nothing.
    """

    def __init__(
        self,
        symbol: Symbol,
        exchange_time_zone: Union[str, ZoneInfo],
        resolver: Optional[TickerResolver] = None,
    ):
        self.symbol = symbol
        self.exchange_time_zone = self._load_zone(exchange_time_zone)
        self.resolver = resolver or TickerMapResolver(market=symbol.market)

    @staticmethod
    def _load_zone(zone: Union[str, ZoneInfo]) -> ZoneInfo:
        if isinstance(zone, ZoneInfo):
            return zone
        try:
            return ZoneInfo(str(zone).strip())
        except (ZoneInfoNotFoundError, ValueError):
            raise ValidationError(f"Unknown time zone: {zone}", {"timezone": str(zone)})

    def to_exchange_time(self, utc: datetime) -> datetime:
        try:
            local = utc.replace(tzinfo=timezone.utc).astimezone(self.exchange_time_zone)
        except (OverflowError, ValueError):
            raise TimestampError(
                f"crawlDate {utc.isoformat()} is out of range in {self.exchange_time_zone}",
                {"field": "crawlDate", "value": utc.isoformat()},
            )
        return local.replace(tzinfo=None)

    def _resolve(self, raw_ticker: str, as_of: datetime) -> Symbol:
        try:
            symbol = self.resolver.resolve(raw_ticker, as_of)
        except UnresolvableTickerError as e:
            logger.warning(f"Could not resolve ticker {raw_ticker!r}: {e.message}")
            raise UnresolvableTickerError(
                e.message, {"field": "tickers", "ticker": raw_ticker, **e.details}
            )
        except Exception as e:
            logger.warning(f"Resolver failed for ticker {raw_ticker!r}: {e}")
            raise UnresolvableTickerError(
                f"Resolver failed for {raw_ticker}: {e}",
                {"field": "tickers", "ticker": raw_ticker},
            ) from e

        if not isinstance(symbol, Symbol):
            raise UnresolvableTickerError(
                f"Resolver returned {type(symbol).__name__} for {raw_ticker}, expected Symbol",
                {"field": "tickers", "ticker": raw_ticker},
            )
        return symbol

    def _decode_article(self, article: Any) -> NewsRecord:
        if not isinstance(article, dict):
            raise MalformedInputError(
                f"Article must be an object, got {type(article).__name__}"
            )

        fields = extract_fields(article)
        crawl_date = fields["crawl_date"]
        symbols = [self._resolve(t, crawl_date) for t in fields.pop("tickers")]

        return NewsRecord(
            **fields,
            symbols=symbols,
            symbol=self.symbol,
            # crawlDate is UTC, time is expected in exchange time
            time=self.to_exchange_time(crawl_date),
        )

    def decode(self, payload: Any) -> List[NewsRecord]:
        """Decode an already-parsed JSON array of Tiingo articles."""
        if not isinstance(payload, list):
            raise MalformedInputError(
                f"News payload must be an array, got {type(payload).__name__}"
            )

        logger.debug(f"Decoding {len(payload)} Tiingo articles for {self.symbol}")
        records = []
        for index, article in enumerate(payload):
            try:
                records.append(self._decode_article(article))
            except DecodeError as e:
                raise type(e)(
                    f"Article {index}: {e.message}", {**e.details, "index": index}
                ) from e

        logger.info(f"Decoded {len(records)} news records for {self.symbol}")
        return records

    def decode_json(self, text: Union[str, bytes]) -> List[NewsRecord]:
        try:
            payload = json.loads(text)
        except ValueError as e:
            raise MalformedInputError(f"Invalid JSON: {e}")
        return self.decode(payload)

    def encode(self, records: Any) -> Any:
        raise UnsupportedOperationError(
            "TiingoNewsDecoder.encode() is not implemented"
        )

    @staticmethod
    def can_decode(obj: Any) -> bool:
        return isinstance(obj, list) and all(isinstance(r, NewsRecord) for r in obj)


def decode_news(
    payload: Any,
    symbol: Symbol,
    exchange_time_zone: Union[str, ZoneInfo],
    resolver: Optional[TickerResolver] = None,
) -> List[NewsRecord]:
    """Decode a parsed Tiingo payload in one call."""
    return TiingoNewsDecoder(symbol, exchange_time_zone, resolver).decode(payload)
