import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Protocol, Tuple, Union

from .config import get_default_market
from .errors import UnresolvableTickerError
from .market import normalize_ticker
from .models.symbol import Symbol

logger = logging.getLogger(__name__)

AsOf = Union[date, datetime]


class TickerResolver(Protocol):
    """Maps a raw provider ticker to the Symbol valid at `as_of`."""

    def resolve(self, raw_ticker: str, as_of: AsOf) -> Symbol:
        ...


def _as_date(as_of: AsOf) -> date:
    if isinstance(as_of, datetime):
        return as_of.date()
    return as_of


class TickerMapResolver:
    """
    Resolver backed by an in-memory ticker universe and rename history.

    The security identifier is built from the first ticker in the rename
    chain, so FB before 2022-06-09 and META after it share one sid.
    Without a universe every well-formed ticker resolves.
    """

    def __init__(
        self,
        market: Optional[str] = None,
        tickers: Optional[Iterable[str]] = None,
        renames: Optional[Iterable[Tuple[str, str, date]]] = None,
    ):
        self.market = (market or get_default_market()).strip().lower()
        self._renames = tuple(
            (normalize_ticker(old), normalize_ticker(new), when)
            for old, new, when in (renames or ())
        )
        universe = {normalize_ticker(t) for t in (tickers or ())}
        if universe:
            for old, new, _ in self._renames:
                universe.update((old, new))
        self._universe = frozenset(universe)

    @classmethod
    def from_market(cls, profile: Dict[str, Any]) -> "TickerMapResolver":
        """Build from the dict returned by `market.load_market`."""
        return cls(
            market=profile.get("code"),
            tickers=profile.get("tickers"),
            renames=profile.get("renames"),
        )

    def _first_ticker(self, ticker: str, day: date) -> str:
        first = ticker
        seen = {first}
        while True:
            prior = next(
                (old for old, new, when in self._renames if new == first and when <= day),
                None,
            )
            if prior is None or prior in seen:
                return first
            seen.add(prior)
            first = prior

    def resolve(self, raw_ticker: str, as_of: AsOf) -> Symbol:
        ticker = normalize_ticker(raw_ticker or "")
        if not ticker:
            raise UnresolvableTickerError(
                "Empty ticker cannot be resolved", {"ticker": raw_ticker}
            )

        if self._universe and ticker not in self._universe:
            raise UnresolvableTickerError(
                f"Ticker not found: {ticker}",
                {"ticker": raw_ticker, "market": self.market},
            )

        day = _as_date(as_of)
        for old, new, when in self._renames:
            if old == ticker and when <= day:
                raise UnresolvableTickerError(
                    f"Ticker {ticker} was renamed to {new} on {when.isoformat()}",
                    {"ticker": raw_ticker, "as_of": day.isoformat(), "renamed_to": new},
                )

        first = self._first_ticker(ticker, day)
        if first != ticker:
            logger.debug(f"Mapped {ticker} to first ticker {first} as of {day}")
        return Symbol(value=ticker, market=self.market, sid=f"{first} {self.market.upper()}")
