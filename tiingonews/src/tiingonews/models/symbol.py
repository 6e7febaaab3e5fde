from pydantic import BaseModel, ConfigDict


class Symbol(BaseModel):
    """
    Security identity resolved from a ticker.

    `value` is the ticker in use, `sid` stays the same for a security
    across ticker changes (first ticker plus market).
    """

    model_config = ConfigDict(frozen=True)

    value: str
    market: str = "usa"
    sid: str

    @classmethod
    def create(cls, ticker: str, market: str = "usa") -> "Symbol":
        """Symbol for a ticker with no rename history."""
        ticker = ticker.strip().upper()
        market = market.strip().lower()
        return cls(value=ticker, market=market, sid=f"{ticker} {market.upper()}")

    def __str__(self) -> str:
        return self.value
