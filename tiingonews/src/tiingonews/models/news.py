from datetime import datetime
from typing import Tuple
from pydantic import BaseModel, ConfigDict

from .symbol import Symbol

class NewsRecord(BaseModel):
    """
    Decoded Tiingo news article.
    crawl_date and published_date hold the UTC wall clock,
    time is crawl_date in the exchange time zone.
    """
    model_config = ConfigDict(frozen=True)

    article_id: str
    crawl_date: datetime
    published_date: datetime
    title: str = ""
    source: str = ""
    url: str = ""
    description: str = ""
    tags: Tuple[str, ...] = ()
    symbols: Tuple[Symbol, ...] = ()

    symbol: Symbol
    time: datetime

    @property
    def end_time(self) -> datetime:
        # Point-in-time data
        return self.time
