import csv
from pathlib import Path
from typing import List

from ..models.news import NewsRecord

HEADERS = [
    'time', 'crawl_date', 'published_date', 'article_id', 'title',
    'source', 'url', 'symbol', 'symbols', 'tags',
]

def export_news_csv(records: List[NewsRecord], path: Path):
    """Export decoded news to CSV, one row per article."""
    with open(path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=HEADERS)
        writer.writeheader()
        for r in records:
            writer.writerow({
                'time': r.time.isoformat(),
                'crawl_date': r.crawl_date.isoformat(),
                'published_date': r.published_date.isoformat(),
                'article_id': r.article_id,
                'title': r.title,
                'source': r.source,
                'url': r.url,
                'symbol': r.symbol.value,
                'symbols': ';'.join(s.value for s in r.symbols),
                'tags': ';'.join(r.tags),
            })
