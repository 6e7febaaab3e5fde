import datetime
import os
import tempfile
import unittest
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "tiingonews" / "src"
sys.path.insert(0, str(SRC))

from tiingonews import config
from tiingonews.errors import ValidationError
from tiingonews.market import load_market, normalize_ticker


MARKET_YAML = """
market:
  name: "US Equities"
  code: USA
  timezone: America/Chicago
  symbol: spy
  tickers: [aapl, brk-a]
  renames:
    - {old: fb, new: meta, date: 2022-06-09}
    - {old: TWTR, new: X, date: "2023-07-24"}
"""


class TestLoadMarket(unittest.TestCase):
    def _write(self, tmpdir, text):
        path = Path(tmpdir) / "market.yaml"
        path.write_text(text)
        return str(path)

    def test_full_profile(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            profile = load_market(self._write(tmpdir, MARKET_YAML))

        self.assertEqual(profile["name"], "US Equities")
        self.assertEqual(profile["code"], "usa")
        self.assertEqual(profile["timezone"], "America/Chicago")
        self.assertEqual(profile["symbol"], "SPY")
        self.assertEqual(profile["tickers"], ["AAPL", "BRK.A"])
        self.assertEqual(profile["renames"], [
            ("FB", "META", datetime.date(2022, 6, 9)),
            ("TWTR", "X", datetime.date(2023, 7, 24)),
        ])

    def test_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            profile = load_market(self._write(tmpdir, "market: {}\n"))

        self.assertEqual(profile["name"], "Market")
        self.assertEqual(profile["code"], config.get_default_market())
        self.assertEqual(profile["timezone"], config.get_default_timezone())
        self.assertIsNone(profile["symbol"])
        self.assertEqual(profile["tickers"], [])
        self.assertEqual(profile["renames"], [])

    def test_missing_file(self):
        with self.assertRaises(ValidationError):
            load_market("/nonexistent/market.yaml")

    def test_invalid_shapes(self):
        bad = [
            "just a string\n",
            "market: [1, 2]\n",
            "market:\n  tickers: AAPL\n",
            "market:\n  tickers: ['']\n",
            "market:\n  renames: [{old: FB, date: 2022-06-09}]\n",
            "market:\n  renames: [{old: FB, new: META, date: soon}]\n",
            "market: {tickers: [\n",
        ]
        with tempfile.TemporaryDirectory() as tmpdir:
            for text in bad:
                with self.assertRaises(ValidationError, msg=text):
                    load_market(self._write(tmpdir, text))

    def test_normalize_ticker(self):
        self.assertEqual(normalize_ticker(" brk-b "), "BRK.B")


class TestConfig(unittest.TestCase):
    def test_env_file_does_not_override(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            env = Path(tmpdir) / ".env"
            env.write_text("# comment\nTIINGONEWS_TEST_A=from_file\nTIINGONEWS_TEST_B='quoted'\n")
            os.environ["TIINGONEWS_TEST_A"] = "from_env"
            try:
                config.load_env_file(str(env))
                self.assertEqual(os.environ["TIINGONEWS_TEST_A"], "from_env")
                self.assertEqual(os.environ["TIINGONEWS_TEST_B"], "quoted")
            finally:
                os.environ.pop("TIINGONEWS_TEST_A", None)
                os.environ.pop("TIINGONEWS_TEST_B", None)

    def test_timezone_from_env(self):
        old = os.environ.get("TIINGONEWS_TIMEZONE")
        os.environ["TIINGONEWS_TIMEZONE"] = "Asia/Tokyo"
        try:
            self.assertEqual(config.get_default_timezone(), "Asia/Tokyo")
        finally:
            if old is None:
                os.environ.pop("TIINGONEWS_TIMEZONE")
            else:
                os.environ["TIINGONEWS_TIMEZONE"] = old


if __name__ == "__main__":
    unittest.main()
