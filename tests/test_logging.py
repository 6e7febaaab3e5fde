import logging
import os
import unittest
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "tiingonews" / "src"
sys.path.insert(0, str(SRC))

from tiingonews.errors import ValidationError
from tiingonews.logging import HANDLER_NAME, configure_logging


class TestConfigureLogging(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self._handlers = list(root.handlers)
        self._level = root.level
        self._env = os.environ.pop("TIINGONEWS_LOG_LEVEL", None)

    def tearDown(self):
        root = logging.getLogger()
        root.handlers[:] = self._handlers
        root.setLevel(self._level)
        os.environ.pop("TIINGONEWS_LOG_LEVEL", None)
        if self._env is not None:
            os.environ["TIINGONEWS_LOG_LEVEL"] = self._env

    def _ours(self):
        return [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]

    def test_repeated_calls_keep_one_handler(self):
        first = configure_logging()
        second = configure_logging(verbose=True)
        self.assertIs(first, second)
        self.assertEqual(len(self._ours()), 1)
        self.assertIs(second.stream, sys.stderr)

    def test_default_level_is_info(self):
        configure_logging()
        self.assertEqual(logging.getLogger().level, logging.INFO)

    def test_verbose_forces_debug(self):
        configure_logging(level="ERROR", verbose=True)
        self.assertEqual(logging.getLogger().level, logging.DEBUG)

    def test_level_names_and_numbers(self):
        configure_logging(level="warning")
        self.assertEqual(logging.getLogger().level, logging.WARNING)
        configure_logging(level=logging.ERROR)
        self.assertEqual(logging.getLogger().level, logging.ERROR)

    def test_level_from_env(self):
        os.environ["TIINGONEWS_LOG_LEVEL"] = "debug"
        configure_logging()
        self.assertEqual(logging.getLogger().level, logging.DEBUG)

    def test_unknown_level(self):
        with self.assertRaises(ValidationError):
            configure_logging(level="chatty")


if __name__ == "__main__":
    unittest.main()
