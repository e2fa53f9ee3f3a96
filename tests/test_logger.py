import io
import json
import os
import unittest
from contextlib import redirect_stderr
from unittest import mock

from immutalist import ImmutableList, ConsoleLogger, get_logger
from immutalist import logger as logger_mod


class TestConsoleLogger(unittest.TestCase):
    def test_level_filtering_and_text(self):
        log = ConsoleLogger("t", level="WARN")
        buf = io.StringIO()
        with redirect_stderr(buf):
            log.info("hidden")
            log.warn("shown", k=1)
            log.error("failed")
        out = buf.getvalue()
        self.assertIn("t ERROR: failed", out)
        self.assertNotIn("hidden", out)
        self.assertIn("t WARN: shown k=1", out)

    def test_json_and_bind(self):
        log = ConsoleLogger("t", level="DEBUG", json_output=True).bind(op="x")
        buf = io.StringIO()
        with redirect_stderr(buf):
            log.debug("hello", n=2)
        rec = json.loads(buf.getvalue().strip())
        self.assertEqual(rec["level"], "DEBUG")
        self.assertEqual(rec["fields"], {"op": "x", "n": 2})

    def test_set_level(self):
        log = ConsoleLogger(level="INFO")
        log.set_level("error")
        self.assertEqual(log.level_name, "ERROR")
        log.set_level("bogus")
        self.assertEqual(log.level_name, "ERROR")

    def test_env_configuration(self):
        with mock.patch.dict(os.environ, {"IMMUTALIST_LOG_LEVEL": "DEBUG", "IMMUTALIST_LOG_JSON": "1"}):
            log = logger_mod._from_env()
        self.assertEqual(log.level_name, "DEBUG")
        self.assertTrue(log.json_output)


class TestListLogging(unittest.TestCase):
    def test_out_of_range_edit_logs_at_debug(self):
        log = get_logger()
        old = log.level_name
        log.set_level("DEBUG")
        buf = io.StringIO()
        try:
            with redirect_stderr(buf):
                ImmutableList.of(1, 2).swap(0, 9)
        finally:
            log.set_level(old)
        self.assertIn("swap: index out of range", buf.getvalue())
