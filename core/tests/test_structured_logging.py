"""Tests for structured logging context helpers."""

import logging
import unittest

from core.structured_logging import (
    _RunContextFilter,
    get_run_id,
    get_source_file,
    phase_scope,
    resolve_log_level,
    set_run_id,
    source_file_scope,
)


class TestStructuredLogging(unittest.TestCase):
    def _record(self) -> logging.LogRecord:
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        _RunContextFilter().filter(record)
        return record

    def test_set_run_id_generates_value(self) -> None:
        run_id = set_run_id()
        self.assertTrue(run_id)
        self.assertEqual(get_run_id(), run_id)

    def test_set_run_id_explicit(self) -> None:
        self.assertEqual(set_run_id("run-42"), "run-42")
        self.assertEqual(self._record().run_id, "run-42")

    def test_phase_and_file_scopes_reset(self) -> None:
        with phase_scope("extract"):
            with source_file_scope("lib/car.lua"):
                record = self._record()
                self.assertEqual(record.phase, "extract")
                self.assertEqual(record.source_file, "lib/car.lua")
            self.assertEqual(get_source_file(), "-")
        self.assertEqual(self._record().phase, "-")

    def test_resolve_log_level(self) -> None:
        self.assertEqual(resolve_log_level("debug"), logging.DEBUG)
        self.assertEqual(resolve_log_level(logging.WARNING), logging.WARNING)
        with self.assertRaises(ValueError):
            resolve_log_level("chatty")


if __name__ == "__main__":
    unittest.main()
