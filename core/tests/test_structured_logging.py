"""Tests for run and file correlation in log records."""

import logging
import unittest

from core.structured_logging import (
    _RunContextFilter,
    file_scope,
    get_current_file,
    get_run_id,
    set_run_id,
)


class TestStructuredLogging(unittest.TestCase):
    def test_set_run_id_explicit(self) -> None:
        self.assertEqual(set_run_id("run-1"), "run-1")
        self.assertEqual(get_run_id(), "run-1")

    def test_set_run_id_generates(self) -> None:
        value = set_run_id()
        self.assertEqual(len(value), 36)
        self.assertEqual(get_run_id(), value)

    def test_file_scope_resets(self) -> None:
        self.assertEqual(get_current_file(), "-")
        with file_scope("src/lib.rs"):
            self.assertEqual(get_current_file(), "src/lib.rs")
            with file_scope("src/other.rs"):
                self.assertEqual(get_current_file(), "src/other.rs")
            self.assertEqual(get_current_file(), "src/lib.rs")
        self.assertEqual(get_current_file(), "-")

    def test_filter_injects_fields(self) -> None:
        set_run_id("run-2")
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        with file_scope("a.rs"):
            self.assertTrue(_RunContextFilter().filter(record))
        self.assertEqual(record.run_id, "run-2")
        self.assertEqual(record.file, "a.rs")


if __name__ == "__main__":
    unittest.main()
