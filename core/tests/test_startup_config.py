"""Tests for startup config validation helpers."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.startup_config import (
    DEFAULT_CONFIG_FILE,
    EXCLUDED_DIRS,
    LOG_LEVEL_ENV,
    CodemapConfig,
    ConfigValidationError,
    build_config,
    load_config_file,
    load_startup_config,
    resolve_log_level,
    resolve_strict_config_validation,
)


class TestStartupConfig(unittest.TestCase):
    def _write_config(self, content: str) -> str:
        handle = tempfile.NamedTemporaryFile(mode="w", suffix=".yml", delete=False)
        handle.write(content)
        handle.flush()
        handle.close()
        self.addCleanup(os.unlink, handle.name)
        return handle.name

    def test_load_non_strict_missing_returns_empty(self) -> None:
        payload = load_config_file("/definitely/missing.yml", strict=False)
        self.assertEqual(payload, {})

    def test_load_strict_missing_raises(self) -> None:
        with self.assertRaises(ConfigValidationError):
            load_config_file("/definitely/missing.yml", strict=True)

    def test_load_empty_file_returns_empty(self) -> None:
        path = self._write_config("")
        self.assertEqual(load_config_file(path, strict=True), {})

    def test_load_strict_invalid_yaml_raises(self) -> None:
        path = self._write_config("extensions: [.rs\n")
        with self.assertRaises(ConfigValidationError):
            load_config_file(path, strict=True)

    def test_load_strict_non_mapping_raises(self) -> None:
        path = self._write_config("- a\n- b\n")
        with self.assertRaises(ConfigValidationError):
            load_config_file(path, strict=True)

    def test_build_config_defaults(self) -> None:
        config = build_config({})
        self.assertEqual(config, CodemapConfig())
        self.assertEqual(config.extensions, frozenset({".rs"}))
        self.assertEqual(config.exclude_dirs, EXCLUDED_DIRS)
        self.assertTrue(config.respect_gitignore)
        self.assertFalse(config.allow_parse_errors)
        self.assertTrue(config.continue_on_error)

    def test_build_config_normalizes_values(self) -> None:
        config = build_config(
            {
                "extensions": ["rs", ".rs.in"],
                "exclude_dirs": ["vendor"],
                "respect_gitignore": False,
                "log_level": "debug",
            },
            strict=True,
        )
        self.assertEqual(config.extensions, frozenset({".rs", ".rs.in"}))
        self.assertEqual(config.exclude_dirs, frozenset({"vendor"}))
        self.assertFalse(config.respect_gitignore)
        self.assertEqual(config.log_level, "DEBUG")

    def test_build_config_strict_unknown_key_raises(self) -> None:
        with self.assertRaises(ConfigValidationError):
            build_config({"threads": 4}, strict=True)

    def test_build_config_strict_bad_types_raise(self) -> None:
        bad_payloads = (
            {"extensions": ".rs"},
            {"exclude_dirs": [1, 2]},
            {"allow_parse_errors": "yes"},
            {"log_level": "LOUD"},
        )
        for payload in bad_payloads:
            with self.subTest(payload=payload):
                with self.assertRaises(ConfigValidationError):
                    build_config(payload, strict=True)

    def test_build_config_non_strict_ignores_bad_values(self) -> None:
        with self.assertLogs("core.startup_config", level="WARNING"):
            config = build_config(
                {"threads": 4, "continue_on_error": "no", "allow_parse_errors": True},
                strict=False,
            )
        self.assertTrue(config.continue_on_error)
        self.assertTrue(config.allow_parse_errors)

    def test_strict_flag_from_env(self) -> None:
        with mock.patch.dict(os.environ, {"STRICT_CONFIG_VALIDATION": "true"}):
            self.assertTrue(resolve_strict_config_validation())
        with mock.patch.dict(os.environ, {"STRICT_CONFIG_VALIDATION": "0"}):
            self.assertFalse(resolve_strict_config_validation(default=True))

    def test_log_level_env_takes_precedence(self) -> None:
        config = CodemapConfig(log_level="WARNING")
        with mock.patch.dict(os.environ, {LOG_LEVEL_ENV: "debug"}):
            self.assertEqual(resolve_log_level(config), "DEBUG")
        with mock.patch.dict(os.environ, {LOG_LEVEL_ENV: "chatty"}):
            self.assertEqual(resolve_log_level(config), "WARNING")


class TestLoadStartupConfig(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_defaults_without_config_file(self) -> None:
        config = load_startup_config(str(self.root), strict=True)
        self.assertEqual(config, CodemapConfig())

    def test_discovers_config_in_root(self) -> None:
        (self.root / DEFAULT_CONFIG_FILE).write_text(
            "exclude_dirs: [generated]\nallow_parse_errors: true\n",
            encoding="utf-8",
        )
        config = load_startup_config(str(self.root), strict=True)
        self.assertEqual(config.exclude_dirs, frozenset({"generated"}))
        self.assertTrue(config.allow_parse_errors)

    def test_config_next_to_single_file(self) -> None:
        (self.root / DEFAULT_CONFIG_FILE).write_text("respect_gitignore: false\n", encoding="utf-8")
        (self.root / "lib.rs").write_text("", encoding="utf-8")
        config = load_startup_config(str(self.root / "lib.rs"), strict=True)
        self.assertFalse(config.respect_gitignore)

    def test_explicit_missing_config_strict_raises(self) -> None:
        with self.assertRaises(ConfigValidationError):
            load_startup_config(
                str(self.root),
                config_path=str(self.root / "other.yml"),
                strict=True,
            )


if __name__ == "__main__":
    unittest.main()
