"""
High-level orchestrator for surface extraction.

This module provides the main entry points for mapping single files or
entire directory trees: file discovery (extension filter, hidden and
excluded directories, ``.gitignore`` rules), per-file reads and parsing, and
run statistics. The pure transformation lives in ``codemap.surface``.
"""

import logging
import os
from typing import Dict, List, Optional, Tuple

import pathspec

from codemap.config import GITIGNORE_FILE
from codemap.errors import CodemapError, ParseFailure
from codemap.models import FileSurface
from codemap.parser import count_error_nodes, parse_file
from codemap.surface import codemap_tree
from core.startup_config import CodemapConfig
from core.structured_logging import file_scope

logger = logging.getLogger(__name__)

IgnoreRules = List[Tuple[str, pathspec.PathSpec]]


class CodemapStats:
    """Statistics for a mapping run."""

    def __init__(self):
        self.files_processed = 0
        self.files_failed = 0
        self.files_with_surface = 0
        self.parse_errors = 0

    def record(self, result: FileSurface) -> None:
        if result.failed:
            self.files_failed += 1
            return
        self.files_processed += 1
        self.parse_errors += result.parse_error_count
        if result.surface:
            self.files_with_surface += 1

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "files_with_surface": self.files_with_surface,
            "parse_errors": self.parse_errors,
        }

    def __str__(self) -> str:
        """String representation of stats."""
        return (
            f"CodemapStats(processed={self.files_processed}, "
            f"failed={self.files_failed}, with_surface={self.files_with_surface}, "
            f"parse_errors={self.parse_errors})"
        )


def _display_path(file_path: str, root: str) -> str:
    """Path shown in the report: relative to the walk root, ``/``-separated."""
    if os.path.isfile(root):
        return os.path.basename(file_path)
    try:
        relative = os.path.relpath(file_path, root)
    except ValueError:
        logger.warning("Cannot compute relative path for %s from %s", file_path, root)
        relative = file_path
    return relative.replace(os.sep, "/")


def _load_gitignore(directory: str) -> Optional[pathspec.PathSpec]:
    ignore_path = os.path.join(directory, GITIGNORE_FILE)
    if not os.path.isfile(ignore_path):
        return None
    try:
        with open(ignore_path, "r", encoding="utf-8") as f:
            return pathspec.GitIgnoreSpec.from_lines(f)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", ignore_path, e)
        return None


def _is_ignored(path: str, is_dir: bool, rules: IgnoreRules) -> bool:
    for base, spec in rules:
        relative = os.path.relpath(path, base).replace(os.sep, "/")
        if is_dir:
            relative += "/"
        if spec.match_file(relative):
            return True
    return False


def discover_rust_files(
    directory: str,
    config: Optional[CodemapConfig] = None,
    walk_errors: Optional[List[OSError]] = None,
) -> List[str]:
    """Recursively discover Rust source files under a directory.

    Hidden directories and ``config.exclude_dirs`` are skipped. When
    ``config.respect_gitignore`` is set, every ``.gitignore`` met on the way
    down applies to its own subtree.

    Args:
        directory: Root directory to search, or a single file.
        config: Walker settings; defaults when None.
        walk_errors: Collects directory read errors instead of dropping them.

    Returns:
        Sorted list of absolute paths.

    Example:
        >>> files = discover_rust_files("/path/to/crate")
        >>> files[0].endswith(".rs")
        True
    """
    config = config or CodemapConfig()
    directory = os.path.abspath(directory)

    if os.path.isfile(directory):
        return [directory]

    def _on_error(error: OSError) -> None:
        logger.error("Cannot read directory entry: %s", error)
        if walk_errors is not None:
            walk_errors.append(error)

    logger.info(f"Discovering Rust files in {directory}")

    rust_files = []
    inherited: Dict[str, IgnoreRules] = {directory: []}

    for root, dirs, files in os.walk(directory, onerror=_on_error):
        rules = list(inherited.pop(root, []))
        if config.respect_gitignore:
            spec = _load_gitignore(root)
            if spec is not None:
                rules.append((root, spec))

        kept_dirs = []
        for d in dirs:
            if d.startswith('.') or d in config.exclude_dirs:
                continue
            if rules and _is_ignored(os.path.join(root, d), True, rules):
                continue
            kept_dirs.append(d)
            inherited[os.path.join(root, d)] = rules
        dirs[:] = kept_dirs

        for file in files:
            ext = os.path.splitext(file)[1]
            if ext not in config.extensions:
                continue
            path = os.path.join(root, file)
            if rules and _is_ignored(path, False, rules):
                continue
            rust_files.append(path)

    logger.info(f"Found {len(rust_files)} Rust files")
    return sorted(rust_files)


def _map_file_with_diagnostics(
    file_path: str,
    root: str,
    config: CodemapConfig,
) -> FileSurface:
    """Map a single file, raising on any fatal condition."""
    display_path = _display_path(file_path, root)
    tree, source_bytes = parse_file(file_path)
    # Surfaces are UTF-8 text; reject other encodings up front
    source_bytes.decode("utf-8")

    parse_error_count = count_error_nodes(tree)
    if parse_error_count:
        if not config.allow_parse_errors:
            raise ParseFailure(parse_error_count)
        logger.warning(
            "File %s contains syntax errors (%d error nodes)",
            display_path,
            parse_error_count,
        )

    surface = codemap_tree(tree, source_bytes).strip()
    logger.debug("Rendered %d characters of surface for %s", len(surface), display_path)

    return FileSurface(
        file_path=display_path,
        surface=surface,
        parse_error_count=parse_error_count,
    )


def map_file(
    file_path: str,
    root: Optional[str] = None,
    config: Optional[CodemapConfig] = None,
) -> FileSurface:
    """Map the visible surface of a single Rust file.

    Args:
        file_path: Absolute or relative path to the file.
        root: Directory the report path is computed from. If None, uses the
            file's parent directory.
        config: Settings; defaults when None.

    Returns:
        The file's surface result.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file extension is not selected by the config.
        CodemapError: If parsing or rendering fails.
    """
    config = config or CodemapConfig()
    file_path = os.path.abspath(file_path)

    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    ext = os.path.splitext(file_path)[1]
    if ext not in config.extensions:
        raise ValueError(
            f"File {file_path} is not a Rust source file. "
            f"Expected one of: {sorted(config.extensions)}"
        )

    root = os.path.abspath(root) if root is not None else os.path.dirname(file_path)
    with file_scope(_display_path(file_path, root)):
        try:
            return _map_file_with_diagnostics(file_path, root, config)
        except Exception as e:
            logger.error("Error mapping %s: %s", file_path, e)
            raise


def map_directory(
    directory: str,
    config: Optional[CodemapConfig] = None,
) -> Tuple[List[FileSurface], CodemapStats]:
    """Map every selected Rust file under a directory.

    Fatal per-file conditions are recorded as errored results and the run
    goes on, unless ``config.continue_on_error`` is False.

    Args:
        directory: Root directory to process, or a single file.
        config: Settings; defaults when None.

    Returns:
        A tuple of (results, stats) with results in path order.

    Raises:
        FileNotFoundError: If directory does not exist.
    """
    config = config or CodemapConfig()
    directory = os.path.abspath(directory)

    if not os.path.exists(directory):
        raise FileNotFoundError(f"Directory not found: {directory}")

    stats = CodemapStats()
    results: List[FileSurface] = []
    walk_errors: List[OSError] = []

    rust_files = discover_rust_files(directory, config, walk_errors)

    for error in walk_errors:
        failed = FileSurface(
            file_path=_display_path(error.filename or directory, directory),
            error=str(error),
        )
        results.append(failed)
        stats.record(failed)

    if not rust_files:
        logger.warning(f"No Rust files found in {directory}")
        return results, stats

    logger.info(f"Processing {len(rust_files)} Rust files from {directory}")

    for file_path in rust_files:
        display_path = _display_path(file_path, directory)
        with file_scope(display_path):
            try:
                result = _map_file_with_diagnostics(file_path, directory, config)

            except CodemapError as e:
                logger.error(f"Cannot map file: {e}")
                result = FileSurface(file_path=display_path, error=f"{type(e).__name__}: {e}")
                if not config.continue_on_error:
                    raise

            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Cannot read file: {e}")
                result = FileSurface(file_path=display_path, error=f"{type(e).__name__}: {e}")
                if not config.continue_on_error:
                    raise

        results.append(result)
        stats.record(result)

    logger.info(f"Mapping complete: {stats}")
    return results, stats
