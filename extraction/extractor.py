"""
High-level orchestrator for Lua doc-comment extraction.

This module provides the main entry points for extracting doc blocks from
single files or entire project trees, and for building the project's
module hierarchy.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional

from core.structured_logging import source_file_scope
from extraction.config import DEFAULT_EXCLUDE_DIRS, LUA_EXTENSIONS, MODULE_ROOT_FILES
from extraction.models import DocBlock, LuaModule
from extraction.parser import count_error_nodes, parse_file
from extraction.traversal import extract_doc_blocks_from_tree

logger = logging.getLogger(__name__)


@dataclass
class FileExtractionDiagnostics:
    """Per-file extraction diagnostics."""

    blocks: List[DocBlock]
    parse_error_count: int


class ExtractionStats:
    """Statistics for an extraction operation."""

    def __init__(self):
        self.files_processed = 0
        self.files_failed = 0
        self.blocks_extracted = 0
        self.attrs_extracted = 0
        self.parse_errors = 0

    def record(self, diagnostics: FileExtractionDiagnostics) -> None:
        self.files_processed += 1
        self.blocks_extracted += len(diagnostics.blocks)
        self.attrs_extracted += sum(
            1 for block in diagnostics.blocks for part in block.parts if part.kind == "attr"
        )
        self.parse_errors += diagnostics.parse_error_count

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "blocks_extracted": self.blocks_extracted,
            "attrs_extracted": self.attrs_extracted,
            "parse_errors": self.parse_errors,
        }

    def __str__(self) -> str:
        return (
            f"ExtractionStats(processed={self.files_processed}, "
            f"failed={self.files_failed}, blocks={self.blocks_extracted}, "
            f"attrs={self.attrs_extracted}, parse_errors={self.parse_errors})"
        )


def _relative_path(file_path: str, project_root: str) -> str:
    try:
        return os.path.relpath(file_path, project_root)
    except ValueError:
        logger.warning(
            "Cannot compute relative path for %s from %s. Using absolute path.",
            file_path,
            project_root,
        )
        return file_path


def _extract_file_with_diagnostics(
    file_path: str,
    project_root: Optional[str],
) -> FileExtractionDiagnostics:
    """Extract doc blocks from a single file with parse diagnostics."""
    file_path = os.path.abspath(file_path)

    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    ext = os.path.splitext(file_path)[1]
    if ext not in LUA_EXTENSIONS:
        raise ValueError(
            f"File {file_path} is not a Lua source file. "
            f"Expected one of: {LUA_EXTENSIONS}"
        )

    if project_root is None:
        resolved_root = os.path.dirname(file_path)
    else:
        resolved_root = os.path.abspath(project_root)
    relative_path = _relative_path(file_path, resolved_root)

    with source_file_scope(relative_path):
        tree, source_bytes = parse_file(file_path)
        parse_error_count = count_error_nodes(tree)

        if tree.root_node.has_error:
            logger.warning(
                "File %s contains syntax errors (%d error nodes)",
                relative_path,
                parse_error_count,
            )

        blocks = extract_doc_blocks_from_tree(tree, source_bytes, relative_path)
        logger.info("Extracted %d doc blocks from %s", len(blocks), relative_path)

    return FileExtractionDiagnostics(blocks=blocks, parse_error_count=parse_error_count)


def extract_file(file_path: str, project_root: Optional[str] = None) -> List[DocBlock]:
    """Extract all doc blocks from a single Lua source file.

    Args:
        file_path: Absolute or relative path to the Lua file.
        project_root: Project root for relative paths. If None, uses the
            file's parent directory.

    Returns:
        List of doc blocks from the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a Lua source file.

    Example:
        >>> blocks = extract_file("src/car.lua", "/path/to/project")
        >>> blocks[0].parts[0].kind
        'attr'
    """
    try:
        return _extract_file_with_diagnostics(file_path, project_root).blocks
    except Exception as e:
        logger.error("Error extracting doc blocks from %s: %s", file_path, e)
        raise


def _is_skipped_dir(name: str, exclude_dirs: Iterable[str]) -> bool:
    return name.startswith(".") or name in exclude_dirs


def discover_lua_files(
    directory: str,
    exclude_dirs: Optional[Iterable[str]] = None,
) -> List[str]:
    """Recursively discover all Lua source files in a directory.

    Args:
        directory: Root directory to search.
        exclude_dirs: Directory names to skip. Defaults to ``DEFAULT_EXCLUDE_DIRS``.
            Hidden directories are always skipped.

    Returns:
        Sorted list of absolute paths to Lua files.
    """
    skip = set(DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs)
    lua_files = []
    directory = os.path.abspath(directory)

    logger.info("Discovering Lua files in %s", directory)

    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if not _is_skipped_dir(d, skip)]
        for file in files:
            if os.path.splitext(file)[1] in LUA_EXTENSIONS:
                lua_files.append(os.path.join(root, file))

    logger.info("Found %d Lua files", len(lua_files))
    return sorted(lua_files)


def iter_extract_doc_blocks(
    directory: str,
    project_root: Optional[str] = None,
    continue_on_error: bool = True,
    exclude_dirs: Optional[Iterable[str]] = None,
    stats: Optional[ExtractionStats] = None,
) -> Iterator[DocBlock]:
    """Yield doc blocks file by file from a directory tree.

    Args:
        directory: Root directory to process.
        project_root: Root for relative paths. If None, uses ``directory``.
        continue_on_error: If False, re-raise the first per-file failure.
        exclude_dirs: Directory names to skip during discovery.
        stats: Optional stats object updated as files are processed.

    Raises:
        FileNotFoundError: If the directory does not exist.
    """
    directory = os.path.abspath(directory)
    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Directory not found: {directory}")

    project_root = directory if project_root is None else os.path.abspath(project_root)
    stats = stats if stats is not None else ExtractionStats()

    lua_files = discover_lua_files(directory, exclude_dirs)
    if not lua_files:
        logger.warning("No Lua files found in %s", directory)
        return

    for file_path in lua_files:
        try:
            diagnostics = _extract_file_with_diagnostics(file_path, project_root)
        except (FileNotFoundError, ValueError, OSError, UnicodeDecodeError) as e:
            logger.error("Failed to extract %s: %s", file_path, e)
            stats.files_failed += 1
            if not continue_on_error:
                raise
            continue
        stats.record(diagnostics)
        yield from diagnostics.blocks

    logger.info("Extraction complete: %s", stats)


def extract_directory(
    directory: str,
    project_root: Optional[str] = None,
    continue_on_error: bool = True,
    exclude_dirs: Optional[Iterable[str]] = None,
) -> tuple[List[DocBlock], ExtractionStats]:
    """Extract doc blocks from all Lua files in a directory tree.

    Returns:
        A tuple of (blocks, stats).

    Raises:
        FileNotFoundError: If directory does not exist.

    Example:
        >>> blocks, stats = extract_directory("/path/to/project")
        >>> print(f"{stats.blocks_extracted} blocks from {stats.files_processed} files")
    """
    stats = ExtractionStats()
    blocks = list(
        iter_extract_doc_blocks(
            directory,
            project_root=project_root,
            continue_on_error=continue_on_error,
            exclude_dirs=exclude_dirs,
            stats=stats,
        )
    )
    return blocks, stats


def iter_extract_to_dict_list(
    source: str,
    project_root: Optional[str] = None,
    exclude_dirs: Optional[Iterable[str]] = None,
    stats: Optional[ExtractionStats] = None,
) -> Iterator[Dict[str, Any]]:
    """Stream doc blocks as JSON-ready dictionaries from a file or directory."""
    source = os.path.abspath(source)
    if os.path.isfile(source):
        diagnostics = _extract_file_with_diagnostics(source, project_root)
        if stats is not None:
            stats.record(diagnostics)
        for block in diagnostics.blocks:
            yield block.to_dict()
    elif os.path.isdir(source):
        for block in iter_extract_doc_blocks(
            source, project_root, exclude_dirs=exclude_dirs, stats=stats
        ):
            yield block.to_dict()
    else:
        raise FileNotFoundError(f"Source not found: {source}")


def find_module_root(path: str) -> Optional[str]:
    """Return the module root file of a directory, or None.

    ``init.lua`` wins over ``<dirname>.lua``.
    """
    name = os.path.basename(os.path.normpath(path))
    for pattern in MODULE_ROOT_FILES:
        candidate = os.path.join(path, pattern.format(name=name))
        if os.path.isfile(candidate):
            return candidate
    return None


def build_module_tree(
    path: str,
    project_root: Optional[str] = None,
    exclude_dirs: Optional[Iterable[str]] = None,
) -> LuaModule:
    """Build the module hierarchy rooted at a project directory.

    A directory is a module whose source is its root file (see
    ``find_module_root``). Sub-directories become nested modules and every
    other ``.lua`` file becomes a leaf module named by its stem. A directory
    without a root file yields an empty module.

    Raises:
        FileNotFoundError: If ``path`` is not a directory.
    """
    path = os.path.abspath(path)
    if not os.path.isdir(path):
        raise FileNotFoundError(f"Directory not found: {path}")
    project_root = path if project_root is None else os.path.abspath(project_root)
    skip = set(DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs)

    logger.debug("build_module_tree %s", path)
    module = LuaModule(name=os.path.basename(path))

    root_file = find_module_root(path)
    if root_file is None:
        logger.warning("No module root (init.lua or %s.lua) in %s", module.name, path)
        return module

    module.path = _relative_path(root_file, project_root)
    module.blocks = _extract_file_with_diagnostics(root_file, project_root).blocks

    for entry in sorted(os.scandir(path), key=lambda e: e.name):
        if entry.is_dir():
            if not _is_skipped_dir(entry.name, skip):
                module.modules.append(build_module_tree(entry.path, project_root, skip))
        elif os.path.splitext(entry.name)[1] in LUA_EXTENSIONS:
            if os.path.samefile(entry.path, root_file):
                continue
            module.modules.append(
                LuaModule(
                    name=os.path.splitext(entry.name)[0],
                    path=_relative_path(entry.path, project_root),
                    blocks=_extract_file_with_diagnostics(entry.path, project_root).blocks,
                )
            )

    return module
