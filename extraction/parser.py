"""
Tree-sitter parser initialization and Lua file parsing utilities.

This module provides functions to initialize the Lua parser and parse source files.
"""

import logging
from typing import Tuple
import tree_sitter_lua as tslua
from tree_sitter import Language, Parser, Tree

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
LUA_LANGUAGE = Language(tslua.language())


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for Lua.

    Returns:
        A Parser instance configured with the Lua language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"local x = 1")
    """
    parser = Parser(LUA_LANGUAGE)
    logger.debug("Created tree-sitter Lua parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of Lua source code.

    Args:
        source: UTF-8 encoded bytes of Lua source code.

    Returns:
        A Tree object representing the parsed AST.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"local function foo() end")
        >>> tree.root_node.type
        'chunk'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser()
    tree = parser.parse(source)

    if tree.root_node.has_error:
        logger.warning("Parsed tree contains syntax errors")

    logger.debug("Parsed %d bytes of Lua code", len(source))
    return tree


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a Lua source file from disk.

    Args:
        file_path: Path to the .lua file.

    Returns:
        A tuple of (Tree, source_bytes).

    Raises:
        FileNotFoundError: If the file does not exist.
        IOError: If the file cannot be read.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except FileNotFoundError:
        logger.error("File not found: %s", file_path)
        raise
    except IOError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise

    tree = parse_bytes(source_bytes)
    logger.debug("Successfully parsed file: %s", file_path)
    return tree, source_bytes


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree."""
    count = 0
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            count += 1
        if node.has_error:
            stack.extend(node.children)
    return count
