"""
Layer 1: Extraction Engine

Tree-sitter-based Lua source reader and doc-comment extractor.
Finds EmmyLua ``---`` comments, classifies them with the annotation parser
and arranges the results into a module hierarchy.
"""

from extraction.models import DocBlock, LuaModule
from extraction.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from extraction.traversal import extract_doc_blocks_from_tree
from extraction.extractor import (
    extract_file,
    extract_directory,
    iter_extract_doc_blocks,
    iter_extract_to_dict_list,
    discover_lua_files,
    build_module_tree,
    ExtractionStats,
)

__all__ = [
    # Data models
    "DocBlock",
    "LuaModule",
    "ExtractionStats",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    # Mid-level extraction
    "extract_doc_blocks_from_tree",
    # High-level orchestration
    "extract_file",
    "extract_directory",
    "iter_extract_doc_blocks",
    "iter_extract_to_dict_list",
    "discover_lua_files",
    "build_module_tree",
]
