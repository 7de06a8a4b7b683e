"""
Configuration constants for Lua doc-comment extraction.

Defines the tree-sitter node types and file-system rules used when walking
a Lua project.
"""

from typing import Set

# Root node type produced by tree-sitter-lua
CHUNK_NODE: str = "chunk"

# Comment node type (covers both -- line and --[[ ]] block comments)
COMMENT_NODE: str = "comment"

# EmmyLua doc comments start with three dashes
DOC_COMMENT_PREFIX: str = "---"

# Block comment openers that must not be read as doc comments
BLOCK_COMMENT_PREFIXES: tuple = (
    "--[[",
    "--[=",
)

# Lua file extensions
LUA_EXTENSIONS: Set[str] = {
    ".lua",
}

# Module root file names, in lookup order ("{name}" is the directory name)
MODULE_ROOT_FILES: tuple = (
    "init.lua",
    "{name}.lua",
)

# Directories never descended into during discovery
DEFAULT_EXCLUDE_DIRS: Set[str] = {
    "node_modules",
    "__pycache__",
    "build",
    "dist",
    "out",
    "out_dir",
    "lua_modules",
}
