"""
AST traversal and doc-comment extraction logic.

This module walks the Lua AST, picks out EmmyLua doc comments (``---`` lines),
groups adjacent ones into blocks and classifies each line with the
annotation parser.
"""

import logging
from typing import Iterator, List, Optional

from tree_sitter import Node, Tree

from annotation.models import MarkdownPart, SingleCommentPart
from annotation.parser import parse_comment
from extraction.config import (
    BLOCK_COMMENT_PREFIXES,
    COMMENT_NODE,
    DOC_COMMENT_PREFIX,
)
from extraction.models import DocBlock

logger = logging.getLogger(__name__)


def is_doc_comment(comment_text: str) -> bool:
    """Check if a comment is an EmmyLua documentation comment.

    Args:
        comment_text: The text content of the comment, delimiters included.

    Returns:
        True for ``---`` comments, including a bare ``---`` blank line.
        Block comments and longer all-dash separator rules are not doc
        comments.
    """
    stripped = comment_text.strip()
    if any(stripped.startswith(prefix) for prefix in BLOCK_COMMENT_PREFIXES):
        return False
    if not stripped.startswith(DOC_COMMENT_PREFIX):
        return False
    return stripped == DOC_COMMENT_PREFIX or stripped.strip("-") != ""


def clean_doc_comment(comment_text: str) -> str:
    """Strip the ``---`` marker and the single space that usually follows it.

    Args:
        comment_text: Raw comment text with its delimiter.

    Returns:
        The comment body, right-trimmed.
    """
    stripped = comment_text.strip()
    if stripped.startswith(DOC_COMMENT_PREFIX):
        stripped = stripped[len(DOC_COMMENT_PREFIX):]
    if stripped.startswith(" "):
        stripped = stripped[1:]
    return stripped.rstrip()


def iter_comment_nodes(tree: Tree) -> Iterator[Node]:
    """Yield every comment node in source order."""
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == COMMENT_NODE:
            yield node
            continue
        stack.extend(reversed(node.children))


def _node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def classify_lines(lines: List[str]) -> List[SingleCommentPart]:
    """Classify cleaned comment lines, merging adjacent prose.

    Blank lines inside prose are kept as paragraph breaks.
    """
    parts: List[SingleCommentPart] = []
    prose: List[str] = []

    def flush() -> None:
        text = "\n".join(prose).strip("\n")
        if text:
            parts.append(MarkdownPart(text))
        prose.clear()

    for line in lines:
        part = parse_comment(line)
        if part is None:
            prose.append("")
        elif isinstance(part, MarkdownPart):
            prose.append(part.text)
        else:
            flush()
            parts.append(part)
    flush()
    return parts


def _build_block(nodes: List[Node], source_bytes: bytes, file_path: str) -> DocBlock:
    lines = [clean_doc_comment(_node_text(n, source_bytes)) for n in nodes]
    return DocBlock(
        file_path=file_path,
        start_line=nodes[0].start_point.row + 1,
        end_line=nodes[-1].end_point.row + 1,
        text="\n".join(lines),
        parts=tuple(classify_lines(lines)),
    )


def extract_doc_blocks_from_tree(
    tree: Tree,
    source_bytes: bytes,
    file_path: str,
) -> List[DocBlock]:
    """Extract all doc-comment blocks from a parsed Lua file.

    Doc comments on consecutive lines form one block; any gap, code line or
    ordinary comment ends the block.

    Args:
        tree: Parsed tree-sitter tree.
        source_bytes: Raw source file bytes.
        file_path: Path recorded on each block.

    Returns:
        Doc blocks in source order.
    """
    blocks: List[DocBlock] = []
    current: List[Node] = []
    last_row: Optional[int] = None

    for node in iter_comment_nodes(tree):
        if not is_doc_comment(_node_text(node, source_bytes)):
            if current:
                blocks.append(_build_block(current, source_bytes, file_path))
                current = []
            last_row = None
            continue

        if current and last_row is not None and node.start_point.row != last_row + 1:
            blocks.append(_build_block(current, source_bytes, file_path))
            current = []
        current.append(node)
        last_row = node.end_point.row

    if current:
        blocks.append(_build_block(current, source_bytes, file_path))

    logger.debug("Found %d doc blocks in %s", len(blocks), file_path)
    return blocks
