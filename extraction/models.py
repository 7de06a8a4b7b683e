"""
Data models for extracted Lua documentation.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple

from annotation.models import SingleCommentPart


@dataclass
class DocBlock:
    """A run of adjacent ``---`` doc comment lines in one Lua file.

    Attributes:
        file_path: Path relative to the project root
        start_line: 1-indexed line of the first comment in the block
        end_line: 1-indexed line of the last comment in the block
        text: Cleaned comment text, one line per source comment
        parts: Classified parts; adjacent prose lines share one markdown part
    """

    file_path: str
    start_line: int
    end_line: int
    text: str
    parts: Tuple[SingleCommentPart, ...]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the block to a dictionary suitable for JSON serialization."""
        return {
            "file_path": self.file_path,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "text": self.text,
            "parts": [part.to_dict() for part in self.parts],
        }


@dataclass
class LuaModule:
    """A node of the project's module hierarchy.

    Attributes:
        name: Directory name or file stem
        path: Path of the module's source file, or None when it has none
        modules: Child modules, sorted by name
        blocks: Doc blocks found in the module's own source file
    """

    name: str
    path: Optional[str] = None
    modules: List["LuaModule"] = field(default_factory=list)
    blocks: List[DocBlock] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "modules": [m.to_dict() for m in self.modules],
            "blocks": [b.to_dict() for b in self.blocks],
        }

    def find(self, name: str) -> Optional["LuaModule"]:
        """Return the direct child module called ``name``, if any."""
        for module in self.modules:
            if module.name == name:
                return module
        return None
