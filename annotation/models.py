"""
Data models for parsed EmmyLua annotations.

Types, attributes and comment parts are frozen dataclasses built once per
parsed comment. ``to_dict`` produces JSON-ready payloads tagged with ``kind``.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple, Union


class _Node:
    """Shared ``to_dict`` for the annotation models."""

    kind: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"kind": self.kind}
        for f in fields(self):
            payload[f.name] = _serialize(getattr(self, f.name))
        return payload


def _serialize(value: Any) -> Any:
    if isinstance(value, _Node):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [_serialize(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# Type expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SingleType(_Node):
    """A bare type name such as ``string`` or ``Car``."""

    kind: ClassVar[str] = "single"
    name: str


@dataclass(frozen=True)
class FunType(_Node):
    """A function signature: ``fun(a: string, b: number): boolean``."""

    kind: ClassVar[str] = "fun"
    args: Tuple[Tuple[str, "Type"], ...]
    ret: "Type"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "args": [{"name": name, "type": ty.to_dict()} for name, ty in self.args],
            "ret": self.ret.to_dict(),
        }


@dataclass(frozen=True)
class UnionType(_Node):
    """Two or more alternative types, in source order."""

    kind: ClassVar[str] = "union"
    members: Tuple["Type", ...]

    def __post_init__(self) -> None:
        if len(self.members) < 2:
            raise ValueError(
                f"UnionType needs at least two members, got {len(self.members)}"
            )

    def extended(self, member: "Type") -> "UnionType":
        """Return a union with ``member`` appended after the current members."""
        return UnionType(self.members + (member,))


@dataclass(frozen=True)
class ArrayType(_Node):
    """An array of a single element type: ``string[]``."""

    kind: ClassVar[str] = "array"
    element: "Type"


@dataclass(frozen=True)
class ParameterizedType(_Node):
    """A type applied to type arguments: ``table<string, number>``."""

    kind: ClassVar[str] = "parameterized"
    name: str
    args: Tuple["Type", ...]


Type = Union[SingleType, FunType, UnionType, ArrayType, ParameterizedType]

# Placeholder for missing or unparseable type text
ANY = SingleType("any")


def union_of(acc: Type, member: Type) -> UnionType:
    """Fold ``member`` into ``acc``, extending ``acc`` when it is already a union."""
    if isinstance(acc, UnionType):
        return acc.extended(member)
    return UnionType((acc, member))


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------

class Visibility(Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"


@dataclass(frozen=True)
class Generic(_Node):
    """One entry of a ``@generic`` list."""

    kind: ClassVar[str] = "generic_param"
    name: str
    ty: Optional[Type] = None


@dataclass(frozen=True)
class ClassAttr(_Node):
    kind: ClassVar[str] = "class"
    ty: Type
    parent_ty: Optional[Type]
    comment: str


@dataclass(frozen=True)
class TypeAttr(_Node):
    kind: ClassVar[str] = "type"
    ty: Type
    comment: str


@dataclass(frozen=True)
class AliasAttr(_Node):
    kind: ClassVar[str] = "alias"
    new_name: str
    old_name: Type


@dataclass(frozen=True)
class ParamAttr(_Node):
    kind: ClassVar[str] = "param"
    name: str
    ty: Type
    comment: str


@dataclass(frozen=True)
class ReturnAttr(_Node):
    kind: ClassVar[str] = "return"
    ty: Type
    comment: str


@dataclass(frozen=True)
class FieldAttr(_Node):
    kind: ClassVar[str] = "field"
    vis: Visibility
    name: str
    ty: Type
    comment: str


@dataclass(frozen=True)
class GenericAttr(_Node):
    kind: ClassVar[str] = "generic"
    generics: Tuple[Generic, ...]


@dataclass(frozen=True)
class VarArgAttr(_Node):
    kind: ClassVar[str] = "vararg"
    ty: Type


@dataclass(frozen=True)
class LangAttr(_Node):
    kind: ClassVar[str] = "lang"
    name: str


@dataclass(frozen=True)
class SeeAttr(_Node):
    kind: ClassVar[str] = "see"
    text: str


@dataclass(frozen=True)
class UnknownAttr(_Node):
    """A tag outside the known table, kept as its raw ``@word`` text."""

    kind: ClassVar[str] = "unknown"
    raw: str


Attr = Union[
    ClassAttr,
    TypeAttr,
    AliasAttr,
    ParamAttr,
    ReturnAttr,
    FieldAttr,
    GenericAttr,
    VarArgAttr,
    LangAttr,
    SeeAttr,
    UnknownAttr,
]


# ---------------------------------------------------------------------------
# Classified comments
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MarkdownPart(_Node):
    """Plain prose, kept verbatim."""

    kind: ClassVar[str] = "markdown"
    text: str


@dataclass(frozen=True)
class AttrPart(_Node):
    """A comment that starts with an annotation tag."""

    kind: ClassVar[str] = "attr"
    attr: Attr


SingleCommentPart = Union[MarkdownPart, AttrPart]
