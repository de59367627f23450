"""Data models shared by the classifier, rule engine and reconstructor."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple


class BindingKind(str, Enum):
    """Shape of the bindings an import declaration introduces."""

    SIDE_EFFECT = "side-effect"
    DEFAULT = "default"
    NAMESPACE = "namespace"
    NAMED = "named"
    MIXED = "mixed"


@dataclass(frozen=True)
class NamedBinding:
    """A single ``name`` or ``name as alias`` entry of a braced list."""

    name: str
    alias: Optional[str] = None

    def __str__(self) -> str:
        if self.alias is None:
            return self.name
        return f"{self.name} as {self.alias}"


@dataclass
class ImportDeclaration:
    """One logical import statement, possibly spanning several lines."""

    raw_text: str
    source_order: int
    lineno: int = 0
    module_path: Optional[str] = None
    default_binding: Optional[str] = None
    namespace_binding: Optional[str] = None
    named_bindings: Tuple[NamedBinding, ...] = ()
    has_named_list: bool = False
    leading_comments: Tuple[str, ...] = ()
    inner_comments: Tuple[str, ...] = ()
    trailing_comment: Optional[str] = None
    quote: str = "'"
    opaque: bool = False
    rewritten: bool = False

    @property
    def binding_kind(self) -> Optional[BindingKind]:
        if self.opaque:
            return None
        forms = [
            self.default_binding is not None,
            self.namespace_binding is not None,
            self.has_named_list,
        ]
        if sum(forms) > 1:
            return BindingKind.MIXED
        if self.default_binding is not None:
            return BindingKind.DEFAULT
        if self.namespace_binding is not None:
            return BindingKind.NAMESPACE
        if self.has_named_list:
            return BindingKind.NAMED
        return BindingKind.SIDE_EFFECT

    @property
    def is_side_effect(self) -> bool:
        return self.binding_kind is BindingKind.SIDE_EFFECT

    def dedupe_key(self) -> tuple:
        """Structural identity used by the dedupe rule."""
        return (
            self.module_path,
            self.binding_kind,
            frozenset(self.named_bindings),
            self.default_binding,
            self.namespace_binding,
        )

    def copy(self, **changes) -> "ImportDeclaration":
        return replace(self, **changes)


@dataclass
class SourceDocument:
    """A source file split into its import region and its untouched body."""

    declarations: List[ImportDeclaration] = field(default_factory=list)
    body: str = ""
    header: Tuple[str, ...] = ()
    header_gap: bool = False
    newline: str = "\n"
    trailing_newline: bool = False
    warnings: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def has_imports(self) -> bool:
        return bool(self.declarations)
