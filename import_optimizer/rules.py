"""Rules module for import-optimizer.

This module defines the rule configuration and the three normalization rules
applied to parsed import declarations:

* merge: combine declarations importing from the same module path;
* dedupe: drop declarations structurally identical to an earlier one;
* sort: order declarations by module path.

The rules always run in the order merge, dedupe, sort, whichever of them are
enabled, because merging can create fresh duplicates and the final order must
be computed on the surviving declarations.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from import_optimizer.errors import Warnings
from import_optimizer.errors import merge_conflict
from import_optimizer.models import ImportDeclaration
from import_optimizer.models import NamedBinding

LOG = logging.getLogger(__name__)

RELATIVE_POLICIES = ("inline", "first", "last")


@dataclass(frozen=True)
class RuleConfiguration:
    """Which rules run, and how sorting compares module paths.

    ``relative_imports`` decides where ``./`` and ``../`` paths go: ``inline``
    compares them like any other path (plain code point order), ``first`` and
    ``last`` group them before or after bare module names.
    """

    sort: bool = True
    dedupe: bool = True
    merge: bool = True
    relative_imports: str = "inline"
    case_sensitive: bool = True

    def __post_init__(self) -> None:
        for name in ("sort", "dedupe", "merge", "case_sensitive"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"'{name}' must be a boolean, got {getattr(self, name)!r}")
        if self.relative_imports not in RELATIVE_POLICIES:
            raise ValueError(
                f"'relative_imports' must be one of {', '.join(RELATIVE_POLICIES)}, "
                f"got {self.relative_imports!r}"
            )

    def text_key(self, value: str) -> Tuple[str, ...]:
        if self.case_sensitive:
            return (value,)
        return (value.casefold(), value)

    def path_key(self, path: str) -> tuple:
        group = 0
        if self.relative_imports != "inline":
            relative = path.startswith(".")
            group = int(relative != (self.relative_imports == "first"))
        return (group,) + self.text_key(path)

    def binding_key(self, binding: NamedBinding) -> tuple:
        return self.text_key(binding.name) + self.text_key(binding.alias or "")

    def describe(self) -> str:
        flags = ", ".join(
            f"{name}={'on' if getattr(self, name) else 'off'}" for name in ("sort", "dedupe", "merge")
        )
        case = "case-sensitive" if self.case_sensitive else "case-insensitive"
        return f"{flags} (relative imports: {self.relative_imports}, {case})"


def _conflicts(target: ImportDeclaration, decl: ImportDeclaration) -> List[Tuple[str, str, str]]:
    """Return ``(form, kept, dropped)`` for each binding ``target`` already holds differently."""
    conflicts = []
    for form in ("default", "namespace"):
        kept = getattr(target, f"{form}_binding")
        other = getattr(decl, f"{form}_binding")
        if kept and other and kept != other:
            conflicts.append((form, kept, other))
    return conflicts


def _absorbed_comments(decl: ImportDeclaration) -> Tuple[str, ...]:
    """Comments of a declaration that is folded into another one."""
    comments = decl.leading_comments + decl.inner_comments
    if decl.trailing_comment:
        return comments + (decl.trailing_comment,)
    return comments


def _combine(target: ImportDeclaration, decl: ImportDeclaration) -> ImportDeclaration:
    named = list(target.named_bindings)
    named.extend(binding for binding in decl.named_bindings if binding not in named)
    default_binding = target.default_binding or decl.default_binding
    namespace_binding = target.namespace_binding or decl.namespace_binding
    # an empty ``{}`` only survives when nothing else is imported
    has_named_list = bool(named) or (
        default_binding is None
        and namespace_binding is None
        and (target.has_named_list or decl.has_named_list)
    )
    return target.copy(
        default_binding=default_binding,
        namespace_binding=namespace_binding,
        named_bindings=tuple(named),
        has_named_list=has_named_list,
        leading_comments=target.leading_comments + _absorbed_comments(decl),
        rewritten=True,
    )


def merge_declarations(declarations: Sequence[ImportDeclaration], warnings: Warnings) -> List[ImportDeclaration]:
    """Merge structured declarations sharing a module path.

    The merged declaration keeps the position of the earliest contributor.
    Only the first-seen default and namespace binding survive for a path; a
    different one seen later is dropped and reported, while the rest of its
    declaration still merges into the group.
    """
    result: List[ImportDeclaration] = []
    groups: Dict[str, int] = {}
    for decl in declarations:
        if decl.opaque:
            result.append(decl)
            continue
        index = groups.get(decl.module_path)
        if index is None:
            groups[decl.module_path] = len(result)
            result.append(decl)
            continue
        for form, kept, dropped in _conflicts(result[index], decl):
            warning = merge_conflict(decl.lineno, decl.module_path, form, kept, dropped)
            LOG.warning("line %s: %s", warning[0], warning[1])
            warnings.append(warning)
        LOG.debug(f"Merging line {decl.lineno} into '{decl.module_path}'")
        result[index] = _combine(result[index], decl)
    return result


def dedupe_declarations(declarations: Sequence[ImportDeclaration]) -> List[ImportDeclaration]:
    """Drop declarations structurally identical to an earlier one.

    Opaque declarations are never compared, not even with each other.
    """
    result: List[ImportDeclaration] = []
    seen: Dict[tuple, int] = {}
    for decl in declarations:
        if decl.opaque:
            result.append(decl)
            continue
        key = decl.dedupe_key()
        index = seen.get(key)
        if index is None:
            seen[key] = len(result)
            result.append(decl)
            continue
        LOG.debug(f"Dropping duplicate import of '{decl.module_path}' on line {decl.lineno}")
        carried = _absorbed_comments(decl)
        if carried:
            survivor = result[index]
            result[index] = survivor.copy(leading_comments=survivor.leading_comments + carried)
    return result


def _moved(before: Sequence[ImportDeclaration], after: Sequence[ImportDeclaration]) -> List[bool]:
    """Flag the entries of ``after`` whose neighbours changed side.

    An entry counts as unmoved when everything placed before it was also
    before it in ``before``, and likewise for everything after it.
    """
    position = {id(decl): index for index, decl in enumerate(before)}
    order = [position[id(decl)] for decl in after]
    moved = [False] * len(order)
    highest = -1
    for index, value in enumerate(order):
        if value < highest:
            moved[index] = True
        highest = max(highest, value)
    lowest = len(order)
    for index in range(len(order) - 1, -1, -1):
        if order[index] > lowest:
            moved[index] = True
        lowest = min(lowest, order[index])
    return moved


def sort_declarations(
    declarations: Sequence[ImportDeclaration], config: RuleConfiguration
) -> List[ImportDeclaration]:
    """Sort declarations by module path, and the named bindings inside each one.

    Opaque declarations without a recognizable path keep their slot. Moved
    declarations, and declarations whose bindings were reordered, are marked
    for regeneration.
    """
    slots = [index for index, decl in enumerate(declarations) if decl.module_path is not None]
    ordered = sorted(
        (declarations[index] for index in slots),
        key=lambda decl: config.path_key(decl.module_path),
    )
    arranged = list(declarations)
    for slot, decl in zip(slots, ordered):
        arranged[slot] = decl

    result: List[ImportDeclaration] = []
    for decl, moved in zip(arranged, _moved(declarations, arranged)):
        named = decl.named_bindings
        if not decl.opaque:
            named = tuple(sorted(named, key=config.binding_key))
        if named != decl.named_bindings or (moved and not decl.rewritten):
            decl = decl.copy(named_bindings=named, rewritten=True)
        result.append(decl)
    return result


def normalize(
    declarations: Sequence[ImportDeclaration], config: Optional[RuleConfiguration] = None
) -> Tuple[List[ImportDeclaration], Warnings]:
    """Apply the enabled rules and return ``(declarations, warnings)``.

    The input is not modified. With sort disabled the result follows the
    original source order, merged declarations sitting where their earliest
    contributor was.
    """
    config = config or RuleConfiguration()
    warnings: Warnings = []
    result = sorted(declarations, key=lambda decl: decl.source_order)
    if config.merge:
        result = merge_declarations(result, warnings)
    if config.dedupe:
        result = dedupe_declarations(result)
    result.sort(key=lambda decl: decl.source_order)
    if config.sort:
        result = sort_declarations(result, config)
    LOG.debug(f"Normalized {len(declarations)} declarations into {len(result)}")
    return result, warnings
