"""Turn normalized declarations back into source text."""

from __future__ import annotations

from typing import List, Sequence

from import_optimizer.models import ImportDeclaration
from import_optimizer.models import SourceDocument


def format_declaration(decl: ImportDeclaration) -> List[str]:
    """Return the canonical statement(s) for a structured declaration.

    A declaration holding both a namespace binding and a named list cannot be
    written as a single statement, so the namespace gets a statement of its own.
    """
    quote = decl.quote
    source = f"{quote}{decl.module_path}{quote}"
    suffix = f" {decl.trailing_comment}" if decl.trailing_comment else ""
    if decl.is_side_effect:
        return [f"import {source};{suffix}"]

    clause: List[str] = []
    extra: List[str] = []
    if decl.default_binding:
        clause.append(decl.default_binding)
    if decl.namespace_binding and decl.has_named_list:
        extra.append(f"import * as {decl.namespace_binding} from {source};")
    elif decl.namespace_binding:
        clause.append(f"* as {decl.namespace_binding}")
    if decl.has_named_list:
        clause.append("{" + ", ".join(str(binding) for binding in decl.named_bindings) + "}")
    return [f"import {', '.join(clause)} from {source};{suffix}"] + extra


def declaration_lines(decl: ImportDeclaration) -> List[str]:
    """Comments plus statement lines for one declaration.

    A regenerated statement loses the comments between its parts, so they are
    written above it.
    """
    chunks = list(decl.leading_comments)
    if decl.rewritten and not decl.opaque:
        chunks.extend(decl.inner_comments)
        chunks.extend(format_declaration(decl))
    else:
        chunks.append(decl.raw_text)
    # block comments and kept statements may span several lines
    return [line for chunk in chunks for line in chunk.split("\n")]


def render(document: SourceDocument, declarations: Sequence[ImportDeclaration]) -> str:
    """Rebuild the file from its header, the given declarations and its body.

    Exactly one blank line separates the imports from the body; the body text
    itself is appended unchanged.
    """
    newline = document.newline
    lines: List[str] = []
    if document.header:
        lines.extend(document.header)
        if document.header_gap and declarations:
            lines.append("")
    for decl in declarations:
        lines.extend(declaration_lines(decl))

    text = newline.join(lines)
    if document.body:
        if text:
            text += newline * 2
        text += document.body
    elif text and document.trailing_newline:
        text += newline
    return text
