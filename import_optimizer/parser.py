"""Parser module for import-optimizer.

This module splits source text into its leading import region and the body
that follows it, and parses each import statement of the region into an
:class:`~import_optimizer.models.ImportDeclaration`.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple

from import_optimizer.errors import FatalMalformation
from import_optimizer.errors import parse_warning
from import_optimizer.models import ImportDeclaration
from import_optimizer.models import NamedBinding
from import_optimizer.models import SourceDocument

LOG = logging.getLogger(__name__)

IDENT = r"[A-Za-z_$\u00a0-\uffff][\w$\u00a0-\uffff]*"
STRING = r"""(?P<quote>['"])(?P<path>(?:(?!(?P=quote))[^\n])+)(?P=quote)"""
TRAILING = r"\s*;?\s*(?P<comment>//[^\n]*|/\*(?:(?!\*/).)*\*/)?\s*\Z"

SIDE_EFFECT_RE = re.compile(rf"^import\s*{STRING}{TRAILING}", re.S)
FROM_RE = re.compile(rf"^import\s*(?P<clause>.+?)\s*\bfrom\s*{STRING}{TRAILING}", re.S)
DEFAULT_RE = re.compile(rf"^(?P<default>{IDENT})\s*(?:,\s*(?P<rest>.*))?\Z", re.S)
NAMESPACE_RE = re.compile(rf"^\*\s*as\s+(?P<name>{IDENT})\Z")
NAMED_RE = re.compile(
    rf"""^(?P<name>(?:type\s+)?(?:{IDENT}|'[^'\n]*'|"[^"\n]*"))(?:\s+as\s+(?P<alias>{IDENT}))?\Z"""
)

# ``import(`` and ``import.meta`` are expressions, not declarations.
IMPORT_START_RE = re.compile(r"""^import(?=[\s{*'"])""")
FROM_TAIL_RE = re.compile(r"""^from(?=[\s'"])""")
PATH_HINT_RES = (
    re.compile(r"""\bfrom\s*(['"])([^'"\n]+)\1"""),
    re.compile(r"""\brequire\(\s*(['"])([^'"\n]+)\1"""),
    re.compile(r"""^import\s*(['"])([^'"\n]+)\1"""),
)
_NOISE_RE = re.compile(r"""'[^'\n]*'|"[^"\n]*"|`[^`]*`|//[^\n]*|/\*.*?\*/""", re.S)


def _strip_noise(text: str, keep_strings: bool = False) -> str:
    """Drop comments, and string contents, from ``text``."""

    def replace(match: re.Match) -> str:
        token = match.group(0)
        if keep_strings and token[0] in "'\"`":
            return token[0] * 2
        return ""

    return _NOISE_RE.sub(replace, text)


def _brace_depth(text: str) -> int:
    """Return the number of unclosed ``{`` outside strings and comments."""
    cleaned = _strip_noise(text)
    return cleaned.count("{") - cleaned.count("}")


def _open_comment(text: str) -> bool:
    return "/*" in _strip_noise(text)


def _split_comments(statement: str) -> Tuple[str, Tuple[str, ...]]:
    """Pull the comments inside a statement out of it.

    A comment that ends the statement stays in place as its trailing comment.
    """
    comments: List[str] = []

    def replace(match: re.Match) -> str:
        token = match.group(0)
        if token[0] in "'\"`" or not statement[match.end():].strip():
            return token
        comments.append(token)
        return " "

    return _NOISE_RE.sub(replace, statement), tuple(comments)


def _dedent(lines: Sequence[str]) -> List[str]:
    """Strip line endings and remove the first line's indentation from every line."""
    stripped = [line.rstrip() for line in lines]
    first = stripped[0]
    indent = first[: len(first) - len(first.lstrip())]
    result = [first.lstrip()]
    for line in stripped[1:]:
        result.append(line[len(indent):] if line.startswith(indent) else line.lstrip())
    return result


def extract_module_path(statement: str) -> Optional[str]:
    """Best-effort module path of a statement that does not fully parse."""
    for pattern in PATH_HINT_RES:
        match = pattern.search(statement)
        if match:
            return match.group(2)
    return None


def _parse_named(inner: str) -> Optional[Tuple[NamedBinding, ...]]:
    items = [item.strip() for item in inner.split(",")]
    if items and items[-1] == "":
        # a trailing comma is allowed, an empty list is ``{}``
        items.pop()
    bindings: List[NamedBinding] = []
    for item in items:
        match = NAMED_RE.match(item)
        if not match:
            return None
        binding = NamedBinding(re.sub(r"\s+", " ", match.group("name")), match.group("alias"))
        if binding in bindings:
            return None
        bindings.append(binding)
    return tuple(bindings)


def _parse_clause(clause: str) -> Optional[dict]:
    """Parse the part between ``import`` and ``from`` into binding fields."""
    fields: dict = {}
    clause = clause.strip()
    if not clause.startswith(("{", "*")):
        match = DEFAULT_RE.match(clause)
        if not match:
            return None
        fields["default_binding"] = match.group("default")
        rest = match.group("rest")
        if rest is None:
            return fields
        clause = rest.strip()
        if not clause:
            return None

    if clause.startswith("*"):
        match = NAMESPACE_RE.match(clause)
        if not match:
            return None
        fields["namespace_binding"] = match.group("name")
    elif clause.startswith("{") and clause.endswith("}"):
        named = _parse_named(clause[1:-1])
        if named is None:
            return None
        fields["named_bindings"] = named
        fields["has_named_list"] = True
    else:
        return None
    return fields


def parse_declaration(
    statement: str,
    source_order: int,
    lineno: int = 0,
    leading_comments: Tuple[str, ...] = (),
) -> ImportDeclaration:
    """Parse one import statement.

    Comments between the parts of the statement are kept in ``inner_comments``.
    Statements that are not plain ECMAScript imports (``import type``,
    ``import x = require(...)``, import attributes, code after the statement)
    come back with ``opaque`` set and only a best-effort ``module_path``.
    """
    decl = ImportDeclaration(
        raw_text=statement,
        source_order=source_order,
        lineno=lineno,
        leading_comments=leading_comments,
    )
    code, inner_comments = _split_comments(statement)
    match = SIDE_EFFECT_RE.match(code)
    fields: Optional[dict] = {}
    if not match:
        match = FROM_RE.match(code)
        fields = _parse_clause(match.group("clause")) if match else None

    if match and fields is not None:
        decl.module_path = match.group("path")
        decl.quote = match.group("quote")
        decl.trailing_comment = match.group("comment")
        decl.inner_comments = inner_comments
        for name, value in fields.items():
            setattr(decl, name, value)
        return decl

    decl.opaque = True
    decl.module_path = extract_module_path(statement)
    return decl


def _block_comment_end(lines: Sequence[str], start: int) -> Optional[int]:
    """Return the index after a ``/* */`` block starting at ``start``.

    ``None`` means code follows the block on its closing line, so the block is
    not a standalone comment.
    """
    first = lines[start].strip()[2:]
    index = start
    text = first
    while "*/" not in text:
        index += 1
        if index >= len(lines):
            raise FatalMalformation(start + 1, "unterminated block comment in import region")
        text = lines[index]
    if text[text.index("*/") + 2:].strip():
        return None
    return index + 1


def _statement_end(lines: Sequence[str], start: int) -> int:
    """Return the index after the import statement starting at ``start``.

    The statement runs until its braced list is closed and no ``/*`` comment
    is left open.
    """
    text = lines[start]
    end = start + 1
    while _brace_depth(text) > 0 or _open_comment(text):
        if end >= len(lines):
            if _brace_depth(text) > 0:
                raise FatalMalformation(start + 1, "unterminated import binding list")
            raise FatalMalformation(start + 1, "unterminated comment in import statement")
        text += lines[end]
        end += 1
    if not re.search(r"""['"]""", _strip_noise(text, keep_strings=True)):
        if end < len(lines) and FROM_TAIL_RE.match(lines[end].strip()):
            end += 1
    return end


def _scan(lines: Sequence[str]) -> List[Tuple[str, int, int]]:
    """Split the leading lines into ``(kind, start, end)`` items.

    The scan stops at the first line that is not blank, a comment or an import;
    everything from there on is body.
    """
    items: List[Tuple[str, int, int]] = []
    index = 0
    while index < len(lines):
        stripped = lines[index].strip()
        if not stripped:
            items.append(("blank", index, index + 1))
            index += 1
        elif index == 0 and stripped.startswith("#!"):
            items.append(("shebang", index, index + 1))
            index += 1
        elif stripped.startswith("//"):
            items.append(("comment", index, index + 1))
            index += 1
        elif stripped.startswith("/*"):
            end = _block_comment_end(lines, index)
            if end is None:
                break
            items.append(("comment", index, end))
            index = end
        elif IMPORT_START_RE.match(stripped):
            end = _statement_end(lines, index)
            items.append(("import", index, end))
            index = end
        else:
            break
    return items


def classify(text: str) -> SourceDocument:
    """Split ``text`` into header comments, import declarations and body.

    Raises:
        FatalMalformation: if the import region cannot be delimited.
    """
    newline = "\r\n" if "\r\n" in text else "\n"
    lines = [line for line in re.split(r"(?<=\n)", text) if line]
    items = _scan(lines)
    import_positions = [pos for pos, item in enumerate(items) if item[0] == "import"]
    if not import_positions:
        LOG.debug("No import declarations found.")
        return SourceDocument(body=text, newline=newline)

    first, last = import_positions[0], import_positions[-1]
    document = SourceDocument(newline=newline)

    # Comments above the first import that are separated from it by a blank
    # line stay pinned at the top of the file, the rest move with the import.
    leading = items[:first]
    blanks = [pos for pos, item in enumerate(leading) if item[0] == "blank"]
    split = blanks[-1] + 1 if blanks else 0
    if leading and leading[0][0] == "shebang":
        split = max(split, 1)
    header_items = [item for item in leading[:split] if item[0] != "blank"]
    if header_items:
        header_lines = lines[header_items[0][1]:header_items[-1][2]]
        document.header = tuple(line.rstrip("\r\n") for line in header_lines)
        document.header_gap = bool(blanks)

    pending: List[str] = []
    for kind, start, end in leading[split:] + items[first:last + 1]:
        if kind == "blank":
            continue
        block = _dedent(lines[start:end])
        if kind != "import":
            pending.extend(block)
            continue
        statement = "\n".join(block)
        decl = parse_declaration(statement, len(document.declarations), start + 1, tuple(pending))
        pending = []
        if decl.opaque:
            warning = parse_warning(decl.lineno, block[0])
            LOG.warning("line %s: %s", warning[0], warning[1])
            document.warnings.append(warning)
        document.declarations.append(decl)

    # The body starts at the first non-blank line after the last import.
    body_line = items[last][2]
    while body_line < len(lines) and not lines[body_line].strip():
        body_line += 1
    offset = sum(len(line) for line in lines[:body_line])
    document.body = text[offset:]
    document.trailing_newline = text.endswith("\n")
    LOG.debug(f"Found {len(document.declarations)} import declarations")
    return document
