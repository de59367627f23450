"""Diagnostics for import-optimizer.

Recoverable problems are reported as ``(lineno, message)`` tuples whose message
starts with one of the codes below. Only :class:`FatalMalformation` aborts a
run, and the facade turns it into an unchanged result.
"""

from typing import List, Tuple

PARSE_WARNING = "IO101"
MERGE_CONFLICT = "IO201"
FATAL_MALFORMATION = "IO900"

Warnings = List[Tuple[int, str]]


class FatalMalformation(Exception):
    """The import region cannot be delimited, e.g. an unterminated brace list."""

    def __init__(self, lineno: int, reason: str):
        super().__init__(f"line {lineno}: {reason}")
        self.lineno = lineno
        self.reason = reason

    def as_warning(self) -> Tuple[int, str]:
        return (self.lineno, f"{FATAL_MALFORMATION}: {self.reason}")


def parse_warning(lineno: int, statement: str) -> Tuple[int, str]:
    return (lineno, f"{PARSE_WARNING}: could not parse import, kept verbatim: {statement}")


def merge_conflict(lineno: int, module_path: str, form: str, kept: str, other: str) -> Tuple[int, str]:
    return (
        lineno,
        f"{MERGE_CONFLICT}: conflicting {form} import '{other}' for '{module_path}' dropped, "
        f"keeping '{kept}'",
    )
