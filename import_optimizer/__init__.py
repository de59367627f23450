"""Top-level package for import-optimizer.

This package exposes the core API for merging, deduplicating and sorting the
import declarations at the top of JavaScript and TypeScript sources.
"""

from import_optimizer.core import describe
from import_optimizer.core import optimize
from import_optimizer.core import optimize_source
from import_optimizer.errors import FatalMalformation
from import_optimizer.parser import classify
from import_optimizer.parser import parse_declaration
from import_optimizer.render import render
from import_optimizer.rules import RuleConfiguration
from import_optimizer.rules import normalize


__all__ = [
    "optimize",
    "optimize_source",
    "describe",
    "RuleConfiguration",
    "FatalMalformation",
    "classify",
    "parse_declaration",
    "normalize",
    "render",
]
