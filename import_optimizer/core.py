#!/usr/bin/env python3
"""Core entry points for import-optimizer. This module
sequences the parser, the normalization rules and the renderer into a single
``optimize`` call, and defines what happens when the input cannot be handled:
the original text is returned untouched.

Everything here is a pure function of its arguments; there is no shared
optimizer instance and no I/O.
"""
from __future__ import annotations
import logging
from typing import List
from typing import Optional
from typing import Tuple

from import_optimizer.errors import FatalMalformation
from import_optimizer.errors import Warnings
from import_optimizer.parser import classify
from import_optimizer.render import render
from import_optimizer.rules import RuleConfiguration
from import_optimizer.rules import normalize

LOG = logging.getLogger(__name__)

SAMPLE_INPUT = (
    'import { mapState } from "vuex";\n'
    'import { mapActions } from "vuex";\n'
    'import request from "@/api/request.js";\n'
    'import Enum from "@/data/Enum";\n'
    'import utils from "@/utils/utils";\n'
    'import config from "@/data/config.json";\n'
    'import request from "@/api/request.js";\n'
    "\n"
    "export default { name: 'Demo' };\n"
)


def optimize_source(text: str, rules: Optional[RuleConfiguration] = None) -> Tuple[str, Warnings]:
    """Normalize the import region of ``text``.

    Returns a tuple (new_text, warnings). When the import region cannot be
    delimited the original text comes back unchanged together with an
    ``IO900`` entry.
    """
    rules = rules or RuleConfiguration()
    try:
        document = classify(text)
    except FatalMalformation as exc:
        LOG.error("line %s: %s", exc.lineno, exc.reason)
        return text, [exc.as_warning()]

    if not document.has_imports:
        return text, list(document.warnings)

    declarations, rule_warnings = normalize(document.declarations, rules)
    new_text = render(document, declarations)
    if new_text == text:
        LOG.debug("Imports are already normalized.")
    return new_text, document.warnings + rule_warnings


def optimize(text: str, rules: Optional[RuleConfiguration] = None) -> str:
    """Return ``text`` with its leading imports merged, deduplicated and sorted.

    The body after the import region is kept byte for byte.
    """
    new_text, _ = optimize_source(text, rules)
    return new_text


def describe(rules: Optional[RuleConfiguration] = None) -> str:
    """Run the engine on a fixed sample and return a readable report."""
    rules = rules or RuleConfiguration()
    output, warnings = optimize_source(SAMPLE_INPUT, rules)
    report: List[str] = [
        f"Rules: {rules.describe()}",
        "",
        "Sample input:",
        SAMPLE_INPUT.rstrip("\n"),
        "",
        "Optimized output:",
        output.rstrip("\n"),
    ]
    if warnings:
        report.append("")
        report.append("Warnings:")
        report.extend(f"  line {lineno}: {message}" for lineno, message in warnings)
    return "\n".join(report)
