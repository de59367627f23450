"""Config module for import-optimizer.

This module reads project defaults for the rules from a ``[tool.import-optimizer]``
table in ``pyproject.toml`` or an ``"importOptimizer"`` key in ``package.json``.
"""

import json
import logging
import tomllib
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

from import_optimizer.rules import RuleConfiguration

LOG = logging.getLogger(__name__)

TOOL_SECTION = "import-optimizer"
PACKAGE_JSON_KEY = "importOptimizer"
OPTION_NAMES = {field.name for field in fields(RuleConfiguration)}


def _build_config(options: Any, source: Path) -> RuleConfiguration:
    """Turn a raw option table into a RuleConfiguration, falling back to defaults."""
    if not isinstance(options, dict):
        LOG.warning("%s: expected a table of options, using defaults", source)
        return RuleConfiguration()
    values: Dict[str, Any] = {}
    for key, value in options.items():
        name = key.replace("-", "_")
        if name not in OPTION_NAMES:
            LOG.warning("%s: unknown option '%s' ignored", source, key)
            continue
        values[name] = value
    try:
        return RuleConfiguration(**values)
    except ValueError as exc:
        LOG.warning("%s: %s, using defaults", source, exc)
        return RuleConfiguration()


def _from_pyproject(path: Path) -> Optional[RuleConfiguration]:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        LOG.warning("Could not read %s: %s", path, exc)
        return None
    section = data.get("tool", {}).get(TOOL_SECTION)
    if section is None:
        return None
    return _build_config(section, path)


def _from_package_json(path: Path) -> Optional[RuleConfiguration]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        LOG.warning("Could not read %s: %s", path, exc)
        return None
    if not isinstance(data, dict) or PACKAGE_JSON_KEY not in data:
        return None
    return _build_config(data[PACKAGE_JSON_KEY], path)


def read_rule_config(root: str) -> RuleConfiguration:
    """Detect the rule configuration for a project or use the defaults.

    The search starts at ``root`` and walks up the parent directories. The
    first directory holding a ``pyproject.toml`` with a
    ``[tool.import-optimizer]`` table or a ``package.json`` with an
    ``"importOptimizer"`` key wins.
    """
    start = Path(root).resolve()
    if start.is_file():
        start = start.parent
    for directory in (start, *start.parents):
        toml_path = directory / "pyproject.toml"
        if toml_path.exists():
            config = _from_pyproject(toml_path)
            if config is not None:
                return config
        package_json = directory / "package.json"
        if package_json.exists():
            config = _from_package_json(package_json)
            if config is not None:
                return config
    return RuleConfiguration()
