"""File helpers used by the command line host.

The optimizer itself never touches the file system; these functions read a
file, hand its text to :func:`import_optimizer.core.optimize_source` and write
the result back when asked to.
"""

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from import_optimizer.core import optimize_source
from import_optimizer.rules import RuleConfiguration

SOURCE_SUFFIXES = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts")
SKIPPED_DIRS = {"node_modules", ".git"}


def iter_source_files(root: str, ignore: Optional[Iterable[str]] = None) -> Iterator[Path]:
    """Yield JavaScript/TypeScript files under the given root, excluding ignored paths."""
    ignore_set = set(ignore or [])
    root_path = Path(root)
    for path in sorted(root_path.rglob("*")):
        if not path.is_file() or path.suffix not in SOURCE_SUFFIXES:
            continue
        if SKIPPED_DIRS.intersection(path.relative_to(root_path).parts):
            continue
        if any(str(path).startswith(str(root_path / pattern)) for pattern in ignore_set):
            continue
        yield path


def process_file(
    file_path: str, rules: Optional[RuleConfiguration] = None, apply: bool = False
) -> Tuple[bool, List[Tuple[int, str]]]:
    """Optimize the imports of a single file.

    Returns (modified, warnings). ``modified`` is True when the optimized text
    differs from the file; the file is only rewritten when ``apply`` is set.
    """
    path_obj = Path(file_path)
    try:
        # newline="" keeps \r\n line endings intact
        with path_obj.open(encoding="utf-8", newline="") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        return False, [(0, f"Could not read file: {e}")]

    new_source, warnings = optimize_source(source, rules)
    if new_source == source:
        return False, warnings

    if apply:
        try:
            with path_obj.open("w", encoding="utf-8", newline="") as f:
                f.write(new_source)
        except OSError as e:
            return False, warnings + [(0, f"Could not write file: {e}")]
    return True, warnings
