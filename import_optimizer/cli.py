#!/usr/bin/env python3
"""Command-line interface for import-optimizer using Click."""

import dataclasses
from importlib import metadata
import logging
from pathlib import Path
import sys
from typing import Optional

import click
from import_optimizer import core
from import_optimizer import files
from import_optimizer.config import read_rule_config
from import_optimizer.rules import RELATIVE_POLICIES
from import_optimizer.rules import RuleConfiguration


try:
    VERSION = f"import-optimizer {metadata.version('import-optimizer')}"
except metadata.PackageNotFoundError:
    VERSION = "import-optimizer"


def _rule_options(func):
    """Attach the rule switches shared by every command."""
    options = [
        click.option("--sort/--no-sort", default=None, help="Sort declarations by module path."),
        click.option("--dedupe/--no-dedupe", default=None, help="Drop duplicate declarations."),
        click.option("--merge/--no-merge", default=None, help="Merge declarations of the same module."),
        click.option(
            "--relative-imports",
            type=click.Choice(RELATIVE_POLICIES),
            default=None,
            help="Where './' and '../' paths sort relative to bare module names.",
        ),
        click.option("--ignore-case", is_flag=True, default=False, help="Compare module paths case-insensitively."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _resolve_rules(base: Path, **flags: Optional[object]) -> RuleConfiguration:
    """Project configuration found from ``base``, overridden by command line flags."""
    config = read_rule_config(str(base))
    ignore_case = flags.pop("ignore_case", None)
    overrides = {name: value for name, value in flags.items() if value is not None}
    if ignore_case:
        overrides["case_sensitive"] = False
    return dataclasses.replace(config, **overrides)


def _handle_files(path: Path, rules: RuleConfiguration, apply_changes: bool) -> int:
    """Process source files and report or fix their imports.

    Args:
        path: File or directory to process.
        rules: Rules to apply.
        apply_changes: If True, apply fixes in place.
    Returns:
        0 if no changes, 1 if changes required, 2 if error occurred.
    """
    exit_code = 0
    total_warnings = 0

    # Handle single file or directory
    if path.is_file():
        file_paths = [path]
    else:
        file_paths = list(files.iter_source_files(str(path)))

    for file_path in file_paths:
        modified, warnings = files.process_file(str(file_path), rules, apply=apply_changes)

        for lineno, msg in warnings:
            if msg.startswith(("IO900", "Could not")):
                logging.error("[%s] line %s: %s", file_path, lineno, msg)
                exit_code = max(exit_code, 2)
            else:
                logging.warning("[%s] line %s: %s", file_path, lineno, msg)
            total_warnings += 1

        if modified:
            msg = "file updated." if apply_changes else "imports would be modified."
            logging.info("[%s] %s", file_path, msg)
            exit_code = max(exit_code, 1)

    if total_warnings:
        logging.info("Total warnings: %d", total_warnings)

    return exit_code


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Increase verbosity.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.version_option(version=VERSION, prog_name="import-optimizer CLI")
def cli(verbose: bool, quiet: bool) -> None:
    """Merge, deduplicate and sort JavaScript/TypeScript imports."""
    # Configure logging only once
    if not logging.getLogger().handlers:
        if quiet:
            logging.basicConfig(level=logging.ERROR, format="%(message)s")
        else:
            logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")


@cli.command(help="Report files whose imports are not normalized, without modifying them.")
@click.argument("path", type=click.Path(exists=True, file_okay=True, dir_okay=True))
@_rule_options
def check(path: str, **flags) -> None:
    rules = _resolve_rules(Path(path), **flags)
    sys.exit(_handle_files(Path(path), rules, apply_changes=False))


@cli.command(help="Normalize imports in place.")
@click.argument("path", type=click.Path(exists=True, file_okay=True, dir_okay=True))
@_rule_options
def fix(path: str, **flags) -> None:
    rules = _resolve_rules(Path(path), **flags)
    sys.exit(_handle_files(Path(path), rules, apply_changes=True))


@cli.command(help="Print the optimized source of FILE ('-' reads standard input).")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@_rule_options
def optimize(source: str, **flags) -> None:
    if source == "-":
        text = click.get_text_stream("stdin").read()
        rules = _resolve_rules(Path.cwd(), **flags)
    else:
        with open(source, encoding="utf-8", newline="") as f:
            text = f.read()
        rules = _resolve_rules(Path(source), **flags)
    new_text, warnings = core.optimize_source(text, rules)
    for lineno, msg in warnings:
        logging.warning("line %s: %s", lineno, msg)
    click.echo(new_text, nl=False)
    if any(msg.startswith("IO900") for _, msg in warnings):
        sys.exit(2)


@cli.command(help="Show what a fixed sample input normalizes to.")
@_rule_options
def describe(**flags) -> None:
    click.echo(core.describe(_resolve_rules(Path.cwd(), **flags)))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
