"""Command line front end: generate exporter config from MIBs and directives."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, List, Optional

from mibgen.app_config import DEFAULT_CONFIG_FILE, AppConfig
from mibgen.app_logger import AppLogger, LoggingConfig
from mibgen.compiler import MibCompilationError, MibCompiler
from mibgen.config_loader import load_generator_config
from mibgen.diagnostics import Diagnostics
from mibgen.errors import GeneratorError
from mibgen.generator import generate_config
from mibgen.mib_loader import load_mib_tree
from mibgen.normalizer import prepare_tree
from mibgen.output import write_config
from mibgen.tree import Node, iter_nodes, load_tree_json, write_tree_json

logger = logging.getLogger(__name__)


def _load_app_config(config_path: str) -> Optional[AppConfig]:
    try:
        return AppConfig(config_path)
    except FileNotFoundError:
        if config_path != DEFAULT_CONFIG_FILE:
            raise
        return None


def _configure_logging(app_config: Optional[AppConfig], level: Optional[str]) -> None:
    if app_config is not None and level is None:
        AppLogger.configure(app_config)
        return
    AppLogger(LoggingConfig(level=level or "INFO", log_dir=Path("logs")))


def load_tree(args: argparse.Namespace, app_config: Optional[AppConfig]) -> Node:
    """Load the object tree from --tree, --mib-dir or the tool settings.

    Raises:
        FileNotFoundError: If no tree source is configured or it is missing.
    """
    tree_file = args.tree or (app_config.tree_file() if app_config else None)
    if tree_file:
        return load_tree_json(tree_file)

    mib_dir = args.mib_dir or (app_config.compiled_mibs_dir() if app_config else None)
    if not mib_dir:
        raise FileNotFoundError("No tree source: pass --tree or --mib-dir")

    mibs: List[str] = list(args.mib or [])
    if not mibs and app_config is not None:
        mibs = app_config.mib_modules()
    return load_mib_tree(mib_dir, mibs or None)


def format_node(node: Node) -> str:
    """One dump line: oid label type "tc" "hint" [indexes] description."""
    node_type = node.type
    if node.fixed_size:
        node_type = f"{node.type}({node.fixed_size})"
    indexes = "[" + " ".join(node.indexes) + "]"
    return (
        f"{node.oid} {node.label} {node_type} {json.dumps(node.textual_convention)} "
        f"{json.dumps(node.hint)} {indexes} {node.description}"
    )


def cmd_generate(args: argparse.Namespace, app_config: Optional[AppConfig]) -> int:
    modules = load_generator_config(args.generator)
    tree = load_tree(args, app_config)
    diagnostics = Diagnostics()
    index = prepare_tree(tree, diagnostics)
    output = generate_config(modules, index, diagnostics)
    path = write_config(args.output_path, output)
    metric_count = sum(len(m.metrics) for m in output.values())
    print(
        f"Generated {metric_count} metrics in {len(output)} module(s) "
        f"with {len(diagnostics)} warning(s); config written to {path}"
    )
    return 0


def cmd_dump(args: argparse.Namespace, app_config: Optional[AppConfig]) -> int:
    tree = load_tree(args, app_config)
    prepare_tree(tree)
    for node in iter_nodes(tree):
        print(format_node(node))
    return 0


def cmd_export_tree(args: argparse.Namespace, app_config: Optional[AppConfig]) -> int:
    tree = load_tree(args, app_config)
    prepare_tree(tree)
    write_tree_json(args.output_path, tree)
    print(f"Tree written to {args.output_path}")
    return 0


def cmd_compile(args: argparse.Namespace, app_config: Optional[AppConfig]) -> int:
    compiler = MibCompiler(args.output_dir)
    status = 0
    for mib_file in args.mib_files:
        try:
            compiled = compiler.compile(mib_file)
            print(f"{mib_file}: compiled to {compiled}")
        except MibCompilationError as e:
            print(f"Error: {e}", file=sys.stderr)
            status = 1
        for mib, result in compiler.last_compile_results.items():
            print(f"  {mib}: {result}")
    return status


def _add_tree_source(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--tree", help="JSON tree file (see export-tree)")
    parser.add_argument("--mib-dir", help="Directory of pysmi-compiled MIB modules")
    parser.add_argument(
        "--mib",
        action="append",
        help="MIB module to load from --mib-dir (repeatable, default: all)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mibgen",
        description="Generate SNMP exporter config from MIBs and a generator.yml.",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        help=f"Tool settings file (default: {DEFAULT_CONFIG_FILE}, optional)",
    )
    parser.add_argument("--log-level", default=None, help="Override the log level")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate snmp.yml from generator.yml")
    gen.add_argument("-g", "--generator", default="generator.yml", help="Directives file")
    gen.add_argument(
        "-o", "--output-path", default="snmp.yml", help="Path to write resulting config file"
    )
    _add_tree_source(gen)
    gen.set_defaults(handler=cmd_generate)

    dump = sub.add_parser("dump", help="Dump the parsed and prepared MIB tree")
    _add_tree_source(dump)
    dump.set_defaults(handler=cmd_dump)

    export = sub.add_parser("export-tree", help="Write the prepared tree as JSON")
    export.add_argument("-o", "--output-path", default="tree.json")
    _add_tree_source(export)
    export.set_defaults(handler=cmd_export_tree)

    comp = sub.add_parser("compile", help="Compile MIB files with pysmi")
    comp.add_argument("mib_files", nargs="+", help="MIB source files")
    comp.add_argument("--output-dir", default="compiled-mibs")
    comp.set_defaults(handler=cmd_compile)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        app_config = _load_app_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    _configure_logging(app_config, args.log_level)

    handler: Any = args.handler
    try:
        return int(handler(args, app_config))
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except GeneratorError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
