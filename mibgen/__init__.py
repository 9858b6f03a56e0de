"""MIB to SNMP exporter config generator."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from mibgen.config_loader import load_generator_config
from mibgen.diagnostics import Diagnostic, Diagnostics
from mibgen.errors import (
    ConfigError,
    GeneratorError,
    UnknownLookupIndexError,
    UnknownWalkTargetError,
    UnsupportedLookupTypeError,
)
from mibgen.generator import generate_config, generate_config_module
from mibgen.models import Module, ModuleConfig
from mibgen.name_index import NameIndex
from mibgen.normalizer import prepare_tree
from mibgen.oid_utils import minimize_oids
from mibgen.labels import sanitize_label_name
from mibgen.tree import Node


def generate(
    tree: Node,
    generator_config: str | Path = "generator.yml",
    diagnostics: Optional[Diagnostics] = None,
) -> Dict[str, Module]:
    """
    Run the whole pipeline over an already loaded tree.

    This is a convenience function for library use:
    1. Loads the module directives from ``generator_config``
    2. Normalizes the tree and builds its name index
    3. Generates every module

    Args:
        tree: Root of the object tree; normalized in place.
        generator_config: Path to the directives document.
        diagnostics: Optional collector for non-fatal warnings.

    Returns:
        Generated modules keyed by module name.

    Raises:
        GeneratorError: On malformed or unsatisfiable directives.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    modules = load_generator_config(str(generator_config))
    index = prepare_tree(tree, diagnostics)
    return generate_config(modules, index, diagnostics)


__all__ = [
    "ConfigError",
    "Diagnostic",
    "Diagnostics",
    "GeneratorError",
    "Module",
    "ModuleConfig",
    "NameIndex",
    "Node",
    "UnknownLookupIndexError",
    "UnknownWalkTargetError",
    "UnsupportedLookupTypeError",
    "generate",
    "generate_config",
    "generate_config_module",
    "load_generator_config",
    "minimize_oids",
    "prepare_tree",
    "sanitize_label_name",
]
