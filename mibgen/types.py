"""
Shared type aliases for the MIB config generator.

This module provides common type aliases used throughout the codebase
to ensure consistency between the loaders, the generator and the
serializer.
"""

from typing import Any, Callable, Dict, List

# JSON/YAML-compatible dictionary type
JsonDict = Dict[str, Any]

# Opaque per-module walk parameters (version, retries, timeout, auth, ...)
# Passed straight from the directives document to the output module.
WalkParams = Dict[str, Any]

# Regex extraction directives keyed by metric suffix, eg
# {"Temp": [{"regex": "(.*)", "value": "$1"}]}
RegexExtracts = Dict[str, List[Dict[str, Any]]]

# Progress callback invoked with a module (MIB or generator module) name
ProgressCallback = Callable[[str], None]
