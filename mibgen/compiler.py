"""Compile MIB source files into pysnmp modules with pysmi.

The generator reads compiled modules (see :mod:`mibgen.mib_loader`);
this wrapper only drives pysmi and reports per-module results.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from pysmi.codegen.pysnmp import PySnmpCodeGen
from pysmi.compiler import MibCompiler as PysmiMibCompiler
from pysmi.parser.smi import parserFactory
from pysmi.reader.localfile import FileReader
from pysmi.searcher.pyfile import PyFileSearcher
from pysmi.searcher.pypackage import PyPackageSearcher
from pysmi.searcher.stub import StubSearcher
from pysmi.writer.pyfile import PyFileWriter

logger = logging.getLogger(__name__)

_OK_STATUSES = ("compiled", "untouched", "borrowed")
DEFAULT_SOURCE_DIRS = ["data/mibs", "/usr/share/snmp/mibs"]


class MibCompilationError(Exception):
    """Raised when pysmi can't compile a MIB or one of its imports."""

    def __init__(self, message: str, missing_dependencies: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.missing_dependencies = missing_dependencies or []


class MibCompiler:
    """Compiles MIB text files into ``output_dir``."""

    def __init__(self, output_dir: str, source_dirs: Optional[List[str]] = None) -> None:
        self.output_dir = output_dir
        self.source_dirs = list(DEFAULT_SOURCE_DIRS if source_dirs is None else source_dirs)
        self.last_compile_results: Dict[str, str] = {}

    def _build(self, mib_dir: str) -> Any:
        compiler = PysmiMibCompiler(
            parserFactory()(), PySnmpCodeGen(), PyFileWriter(self.output_dir)
        )
        compiler.add_sources(FileReader(mib_dir))
        for source_dir in self.source_dirs:
            if os.path.exists(source_dir):
                compiler.add_sources(FileReader(source_dir))
        compiler.add_searchers(PyFileSearcher(self.output_dir))
        for package in PySnmpCodeGen.defaultMibPackages:
            compiler.add_searchers(PyPackageSearcher(package))
        # Never recompile MIBs with MACROs
        compiler.add_searchers(StubSearcher(*PySnmpCodeGen.baseMibs))
        return compiler

    def compile(self, mib_file_path: str) -> str:
        """Compile one MIB file and return the path of its Python module.

        Raises:
            MibCompilationError: If pysmi reports missing imports or failures,
                or the expected output file is absent.
        """
        os.makedirs(self.output_dir, exist_ok=True)
        mib_dir = os.path.dirname(os.path.abspath(mib_file_path))
        mib_name = os.path.splitext(os.path.basename(mib_file_path))[0]

        compiler = self._build(mib_dir)
        results = compiler.compile(mib_name, genTexts=True)
        self.last_compile_results = {str(k): str(v) for k, v in results.items()}

        if not self.last_compile_results:
            raise MibCompilationError(f"No MIB module found in {mib_file_path}")

        missing = [m for m, s in self.last_compile_results.items() if "missing" in s.lower()]
        if missing:
            raise MibCompilationError(
                f"Missing MIB dependencies: {', '.join(missing)}",
                missing_dependencies=missing,
            )
        failed = [m for m, s in self.last_compile_results.items() if s not in _OK_STATUSES]
        if failed:
            raise MibCompilationError(f"Failed to compile: {', '.join(failed)}")

        compiled = os.path.join(self.output_dir, f"{mib_name}.py")
        if not os.path.exists(compiled):
            raise MibCompilationError(
                f"Compilation reported success but output file not found: {compiled}"
            )
        logger.info("Compiled %s to %s", mib_name, compiled)
        return compiled
