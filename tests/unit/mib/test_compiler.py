from pathlib import Path
from typing import Any, Dict, List

import pytest

from mibgen.compiler import MibCompilationError, MibCompiler


class _FakeCodeGen:
    defaultMibPackages = ("pysnmp.smi.mibs", "pysnmp_mibs")
    baseMibs = ("SNMPv2-SMI", "SNMPv2-TC")


class _FakePysmiCompiler:
    instances: List["_FakePysmiCompiler"] = []

    def __init__(self, results: Dict[str, str]) -> None:
        self._results = results
        self.sources: List[Any] = []
        self.searchers: List[Any] = []
        self.compile_calls: List[Any] = []
        _FakePysmiCompiler.instances.append(self)

    def add_sources(self, *sources: Any) -> None:
        self.sources.extend(sources)

    def add_searchers(self, *searchers: Any) -> None:
        self.searchers.extend(searchers)

    def compile(self, *mibs: str, **options: Any) -> Dict[str, str]:
        self.compile_calls.append((mibs, options))
        return self._results


@pytest.fixture
def fake_pysmi(monkeypatch: pytest.MonkeyPatch):
    """Replace the pysmi pieces; returns a setter for the compile results."""
    _FakePysmiCompiler.instances = []
    results: Dict[str, str] = {}

    monkeypatch.setattr(
        "mibgen.compiler.PysmiMibCompiler", lambda *_a, **_kw: _FakePysmiCompiler(results)
    )
    monkeypatch.setattr("mibgen.compiler.FileReader", lambda path: f"reader:{path}")
    monkeypatch.setattr("mibgen.compiler.PyFileSearcher", lambda path: f"pyfile:{path}")
    monkeypatch.setattr("mibgen.compiler.PyPackageSearcher", lambda pkg: f"package:{pkg}")
    monkeypatch.setattr(
        "mibgen.compiler.StubSearcher", lambda *mibs: f"stub:{','.join(mibs)}"
    )
    monkeypatch.setattr("mibgen.compiler.PyFileWriter", lambda path: f"writer:{path}")
    monkeypatch.setattr("mibgen.compiler.parserFactory", lambda: lambda: "parser")
    monkeypatch.setattr("mibgen.compiler.PySnmpCodeGen", _FakeCodeGen)

    def set_results(new_results: Dict[str, str]) -> None:
        results.clear()
        results.update(new_results)

    return set_results


def _mib_source(tmp_path: Path, name: str = "ACME-MIB") -> Path:
    src_dir = tmp_path / "src"
    src_dir.mkdir(exist_ok=True)
    mib = src_dir / f"{name}.mib"
    mib.write_text(f"{name} DEFINITIONS ::= BEGIN\nEND\n")
    return mib


def test_compile_success(tmp_path: Path, fake_pysmi: Any) -> None:
    fake_pysmi({"ACME-MIB": "compiled", "SNMPv2-SMI": "untouched"})
    out_dir = tmp_path / "compiled"
    out_dir.mkdir()
    (out_dir / "ACME-MIB.py").write_text("# compiled")
    mib = _mib_source(tmp_path)

    compiler = MibCompiler(str(out_dir), source_dirs=[str(tmp_path / "absent")])
    output = compiler.compile(str(mib))

    assert output == str(out_dir / "ACME-MIB.py")
    assert compiler.last_compile_results == {
        "ACME-MIB": "compiled",
        "SNMPv2-SMI": "untouched",
    }
    pysmi = _FakePysmiCompiler.instances[-1]
    assert pysmi.compile_calls == [(("ACME-MIB",), {"genTexts": True})]


def test_compile_wires_sources_and_searchers(tmp_path: Path, fake_pysmi: Any) -> None:
    fake_pysmi({"ACME-MIB": "compiled"})
    out_dir = tmp_path / "compiled"
    extra = tmp_path / "extra-mibs"
    extra.mkdir()
    mib = _mib_source(tmp_path)

    compiler = MibCompiler(str(out_dir), source_dirs=[str(extra), str(tmp_path / "absent")])
    with pytest.raises(MibCompilationError):
        compiler.compile(str(mib))

    pysmi = _FakePysmiCompiler.instances[-1]
    assert pysmi.sources == [f"reader:{mib.parent}", f"reader:{extra}"]
    assert pysmi.searchers == [
        f"pyfile:{out_dir}",
        "package:pysnmp.smi.mibs",
        "package:pysnmp_mibs",
        "stub:SNMPv2-SMI,SNMPv2-TC",
    ]
    assert out_dir.is_dir()


def test_compile_missing_dependencies(tmp_path: Path, fake_pysmi: Any) -> None:
    fake_pysmi({"ACME-MIB": "failed", "ACME-TC": "missing"})
    mib = _mib_source(tmp_path)

    compiler = MibCompiler(str(tmp_path / "compiled"), source_dirs=[])
    with pytest.raises(MibCompilationError) as excinfo:
        compiler.compile(str(mib))
    assert "Missing MIB dependencies: ACME-TC" in str(excinfo.value)
    assert excinfo.value.missing_dependencies == ["ACME-TC"]


def test_compile_failed(tmp_path: Path, fake_pysmi: Any) -> None:
    fake_pysmi({"ACME-MIB": "failed"})
    mib = _mib_source(tmp_path)

    compiler = MibCompiler(str(tmp_path / "compiled"), source_dirs=[])
    with pytest.raises(MibCompilationError) as excinfo:
        compiler.compile(str(mib))
    assert "Failed to compile: ACME-MIB" in str(excinfo.value)
    assert excinfo.value.missing_dependencies == []


def test_compile_no_results(tmp_path: Path, fake_pysmi: Any) -> None:
    fake_pysmi({})
    mib = _mib_source(tmp_path)

    compiler = MibCompiler(str(tmp_path / "compiled"), source_dirs=[])
    with pytest.raises(MibCompilationError, match="No MIB module found"):
        compiler.compile(str(mib))


def test_compile_output_missing(tmp_path: Path, fake_pysmi: Any) -> None:
    fake_pysmi({"ACME-MIB": "compiled"})
    mib = _mib_source(tmp_path)

    compiler = MibCompiler(str(tmp_path / "compiled"), source_dirs=[])
    with pytest.raises(MibCompilationError, match="output file not found"):
        compiler.compile(str(mib))
