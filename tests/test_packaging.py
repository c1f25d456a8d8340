from __future__ import annotations

from pathlib import Path

import pytest

from gencheck.domain.errors import BuildFailure
from gencheck.domain.models import RenderedOutput
from harness.packaging import SWIFT_PACKAGE, build_package, materialize_package, package_name_for, swift_build_command

from fakes import FakeRunner


def test_package_name_is_derived_from_case_name() -> None:
    assert package_name_for("discourse") == "swift-openapi-compatibility-test-discourse"
    assert package_name_for("OAI examples/petstore") == "swift-openapi-compatibility-test-OAI-examples-petstore"
    with pytest.raises(ValueError):
        package_name_for("  ")


def test_build_command_disables_slp_vectorization_and_honours_jobs(tmp_path: Path) -> None:
    cmd = swift_build_command(tmp_path)
    assert cmd == [
        "swift",
        "build",
        "--package-path",
        str(tmp_path),
        "-Xswiftc",
        "-Xllvm",
        "-Xswiftc",
        "-vectorize-slp=false",
    ]
    assert swift_build_command(tmp_path, 8)[-2:] == ["-j", "8"]


def test_materialize_writes_manifest_and_sources(tmp_path: Path) -> None:
    outputs = [RenderedOutput("Types.swift", b"struct A {}\n"), RenderedOutput("Client.swift", b"func a()\n")]
    pkg = materialize_package(tmp_path / "pkg", "swift-openapi-compatibility-test-x", outputs)

    manifest = (pkg / "Package.swift").read_text(encoding="utf-8")
    assert manifest.startswith("// swift-tools-version:5.8\n")
    assert 'name: "swift-openapi-compatibility-test-x"' in manifest
    assert '.upToNextMinor(from: "0.2.0")' in manifest
    assert '.target(name: "Harness"' in manifest
    assert (pkg / "Sources" / "Harness" / "Types.swift").read_bytes() == b"struct A {}\n"
    assert (pkg / "Sources" / "Harness" / "Client.swift").read_bytes() == b"func a()\n"


def test_materialize_rejects_duplicate_file_names(tmp_path: Path) -> None:
    outputs = [RenderedOutput("Types.swift", b"a"), RenderedOutput("Types.swift", b"b")]
    with pytest.raises(ValueError):
        materialize_package(tmp_path, "p", outputs)


def test_build_package_passes_cwd_and_timeout(tmp_path: Path) -> None:
    runner = FakeRunner(stdout="Build complete!")
    res = build_package(tmp_path, runner=runner, num_jobs=2, timeout_seconds=30)

    assert res.ok
    assert runner.commands[0] == SWIFT_PACKAGE.build_command(tmp_path, 2)
    assert runner.kwargs[0] == {"cwd": tmp_path, "timeout_seconds": 30}


def test_build_package_raises_with_streams(tmp_path: Path) -> None:
    runner = FakeRunner(exit_code=1, stdout="out", stderr="err")
    with pytest.raises(BuildFailure) as excinfo:
        build_package(tmp_path, runner=runner)

    assert excinfo.value.stdout == "out"
    assert excinfo.value.stderr == "err"
    assert excinfo.value.command[:2] == ["swift", "build"]
    assert "-- stderr --\nerr" in str(excinfo.value)
