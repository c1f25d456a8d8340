"""harness.packaging

Assemble generated artifacts into a standalone package and build it.

A compatibility scenario only proves that generated code *compiles* by handing
it to the external build toolchain. The toolchain specifics (manifest name and
contents, sources directory, build command) live in a :class:`PackageTemplate`
so the runner itself never hard-codes them.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from gencheck.domain.errors import BuildFailure
from gencheck.domain.models import RenderedOutput
from gencheck.io.fs import write_bytes_atomic, write_text_atomic

from tools.core_cmd import CmdResult, ProcessRunner, run_cmd

logger = logging.getLogger(__name__)

PACKAGE_NAME_PREFIX = "swift-openapi-compatibility-test"
TARGET_NAME = "Harness"
RUNTIME_PACKAGE_URL = "https://github.com/apple/swift-openapi-runtime"
RUNTIME_PACKAGE_VERSION = "0.2.0"

_NAME_UNSAFE = re.compile(r"[^A-Za-z0-9_-]+")


@dataclass(frozen=True)
class PackageTemplate:
    """How a build toolchain expects a package to be laid out and built."""

    manifest_file_name: str
    render_manifest: Callable[[str], str]
    sources_subdir: str
    build_command: Callable[[Path, Optional[int]], List[str]]


def render_swift_manifest(package_name: str) -> str:
    return (
        "// swift-tools-version:5.8\n"
        "import PackageDescription\n"
        "let package = Package(\n"
        f'    name: "{package_name}",\n'
        "    platforms: [.macOS(.v13)],\n"
        f'    dependencies: [.package(url: "{RUNTIME_PACKAGE_URL}", .upToNextMinor(from: "{RUNTIME_PACKAGE_VERSION}"))],\n'
        f'    targets: [.target(name: "{TARGET_NAME}", dependencies: [.product(name: "OpenAPIRuntime", package: "swift-openapi-runtime")])]\n'
        ")\n"
    )


def swift_build_command(package_dir: Path, num_jobs: Optional[int] = None) -> List[str]:
    cmd = [
        "swift",
        "build",
        "--package-path",
        str(package_dir),
        # SLP vectorization makes large generated files very slow to compile.
        "-Xswiftc",
        "-Xllvm",
        "-Xswiftc",
        "-vectorize-slp=false",
    ]
    if num_jobs is not None:
        cmd += ["-j", str(num_jobs)]
    return cmd


SWIFT_PACKAGE = PackageTemplate(
    manifest_file_name="Package.swift",
    render_manifest=render_swift_manifest,
    sources_subdir=f"Sources/{TARGET_NAME}",
    build_command=swift_build_command,
)


def package_name_for(case_name: str) -> str:
    """``swift-openapi-compatibility-test-<case>`` with the case name made path-safe."""
    safe = _NAME_UNSAFE.sub("-", case_name.strip()).strip("-")
    if not safe:
        raise ValueError(f"Cannot derive a package name from case name {case_name!r}")
    return f"{PACKAGE_NAME_PREFIX}-{safe}"


def materialize_package(
    root: Union[str, Path],
    package_name: str,
    outputs: Iterable[RenderedOutput],
    template: PackageTemplate = SWIFT_PACKAGE,
) -> Path:
    """Write the manifest and one source file per output under *root*.

    Returns the package directory (``root`` itself).
    """
    package_dir = Path(root)
    write_text_atomic(package_dir / template.manifest_file_name, template.render_manifest(package_name))

    sources_dir = package_dir / template.sources_subdir
    seen: set[str] = set()
    for output in outputs:
        if output.base_name in seen:
            raise ValueError(f"Duplicate generated file name {output.base_name!r} in package {package_name}")
        seen.add(output.base_name)
        write_bytes_atomic(sources_dir / output.base_name, output.contents)
    logger.debug("Materialized package %s with %d source file(s) at %s", package_name, len(seen), package_dir)
    return package_dir


def build_package(
    package_dir: Path,
    *,
    template: PackageTemplate = SWIFT_PACKAGE,
    num_jobs: Optional[int] = None,
    runner: ProcessRunner = run_cmd,
    timeout_seconds: float = 0,
) -> CmdResult:
    """Run the template's build command; raise :class:`BuildFailure` on non-zero exit."""
    cmd = template.build_command(Path(package_dir), num_jobs)
    res = runner(cmd, cwd=Path(package_dir), timeout_seconds=timeout_seconds)
    if res.exit_code != 0:
        raise BuildFailure(
            package_dir=Path(package_dir),
            command=cmd,
            exit_code=res.exit_code,
            stdout=res.stdout,
            stderr=res.stderr,
        )
    return res
