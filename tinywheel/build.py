"""
tinywheel.build - Package a single annotated source file

This module handles the whole `tinywheel <file>` flow:

1. Check the source is readable and compiles
2. Chunk it and resolve a PackageDescriptor
3. Stage a temporary project directory
4. Build a wheel and/or sdist from it with the PyPA `build` frontend

Staged layout:
    <tmp>/
        pyproject.toml
        README.md
        <module>.py
        <name>            (only when an executable is declared)
"""

import os
import shutil
import stat
import subprocess
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from build import BuildBackendException, BuildException, ProjectBuilder

from tinywheel.chunker import chunk_file
from tinywheel.errors import BuildError, SourceError
from tinywheel.identity import git_global_config
from tinywheel.metadata import MetadataExtractor, PackageDescriptor, print_notice
from tinywheel.pyproject import write_pyproject


@dataclass
class BuildOptions:
    """Options for packaging a source file."""

    output_dir: Optional[Path] = None
    wheel: bool = True
    sdist: bool = False
    keep_build_dir: bool = False
    verbose: bool = True
    use_git: bool = True
    defaults: dict[str, str] = field(default_factory=dict)


@dataclass
class SourceParts:
    """The component parts of a source file, ready to be staged."""

    descriptor: PackageDescriptor
    library: str
    readme: str

    @property
    def executable(self) -> Optional[str]:
        return self.descriptor.executable


@dataclass
class PackageResult:
    """Result of packaging a source file."""

    descriptor: PackageDescriptor
    build_dir: Path
    wheel_path: Optional[Path] = None
    sdist_path: Optional[Path] = None


def _log(message: str, verbose: bool) -> None:
    if verbose:
        print(message, file=sys.stderr)


def package_name_for(source_path: Union[str, Path]) -> str:
    """Name the package after the source file, without the .py extension."""
    return Path(source_path).stem


def check_source(source_path: Union[str, Path]) -> None:
    """
    Make sure the source is readable and contains valid Python.

    Raises:
        SourceError: If the file is unreadable or fails to compile.
    """
    source_path = Path(source_path)
    if not source_path.is_file() or not os.access(source_path, os.R_OK):
        raise SourceError(f"{source_path} is not readable")

    try:
        result = subprocess.run(
            [sys.executable, "-m", "py_compile", str(source_path)],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise SourceError(f"Could not run the Python compiler: {e}") from e

    if result.returncode != 0:
        output = (result.stderr or result.stdout).strip()
        raise SourceError(f"{source_path} is not valid python:\n{output}")


def read_source_parts(
    source_path: Union[str, Path],
    defaults: Optional[dict[str, str]] = None,
    use_git: bool = True,
    verbose: bool = True,
) -> SourceParts:
    """
    Chunk the source into its component parts and resolve its metadata.

    The file name (without extension) is the default package name; any
    `defaults` given take priority over it.
    """
    chunked_source = chunk_file(source_path)
    extractor = MetadataExtractor(
        chunked_source,
        defaults={"name": package_name_for(source_path), **(defaults or {})},
        identity=git_global_config if use_git else None,
        notify=print_notice if verbose else (lambda message: None),
    )
    return SourceParts(
        descriptor=extractor.descriptor,
        library=chunked_source.library,
        readme=chunked_source.readme,
    )


def generate_script(descriptor: PackageDescriptor) -> str:
    """Generate the command line script that runs the executable code."""
    return (
        "#!/usr/bin/env python3\n"
        f"import {descriptor.module_name}\n"
        f"from {descriptor.module_name} import *  # noqa: F401,F403\n"
        f"{descriptor.executable}\n"
    )


def write_package_dir(parts: SourceParts, build_dir: Optional[Path] = None) -> Path:
    """
    Write the parts into a directory the build frontend can work against.

    Args:
        parts: The resolved source parts
        build_dir: Directory to stage into (default: a new temporary directory)

    Returns:
        The staging directory.
    """
    if build_dir is None:
        build_dir = Path(tempfile.mkdtemp(prefix="tinywheel-"))
    build_dir.mkdir(parents=True, exist_ok=True)
    descriptor = parts.descriptor

    write_pyproject(build_dir, descriptor)

    with open(build_dir / "README.md", "w", encoding="utf-8") as f:
        f.write(parts.readme)

    with open(build_dir / descriptor.files[0], "w", encoding="utf-8") as f:
        f.write(parts.library)

    if descriptor.has_executable:
        script_path = build_dir / descriptor.name
        with open(script_path, "w", encoding="utf-8") as f:
            f.write(generate_script(descriptor))
        script_path.chmod(script_path.stat().st_mode | stat.S_IXUSR)

    return build_dir


def build_distribution(builder: ProjectBuilder, distribution: str, output_dir: Path) -> Path:
    """
    Build one distribution ("wheel" or "sdist") into output_dir.

    Raises:
        BuildError: If build requirements are missing or the backend fails.
    """
    try:
        missing = builder.check_dependencies(distribution)
        if missing:
            requirements = sorted(chain[0] for chain in missing)
            raise BuildError(
                f"Missing build requirements for {distribution}: {', '.join(requirements)}"
            )
        return Path(builder.build(distribution, str(output_dir)))
    except (BuildException, BuildBackendException) as e:
        raise BuildError(f"Couldn't build {distribution}: {e}") from e


def build_package(
    package_dir: Path,
    output_dir: Path,
    wheel: bool = True,
    sdist: bool = False,
    verbose: bool = True,
) -> tuple[Optional[Path], Optional[Path]]:
    """
    Build distributions from a staged package directory.

    Returns:
        (wheel_path, sdist_path); an entry is None when not requested.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    builder = ProjectBuilder(str(package_dir))

    wheel_path = None
    sdist_path = None

    if sdist:
        _log("Building source distribution...", verbose)
        sdist_path = build_distribution(builder, "sdist", output_dir)
        _log(f"  ✓ Created {sdist_path.name}", verbose)

    if wheel:
        _log("Building wheel...", verbose)
        wheel_path = build_distribution(builder, "wheel", output_dir)
        _log(f"  ✓ Created {wheel_path.name}", verbose)

    return wheel_path, sdist_path


def package(
    source_path: Union[str, Path],
    options: Optional[BuildOptions] = None,
) -> PackageResult:
    """
    Turn a single annotated source file into distributions.

    Args:
        source_path: The source file to package
        options: BuildOptions (default: wheel only, into the current directory)

    Returns:
        PackageResult with the descriptor and built distribution paths.

    Raises:
        SourceError, InvalidMetadataSyntax, MissingFieldError, BuildError
    """
    if options is None:
        options = BuildOptions()
    source_path = Path(source_path).expanduser().resolve()
    output_dir = (options.output_dir or Path.cwd()).expanduser().resolve()

    check_source(source_path)
    parts = read_source_parts(
        source_path,
        defaults=options.defaults,
        use_git=options.use_git,
        verbose=options.verbose,
    )

    build_dir = Path(tempfile.mkdtemp(prefix="tinywheel-"))
    _log(f"Using {build_dir} as a place to build the package", options.verbose)

    try:
        write_package_dir(parts, build_dir)
        wheel_path, sdist_path = build_package(
            build_dir,
            output_dir,
            wheel=options.wheel,
            sdist=options.sdist,
            verbose=options.verbose,
        )
    finally:
        if not options.keep_build_dir:
            shutil.rmtree(build_dir, ignore_errors=True)

    return PackageResult(
        descriptor=parts.descriptor,
        build_dir=build_dir,
        wheel_path=wheel_path,
        sdist_path=sdist_path,
    )
