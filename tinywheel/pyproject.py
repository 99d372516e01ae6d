"""
tinywheel.pyproject - Serialize a PackageDescriptor as pyproject.toml

The generated file describes a single-module setuptools project:

    [project]            name, version, summary, README, author, homepage
    [tool.setuptools]    py-modules = [<module>], plus the script if any
"""

import json
from pathlib import Path

from tinywheel.metadata import PackageDescriptor

README_CONTENT_TYPE = "text/markdown"


def toml_string(value: str) -> str:
    """Quote a value as a TOML basic string."""
    # JSON string escapes are a subset of TOML basic string escapes.
    return json.dumps(value, ensure_ascii=False).replace("\x7f", "\\u007f")


def generate_pyproject(descriptor: PackageDescriptor) -> str:
    """Generate the contents of a pyproject.toml for the descriptor."""
    modules = ", ".join(toml_string(f[: -len(".py")]) for f in descriptor.files)

    scripts_str = ""
    if descriptor.has_executable:
        scripts_str = f"\nscript-files = [{toml_string(descriptor.name)}]"

    return f"""[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = {toml_string(descriptor.name)}
version = {toml_string(descriptor.version)}
description = {toml_string(descriptor.summary)}
readme = {{text = {toml_string(descriptor.description)}, content-type = {toml_string(README_CONTENT_TYPE)}}}
authors = [{{name = {toml_string(descriptor.author)}, email = {toml_string(descriptor.email)}}}]
requires-python = ">=3.9"

[project.urls]
Homepage = {toml_string(descriptor.homepage)}

[tool.setuptools]
py-modules = [{modules}]{scripts_str}
"""


def write_pyproject(out_dir: Path, descriptor: PackageDescriptor) -> Path:
    """Write pyproject.toml for the descriptor into out_dir."""
    pyproject_path = out_dir / "pyproject.toml"
    with open(pyproject_path, "w", encoding="utf-8") as f:
        f.write(generate_pyproject(descriptor))
    return pyproject_path
