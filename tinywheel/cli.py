"""
tinywheel.cli - tinywheel Command Line Interface

- tinywheel <file>            Build a wheel from a single annotated file
- tinywheel package <file>    Same as above (explicit)
- tinywheel inspect <file>    Print the pyproject.toml that would be built
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from tinywheel.errors import TinywheelError

SUBCOMMANDS = {"package", "inspect"}


def _defaults_from_args(args: argparse.Namespace) -> dict[str, str]:
    defaults = {}
    if args.name:
        defaults["name"] = args.name
    if args.version:
        defaults["version"] = args.version
    return defaults


def cmd_package(args: argparse.Namespace) -> int:
    """Build distributions from a source file."""
    from tinywheel.build import BuildOptions, package

    options = BuildOptions(
        output_dir=Path(args.output_dir) if args.output_dir else None,
        wheel=not args.no_wheel,
        sdist=args.sdist,
        keep_build_dir=args.keep_build_dir,
        verbose=not args.quiet,
        use_git=not args.no_git,
        defaults=_defaults_from_args(args),
    )

    if not options.wheel and not options.sdist:
        print("Error: nothing to build (--no-wheel without --sdist)", file=sys.stderr)
        return 1

    try:
        result = package(args.source, options)
    except (TinywheelError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print()
        print(f"Packaged {result.descriptor.name} {result.descriptor.version}:")
        if result.wheel_path:
            print(f"  wheel: {result.wheel_path}")
        if result.sdist_path:
            print(f"  sdist: {result.sdist_path}")
        if options.keep_build_dir:
            print(f"  build dir: {result.build_dir}")
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    """Resolve metadata and print the generated pyproject.toml."""
    from tinywheel.build import read_source_parts
    from tinywheel.pyproject import generate_pyproject

    try:
        parts = read_source_parts(
            args.source,
            defaults=_defaults_from_args(args),
            use_git=not args.no_git,
            verbose=not args.quiet,
        )
    except (TinywheelError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(generate_pyproject(parts.descriptor), end="")
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("source", help="The annotated Python source file")
    parser.add_argument(
        "--name",
        help="Package name (default: the source file name without .py)",
    )
    parser.add_argument(
        "--version",
        help="Version to use when the metadata does not declare one",
    )
    parser.add_argument(
        "--no-git",
        action="store_true",
        help="Do not infer author and email from the global git config",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only print errors",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="tinywheel",
        description="tinywheel - Build a Python package from a single file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  tinywheel example.py                  Build example-<version>-py3-none-any.whl
  tinywheel example.py --sdist -o dist  Build a wheel and an sdist into dist/
  tinywheel inspect example.py          Show the generated pyproject.toml
        """,
    )

    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    package_parser = subparsers.add_parser(
        "package", help="Build distributions from a source file"
    )
    _add_common_arguments(package_parser)
    package_parser.add_argument(
        "--output-dir",
        "-o",
        help="Directory for the built distributions (default: current directory)",
    )
    package_parser.add_argument(
        "--sdist",
        action="store_true",
        help="Also build a source distribution",
    )
    package_parser.add_argument(
        "--no-wheel",
        action="store_true",
        help="Skip building the wheel",
    )
    package_parser.add_argument(
        "--keep-build-dir",
        action="store_true",
        help="Keep the temporary staging directory",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Print the pyproject.toml that would be generated"
    )
    _add_common_arguments(inspect_parser)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the tinywheel CLI. Calls sys.exit with return code."""
    sys.exit(_main(argv))


def _main(argv: Optional[list[str]] = None) -> int:
    """Internal main that returns exit code."""
    if argv is None:
        argv = sys.argv[1:]

    # `tinywheel file.py` is shorthand for `tinywheel package file.py`
    if argv and not argv[0].startswith("-") and argv[0] not in SUBCOMMANDS:
        argv = ["package"] + list(argv)

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.subcommand == "package":
        return cmd_package(args)
    elif args.subcommand == "inspect":
        return cmd_inspect(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    main()
