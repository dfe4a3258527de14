"""Command line entry point: generate declarations from a project file."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from yclass.generators import AvailableGenerator, generate
from yclass.project import ProjectData, ProjectFormatError

_GENERATORS = {
    "rust": AvailableGenerator.RUST,
    "cpp": AvailableGenerator.CPP,
}


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yclass",
        description="Generate struct declarations from a project file.",
    )
    parser.add_argument("project", type=Path, help="project file to read")
    parser.add_argument(
        "-g",
        "--generator",
        choices=sorted(_GENERATORS),
        default="rust",
        help="language to generate (default: rust)",
    )
    parser.add_argument("-o", "--output", type=Path, help="write to this file instead of stdout")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command and return its exit status."""
    args = _parser().parse_args(argv)

    try:
        text = args.project.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"yclass: Failed to open the project. {exc}", file=sys.stderr)
        return 1

    try:
        class_list = ProjectData.from_str(text).load()
    except ProjectFormatError as exc:
        print(f"yclass: Project file is in invalid format: {exc}", file=sys.stderr)
        return 1

    output = generate(class_list.classes, _GENERATORS[args.generator])

    if args.output is None:
        sys.stdout.write(output)
        return 0
    try:
        args.output.write_text(output, encoding="utf-8")
    except OSError as exc:
        print(f"yclass: Failed to write the output. {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())