# flow_mermaid/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .constants import DIRECTION_DEFAULT, DIRECTIONS, LAYOUT_DEFAULT
from .convert import RenderConfig, convert_definition
from .diagnostics import Diagnostic, DiagnosticLog
from .io import load_definition, load_styles
from .writer import write_md, write_mmd


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flow-mermaid",
        description="Convert a workflow definition (actions + runAfter) into a Mermaid flowchart.",
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Flow definition file (.json, .yaml/.yml), or '-' to read JSON from stdin.",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help=(
            "Output path. A .md suffix writes a titled Markdown page with a Mermaid "
            "block; anything else writes raw Mermaid. Default: stdout."
        ),
    )
    parser.add_argument("--title", type=str, default=None, help="Diagram title")
    parser.add_argument(
        "--direction",
        type=str,
        choices=DIRECTIONS,
        default=DIRECTION_DEFAULT,
        help="Flowchart direction",
    )
    parser.add_argument(
        "--layout",
        type=str,
        default=LAYOUT_DEFAULT,
        help="Mermaid layout engine written to the front matter ('none' omits it).",
    )
    parser.add_argument(
        "--styles",
        type=Path,
        default=None,
        help="YAML file with per-kind style overrides (fill, stroke, shape, class_name).",
    )
    parser.add_argument(
        "--no-legend",
        action="store_true",
        help="Do not append class definitions for unused well-known action kinds.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Also print informational diagnostics (connections, subgraphs).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 if any warning was reported (output is still written).",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint."""
    args = _build_parser().parse_args(argv)

    def echo(diag: Diagnostic) -> None:
        if diag.severity == "warning" or args.verbose:
            print(diag.format(), file=sys.stderr)

    diagnostics = DiagnosticLog(echo=echo)

    try:
        styles = load_styles(args.styles) if args.styles else None
        cfg = RenderConfig(
            direction=args.direction,
            layout=None if args.layout.lower() == "none" else args.layout,
            title=args.title,
            styles=styles,
            legend=not args.no_legend,
        )
        definition = load_definition(args.input)
        result = convert_definition(definition, cfg, diagnostics)
    except (FileNotFoundError, ValueError, TypeError) as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(2)

    out: Optional[Path] = args.out
    if out is None:
        sys.stdout.write(result.code)
    elif out.suffix.lower() == ".md":
        title = args.title or (args.input.stem if str(args.input) != "-" else "Flow")
        write_md(out, title, result.code)
    else:
        write_mmd(out, result.code)

    if args.strict and diagnostics.warnings:
        raise SystemExit(2)
