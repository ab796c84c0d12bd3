"""Command line entry point: ingest a descriptor and print the cloud summary.

Examples::

    python -m cloudzone cloudfiles/MilkyWayGMC.desc
    python -m cloudzone my_cloud.desc --verbose --tolerance 1e-12 --json
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
import warnings
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from .cloud import Cloud
from .errors import CloudZoneError
from .schema import IngestOptions, load_options

logger = logging.getLogger(__name__)


def configure_logging(level: int, suppress_warnings: bool = False) -> None:
    """Configure root logging and optionally silence Python warnings."""

    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    root = logging.getLogger()
    root.setLevel(level)
    if suppress_warnings:
        warnings.filterwarnings("ignore")
    logging.captureWarnings(True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloudzone",
        description="Read a one-zone cloud descriptor and report its state",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
    python -m cloudzone cloudfiles/MilkyWayGMC.desc
    python -m cloudzone cloud.desc --options ingest.yml --json
        """,
    )
    parser.add_argument("descriptor", help="descriptor file (bundled cloudfiles/ are found automatically)")
    parser.add_argument("--verbose", action="store_true", help="log every directive as it is applied")
    parser.add_argument("--no-warn", action="store_true", help="set noWarn on the resulting cloud and silence Python warnings")
    parser.add_argument("--tolerance", type=float, default=None, help="tolerance of the hydrogen sum check")
    parser.add_argument("--options", default=None, help="YAML file with ingestion options")
    parser.add_argument(
        "--search-dir",
        action="append",
        default=None,
        dest="search_dirs",
        help="extra directory searched for the descriptor (repeatable)",
    )
    parser.add_argument("--json", action="store_true", help="print the summary as JSON")
    return parser


def _options_from_args(args: argparse.Namespace) -> IngestOptions:
    overrides: Dict[str, Any] = {
        "verbose": True if args.verbose else None,
        "suppress_convergence_warnings": True if args.no_warn else None,
        "hydrogen_tolerance": args.tolerance,
    }
    if args.options is not None:
        options = load_options(args.options, **overrides)
    else:
        options = IngestOptions(**{key: value for key, value in overrides.items() if value is not None})
    if args.search_dirs:
        options = options.model_copy(update={"search_dirs": list(options.search_dirs) + list(args.search_dirs)})
    return options


def format_summary(summary: Dict[str, Any]) -> List[str]:
    lines = []
    for key in ("nH", "colDen", "sigmaNT", "dVdr", "Tg", "Td"):
        lines.append(f"{key:>8s} = {summary[key]:g}")
    lines.append("composition:")
    for key, value in summary["comp"].items():
        lines.append(f"{key:>8s} = {value if value is None else format(value, 'g')}")
    lines.append("dust:")
    for key, value in summary["dust"].items():
        lines.append(f"{key:>10s} = {value:g}")
    lines.append("radiation:")
    for key, value in summary["rad"].items():
        lines.append(f"{key:>8s} = {value:g}")
    if summary["emitters"]:
        lines.append("emitters:")
        for name, em in summary["emitters"].items():
            lines.append(f"  {name}: abundance {em['abundance']:g}")
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.INFO if args.verbose else logging.WARNING, suppress_warnings=args.no_warn)

    try:
        options = _options_from_args(args)
        cloud = Cloud.from_descriptor(args.descriptor, options=options)
    except (CloudZoneError, ValidationError) as exc:
        print(f"[ERROR] {exc}")
        return 1

    summary = cloud.summary()
    if args.json:
        json.dump(summary, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        for line in format_summary(summary):
            print(line)
    return 0


__all__ = ["configure_logging", "build_parser", "format_summary", "main"]
