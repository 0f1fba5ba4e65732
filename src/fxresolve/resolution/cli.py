from __future__ import annotations

import argparse
from pathlib import Path

from fxresolve.helper.multiformat_serializable_mixin import SUPPORTED_FORMATS
from fxresolve.resolution.sources.catalog_loader import CATALOG_STRATEGIES


def _configured_path(text: str) -> Path | str:
    # "" is kept as-is so that it can clear a path set in the project file
    return Path(text) if text.strip() else ""


def create_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fxresolve",
        description="resolve framework references into targeting packs, runtime packs and runtime frameworks",
        formatter_class=argparse.RawTextHelpFormatter)

    parser.add_argument(
        "--audit-log",
        type=str,
        metavar="DEST",
        help="write the audit log to space separated destinations:\n"
             "'stdout', 'stderr', 'file' (user log dir) or 'file:<path>'")

    parser.add_argument(
        "--catalog",
        type=_configured_path,
        help="known framework catalog file (.toml, .json, .yaml)")

    parser.add_argument(
        "--catalog-strategy",
        choices=CATALOG_STRATEGIES,
        help="how --catalog combines with the built-in catalog (default: merge)")

    parser.add_argument(
        "--enable-targeting-pack-download",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="queue missing targeting packs for download")

    parser.add_argument(
        "-f",
        "--framework",
        nargs="+",
        type=str,
        default=[],
        action="extend",
        metavar="NAME[:KEY=VALUE,...]",
        help="framework reference, optionally with overrides, e.g.\n"
             " Microsoft.NETCore.App:runtime_framework_version=8.0.4\n"
             " - can be repeated or space-separated")

    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        default="json",
        help="output format (default: json)")

    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="write the result to this file instead of stdout")

    parser.add_argument(
        "--project",
        type=Path,
        help="project configuration (fxproject.toml or pyproject.toml)")

    parser.add_argument(
        "-r",
        "--runtime-identifier",
        type=str,
        metavar="RID",
        help="runtime identifier to resolve runtime packs for, e.g. linux-x64")

    parser.add_argument(
        "--runtime-framework-version",
        type=str,
        metavar="VERSION",
        help="runtime framework version for every framework reference")

    parser.add_argument(
        "--runtime-graph",
        type=_configured_path,
        help="RID graph (runtime.json); defaults to the built-in graph")

    parser.add_argument(
        "--runtimeconfig",
        type=Path,
        metavar="PATH",
        help="also write a runtimeconfig.json for the resolved runtime frameworks")

    parser.add_argument(
        "--self-contained",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="resolve runtime packs for a self-contained deployment")

    parser.add_argument(
        "-t",
        "--target-framework",
        type=str,
        metavar="TFM",
        help="target framework, e.g. net8.0 or .NETCoreApp,Version=v8.0")

    parser.add_argument(
        "--target-latest-runtime-patch",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="use the latest known runtime patch version\n"
             "(defaults to on for self-contained, off otherwise)")

    parser.add_argument(
        "--targeting-pack-root",
        type=_configured_path,
        metavar="DIR",
        help="directory holding installed targeting packs")

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="set output to verbose")

    parser.add_argument(
        "-v",
        "--version",
        action="store_true",
        help="show version and exit")

    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        metavar="N",
        help="resolve framework entries on N threads")

    return parser
