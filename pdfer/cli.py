#!/usr/bin/env python3
"""
pdfer command line.

Usage
-----
    pdfer <file.pdf ...> [-r]                   quick info
    pdfer merge a.pdf b.pdf -o out.pdf          merge (alias: m)
    pdfer split doc.pdf 1,3,5-10 [-o DIR]       split (alias: s)

Exit code
---------
- 0 on success (or when the user aborts at a prompt)
- 2 on validation failure (bad arguments, bad page selection, empty PDF)
- 1 on structural or I/O failure
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from pdfer import __version__
from pdfer.config import PdferConfig
from pdfer.errors import PdferError, ValidationError
from pdfer.intake import load_pdf
from pdfer.ops.info import describe_document, format_document_info
from pdfer.ops.merge import merge_files
from pdfer.ops.output import (
    collect_pdfs,
    default_split_dir,
    ensure_pdf_suffix,
    resolve_output_conflict,
)
from pdfer.ops.page_ranges import check_page_ranges, describe_selection
from pdfer.ops.split import split_file

Ask = Callable[[str], str]

COMMANDS = {"info", "merge", "m", "split", "s"}
PAGES_PROMPT = "Enter pages to split (e.g., 1,3,5-7,10-): "

EXAMPLES = """\
Examples:
  Quick info:  pdfer test.pdf
  Merge:       pdfer merge a.pdf b.pdf -o out.pdf
  Split:       pdfer split doc.pdf 1,3,5-10
"""

SPLIT_USAGE_HINT = """\
Split command accepts only ONE input PDF file.
Found extra arguments: {extra}

If your filename contains spaces, wrap it in quotes:
   pdfer split "file with spaces.pdf"

Usage: pdfer split <file.pdf> [PAGES] [-o OUTPUT]

To split multiple PDFs, run the command separately for each:
  pdfer split a.pdf
  pdfer split b.pdf"""


# ----------------------------
# Argument parsing
# ----------------------------

def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="count", default=0,
                        help="More log output (repeat for debug)")

    ap = argparse.ArgumentParser(
        prog="pdfer",
        description="Merge and split PDFs from the command line.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = ap.add_subparsers(dest="command")

    info = sub.add_parser("info", parents=[common], help="Show page count and metadata")
    info.add_argument("files", nargs="+", type=Path)
    info.add_argument("-r", "--recursive", action="store_true", help="Search directories recursively")

    merge = sub.add_parser(
        "merge", aliases=["m"], parents=[common], help="Merge PDFs into one",
        epilog="Examples:\n  pdfer merge a.pdf b.pdf -o out.pdf\n  pdfer m *.pdf -o merged.pdf",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    merge.add_argument("inputs", nargs="+", type=Path)
    merge.add_argument("-o", "--output", type=Path, default=Path("merged.pdf"))
    merge.add_argument("-i", "--info", action="store_true", help="Show info for each input first")

    split = sub.add_parser(
        "split", aliases=["s"], parents=[common], help="Split a PDF into single pages",
        epilog=(
            "Examples:\n"
            "  pdfer split document.pdf              # Split all pages\n"
            "  pdfer split report.pdf 1,3,5-10       # Split specific pages\n"
            "  pdfer s doc.pdf 5-                    # Split from page 5 to end"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    split.add_argument("input", type=Path)
    split.add_argument("pages", nargs="?", metavar="PAGES", default=None)
    split.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    split.add_argument("-o", "--output", type=Path, default=None)
    split.add_argument("-i", "--info", action="store_true", help="Show info for the input first")
    split.add_argument("--keep-going", action="store_true",
                       help="Skip pages that fail to extract instead of aborting")
    return ap


def _with_default_command(argv: List[str]) -> List[str]:
    """`pdfer a.pdf` means `pdfer info a.pdf`."""
    positionals = [a for a in argv if not a.startswith("-")]
    if positionals and positionals[0] not in COMMANDS:
        return ["info"] + argv
    return argv


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


# ----------------------------
# Commands
# ----------------------------

def _show_info(path: Path) -> int:
    graph = load_pdf(path)
    info = describe_document(graph, path)
    print("\n".join(format_document_info(info)))
    return info.page_count


def cmd_info(args: argparse.Namespace) -> int:
    files = collect_pdfs(args.files, recursive=args.recursive)
    total_pages = 0
    for path in files:
        try:
            total_pages += _show_info(path)
        except PdferError as exc:
            print(f"[ERROR] Error reading {path}: {exc}")
        if len(files) > 1:
            print()

    if len(files) > 1:
        print("-" * 34)
        print(f"Total: {len(files)} PDF(s), {total_pages} page(s)")
    return 0


def cmd_merge(args: argparse.Namespace, ask: Ask) -> int:
    if args.info:
        for path in args.inputs:
            try:
                _show_info(path)
            except PdferError as exc:
                print(f"[ERROR] Error reading {path}: {exc}")
            print()

    output = resolve_output_conflict(ensure_pdf_suffix(args.output), is_directory=False, ask=ask)
    if output is None:
        return 0
    output = ensure_pdf_suffix(output)

    print(f">>> Merging {len(args.inputs)} PDF(s)...")
    result = merge_files(
        args.inputs,
        output,
        config=PdferConfig(),
        on_progress=lambda path: print(f"    Processing: {path}"),
    )
    print(f"[OK] Merged PDF saved: {output} ({result.page_count} pages)")
    return 0


def _select_pages(spec: Optional[str], total: int, ask: Ask) -> Optional[List[int]]:
    """Resolve the page selection, re-prompting on invalid input.

    Returns None when the user aborts.
    """
    if spec is None:
        return list(range(1, total + 1))

    while True:
        result = check_page_ranges(spec, total)
        if result.ok:
            return result.pages
        print(f"[FAIL] Invalid page spec: {result.error}")
        try:
            spec = ask(PAGES_PROMPT).strip()
        except EOFError:
            spec = ""
        if not spec:
            print("Aborted.")
            return None


def cmd_split(args: argparse.Namespace, ask: Ask) -> int:
    if args.extra:
        print(SPLIT_USAGE_HINT.format(extra=", ".join(args.extra)))
        return 2

    if args.info:
        try:
            _show_info(args.input)
        except PdferError as exc:
            print(f"[ERROR] Error reading {args.input}: {exc}")
        print()

    source = load_pdf(args.input)

    output = resolve_output_conflict(
        args.output or default_split_dir(args.input), is_directory=True, ask=ask
    )
    if output is None:
        return 0

    total = source.page_count
    print(f">>> PDF has {total} pages.")
    if total == 0:
        raise ValidationError(f"Input PDF has no pages: {args.input}")

    pages = _select_pages(args.pages, total, ask)
    if pages is None:
        return 0
    if not pages:
        raise ValidationError("No pages to split (check your page range)")

    print(f">>> Splitting {describe_selection(pages, total)}...")

    def _progress(done: int, expected: int) -> None:
        if expected > 10:
            print(f"\rProcessing: {done}/{expected}", end="", flush=True)

    config = PdferConfig(split_error_policy="skip" if args.keep_going else "abort")
    try:
        report = split_file(args.input, output, pages, config=config, source=source, on_progress=_progress)
    finally:
        if len(pages) > 10:
            print()

    for failure in report.failures:
        print(f"[FAIL] Page {failure.number}: {failure.error}")
    if not report.ok:
        print(f"[WARN] {len(report.pages)} of {len(pages)} page(s) written to {output}")
        return 1

    print(f"[OK] Done! {len(report.pages)} page(s) written to {output}")
    return 0


# ----------------------------
# Entry point
# ----------------------------

def main(argv: Optional[List[str]] = None, ask: Ask = input) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(_with_default_command(argv))

    if args.command is None:
        print(
            "[FAIL] No PDF files or command specified. "
            "Try 'pdfer --help' or 'pdfer <file.pdf>' for quick info"
        )
        return 2

    _configure_logging(args.verbose)

    try:
        if args.command == "info":
            return cmd_info(args)
        if args.command in ("merge", "m"):
            return cmd_merge(args, ask)
        return cmd_split(args, ask)
    except ValidationError as exc:
        print(f"[FAIL] {exc}")
        return 2
    except PdferError as exc:
        print(f"[ERROR] {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
