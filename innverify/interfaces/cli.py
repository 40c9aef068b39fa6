"""
interfaces/cli.py
──────────────────────────────────────────────────────────────────────────────
Command-line interface for INN verification.

Usage:
  # Single INN
  python -m innverify.interfaces.cli --inn 7707083893

  # Batch file (one INN per line, '#' comments allowed)
  python -m innverify.interfaces.cli --file inns.txt

  # JSON output
  python -m innverify.interfaces.cli --inn 7707083893 --json

  # Via installed entry-point (pyproject.toml [project.scripts])
  innverify --inn 7707083893

Exit codes:
  0 — every INN was looked up (found, inactive or not found)
  1 — fatal error (config, auth, registry transport failure)
  2 — argument error or malformed INN
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from innverify.domain.exceptions import InnVerifyError, InvalidFormat, TransportError
from innverify.domain.models import VerificationResult
from innverify.services.container import get_service

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="innverify",
        description="Verify a Russian business INN against the company registry.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "--inn", "-i",
        metavar="INN",
        help="Single 10- or 12-digit INN to verify.",
    )
    p.add_argument(
        "--file", "-f",
        metavar="FILE",
        type=Path,
        help="Path to a text file with one INN per line.",
    )
    p.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON.",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    return p


# ── Formatting helpers ─────────────────────────────────────────────────────

def _print_result_text(inn: str, result: VerificationResult) -> None:
    """Pretty-print a VerificationResult to stdout."""
    print(f"\n{'─' * 60}")
    print(f"INN    : {inn}")
    print(f"Status : {result.status.value}  |  {result.message}")
    company = result.company
    if company is not None:
        print(f"{'─' * 60}")
        print(f"  Name    : {company.name}")
        print(f"  OGRN    : {company.ogrn}")
        print(f"  Address : {company.address}")
        if company.okved:
            print(f"  OKVED   : {company.okved}")
        print(f"  State   : {company.state}")
    print()


def _print_result_json(inn: str, result: VerificationResult) -> None:
    """Print a VerificationResult as JSON to stdout."""
    print(json.dumps({"inn": inn, **result.to_dict()}, indent=2, ensure_ascii=False))


# ── Main logic ─────────────────────────────────────────────────────────────

def _load_inns_from_file(path: Path) -> list[str]:
    """Read INNs from a text file, one per line, skip blank/comment lines."""
    if not path.exists():
        print(f"ERROR: File not found: {path}", file=sys.stderr)
        sys.exit(2)
    lines = path.read_text(encoding="utf-8").splitlines()
    return [l.strip() for l in lines if l.strip() and not l.startswith("#")]


def run(args: argparse.Namespace) -> int:
    """Verify every requested INN.

    Returns:
        Exit code (0 = success, 1 = fatal/transport error, 2 = bad input).
    """
    if args.inn:
        inns = [args.inn]
    elif args.file:
        inns = _load_inns_from_file(args.file)
    else:
        print("ERROR: provide --inn or --file", file=sys.stderr)
        return 2

    printer = _print_result_json if args.json_output else _print_result_text

    try:
        service = get_service()
    except InnVerifyError as exc:
        logger.exception("Failed to initialise verification service")
        print(f"ERROR: Service initialisation failed: {exc}", file=sys.stderr)
        return 1

    exit_code = 0
    for inn in inns:
        try:
            result = service.verify(inn)
            printer(inn, result)
        except InvalidFormat as exc:
            print(f"ERROR [{inn!r}]: {exc.message}", file=sys.stderr)
            if exit_code == 0:
                exit_code = 2
        except TransportError as exc:
            logger.warning("Registry lookup failed for %s", inn)
            detail = f" ({exc.details})" if exc.details else ""
            print(f"ERROR [{inn!r}]: {exc.message}{detail}", file=sys.stderr)
            exit_code = 1

    return exit_code


def main() -> None:
    """Entry point for the innverify console script."""
    parser = _build_parser()
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    if not args.inn and not args.file:
        parser.print_help()
        sys.exit(2)

    sys.exit(run(args))


if __name__ == "__main__":
    main()
