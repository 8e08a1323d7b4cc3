"""Command-line entry point: ``qr-verdict``.

Asks the oracle one question and prints the verdict. Exit status:

* ``0``: a verdict was produced (yes, no or tie)
* ``1``: every entropy source failed, including the local fallback
* ``2``: malformed ``--entropy`` override or invalid configuration
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING, TextIO

from qr_verdict import __version__
from qr_verdict.codec import load_override
from qr_verdict.config import load_config, resolve_config
from qr_verdict.decision import Outcome
from qr_verdict.exceptions import (
    ConfigValidationError,
    EntropyExhaustedError,
    OverrideInputError,
)
from qr_verdict.oracle import VerdictOracle

if TYPE_CHECKING:
    from collections.abc import Sequence

    from qr_verdict.oracle import OracleResult

logger = logging.getLogger("qr_verdict")

EXIT_OK = 0
EXIT_EXHAUSTED = 1
EXIT_USAGE = 2

_BOLD_GREEN = "\x1b[1;32m"
_BOLD_RED = "\x1b[1;31m"
_BOLD_YELLOW = "\x1b[1;33m"
_RESET = "\x1b[0m"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qr-verdict",
        description="Answer a yes/no question by majority vote over quantum-seeded random bits.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  %(prog)s                          # 1024 entropy bytes, 40,000,000 votes
  %(prog)s --bytes 4096 --bits 1000000
  %(prog)s --entropy 0xdeadbeef     # inline hex instead of the network
  %(prog)s --entropy saved.hex      # hex or raw bytes from a file
""",
    )
    parser.add_argument(
        "--bytes",
        dest="entropy_bytes",
        type=int,
        default=None,
        help="Entropy bytes to acquire (default: QV_ENTROPY_BYTES or 1024).",
    )
    parser.add_argument(
        "--bits",
        dest="total_bits",
        type=int,
        default=None,
        help="Number of bit votes to generate (default: 40,000,000).",
    )
    parser.add_argument(
        "--cache",
        dest="cache_path",
        type=str,
        default=None,
        help="Hex cache file for physical entropy (default: qrandom_bytes.hex).",
    )
    parser.add_argument(
        "--entropy",
        type=str,
        default=None,
        help="Override entropy: inline hex string or path to a hex/raw file.",
    )
    parser.add_argument(
        "--workers",
        dest="max_workers",
        type=int,
        default=None,
        help="Sampling thread pool size.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Print the verdict without ANSI colors.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _colorize(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{_RESET}" if enabled else text


def render(result: OracleResult, color: bool = True) -> str:
    """Format an oracle result for the terminal."""
    tally = result.tally
    verdict = result.verdict
    lines = [
        f"Entropy: {len(result.buffer.data):,} bytes from {result.buffer.source} "
        f"({result.quality.value})",
        f"Using {result.seed_count} seeded generator(s)",
        f"Generated {tally.total:,} total bits: {tally.ones:,} ones, {tally.zeros:,} zeros",
        f"Ratio: {tally.ratio:.6f} ones per bit (z={verdict.z_score:.3f}, p={verdict.p_value:.4g})",
    ]
    if verdict.outcome is Outcome.YES:
        lines.append(_colorize(verdict.summary(), _BOLD_GREEN, color))
    elif verdict.outcome is Outcome.NO:
        lines.append(_colorize(verdict.summary(), _BOLD_RED, color))
    else:
        lines.append(_colorize("MIRACLE! It's a tie", _BOLD_YELLOW, color))
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None, stream: TextIO | None = None) -> int:
    """Run the CLI and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    out = stream if stream is not None else sys.stdout

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = resolve_config(
            load_config(),
            {
                "entropy_bytes": args.entropy_bytes,
                "total_bits": args.total_bits,
                "cache_path": args.cache_path,
                "max_workers": args.max_workers,
            },
        )
        override = load_override(args.entropy) if args.entropy is not None else None
    except ConfigValidationError as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_USAGE
    except OverrideInputError as exc:
        print(f"error: malformed entropy override: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        with VerdictOracle(config) as oracle:
            result = oracle.ask(override)
    except EntropyExhaustedError as exc:
        print(f"fatal: no entropy source available: {exc}", file=sys.stderr)
        return EXIT_EXHAUSTED

    use_color = not args.no_color and out.isatty()
    print(render(result, color=use_color), file=out)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
