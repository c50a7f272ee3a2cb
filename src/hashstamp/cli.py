"""Command line entry point for minting, verifying and benchmarking stamps.

Usage:
    hashstamp mint foo.bar@foobar.com --bits 20 --grammar B
    hashstamp verify "1:20:1303030600:adam@cypherspace.org::McMybZIhxKXu57jd:ckvi"
    hashstamp bench --iterations 10 --bits 16
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from collections.abc import Sequence

from hashstamp.core.codec import parse_stamp
from hashstamp.core.exceptions import HashstampError, MalformedStampError
from hashstamp.core.search import SearchBudget
from hashstamp.core.settings import settings
from hashstamp.schemas.stamp import BenchOut, MintOut, VerifyOut
from hashstamp.services.minting import Grammar, Minter
from hashstamp.services.verification import check_stamp

logger = logging.getLogger("hashstamp")


def _grammar(value: str) -> Grammar:
    try:
        return Grammar(value.upper())
    except ValueError:
        raise argparse.ArgumentTypeError(f"grammar must be A or B, not {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hashstamp", description="Hashcash proof-of-work stamps")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (defaults to HASHSTAMP_LOG_LEVEL)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    mint_cmd = commands.add_parser("mint", help="Mint a stamp for a resource")
    mint_cmd.add_argument("resource")
    mint_cmd.add_argument("--bits", type=int, default=None, help="Required leading zero bits")
    mint_cmd.add_argument("--grammar", type=_grammar, default=Grammar.B)
    mint_cmd.add_argument("--version", type=int, choices=(0, 1), default=None, dest="stamp_version")
    mint_cmd.add_argument("--seed", type=int, default=None, help="Seed the random source")
    mint_cmd.add_argument("--max-attempts", type=int, default=None)
    mint_cmd.add_argument("--timeout", type=float, default=None, help="Seconds before giving up")
    mint_cmd.add_argument("--json", action="store_true", help="Print a JSON result")

    verify_cmd = commands.add_parser("verify", help="Verify a stamp")
    verify_cmd.add_argument("stamp")
    verify_cmd.add_argument("--bits", type=int, default=None, help="Agreed bits for version 0 stamps")
    verify_cmd.add_argument("--min-bits", type=int, default=None)
    verify_cmd.add_argument("--resource", default=None, help="Require this resource")
    verify_cmd.add_argument("--json", action="store_true", help="Print a JSON result")

    bench_cmd = commands.add_parser("bench", help="Mint and verify stamps repeatedly")
    bench_cmd.add_argument("--iterations", type=int, default=10)
    bench_cmd.add_argument("--bits", type=int, default=None)
    bench_cmd.add_argument("--grammar", type=_grammar, default=Grammar.B)
    bench_cmd.add_argument("--resource", default="foo.bar@foobar.com")
    bench_cmd.add_argument("--seed", type=int, default=None)
    return parser


def _budget(args: argparse.Namespace) -> SearchBudget | None:
    if args.max_attempts is None and args.timeout is None:
        return None
    return SearchBudget(max_attempts=args.max_attempts, timeout=args.timeout)


def run_mint(args: argparse.Namespace) -> int:
    minter = Minter(rng=random.Random(args.seed))
    result = minter.mint_with_stats(
        args.resource,
        args.bits,
        grammar=args.grammar,
        version=args.stamp_version,
        budget=_budget(args),
    )
    if args.json:
        parsed = parse_stamp(result.stamp)
        out = MintOut(
            stamp=result.stamp,
            resource=parsed.resource,
            bits=args.bits if args.bits is not None else minter.settings.default_bits,
            grammar=args.grammar.value,
            version=int(parsed.version),
            attempts=result.attempts,
        )
        print(out.model_dump_json())
    else:
        print(result.stamp)
    return 0


def run_verify(args: argparse.Namespace) -> int:
    valid = check_stamp(args.stamp, args.resource, args.min_bits, bits=args.bits)
    if args.json:
        out = VerifyOut(stamp=args.stamp, valid=valid)
        try:
            parsed = parse_stamp(args.stamp)
        except MalformedStampError as exc:
            out.error = str(exc)
        else:
            out.version = int(parsed.version)
            out.claimed_bits = parsed.bits
            out.resource = parsed.resource
        print(out.model_dump_json())
    else:
        print("Passed Verification" if valid else "Failed Verification")
    return 0 if valid else 1


def run_bench(args: argparse.Namespace) -> int:
    minter = Minter(rng=random.Random(args.seed))
    bits = args.bits if args.bits is not None else minter.settings.default_bits
    total_attempts = 0
    total_seconds = 0.0
    failures = 0
    for iteration in range(args.iterations):
        start = time.perf_counter()
        result = minter.mint_with_stats(args.resource, bits, grammar=args.grammar)
        elapsed = time.perf_counter() - start
        agreed_bits = bits if args.grammar is Grammar.A else None
        if not check_stamp(result.stamp, args.resource, bits=agreed_bits):
            failures += 1
            logger.error("Verification failed for %s", result.stamp)
        total_attempts += result.attempts
        total_seconds += elapsed
        logger.info(
            "%d -> time: %.0fms attempts=%d",
            iteration,
            elapsed * 1000,
            result.attempts,
        )

    count = max(args.iterations, 1)
    out = BenchOut(
        grammar=args.grammar.value,
        bits=bits,
        iterations=args.iterations,
        failures=failures,
        mean_attempts=total_attempts / count,
        mean_milliseconds=total_seconds * 1000 / count,
    )
    print(out.model_dump_json())
    return 1 if failures else 0


_COMMANDS = {
    "mint": run_mint,
    "verify": run_verify,
    "bench": run_bench,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return _COMMANDS[args.command](args)
    except HashstampError as exc:
        print(f"[hashstamp] ERROR: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
