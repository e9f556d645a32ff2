# modeq: solve modular equations from the command line.
#
#   modeq a b c n       -> a*x + b ≡ c (mod n)
#   modeq a b c d n     -> a*x^2 + b*x + c ≡ d (mod n)
#
# Examples:
#   modeq 1 3 0 298 315            -> 29 38 94 148 164 218 274 283
#   modeq 17 0 1 255               -> no solution
#   modeq --json -v 1 0 -1 0 77
#   modeq --count 1 0 0 0 1_267_650_600_228_229_401_496_703_205_376
#
# Coefficients are signed, the modulus is unsigned; underscores may separate digits.
# Negative numbers are read as positionals as long as they contain no underscore;
# otherwise put them after "--".

import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from . import __version__
from .arith import SUPPORTED_WIDTHS
from .config import SolverConfig
from .errors import ModularEquationError
from .factorization import DEFAULT_WORKERS
from .solver import LinearEquation, QuadraticEquation, count_solutions, solve

logger = logging.getLogger(__name__)

_LOG_LEVELS = (logging.ERROR, logging.INFO, logging.DEBUG)


def _parse_int(text: str) -> int:
    try:
        return int(text, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")


def _setup_logging(verbose: int, log_file: Optional[str]):
    logging.basicConfig(
        filename=log_file,
        level=_LOG_LEVELS[min(verbose, len(_LOG_LEVELS) - 1)],
        format='%(asctime)s - %(message)s'
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modeq",
        description="Solve a*x + b ≡ c (mod n) or a*x^2 + b*x + c ≡ d (mod n).")
    parser.add_argument('numbers', type=_parse_int, nargs='+', metavar='N',
                        help='"a b c n" for a linear, "a b c d n" for a quadratic equation')
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='-v for progress, -vv for debug output')
    parser.add_argument('--log-file', type=str, help='write log records to this file instead of stderr')
    parser.add_argument('--workers', type=int, default=DEFAULT_WORKERS,
                        help='threads racing to split each composite factor')
    parser.add_argument('--bits', type=int, choices=SUPPORTED_WIDTHS,
                        help='integer width to check values against (default: narrowest that fits)')
    parser.add_argument('--unchecked', action='store_true', help='skip operand range checks')
    parser.add_argument('--seed', type=int, help='make the randomized factor search reproducible')
    parser.add_argument('--max-solutions', type=int, default=sys.maxsize,
                        help='refuse to list more solutions than this')
    output = parser.add_mutually_exclusive_group()
    output.add_argument('--json', action='store_true', help='print a JSON document')
    output.add_argument('--count', action='store_true', help='print only the number of solutions')
    return parser


def _equation(numbers: List[int]):
    if len(numbers) == 4:
        eq = LinearEquation(*numbers)
    elif len(numbers) == 5:
        eq = QuadraticEquation(*numbers)
    else:
        raise SystemExit(f"Error: expected 4 numbers (linear) or 5 (quadratic), got {len(numbers)}.")
    if eq.a == 0:
        raise SystemExit("Error: the leading coefficient must be nonzero.")
    return eq


def _emit(out: Dict):
    """
    Emit JSON.
    """
    print(json.dumps(out, indent=2))


def main(argv: Optional[List[str]] = None):
    args = _build_parser().parse_args(argv)
    _setup_logging(args.verbose, args.log_file)

    if args.workers < 1:
        raise SystemExit("Error: --workers must be at least 1.")
    if args.max_solutions < 0:
        raise SystemExit("Error: --max-solutions must be nonnegative.")
    config = SolverConfig(bits=args.bits, checked=not args.unchecked, workers=args.workers,
                          seed=args.seed, max_solutions=args.max_solutions)

    try:
        eq = _equation(args.numbers)
        if args.count:
            print(count_solutions(eq, config))
            return
        solutions = solve(eq, config)
    except ModularEquationError as e:
        logger.error("%s failed: %s", args.numbers, e)
        raise SystemExit(f"Error: {e}")

    if args.json:
        method = "linear" if isinstance(eq, LinearEquation) else "quadratic"
        _emit({"method": method, "modulus": eq.modulus,
               "count": len(solutions) if solutions else 0, "solutions": solutions})
    elif solutions is None:
        print(f"No solution for {eq}", file=sys.stderr)
    else:
        for x in solutions:
            print(x)
