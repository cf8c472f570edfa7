import argparse
import time
from colorama import Fore

import utils
from utils import MAX_COMBINATIONS, ITEMS_PER_PAGE, DEFAULT_DIGITS, EXAMPLE_DIGITS, log_with_time, vlog
from groups import InvalidInputError, count_combinations, print_combinations
from session import CalculatorSession


def build_parser():
    parser = argparse.ArgumentParser(
        description="Turn a digit string into every letter combination (A=1, ..., Z=26)"
    )
    parser.add_argument("digits", nargs="?", default=None, help=f"Digits to decode (default: {DEFAULT_DIGITS})")
    parser.add_argument("--example", action="store_true", help=f"Use the example input {EXAMPLE_DIGITS}")
    parser.add_argument(
        "--cap", type=int, default=MAX_COMBINATIONS, help=f"Stop after this many combinations (default: {MAX_COMBINATIONS})"
    )
    parser.add_argument("--page", type=int, default=1, help="Page of results to show (default: 1)")
    parser.add_argument(
        "--page-size", type=int, default=ITEMS_PER_PAGE, help=f"Combinations per page (default: {ITEMS_PER_PAGE})"
    )
    parser.add_argument("--all", action="store_true", help="Print every combination instead of a single page")
    parser.add_argument("--copy", type=int, default=None, metavar="INDEX", help="Print only the letters of combination INDEX (1-based)")
    parser.add_argument("--count-only", action="store_true", help="Only count the combinations, do not list them")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--log-run", action="store_true", help="Save the input and result summary to a JSON log file")
    parser.add_argument("--load-log", type=str, default=None, help="Path to a JSON log file to take the digits from")
    return parser


def _busy_indicator(session):
    if session.is_loading:
        log_with_time(f"⟳ Calculating combinations for {session.digits or '(empty)'}…", color=Fore.CYAN)


def run_calculator(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    utils.start_time = time.time()
    utils.VERBOSE = args.verbose
    utils.LOG_TO_STDERR = args.copy is not None

    if args.page_size < 1:
        parser.error("--page-size must be at least 1")
    if args.cap < 1:
        parser.error("--cap must be at least 1")

    digits = args.digits if args.digits is not None else DEFAULT_DIGITS
    if args.example:
        digits = EXAMPLE_DIGITS
    if args.load_log:
        try:
            log_data = utils.load_run_log(args.load_log)
        except FileNotFoundError:
            log_with_time(f"Could not find log file: {args.load_log}", color=Fore.RED)
            return 1
        except (OSError, ValueError) as e:
            log_with_time(f"Error loading log file: {e}", color=Fore.RED)
            return 1
        digits = log_data["digits"]
        vlog(f"Loaded digits {digits!r} from {args.load_log}")

    if args.count_only:
        try:
            total = count_combinations(digits)
        except InvalidInputError:
            log_with_time("Invalid input: please enter valid digits (numbers only).", color=Fore.RED)
            return 2
        print(f"{total:,} combination(s)")
        return 0

    with CalculatorSession(cap=args.cap, page_size=args.page_size, on_change=_busy_indicator) as session:
        future = session.calculate(digits)
        if future is None:
            return 2
        if args.log_run:
            utils.log_run_to_file(digits)
        future.result()

        if args.copy is not None:
            try:
                letters = session.copy_letters(args.copy - 1)
            except IndexError:
                log_with_time(
                    f"No combination #{args.copy}; there are {len(session.combinations)}.", color=Fore.RED
                )
                return 2
            print(letters)
            return 0

        session.change_page(args.page)
        log_with_time(session.summary(), color=Fore.GREEN)
        if session.truncated:
            log_with_time(
                f"Showing the first {len(session.combinations):,} of {session.total_available:,} combinations.",
                color=Fore.YELLOW,
            )
        if not session.combinations:
            log_with_time("No valid combination covers these digits.", color=Fore.YELLOW)
        elif args.all:
            print_combinations(session.combinations)
        else:
            first = (session.current_page - 1) * session.page_size + 1
            print_combinations(session.page_items, start=first)

        if args.log_run:
            combos = session.combinations
            utils.log_run_to_file(
                digits,
                {
                    "count": len(combos),
                    "truncated": session.truncated,
                    "elapsed_ms": round(session.execution_time, 3),
                    "first": combos[0].as_dict() if combos else None,
                    "last": combos[-1].as_dict() if combos else None,
                },
            )

    total_elapsed = time.time() - utils.start_time
    vlog(f"Total time {total_elapsed:.3f}s")
    return 0
