# src/smoothratio/cli.py

"""
Smooth Ratio Explorer - search for large R(n) = 2^k·3^l / (n·ln n)

Description:
    For n(n+1) = 2^k · 3^l · m with gcd(m, 6) = 1, evaluates R(n) exactly
    over a biased candidate set up to 10^15 and reports the record-breaking
    values (spikes) or the top values found.

usage: see smoothratio -h
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
import textwrap
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

from smoothratio import __version__ as _ver
from smoothratio import config as CONFIG
from smoothratio.candidates import DENSITIES, CandidateGenerator, bounds_from_settings
from smoothratio.dataio import write_results_csv
from smoothratio.display import (
    print_header,
    print_outcome,
    print_profiles_with_descriptions,
    print_record_detail,
)
from smoothratio.expreval import parse_int_or_expr
from smoothratio.output_manager import OutputManager
from smoothratio.progress import Progress
from smoothratio.ratio import compute_record
from smoothratio.runtime import APPLY, CFG, CFG_INT
from smoothratio.runtime import current as _rt_current
from smoothratio.search import DEFAULT_BATCH_SIZE, DEFAULT_TOP_K, MODES, SearchController
from smoothratio.utility import (
    UserInputError,
    flatten_dotted,
    typename,
    validate_max_n,
    validate_output_setting,
)
from smoothratio.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

logger = logging.getLogger("smoothratio")

COMMANDS = ("init", "where", "profiles", "eval")


class _ColorFormatter(logging.Formatter):
    COLORS = {
        logging.DEBUG: Style.DIM,
        logging.INFO: "",
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED + Style.BRIGHT,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        color = self.COLORS.get(record.levelno, "")
        return f"{color}{msg}{Style.RESET_ALL}" if color else msg


def _configure_logging(debug: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_ColorFormatter("[%(levelname)s] %(name)s: %(message)s"))
    root = logging.getLogger("smoothratio")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if debug else logging.WARNING)
    root.propagate = False


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _parse_n(text: str, what: str = "maximum n") -> int:
    n = parse_int_or_expr(text)
    if n is None:
        raise UserInputError(f"{what} {text!r} is not an integer.")
    return n


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init [overwrite]
          Create the workspace and copy the packaged profiles if missing.

      where
          Show the workspace and package paths.

      profiles
          List available profiles.

      eval N [N ...]
          Show the exact 2^k·3^l·m split of n(n+1) and R(n) for each N.

    MAX_N accepts 1000000, 1,000,000, 1e12, 10^15 or 2**40.
    Press Ctrl-C during a search to stop it and keep the partial results.
    """)

    p = argparse.ArgumentParser(
        prog="smoothratio",
        description="Smooth Ratio Explorer: search for large R(n) = 2^k·3^l / (n·ln n)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="MAX_N | command",
                   help="largest n to search (up to 10^15), or a command")
    p.add_argument("--density", choices=DENSITIES, default=None,
                   help="candidate sampling density (default from profile: medium)")
    p.add_argument("--mode", choices=MODES, default=None,
                   help="spikes = running-maximum history, top = best --top-k values")
    p.add_argument("--top-k", type=int, default=None, help="number of values kept in top mode")
    p.add_argument("--batch-size", type=int, default=None, help="candidates per progress update")
    p.add_argument("--profile", default=None, help="profile name from the workspace (default: default)")
    p.add_argument("--output", default=None, help="Write the report to a file (or directory ending in /)")
    p.add_argument("--csv", default=None, help="Write every computed record to a CSV file")
    p.add_argument("--quiet", action="store_true", help="Suppress live progress and screen output")
    p.add_argument("--debug", action="store_true", help="Verbose logging and full tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _load_profile(name: str | None, debug: bool) -> str:
    ensure_workspace_seeded()
    name = name or "default"
    if not CONFIG.has_profile(name):
        avail = ", ".join(CONFIG.list_all_profiles()) or "(none)"
        raise UserInputError(f"unknown profile '{name}'. Available profiles: {avail}")
    selected = CONFIG.load_settings(name)
    APPLY(selected)
    if debug:
        _rt_current().debug = True
        print(f"[debug] active profile: {selected.name} ({selected._source})", file=sys.stderr)
        for k, v in sorted(flatten_dotted(selected.as_dict()).items(), key=lambda kv: kv[0].lower()):
            print(f"        {k:.<44} {v!r} ({typename(v)})", file=sys.stderr)
    return selected.name


def _cmd_eval(values: list[str], om: OutputManager) -> int:
    if not values:
        raise UserInputError("eval needs at least one integer.")
    for text in values:
        n = _parse_n(text, "n")
        if n < 3:
            raise UserInputError(f"n must be at least 3 for R(n) to be defined, got {n}.")
        print_record_detail(compute_record(n), om=om)
    return 0


async def _run_search(controller: SearchController, max_n: int, density: str, progress: Progress):
    loop = asyncio.get_running_loop()
    handled = False
    try:
        loop.add_signal_handler(signal.SIGINT, controller.cancel)
        handled = True
    except (NotImplementedError, RuntimeError, ValueError):
        # e.g. Windows event loops; Ctrl-C then aborts the whole run.
        pass
    try:
        async for event in controller.start(max_n, density):
            progress.update(event, force=event.percent == 100)
    finally:
        if handled:
            loop.remove_signal_handler(signal.SIGINT)
        progress.done()
    return controller.outcome


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init()

    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.debug)

    items = list(args.items)
    cmd = items[0].lower() if items and items[0].lower() in COMMANDS else None

    if cmd == "init":
        overwrite = len(items) > 1 and items[1] == "overwrite"
        ws, copied = seed_workspace(overwrite=overwrite)
        print(f"Workspace ready at: {ws}")
        print(f"Copied profiles: {copied}")
        return 0
    if cmd == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('smoothratio')}")
        return 0

    profile_name = _load_profile(args.profile, args.debug)
    debug = _rt_current().debug
    if debug:
        logging.getLogger("smoothratio").setLevel(logging.DEBUG)

    if cmd == "profiles":
        print_profiles_with_descriptions(current=profile_name)
        return 0

    try:
        target = validate_output_setting(args.output)
    except ValueError as e:
        raise UserInputError(f"--output: {e}") from None
    if args.csv and args.csv.endswith("/"):
        raise UserInputError("--csv needs a file name, not a directory.")
    try:
        validate_output_setting(args.csv)
    except ValueError as e:
        raise UserInputError(f"--csv: {e}") from None

    if cmd == "eval":
        with OutputManager(output_file=target, quiet=args.quiet, label="eval") as om:
            return _cmd_eval(items[1:], om)

    if not items:
        parser.print_usage()
        raise UserInputError("MAX_N is required (e.g. smoothratio 1e9).")
    if len(items) > 1:
        raise UserInputError(f"unexpected arguments: {' '.join(items[1:])}")

    max_n = validate_max_n(_parse_n(items[0]))
    density = (args.density or CFG("SEARCH.DENSITY", "medium")).lower()
    mode = (args.mode or CFG("SEARCH.MODE", "spikes")).lower()
    top_k = args.top_k if args.top_k is not None else CFG_INT("SEARCH.TOP_K", DEFAULT_TOP_K)
    batch_size = args.batch_size if args.batch_size is not None else CFG_INT("SEARCH.BATCH_SIZE", DEFAULT_BATCH_SIZE)

    controller = SearchController(batch_size=batch_size, mode=mode, top_k=top_k, bounds=bounds_from_settings())
    controller.bounds.preset(density)  # reject an unknown density before printing anything
    if debug:
        gen = CandidateGenerator(max_n, density, controller.bounds)
        for name, count in gen.strategy_counts().items():
            logger.debug("strategy %-12s %d points", name, count)

    with OutputManager(output_file=target, quiet=args.quiet, label=f"maxn={max_n}_{density}_{mode}") as om:
        print_header(max_n, density, mode, om=om)
        progress = Progress(enabled=not args.quiet)
        outcome = asyncio.run(_run_search(controller, max_n, density, progress))
        print_outcome(outcome, progress.elapsed(), om=om)

    if args.csv:
        path = write_results_csv(outcome.results, args.csv)
        if not args.quiet:
            print(f"\nWrote {len(outcome.results):,} records to {path}")
    if om.path and not args.quiet:
        print(f"Report written to {om.path}")

    logger.debug("profile %s, status %s", profile_name, outcome.status.value)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
