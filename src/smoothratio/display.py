# src/smoothratio/display.py
from __future__ import annotations

from colorama import Fore, Style

from smoothratio.config import list_profiles_with_descriptions
from smoothratio.fmt import (
    format_log_ratio,
    format_ratio,
    format_remainder,
    format_smooth_part,
    group_int,
    highlight,
    pad,
    visible_len,
)
from smoothratio.records import ResultRecord
from smoothratio.runtime import CFG_INT
from smoothratio.search import SearchOutcome, SearchStatus

ALIGN_WIDTH = 22  # label column


def _emit(om, text: str = "") -> None:
    if om is None:
        print(text)
    else:
        om.write(text)


def _line(om, label: str, value: str) -> None:
    _emit(om, f"  {label:.<{ALIGN_WIDTH}} {value}")


def print_header(max_n: int, density: str, mode: str, om=None) -> None:
    _emit(om, f"\n{Fore.YELLOW}{Style.BRIGHT}R(n) = 2^k·3^l / (n·ln n) search{Style.RESET_ALL}")
    _line(om, "max n", group_int(max_n))
    _line(om, "density", density)
    _line(om, "tracking", "record-breaking spikes" if mode == "spikes" else "top values")


def print_summary(outcome: SearchOutcome, elapsed_s: float | None = None, om=None) -> None:
    st = outcome.state
    s = outcome.summary
    _emit(om)
    if outcome.status is SearchStatus.CANCELLED:
        _emit(om, f"{Fore.RED}{Style.BRIGHT}Search cancelled{Style.RESET_ALL} "
                  f"after {group_int(st.processed_count)} of {group_int(st.total_estimate)} candidates; "
                  "partial results below.")
    else:
        _emit(om, f"{Fore.GREEN}{Style.BRIGHT}Search completed{Style.RESET_ALL}")

    _line(om, "points computed", group_int(s.count))
    if st.skipped:
        _line(om, "skipped", group_int(st.skipped))
    if s.count:
        _line(om, "max log R(n)", highlight(format_log_ratio(s.max_log_ratio)))
        _line(om, "max R(n)", format_ratio(s.max_ratio))
        _line(om, "at n", group_int(s.max_n))
        _line(om, "median log R(n)", format_log_ratio(s.median_log_ratio))
        _line(om, "min log R(n)", format_log_ratio(s.min_log_ratio))
        _line(om, "largest n", group_int(s.largest_n_processed))
    if elapsed_s is not None:
        _line(om, "elapsed", f"{elapsed_s:.2f} s")


def print_records_table(records: list[ResultRecord], title: str, om=None, rows: int | None = None) -> None:
    if rows is None:
        rows = CFG_INT("DISPLAY.TABLE_ROWS", 50)
    shown = records[:rows]
    _emit(om, f"\n{Fore.YELLOW}{Style.BRIGHT}{title}{Style.RESET_ALL}")
    if not shown:
        _emit(om, "  (no records)")
        return

    head = ("#", "n", "k", "l", "log R(n)", "R(n)", "m")
    cells = [
        (
            str(i),
            group_int(r.n),
            str(r.pow2),
            str(r.pow3),
            format_log_ratio(r.log_ratio),
            format_ratio(r.ratio),
            format_remainder(r.remainder),
        )
        for i, r in enumerate(shown, 1)
    ]
    widths = [max(len(h), *(visible_len(c[j]) for c in cells)) for j, h in enumerate(head)]
    right = (True, True, True, True, True, True, False)

    _emit(om, "  " + "  ".join(pad(h, w, right=r) for h, w, r in zip(head, widths, right)))
    _emit(om, "  " + "  ".join("-" * w for w in widths))
    for c in cells:
        _emit(om, "  " + "  ".join(pad(v, w, right=r) for v, w, r in zip(c, widths, right)))
    if len(records) > rows:
        _emit(om, f"  … {len(records) - rows} more")


def print_outcome(outcome: SearchOutcome, elapsed_s: float | None = None, om=None) -> None:
    print_summary(outcome, elapsed_s, om=om)
    if outcome.mode == "spikes":
        title = "Spike history (record-breaking values)"
    else:
        title = f"Top {len(outcome.spikes_or_top)} values"
    print_records_table(outcome.spikes_or_top, title, om=om)


def print_record_detail(rec: ResultRecord, om=None) -> None:
    """Exact breakdown of one n: n(n+1) = 2^k·3^l·m and R(n)."""
    _emit(om, f"\n{Fore.YELLOW}{Style.BRIGHT}n = {group_int(rec.n)}{Style.RESET_ALL}")
    _line(om, "n(n+1)", group_int(rec.n * (rec.n + 1)))
    _line(om, "2/3-smooth part", f"{format_smooth_part(rec.pow2, rec.pow3)} = {group_int(rec.smooth_part)}")
    _line(om, "k (pow2)", str(rec.pow2))
    _line(om, "l (pow3)", str(rec.pow3))
    _line(om, "m", f"{group_int(rec.remainder)} = {format_remainder(rec.remainder, factor=True)}")
    _line(om, "log R(n)", highlight(format_log_ratio(rec.log_ratio, 6)))
    _line(om, "R(n)", format_ratio(rec.ratio, 6))


def print_profiles_with_descriptions(current: str | None = None) -> None:
    pairs = list_profiles_with_descriptions()
    if not pairs:
        print("\nAvailable profiles: (none)")
        return
    lines = []
    for name, desc in pairs:
        mark = "*" if current and name == current else " "
        lines.append(f"{mark} {name:13} - {desc}")
    print("\nAvailable profiles:\n  " + "\n  ".join(lines))
