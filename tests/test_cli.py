# tests/test_cli.py
from __future__ import annotations

import csv

import pytest

from smoothratio.cli import main
from smoothratio.fmt import strip_ansi


def _run(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, strip_ansi(out), strip_ansi(err)


def test_eval_shows_exact_split(capsys):
    code, out, _ = _run(capsys, "eval", "8", "80")
    assert code == 0
    assert "n = 8" in out
    assert "72" in out
    assert "2³·3² = 72" in out
    assert "n = 80" in out
    assert "6,480" in out


def test_eval_rejects_degenerate_n(capsys):
    code, _, err = _run(capsys, "eval", "2")
    assert code == 2
    assert "at least 3" in err


def test_search_writes_csv(isolated_workspace, capsys):
    code, out, _ = _run(capsys, "1000", "--quiet", "--csv", "out.csv")
    assert code == 0
    assert out == ""
    path = isolated_workspace / "out.csv"
    with path.open(encoding="utf-8", newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert rows
    assert all(3 <= int(r["n"]) <= 1000 for r in rows)


def test_search_report_on_screen(capsys):
    code, out, _ = _run(capsys, "10^4", "--density", "low", "--mode", "spikes")
    assert code == 0
    assert "Search completed" in out
    assert "Spike history" in out
    assert "10,000" in out


def test_top_mode_report_file(isolated_workspace, capsys):
    code, out, _ = _run(capsys, "1e5", "--mode", "top", "--top-k", "5", "--output", "report.txt")
    assert code == 0
    text = (isolated_workspace / "report.txt").read_text(encoding="utf-8")
    assert "Top 5 values" in text
    assert "\x1b[" not in text
    assert "Report written to" in out


def test_profile_drives_defaults(capsys):
    code, out, _ = _run(capsys, "5000", "--profile", "thorough")
    assert code == 0
    assert "high" in out
    assert "Top " in out


@pytest.mark.parametrize(
    ("argv", "fragment"),
    [
        (("abc",), "not an integer"),
        (("10**16",), "10^15"),
        (("1",), "at least 2"),
        ((), "MAX_N is required"),
        (("1000", "2000"), "unexpected arguments"),
        (("1000", "--profile", "nope"), "unknown profile"),
        (("1000", "--output", "notes.md"), "--output"),
        (("1000", "--csv", "results.py"), "--csv"),
        (("1000", "--csv", "exports/"), "--csv"),
        (("1000", "--top-k", "0"), "top-K"),
        (("1000", "--batch-size", "-5"), "batch size"),
    ],
)
def test_user_errors_exit_2(capsys, argv, fragment):
    code, _, err = _run(capsys, *argv)
    assert code == 2
    assert fragment in err


def test_unknown_density_is_argparse_error(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["1000", "--density", "extreme"])
    assert exc.value.code == 2


def test_init_where_profiles(isolated_workspace, capsys):
    code, out, _ = _run(capsys, "init")
    assert code == 0
    assert "Copied profiles: 3" in out

    code, out, _ = _run(capsys, "where")
    assert code == 0
    assert str(isolated_workspace.resolve()) in out

    code, out, _ = _run(capsys, "profiles", "--profile", "quick")
    assert code == 0
    assert "* quick" in out
    assert "thorough" in out


def test_debug_dumps_settings(capsys):
    code, _, err = _run(capsys, "eval", "9", "--debug")
    assert code == 0
    assert "active profile: default" in err
    assert "SEARCH.DENSITY" in err
