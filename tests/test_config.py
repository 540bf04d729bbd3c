# tests/test_config.py
from __future__ import annotations

import pytest

from smoothratio import config as CONFIG
from smoothratio.candidates import CandidateBounds, bounds_from_settings
from smoothratio.runtime import APPLY, CFG, CFG_INT, current
from smoothratio.utility import UserInputError
from smoothratio.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

PACKAGED = {"default", "quick", "thorough"}


def test_workspace_follows_environment(isolated_workspace):
    assert workspace_dir() == isolated_workspace.resolve()


def test_seed_copies_packaged_profiles_once(isolated_workspace):
    root, copied = seed_workspace()
    assert copied == len(PACKAGED)
    assert (root / "results").is_dir()
    assert {p.stem for p in (root / "profiles").glob("*.toml")} == PACKAGED

    assert seed_workspace() == (root, 0)
    assert ensure_workspace_seeded() == (root, False)


def test_seed_keeps_user_edits_unless_overwrite(isolated_workspace):
    root, _ = seed_workspace()
    edited = root / "profiles" / "default.toml"
    edited.write_text('[SEARCH]\nDENSITY = "low"\n', encoding="utf-8")

    seed_workspace()
    assert "medium" not in edited.read_text(encoding="utf-8")

    _, copied = seed_workspace(overwrite=True)
    assert copied == len(PACKAGED)
    assert 'DENSITY = "medium"' in edited.read_text(encoding="utf-8")


def test_list_profiles():
    assert CONFIG.list_all_profiles() == sorted(PACKAGED)
    names = [n for n, _ in CONFIG.list_profiles_with_descriptions()]
    assert names == sorted(PACKAGED)
    assert CONFIG.has_profile("quick")
    assert not CONFIG.has_profile("nope")


def test_load_default_profile():
    ensure_workspace_seeded()
    s = CONFIG.load_settings(None)
    assert s.name == "default"
    assert "medium density" in s.description
    assert "_PROFILE_" not in s.as_dict()
    assert s.as_dict()["SEARCH"]["DENSITY"] == "medium"
    assert s._source.name == "default.toml"


def test_density_and_mode_are_lowercased(isolated_workspace):
    root, _ = seed_workspace()
    (root / "profiles" / "shouty.toml").write_text(
        '[SEARCH]\nDENSITY = "HIGH"\nMODE = "Top"\n', encoding="utf-8"
    )
    s = CONFIG.load_settings("shouty")
    assert s.name == "shouty"
    assert s.description == "(no description)"
    assert s.as_dict()["SEARCH"] == {"DENSITY": "high", "MODE": "top"}


def test_missing_profile_raises():
    ensure_workspace_seeded()
    with pytest.raises(UserInputError, match="not found"):
        CONFIG.load_settings("nope")


def test_malformed_profile(isolated_workspace):
    root, _ = seed_workspace()
    (root / "profiles" / "broken.toml").write_text("[SEARCH\nDENSITY = 1\n", encoding="utf-8")
    with pytest.raises(UserInputError, match="broken.toml"):
        CONFIG.load_settings("broken")
    assert ("broken", "(unreadable profile)") in CONFIG.list_profiles_with_descriptions()


def test_apply_and_dotted_lookup():
    ensure_workspace_seeded()
    APPLY(CONFIG.load_settings("default"))
    assert current().profile_name == "default"
    assert CFG("SEARCH.TOP_K") == 50
    assert CFG("DENSITY.high.RADIUS") == 500
    assert CFG("DENSITY.huge.RADIUS", 7) == 7
    assert CFG("SEARCH.TOP_K.X", "n/a") == "n/a"
    assert CFG("", 3) == 3
    assert isinstance(CFG("SEARCH"), dict)


def test_apply_plain_dict_and_debug_flag():
    APPLY({"BEHAVIOUR": {"DEBUG": True}})
    assert current().debug is True
    APPLY({"BEHAVIOUR": {"DEBUG": "yes"}})   # non-bool leaves the flag alone
    assert current().debug is True


def test_apply_rejects_other_types():
    with pytest.raises(TypeError):
        APPLY(42)


def test_bounds_default_without_profile():
    assert bounds_from_settings() == CandidateBounds()


def test_bounds_from_thorough_profile():
    ensure_workspace_seeded()
    APPLY(CONFIG.load_settings("thorough"))
    b = bounds_from_settings()
    assert b.preset("high").radius == 2000
    assert b.preset("high").lattice_cap == 2_000_000
    assert b.preset("low") == CandidateBounds().preset("low")
    assert b.max_pow2_exponent == 200


def test_integer_settings_are_type_checked():
    APPLY({"SEARCH": {"TOP_K": "many", "BATCH_SIZE": True}})
    assert current().profile_name == "custom"
    assert CFG_INT("SEARCH.MISSING", 9) == 9
    with pytest.raises(UserInputError, match="SEARCH.TOP_K"):
        CFG_INT("SEARCH.TOP_K", 50)
    with pytest.raises(UserInputError, match="SEARCH.BATCH_SIZE"):
        CFG_INT("SEARCH.BATCH_SIZE", 500)


def test_bad_profile_value_surfaces_from_bounds():
    APPLY({"DENSITY": {"high": {"RADIUS": 2.5}}})
    with pytest.raises(UserInputError, match="RADIUS"):
        bounds_from_settings()


def test_unknown_density_in_profile(isolated_workspace):
    root, _ = seed_workspace()
    (root / "profiles" / "odd.toml").write_text('[SEARCH]\nDENSITY = "extreme"\n', encoding="utf-8")
    with pytest.raises(UserInputError, match="SEARCH.DENSITY"):
        CONFIG.load_settings("odd")
