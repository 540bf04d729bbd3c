# src/smoothratio/config.py
"""
Search profiles: TOML files in <workspace>/profiles.

    [_PROFILE_]          name, description (metadata, not applied)
    [SEARCH]             DENSITY, MODE, TOP_K, BATCH_SIZE
    [CANDIDATES]         exponent bounds for the candidate strategies
    [DENSITY.<preset>]   RADIUS, STEP, LATTICE_CAP
    [DISPLAY]            TABLE_ROWS, FACTOR_REMAINDER, REMAINDER_TRIAL_LIMIT
    [BEHAVIOUR]          DEBUG
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib as toml
except ImportError:
    import tomli as toml  # type: ignore

from smoothratio.candidates import DENSITIES
from smoothratio.search import MODES
from smoothratio.utility import UserInputError
from smoothratio.workspace import ensure_workspace_seeded, workspace_dir

logger = logging.getLogger(__name__)

META_SECTION = "_PROFILE_"


@dataclass
class Settings:
    name: str
    description: str = "(no description)"
    data: dict[str, Any] = field(default_factory=dict)
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


def profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _profile_path(name: str) -> Path:
    return profiles_dir() / f"{name}.toml"


def _read(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return toml.load(fh)
    except toml.TOMLDecodeError as e:
        pos = ", ".join(
            f"{label} {value}"
            for label, value in (("line", getattr(e, "lineno", None)), ("column", getattr(e, "colno", None)))
            if value is not None
        )
        where = f" (at {pos})" if pos else ""
        raise UserInputError(f"reading {path.name}: {getattr(e, 'msg', e)}{where}.") from None


def _one_line(text: object) -> str:
    return " ".join(str(text or "").split()) or "(no description)"


def _parse(raw: dict[str, Any], path: Path) -> Settings:
    meta = raw.pop(META_SECTION, None) or {}
    return Settings(
        name=str(meta.get("name") or path.stem),
        description=_one_line(meta.get("description")),
        data=raw,
        _source=path,
    )


def _normalize_search(settings: Settings) -> None:
    """Lower-case SEARCH.DENSITY / SEARCH.MODE and reject unknown values."""
    search = settings.data.get("SEARCH")
    if not isinstance(search, dict):
        return
    for key, allowed in (("DENSITY", DENSITIES), ("MODE", MODES)):
        if key not in search:
            continue
        value = str(search[key]).strip().lower()
        if value not in allowed:
            raise UserInputError(
                f"profile '{settings.name}': SEARCH.{key} = {search[key]!r}; "
                f"expected one of {', '.join(allowed)}."
            )
        search[key] = value


def list_all_profiles() -> list[str]:
    ensure_workspace_seeded()
    return sorted(p.stem for p in profiles_dir().glob("*.toml"))


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """[(name, description), ...]; a file that does not parse is listed by its stem."""
    out: list[tuple[str, str]] = []
    for stem in list_all_profiles():
        path = _profile_path(stem)
        try:
            prof = _parse(_read(path), path)
        except UserInputError as e:
            logger.debug("%s", e)
            out.append((stem, "(unreadable profile)"))
        else:
            out.append((prof.name, prof.description))
    return sorted(out, key=lambda t: t[0].lower())


def has_profile(name: str) -> bool:
    return _profile_path(name).is_file()


def load_settings(name: str | None = None) -> Settings:
    name = name or "default"
    path = _profile_path(name)
    if not path.is_file():
        raise UserInputError(f"profile '{name}' not found at {path}")
    settings = _parse(_read(path), path)
    _normalize_search(settings)
    logger.debug("loaded profile %s from %s", settings.name, path)
    return settings
