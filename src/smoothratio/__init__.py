from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("smoothratio")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .candidates import CandidateBounds, CandidateGenerator, DensityPreset, generate_candidates
from .config import load_settings
from .factor import Factorization, factorize23
from .ratio import compute_record, evaluate
from .records import ResultRecord, Summary
from .runtime import APPLY, CFG
from .search import (
    ProgressEvent,
    SearchController,
    SearchOutcome,
    SearchState,
    SearchStatus,
    run_search,
)
from .utility import DegenerateCandidate, InvalidSearchInput, NonFiniteResult, UserInputError

__all__ = [
    "APPLY",
    "CFG",
    "CandidateBounds",
    "CandidateGenerator",
    "DegenerateCandidate",
    "DensityPreset",
    "Factorization",
    "InvalidSearchInput",
    "NonFiniteResult",
    "ProgressEvent",
    "ResultRecord",
    "SearchController",
    "SearchOutcome",
    "SearchState",
    "SearchStatus",
    "Summary",
    "UserInputError",
    "__version__",
    "compute_record",
    "evaluate",
    "factorize23",
    "generate_candidates",
    "load_settings",
    "run_search",
]
