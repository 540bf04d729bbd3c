# src/smoothratio/candidates.py
"""
Candidate generation for the R(n) search.

Exhaustive search up to 10^15 is out of reach, so the generator is a biased
sampler. R(n) can only be large when n(n+1) has a big 2/3-smooth part, so
most points sit next to powers of 2 and 3 and their products; a sparse
uniform lattice covers the rest of [2, max_n].

Every strategy works on exact Python ints. The union is deduplicated and
sorted before anything is yielded, so a generator with the same
(max_n, density, bounds) always produces the same ascending sequence.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from smoothratio.runtime import CFG_INT
from smoothratio.utility import InvalidSearchInput, validate_max_n

logger = logging.getLogger(__name__)

DENSITIES = ("low", "medium", "high")


@dataclass(frozen=True)
class DensityPreset:
    radius: int        # half-width of each neighborhood window
    step: int          # base lattice step
    lattice_cap: int   # max lattice points; the step grows to honour it


@dataclass(frozen=True)
class CandidateBounds:
    max_pow2_exponent: int = 200
    max_pow3_exponent: int = 130
    product_max_a: int = 100
    product_max_b: int = 80
    neighborhood_min_pow2: int = 1
    neighborhood_min_pow3: int = 1
    presets: dict[str, DensityPreset] = field(default_factory=lambda: {
        "low": DensityPreset(radius=50, step=100_000, lattice_cap=10_000),
        "medium": DensityPreset(radius=200, step=10_000, lattice_cap=100_000),
        "high": DensityPreset(radius=500, step=1_000, lattice_cap=1_000_000),
    })

    def preset(self, density: str) -> DensityPreset:
        try:
            return self.presets[density]
        except KeyError:
            raise InvalidSearchInput(
                f"unknown density {density!r}; expected one of {', '.join(DENSITIES)}."
            ) from None


def bounds_from_settings() -> CandidateBounds:
    """Build CandidateBounds from the active profile ([CANDIDATES], [DENSITY.*])."""
    base = CandidateBounds()
    presets = dict(base.presets)
    for name, p in base.presets.items():
        presets[name] = DensityPreset(
            radius=CFG_INT(f"DENSITY.{name}.RADIUS", p.radius),
            step=CFG_INT(f"DENSITY.{name}.STEP", p.step),
            lattice_cap=CFG_INT(f"DENSITY.{name}.LATTICE_CAP", p.lattice_cap),
        )
    return replace(
        base,
        max_pow2_exponent=CFG_INT("CANDIDATES.MAX_POW2_EXPONENT", base.max_pow2_exponent),
        max_pow3_exponent=CFG_INT("CANDIDATES.MAX_POW3_EXPONENT", base.max_pow3_exponent),
        product_max_a=CFG_INT("CANDIDATES.PRODUCT_MAX_A", base.product_max_a),
        product_max_b=CFG_INT("CANDIDATES.PRODUCT_MAX_B", base.product_max_b),
        neighborhood_min_pow2=CFG_INT("CANDIDATES.NEIGHBORHOOD_MIN_POW2", base.neighborhood_min_pow2),
        neighborhood_min_pow3=CFG_INT("CANDIDATES.NEIGHBORHOOD_MIN_POW3", base.neighborhood_min_pow3),
        presets=presets,
    )


# ---------- strategies --------------------------------------------------------
# Each yields raw values; range filtering happens once, in _collect().

def _powers(base: int, k_min: int, k_max: int, limit: int) -> Iterator[int]:
    """base**k for k_min <= k <= k_max, stopping once past limit."""
    p = base ** k_min
    for _ in range(k_min, k_max + 1):
        if p > limit:
            return
        yield p
        p *= base


def structural_points(max_n: int, bounds: CandidateBounds) -> Iterator[int]:
    """n with n+1 a pure power of 2 or of 3."""
    for p in _powers(2, 1, bounds.max_pow2_exponent, max_n + 1):
        yield p - 1
    for p in _powers(3, 1, bounds.max_pow3_exponent, max_n + 1):
        yield p - 1


def product_points(max_n: int, bounds: CandidateBounds) -> Iterator[int]:
    """n = 2**a * 3**b +- 1, a, b >= 1."""
    for p2 in _powers(2, 1, bounds.product_max_a, max_n + 1):
        for p3 in _powers(3, 1, bounds.product_max_b, (max_n + 1) // p2):
            prod = p2 * p3
            yield prod - 1
            yield prod + 1


def neighborhood_points(max_n: int, radius: int, bounds: CandidateBounds) -> Iterator[int]:
    """Every integer within radius of a power of 2 or 3 not exceeding max_n."""
    centers = [
        *_powers(2, bounds.neighborhood_min_pow2, bounds.max_pow2_exponent, max_n),
        *_powers(3, bounds.neighborhood_min_pow3, bounds.max_pow3_exponent, max_n),
    ]
    for c in centers:
        yield from range(c - radius, c + radius + 1)


def lattice_step(max_n: int, preset: DensityPreset) -> int:
    cap = max(1, preset.lattice_cap)
    return max(1, preset.step, -(-max_n // cap))


def lattice_points(max_n: int, preset: DensityPreset) -> Iterator[int]:
    return iter(range(2, max_n + 1, lattice_step(max_n, preset)))


# ---------- generator ---------------------------------------------------------

class CandidateGenerator:
    """
    Restartable, ascending, duplicate-free candidates in [2, max_n].

    The sorted set is built on first use and shared by later iterations,
    so len() and repeated iteration are cheap.
    """

    def __init__(self, max_n: int, density: str = "medium", bounds: CandidateBounds | None = None):
        self.max_n = validate_max_n(max_n)
        self.bounds = bounds or CandidateBounds()
        self.density = density
        self.preset = self.bounds.preset(density)
        self._values: tuple[int, ...] | None = None

    def _strategies(self) -> dict[str, Iterator[int]]:
        return {
            "structural": structural_points(self.max_n, self.bounds),
            "product": product_points(self.max_n, self.bounds),
            "neighborhood": neighborhood_points(self.max_n, self.preset.radius, self.bounds),
            "lattice": lattice_points(self.max_n, self.preset),
        }

    def _in_range(self, v: int) -> bool:
        return 2 <= v <= self.max_n

    def _collect(self) -> tuple[int, ...]:
        found: set[int] = set()
        for values in self._strategies().values():
            found.update(v for v in values if self._in_range(v))
        return tuple(sorted(found))

    def values(self) -> tuple[int, ...]:
        if self._values is None:
            self._values = self._collect()
            logger.debug(
                "built %d candidates for max_n=%d density=%s",
                len(self._values), self.max_n, self.density,
            )
        return self._values

    def strategy_counts(self) -> dict[str, int]:
        """In-range points contributed by each strategy, before deduplication."""
        return {
            name: sum(1 for v in values if self._in_range(v))
            for name, values in self._strategies().items()
        }

    def __iter__(self) -> Iterator[int]:
        return iter(self.values())

    def __len__(self) -> int:
        return len(self.values())

    def __repr__(self) -> str:
        return f"CandidateGenerator(max_n={self.max_n}, density={self.density!r})"


def generate_candidates(max_n: int, density: str = "medium",
                        bounds: CandidateBounds | None = None) -> Iterator[int]:
    """Lazy ascending candidate stream; a fresh call replays the same sequence."""
    gen = CandidateGenerator(max_n, density, bounds)
    yield from gen
