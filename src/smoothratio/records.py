from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class ResultRecord:
    # n*(n+1) == 2**pow2 * 3**pow3 * remainder, gcd(remainder, 6) == 1
    n: int
    pow2: int
    pow3: int
    remainder: int
    log_ratio: float
    ratio: float                     # exp(log_ratio); may be 0.0 or inf

    @property
    def smooth_part(self) -> int:
        return 2**self.pow2 * 3**self.pow3

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class Summary:
    count: int
    max_log_ratio: float | None = None
    max_ratio: float | None = None
    max_n: int | None = None            # n attaining max_log_ratio
    median_log_ratio: float | None = None
    min_log_ratio: float | None = None
    largest_n_processed: int | None = None

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


def thin(records: list[ResultRecord], limit: int = 5000) -> list[ResultRecord]:
    """Evenly strided subsample of at most ~limit records, for plotting."""
    if limit <= 0:
        return []
    if len(records) <= limit:
        return list(records)
    step = -(-len(records) // limit)
    return records[::step]
