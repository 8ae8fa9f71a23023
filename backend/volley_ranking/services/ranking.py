from typing import Iterable, Optional

from ..core.enums import RankingMode
from ..schemas.ranking import CombinedRankingEntry, RankingCandidate
from .skills import fold_name

MIN_SAMPLE = 5


def _score(candidate: RankingCandidate, mode: RankingMode) -> float:
    if mode == RankingMode.QUANTITATIVE:
        return candidate.quantitative_pct
    if mode == RankingMode.QUALITATIVE:
        return candidate.qualitative_pct
    return candidate.composite_score


def _sort_key(candidate: RankingCandidate, mode: RankingMode) -> tuple:
    return (
        -_score(candidate, mode),
        -candidate.total_executions,
        fold_name(candidate.athlete_name),
        candidate.athlete_name,
        candidate.athlete_id,
    )


def is_eligible(candidate: RankingCandidate, min_sample: int = MIN_SAMPLE) -> bool:
    return candidate.total_executions >= min_sample


def build_ranking(
    candidates: Iterable[RankingCandidate],
    mode: RankingMode = RankingMode.COMPOSITE,
    *,
    enforce_min_sample: bool = True,
    min_sample: int = MIN_SAMPLE,
    top_n: Optional[int] = None,
) -> list[CombinedRankingEntry]:
    """Filter, order and number ranking candidates.

    Order: selected score desc, total executions desc, athlete name asc
    (accent and case folded), then raw name and athlete id so that the
    result is a total order. Truncation happens after the full sort.
    """
    pool = [c for c in candidates if not enforce_min_sample or is_eligible(c, min_sample)]
    ordered = sorted(pool, key=lambda c: _sort_key(c, mode))
    if top_n is not None:
        ordered = ordered[: max(top_n, 0)]
    return [
        CombinedRankingEntry(**candidate.model_dump(), rank_position=position)
        for position, candidate in enumerate(ordered)
    ]
