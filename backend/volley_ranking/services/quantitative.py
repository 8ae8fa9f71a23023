import logging
from datetime import date
from typing import Iterable

from ..core.enums import Fundamento
from ..core.errors import DateParseError
from ..schemas.ranking import ExecutionTally, QuantitativeAggregate
from .dates import parse_tally_date, window_bounds
from .skills import canonical_fundamento, fold_name, fundamento_aliases, is_known_fundamento

logger = logging.getLogger(__name__)


def accuracy_pct(hits: int, misses: int) -> float:
    attempts = hits + misses
    if attempts <= 0:
        return 0.0
    return hits / attempts * 100


def filter_tallies_by_window(
    tallies: Iterable[ExecutionTally],
    date_start: date | None = None,
    date_end: date | None = None,
) -> list[ExecutionTally]:
    if date_start is None and date_end is None:
        return list(tallies)
    lower, upper = window_bounds(date_start, date_end)
    kept: list[ExecutionTally] = []
    for tally in tallies:
        if tally.last_date is None or tally.last_date == "":
            continue
        try:
            when = parse_tally_date(tally.last_date)
        except DateParseError as exc:
            logger.warning(
                "Keeping tally for athlete %s (%s) unfiltered: %s",
                tally.athlete_id,
                tally.fundamento,
                exc,
            )
            kept.append(tally)
            continue
        if lower is not None and when < lower:
            continue
        if upper is not None and when > upper:
            continue
        kept.append(tally)
    return kept


def _merge_same_key(tallies: list[ExecutionTally]) -> ExecutionTally:
    if len(tallies) == 1:
        return tallies[0]
    last_dates = [t.last_date for t in tallies if t.last_date]
    return ExecutionTally(
        athlete_id=tallies[0].athlete_id,
        fundamento=tallies[0].fundamento,
        hits=sum(t.hits for t in tallies),
        misses=sum(t.misses for t in tallies),
        last_date=last_dates[-1] if last_dates else None,
    )


def aggregate_quantitative(
    tallies: Iterable[ExecutionTally],
    fundamento: str | Fundamento,
    date_start: date | None = None,
    date_end: date | None = None,
) -> dict[int, QuantitativeAggregate]:
    """Reduce tallies for one fundamento into accuracy per athlete.

    When a fundamento has more than one storage alias (``passe`` and
    ``recepção``) the first alias with attempts is used, in alias order.
    """
    canonical = canonical_fundamento(fundamento)
    alias_keys = [fold_name(alias) for alias in fundamento_aliases(canonical)]

    grouped: dict[int, dict[str, list[ExecutionTally]]] = {}
    for tally in filter_tallies_by_window(tallies, date_start, date_end):
        key = fold_name(tally.fundamento)
        if key not in alias_keys:
            continue
        grouped.setdefault(tally.athlete_id, {}).setdefault(key, []).append(tally)

    result: dict[int, QuantitativeAggregate] = {}
    for athlete_id, by_key in grouped.items():
        chosen: ExecutionTally | None = None
        for key in alias_keys:
            if key in by_key:
                merged = _merge_same_key(by_key[key])
                if merged.attempts > 0:
                    chosen = merged
                    break
        if chosen is None:
            continue
        result[athlete_id] = QuantitativeAggregate(
            athlete_id=athlete_id,
            fundamento=canonical,
            hits=chosen.hits,
            misses=chosen.misses,
            accuracy_pct=accuracy_pct(chosen.hits, chosen.misses),
            sample_count=chosen.attempts,
            last_date=chosen.last_date,
        )
    return result


def quantitative_overview(
    tallies: Iterable[ExecutionTally],
    date_start: date | None = None,
    date_end: date | None = None,
) -> dict[int, QuantitativeAggregate]:
    """Mean accuracy across every fundamento with attempts, per athlete."""
    filtered = [
        tally
        for tally in filter_tallies_by_window(tallies, date_start, date_end)
        if is_known_fundamento(tally.fundamento)
    ]
    per_athlete: dict[int, list[QuantitativeAggregate]] = {}
    for fundamento in Fundamento:
        for athlete_id, aggregate in aggregate_quantitative(filtered, fundamento).items():
            per_athlete.setdefault(athlete_id, []).append(aggregate)

    overview: dict[int, QuantitativeAggregate] = {}
    for athlete_id, aggregates in per_athlete.items():
        overview[athlete_id] = QuantitativeAggregate(
            athlete_id=athlete_id,
            hits=sum(a.hits for a in aggregates),
            misses=sum(a.misses for a in aggregates),
            accuracy_pct=sum(a.accuracy_pct for a in aggregates) / len(aggregates),
            sample_count=sum(a.sample_count for a in aggregates),
        )
    return overview
