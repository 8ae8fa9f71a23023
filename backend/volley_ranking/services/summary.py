from datetime import date
from typing import Iterable, Optional

from ..core.enums import Fundamento
from ..schemas.event import QualitativeEvent
from ..schemas.ranking import ExecutionTally, FundamentoAggregate, FundamentoTeamStat
from .combiner import describe_performance
from .qualitative import WEIGHT_DOMAIN_OFFSET, WEIGHT_DOMAIN_WIDTH, aggregate_qualitative
from .quantitative import aggregate_quantitative, filter_tallies_by_window


def build_fundamento_aggregates(
    tallies: Iterable[ExecutionTally],
    events: Iterable[QualitativeEvent],
    date_start: Optional[date] = None,
    date_end: Optional[date] = None,
    offset: float = WEIGHT_DOMAIN_OFFSET,
    width: float = WEIGHT_DOMAIN_WIDTH,
) -> dict[int, dict[Fundamento, FundamentoAggregate]]:
    filtered = filter_tallies_by_window(tallies, date_start, date_end)
    qualitative = aggregate_qualitative(events, offset, width)

    result: dict[int, dict[Fundamento, FundamentoAggregate]] = {}
    for fundamento in Fundamento:
        for athlete_id, quant in aggregate_quantitative(filtered, fundamento).items():
            result.setdefault(athlete_id, {})[fundamento] = FundamentoAggregate(
                athlete_id=athlete_id,
                fundamento=fundamento,
                accuracy_pct=quant.accuracy_pct,
                sample_count=quant.sample_count,
            )

    for (athlete_id, fundamento), qual in qualitative.items():
        current = result.setdefault(athlete_id, {}).get(fundamento) or FundamentoAggregate(
            athlete_id=athlete_id, fundamento=fundamento
        )
        result[athlete_id][fundamento] = current.model_copy(
            update={
                "mean_weight": qual.mean_weight,
                "total_events": qual.total_events,
                "positive_count": qual.positive_count,
                "negative_count": qual.negative_count,
                "last_event_date": qual.last_event_date,
                "qualitative_pct": qual.qualitative_pct,
                "classification": qual.classification,
            }
        )
    return result


def team_fundamento_stats(
    tallies: Iterable[ExecutionTally],
    date_start: Optional[date] = None,
    date_end: Optional[date] = None,
) -> list[FundamentoTeamStat]:
    filtered = filter_tallies_by_window(tallies, date_start, date_end)
    stats: list[FundamentoTeamStat] = []
    for fundamento in Fundamento:
        aggregates = list(aggregate_quantitative(filtered, fundamento).values())
        mean = sum(a.accuracy_pct for a in aggregates) / len(aggregates) if aggregates else 0.0
        stats.append(
            FundamentoTeamStat(
                fundamento=fundamento,
                mean_accuracy=mean,
                athletes_with_data=len(aggregates),
                label=describe_performance(mean),
            )
        )
    return stats


def weakest_fundamento(stats: Iterable[FundamentoTeamStat]) -> Optional[FundamentoTeamStat]:
    weakest = None
    for stat in stats:
        if stat.athletes_with_data == 0:
            continue
        if weakest is None or stat.mean_accuracy < weakest.mean_accuracy:
            weakest = stat
    return weakest
