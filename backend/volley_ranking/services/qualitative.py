import logging
from typing import Iterable, Optional

from ..core.enums import Fundamento
from ..core.errors import ConfigurationError
from ..schemas.event import EventStatistics, QualitativeEvent
from ..schemas.ranking import QualitativeAggregate
from .skills import canonical_fundamento, is_known_fundamento

logger = logging.getLogger(__name__)

# Configured weights span roughly [-2.0, 3.0].
WEIGHT_DOMAIN_OFFSET = 2.0
WEIGHT_DOMAIN_WIDTH = 5.0

CLASSIFICATION_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (2.5, "Excelente"),
    (1.5, "Muito Bom"),
    (0.5, "Bom"),
    (-0.5, "Regular"),
    (-1.5, "Ruim"),
)
LOWEST_CLASSIFICATION = "Muito Ruim"


def qualitative_percentage(
    mean_weight: float,
    offset: float = WEIGHT_DOMAIN_OFFSET,
    width: float = WEIGHT_DOMAIN_WIDTH,
) -> float:
    if width <= 0:
        raise ConfigurationError("Weight domain width must be positive.")
    return max(0.0, min(100.0, (mean_weight + offset) / width * 100))


def classify_mean_weight(mean_weight: float) -> str:
    for threshold, label in CLASSIFICATION_THRESHOLDS:
        if mean_weight >= threshold:
            return label
    return LOWEST_CLASSIFICATION


def aggregate_events(
    events: Iterable[QualitativeEvent],
    *,
    athlete_id: Optional[int] = None,
    fundamento: Optional[Fundamento] = None,
    offset: float = WEIGHT_DOMAIN_OFFSET,
    width: float = WEIGHT_DOMAIN_WIDTH,
) -> Optional[QualitativeAggregate]:
    """Weighted mean, counts and classification for one group of events.

    Returns ``None`` for an empty group so callers can fall back to the
    quantitative score alone.
    """
    events = list(events)
    if not events:
        return None
    weights = [event.weight for event in events]
    mean_weight = sum(weights) / len(weights)
    return QualitativeAggregate(
        athlete_id=athlete_id if athlete_id is not None else events[0].athlete_id,
        fundamento=fundamento,
        mean_weight=mean_weight,
        total_events=len(events),
        positive_count=sum(1 for w in weights if w > 0),
        negative_count=sum(1 for w in weights if w < 0),
        last_event_date=max(event.timestamp for event in events),
        qualitative_pct=qualitative_percentage(mean_weight, offset, width),
        classification=classify_mean_weight(mean_weight),
    )


def aggregate_qualitative(
    events: Iterable[QualitativeEvent],
    offset: float = WEIGHT_DOMAIN_OFFSET,
    width: float = WEIGHT_DOMAIN_WIDTH,
) -> dict[tuple[int, Fundamento], QualitativeAggregate]:
    grouped: dict[tuple[int, Fundamento], list[QualitativeEvent]] = {}
    for event in events:
        if not is_known_fundamento(event.fundamento):
            logger.warning("Skipping event %s with unknown fundamento %r", event.id, event.fundamento)
            continue
        key = (event.athlete_id, canonical_fundamento(event.fundamento))
        grouped.setdefault(key, []).append(event)
    return {
        key: aggregate_events(group, athlete_id=key[0], fundamento=key[1], offset=offset, width=width)
        for key, group in grouped.items()
    }


def aggregate_by_athlete(
    events: Iterable[QualitativeEvent],
    offset: float = WEIGHT_DOMAIN_OFFSET,
    width: float = WEIGHT_DOMAIN_WIDTH,
) -> dict[int, QualitativeAggregate]:
    grouped: dict[int, list[QualitativeEvent]] = {}
    for event in events:
        grouped.setdefault(event.athlete_id, []).append(event)
    return {
        athlete_id: aggregate_events(group, athlete_id=athlete_id, offset=offset, width=width)
        for athlete_id, group in grouped.items()
    }


def event_statistics(events: Iterable[QualitativeEvent]) -> EventStatistics:
    totals: dict[str, list[float]] = {}
    total_score = 0.0
    positive = negative = count = 0
    for event in events:
        count += 1
        total_score += event.weight
        if event.weight > 0:
            positive += 1
        elif event.weight < 0:
            negative += 1
        key = canonical_fundamento(event.fundamento).value if is_known_fundamento(event.fundamento) else event.fundamento
        totals.setdefault(key, []).append(event.weight)
    return EventStatistics(
        total_events=count,
        total_score=total_score,
        mean_by_fundamento={name: sum(ws) / len(ws) for name, ws in totals.items()},
        positive_events=positive,
        negative_events=negative,
    )
