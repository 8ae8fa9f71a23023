import logging
from datetime import date
from typing import Iterable, Optional, Protocol

from ..core.config import Settings, get_settings
from ..core.enums import Fundamento, RankingMode, Team
from ..schemas.event import EventFilters, QualitativeEvent
from ..schemas.ranking import (
    Athlete,
    CombinedRankingEntry,
    ExecutionTally,
    FundamentoAggregate,
    RankingCandidate,
    TeamSummary,
)
from .combiner import WeightProfile, combine, overall_profile, per_fundamento_profile
from .event_repository import EventRepository
from .qualitative import WEIGHT_DOMAIN_OFFSET, WEIGHT_DOMAIN_WIDTH, aggregate_by_athlete, aggregate_qualitative
from .quantitative import aggregate_quantitative, quantitative_overview
from .ranking import build_ranking
from .skills import canonical_fundamento, is_known_fundamento
from .summary import build_fundamento_aggregates, team_fundamento_stats, weakest_fundamento

logger = logging.getLogger(__name__)


class Roster(Protocol):
    async def get(self, athlete_id: int) -> Optional[Athlete]:
        ...

    async def list_by_team(self, team: Team) -> list[Athlete]:
        ...


class TallyStore(Protocol):
    async def fetch_tallies(
        self,
        athlete_ids: list[int],
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
    ) -> list[ExecutionTally]:
        ...


def fundamento_candidates(
    athletes: Iterable[Athlete],
    tallies: Iterable[ExecutionTally],
    events: Iterable[QualitativeEvent],
    fundamento: str | Fundamento,
    profile: WeightProfile,
    date_start: Optional[date] = None,
    date_end: Optional[date] = None,
    offset: float = WEIGHT_DOMAIN_OFFSET,
    width: float = WEIGHT_DOMAIN_WIDTH,
) -> list[RankingCandidate]:
    canonical = canonical_fundamento(fundamento)
    quantitative = aggregate_quantitative(tallies, canonical, date_start, date_end)
    relevant = [
        e for e in events if is_known_fundamento(e.fundamento) and canonical_fundamento(e.fundamento) == canonical
    ]
    qualitative = aggregate_qualitative(relevant, offset, width)

    candidates = []
    for athlete in athletes:
        quant = quantitative.get(athlete.id)
        accuracy = quant.accuracy_pct if quant else 0.0
        score = combine(accuracy, qualitative.get((athlete.id, canonical)), profile)
        candidates.append(
            RankingCandidate(
                athlete_id=athlete.id,
                athlete_name=athlete.name,
                total_executions=quant.sample_count if quant else 0,
                **score.model_dump(),
            )
        )
    return candidates


def overall_candidates(
    athletes: Iterable[Athlete],
    tallies: Iterable[ExecutionTally],
    events: Iterable[QualitativeEvent],
    profile: WeightProfile,
    date_start: Optional[date] = None,
    date_end: Optional[date] = None,
    offset: float = WEIGHT_DOMAIN_OFFSET,
    width: float = WEIGHT_DOMAIN_WIDTH,
) -> list[RankingCandidate]:
    quantitative = quantitative_overview(tallies, date_start, date_end)
    known = []
    for event in events:
        if is_known_fundamento(event.fundamento):
            known.append(event)
        else:
            logger.warning("Skipping event %s with unknown fundamento %r", event.id, event.fundamento)
    qualitative = aggregate_by_athlete(known, offset, width)

    candidates = []
    for athlete in athletes:
        quant = quantitative.get(athlete.id)
        accuracy = quant.accuracy_pct if quant else 0.0
        score = combine(accuracy, qualitative.get(athlete.id), profile)
        candidates.append(
            RankingCandidate(
                athlete_id=athlete.id,
                athlete_name=athlete.name,
                total_executions=quant.sample_count if quant else 0,
                **score.model_dump(),
            )
        )
    return candidates


class RankingService:
    """Fetches snapshots from the collaborators and scores them."""

    def __init__(
        self,
        roster: Roster,
        tallies: TallyStore,
        events: EventRepository,
        settings: Optional[Settings] = None,
    ):
        self.roster = roster
        self.tallies = tallies
        self.events = events
        self.settings = settings or get_settings()

    async def _snapshot(
        self,
        team: Team,
        date_start: Optional[date],
        date_end: Optional[date],
        fundamento: Optional[Fundamento] = None,
    ) -> tuple[list[Athlete], list[ExecutionTally], list[QualitativeEvent]]:
        athletes = await self.roster.list_by_team(team)
        athlete_ids = [athlete.id for athlete in athletes]
        tallies = await self.tallies.fetch_tallies(athlete_ids, date_start, date_end)
        filters = EventFilters(
            fundamento=fundamento.value if fundamento else None,
            date_start=date_start,
            date_end=date_end,
        )
        wanted = set(athlete_ids)
        events = [e for e in await self.events.list_events(filters) if e.athlete_id in wanted]
        logger.debug(
            "Snapshot for %s: %d athletes, %d tallies, %d events",
            team.value,
            len(athletes),
            len(tallies),
            len(events),
        )
        return athletes, tallies, events

    async def fundamento_ranking(
        self,
        team: Team,
        fundamento: str | Fundamento,
        *,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
        mode: RankingMode = RankingMode.COMPOSITE,
        top_n: Optional[int] = None,
        enforce_min_sample: bool = True,
        profile: Optional[WeightProfile] = None,
    ) -> list[CombinedRankingEntry]:
        canonical = canonical_fundamento(fundamento)
        athletes, tallies, events = await self._snapshot(team, date_start, date_end, canonical)
        candidates = fundamento_candidates(
            athletes,
            tallies,
            events,
            canonical,
            profile or per_fundamento_profile(self.settings),
            date_start,
            date_end,
            self.settings.weight_domain_offset,
            self.settings.weight_domain_width,
        )
        return build_ranking(
            candidates,
            mode,
            enforce_min_sample=enforce_min_sample,
            min_sample=self.settings.ranking_min_sample,
            top_n=top_n,
        )

    async def overall_ranking(
        self,
        team: Team,
        *,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
        mode: RankingMode = RankingMode.COMPOSITE,
        top_n: Optional[int] = None,
        enforce_min_sample: bool = True,
        profile: Optional[WeightProfile] = None,
    ) -> list[CombinedRankingEntry]:
        athletes, tallies, events = await self._snapshot(team, date_start, date_end)
        candidates = overall_candidates(
            athletes,
            tallies,
            events,
            profile or overall_profile(self.settings),
            date_start,
            date_end,
            self.settings.weight_domain_offset,
            self.settings.weight_domain_width,
        )
        return build_ranking(
            candidates,
            mode,
            enforce_min_sample=enforce_min_sample,
            min_sample=self.settings.ranking_min_sample,
            top_n=top_n,
        )

    async def fundamento_aggregates(
        self,
        team: Team,
        *,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
    ) -> dict[int, dict[Fundamento, FundamentoAggregate]]:
        _, tallies, events = await self._snapshot(team, date_start, date_end)
        return build_fundamento_aggregates(
            tallies,
            events,
            date_start,
            date_end,
            self.settings.weight_domain_offset,
            self.settings.weight_domain_width,
        )

    async def athlete_aggregates(
        self,
        athlete_id: int,
        *,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
    ) -> Optional[list[FundamentoAggregate]]:
        """Per-fundamento aggregates for one athlete, ``None`` if not on the roster."""
        athlete = await self.roster.get(athlete_id)
        if athlete is None:
            return None
        tallies = await self.tallies.fetch_tallies([athlete.id], date_start, date_end)
        filters = EventFilters(athlete_id=athlete.id, date_start=date_start, date_end=date_end)
        events = await self.events.list_events(filters)
        aggregates = build_fundamento_aggregates(
            tallies,
            events,
            date_start,
            date_end,
            self.settings.weight_domain_offset,
            self.settings.weight_domain_width,
        )
        by_fundamento = aggregates.get(athlete.id, {})
        return [by_fundamento[f] for f in Fundamento if f in by_fundamento]

    async def team_summary(
        self,
        team: Team,
        *,
        date_start: Optional[date] = None,
        date_end: Optional[date] = None,
        top_n: int = 3,
    ) -> TeamSummary:
        athletes, tallies, events = await self._snapshot(team, date_start, date_end)
        stats = team_fundamento_stats(tallies, date_start, date_end)
        profile = per_fundamento_profile(self.settings)
        leaders: dict[str, list[CombinedRankingEntry]] = {}
        for fundamento in Fundamento:
            candidates = fundamento_candidates(
                athletes,
                tallies,
                events,
                fundamento,
                profile,
                date_start,
                date_end,
                self.settings.weight_domain_offset,
                self.settings.weight_domain_width,
            )
            leaders[fundamento.value] = build_ranking(
                candidates,
                min_sample=self.settings.ranking_min_sample,
                top_n=top_n,
            )
        return TeamSummary(
            team=team,
            fundamentos=stats,
            weakest_fundamento=weakest_fundamento(stats),
            leaders=leaders,
        )
