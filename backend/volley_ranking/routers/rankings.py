from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..core.enums import RankingMode, RankingPeriod, Team
from ..dependencies import get_ranking_service
from ..schemas.ranking import CombinedRankingEntry, FundamentoAggregate, TeamSummary
from ..services.dates import period_window
from ..services.rankings import RankingService

router = APIRouter(prefix="/rankings", tags=["rankings"])


def _window(
    date_start: date | None,
    date_end: date | None,
    period: RankingPeriod | None,
) -> tuple[date | None, date | None]:
    if period is not None:
        return period_window(period)
    return date_start, date_end


@router.get("/fundamentos/{fundamento}", response_model=list[CombinedRankingEntry])
async def fundamento_ranking(
    fundamento: str,
    team: Team = Query(...),
    date_start: date | None = Query(default=None),
    date_end: date | None = Query(default=None),
    period: RankingPeriod | None = Query(default=None),
    mode: RankingMode = Query(default=RankingMode.COMPOSITE),
    top_n: int | None = Query(default=None, ge=1),
    min_sample: bool = Query(default=True),
    service: RankingService = Depends(get_ranking_service),
) -> list[CombinedRankingEntry]:
    start, end = _window(date_start, date_end, period)
    return await service.fundamento_ranking(
        team,
        fundamento,
        date_start=start,
        date_end=end,
        mode=mode,
        top_n=top_n,
        enforce_min_sample=min_sample,
    )


@router.get("/overall", response_model=list[CombinedRankingEntry])
async def overall_ranking(
    team: Team = Query(...),
    date_start: date | None = Query(default=None),
    date_end: date | None = Query(default=None),
    period: RankingPeriod | None = Query(default=None),
    mode: RankingMode = Query(default=RankingMode.COMPOSITE),
    top_n: int | None = Query(default=None, ge=1),
    min_sample: bool = Query(default=True),
    service: RankingService = Depends(get_ranking_service),
) -> list[CombinedRankingEntry]:
    start, end = _window(date_start, date_end, period)
    return await service.overall_ranking(
        team,
        date_start=start,
        date_end=end,
        mode=mode,
        top_n=top_n or service.settings.ranking_default_top_n,
        enforce_min_sample=min_sample,
    )


@router.get("/aggregates", response_model=list[FundamentoAggregate])
async def fundamento_aggregates(
    team: Team = Query(...),
    date_start: date | None = Query(default=None),
    date_end: date | None = Query(default=None),
    period: RankingPeriod | None = Query(default=None),
    service: RankingService = Depends(get_ranking_service),
) -> list[FundamentoAggregate]:
    start, end = _window(date_start, date_end, period)
    aggregates = await service.fundamento_aggregates(team, date_start=start, date_end=end)
    return [
        aggregate
        for athlete_id in sorted(aggregates)
        for aggregate in aggregates[athlete_id].values()
    ]


@router.get("/athletes/{athlete_id}", response_model=list[FundamentoAggregate])
async def athlete_aggregates(
    athlete_id: int,
    date_start: date | None = Query(default=None),
    date_end: date | None = Query(default=None),
    period: RankingPeriod | None = Query(default=None),
    service: RankingService = Depends(get_ranking_service),
) -> list[FundamentoAggregate]:
    start, end = _window(date_start, date_end, period)
    aggregates = await service.athlete_aggregates(athlete_id, date_start=start, date_end=end)
    if aggregates is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Athlete not found.")
    return aggregates


@router.get("/summary", response_model=TeamSummary)
async def team_summary(
    team: Team = Query(...),
    date_start: date | None = Query(default=None),
    date_end: date | None = Query(default=None),
    period: RankingPeriod | None = Query(default=None),
    top_n: int = Query(default=3, ge=1),
    service: RankingService = Depends(get_ranking_service),
) -> TeamSummary:
    start, end = _window(date_start, date_end, period)
    return await service.team_summary(team, date_start=start, date_end=end, top_n=top_n)
