from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel

from ..core.enums import Fundamento, Team


class Athlete(BaseModel):
    id: int
    name: str
    team: Team

    model_config = {"from_attributes": True, "frozen": True}


class ExecutionTally(BaseModel):
    athlete_id: int
    fundamento: str
    hits: int = 0
    misses: int = 0
    last_date: Optional[Union[datetime, date, str]] = None

    @property
    def attempts(self) -> int:
        return self.hits + self.misses


class QuantitativeAggregate(BaseModel):
    athlete_id: int
    fundamento: Optional[Fundamento] = None
    hits: int = 0
    misses: int = 0
    accuracy_pct: float = 0.0
    sample_count: int = 0
    last_date: Optional[Union[datetime, date, str]] = None


class QualitativeAggregate(BaseModel):
    athlete_id: int
    fundamento: Optional[Fundamento] = None
    mean_weight: float
    total_events: int
    positive_count: int
    negative_count: int
    last_event_date: Optional[datetime] = None
    qualitative_pct: float
    classification: str


class FundamentoAggregate(BaseModel):
    athlete_id: int
    fundamento: Fundamento
    mean_weight: Optional[float] = None
    total_events: int = 0
    positive_count: int = 0
    negative_count: int = 0
    last_event_date: Optional[datetime] = None
    qualitative_pct: Optional[float] = None
    classification: Optional[str] = None
    accuracy_pct: float = 0.0
    sample_count: int = 0


class CombinedScore(BaseModel):
    quantitative_pct: float
    qualitative_pct: float
    composite_score: float
    total_qualitative_events: int
    descriptive_label: str


class RankingCandidate(BaseModel):
    athlete_id: int
    athlete_name: str
    quantitative_pct: float
    qualitative_pct: float
    composite_score: float
    total_executions: int
    total_qualitative_events: int
    descriptive_label: str


class CombinedRankingEntry(RankingCandidate):
    rank_position: int


class FundamentoTeamStat(BaseModel):
    fundamento: Fundamento
    mean_accuracy: float
    athletes_with_data: int
    label: str


class TeamSummary(BaseModel):
    team: Team
    fundamentos: list[FundamentoTeamStat]
    weakest_fundamento: Optional[FundamentoTeamStat] = None
    leaders: dict[str, list[CombinedRankingEntry]]
