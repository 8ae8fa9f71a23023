from typing import Optional

from pydantic import BaseModel, model_validator

from ..core.config import Settings
from ..core.errors import ConfigurationError
from ..schemas.ranking import CombinedScore, QualitativeAggregate

NO_EVALUATION_LABEL = "Sem avaliação"

PERCENTAGE_LABELS: tuple[tuple[float, str], ...] = (
    (85, "Excelente"),
    (75, "Muito Bom"),
    (65, "Bom"),
    (50, "Regular"),
    (35, "Abaixo da média"),
)


class WeightProfile(BaseModel):
    quantitative: float
    qualitative: float

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_weights(self) -> "WeightProfile":
        if self.quantitative < 0 or self.qualitative < 0:
            raise ConfigurationError("Profile weights must not be negative.")
        if self.quantitative + self.qualitative <= 0:
            raise ConfigurationError("Profile weights must not both be zero.")
        return self

    def normalized(self) -> "WeightProfile":
        total = self.quantitative + self.qualitative
        return WeightProfile(
            quantitative=self.quantitative / total,
            qualitative=self.qualitative / total,
        )


OVERALL_PROFILE = WeightProfile(quantitative=0.7, qualitative=0.3)
PER_FUNDAMENTO_PROFILE = WeightProfile(quantitative=0.6, qualitative=0.4)


def overall_profile(settings: Settings) -> WeightProfile:
    return WeightProfile(
        quantitative=settings.overall_weight_quantitative,
        qualitative=settings.overall_weight_qualitative,
    )


def per_fundamento_profile(settings: Settings) -> WeightProfile:
    return WeightProfile(
        quantitative=settings.fundamento_weight_quantitative,
        qualitative=settings.fundamento_weight_qualitative,
    )


def combine(
    accuracy_pct: float,
    qualitative: Optional[QualitativeAggregate],
    profile: WeightProfile,
) -> CombinedScore:
    if qualitative is None or qualitative.total_events == 0:
        return CombinedScore(
            quantitative_pct=accuracy_pct,
            qualitative_pct=0.0,
            composite_score=accuracy_pct,
            total_qualitative_events=0,
            descriptive_label=NO_EVALUATION_LABEL,
        )
    weights = profile.normalized()
    composite = accuracy_pct * weights.quantitative + qualitative.qualitative_pct * weights.qualitative
    return CombinedScore(
        quantitative_pct=accuracy_pct,
        qualitative_pct=qualitative.qualitative_pct,
        composite_score=max(0.0, min(100.0, composite)),
        total_qualitative_events=qualitative.total_events,
        descriptive_label=qualitative.classification,
    )


def describe_performance(score_pct: float) -> str:
    for threshold, label in PERCENTAGE_LABELS:
        if score_pct >= threshold:
            return label
    if score_pct > 0:
        return "Precisa melhorar"
    return NO_EVALUATION_LABEL
