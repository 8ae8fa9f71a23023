from fastapi import APIRouter, Depends

from ..core.skill_config import FundamentoConfig
from ..dependencies import get_skill_resolver
from ..services.skills import SkillConfigResolver

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/fundamentos", response_model=list[FundamentoConfig])
def list_fundamentos(
    resolver: SkillConfigResolver = Depends(get_skill_resolver),
) -> list[FundamentoConfig]:
    return resolver.fundamentos()
