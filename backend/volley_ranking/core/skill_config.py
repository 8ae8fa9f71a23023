from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, field_validator

from .enums import Fundamento


class EventTypeConfig(BaseModel):
    event_type: str
    weight: float
    description: Optional[str] = None

    model_config = {"frozen": True}


class FundamentoConfig(BaseModel):
    fundamento: Fundamento
    events: tuple[EventTypeConfig, ...]

    model_config = {"frozen": True}

    @field_validator("events")
    @classmethod
    def _unique_event_types(cls, events: tuple[EventTypeConfig, ...]) -> tuple[EventTypeConfig, ...]:
        seen: set[str] = set()
        for event in events:
            key = event.event_type.casefold()
            if key in seen:
                raise ValueError(f"Duplicate event type '{event.event_type}'.")
            seen.add(key)
        return events


DEFAULT_SKILL_EVENTS: list[dict] = [
    {
        "fundamento": "saque",
        "events": [
            {"event_type": "Ace", "weight": 3.0, "description": "Saque direto, sem recepção do adversário"},
            {"event_type": "Eficiente", "weight": 1.0, "description": "Saque que dificulta a construção do adversário"},
            {"event_type": "Regular", "weight": 0.5, "description": "Saque que não gera dificuldade ao adversário"},
            {"event_type": "Erro", "weight": -2.0, "description": "Erro de saque"},
        ],
    },
    {
        "fundamento": "passe",
        "events": [
            {"event_type": "Perfeita", "weight": 3.0, "description": "Recepção que permite todas as opções de ataque"},
            {"event_type": "Boa", "weight": 1.5, "description": "Recepção que limita algumas opções de ataque"},
            {"event_type": "Ruim", "weight": -0.5, "description": "Recepção que permite apenas uma opção de ataque"},
            {"event_type": "Erro", "weight": -2.0, "description": "Erro de recepção"},
        ],
    },
    {
        "fundamento": "levantamento",
        "events": [
            {"event_type": "Excelente", "weight": 2.5, "description": "Levantamento que cria situação ideal para o atacante"},
            {"event_type": "Bom", "weight": 1.0, "description": "Levantamento que permite ataque em condições favoráveis"},
            {"event_type": "Ruim", "weight": -0.5, "description": "Levantamento que dificulta a ação do atacante"},
            {"event_type": "Erro", "weight": -2.0, "description": "Erro de levantamento"},
        ],
    },
    {
        "fundamento": "ataque",
        "events": [
            {"event_type": "Ponto", "weight": 3.0, "description": "Ataque que resulta em ponto direto"},
            {"event_type": "Eficiente", "weight": 1.5, "description": "Ataque que dificulta a defesa adversária"},
            {"event_type": "Bloqueado", "weight": -1.0, "description": "Ataque bloqueado pelo adversário"},
            {"event_type": "Erro", "weight": -2.0, "description": "Erro de ataque"},
        ],
    },
    {
        "fundamento": "bloqueio",
        "events": [
            {"event_type": "Ponto", "weight": 3.0, "description": "Bloqueio que resulta em ponto direto"},
            {"event_type": "Eficiente", "weight": 1.5, "description": "Bloqueio que facilita a defesa"},
            {"event_type": "Ineficiente", "weight": -0.5, "description": "Bloqueio que não cumpre sua função"},
            {"event_type": "Erro", "weight": -1.5, "description": "Erro de bloqueio"},
        ],
    },
    {
        "fundamento": "defesa",
        "events": [
            {"event_type": "Excelente", "weight": 3.0, "description": "Defesa que permite contra-ataque organizado"},
            {"event_type": "Boa", "weight": 1.5, "description": "Defesa que permite alguma organização de jogo"},
            {"event_type": "Ruim", "weight": -0.5, "description": "Defesa que dificulta a continuidade da jogada"},
            {"event_type": "Erro", "weight": -1.5, "description": "Erro de defesa"},
        ],
    },
]


def load_skill_config(raw: list[dict] = DEFAULT_SKILL_EVENTS) -> Mapping[Fundamento, FundamentoConfig]:
    table: dict[Fundamento, FundamentoConfig] = {}
    for entry in raw:
        config = FundamentoConfig.model_validate(entry)
        if config.fundamento in table:
            raise ValueError(f"Fundamento '{config.fundamento.value}' configured twice.")
        table[config.fundamento] = config
    return MappingProxyType(table)


SKILL_EVENT_CONFIG = load_skill_config()
