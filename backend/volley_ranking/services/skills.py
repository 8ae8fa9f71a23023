"""Fundamento name canonicalization and event-type weight lookup.

Every ingestion and query boundary goes through ``canonical_fundamento`` so
the ``passe`` / ``recepção`` synonym lives in exactly one place.
"""

import unicodedata
from typing import Mapping

from ..core.enums import Fundamento
from ..core.errors import ConfigurationError
from ..core.skill_config import SKILL_EVENT_CONFIG, EventTypeConfig, FundamentoConfig


def fold_name(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value.strip())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


_SYNONYMS: dict[str, Fundamento] = {
    "saque": Fundamento.SAQUE,
    "passe": Fundamento.PASSE,
    "recepcao": Fundamento.PASSE,
    "levantamento": Fundamento.LEVANTAMENTO,
    "ataque": Fundamento.ATAQUE,
    "bloqueio": Fundamento.BLOQUEIO,
    "defesa": Fundamento.DEFESA,
}

_STORAGE_ALIASES: dict[Fundamento, tuple[str, ...]] = {
    Fundamento.PASSE: ("passe", "recepção"),
}


def canonical_fundamento(name: str | Fundamento) -> Fundamento:
    if isinstance(name, Fundamento):
        return name
    fundamento = _SYNONYMS.get(fold_name(name))
    if fundamento is None:
        raise ConfigurationError(f"Unknown fundamento '{name}'.")
    return fundamento


def is_known_fundamento(name: str) -> bool:
    return fold_name(name) in _SYNONYMS


def fundamento_aliases(fundamento: str | Fundamento) -> tuple[str, ...]:
    """Storage keys under which a fundamento may have been recorded.

    The canonical key always comes first, which is also the preferred key
    when more than one alias carries data.
    """
    canonical = canonical_fundamento(fundamento)
    return _STORAGE_ALIASES.get(canonical, (canonical.value,))


class SkillConfigResolver:
    def __init__(self, table: Mapping[Fundamento, FundamentoConfig] = SKILL_EVENT_CONFIG):
        self._table = table

    def fundamentos(self) -> list[FundamentoConfig]:
        return list(self._table.values())

    def event_types(self, fundamento: str | Fundamento) -> tuple[EventTypeConfig, ...]:
        canonical = canonical_fundamento(fundamento)
        config = self._table.get(canonical)
        if config is None:
            raise ConfigurationError(f"No event types configured for '{canonical.value}'.")
        return config.events

    def resolve(self, fundamento: str | Fundamento, event_type: str) -> EventTypeConfig:
        wanted = fold_name(event_type)
        matches = [event for event in self.event_types(fundamento) if fold_name(event.event_type) == wanted]
        if len(matches) != 1:
            raise ConfigurationError(
                f"Unknown event type '{event_type}' for fundamento '{canonical_fundamento(fundamento).value}'."
            )
        return matches[0]

    def resolve_weight(self, fundamento: str | Fundamento, event_type: str) -> float:
        return self.resolve(fundamento, event_type).weight
