import enum


class Team(str, enum.Enum):
    MASCULINO = "Masculino"
    FEMININO = "Feminino"


class Fundamento(str, enum.Enum):
    SAQUE = "saque"
    PASSE = "passe"
    LEVANTAMENTO = "levantamento"
    ATAQUE = "ataque"
    BLOQUEIO = "bloqueio"
    DEFESA = "defesa"


class RankingMode(str, enum.Enum):
    COMPOSITE = "composite"
    QUANTITATIVE = "quantitative"
    QUALITATIVE = "qualitative"


class SyncState(str, enum.Enum):
    SYNCED = "SYNCED"
    PENDING_SYNC = "PENDING_SYNC"
    PERMANENTLY_LOCAL = "PERMANENTLY_LOCAL"


class RankingPeriod(str, enum.Enum):
    LAST_7_DAYS = "7dias"
    LAST_30_DAYS = "30dias"
