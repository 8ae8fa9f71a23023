from __future__ import annotations

from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from volley_ranking.core.enums import Team
from volley_ranking.database import SessionLocal
from volley_ranking.models.athlete import Athlete
from volley_ranking.models.evaluation import ExecutionRecord, QualitativeEventRecord
from volley_ranking.services.skills import SkillConfigResolver

SAMPLE_ROSTER = [
    ("Ana Souza", Team.FEMININO),
    ("Beatriz Lima", Team.FEMININO),
    ("Carla Mendes", Team.FEMININO),
    ("Diego Alves", Team.MASCULINO),
    ("Eduardo Rocha", Team.MASCULINO),
]

SAMPLE_EXECUTIONS = {
    "Ana Souza": [("saque", 8, 2), ("passe", 6, 4), ("ataque", 7, 3)],
    "Beatriz Lima": [("saque", 5, 5), ("recepção", 9, 1)],
    "Carla Mendes": [("saque", 2, 1)],
    "Diego Alves": [("ataque", 12, 4), ("bloqueio", 4, 4)],
    "Eduardo Rocha": [("ataque", 9, 6), ("defesa", 6, 2)],
}

SAMPLE_EVENTS = {
    "Ana Souza": [("saque", "Ace"), ("saque", "Eficiente"), ("passe", "Boa")],
    "Beatriz Lima": [("passe", "Perfeita"), ("saque", "Erro")],
    "Diego Alves": [("ataque", "Ponto"), ("ataque", "Bloqueado")],
}


def ensure_athlete(db: Session, *, name: str, team: Team) -> Athlete:
    athlete = db.query(Athlete).filter_by(name=name).first()
    if athlete:
        return athlete
    athlete = Athlete(name=name, team=team)
    db.add(athlete)
    db.flush()
    return athlete


def seed_executions(db: Session, *, athlete: Athlete, on: date) -> None:
    if db.query(ExecutionRecord).filter_by(athlete_id=athlete.id).first():
        return
    for fundamento, hits, misses in SAMPLE_EXECUTIONS.get(athlete.name, []):
        db.add(
            ExecutionRecord(
                athlete_id=athlete.id,
                fundamento=fundamento,
                hits=hits,
                misses=misses,
                date=on,
            )
        )


def seed_events(db: Session, *, athlete: Athlete, at: datetime, resolver: SkillConfigResolver) -> None:
    if db.query(QualitativeEventRecord).filter_by(athlete_id=athlete.id).first():
        return
    for fundamento, event_type in SAMPLE_EVENTS.get(athlete.name, []):
        config = resolver.resolve(fundamento, event_type)
        db.add(
            QualitativeEventRecord(
                athlete_id=athlete.id,
                fundamento=fundamento,
                event_type=config.event_type,
                weight=config.weight,
                timestamp=at,
                notes="Evento registrado pelo seed.",
            )
        )


def seed(db: Session) -> list[Athlete]:
    resolver = SkillConfigResolver()
    yesterday = date.today() - timedelta(days=1)
    athletes = []
    for name, team in SAMPLE_ROSTER:
        athlete = ensure_athlete(db, name=name, team=team)
        seed_executions(db, athlete=athlete, on=yesterday)
        seed_events(db, athlete=athlete, at=datetime.combine(yesterday, datetime.min.time()), resolver=resolver)
        athletes.append(athlete)
    return athletes


def main() -> None:
    db = SessionLocal()
    try:
        athletes = seed(db)
        db.commit()
        print(f"Seed data ready: {len(athletes)} athletes.")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
