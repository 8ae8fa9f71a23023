from datetime import date, datetime

import pytest

from volley_ranking.core.enums import Team
from volley_ranking.models.athlete import Athlete
from volley_ranking.models.evaluation import ExecutionRecord
from volley_ranking.schemas.event import QualitativeEvent
from volley_ranking.scripts.seed_sample_data import seed


def add_athlete(db, name: str, team: Team = Team.FEMININO) -> Athlete:
    athlete = Athlete(name=name, team=team)
    db.add(athlete)
    db.commit()
    db.refresh(athlete)
    return athlete


def add_executions(db, athlete: Athlete, fundamento: str, hits: int, misses: int, on: date = date(2026, 3, 5)):
    db.add(ExecutionRecord(athlete_id=athlete.id, fundamento=fundamento, hits=hits, misses=misses, date=on))
    db.commit()


def post_event(client, athlete: Athlete, fundamento: str, event_type: str, when: str = "2026-03-05T18:00:00"):
    response = client.post(
        "/events",
        json={
            "athlete_id": athlete.id,
            "training_id": 1,
            "fundamento": fundamento,
            "event_type": event_type,
            "timestamp": when,
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture()
def seeded(db):
    athletes = seed(db)
    db.commit()
    return {athlete.name: athlete.id for athlete in athletes}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_config_lists_every_fundamento(client):
    response = client.get("/config/fundamentos")

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 6
    saque = next(item for item in body if item["fundamento"] == "saque")
    assert {"event_type": "Ace", "weight": 3.0}.items() <= saque["events"][0].items()


def test_record_event_resolves_weight(client, db):
    ana = add_athlete(db, "Ana")

    body = post_event(client, ana, "recepção", "perfeita")

    assert body["state"] == "SYNCED"
    assert body["event"]["fundamento"] == "passe"
    assert body["event"]["event_type"] == "Perfeita"
    assert body["event"]["weight"] == 3.0
    assert body["event"]["id"].isdigit()


def test_unknown_event_type_or_fundamento_is_rejected(client, db):
    ana = add_athlete(db, "Ana")

    response = client.post(
        "/events",
        json={"athlete_id": ana.id, "fundamento": "saque", "event_type": "Perfeita"},
    )
    assert response.status_code == 422

    response = client.get("/rankings/fundamentos/cortada", params={"team": "Feminino"})
    assert response.status_code == 422

    assert client.get("/events").json() == []


def test_fundamento_ranking_orders_and_excludes_small_samples(client, db):
    ana = add_athlete(db, "Ana")
    bia = add_athlete(db, "Bia")
    carla = add_athlete(db, "Carla")
    diego = add_athlete(db, "Diego", Team.MASCULINO)
    add_executions(db, ana, "saque", 6, 2)
    add_executions(db, bia, "saque", 8, 2)
    add_executions(db, carla, "saque", 3, 0)
    add_executions(db, diego, "saque", 10, 0)
    for _ in range(4):
        post_event(client, bia, "saque", "Ace")
    post_event(client, bia, "saque", "Erro")
    for _ in range(10):
        post_event(client, carla, "saque", "Ace")

    response = client.get("/rankings/fundamentos/saque", params={"team": "Feminino"})

    assert response.status_code == 200
    ranking = response.json()
    assert [entry["athlete_name"] for entry in ranking] == ["Bia", "Ana"]
    assert [entry["rank_position"] for entry in ranking] == [0, 1]
    assert ranking[0]["composite_score"] == pytest.approx(80.0)
    assert ranking[0]["total_qualitative_events"] == 5
    assert ranking[1]["composite_score"] == pytest.approx(75.0)
    assert ranking[1]["descriptive_label"] == "Sem avaliação"

    relaxed = client.get("/rankings/fundamentos/saque", params={"team": "Feminino", "min_sample": "false"}).json()
    assert relaxed[0]["athlete_name"] == "Carla"

    top_one = client.get("/rankings/fundamentos/saque", params={"team": "Feminino", "top_n": 1}).json()
    assert [entry["athlete_name"] for entry in top_one] == ["Bia"]


def test_ranking_date_window_uses_inclusive_days(client, db):
    ana = add_athlete(db, "Ana")
    bia = add_athlete(db, "Bia")
    add_executions(db, ana, "ataque", 9, 1, on=date(2026, 3, 10))
    add_executions(db, bia, "ataque", 6, 0, on=date(2026, 2, 20))

    ranking = client.get(
        "/rankings/fundamentos/ataque",
        params={"team": "Feminino", "date_start": "2026-03-01", "date_end": "2026-03-10"},
    ).json()

    assert [entry["athlete_name"] for entry in ranking] == ["Ana"]


def test_seeded_feminino_rankings(client, seeded):
    saque = client.get("/rankings/fundamentos/saque", params={"team": "Feminino", "period": "7dias"}).json()
    assert [entry["athlete_name"] for entry in saque] == ["Ana Souza", "Beatriz Lima"]
    assert saque[0]["composite_score"] == pytest.approx(80.0)
    assert saque[1]["composite_score"] == pytest.approx(30.0)

    passe = client.get("/rankings/fundamentos/recepção", params={"team": "Feminino"}).json()
    assert [entry["athlete_name"] for entry in passe] == ["Beatriz Lima", "Ana Souza"]
    assert passe[0]["composite_score"] == pytest.approx(94.0)
    assert passe[1]["composite_score"] == pytest.approx(64.0)


def test_seeded_overall_ranking(client, seeded):
    response = client.get("/rankings/overall", params={"team": "Feminino"})

    assert response.status_code == 200
    ranking = response.json()
    assert [entry["athlete_name"] for entry in ranking] == ["Ana Souza", "Beatriz Lima"]
    assert ranking[0]["quantitative_pct"] == pytest.approx(70.0)
    assert ranking[0]["total_executions"] == 30
    assert ranking[1]["composite_score"] == pytest.approx(64.0)


def test_seeded_team_summary(client, seeded):
    summary = client.get("/rankings/summary", params={"team": "Feminino"}).json()

    assert summary["team"] == "Feminino"
    assert summary["weakest_fundamento"]["fundamento"] == "saque"
    assert len(summary["fundamentos"]) == 6
    assert [entry["athlete_name"] for entry in summary["leaders"]["saque"]] == ["Ana Souza", "Beatriz Lima"]
    assert summary["leaders"]["bloqueio"] == []


def test_seeded_aggregates(client, seeded):
    aggregates = client.get("/rankings/aggregates", params={"team": "Feminino"}).json()

    beatriz_passe = next(
        item
        for item in aggregates
        if item["athlete_id"] == seeded["Beatriz Lima"] and item["fundamento"] == "passe"
    )
    assert beatriz_passe["accuracy_pct"] == pytest.approx(90.0)
    assert beatriz_passe["total_events"] == 1
    assert beatriz_passe["classification"] == "Excelente"
    assert all(item["athlete_id"] != seeded["Diego Alves"] for item in aggregates)


def test_seeded_athlete_aggregates(client, seeded):
    response = client.get(f"/rankings/athletes/{seeded['Ana Souza']}")

    assert response.status_code == 200
    body = response.json()
    assert [item["fundamento"] for item in body] == ["saque", "passe", "ataque"]
    assert body[0]["accuracy_pct"] == pytest.approx(80.0)
    assert body[0]["total_events"] == 2
    assert body[1]["total_events"] == 1
    assert body[2]["classification"] is None

    assert client.get("/rankings/athletes/9999").status_code == 404


def test_event_listing_filters_and_stats(client, db):
    ana = add_athlete(db, "Ana")
    post_event(client, ana, "saque", "Ace", "2026-03-05T10:00:00")
    post_event(client, ana, "passe", "Erro", "2026-03-10T23:30:00")
    post_event(client, ana, "passe", "Boa", "2026-03-11T08:00:00")

    window = client.get("/events", params={"date_start": "2026-03-05", "date_end": "2026-03-10"}).json()
    assert [event["event_type"] for event in window] == ["Erro", "Ace"]

    by_synonym = client.get("/events", params={"fundamento": "recepção"}).json()
    assert len(by_synonym) == 2

    stats = client.get("/events/stats", params={"athlete_id": ana.id}).json()
    assert stats["total_events"] == 3
    assert stats["total_score"] == pytest.approx(2.5)
    assert stats["positive_events"] == 2
    assert stats["negative_events"] == 1


def test_delete_event(client, db):
    ana = add_athlete(db, "Ana")
    event_id = post_event(client, ana, "defesa", "Boa")["event"]["id"]

    assert client.delete(f"/events/{event_id}").status_code == 204
    assert client.delete(f"/events/{event_id}").status_code == 404
    assert client.get("/events").json() == []


def test_sync_pushes_queued_events(client, db, event_queue):
    ana = add_athlete(db, "Ana")
    event_queue.append(
        QualitativeEvent(
            id="local_offline1",
            athlete_id=ana.id,
            fundamento="ataque",
            event_type="Ponto",
            weight=3.0,
            timestamp=datetime(2026, 3, 5, 20, 0),
        )
    )

    pending = client.get("/events/pending").json()
    assert [item["event"]["id"] for item in pending] == ["local_offline1"]
    assert pending[0]["state"] == "PENDING_SYNC"
    assert [event["id"] for event in client.get("/events").json()] == ["local_offline1"]

    report = client.post("/events/sync").json()

    assert report == {"synced_count": 1, "failed_ids": []}
    assert client.get("/events/pending").json() == []
    events = client.get("/events").json()
    assert len(events) == 1
    assert events[0]["id"].isdigit()
