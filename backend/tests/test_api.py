from scoreboard import crud, sync
from scoreboard.errors import StoreError


def create_match(client, **overrides):
    payload = {
        "competition_id": "futsal",
        "faculty1_id": "fa",
        "faculty2_id": "fb",
        "status": "scheduled",
        "date": "2025-05-13",
        "time": "11:00",
        "location": "Main Hall",
        "round": "Final",
    }
    payload.update(overrides)
    response = client.post("/matches/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def tally_by_faculty(client):
    response = client.get("/medals/tally")
    assert response.status_code == 200
    return {row["faculty_id"]: row for row in response.json()}


def test_healthcheck(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_reference_data(client):
    faculties = client.get("/faculties/").json()
    competitions = client.get("/competitions/").json()

    assert [faculty["id"] for faculty in faculties] == ["fa", "fb", "fc", "fd"]
    # Sports are listed before arts, then by name.
    assert [competition["id"] for competition in competitions] == ["chess", "esports", "futsal", "band"]


def test_completing_final_updates_medal_tally(client):
    match = create_match(client)
    assert match["medal_round"] is True

    scored = client.patch(f"/matches/{match['id']}/score", json={"score1": 3, "score2": 1})
    assert scored.status_code == 200
    assert scored.json()["status"] == "completed"

    tally = tally_by_faculty(client)
    assert tally["fa"]["total_gold"] == 1
    assert tally["fa"]["total_points"] == 3
    assert tally["fa"]["rank"] == 1
    assert tally["fb"]["total_silver"] == 1
    assert tally["fc"]["total_points"] == 0

    rows = client.get("/medals/standings").json()
    assert {(row["faculty_id"], row["competition_id"], row["total_points"]) for row in rows} == {
        ("fa", "futsal", 3),
        ("fb", "futsal", 2),
    }


def test_third_place_and_lower_final_bronze(client):
    third_place = create_match(client, round="3rd Place", faculty1_id="fc", faculty2_id="fd")
    lower_final = create_match(client, competition_id="esports", round="Lower Final")

    client.patch(f"/matches/{third_place['id']}/score", json={"score1": 2, "score2": 4})
    client.patch(f"/matches/{lower_final['id']}/score", json={"score1": 5, "score2": 1})

    tally = tally_by_faculty(client)
    assert tally["fd"]["total_bronze"] == 1
    assert tally["fc"]["total_bronze"] == 0
    assert tally["fb"]["total_bronze"] == 1
    assert tally["fa"]["total_bronze"] == 0


def test_intermediate_round_grants_no_medals(client):
    match = create_match(client, round="Quarterfinal")

    client.patch(f"/matches/{match['id']}/score", json={"score1": 4, "score2": 0})

    assert all(row["total_points"] == 0 for row in tally_by_faculty(client).values())


def test_draw_in_final_is_rejected(client):
    match = create_match(client, status="live")

    response = client.patch(f"/matches/{match['id']}/score", json={"score1": 1, "score2": 1})

    assert response.status_code == 400
    assert "draw" in response.json()["detail"]
    assert client.get(f"/matches/{match['id']}").json()["status"] == "live"


def test_sport_match_needs_two_faculties(client):
    response = client.post(
        "/matches/",
        json={"competition_id": "futsal", "faculty1_id": "fa", "faculty2_id": "fa"},
    )

    assert response.status_code == 400


def test_unknown_references_return_404(client):
    unknown_competition = client.post(
        "/matches/",
        json={"competition_id": "chessboxing", "faculty1_id": "fa", "faculty2_id": "fb"},
    )
    unknown_match = client.patch("/matches/999/score", json={"score1": 1, "score2": 0})

    assert unknown_competition.status_code == 404
    assert unknown_match.status_code == 404
    assert client.delete("/matches/999").status_code == 404


def test_arts_final_podium_and_medals(client):
    match = create_match(client, competition_id="band", faculty1_id="fa", faculty2_id="fa", status="live")

    podium = client.get(f"/matches/{match['id']}/podium").json()
    assert podium["judging_in_progress"] is True

    saved = client.put(
        f"/matches/{match['id']}/arts-scores",
        json={
            "scores": [
                {"faculty_id": "fa", "score": 90},
                {"faculty_id": "fb", "score": 95},
                {"faculty_id": "fc", "score": 80},
                {"faculty_id": "fd", "score": 70},
            ]
        },
    )
    assert saved.status_code == 200
    assert [row["faculty_id"] for row in saved.json()] == ["fb", "fa", "fc", "fd"]

    # Scores alone do not grant medals until the final is completed.
    assert tally_by_faculty(client)["fb"]["total_gold"] == 0

    completed = client.patch(f"/matches/{match['id']}", json={"status": "completed"})
    assert completed.status_code == 200

    tally = tally_by_faculty(client)
    assert tally["fb"]["total_gold"] == 1
    assert tally["fa"]["total_silver"] == 1
    assert tally["fc"]["total_bronze"] == 1
    assert tally["fd"]["total_points"] == 0

    podium = client.get(f"/matches/{match['id']}/podium").json()
    assert podium["judging_in_progress"] is False
    assert [entry["faculty_id"] for entry in podium["podium"]] == ["fb", "fa", "fc"]


def test_completed_arts_final_without_scores_grants_nothing(client):
    create_match(client, competition_id="band", faculty1_id="fa", faculty2_id="fa", status="completed")

    assert all(row["total_points"] == 0 for row in tally_by_faculty(client).values())


def test_arts_scores_rejected_for_sport_match(client):
    match = create_match(client)

    response = client.put(
        f"/matches/{match['id']}/arts-scores",
        json={"scores": [{"faculty_id": "fa", "score": 50}]},
    )

    assert response.status_code == 400


def test_deleting_completed_match_retracts_medals(client):
    match = create_match(client, status="completed", score1=2, score2=0)
    assert tally_by_faculty(client)["fa"]["total_gold"] == 1

    response = client.delete(f"/matches/{match['id']}")

    assert response.status_code == 204
    assert tally_by_faculty(client)["fa"]["total_gold"] == 0
    assert client.get("/medals/standings").json() == []


def test_match_listing_filters(client):
    create_match(client, round="Semifinal", status="live", time="09:00")
    create_match(client, competition_id="esports", round="Semifinal", time="08:00")
    create_match(client, round="Final", date="2025-05-14")

    live = client.get("/matches/live").json()
    assert len(live) == 1
    assert live[0]["status"] == "live"

    futsal = client.get("/matches/", params={"competition_id": "futsal"}).json()
    assert [match["round"] for match in futsal] == ["Semifinal", "Final"]

    ordered = client.get("/matches/").json()
    assert [match["time"] for match in ordered] == ["08:00", "09:00", "11:00"]

    by_competition = client.get("/competitions/esports/matches").json()
    assert len(by_competition) == 1
    assert client.get("/competitions/unknown/matches").status_code == 404


def test_sync_endpoint_rebuilds_same_tally(client):
    final = create_match(client, status="completed", score1=3, score2=1)
    create_match(client, round="3rd Place", faculty1_id="fc", faculty2_id="fd", status="completed", score1=0, score2=1)
    before = tally_by_faculty(client)

    first = client.post("/medals/sync")
    assert first.status_code == 200
    assert first.json()["awards_granted"] == 3
    assert tally_by_faculty(client) == before

    second = client.post("/medals/sync")
    assert second.json() == first.json()
    assert tally_by_faculty(client) == before
    assert client.get("/medals/sync").json() == {"running": False}
    assert final["status"] == "completed"


def test_reset_endpoint_zeroes_every_faculty(client):
    create_match(client, status="completed", score1=3, score2=1)

    response = client.delete("/medals/")

    assert response.status_code == 200
    assert response.json() == {"standings_deleted": 2, "awards_deleted": 2}
    tally = tally_by_faculty(client)
    assert len(tally) == 4
    assert all(row["total_points"] == 0 for row in tally.values())


def test_arts_table_standings(client):
    match = create_match(client, competition_id="band", faculty1_id="fa", faculty2_id="fa", round="Round 1", status="live")
    client.put(
        f"/matches/{match['id']}/arts-scores",
        json={"scores": [{"faculty_id": "fa", "score": 70}, {"faculty_id": "fb", "score": 88}]},
    )
    client.patch(f"/matches/{match['id']}", json={"status": "completed"})

    table = client.get("/competitions/band/table").json()

    assert [(row["rank"], row["faculty_id"], row["points"]) for row in table] == [(1, "fb", 88.0), (2, "fa", 70.0)]
    assert client.get("/competitions/futsal/table").status_code == 400


def test_store_failure_returns_503(client, monkeypatch):
    def failing_faculties(db):
        raise StoreError("Could not load faculties.")

    monkeypatch.setattr(crud, "get_faculties", failing_faculties)

    response = client.get("/faculties/")

    assert response.status_code == 503
    assert response.json() == {"detail": "Could not load faculties."}


def test_second_final_in_competition_is_rejected(client):
    create_match(client, status="completed", score1=3, score2=1)
    rematch = create_match(client, faculty1_id="fc", faculty2_id="fd", status="live")

    response = client.patch(f"/matches/{rematch['id']}/score", json={"score1": 2, "score2": 0})

    assert response.status_code == 400
    assert "already awarded" in response.json()["detail"]
    tally = tally_by_faculty(client)
    assert tally["fa"]["total_gold"] == 1
    assert tally["fc"]["total_gold"] == 0


def test_third_place_and_lower_final_cannot_both_award_bronze(client):
    create_match(client, round="3rd Place", status="completed", score1=3, score2=1)

    response = client.post(
        "/matches/",
        json={
            "competition_id": "futsal",
            "faculty1_id": "fc",
            "faculty2_id": "fd",
            "round": "Lower Final",
            "status": "completed",
            "score1": 2,
            "score2": 0,
        },
    )

    assert response.status_code == 400
    assert sum(row["total_bronze"] for row in tally_by_faculty(client).values()) == 1


def test_reset_endpoint_refused_while_sync_runs(client):
    create_match(client, status="completed", score1=3, score2=1)

    assert sync._sync_lock.acquire(blocking=False)
    try:
        response = client.delete("/medals/")
    finally:
        sync._sync_lock.release()

    assert response.status_code == 409
    assert tally_by_faculty(client)["fa"]["total_gold"] == 1
