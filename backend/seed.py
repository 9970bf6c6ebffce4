from __future__ import annotations

import argparse

from scoreboard import models, sync
from scoreboard.database import Base, engine, session_scope

FACULTIES = [
    {"id": "socs", "name": "School of Computer Science", "short_name": "SOCS", "color": "blue"},
    {"id": "sod", "name": "School of Design", "short_name": "SOD", "color": "purple"},
    {"id": "bbs", "name": "BINUS Business School", "short_name": "BBS", "color": "green"},
    {
        "id": "fdcht",
        "name": "Faculty of Digital Communication and Hotel & Tourism",
        "short_name": "FDCHT",
        "color": "pink",
    },
]

COMPETITIONS = [
    {"id": "futsal", "name": "Futsal", "kind": "sport", "category": "team", "icon": "FaFutbol"},
    {"id": "basketball-putra", "name": "Basketball Putra", "kind": "sport", "category": "team", "icon": "FaBasketballBall"},
    {"id": "basketball-putri", "name": "Basketball Putri", "kind": "sport", "category": "team", "icon": "FaBasketballBall"},
    {"id": "volleyball", "name": "Volleyball", "kind": "sport", "category": "team", "icon": "FaVolleyballBall"},
    {"id": "badminton-putra", "name": "Badminton Putra", "kind": "sport", "category": "individual", "icon": "GiShuttlecock"},
    {"id": "badminton-putri", "name": "Badminton Putri", "kind": "sport", "category": "individual", "icon": "GiShuttlecock"},
    {"id": "badminton-mixed", "name": "Badminton Mixed", "kind": "sport", "category": "mixed", "icon": "GiShuttlecock"},
    {"id": "esports", "name": "Esports (Mobile Legends)", "kind": "sport", "category": "team", "icon": "FaGamepad"},
    {"id": "band", "name": "Band", "kind": "art", "category": "team", "icon": "FaGuitar"},
    {"id": "dance", "name": "Dance", "kind": "art", "category": "team", "icon": "FaTheaterMasks"},
]

# (competition, faculty1, faculty2, score1, score2, status, round, date, time, location)
DEMO_MATCHES = [
    ("futsal", "socs", "bbs", 3, 1, "completed", "Semifinal", "2025-05-12", "09:00", "Main Hall"),
    ("futsal", "sod", "fdcht", 2, 4, "completed", "Semifinal", "2025-05-12", "10:30", "Main Hall"),
    ("futsal", "bbs", "sod", 2, 1, "completed", "3rd Place", "2025-05-13", "09:00", "Main Hall"),
    ("futsal", "socs", "fdcht", 3, 2, "completed", "Final", "2025-05-13", "11:00", "Main Hall"),
    ("esports", "socs", "sod", 2, 1, "completed", "Upper Final", "2025-05-12", "13:00", "Lab 5"),
    ("esports", "bbs", "fdcht", 2, 0, "completed", "Lower Final", "2025-05-13", "13:00", "Lab 5"),
    ("esports", "socs", "bbs", 1, 3, "live", "Final", "2025-05-13", "15:00", "Lab 5"),
    ("volleyball", "fdcht", "bbs", 0, 0, "scheduled", "Semifinal", "2025-05-14", "09:00", "Court B"),
]

DEMO_BAND_SCORES = {"socs": 86.5, "sod": 92.0, "bbs": 78.0, "fdcht": 88.25}


def reset_database() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def apply_demo_progress(db) -> None:
    for competition_id, faculty1, faculty2, score1, score2, status, round_label, date, time, location in DEMO_MATCHES:
        db.add(
            models.Match(
                competition_id=competition_id,
                faculty1_id=faculty1,
                faculty2_id=faculty2,
                score1=score1,
                score2=score2,
                status=status,
                round=round_label,
                date=date,
                time=time,
                location=location,
            )
        )

    band_final = models.Match(
        competition_id="band",
        faculty1_id="socs",
        faculty2_id="socs",
        status="completed",
        round="Final",
        date="2025-05-14",
        time="19:00",
        location="Auditorium",
    )
    db.add(band_final)
    db.flush()

    for faculty_id, score in DEMO_BAND_SCORES.items():
        db.add(models.ArtsPerformanceScore(match_id=band_final.id, faculty_id=faculty_id, score=score))

    db.add(
        models.Match(
            competition_id="dance",
            faculty1_id="sod",
            faculty2_id="sod",
            status="completed",
            round="Final",
            date="2025-05-14",
            time="20:30",
            location="Auditorium",
            notes="Judges still scoring",
        )
    )


def seed(*, demo_progress: bool = False) -> None:
    reset_database()

    with session_scope() as db:
        db.add_all(models.Faculty(**faculty) for faculty in FACULTIES)
        db.add_all(
            models.Competition(
                format="elimination" if competition["kind"] == "sport" else "table",
                **competition,
            )
            for competition in COMPETITIONS
        )
        db.flush()

        if demo_progress:
            apply_demo_progress(db)

        db.commit()

        if demo_progress:
            sync.sync(db)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed faculties, competitions and optional demo matches.")
    parser.add_argument(
        "--demo-progress",
        action="store_true",
        help="Seed with completed/live matches and a synced medal tally for demo screens.",
    )
    args = parser.parse_args()

    seed(demo_progress=args.demo_progress)
    mode = "demo" if args.demo_progress else "fresh"
    print(f"Seed completed ({mode})")
