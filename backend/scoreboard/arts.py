import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from . import crud, events, medals, models, schemas

logger = logging.getLogger(__name__)


def scores_for(db: Session, match_id: int) -> list[medals.RankedScore]:
    rows = crud.fetch_arts_scores(db, match_id)
    return medals.rank_scores((row.faculty_id, row.score) for row in rows)


def _ranked_to_read(
    ranked: list[medals.RankedScore],
    faculties: dict[str, models.Faculty],
) -> list[schemas.RankedScoreRead]:
    rows: list[schemas.RankedScoreRead] = []
    for rank, entry in enumerate(ranked, start=1):
        faculty = faculties.get(entry.faculty_id)
        rows.append(
            schemas.RankedScoreRead(
                rank=rank,
                faculty_id=entry.faculty_id,
                faculty=faculty.name if faculty else entry.faculty_id,
                short_name=faculty.short_name if faculty else entry.faculty_id,
                color=faculty.color if faculty else "gray",
                score=entry.score,
            )
        )
    return rows


def ranked_scores_read(db: Session, match_id: int) -> list[schemas.RankedScoreRead]:
    crud.get_match_or_raise(db, match_id)
    faculties = {faculty.id: faculty for faculty in crud.get_faculties(db)}
    return _ranked_to_read(scores_for(db, match_id), faculties)


def podium(db: Session, match_id: int) -> schemas.PodiumRead:
    ranked = ranked_scores_read(db, match_id)
    return schemas.PodiumRead(
        match_id=match_id,
        judging_in_progress=not ranked,
        podium=ranked[: len(medals.PODIUM_TIERS)],
    )


def _validate_submission(db: Session, scores: list[tuple[str, float]]) -> None:
    seen: set[str] = set()
    for faculty_id, score in scores:
        if faculty_id in seen:
            raise ValueError(f"Faculty '{faculty_id}' is scored more than once.")
        seen.add(faculty_id)
        if score < 0:
            raise ValueError("Scores cannot be negative.")

    known = {faculty.id for faculty in crud.get_faculties(db)}
    missing = sorted(seen - known)
    if missing:
        raise LookupError(f"Faculty '{missing[0]}' not found.")


def save_scores_for(
    db: Session,
    match_id: int,
    scores: Iterable[tuple[str, float]],
) -> list[medals.RankedScore]:
    match = crud.get_match_or_raise(db, match_id)
    competition = crud.get_competition_or_raise(db, match.competition_id)
    if competition.kind != "art":
        raise ValueError("Judged scores can only be saved for arts competitions.")

    submitted = [(faculty_id, float(score)) for faculty_id, score in scores]
    _validate_submission(db, submitted)

    deleted = crud.delete_arts_scores(db, match_id)
    crud.insert_arts_scores(db, match_id, submitted)
    db.commit()
    db.expire(match, ["arts_scores"])

    logger.info(
        "Saved %d arts score(s) for match %s (replaced %d)",
        len(submitted),
        match_id,
        deleted,
    )

    # A completed final must reflect the new podium.
    if match.status == "completed" and medals.is_arts_final(competition, match.round):
        events.publish(db, events.MatchCompleted(match_id))

    return scores_for(db, match_id)


def build_table_standings(db: Session, competition_id: str) -> list[schemas.TableStandingRow]:
    competition = crud.get_competition_or_raise(db, competition_id)
    if competition.kind != "art":
        raise ValueError("Table standings are only kept for arts competitions.")

    totals: dict[str, dict[str, float]] = {}
    for row in crud.fetch_competition_arts_scores(db, competition_id):
        entry = totals.setdefault(row.faculty_id, {"points": 0.0, "performances": 0})
        entry["points"] += row.score
        entry["performances"] += 1

    faculties = {faculty.id: faculty for faculty in crud.get_faculties(db)}
    ranked = sorted(totals.items(), key=lambda item: (-item[1]["points"], item[0]))

    return [
        schemas.TableStandingRow(
            rank=rank,
            faculty_id=faculty_id,
            faculty=faculties[faculty_id].name if faculty_id in faculties else faculty_id,
            short_name=faculties[faculty_id].short_name if faculty_id in faculties else faculty_id,
            points=entry["points"],
            performances=int(entry["performances"]),
        )
        for rank, (faculty_id, entry) in enumerate(ranked, start=1)
    ]
