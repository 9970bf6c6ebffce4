import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from . import crud, medals, models, schemas

logger = logging.getLogger(__name__)


def _refold_standing(db: Session, faculty_id: str, competition_id: str) -> models.FacultyStanding | None:
    counts = crud.count_medals(db, faculty_id, competition_id)
    if not any(counts.values()):
        crud.delete_faculty_standing(db, faculty_id, competition_id)
        return None

    return crud.upsert_faculty_standing(
        db,
        faculty_id,
        competition_id,
        gold=counts["gold"],
        silver=counts["silver"],
        bronze=counts["bronze"],
    )


def _podium_slot(db: Session, assignment: medals.MedalAssignment) -> str | None:
    competition = crud.fetch_competition(db, assignment.competition_id)
    if competition is None or not medals.has_single_podium(competition):
        return None
    return f"{competition.id}:{assignment.tier}"


def apply_medal(db: Session, match_id: int, assignment: medals.MedalAssignment) -> bool:
    """Record one medal from ``match_id`` and refresh the faculty's standing.

    Returns ``False`` when the award is already taken: the ledger holds one
    award per (match, tier), and a sport elimination competition grants each
    tier only once across all of its matches.
    """
    award = crud.insert_medal_award(db, match_id, assignment, _podium_slot(db, assignment))
    if award is None:
        logger.info(
            "Ignoring %s in %s for match %s; already awarded",
            assignment.tier,
            assignment.competition_id,
            match_id,
        )
        return False

    _refold_standing(db, assignment.faculty_id, assignment.competition_id)
    db.commit()

    logger.info(
        "Awarded %s in %s to %s (match %s)",
        assignment.tier,
        assignment.competition_id,
        assignment.faculty_id,
        match_id,
    )
    return True


def apply_assignments(db: Session, match_id: int, assignments: Iterable[medals.MedalAssignment]) -> int:
    return sum(1 for assignment in assignments if apply_medal(db, match_id, assignment))


def retract_match(db: Session, match_id: int) -> int:
    awards = crud.fetch_medal_awards(db, match_id)
    if not awards:
        return 0

    affected = crud.delete_medal_awards_for_match(db, match_id)
    for faculty_id, competition_id in affected:
        _refold_standing(db, faculty_id, competition_id)
    db.commit()

    logger.info("Retracted %d medal(s) granted by match %s", len(awards), match_id)
    return len(awards)


def reset_tally(db: Session) -> schemas.TallyResetResponse:
    standings_deleted = crud.delete_all_faculty_standings(db)
    awards_deleted = crud.delete_all_medal_awards(db)
    db.commit()

    logger.info("Medal tally reset: %d standing row(s), %d award(s) removed", standings_deleted, awards_deleted)
    return schemas.TallyResetResponse(standings_deleted=standings_deleted, awards_deleted=awards_deleted)


# ---------------------------------------------------------------------------
# Display reads
# ---------------------------------------------------------------------------


def list_faculty_standings(db: Session) -> list[schemas.FacultyStandingRead]:
    return [
        schemas.FacultyStandingRead(
            faculty_id=row.faculty_id,
            faculty=row.faculty.name if row.faculty else row.faculty_id,
            short_name=row.faculty.short_name if row.faculty else row.faculty_id,
            competition_id=row.competition_id,
            competition=row.competition.name if row.competition else row.competition_id,
            gold=row.gold,
            silver=row.silver,
            bronze=row.bronze,
            total_points=row.total_points,
        )
        for row in crud.fetch_faculty_standings(db)
    ]


def build_medal_tally(db: Session) -> list[schemas.MedalTallyRow]:
    faculties = crud.get_faculties(db)
    table: dict[str, dict[str, int]] = {
        faculty.id: {"gold": 0, "silver": 0, "bronze": 0, "points": 0} for faculty in faculties
    }

    for standing in crud.fetch_faculty_standings(db):
        totals = table.setdefault(standing.faculty_id, {"gold": 0, "silver": 0, "bronze": 0, "points": 0})
        totals["gold"] += standing.gold
        totals["silver"] += standing.silver
        totals["bronze"] += standing.bronze
        totals["points"] += standing.total_points

    by_id = {faculty.id: faculty for faculty in faculties}
    ranked = sorted(
        table.items(),
        key=lambda item: (
            -item[1]["points"],
            -item[1]["gold"],
            -item[1]["silver"],
            -item[1]["bronze"],
            by_id[item[0]].name if item[0] in by_id else item[0],
        ),
    )

    tally: list[schemas.MedalTallyRow] = []
    for rank, (faculty_id, totals) in enumerate(ranked, start=1):
        faculty = by_id.get(faculty_id)
        tally.append(
            schemas.MedalTallyRow(
                rank=rank,
                faculty_id=faculty_id,
                faculty_name=faculty.name if faculty else faculty_id,
                faculty_short_name=faculty.short_name if faculty else faculty_id,
                color=faculty.color if faculty else "gray",
                total_gold=totals["gold"],
                total_silver=totals["silver"],
                total_bronze=totals["bronze"],
                total_points=totals["points"],
            )
        )
    return tally
