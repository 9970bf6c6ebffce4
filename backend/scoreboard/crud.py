import logging
from collections.abc import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from . import events, medals, models, schemas
from .errors import store_errors

logger = logging.getLogger(__name__)


def _normalize_text(value: str | None) -> str | None:
    if value is None:
        return None
    clean = " ".join(value.split())
    return clean or None


def _match_sort_key(match: models.Match) -> tuple[str, int, int]:
    date = match.date or "9999-99-99"
    if match.time and ":" in match.time:
        hour_str, minute_str = match.time.split(":", maxsplit=1)
        try:
            time_as_int = int(hour_str) * 100 + int(minute_str)
        except ValueError:
            time_as_int = 9999
    else:
        time_as_int = 9999

    return (date, time_as_int, match.id)


def _match_query(db: Session):
    return db.query(models.Match).options(
        selectinload(models.Match.competition),
        selectinload(models.Match.faculty1),
        selectinload(models.Match.faculty2),
    )


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


def get_faculties(db: Session) -> list[models.Faculty]:
    with store_errors(db, "load faculties"):
        return db.query(models.Faculty).order_by(models.Faculty.name.asc()).all()


def get_competitions(db: Session) -> list[models.Competition]:
    with store_errors(db, "load competitions"):
        return (
            db.query(models.Competition)
            .order_by(models.Competition.kind.desc(), models.Competition.name.asc())
            .all()
        )


def fetch_competition(db: Session, competition_id: str) -> models.Competition | None:
    with store_errors(db, "load competition"):
        return db.get(models.Competition, competition_id)


def get_competition_or_raise(db: Session, competition_id: str) -> models.Competition:
    competition = fetch_competition(db, competition_id)
    if not competition:
        raise LookupError("Competition not found.")
    return competition


def _get_faculty_or_raise(db: Session, faculty_id: str) -> models.Faculty:
    with store_errors(db, "load faculty"):
        faculty = db.get(models.Faculty, faculty_id)
    if not faculty:
        raise LookupError(f"Faculty '{faculty_id}' not found.")
    return faculty


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------


def fetch_match(db: Session, match_id: int) -> models.Match | None:
    with store_errors(db, "load match"):
        return _match_query(db).filter(models.Match.id == match_id).first()


def get_match_or_raise(db: Session, match_id: int) -> models.Match:
    match = fetch_match(db, match_id)
    if not match:
        raise LookupError("Match not found.")
    return match


def fetch_completed_matches(db: Session) -> list[models.Match]:
    with store_errors(db, "load completed matches"):
        return (
            _match_query(db)
            .filter(models.Match.status == "completed", models.Match.round.is_not(None))
            .order_by(models.Match.id.asc())
            .all()
        )


def list_matches(
    db: Session,
    status: schemas.MatchStatus | None = None,
    competition_id: str | None = None,
) -> list[models.Match]:
    query = _match_query(db)
    if status:
        query = query.filter(models.Match.status == status)
    if competition_id:
        query = query.filter(models.Match.competition_id == competition_id)

    with store_errors(db, "load matches"):
        matches = query.all()

    matches.sort(key=_match_sort_key)
    return matches


def list_live_matches(db: Session) -> list[models.Match]:
    return list_matches(db, status="live")


def _validate_participants(
    db: Session,
    competition: models.Competition,
    faculty1_id: str,
    faculty2_id: str,
) -> None:
    _get_faculty_or_raise(db, faculty1_id)
    _get_faculty_or_raise(db, faculty2_id)

    # Arts matches may repeat the placeholder faculty on both sides.
    if competition.kind == "sport" and faculty1_id == faculty2_id:
        raise ValueError("A sport match needs two different faculties.")


def fetch_podium_holder(
    db: Session,
    competition_id: str,
    slot: str,
    exclude_match_id: int | None = None,
) -> models.Match | None:
    query = db.query(models.Match).filter(
        models.Match.competition_id == competition_id,
        models.Match.status == "completed",
        models.Match.round.in_(medals.podium_slot_rounds(slot)),
    )
    if exclude_match_id is not None:
        query = query.filter(models.Match.id != exclude_match_id)

    with store_errors(db, "load podium matches"):
        return query.order_by(models.Match.id.asc()).first()


def _assert_completable(db: Session, competition: models.Competition, match: models.Match) -> None:
    if match.status != "completed":
        return
    if medals.is_arts_final(competition, match.round):
        return
    if competition.format != "elimination" or match.round not in medals.MEDAL_ROUNDS:
        return
    if match.score1 == match.score2:
        raise ValueError(f"A {match.round} match cannot be completed on a draw; record the deciding score.")

    slot = medals.podium_slot(match.round)
    if not medals.has_single_podium(competition) or slot is None:
        return
    holder = fetch_podium_holder(db, competition.id, slot, exclude_match_id=match.id)
    if holder is not None:
        prize = "gold and silver" if slot == "final" else "bronze"
        raise ValueError(
            f"{competition.name} already awarded its {prize} in match {holder.id} ({holder.round})."
        )


def _publish_status_change(db: Session, match: models.Match, previous_status: str | None) -> None:
    if match.status == "completed":
        events.publish(db, events.MatchCompleted(match.id))
    elif previous_status == "completed":
        events.publish(db, events.MatchReopened(match.id, match.status))


def create_match(db: Session, payload: schemas.MatchCreate) -> models.Match:
    competition = get_competition_or_raise(db, payload.competition_id)
    _validate_participants(db, competition, payload.faculty1_id, payload.faculty2_id)

    match = models.Match(
        competition_id=competition.id,
        faculty1_id=payload.faculty1_id,
        faculty2_id=payload.faculty2_id,
        score1=payload.score1,
        score2=payload.score2,
        status=payload.status,
        date=_normalize_text(payload.date),
        time=_normalize_text(payload.time),
        location=_normalize_text(payload.location),
        round=medals.normalize_round(payload.round),
        notes=payload.notes,
    )
    _assert_completable(db, competition, match)

    with store_errors(db, "create match"):
        db.add(match)
        db.commit()

    logger.info("Created match %s (%s, %s)", match.id, competition.id, match.round or "no round")
    _publish_status_change(db, match, None)
    return get_match_or_raise(db, match.id)


REQUIRED_MATCH_FIELDS = {"competition_id", "faculty1_id", "faculty2_id", "score1", "score2", "status"}
TEXT_MATCH_FIELDS = {"date", "time", "location"}


def update_match(db: Session, match_id: int, payload: schemas.MatchUpdate) -> models.Match:
    match = get_match_or_raise(db, match_id)
    previous_status = match.status

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field in REQUIRED_MATCH_FIELDS:
            continue
        if field in TEXT_MATCH_FIELDS:
            value = _normalize_text(value)
        elif field == "round":
            value = medals.normalize_round(value)
        setattr(match, field, value)

    try:
        competition = get_competition_or_raise(db, match.competition_id)
        _validate_participants(db, competition, match.faculty1_id, match.faculty2_id)
        _assert_completable(db, competition, match)
    except (LookupError, ValueError):
        db.rollback()
        raise

    with store_errors(db, "update match"):
        db.commit()
    db.expire(match)

    logger.info("Updated match %s: %s", match_id, sorted(changes))
    _publish_status_change(db, match, previous_status)
    return get_match_or_raise(db, match_id)


def update_match_score(
    db: Session,
    match_id: int,
    score1: int,
    score2: int,
    status: schemas.MatchStatus = "completed",
) -> models.Match:
    if score1 < 0 or score2 < 0:
        raise ValueError("Scores cannot be negative.")

    payload = schemas.MatchUpdate(score1=score1, score2=score2, status=status)
    return update_match(db, match_id, payload)


def delete_match(db: Session, match_id: int) -> None:
    match = get_match_or_raise(db, match_id)

    with store_errors(db, "delete match"):
        db.delete(match)
        db.commit()

    logger.info("Deleted match %s", match_id)
    events.publish(db, events.MatchDeleted(match_id))


# ---------------------------------------------------------------------------
# Arts performance scores
# ---------------------------------------------------------------------------


def fetch_arts_scores(db: Session, match_id: int) -> list[models.ArtsPerformanceScore]:
    with store_errors(db, "load arts scores"):
        return (
            db.query(models.ArtsPerformanceScore)
            .options(selectinload(models.ArtsPerformanceScore.faculty))
            .filter(models.ArtsPerformanceScore.match_id == match_id)
            .order_by(models.ArtsPerformanceScore.id.asc())
            .all()
        )


def fetch_competition_arts_scores(db: Session, competition_id: str) -> list[models.ArtsPerformanceScore]:
    with store_errors(db, "load competition arts scores"):
        return (
            db.query(models.ArtsPerformanceScore)
            .join(models.Match, models.Match.id == models.ArtsPerformanceScore.match_id)
            .filter(
                models.Match.competition_id == competition_id,
                models.Match.status == "completed",
            )
            .order_by(models.ArtsPerformanceScore.id.asc())
            .all()
        )


def delete_arts_scores(db: Session, match_id: int) -> int:
    with store_errors(db, "delete arts scores"):
        deleted = (
            db.query(models.ArtsPerformanceScore)
            .filter(models.ArtsPerformanceScore.match_id == match_id)
            .delete(synchronize_session="fetch")
        )
    return deleted


def insert_arts_scores(
    db: Session,
    match_id: int,
    rows: Iterable[tuple[str, float]],
) -> list[models.ArtsPerformanceScore]:
    scores = [
        models.ArtsPerformanceScore(match_id=match_id, faculty_id=faculty_id, score=float(score))
        for faculty_id, score in rows
    ]
    with store_errors(db, "insert arts scores"):
        db.add_all(scores)
        db.flush()
    return scores


# ---------------------------------------------------------------------------
# Medal ledger and faculty standings
# ---------------------------------------------------------------------------


def insert_medal_award(
    db: Session,
    match_id: int,
    assignment: medals.MedalAssignment,
    podium_slot: str | None = None,
) -> models.MedalAward | None:
    taken = (models.MedalAward.match_id == match_id) & (models.MedalAward.tier == assignment.tier)
    if podium_slot is not None:
        taken = taken | (models.MedalAward.podium_slot == podium_slot)

    with store_errors(db, "record medal award"):
        existing = db.query(models.MedalAward).filter(taken).first()
        if existing:
            return None

        award = models.MedalAward(
            match_id=match_id,
            faculty_id=assignment.faculty_id,
            competition_id=assignment.competition_id,
            tier=assignment.tier,
            podium_slot=podium_slot,
        )
        db.add(award)
        db.flush()
    return award


def fetch_medal_awards(db: Session, match_id: int | None = None) -> list[models.MedalAward]:
    query = db.query(models.MedalAward)
    if match_id is not None:
        query = query.filter(models.MedalAward.match_id == match_id)

    with store_errors(db, "load medal awards"):
        return query.order_by(models.MedalAward.id.asc()).all()


def delete_medal_awards_for_match(db: Session, match_id: int) -> list[tuple[str, str]]:
    awards = fetch_medal_awards(db, match_id)
    affected = sorted({(award.faculty_id, award.competition_id) for award in awards})

    with store_errors(db, "retract medal awards"):
        for award in awards:
            db.delete(award)
        db.flush()
    return affected


def delete_all_medal_awards(db: Session) -> int:
    with store_errors(db, "clear medal awards"):
        return db.query(models.MedalAward).delete(synchronize_session="fetch")


def count_medals(db: Session, faculty_id: str, competition_id: str) -> dict[str, int]:
    with store_errors(db, "count medals"):
        rows = (
            db.query(models.MedalAward.tier, func.count(models.MedalAward.id))
            .filter(
                models.MedalAward.faculty_id == faculty_id,
                models.MedalAward.competition_id == competition_id,
            )
            .group_by(models.MedalAward.tier)
            .all()
        )

    counts = {tier: 0 for tier in medals.PODIUM_TIERS}
    for tier, count in rows:
        counts[tier] = int(count)
    return counts


def fetch_faculty_standing(db: Session, faculty_id: str, competition_id: str) -> models.FacultyStanding | None:
    with store_errors(db, "load faculty standing"):
        return (
            db.query(models.FacultyStanding)
            .filter(
                models.FacultyStanding.faculty_id == faculty_id,
                models.FacultyStanding.competition_id == competition_id,
            )
            .first()
        )


def upsert_faculty_standing(
    db: Session,
    faculty_id: str,
    competition_id: str,
    gold: int,
    silver: int,
    bronze: int,
) -> models.FacultyStanding:
    standing = fetch_faculty_standing(db, faculty_id, competition_id)
    if standing is None:
        standing = models.FacultyStanding(faculty_id=faculty_id, competition_id=competition_id)
        db.add(standing)

    standing.gold = gold
    standing.silver = silver
    standing.bronze = bronze
    standing.total_points = medals.compute_total_points(gold, silver, bronze)

    with store_errors(db, "save faculty standing"):
        db.flush()
    return standing


def delete_faculty_standing(db: Session, faculty_id: str, competition_id: str) -> bool:
    standing = fetch_faculty_standing(db, faculty_id, competition_id)
    if standing is None:
        return False

    with store_errors(db, "delete faculty standing"):
        db.delete(standing)
        db.flush()
    return True


def delete_all_faculty_standings(db: Session) -> int:
    with store_errors(db, "clear faculty standings"):
        return db.query(models.FacultyStanding).delete(synchronize_session="fetch")


def fetch_faculty_standings(db: Session) -> list[models.FacultyStanding]:
    with store_errors(db, "load faculty standings"):
        return (
            db.query(models.FacultyStanding)
            .options(
                selectinload(models.FacultyStanding.faculty),
                selectinload(models.FacultyStanding.competition),
            )
            .order_by(
                models.FacultyStanding.total_points.desc(),
                models.FacultyStanding.faculty_id.asc(),
                models.FacultyStanding.competition_id.asc(),
            )
            .all()
        )
