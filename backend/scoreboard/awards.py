import logging

from sqlalchemy.orm import Session

from . import arts, crud, events, medals, models, standings

logger = logging.getLogger(__name__)


def evaluate_match(db: Session, match: models.Match) -> list[medals.MedalAssignment]:
    competition = crud.fetch_competition(db, match.competition_id)

    arts_scores = None
    if competition is not None and medals.is_arts_final(competition, match.round):
        arts_scores = arts.scores_for(db, match.id)

    return medals.evaluate(match, competition, arts_scores)


@events.subscriber(events.MatchCompleted)
def award_completed_match(db: Session, event: events.MatchCompleted) -> int:
    match = crud.fetch_match(db, event.match_id)
    if match is None:
        logger.info("Match %s vanished before medals could be evaluated", event.match_id)
        return 0

    assignments = evaluate_match(db, match)
    # Re-completing a match replaces whatever it granted before.
    standings.retract_match(db, match.id)
    if not assignments:
        return 0
    return standings.apply_assignments(db, match.id, assignments)


@events.subscriber(events.MatchReopened)
def retract_reopened_match(db: Session, event: events.MatchReopened) -> int:
    return standings.retract_match(db, event.match_id)


@events.subscriber(events.MatchDeleted)
def retract_deleted_match(db: Session, event: events.MatchDeleted) -> int:
    return standings.retract_match(db, event.match_id)
