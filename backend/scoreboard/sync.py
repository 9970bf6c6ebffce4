import logging
import threading

from sqlalchemy.orm import Session

from . import awards, crud, schemas, standings
from .errors import StoreError, SyncAbortedError, SyncInProgressError

logger = logging.getLogger(__name__)

_sync_lock = threading.Lock()


def is_running() -> bool:
    return _sync_lock.locked()


def _rebuild(db: Session) -> schemas.SyncReport:
    standings.reset_tally(db)

    try:
        matches = crud.fetch_completed_matches(db)
    except StoreError as exc:
        logger.error("Medal tally sync aborted after reset; standings are empty")
        raise SyncAbortedError(
            "Medal tally was reset but completed matches could not be loaded. Run the sync again."
        ) from exc

    awarded = 0
    skipped = 0
    granted = 0
    for match in matches:
        assignments = awards.evaluate_match(db, match)
        count = standings.apply_assignments(db, match.id, assignments)
        if not count:
            skipped += 1
            continue
        granted += count
        awarded += 1

    logger.info(
        "Medal tally synced: %d match(es) considered, %d awarded, %d skipped, %d medal(s)",
        len(matches),
        awarded,
        skipped,
        granted,
    )
    return schemas.SyncReport(
        matches_considered=len(matches),
        matches_awarded=awarded,
        matches_skipped=skipped,
        awards_granted=granted,
    )


def sync(db: Session) -> schemas.SyncReport:
    if not _sync_lock.acquire(blocking=False):
        raise SyncInProgressError("A medal tally sync is already running.")

    try:
        logger.info("Syncing medal tally from completed matches")
        return _rebuild(db)
    finally:
        _sync_lock.release()


def reset(db: Session) -> schemas.TallyResetResponse:
    if not _sync_lock.acquire(blocking=False):
        raise SyncInProgressError("A medal tally sync is already running.")

    try:
        return standings.reset_tally(db)
    finally:
        _sync_lock.release()
