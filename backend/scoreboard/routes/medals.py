from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import schemas, standings, sync
from ..database import get_db
from ..errors import SyncAbortedError, SyncInProgressError

router = APIRouter(tags=["medals"])


@router.get("/tally", response_model=list[schemas.MedalTallyRow])
def medal_tally(db: Session = Depends(get_db)) -> list[schemas.MedalTallyRow]:
    return standings.build_medal_tally(db)


@router.get("/standings", response_model=list[schemas.FacultyStandingRead])
def faculty_standings(db: Session = Depends(get_db)) -> list[schemas.FacultyStandingRead]:
    return standings.list_faculty_standings(db)


@router.get("/sync")
def sync_status() -> dict[str, bool]:
    return {"running": sync.is_running()}


@router.post("/sync", response_model=schemas.SyncReport)
def sync_medal_tally(db: Session = Depends(get_db)) -> schemas.SyncReport:
    try:
        return sync.sync(db)
    except SyncInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except SyncAbortedError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


@router.delete("/", response_model=schemas.TallyResetResponse)
def reset_medal_tally(db: Session = Depends(get_db)) -> schemas.TallyResetResponse:
    try:
        return sync.reset(db)
    except SyncInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
