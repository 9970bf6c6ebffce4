from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import arts, crud, schemas, serializers
from ..database import get_db

router = APIRouter(tags=["reference"])


@router.get("/", response_model=list[schemas.CompetitionRead])
def list_competitions(db: Session = Depends(get_db)) -> list[schemas.CompetitionRead]:
    return crud.get_competitions(db)


@router.get("/{competition_id}/matches", response_model=list[schemas.MatchRead])
def list_competition_matches(competition_id: str, db: Session = Depends(get_db)) -> list[schemas.MatchRead]:
    try:
        crud.get_competition_or_raise(db, competition_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    matches = crud.list_matches(db, competition_id=competition_id)
    return [serializers.match_to_read(match) for match in matches]


@router.get("/{competition_id}/table", response_model=list[schemas.TableStandingRow])
def competition_table(competition_id: str, db: Session = Depends(get_db)) -> list[schemas.TableStandingRow]:
    try:
        return arts.build_table_standings(db, competition_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
