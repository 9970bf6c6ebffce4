from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from .. import arts, crud, schemas, serializers
from ..database import get_db

router = APIRouter(tags=["matches"])


@router.get("/", response_model=list[schemas.MatchRead])
def list_matches(
    status_filter: schemas.MatchStatus | None = Query(default=None, alias="status"),
    competition_id: str | None = Query(default=None, min_length=1, max_length=64),
    db: Session = Depends(get_db),
) -> list[schemas.MatchRead]:
    matches = crud.list_matches(db, status=status_filter, competition_id=competition_id)
    return [serializers.match_to_read(match) for match in matches]


@router.get("/live", response_model=list[schemas.MatchRead])
def list_live_matches(db: Session = Depends(get_db)) -> list[schemas.MatchRead]:
    return [serializers.match_to_read(match) for match in crud.list_live_matches(db)]


@router.post("/", response_model=schemas.MatchRead, status_code=status.HTTP_201_CREATED)
def create_match(payload: schemas.MatchCreate, db: Session = Depends(get_db)) -> schemas.MatchRead:
    try:
        match = crud.create_match(db, payload)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return serializers.match_to_read(match)


@router.get("/{match_id}", response_model=schemas.MatchRead)
def get_match(match_id: int, db: Session = Depends(get_db)) -> schemas.MatchRead:
    try:
        match = crud.get_match_or_raise(db, match_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return serializers.match_to_read(match)


@router.patch("/{match_id}", response_model=schemas.MatchRead)
def update_match(
    match_id: int,
    payload: schemas.MatchUpdate,
    db: Session = Depends(get_db),
) -> schemas.MatchRead:
    try:
        match = crud.update_match(db, match_id, payload)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return serializers.match_to_read(match)


@router.patch("/{match_id}/score", response_model=schemas.MatchRead)
def update_score(
    match_id: int,
    payload: schemas.ScoreUpdate,
    db: Session = Depends(get_db),
) -> schemas.MatchRead:
    try:
        match = crud.update_match_score(db, match_id, payload.score1, payload.score2, payload.status)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return serializers.match_to_read(match)


@router.delete("/{match_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_match(match_id: int, db: Session = Depends(get_db)) -> Response:
    try:
        crud.delete_match(db, match_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{match_id}/arts-scores", response_model=list[schemas.RankedScoreRead])
def get_arts_scores(match_id: int, db: Session = Depends(get_db)) -> list[schemas.RankedScoreRead]:
    try:
        return arts.ranked_scores_read(db, match_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.put("/{match_id}/arts-scores", response_model=list[schemas.RankedScoreRead])
def save_arts_scores(
    match_id: int,
    payload: schemas.ArtsScoresUpdate,
    db: Session = Depends(get_db),
) -> list[schemas.RankedScoreRead]:
    try:
        arts.save_scores_for(db, match_id, serializers.arts_entries_to_pairs(payload.scores))
        return arts.ranked_scores_read(db, match_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/{match_id}/podium", response_model=schemas.PodiumRead)
def get_podium(match_id: int, db: Session = Depends(get_db)) -> schemas.PodiumRead:
    try:
        return arts.podium(db, match_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
