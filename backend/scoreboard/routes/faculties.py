from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db

router = APIRouter(tags=["reference"])


@router.get("/", response_model=list[schemas.FacultyRead])
def list_faculties(db: Session = Depends(get_db)) -> list[schemas.FacultyRead]:
    return crud.get_faculties(db)
