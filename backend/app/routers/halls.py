# backend/app/routers/halls.py
# PATCH = ALLOWED, DELETE = soft-delete (is_active)

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Facilities as DBFacilities, Halls as DBHalls
from ..schemas.halls import (
    HallCreate,
    HallUpdate,
    HallRead,
)

router = APIRouter(prefix="/halls", tags=["halls"])


@router.get("/", response_model=list[HallRead])
def list_halls(facility_id: int | None = None, db: Session = Depends(get_db)):
    query = db.query(DBHalls).filter(DBHalls.is_active == 1)
    if facility_id is not None:
        query = query.filter(DBHalls.facility_id == facility_id)
    return query.order_by(DBHalls.display_order, DBHalls.id).all()


@router.get("/{id}", response_model=HallRead)
def get_hall(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBHalls, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=HallRead, status_code=status.HTTP_201_CREATED)
def create_hall(
    data: HallCreate,
    db: Session = Depends(get_db),
):
    if not db.get(DBFacilities, data.facility_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Facility {data.facility_id} not found",
        )

    obj = DBHalls(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}", response_model=HallRead)
def update_hall(
    id: int,
    data: HallUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBHalls, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_hall(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBHalls, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_active = 0
    db.commit()
