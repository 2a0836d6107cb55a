# backend/app/routers/rokuyo.py
# Day types are seeded from outside; this router only stores and serves them.

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Rokuyo as DBRokuyo
from ..schemas.rokuyo import RokuyoBulkWrite, RokuyoRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rokuyo", tags=["rokuyo"])


@router.get("/", response_model=list[RokuyoRead])
def list_rokuyo(
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
):
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date is before start_date")

    return (
        db.query(DBRokuyo)
        .filter(
            DBRokuyo.date >= start_date.isoformat(),
            DBRokuyo.date <= end_date.isoformat(),
        )
        .order_by(DBRokuyo.date)
        .all()
    )


@router.get("/{target_date}", response_model=RokuyoRead)
def get_rokuyo(target_date: date, db: Session = Depends(get_db)):
    obj = db.get(DBRokuyo, target_date.isoformat())
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.put("/", status_code=status.HTTP_200_OK)
def upsert_rokuyo(
    data: RokuyoBulkWrite,
    db: Session = Depends(get_db),
):
    for row in data.rows:
        db.merge(DBRokuyo(
            date=row.date.isoformat(),
            rokuyo=row.rokuyo,
            is_tomobiki=int(row.is_tomobiki),
        ))
    db.commit()

    logger.info(f"Rokuyo upserted: {len(data.rows)} rows")
    return {"upserted": len(data.rows)}
