from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.candidatura import Candidatura
from app.schemas.candidaturas import CandidaturaRead

router = APIRouter()
_LOG = logging.getLogger("app.candidaturas")


def _row_to_dict(row: Candidatura) -> dict[str, Any]:
    return {column.name: getattr(row, column.key) for column in Candidatura.__table__.columns}


@router.get("", response_model=list[CandidaturaRead])
def list_candidaturas(db: Session = Depends(get_db)):
    try:
        rows = db.query(Candidatura).order_by(Candidatura.id.desc()).all()
    except SQLAlchemyError as exc:
        _LOG.exception("failed to list candidaturas")
        return JSONResponse({"error": str(exc)}, status_code=500)
    return [_row_to_dict(row) for row in rows]
