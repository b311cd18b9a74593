"""
app/api/routers/conservador_router.py

Read-only listing of registry offices, including those created by imports.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.repositories.conservador_repository import ConservadorRepository
from app.schemas.conservador import ConservadorResponse
from db.session import get_db

router = APIRouter(prefix="/conservadores", tags=["conservadores"])


@router.get("", response_model=list[ConservadorResponse])
def list_conservadores(db: Session = Depends(get_db)) -> list[ConservadorResponse]:
    """
    List offices ordered by region, commune and name.
    """

    return [
        ConservadorResponse.model_validate(conservador)
        for conservador in ConservadorRepository(db).list_all()
    ]
