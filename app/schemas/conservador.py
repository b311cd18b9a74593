"""
app/schemas/conservador.py

Response schema for registry office listings.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel


class ConservadorResponse(BaseModel):
    id: uuid.UUID
    nombre: str
    direccion: str
    comuna: str
    region: str
    created_at: datetime

    model_config = {"from_attributes": True}
