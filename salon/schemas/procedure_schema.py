"""Procedure catalog models."""

from typing import Optional

from pydantic import BaseModel, Field


class Procedure(BaseModel):
    """A bookable beauty procedure."""
    id: str
    name: str
    description: str = ""
    price: float = Field(ge=0)
    duration_minutes: int = Field(gt=0)
    image_url: str = ""


class ProcedureUpdate(BaseModel):
    """Partial procedure edit. Unset fields are left untouched."""
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    image_url: Optional[str] = None
