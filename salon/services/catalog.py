"""Procedure catalog with prices, durations, and descriptions."""

import logging
import uuid
from typing import Optional

from salon.errors import RecordNotFound
from salon.schemas.procedure_schema import Procedure, ProcedureUpdate
from salon.store.base import BookingStore

logger = logging.getLogger(__name__)

DEFAULT_PROCEDURES: list[dict] = [
    {
        "name": "Volume Brasileiro",
        "description": "Técnica que mescla fios finos para um volume natural e marcante.",
        "price": 100,
        "duration_minutes": 120,
    },
    {
        "name": "Volume Express",
        "description": "Volume rápido para um look mais cheio em menos tempo.",
        "price": 80,
        "duration_minutes": 90,
    },
    {
        "name": "Volume Glamour",
        "description": "Cílios densos e definidos para um olhar glamouroso.",
        "price": 120,
        "duration_minutes": 150,
    },
    {
        "name": "Volume Luxo",
        "description": "Máximo de volume e definição para um efeito de luxo.",
        "price": 150,
        "duration_minutes": 180,
    },
    {
        "name": "Manutenção Volume Brasileiro",
        "description": "Manutenção da extensão de volume brasileiro.",
        "price": 70,
        "duration_minutes": 90,
    },
    {
        "name": "Manutenção Volume Glamour",
        "description": "Manutenção da extensão de volume glamour.",
        "price": 80,
        "duration_minutes": 100,
    },
    {
        "name": "Manutenção Volume Luxo",
        "description": "Manutenção da extensão de volume de luxo.",
        "price": 100,
        "duration_minutes": 120,
    },
    {
        "name": "Remoção",
        "description": "Remoção segura das extensões de cílios.",
        "price": 30,
        "duration_minutes": 30,
    },
    {
        "name": "Design de Sobrancelha Simples",
        "description": "Modelagem e alinhamento das sobrancelhas.",
        "price": 25,
        "duration_minutes": 30,
    },
    {
        "name": "Design de Sobrancelha com Henna",
        "description": "Design com aplicação de henna para preenchimento e cor.",
        "price": 35,
        "duration_minutes": 45,
    },
]


class CatalogError(ValueError):
    """Raised when a catalog operation has nothing to do or is malformed."""


def _new_procedure_id() -> str:
    return f"PR-{uuid.uuid4().hex[:6].upper()}"


async def list_procedures(store: BookingStore) -> list[Procedure]:
    """Return all procedures ordered by name."""
    return await store.read_procedures()


async def get_procedure(store: BookingStore, procedure_id: str) -> Procedure:
    """Get a procedure by id or raise RecordNotFound."""
    procedure = await store.read_procedure(procedure_id)
    if procedure is None:
        raise RecordNotFound("procedure", procedure_id)
    return procedure


async def add_procedure(
    store: BookingStore,
    name: str,
    price: float,
    duration_minutes: int,
    description: Optional[str] = None,
    image_url: Optional[str] = None,
) -> Procedure:
    """Create a procedure. Price and duration are validated by the model."""
    procedure = Procedure(
        id=_new_procedure_id(),
        name=name.strip() or "Sem nome",
        description=description or "",
        price=price,
        duration_minutes=duration_minutes,
        image_url=image_url or "",
    )
    await store.insert_procedure(procedure)
    logger.info("Procedure created: %s (%s, %d min)", procedure.id, procedure.name,
                procedure.duration_minutes)
    return procedure


async def update_procedure(
    store: BookingStore, procedure_id: str, changes: ProcedureUpdate
) -> Procedure:
    """Apply a partial edit. Existing bookings keep their own snapshot."""
    fields = changes.model_dump(exclude_none=True)
    if not fields:
        return await get_procedure(store, procedure_id)
    updated = await store.update_procedure(procedure_id, fields)
    logger.info("Procedure updated: %s %s", procedure_id, sorted(fields))
    return updated


async def delete_procedure(store: BookingStore, procedure_id: str) -> None:
    """Delete a procedure. Historical bookings are left untouched."""
    await store.delete_procedure(procedure_id)
    logger.info("Procedure deleted: %s", procedure_id)


async def restore_default_procedures(store: BookingStore) -> list[Procedure]:
    """Insert the default procedures whose names are not in the catalog yet.

    Raises:
        CatalogError: If every default procedure already exists.
    """
    existing = {p.name for p in await store.read_procedures()}
    missing = [d for d in DEFAULT_PROCEDURES if d["name"] not in existing]
    if not missing:
        raise CatalogError("Default procedures already exist; nothing to restore.")

    restored = []
    for data in missing:
        procedure = Procedure(id=_new_procedure_id(), **data)
        await store.insert_procedure(procedure)
        restored.append(procedure)
    logger.info("Restored %d default procedures", len(restored))
    return restored
