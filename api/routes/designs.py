"""Saved deck design routes with undo/redo history."""

import logging
import uuid
from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException
from pydantic import BaseModel, field_validator

from core.deck_gen import RebuildController
from core.deck_spec import DeckSpec, SpecHistory

from .decks import generator, parse_spec

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory design storage (replace with database in production)
DESIGNS: dict = {}


class DesignCreate(BaseModel):
    """Design creation request."""

    name: str
    spec: Optional[dict] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        """Validate that name is not empty or whitespace-only."""
        if not v or not v.strip():
            raise ValueError("Design name cannot be empty or whitespace-only")
        v = v.strip()
        if len(v) > 255:
            v = v[:255]
        return v


def _new_design(name: str, spec: DeckSpec) -> dict:
    now = datetime.utcnow().isoformat()
    history = SpecHistory()
    history.push(spec)
    controller = RebuildController(generator)
    controller.rebuild(spec)
    design = {
        "id": str(uuid.uuid4())[:8],
        "name": name,
        "created_at": now,
        "updated_at": now,
        "history": history,
        "controller": controller,
    }
    DESIGNS[design["id"]] = design
    return design


def _get_design(design_id: str) -> dict:
    if design_id not in DESIGNS:
        raise HTTPException(status_code=404, detail="Design not found")
    return DESIGNS[design_id]


def _design_response(design: dict) -> dict:
    history: SpecHistory = design["history"]
    controller: RebuildController = design["controller"]
    current = controller.current
    return {
        "id": design["id"],
        "name": design["name"],
        "created_at": design["created_at"],
        "updated_at": design["updated_at"],
        "spec": history.current().to_dict(),
        "can_undo": history.can_undo,
        "can_redo": history.can_redo,
        "last_error": controller.last_error,
        "build": current.to_dict(include_primitives=False) if current else None,
    }


def _apply(design: dict, spec: DeckSpec) -> dict:
    controller: RebuildController = design["controller"]
    controller.rebuild(spec)
    design["updated_at"] = datetime.utcnow().isoformat()
    return _design_response(design)


@router.post("/")
async def create_design(request: DesignCreate):
    """Create a new design, optionally from a spec document."""
    spec = parse_spec(request.spec) if request.spec is not None else DeckSpec()
    design = _new_design(request.name, spec)
    logger.info(f"Created design: {design['id']}")
    return _design_response(design)


@router.get("/")
async def list_designs():
    """List all designs."""
    return [_design_response(design) for design in DESIGNS.values()]


@router.get("/{design_id}")
async def get_design(design_id: str):
    """Get design by ID."""
    return _design_response(_get_design(design_id))


@router.delete("/{design_id}")
async def delete_design(design_id: str):
    """Delete a design."""
    design = _get_design(design_id)
    design["controller"].cancel()
    del DESIGNS[design_id]
    logger.info(f"Deleted design: {design_id}")
    return {"status": "deleted", "id": design_id}


@router.put("/{design_id}/spec")
async def update_spec(design_id: str, document: Any = Body(...)):
    """Replace the design's spec, recording it in the undo history."""
    design = _get_design(design_id)
    spec = parse_spec(document)
    design["history"].push(spec)
    return _apply(design, spec)


@router.post("/{design_id}/undo")
async def undo(design_id: str):
    """Step back one spec edit."""
    design = _get_design(design_id)
    spec = design["history"].undo()
    if spec is None:
        raise HTTPException(status_code=400, detail="Nothing to undo")
    return _apply(design, spec)


@router.post("/{design_id}/redo")
async def redo(design_id: str):
    """Re-apply an undone spec edit."""
    design = _get_design(design_id)
    spec = design["history"].redo()
    if spec is None:
        raise HTTPException(status_code=400, detail="Nothing to redo")
    return _apply(design, spec)


@router.get("/{design_id}/export")
async def export_design(design_id: str):
    """Export the design's current spec as a portable document."""
    design = _get_design(design_id)
    return {
        "name": design["name"],
        "exported_at": datetime.utcnow().isoformat(),
        "spec": design["history"].current().to_dict(),
    }


@router.post("/import")
async def import_design(document: Any = Body(...), lenient: bool = False):
    """Create a design from an exported document or a bare spec document.

    With ``lenient`` set, invalid fields fall back to their defaults instead
    of rejecting the import.
    """
    if isinstance(document, dict) and isinstance(document.get("spec"), dict):
        name = str(document.get("name") or "Imported design")
        spec_document = document["spec"]
    else:
        name = "Imported design"
        spec_document = document

    spec = parse_spec(spec_document, lenient=lenient)
    design = _new_design(name, spec)
    logger.info(f"Imported design: {design['id']}")
    return _design_response(design)
