"""Stateless deck build routes."""

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import Response

from core.deck_gen import CostRates, DeckGenerator, GeneratorConfig
from core.deck_spec import DeckSpec, MalformedImportError, load_spec_document

logger = logging.getLogger(__name__)

router = APIRouter()

generator = DeckGenerator(GeneratorConfig.from_env(), CostRates.from_env())


def parse_spec(document: Any, lenient: bool = False) -> DeckSpec:
    """Validate a request body as a spec document, mapping failures to 422."""
    try:
        return load_spec_document(document, lenient=lenient)
    except MalformedImportError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "fields": e.fields},
        )


@router.get("/defaults")
async def get_defaults():
    """Default spec document plus the configured unit prices."""
    return {
        "spec": DeckSpec().to_dict(),
        "rates": generator.rates.to_dict(),
        "stock_lengths": list(generator.config.stock_lengths),
    }


@router.post("/build")
async def build_deck(document: Any = Body(...), primitives: bool = True):
    """Build a deck and return its primitives, totals and cost."""
    spec = parse_spec(document)
    result = generator.generate(spec)
    return result.to_dict(include_primitives=primitives)


@router.post("/estimate")
async def estimate_deck(document: Any = Body(...)):
    """Material totals and cost only."""
    spec = parse_spec(document)
    result = generator.generate(spec)
    return {
        "ok": result.ok,
        "error": result.error,
        "tally": result.tally.to_dict(),
        "square_feet": round(result.square_feet, 2),
        "cost": result.cost.to_dict(),
    }


@router.post("/model")
async def deck_model(document: Any = Body(...)):
    """Build a deck and return it as a binary glTF model."""
    spec = parse_spec(document)
    result = generator.generate(spec)
    if not result.primitives:
        raise HTTPException(status_code=400, detail=result.error or "Deck has no geometry")

    try:
        glb = result.to_scene().to_glb_bytes(generator.furniture_placer.library)
    except Exception as e:
        logger.error(f"Failed to export deck model: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to export model: {str(e)}")

    headers = {"Content-Disposition": 'attachment; filename="deck.glb"'}
    if result.error:
        headers["X-Deck-Build-Error"] = result.error
    return Response(content=glb, media_type="model/gltf-binary", headers=headers)
