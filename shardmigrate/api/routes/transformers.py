"""Transformer listing endpoints."""

from fastapi import APIRouter

from ...transformers.registry import default_registry
from ..models import TransformerInfo, TransformerListResponse

router = APIRouter()


@router.get("", response_model=TransformerListResponse)
async def list_transformers():
    """List the key families that can be migrated."""
    transformers = [
        TransformerInfo(name=name, pattern=pattern)
        for name, pattern in default_registry().describe().items()
    ]
    return TransformerListResponse(transformers=transformers)
