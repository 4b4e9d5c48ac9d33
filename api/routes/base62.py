"""Base62 codec routes."""

from fastapi import APIRouter, Path

from utils import base62

router = APIRouter(prefix="/api/v1/base62", tags=["base62"])


@router.get("/encode/{value}")
async def encode(value: int = Path(ge=0, le=base62.U64_MAX)):
    """Encode an unsigned 64-bit integer."""
    return {"value": value, "base62": base62.encode(value)}


@router.get("/decode/{text}")
async def decode(text: str):
    """Decode a base62 string."""
    return {"base62": text, "value": base62.decode(text)}
