from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from product_compare.core.llm_factory import get_current_provider_info, set_provider

router = APIRouter()


class ProviderRequest(BaseModel):
    provider: str
    model: Optional[str] = None


@router.get("/llm/provider")
async def get_provider():
    """Current extraction model and the available providers."""
    return get_current_provider_info()


@router.post("/llm/provider")
async def switch_provider(req: ProviderRequest):
    try:
        return set_provider(req.provider, req.model)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
