from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from ..models import GenerateRequest, GenerateResponse, ModeUpdate, ModelInfo, SystemStatus
from ..orchestration import ModelRouter

router = APIRouter(prefix="/api/v1/ai", tags=["ai"])


def get_model_router(request: Request) -> ModelRouter:
    return request.app.state.model_router


@router.post("/generate", response_model=GenerateResponse)
async def generate(body: GenerateRequest, model_router: ModelRouter = Depends(get_model_router)):
    """Route a generation request through the configured providers"""
    response = await model_router.route(body.to_generation_request())
    return GenerateResponse.from_response(response)


@router.get("/status", response_model=SystemStatus)
async def system_status(model_router: ModelRouter = Depends(get_model_router)):
    """Provider availability and routing mode"""
    return SystemStatus(
        **model_router.system_status(),
        provider_statuses=model_router.status.provider_statuses(),
    )


@router.get("/models", response_model=List[ModelInfo])
async def list_models(model_router: ModelRouter = Depends(get_model_router)):
    return [ModelInfo.from_meta(meta) for meta in model_router.get_model_metadata()]


@router.get("/models/{name}", response_model=ModelInfo)
async def get_model(name: str, model_router: ModelRouter = Depends(get_model_router)):
    meta = model_router.get_model_metadata(name)
    if not meta:
        raise HTTPException(status_code=404, detail="Model not found")
    return ModelInfo.from_meta(meta)


@router.get("/health")
async def health_check(model_router: ModelRouter = Depends(get_model_router)):
    """Health check endpoint"""
    available = model_router.status.is_any_provider_available()
    return {
        "healthy": available,
        "message": "AI router is operational" if available else "No AI providers available",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.put("/mode", response_model=SystemStatus)
async def set_mode(body: ModeUpdate, model_router: ModelRouter = Depends(get_model_router)):
    """Change the routing mode without a restart"""
    model_router.routing_config.set_mode(body.mode.value)
    return SystemStatus(
        **model_router.system_status(),
        provider_statuses=model_router.status.provider_statuses(),
    )
