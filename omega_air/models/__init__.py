from .generation import GenerateRequest, GenerateResponse, ModeUpdate, ModelInfo, SystemStatus, Usage

__all__ = [
    "GenerateRequest",
    "GenerateResponse",
    "ModeUpdate",
    "ModelInfo",
    "SystemStatus",
    "Usage"
]
