"""FastAPI server for the StyleMorph try-on studio.

Exposes the session to a presentation layer:
- GET /api/session returns the full session snapshot
- every other route maps to one studio operation

Images travel as opaque handles (base64 data URLs or http(s) URLs).
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from stylemorph import TryOnStudio, __version__
from stylemorph.config import configure_logging, load_config
from stylemorph.errors import BusyError, NotFoundError, ServiceError, StudioError, ValidationError
from stylemorph.models import (
    Angle,
    ClothingAsset,
    ClothingDraft,
    GenerationRecord,
    ModelAsset,
    Pose,
    SessionSnapshot,
)
from stylemorph.services import ComfyUISynthesisService


# Studio is created on first request; the session lives as long as the process.
_studio: TryOnStudio | None = None


def get_studio() -> TryOnStudio:
    """Get or create the studio instance."""
    global _studio
    if _studio is None:
        config = load_config()  # Loads from .env automatically via pydantic-settings
        _studio = TryOnStudio(ComfyUISynthesisService(config), config=config)
    return _studio


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(load_config().log_level)
    yield
    if _studio is not None and hasattr(_studio.service, "close"):
        await _studio.service.close()


app = FastAPI(
    title="StyleMorph API",
    description="Virtual try-on studio: model library, clothing workshop and multi-angle synthesis",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    BusyError: 409,
    ServiceError: 502,
}


@app.exception_handler(StudioError)
async def studio_error_handler(request: Request, exc: StudioError):
    status = next(
        (code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)),
        500,
    )
    content = {"detail": str(exc)}
    if isinstance(exc, ServiceError):
        content["failed_angles"] = [Angle(a).value for a in exc.failed_angles]
    return JSONResponse(status_code=status, content=content)


class ImageRequest(BaseModel):
    """Request body carrying one image."""
    image: str = Field(min_length=1)  # Base64 data URL or http(s) URL


class ClothingUploadRequest(ImageRequest):
    display_name: str | None = None


class DraftUpdateRequest(BaseModel):
    text: str


class PoseRequest(BaseModel):
    pose: Pose


class StepRequest(BaseModel):
    step: int


class DraftSynthesisResponse(BaseModel):
    """``clothing`` is null when the draft was blank and nothing was generated."""
    clothing: ClothingAsset | None = None


class BatchResponse(BaseModel):
    records: list[GenerationRecord]
    failed_angles: list[Angle] = []


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "StyleMorph API", "version": __version__}


@app.get("/health")
async def health():
    """Detailed health check."""
    studio = get_studio()
    check = getattr(studio.service, "check_connection", None)
    comfyui_ok = await check() if check is not None else True

    return {
        "status": "ok" if comfyui_ok else "degraded",
        "comfyui": "connected" if comfyui_ok else "disconnected",
    }


@app.get("/api/session", response_model=SessionSnapshot)
async def read_session():
    return get_studio().snapshot()


# --- Models ---

@app.post("/api/models", response_model=ModelAsset)
async def upload_model(request: ImageRequest):
    return get_studio().upload_model(request.image)


@app.post("/api/models/{model_id}/select", response_model=ModelAsset)
async def select_model(model_id: str):
    return get_studio().select_model(model_id)


@app.delete("/api/models/{model_id}", status_code=204)
async def delete_model(model_id: str):
    get_studio().delete_model(model_id)


# --- Clothing ---

@app.post("/api/clothing", response_model=ClothingAsset)
async def upload_clothing(request: ClothingUploadRequest):
    return get_studio().upload_clothing(request.image, display_name=request.display_name)


@app.post("/api/clothing/{clothing_id}/select", response_model=ClothingAsset)
async def select_clothing(clothing_id: str):
    return get_studio().select_clothing(clothing_id)


@app.delete("/api/clothing/{clothing_id}", status_code=204)
async def delete_clothing(clothing_id: str):
    get_studio().delete_clothing(clothing_id)


# --- Drafts ---

@app.post("/api/drafts/analyze", response_model=list[ClothingDraft])
async def analyze_clothing(request: ImageRequest):
    """Analyze a reference photo into one draft per clothing item."""
    return await get_studio().analyze_clothing(request.image)


@app.patch("/api/drafts/{draft_id}", response_model=ClothingDraft)
async def update_draft(draft_id: str, request: DraftUpdateRequest):
    return get_studio().update_draft(draft_id, request.text)


@app.delete("/api/drafts/{draft_id}", status_code=204)
async def delete_draft(draft_id: str):
    get_studio().delete_draft(draft_id)


@app.post("/api/drafts/{draft_id}/synthesize", response_model=DraftSynthesisResponse)
async def synthesize_from_draft(draft_id: str):
    clothing = await get_studio().synthesize_from_draft(draft_id)
    return DraftSynthesisResponse(clothing=clothing)


# --- Synthesis parameters ---

@app.put("/api/pose")
async def select_pose(request: PoseRequest):
    return {"pose": get_studio().select_pose(request.pose)}


@app.post("/api/angles/{angle}/toggle")
async def toggle_angle(angle: Angle):
    return {"angles": get_studio().toggle_angle(angle)}


@app.put("/api/step")
async def set_step(request: StepRequest):
    return {"step": get_studio().set_step(request.step)}


# --- Try-on ---

@app.post("/api/tryon/batch", response_model=BatchResponse)
async def synthesize_batch():
    """Generate one try-on image per selected angle."""
    studio = get_studio()
    records = await studio.synthesize_batch()
    return BatchResponse(records=records, failed_angles=studio.state.failed_angles)


@app.delete("/api/history/{record_id}", status_code=204)
async def delete_history(record_id: str):
    get_studio().delete_history(record_id)


if __name__ == "__main__":
    import uvicorn

    config = load_config()
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=config.log_level.lower())
