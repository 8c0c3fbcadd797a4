import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config.settings import get_settings
from ..display import format_estimate
from ..engine.models import AiComponents, DEFAULT_CURRENCY
from ..policy import apply_guardrails, normalize_policy
from ..utils.logger import setup_logging
from .state import engine

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.api_title,
    description="Deterministic pricing resolution for AI-assisted quotes",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class EstimateRequest(BaseModel):
    """Raw policy, config, components and rules exactly as stored upstream."""
    policy: Dict[str, Any] = Field(default_factory=dict)
    config: Optional[Dict[str, Any]] = None
    components: Dict[str, Any] = Field(default_factory=dict)
    rules: Optional[Dict[str, Any]] = None
    inspection_required: Optional[bool] = None


class FormatRequest(BaseModel):
    policy: Dict[str, Any] = Field(default_factory=dict)
    estimate_low: Optional[Any] = None
    estimate_high: Optional[Any] = None
    currency: str = DEFAULT_CURRENCY


@app.get("/")
async def root():
    return {
        "status": "online",
        "message": "Quote Pricing API Active",
        "supported_models": [m.value for m in engine.supported_models],
    }


@app.post("/policy/normalize")
async def normalize(raw: Dict[str, Any] = Body(...)):
    return normalize_policy(raw).to_dict()


@app.post("/estimate")
async def estimate(req: EstimateRequest):
    try:
        components = AiComponents.from_dict(req.components)
        result = engine.calculate(req.policy, req.config, components)

        inspection = req.inspection_required
        if inspection is None:
            inspection = components.inspection_required
        outcome = apply_guardrails(req.policy, result, req.rules, inspection)

        final = outcome.estimate
        shown = final.suppressed is None
        display = format_estimate(
            req.policy,
            final.estimate_low if shown else None,
            final.estimate_high if shown else None,
            currency=final.breakdown.currency,
        )
        return {
            **final.to_dict(),
            "suppressed": final.suppressed,
            "inspection_required": outcome.inspection_required,
            "guardrails": outcome.applied,
            "trace": jsonable_encoder(final.trace),
            "display": display.to_dict(),
        }
    except Exception as e:
        logger.exception("Estimate computation failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/estimate/format")
async def format_only(req: FormatRequest):
    display = format_estimate(req.policy, req.estimate_low, req.estimate_high, currency=req.currency)
    return display.to_dict()
