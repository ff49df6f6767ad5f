# routers/analysis_routes.py
"""
FastAPI routes for grounded asset / channel analysis.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from config.settings import AppSettings, get_settings
from middleware.rate_limit import ANALYSIS_RATE_LIMIT, limiter
from schemas.analysis import AssetQuery, FullAnalysis
from services.ai.analysis_service import request_analysis
from services.ai.gemini_client import GroundedGenerator
from services.errors import InvalidInput, MalformedResponse, ProviderError
from services.presentation import render_sources, suggestion_tone

logger = logging.getLogger(__name__)

router = APIRouter()

UNEXPECTED_FORMAT_MESSAGE = "The AI returned a response in an unexpected format. Please try again."


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class DisplayHints(BaseModel):
    tone: str
    sources: List[Dict[str, str]]


class AnalysisResponse(FullAnalysis):
    display: DisplayHints


# ============================================================================
# DEPENDENCIES
# ============================================================================

def get_analysis_client(request: Request) -> GroundedGenerator:
    client = getattr(request.app.state, "analysis_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Analysis provider is not configured")
    return client


# ============================================================================
# ROUTES
# ============================================================================

@router.post("", response_model=AnalysisResponse)
@limiter.limit(ANALYSIS_RATE_LIMIT)
async def analyze(
    request: Request,
    query: AssetQuery,
    client: GroundedGenerator = Depends(get_analysis_client),
    settings: AppSettings = Depends(get_settings),
):
    try:
        result = await asyncio.wait_for(
            request_analysis(query, client),
            timeout=settings.analysis_timeout_s,
        )
    except InvalidInput as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except MalformedResponse as exc:
        logger.warning("analysis.route.malformed asset_type=%s reason=%s", query.assetType.value, exc.message)
        raise HTTPException(status_code=502, detail=UNEXPECTED_FORMAT_MESSAGE)
    except ProviderError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to get analysis: {exc.message}")
    except asyncio.TimeoutError:
        logger.warning("analysis.route.timeout asset_type=%s timeout_s=%s", query.assetType.value, settings.analysis_timeout_s)
        raise HTTPException(status_code=504, detail="The analysis took too long. Please try again.")

    analysis = result.analysis
    label = analysis.suggestion if analysis.kind == "asset" else analysis.overallStance
    return AnalysisResponse(
        analysis=analysis,
        sources=result.sources,
        display=DisplayHints(tone=suggestion_tone(label), sources=render_sources(result.sources)),
    )
