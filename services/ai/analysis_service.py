# services/ai/analysis_service.py
"""
Asset / channel analysis pipeline.

validate -> build prompt -> one grounded provider call -> strip fence ->
json.loads -> discriminate asset vs channel -> filter citations.

No retries and no cancellation here; callers that need a deadline wrap
request_analysis (the HTTP route uses asyncio.wait_for).
"""
from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from schemas.analysis import (
    AnalysisResult,
    AssetQuery,
    FullAnalysis,
    Source,
    YoutubeAnalysis,
)
from services.ai.gemini_client import GroundedGenerator
from services.ai.prompts import build_prompt
from services.errors import InvalidInput, MalformedResponse, ProviderError

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r"```json\s*([\s\S]*?)\s*```")


def extract_json_text(text: str) -> str:
    match = _JSON_FENCE_RE.search(text or "")
    if match and match.group(1):
        return match.group(1).strip()
    return (text or "").strip()


def parse_analysis(payload: Dict[str, Any]) -> AnalysisResult | YoutubeAnalysis:
    try:
        if "symbol" in payload:
            return AnalysisResult.model_validate({**payload, "kind": "asset"})
        if "channelName" in payload:
            return YoutubeAnalysis.model_validate({**payload, "kind": "channel"})
    except ValidationError as exc:
        raise MalformedResponse(f"response has an unexpected shape: {exc.error_count()} invalid field(s)") from exc
    raise MalformedResponse("response has neither 'symbol' nor 'channelName'")


def decode_response(text: str) -> AnalysisResult | YoutubeAnalysis:
    cleaned = extract_json_text(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.warning("analysis.parse.invalid_json chars=%s", len(cleaned))
        raise MalformedResponse("response is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise MalformedResponse("response is not a JSON object")
    return parse_analysis(payload)


def _web_of(chunk: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(chunk, dict):
        return None
    web = chunk.get("web")
    return web if isinstance(web, dict) else None


def extract_sources(chunks: Optional[Iterable[Any]]) -> List[Source]:
    sources: List[Source] = []
    for chunk in chunks or []:
        web = _web_of(chunk)
        if not web:
            continue
        uri = web.get("uri")
        if not isinstance(uri, str) or not uri:
            continue
        title = web.get("title")
        sources.append(Source(uri=uri, title=title if isinstance(title, str) else None))
    return sources


async def request_analysis(query: AssetQuery, client: GroundedGenerator) -> FullAnalysis:
    if not (query.identifier or "").strip():
        raise InvalidInput("Identifier cannot be empty.")

    prompt = build_prompt(query)
    started = time.perf_counter()
    logger.info("analysis.request.start asset_type=%s prompt_len=%s", query.assetType.value, len(prompt))

    try:
        response = await client.generate(prompt, use_web=True)
    except Exception as exc:
        logger.exception("analysis.request.provider_error asset_type=%s", query.assetType.value)
        raise ProviderError(str(exc) or type(exc).__name__) from exc

    analysis = decode_response(response.text)
    sources = extract_sources(response.citations)

    elapsed_ms = int((time.perf_counter() - started) * 1000)
    logger.info(
        "analysis.request.done asset_type=%s kind=%s sources=%s elapsed_ms=%s",
        query.assetType.value,
        analysis.kind,
        len(sources),
        elapsed_ms,
    )
    return FullAnalysis(analysis=analysis, sources=sources)
