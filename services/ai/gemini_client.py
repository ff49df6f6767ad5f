from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass
class GroundedResponse:
    text: str
    # raw grounding chunks, each shaped like {"web": {"uri": ..., "title": ...}}
    citations: List[Dict[str, Any]] = field(default_factory=list)


class GroundedGenerator(Protocol):
    async def generate(self, prompt: str, *, use_web: bool = True) -> GroundedResponse:
        """Run one grounded generation and return text plus citation chunks."""


@dataclass
class GeminiConfig:
    model: str = "gemini-2.5-flash"
    api_key: str = ""
    use_web: bool = True
    temperature: float = 0.3
    use_vertex: bool = False
    project_id: str = ""
    location: str = "us-central1"

    @staticmethod
    def from_env() -> "GeminiConfig":
        return GeminiConfig(
            model=os.getenv("GEMINI_MODEL") or "gemini-2.5-flash",
            api_key=(os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip(),
            use_web=os.getenv("GEMINI_USE_WEB", "1") == "1",
            temperature=float(os.getenv("AI_TEMPERATURE", "0.3")),
            use_vertex=os.getenv("GEMINI_USE_VERTEX", "0") == "1",
            project_id=(os.getenv("GCP_PROJECT_ID") or os.getenv("GOOGLE_CLOUD_PROJECT") or "").strip(),
            location=(
                os.getenv("GCP_LOCATION")
                or os.getenv("GOOGLE_CLOUD_LOCATION")
                or "us-central1"
            ).strip(),
        )


class GeminiClient:
    """google-genai client with Google Search grounding."""

    def __init__(self, config: Optional[GeminiConfig] = None):
        self.config = config or GeminiConfig.from_env()
        from google import genai

        if self.config.use_vertex:
            if not self.config.project_id:
                raise ValueError("Missing GCP_PROJECT_ID")
            self._client = genai.Client(
                vertexai=True,
                project=self.config.project_id,
                location=self.config.location,
            )
        else:
            if not self.config.api_key:
                raise ValueError("Missing GEMINI_API_KEY")
            self._client = genai.Client(api_key=self.config.api_key)

    def _build_config(self, *, use_web: bool):
        from google.genai import types

        tools = [types.Tool(google_search=types.GoogleSearch())] if use_web else None
        return types.GenerateContentConfig(
            tools=tools,
            temperature=self.config.temperature,
        )

    @staticmethod
    def _grounding_chunks(resp: Any) -> List[Dict[str, Any]]:
        candidates = getattr(resp, "candidates", None) or []
        if not candidates:
            return []
        metadata = getattr(candidates[0], "grounding_metadata", None)
        chunks = getattr(metadata, "grounding_chunks", None) or []

        out: List[Dict[str, Any]] = []
        for chunk in chunks:
            if hasattr(chunk, "model_dump"):
                out.append(chunk.model_dump(mode="python", exclude_none=True))
            elif isinstance(chunk, dict):
                out.append(chunk)
        return out

    def _sync_generate(self, prompt: str, use_web: bool) -> GroundedResponse:
        from google.genai import types

        contents = [types.Content(role="user", parts=[types.Part.from_text(text=prompt)])]
        resp = self._client.models.generate_content(
            model=self.config.model,
            contents=contents,
            config=self._build_config(use_web=use_web),
        )
        return GroundedResponse(
            text=getattr(resp, "text", None) or "",
            citations=self._grounding_chunks(resp),
        )

    async def generate(self, prompt: str, *, use_web: bool = True) -> GroundedResponse:
        started = time.perf_counter()
        use_web = use_web and self.config.use_web
        logger.info(
            "gemini.generate.start model=%s use_web=%s prompt_len=%s",
            self.config.model,
            use_web,
            len(prompt or ""),
        )
        # google-genai SDK call is blocking; run in a worker thread.
        resp = await asyncio.to_thread(self._sync_generate, prompt, use_web)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "gemini.generate.done elapsed_ms=%s chars=%s citations=%s",
            elapsed_ms,
            len(resp.text),
            len(resp.citations),
        )
        return resp
