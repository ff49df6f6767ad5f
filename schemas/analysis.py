"""
Request/response models for asset and channel analysis.

Field names follow the JSON shape the prompts ask the model to return
(camelCase), so provider output validates straight into these models.
Missing optional lists and text fields default to empty values; the provider
output is not guaranteed to be complete.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AssetType(str, Enum):
    STOCK = "stock"
    COMMODITY = "commodity"
    INDEX = "index"
    YOUTUBE = "youtube"


class AssetQuery(BaseModel):
    assetType: AssetType = AssetType.STOCK
    identifier: str = Field(max_length=200)
    auxiliary: str = Field(default="", max_length=200)
    supplementaryText: Optional[str] = Field(default=None, max_length=100_000)

    @field_validator("auxiliary", mode="before")
    @classmethod
    def _auxiliary_default(cls, v: Any) -> str:
        return "" if v is None else v


# ── Provider output shapes ──────────────────────────────────────────────

def _text(v: Any) -> str:
    if v is None:
        return ""
    return v if isinstance(v, str) else str(v)


def _list(v: Any) -> list:
    return v if isinstance(v, list) else []


def _text_list(v: Any) -> List[str]:
    # a lone string is a one-item list
    if isinstance(v, str):
        return [v] if v.strip() else []
    return [_text(item) for item in _list(v) if item is not None]


def _object_list(v: Any) -> List[dict]:
    return [item for item in _list(v) if isinstance(item, dict)]


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ChartPattern(_Lenient):
    name: str = ""
    description: str = ""

    @field_validator("name", "description", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _text(v)


class TechnicalAnalysis(_Lenient):
    summary: str = ""
    patterns: List[ChartPattern] = Field(default_factory=list)

    @field_validator("summary", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _text(v)

    @field_validator("patterns", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any) -> list:
        return _object_list(v)


class AnalysisResult(_Lenient):
    kind: Literal["asset"] = "asset"
    symbol: str
    suggestion: str = ""
    rationale: List[str] = Field(default_factory=list)
    technicalAnalysis: Optional[TechnicalAnalysis] = None

    @field_validator("symbol", "suggestion", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _text(v)

    @field_validator("rationale", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any) -> list:
        return _text_list(v)

    @field_validator("technicalAnalysis", mode="before")
    @classmethod
    def _drop_non_object(cls, v: Any) -> Optional[dict]:
        return v if isinstance(v, dict) else None


class VideoSummary(_Lenient):
    title: str = ""
    summary: str = ""

    @field_validator("title", "summary", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _text(v)


class YoutubeAnalysis(_Lenient):
    kind: Literal["channel"] = "channel"
    channelName: str
    overallStance: str = ""
    keyThemes: List[str] = Field(default_factory=list)
    recentVideosSummary: List[VideoSummary] = Field(default_factory=list)

    @field_validator("channelName", "overallStance", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _text(v)

    @field_validator("keyThemes", mode="before")
    @classmethod
    def _coerce_themes(cls, v: Any) -> list:
        return _text_list(v)

    @field_validator("recentVideosSummary", mode="before")
    @classmethod
    def _coerce_videos(cls, v: Any) -> list:
        return _object_list(v)


Analysis = Annotated[Union[AnalysisResult, YoutubeAnalysis], Field(discriminator="kind")]


class Source(BaseModel):
    uri: str
    # raw provider title; "Untitled Source" is applied when rendering
    title: Optional[str] = None


class FullAnalysis(BaseModel):
    analysis: Analysis
    sources: List[Source] = Field(default_factory=list)
