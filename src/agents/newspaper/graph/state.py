# -*- coding: utf-8 -*-
"""
Analysis Graph State Definitions
================================

TypedDict state schema for the newspaper analysis LangGraph workflow.
"""

from enum import Enum
from typing import TypedDict

from ..schemas import (
    AnalysisRequest,
    MarkdownRendering,
    RelevanceAssessment,
    StructuredAnalysis,
    SyllabusReference,
)


class PipelineStatus(str, Enum):
    INIT = "init"
    RELEVANCE_CHECKED = "relevance_checked"
    IRRELEVANT = "irrelevant"
    GENERATING = "generating"
    GENERATION_FAILED = "generation_failed"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    VERIFICATION_FALLBACK = "verification_fallback"
    STREAMING = "streaming"
    DONE = "done"


class AnalysisGraphState(TypedDict, total=False):
    """State for the relevance → generation → verification graph."""

    # --- Inputs ---
    request: AnalysisRequest
    syllabus: SyllabusReference
    status: PipelineStatus

    # --- Stage 1: Relevance ---
    relevance: RelevanceAssessment | None
    syllabus_topic: str

    # --- Stage 2: Generation ---
    generated: StructuredAnalysis | None

    # --- Stage 3: Verification + finalize ---
    analysis: StructuredAnalysis
    rendered: MarkdownRendering
    validation_errors: list[str]

    # --- Terminal failure ---
    error: str | None
    error_stage: str | None
    error_code: str | None


__all__ = ["AnalysisGraphState", "PipelineStatus"]
