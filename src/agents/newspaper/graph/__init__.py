# -*- coding: utf-8 -*-
"""
Newspaper Analysis Graph
========================

LangGraph-based orchestration of the relevance → generation → verification
stages.

Usage:
    from src.agents.newspaper.graph import build_analysis_graph, PipelineStatus
"""

from .graph import build_analysis_graph
from .state import AnalysisGraphState, PipelineStatus

__all__ = [
    "build_analysis_graph",
    "AnalysisGraphState",
    "PipelineStatus",
]
