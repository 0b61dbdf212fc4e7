# -*- coding: utf-8 -*-
"""
Newspaper Analysis Graph
========================

Builds and compiles the LangGraph StateGraph for article analysis:

    START → check_relevance ─┬─ irrelevant → END
                             └─ relevant → generate_content ─┬─ failed → END
                                                             └─ generated → verify_content → finalize → END

Usage:
    from src.agents.newspaper.graph import build_analysis_graph

    graph = build_analysis_graph()
    state = await graph.ainvoke(
        {"request": request, "syllabus": syllabus, "status": PipelineStatus.INIT},
        config={"configurable": {"agents": agents, "accountant": accountant}},
    )
"""

from __future__ import annotations

from typing import Any

from langgraph.graph import END, START, StateGraph

from .nodes import (
    check_relevance,
    finalize,
    generate_content,
    route_after_generation,
    route_after_relevance,
    verify_content,
)
from .state import AnalysisGraphState


def build_analysis_graph() -> Any:
    """
    Build and compile the analysis graph.

    Returns:
        Compiled LangGraph graph ready for ainvoke().
    """
    workflow = StateGraph(AnalysisGraphState)

    # --- Add Nodes ---
    workflow.add_node("check_relevance", check_relevance)
    workflow.add_node("generate_content", generate_content)
    workflow.add_node("verify_content", verify_content)
    workflow.add_node("finalize", finalize)

    # --- Edges ---
    workflow.add_edge(START, "check_relevance")

    workflow.add_conditional_edges(
        "check_relevance",
        route_after_relevance,
        {
            "relevant": "generate_content",
            "irrelevant": END,
        },
    )

    workflow.add_conditional_edges(
        "generate_content",
        route_after_generation,
        {
            "generated": "verify_content",
            "failed": END,
        },
    )

    workflow.add_edge("verify_content", "finalize")
    workflow.add_edge("finalize", END)

    return workflow.compile()


__all__ = ["build_analysis_graph"]
