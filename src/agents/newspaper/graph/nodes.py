# -*- coding: utf-8 -*-
"""
Analysis Graph Nodes
====================

Node functions for the newspaper analysis workflow. Each node wraps one stage
agent's process() method and returns state updates.

Collaborators arrive through ``config["configurable"]``:

- ``agents``: object with ``relevance``, ``generator`` and ``verifier`` agents
- ``accountant``: the run's UsageAccountant
- ``min_relevance_confidence``: confidence floor for stage 1 (0 disables it)
- ``progress_callback``: optional async callable receiving progress events
"""

from typing import Any

from langchain_core.runnables import RunnableConfig

from src.logging import get_logger
from src.utils.content_validator import validate_mcqs

from ..exceptions import GENERATION_FAILED_MESSAGE, IRRELEVANT_MESSAGE
from ..markdown import render_markdown
from ..quality import score_analysis
from .state import AnalysisGraphState, PipelineStatus

logger = get_logger("Newspaper.Graph")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _configurable(config: RunnableConfig) -> dict[str, Any]:
    return config.get("configurable", {})


async def emit_progress(
    config: RunnableConfig, stage: str, progress: int, message: str
) -> None:
    """Send a progress event if a callback is configured."""
    cb = _configurable(config).get("progress_callback")
    if cb:
        try:
            await cb({"type": "progress", "stage": stage, "progress": progress, "message": message})
        except Exception as e:
            logger.debug(f"Progress callback failed: {e}")


def _record_usage(config: RunnableConfig, result: Any) -> None:
    accountant = _configurable(config).get("accountant")
    if accountant is not None and result is not None:
        accountant.accumulate(result.usage)


def _irrelevant(message: str) -> dict:
    return {
        "status": PipelineStatus.IRRELEVANT,
        "error": message,
        "error_stage": "relevance",
        "error_code": "irrelevant",
    }


# ---------------------------------------------------------------------------
# Stage 1: Relevance
# ---------------------------------------------------------------------------


async def check_relevance(state: AnalysisGraphState, config: RunnableConfig) -> dict:
    """Classify the article and stop early unless it maps to a syllabus topic."""
    agents = _configurable(config)["agents"]
    min_confidence = float(_configurable(config).get("min_relevance_confidence") or 0.0)

    await emit_progress(config, "relevance", 25, "Checking syllabus relevance")

    try:
        result = await agents.relevance.process(state["request"], state["syllabus"])
    except Exception as e:
        logger.error(f"Relevance check failed: {e}")
        return _irrelevant(IRRELEVANT_MESSAGE)

    _record_usage(config, result)

    assessment = result.output
    if assessment is None:
        logger.warning("Relevance check returned no output")
        return _irrelevant(IRRELEVANT_MESSAGE)

    reason = (assessment.reasoning or "").strip() or IRRELEVANT_MESSAGE
    topic = (assessment.syllabus_topic or "").strip()

    if not assessment.is_relevant:
        logger.info(f"Article judged not relevant: {reason}")
        return {**_irrelevant(reason), "relevance": assessment}
    if not topic:
        logger.warning("Article judged relevant without a syllabus topic")
        return {**_irrelevant(reason), "relevance": assessment}
    if assessment.confidence_score < min_confidence:
        logger.info(
            f"Relevance confidence {assessment.confidence_score:.2f} "
            f"below threshold {min_confidence:.2f}"
        )
        return {**_irrelevant(reason), "relevance": assessment}

    logger.info(
        f"Relevant article: topic='{topic}', confidence={assessment.confidence_score:.2f}"
    )
    return {
        "status": PipelineStatus.RELEVANCE_CHECKED,
        "relevance": assessment,
        "syllabus_topic": topic,
    }


def route_after_relevance(state: AnalysisGraphState) -> str:
    return "irrelevant" if state.get("status") == PipelineStatus.IRRELEVANT else "relevant"


# ---------------------------------------------------------------------------
# Stage 2: Generation
# ---------------------------------------------------------------------------


def _generation_failed() -> dict:
    return {
        "status": PipelineStatus.GENERATION_FAILED,
        "generated": None,
        "error": GENERATION_FAILED_MESSAGE,
        "error_stage": "generation",
        "error_code": "stage_failed",
    }


async def generate_content(state: AnalysisGraphState, config: RunnableConfig) -> dict:
    """Generate MCQs, Mains questions, knowledge graph and tags."""
    agents = _configurable(config)["agents"]

    await emit_progress(config, "generating", 50, "Generating questions and analysis")

    try:
        result = await agents.generator.process(
            state["request"], state["syllabus"], state["syllabus_topic"]
        )
    except Exception as e:
        logger.error(f"Content generation failed: {e}")
        return _generation_failed()

    _record_usage(config, result)

    if result.output is None:
        logger.error("Content generation returned no output")
        return _generation_failed()

    generated = result.output
    logger.info(
        f"Generated {len(generated.prelims.mcqs)} MCQs, "
        f"{len(generated.mains_questions)} Mains questions"
    )
    return {"status": PipelineStatus.VERIFYING, "generated": generated}


def route_after_generation(state: AnalysisGraphState) -> str:
    return "generated" if state.get("generated") is not None else "failed"


# ---------------------------------------------------------------------------
# Stage 3: Verification
# ---------------------------------------------------------------------------


async def verify_content(state: AnalysisGraphState, config: RunnableConfig) -> dict:
    """Re-check the generated content; fall back to it if the editor fails."""
    agents = _configurable(config)["agents"]
    generated = state["generated"]

    await emit_progress(config, "verifying", 75, "Verifying content against the article")

    try:
        result = await agents.verifier.process(state["request"], generated)
    except Exception as e:
        logger.warning(f"Verification failed, using generated content: {e}")
        return {"status": PipelineStatus.VERIFICATION_FALLBACK, "analysis": generated}

    # Usage counts even when the editor's reply did not parse
    _record_usage(config, result)

    if result.output is None:
        logger.warning("Verification returned no output, using generated content")
        return {"status": PipelineStatus.VERIFICATION_FALLBACK, "analysis": generated}

    return {"status": PipelineStatus.VERIFIED, "analysis": result.output}


# ---------------------------------------------------------------------------
# Finalize
# ---------------------------------------------------------------------------


async def finalize(state: AnalysisGraphState, config: RunnableConfig) -> dict:
    """Sanitize the graph, pin the topic, score quality, render markdown and check MCQ markup."""
    await emit_progress(config, "finalizing", 90, "Finalizing analysis")

    analysis = state["analysis"]
    updates: dict[str, Any] = {}

    if analysis.knowledge_graph is not None:
        graph = analysis.knowledge_graph.sanitized()
        dropped = len(analysis.knowledge_graph.edges) - len(graph.edges)
        if dropped:
            logger.warning(f"Dropped {dropped} knowledge graph edge(s) with unknown endpoints")
        updates["knowledge_graph"] = None if graph.is_empty else graph

    # The relevance stage owns the topic; the editor may not change it
    topic = state.get("syllabus_topic")
    if topic and analysis.syllabus_topic != topic:
        updates["syllabus_topic"] = topic

    if updates:
        analysis = analysis.model_copy(update=updates)

    if analysis.quality_score is None:
        score = score_analysis(analysis, topic)
        logger.info(f"No editor quality score, local score {score:.2f}")
        analysis = analysis.model_copy(update={"quality_score": score})

    rendered = render_markdown(analysis)
    report = validate_mcqs(rendered.analysis)
    for error in report.errors:
        logger.warning(f"MCQ markup check: {error}")

    return {
        "analysis": analysis,
        "rendered": rendered,
        "validation_errors": report.errors,
    }


__all__ = [
    "emit_progress",
    "check_relevance",
    "route_after_relevance",
    "generate_content",
    "route_after_generation",
    "verify_content",
    "finalize",
]
