import asyncio

import pytest

from src.agents.newspaper import AnalysisError
from src.agents.newspaper.exceptions import GENERATION_FAILED_MESSAGE, IRRELEVANT_MESSAGE
from src.agents.newspaper.schemas import (
    KnowledgeGraph,
    KnowledgeGraphEdge,
    KnowledgeGraphNode,
    RelevanceAssessment,
)
from src.services.llm import LLMAPIError, TokenUsage
from src.services.usage import CostRates, compute_cost
from src.utils.content_validator import validate_mcqs


def _collect(pipeline, request, progress_callback=None):
    async def run():
        return [chunk async for chunk in pipeline.stream(request, progress_callback=progress_callback)]

    return asyncio.run(run())


def test_successful_run_emits_chunks_in_order(build_pipeline, request_model, relevant, generator, verifier):
    pipeline = build_pipeline(relevant, generator, verifier)

    chunks = _collect(pipeline, request_model)

    assert [c.type for c in chunks] == [
        "summary",
        "prelims",
        "prelims",
        "mains",
        "knowledgeGraph",
        "metadata",
    ]
    assert chunks[0].data == "Verified summary."


def test_metadata_sums_usage_across_stages(build_pipeline, request_model, relevant, generator, verifier):
    chunks = _collect(build_pipeline(relevant, generator, verifier), request_model)

    metadata = chunks[-1].data
    assert metadata.total_tokens == 110 + 1500 + 1200
    assert metadata.cost == compute_cost(1900, 910, CostRates())
    assert metadata.questions_count == 3
    assert metadata.syllabus_topic == "GS3: Indian Economy - Monetary Policy"
    assert metadata.tags == ["Monetary Policy", "RBI"]


def test_stages_receive_request_syllabus_and_topic(build_pipeline, request_model, relevant, generator, verifier):
    _collect(build_pipeline(relevant, generator, verifier), request_model)

    request, syllabus = relevant.calls[0]
    assert request is request_model
    assert syllabus.prelims_text == "Prelims syllabus"

    assert generator.calls[0][2] == "GS3: Indian Economy - Monetary Policy"
    assert verifier.calls[0][1] == generator.output


def test_progress_events_follow_stage_order(build_pipeline, request_model, relevant, generator, verifier):
    events = []

    async def on_progress(event):
        events.append(event)

    _collect(build_pipeline(relevant, generator, verifier), request_model, on_progress)

    assert [e["stage"] for e in events] == [
        "loading",
        "relevance",
        "generating",
        "verifying",
        "finalizing",
        "complete",
    ]
    assert [e["progress"] for e in events] == [10, 25, 50, 75, 90, 100]
    assert all(e["type"] == "progress" for e in events)


def test_failing_progress_callback_does_not_stop_run(build_pipeline, request_model, relevant, generator, verifier):
    async def broken(event):
        raise RuntimeError("socket gone")

    chunks = _collect(build_pipeline(relevant, generator, verifier), request_model, broken)
    assert chunks[-1].type == "metadata"


def test_irrelevant_article_yields_single_error_chunk(build_pipeline, request_model, generator, verifier, stage_agent):
    relevance = stage_agent(
        output=RelevanceAssessment(
            is_relevant=False, reasoning="Celebrity gossip.", confidence_score=0.95
        ),
        usage=TokenUsage(input_tokens=90, output_tokens=8),
    )

    chunks = _collect(build_pipeline(relevance, generator, verifier), request_model)

    assert len(chunks) == 1
    assert chunks[0].type == "error"
    assert chunks[0].data == "Celebrity gossip."
    assert generator.calls == []
    assert verifier.calls == []


def test_irrelevant_without_reasoning_uses_generic_message(build_pipeline, request_model, generator, verifier, stage_agent):
    relevance = stage_agent(output=RelevanceAssessment(is_relevant=False, confidence_score=0.5))

    chunks = _collect(build_pipeline(relevance, generator, verifier), request_model)
    assert chunks[0].data == IRRELEVANT_MESSAGE


def test_relevant_without_topic_is_treated_as_irrelevant(build_pipeline, request_model, generator, verifier, stage_agent):
    relevance = stage_agent(
        output=RelevanceAssessment(is_relevant=True, syllabus_topic="  ", confidence_score=0.9)
    )

    chunks = _collect(build_pipeline(relevance, generator, verifier), request_model)
    assert [c.type for c in chunks] == ["error"]
    assert generator.calls == []


def test_low_confidence_is_rejected_when_threshold_set(build_pipeline, request_model, generator, verifier, stage_agent):
    relevance = stage_agent(
        output=RelevanceAssessment(
            is_relevant=True, syllabus_topic="GS2: Polity", confidence_score=0.3
        )
    )

    chunks = _collect(
        build_pipeline(relevance, generator, verifier, min_relevance_confidence=0.5), request_model
    )
    assert [c.type for c in chunks] == ["error"]
    assert generator.calls == []


def test_relevance_failure_is_reported_as_irrelevant(build_pipeline, request_model, generator, verifier, stage_agent):
    relevance = stage_agent(error=LLMAPIError("upstream down", provider="openai"))

    chunks = _collect(build_pipeline(relevance, generator, verifier), request_model)
    assert [c.type for c in chunks] == ["error"]
    assert chunks[0].data == IRRELEVANT_MESSAGE


def _assert_generation_failed(chunks, verifier):
    assert [c.type for c in chunks] == ["error"]
    assert chunks[0].data == GENERATION_FAILED_MESSAGE
    assert verifier.calls == []


def test_generator_error_stops_before_verification(build_pipeline, request_model, relevant, verifier, stage_agent):
    generator = stage_agent(error=LLMAPIError("timeout", provider="openai"))
    _assert_generation_failed(_collect(build_pipeline(relevant, generator, verifier), request_model), verifier)


def test_unparsed_generation_stops_before_verification(build_pipeline, request_model, relevant, verifier, stage_agent):
    generator = stage_agent(output=None, usage=TokenUsage(input_tokens=900, output_tokens=20))
    _assert_generation_failed(_collect(build_pipeline(relevant, generator, verifier), request_model), verifier)


def test_verifier_failure_falls_back_to_generated(build_pipeline, request_model, relevant, generator, stage_agent):
    verifier = stage_agent(error=LLMAPIError("timeout", provider="openai"))

    chunks = _collect(build_pipeline(relevant, generator, verifier), request_model)

    assert chunks[0].type == "summary"
    assert chunks[0].data == generator.output.summary
    assert chunks[-1].type == "metadata"
    assert chunks[-1].data.total_tokens == 110 + 1500


def test_unparsed_verifier_reply_still_counts_usage(build_pipeline, request_model, relevant, generator, stage_agent):
    verifier = stage_agent(output=None, usage=TokenUsage(input_tokens=700, output_tokens=50))

    chunks = _collect(build_pipeline(relevant, generator, verifier), request_model)

    assert chunks[0].data == generator.output.summary
    assert chunks[-1].data.total_tokens == 110 + 1500 + 750


def test_blank_summary_and_empty_graph_are_not_emitted(build_pipeline, request_model, relevant, generator, stage_agent, analysis_factory):
    verifier = stage_agent(
        output=analysis_factory(
            summary="   ",
            knowledge_graph=KnowledgeGraph(
                nodes=[], edges=[KnowledgeGraphEdge(source="a", target="b", label="links")]
            ),
        )
    )

    chunks = _collect(build_pipeline(relevant, generator, verifier), request_model)
    assert [c.type for c in chunks] == ["prelims", "prelims", "mains", "metadata"]


def test_dangling_graph_edges_are_dropped(build_pipeline, request_model, relevant, generator, stage_agent, analysis_factory):
    graph = KnowledgeGraph(
        nodes=[
            KnowledgeGraphNode(id="rbi", label="RBI", type="Organization"),
            KnowledgeGraphNode(id="rbi", label="RBI again", type="Organization"),
        ],
        edges=[
            KnowledgeGraphEdge(source="rbi", target="rbi", label="reviews"),
            KnowledgeGraphEdge(source="rbi", target="mpc", label="chairs"),
        ],
    )
    verifier = stage_agent(output=analysis_factory(knowledge_graph=graph))

    chunks = _collect(build_pipeline(relevant, generator, verifier), request_model)
    kg = next(c for c in chunks if c.type == "knowledgeGraph").data

    assert [n.label for n in kg.nodes] == ["RBI"]
    assert [e.label for e in kg.edges] == ["reviews"]


def test_analyze_returns_assembled_result(build_pipeline, request_model, relevant, generator, verifier):
    result = asyncio.run(build_pipeline(relevant, generator, verifier).analyze(request_model))

    assert result.analysis.summary == "Verified summary."
    assert len(result.analysis.prelims.mcqs) == 2
    assert result.analysis.input_tokens == 1900
    assert result.analysis.output_tokens == 910
    assert result.usage.total_tokens == 2810
    assert result.analysis.total_tokens == result.usage.total_tokens

    assert "## Potential Prelims Questions" in result.rendered.analysis
    assert "### Question 1" in result.rendered.mains_questions
    assert validate_mcqs(result.rendered.analysis).valid


def test_analyze_raises_with_stage_and_code(build_pipeline, request_model, relevant, verifier, stage_agent):
    generator = stage_agent(error=LLMAPIError("timeout", provider="openai"))

    with pytest.raises(AnalysisError) as exc_info:
        asyncio.run(build_pipeline(relevant, generator, verifier).analyze(request_model))

    assert exc_info.value.stage == "generation"
    assert exc_info.value.code == "stage_failed"
    assert exc_info.value.message == GENERATION_FAILED_MESSAGE


def test_consumer_may_stop_early(build_pipeline, request_model, relevant, generator, verifier):
    pipeline = build_pipeline(relevant, generator, verifier)

    async def run():
        stream = pipeline.stream(request_model)
        first = await stream.__anext__()
        await stream.aclose()
        return first

    assert asyncio.run(run()).type == "summary"


def test_each_run_has_its_own_usage(build_pipeline, request_model, relevant, generator, verifier):
    pipeline = build_pipeline(relevant, generator, verifier)

    first = _collect(pipeline, request_model)[-1].data
    second = _collect(pipeline, request_model)[-1].data
    assert first.total_tokens == second.total_tokens == 2810


def test_relevance_without_output_is_reported_as_irrelevant(build_pipeline, request_model, generator, verifier, stage_agent):
    relevance = stage_agent(output=None, usage=TokenUsage(input_tokens=90, output_tokens=0))

    chunks = _collect(build_pipeline(relevance, generator, verifier), request_model)

    assert [c.type for c in chunks] == ["error"]
    assert chunks[0].data == IRRELEVANT_MESSAGE
    assert generator.calls == []


def test_fallback_chunks_carry_generator_output_unchanged(build_pipeline, request_model, relevant, generator, stage_agent):
    verifier = stage_agent(error=LLMAPIError("timeout", provider="openai"))
    expected = generator.output

    chunks = _collect(build_pipeline(relevant, generator, verifier), request_model)

    assert [c.data for c in chunks if c.type == "prelims"] == expected.prelims.mcqs
    assert [c.data for c in chunks if c.type == "mains"] == expected.mains_questions
    assert next(c.data for c in chunks if c.type == "knowledgeGraph") == expected.knowledge_graph
    metadata = chunks[-1].data
    assert metadata.tags == expected.tags
    assert metadata.quality_score == expected.quality_score


def test_editor_cannot_change_identified_topic(build_pipeline, request_model, relevant, generator, stage_agent, analysis_factory):
    verifier = stage_agent(output=analysis_factory(syllabus_topic="GS1: Art and Culture"))
    pipeline = build_pipeline(relevant, generator, verifier)

    metadata = _collect(pipeline, request_model)[-1].data
    assert metadata.syllabus_topic == "GS3: Indian Economy - Monetary Policy"

    result = asyncio.run(pipeline.analyze(request_model))
    assert result.analysis.syllabus_topic == "GS3: Indian Economy - Monetary Policy"
    assert "GS1: Art and Culture" not in result.rendered.analysis


def test_unscored_fallback_gets_local_quality_score(build_pipeline, request_model, relevant, stage_agent, analysis_factory):
    generator = stage_agent(
        output=analysis_factory(quality_score=None),
        usage=TokenUsage(input_tokens=1000, output_tokens=500),
    )
    verifier = stage_agent(output=None)

    metadata = _collect(build_pipeline(relevant, generator, verifier), request_model)[-1].data

    assert metadata.quality_score is not None
    assert 0.0 < metadata.quality_score <= 1.0


def test_editor_quality_score_is_kept(build_pipeline, request_model, relevant, generator, verifier):
    metadata = _collect(build_pipeline(relevant, generator, verifier), request_model)[-1].data
    assert metadata.quality_score == 0.9


def test_completion_reported_when_consumer_stops_at_metadata(build_pipeline, request_model, relevant, generator, verifier):
    pipeline = build_pipeline(relevant, generator, verifier)
    events = []

    async def on_progress(event):
        events.append(event)

    async def run():
        stream = pipeline.stream(request_model, progress_callback=on_progress)
        async for chunk in stream:
            if chunk.type == "metadata":
                break
        await stream.aclose()

    asyncio.run(run())
    assert events[-1]["stage"] == "complete"
    assert events[-1]["progress"] == 100
