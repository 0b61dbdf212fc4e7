# -*- coding: utf-8 -*-
"""
Chunk Emission
==============

Turns a final StructuredAnalysis into the ordered chunk sequence sent to
clients, and folds a chunk sequence back into an analysis.

Order of a successful run:

    summary? → prelims × N → mains × M → knowledgeGraph? → metadata

A failed run is a single ``error`` chunk. ``metadata`` and ``error`` are the
only terminal chunks and never appear together.
"""

from typing import Iterable, Iterator, Optional

from src.services.usage import UsageMetrics

from .exceptions import AnalysisError
from .schemas import (
    ChunkMetadata,
    ErrorChunk,
    KnowledgeGraphChunk,
    MainsChunk,
    MainsSection,
    MetadataChunk,
    PrelimsChunk,
    PrelimsSection,
    StreamChunk,
    StructuredAnalysis,
    SummaryChunk,
)


def build_metadata(
    analysis: StructuredAnalysis,
    syllabus_topic: Optional[str],
    usage: UsageMetrics,
) -> ChunkMetadata:
    return ChunkMetadata(
        syllabus_topic=syllabus_topic or analysis.syllabus_topic,
        quality_score=analysis.quality_score,
        tags=list(analysis.tags or []),
        questions_count=analysis.question_total(),
        total_tokens=usage.total_tokens,
        cost=round(usage.cost, 2),
    )


def emit_chunks(
    analysis: StructuredAnalysis,
    syllabus_topic: Optional[str],
    usage: UsageMetrics,
) -> Iterator[StreamChunk]:
    """
    Yield the chunks for a successful run.

    Args:
        analysis: Final (verified or fallback) analysis
        syllabus_topic: Topic identified by the relevance stage
        usage: Totals across all stage calls

    Yields:
        StreamChunk items, ending with exactly one MetadataChunk
    """
    summary = (analysis.summary or "").strip()
    if summary:
        yield SummaryChunk(data=summary)

    for mcq in analysis.prelims.mcqs:
        yield PrelimsChunk(data=mcq)

    for question in analysis.mains_questions:
        yield MainsChunk(data=question)

    if analysis.knowledge_graph is not None and not analysis.knowledge_graph.is_empty:
        yield KnowledgeGraphChunk(data=analysis.knowledge_graph)

    yield MetadataChunk(data=build_metadata(analysis, syllabus_topic, usage))


def reconstruct_analysis(chunks: Iterable[StreamChunk]) -> StructuredAnalysis:
    """
    Rebuild a StructuredAnalysis from a chunk sequence.

    Raises:
        AnalysisError: If the sequence contains an error chunk
    """
    summary: Optional[str] = None
    mcqs = []
    mains = []
    knowledge_graph = None
    metadata: Optional[ChunkMetadata] = None

    for chunk in chunks:
        if isinstance(chunk, ErrorChunk):
            raise AnalysisError(chunk.data)
        if isinstance(chunk, SummaryChunk):
            summary = chunk.data
        elif isinstance(chunk, PrelimsChunk):
            mcqs.append(chunk.data)
        elif isinstance(chunk, MainsChunk):
            mains.append(chunk.data)
        elif isinstance(chunk, KnowledgeGraphChunk):
            knowledge_graph = chunk.data
        elif isinstance(chunk, MetadataChunk):
            metadata = chunk.data

    analysis = StructuredAnalysis(
        summary=summary,
        prelims=PrelimsSection(mcqs=mcqs),
        mains=MainsSection(questions=mains) if mains else None,
        knowledge_graph=knowledge_graph,
    )
    if metadata is not None:
        analysis = analysis.model_copy(
            update={
                "syllabus_topic": metadata.syllabus_topic,
                "quality_score": metadata.quality_score,
                "tags": metadata.tags or None,
                "questions_count": metadata.questions_count,
                "total_tokens": metadata.total_tokens,
                "cost": metadata.cost,
            }
        )
    return analysis


__all__ = ["build_metadata", "emit_chunks", "reconstruct_analysis"]
