# -*- coding: utf-8 -*-
"""
Newspaper Analysis Data Model
=============================

Pydantic models shared by the stage agents, the graph, the stream emitter and
the API. Attributes are snake_case; the wire form (LLM structured output,
stream chunks, HTTP bodies) uses camelCase aliases.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from src.services.syllabus import SyllabusReference
from src.services.usage import UsageMetrics

DEFAULT_EXAM_TYPE = "UPSC Civil Services"
DEFAULT_OUTPUT_LANGUAGE = "English"
MIN_SOURCE_LENGTH = 100
MAX_SOURCE_LENGTH = 50000


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class AnalysisRequest(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    source_text: str = Field(min_length=MIN_SOURCE_LENGTH, max_length=MAX_SOURCE_LENGTH)
    exam_type: str = DEFAULT_EXAM_TYPE
    analysis_focus: str = Field(min_length=1)
    output_language: str = DEFAULT_OUTPUT_LANGUAGE


# ---------------------------------------------------------------------------
# Stage 1: relevance
# ---------------------------------------------------------------------------


class RelevanceAssessment(CamelModel):
    """Relevance verdict for an article against the syllabus."""

    is_relevant: bool = Field(description="Whether the article relates to the UPSC syllabus.")
    syllabus_topic: Optional[str] = Field(
        default=None,
        description="Most specific syllabus topic the article maps to; null when not relevant.",
    )
    reasoning: Optional[str] = Field(
        default=None, description="One or two sentences explaining the verdict."
    )
    confidence_score: float = Field(ge=0.0, le=1.0, description="Confidence in the verdict, 0 to 1.")
    subject_areas: list[str] = Field(
        default_factory=list, description="GS papers or subjects the article touches."
    )


# ---------------------------------------------------------------------------
# Stage 2/3: analysis
# ---------------------------------------------------------------------------


class QuestionType(str, Enum):
    MULTIPLE_STATEMENT = "multiple-statement"
    ASSERTION_REASON = "assertion-reason"
    MATCHING_PAIRS = "matching-pairs"
    DIRECT = "direct"


class Option(CamelModel):
    text: str
    correct: Optional[bool] = None


class MCQ(CamelModel):
    question: str
    subject: Optional[str] = None
    explanation: Optional[str] = None
    difficulty: Optional[int] = Field(default=None, ge=1, le=10)
    options: list[Option] = Field(default_factory=list)
    question_type: Optional[QuestionType] = None


class MainsQuestion(CamelModel):
    question: str
    guidance: Optional[str] = Field(default=None, description="Answer outline in markdown.")
    difficulty: Optional[int] = Field(default=None, ge=1, le=10)
    directive: Optional[str] = Field(
        default=None, description="Directive word, e.g. Discuss, Critically analyse."
    )


class NodeType(str, Enum):
    PERSON = "Person"
    ORGANIZATION = "Organization"
    LOCATION = "Location"
    POLICY = "Policy"
    CONCEPT = "Concept"
    DATE = "Date"
    STATISTIC = "Statistic"


class KnowledgeGraphNode(CamelModel):
    id: str = Field(min_length=1)
    label: str
    type: NodeType


class KnowledgeGraphEdge(CamelModel):
    source: str
    target: str
    label: str = Field(min_length=3, max_length=40)


class KnowledgeGraph(CamelModel):
    nodes: list[KnowledgeGraphNode] = Field(default_factory=list)
    edges: list[KnowledgeGraphEdge] = Field(default_factory=list)

    def sanitized(self) -> "KnowledgeGraph":
        """Copy with duplicate node ids and dangling edges removed."""
        seen: set[str] = set()
        nodes: list[KnowledgeGraphNode] = []
        for node in self.nodes:
            if node.id in seen:
                continue
            seen.add(node.id)
            nodes.append(node)
        edges = [e for e in self.edges if e.source in seen and e.target in seen]
        return KnowledgeGraph(nodes=nodes, edges=edges)

    @property
    def is_empty(self) -> bool:
        return not self.nodes


class PrelimsSection(CamelModel):
    mcqs: list[MCQ] = Field(default_factory=list)


class MainsSection(CamelModel):
    questions: list[MainsQuestion] = Field(default_factory=list)


class StructuredAnalysis(CamelModel):
    """Study material produced from one article."""

    summary: Optional[str] = Field(
        default=None, description="2-3 sentence plain-prose summary, no markup."
    )
    prelims: PrelimsSection = Field(default_factory=PrelimsSection)
    mains: Optional[MainsSection] = None
    knowledge_graph: Optional[KnowledgeGraph] = None
    syllabus_topic: Optional[str] = None
    tags: Optional[list[str]] = Field(default=None, description="2-3 topical tags.")
    quality_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    questions_count: Optional[int] = Field(default=None, ge=0)
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None
    cost: Optional[float] = None

    @property
    def mains_questions(self) -> list[MainsQuestion]:
        return self.mains.questions if self.mains else []

    def question_total(self) -> int:
        return len(self.prelims.mcqs) + len(self.mains_questions)


# ---------------------------------------------------------------------------
# Stage inputs
# ---------------------------------------------------------------------------


class RelevanceInput(BaseModel):
    source_text: str
    exam_type: str
    analysis_focus: str
    syllabus: SyllabusReference


class GenerationInput(BaseModel):
    source_text: str
    exam_type: str
    analysis_focus: str
    output_language: str
    syllabus: SyllabusReference
    syllabus_topic: str = Field(min_length=1)

    @field_validator("syllabus_topic")
    @classmethod
    def _topic_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("syllabus_topic must not be blank")
        return value


class VerificationInput(BaseModel):
    source_text: str
    exam_type: str
    output_language: str
    generated_analysis_json: str


# ---------------------------------------------------------------------------
# Stream chunks
# ---------------------------------------------------------------------------


class ChunkMetadata(CamelModel):
    syllabus_topic: Optional[str] = None
    quality_score: Optional[float] = None
    tags: list[str] = Field(default_factory=list)
    questions_count: int = 0
    total_tokens: int = 0
    cost: float = 0.0


class SummaryChunk(CamelModel):
    type: Literal["summary"] = "summary"
    data: str


class PrelimsChunk(CamelModel):
    type: Literal["prelims"] = "prelims"
    data: MCQ


class MainsChunk(CamelModel):
    type: Literal["mains"] = "mains"
    data: MainsQuestion


class KnowledgeGraphChunk(CamelModel):
    type: Literal["knowledgeGraph"] = "knowledgeGraph"
    data: KnowledgeGraph


class MetadataChunk(CamelModel):
    type: Literal["metadata"] = "metadata"
    data: ChunkMetadata


class ErrorChunk(CamelModel):
    type: Literal["error"] = "error"
    data: str


StreamChunk = Annotated[
    Union[SummaryChunk, PrelimsChunk, MainsChunk, KnowledgeGraphChunk, MetadataChunk, ErrorChunk],
    Field(discriminator="type"),
]

stream_chunk_adapter: TypeAdapter = TypeAdapter(StreamChunk)


# ---------------------------------------------------------------------------
# Batch result
# ---------------------------------------------------------------------------


class MarkdownRendering(CamelModel):
    analysis: str
    mains_questions: str
    summary: str


class AnalysisResult(CamelModel):
    analysis: StructuredAnalysis
    usage: UsageMetrics
    rendered: MarkdownRendering


__all__ = [
    "DEFAULT_EXAM_TYPE",
    "DEFAULT_OUTPUT_LANGUAGE",
    "AnalysisRequest",
    "SyllabusReference",
    "RelevanceAssessment",
    "QuestionType",
    "Option",
    "MCQ",
    "MainsQuestion",
    "NodeType",
    "KnowledgeGraphNode",
    "KnowledgeGraphEdge",
    "KnowledgeGraph",
    "PrelimsSection",
    "MainsSection",
    "StructuredAnalysis",
    "RelevanceInput",
    "GenerationInput",
    "VerificationInput",
    "ChunkMetadata",
    "SummaryChunk",
    "PrelimsChunk",
    "MainsChunk",
    "KnowledgeGraphChunk",
    "MetadataChunk",
    "ErrorChunk",
    "StreamChunk",
    "stream_chunk_adapter",
    "MarkdownRendering",
    "AnalysisResult",
]
