from typing import Any, Optional

import pytest

from src.agents.newspaper.pipeline import NewspaperAnalysisPipeline, StageAgents
from src.agents.newspaper.schemas import (
    MCQ,
    AnalysisRequest,
    KnowledgeGraph,
    KnowledgeGraphEdge,
    KnowledgeGraphNode,
    MainsQuestion,
    MainsSection,
    Option,
    PrelimsSection,
    RelevanceAssessment,
    StructuredAnalysis,
)
from src.services.llm import StructuredCompletion, TokenUsage
from src.services.syllabus import SyllabusReference
from src.services.usage import CostRates

ARTICLE = (
    "The Reserve Bank of India kept the repo rate unchanged at 6.5 percent, citing "
    "sticky food inflation and steady growth. The Monetary Policy Committee voted "
    "five to one and retained its stance of withdrawal of accommodation."
)


def make_mcq(question: str, difficulty: int = 6) -> MCQ:
    return MCQ(
        question=question,
        subject="Economy",
        explanation="The MPC sets the repo rate.",
        difficulty=difficulty,
        options=[
            Option(text="Statement 1 only", correct=True),
            Option(text="Statement 2 only"),
            Option(text="Both 1 and 2"),
            Option(text="Neither 1 nor 2"),
        ],
    )


def make_analysis(**overrides: Any) -> StructuredAnalysis:
    values: dict[str, Any] = dict(
        summary="The RBI held the repo rate at 6.5 percent.",
        prelims=PrelimsSection(
            mcqs=[make_mcq("Which body sets the repo rate?"), make_mcq("What is the repo rate?", 4)]
        ),
        mains=MainsSection(
            questions=[
                MainsQuestion(
                    question="Critically analyse the role of the MPC in inflation targeting.",
                    guidance="- Mandate\n- Record\n- Limits",
                    difficulty=7,
                    directive="Critically analyse",
                )
            ]
        ),
        knowledge_graph=KnowledgeGraph(
            nodes=[
                KnowledgeGraphNode(id="rbi", label="RBI", type="Organization"),
                KnowledgeGraphNode(id="repo", label="Repo rate", type="Concept"),
            ],
            edges=[KnowledgeGraphEdge(source="rbi", target="repo", label="sets")],
        ),
        tags=["Monetary Policy", "RBI"],
        quality_score=0.9,
    )
    values.update(overrides)
    return StructuredAnalysis(**values)


class FakeStageAgent:
    def __init__(self, output: Any = None, usage: Optional[TokenUsage] = None, error: Exception | None = None):
        self.output = output
        self.usage = usage
        self.error = error
        self.calls: list[tuple] = []

    async def process(self, *args: Any) -> StructuredCompletion:
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        return StructuredCompletion(output=self.output, usage=self.usage)


class FakeSyllabusCache:
    def __init__(self):
        self.calls = 0

    def get_syllabus_content(self) -> SyllabusReference:
        self.calls += 1
        return SyllabusReference(prelims_text="Prelims syllabus", mains_text="Mains syllabus")


@pytest.fixture
def request_model() -> AnalysisRequest:
    return AnalysisRequest(source_text=ARTICLE, analysis_focus="Monetary policy")


@pytest.fixture
def relevant() -> FakeStageAgent:
    return FakeStageAgent(
        output=RelevanceAssessment(
            is_relevant=True,
            syllabus_topic="GS3: Indian Economy - Monetary Policy",
            reasoning="Covers RBI policy.",
            confidence_score=0.92,
        ),
        usage=TokenUsage(input_tokens=100, output_tokens=10),
    )


@pytest.fixture
def generator() -> FakeStageAgent:
    return FakeStageAgent(output=make_analysis(), usage=TokenUsage(input_tokens=1000, output_tokens=500))


@pytest.fixture
def verifier() -> FakeStageAgent:
    return FakeStageAgent(
        output=make_analysis(summary="Verified summary."),
        usage=TokenUsage(input_tokens=800, output_tokens=400),
    )


@pytest.fixture
def build_pipeline():
    def _build(relevance, generator, verifier, min_relevance_confidence: float = 0.0):
        return NewspaperAnalysisPipeline(
            agents=StageAgents(relevance=relevance, generator=generator, verifier=verifier),
            syllabus_cache=FakeSyllabusCache(),
            rates=CostRates(),
            min_relevance_confidence=min_relevance_confidence,
        )

    return _build


@pytest.fixture
def stage_agent():
    return FakeStageAgent


@pytest.fixture
def analysis_factory():
    return make_analysis
