import pytest

from src.agents.newspaper.quality import (
    overall_quality,
    score_analysis,
    score_knowledge_graph,
    score_mains_question,
    score_mcq,
)
from src.agents.newspaper.schemas import (
    MCQ,
    KnowledgeGraph,
    KnowledgeGraphEdge,
    KnowledgeGraphNode,
    MainsQuestion,
    Option,
)

TOPIC = "GS2: Governance, Constitution, Polity, Social Justice"


def _options(*texts: str) -> list[Option]:
    return [Option(text=t, correct=(i == 0)) for i, t in enumerate(texts)]


def test_multiple_statement_mcq_scores_above_plain_question():
    upsc_style = MCQ(
        question=(
            "Consider the following statements:\n"
            "1. The MPC has six members.\n"
            "2. The Governor has a casting vote.\n"
            "Which of the statements given above is/are correct?"
        ),
        difficulty=7,
        options=_options("1 only", "2 only", "Both 1 and 2", "Neither 1 nor 2"),
    )
    plain = MCQ(question="What is the repo rate?", difficulty=3)

    upsc = score_mcq(upsc_style, TOPIC)
    basic = score_mcq(plain, TOPIC)

    assert upsc.pattern == pytest.approx(0.9)
    assert basic.pattern == 0.0
    assert upsc.overall > basic.overall


def test_difficulty_outside_band_is_penalised():
    in_band = score_mcq(MCQ(question="q", difficulty=7), None)
    out_of_band = score_mcq(MCQ(question="q", difficulty=2), None)
    missing = score_mcq(MCQ(question="q"), None)

    assert in_band.difficulty > out_of_band.difficulty == 0.3
    assert missing.difficulty == 0.0


def test_syllabus_alignment_levels():
    assert score_mcq(MCQ(question="q"), TOPIC).syllabus == 1.0
    assert score_mcq(MCQ(question="q"), "GS3: Indian Economy").syllabus == 0.7
    assert score_mcq(MCQ(question="q"), "Cricket").syllabus == 0.3
    assert score_mcq(MCQ(question="q"), None).syllabus == 0.0


def test_mains_directive_and_structure_raise_score():
    strong = MainsQuestion(
        question="Critically analyse the role of the Monetary Policy Committee in India's inflation targeting framework.",
        guidance="Introduction: mandate. Body: arguments, data on inflation. Conclusion: way forward.",
        difficulty=8,
    )
    weak = MainsQuestion(question="Write about the RBI.")

    assert score_mains_question(strong, TOPIC).pattern == pytest.approx(1.0)
    assert score_mains_question(strong, TOPIC).overall > score_mains_question(weak, TOPIC).overall


def test_knowledge_graph_connectivity_and_diversity():
    graph = KnowledgeGraph(
        nodes=[
            KnowledgeGraphNode(id="rbi", label="RBI", type="Organization"),
            KnowledgeGraphNode(id="repo", label="Repo rate", type="Concept"),
            KnowledgeGraphNode(id="mumbai", label="Mumbai", type="Location"),
        ],
        edges=[
            KnowledgeGraphEdge(source="rbi", target="repo", label="sets the policy rate"),
            KnowledgeGraphEdge(source="rbi", target="mumbai", label="headquartered in"),
        ],
    )
    isolated = KnowledgeGraph(nodes=graph.nodes, edges=graph.edges[:1])

    assert score_knowledge_graph(graph) == pytest.approx(1.0)
    assert score_knowledge_graph(isolated) == pytest.approx(0.8)
    assert score_knowledge_graph(KnowledgeGraph()) == 0.0
    assert score_knowledge_graph(None) == 0.0


def test_overall_quality_weights_present_parts_only():
    mcq = score_mcq(MCQ(question="q", difficulty=7), TOPIC)
    assert overall_quality([mcq], [], 0.0) == pytest.approx(mcq.overall)
    assert overall_quality([], [], 0.0) == 0.0


def test_score_analysis_is_bounded_and_rounded(analysis_factory):
    score = score_analysis(analysis_factory(quality_score=None), "GS3: Indian Economy")
    assert 0.0 < score <= 1.0
    assert score == round(score, 2)
