# -*- coding: utf-8 -*-
"""
Quality Scoring
===============

Pattern-based scoring of generated material against UPSC conventions. Used by
the finalize step when the editor did not assign a ``qualityScore`` (for
example on verification fallback).

Every score is in [0, 1].
"""

from dataclasses import dataclass
import re
from typing import Optional

from .schemas import MCQ, KnowledgeGraph, MainsQuestion, NodeType, StructuredAnalysis

# Prelims question shapes seen in past papers
_MULTI_STATEMENT_RE = re.compile(
    r"which\s+of\s+the\s+(following\s+)?(statements?\s+)?(given\s+above\s+)?is/are\s+correct",
    re.IGNORECASE,
)
_NUMBERED_STATEMENT_RE = re.compile(r"^\s*\d+\.\s+", re.MULTILINE)
_STATEMENT_OPTION_RE = re.compile(
    r"^(\([a-d]\)\s+)?(only\s+)?\d+(\s*(,|and)\s*\d+)*(\s+only)?$", re.IGNORECASE
)
_ASSERTION_LABEL_RE = re.compile(r"statement-i|statement-ii", re.IGNORECASE)
_ASSERTION_QUESTION_RE = re.compile(
    r"which\s+one\s+of\s+the\s+following\s+is\s+correct\s+in\s+respect\s+of\s+the\s+above\s+statements",
    re.IGNORECASE,
)
_MATCHING_QUESTION_RE = re.compile(
    r"how\s+many\s+pairs?\s+given\s+above\s+(is|are)\s+correctly\s+matched", re.IGNORECASE
)
_PAIR_LINE_RE = re.compile(r"^\s*\d+\.\s+.+\s*:\s*.+$", re.MULTILINE)

MAINS_DIRECTIVES = (
    "discuss",
    "critically analyse",
    "critically analyze",
    "examine",
    "evaluate",
    "comment",
    "bring out",
    "highlight",
    "assess",
    "review",
    "elucidate",
)

SYLLABUS_AREAS = (
    "indian heritage and culture",
    "history and geography of the world and society",
    "indian society",
    "governance, constitution, polity, social justice",
    "international relations",
    "technology, economic development",
    "ethics, integrity, and aptitude",
)

SYLLABUS_KEYWORDS = (
    "governance",
    "constitution",
    "polity",
    "international relations",
    "economy",
    "environment",
    "technology",
    "security",
    "ethics",
    "culture",
    "heritage",
    "society",
    "geography",
    "history",
)

_REASONING_WORDS = ("because", "therefore", "thus", "hence")
_REFERENCE_WORDS = ("Article", "Constitution", "Act", "Committee")
_UPSC_TERMS = ("governance", "polity", "democracy", "federalism", "fundamental rights")
_RELEVANT_NODE_TYPES = {NodeType.ORGANIZATION, NodeType.POLICY, NodeType.LOCATION, NodeType.PERSON}

# (min, max, optimal) difficulty seen in past papers
_DIFFICULTY_BANDS = {"prelims": (6, 9, 7.5), "mains": (7, 10, 8.0)}


@dataclass(frozen=True)
class QuestionQuality:
    pattern: float
    difficulty: float
    explanation: float
    syllabus: float
    overall: float


def _word_count(text: str) -> int:
    return len(text.split())


def difficulty_score(difficulty: Optional[int], exam: str) -> float:
    if not difficulty:
        return 0.0
    low, high, optimal = _DIFFICULTY_BANDS[exam]
    if difficulty < low or difficulty > high:
        return 0.3
    return max(0.0, 1 - abs(difficulty - optimal) / 3)


def syllabus_score(topic: Optional[str]) -> float:
    if not topic:
        return 0.0
    lowered = topic.lower()
    if any(area in lowered or lowered in area for area in SYLLABUS_AREAS):
        return 1.0
    return 0.7 if any(keyword in lowered for keyword in SYLLABUS_KEYWORDS) else 0.3


def mcq_pattern_score(mcq: MCQ) -> float:
    score = 0.0
    question = mcq.question

    if _MULTI_STATEMENT_RE.search(question):
        score += 0.3
        if _NUMBERED_STATEMENT_RE.search(question):
            score += 0.2
        if any(_STATEMENT_OPTION_RE.match(option.text.strip()) for option in mcq.options):
            score += 0.2

    if _ASSERTION_LABEL_RE.search(question):
        score += 0.3
        if _ASSERTION_QUESTION_RE.search(question):
            score += 0.4

    if _MATCHING_QUESTION_RE.search(question):
        score += 0.4
        if _PAIR_LINE_RE.search(question):
            score += 0.3

    if len(mcq.options) == 4:
        score += 0.1
    if sum(1 for option in mcq.options if option.correct) == 1:
        score += 0.1

    return min(score, 1.0)


def explanation_score(explanation: Optional[str]) -> float:
    if not explanation:
        return 0.0
    score = 0.0
    if 30 <= _word_count(explanation) <= 150:
        score += 0.3
    if any(word in explanation for word in _REASONING_WORDS):
        score += 0.2
    if any(word in explanation for word in _REFERENCE_WORDS):
        score += 0.3
    if any(term in explanation.lower() for term in _UPSC_TERMS):
        score += 0.2
    return min(score, 1.0)


def score_mcq(mcq: MCQ, syllabus_topic: Optional[str]) -> QuestionQuality:
    pattern = mcq_pattern_score(mcq)
    difficulty = difficulty_score(mcq.difficulty, "prelims")
    explanation = explanation_score(mcq.explanation)
    syllabus = syllabus_score(syllabus_topic)
    return QuestionQuality(
        pattern=pattern,
        difficulty=difficulty,
        explanation=explanation,
        syllabus=syllabus,
        overall=pattern * 0.3 + difficulty * 0.2 + explanation * 0.25 + syllabus * 0.25,
    )


def mains_pattern_score(question: MainsQuestion) -> float:
    score = 0.0
    text = question.question
    lowered = text.lower()

    directive = (question.directive or "").lower()
    if any(d in lowered or d in directive for d in MAINS_DIRECTIVES):
        score += 0.4
    if 10 <= _word_count(text) <= 50:
        score += 0.2
    if any(word in lowered for word in ("india", "government", "policy", "development")):
        score += 0.2

    guidance = (question.guidance or "").lower()
    if all(part in guidance for part in ("introduction", "body", "conclusion")):
        score += 0.2

    return min(score, 1.0)


def guidance_score(guidance: Optional[str]) -> float:
    if not guidance:
        return 0.0
    lowered = guidance.lower()
    score = 0.0
    if any(s in lowered for s in ("introduction", "body", "conclusion", "dimension", "blueprint")):
        score += 0.4
    if "example" in lowered or "case study" in lowered:
        score += 0.2
    if "argument" in lowered or "viewpoint" in lowered:
        score += 0.2
    if "data" in lowered or "statistic" in lowered:
        score += 0.2
    return min(score, 1.0)


def score_mains_question(question: MainsQuestion, syllabus_topic: Optional[str]) -> QuestionQuality:
    pattern = mains_pattern_score(question)
    difficulty = difficulty_score(question.difficulty, "mains")
    guidance = guidance_score(question.guidance)
    syllabus = syllabus_score(syllabus_topic)
    return QuestionQuality(
        pattern=pattern,
        difficulty=difficulty,
        explanation=guidance,
        syllabus=syllabus,
        overall=pattern * 0.35 + difficulty * 0.2 + guidance * 0.25 + syllabus * 0.2,
    )


def score_knowledge_graph(graph: Optional[KnowledgeGraph]) -> float:
    """
    Score entity diversity, exam-relevant entity types, edge labels and
    connectivity. An empty or missing graph scores 0.
    """
    if graph is None or graph.is_empty:
        return 0.0

    score = 0.0
    types = {node.type for node in graph.nodes}
    if len(types) >= 3:
        score += 0.3
    if types & _RELEVANT_NODE_TYPES:
        score += 0.3

    if graph.edges:
        avg_label = sum(len(edge.label) for edge in graph.edges) / len(graph.edges)
        if 10 <= avg_label <= 30:
            score += 0.2
        linked = {edge.source for edge in graph.edges} | {edge.target for edge in graph.edges}
        if all(node.id in linked for node in graph.nodes):
            score += 0.2

    return min(score, 1.0)


def overall_quality(
    prelims: list[QuestionQuality],
    mains: list[QuestionQuality],
    graph_score: float,
) -> float:
    """Weighted mean over the parts that are present: prelims 0.4, mains 0.4, graph 0.2."""
    weighted = 0.0
    total = 0.0
    if prelims:
        weighted += sum(q.overall for q in prelims) / len(prelims) * 0.4
        total += 0.4
    if mains:
        weighted += sum(q.overall for q in mains) / len(mains) * 0.4
        total += 0.4
    if graph_score > 0:
        weighted += graph_score * 0.2
        total += 0.2
    return weighted / total if total else 0.0


def score_analysis(analysis: StructuredAnalysis, syllabus_topic: Optional[str] = None) -> float:
    """Overall quality of ``analysis``, rounded to 2 places."""
    topic = syllabus_topic or analysis.syllabus_topic
    prelims = [score_mcq(mcq, topic) for mcq in analysis.prelims.mcqs]
    mains = [score_mains_question(q, topic) for q in analysis.mains_questions]
    return round(overall_quality(prelims, mains, score_knowledge_graph(analysis.knowledge_graph)), 2)


__all__ = [
    "QuestionQuality",
    "score_mcq",
    "score_mains_question",
    "score_knowledge_graph",
    "overall_quality",
    "score_analysis",
]
