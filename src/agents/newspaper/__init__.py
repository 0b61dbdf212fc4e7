"""
Newspaper Analysis

Turns a news article into UPSC study material through three agents:
- RelevanceAgent: syllabus relevance gate
- ContentGeneratorAgent: MCQs, Mains questions, knowledge graph, tags
- VerificationAgent: grounding and format re-check

Orchestrated by a LangGraph workflow (src/agents/newspaper/graph) and exposed
through NewspaperAnalysisPipeline (streaming and batch modes).
"""

from .exceptions import AnalysisError
from .pipeline import NewspaperAnalysisPipeline, StageAgents
from .schemas import AnalysisRequest, AnalysisResult, StreamChunk, StructuredAnalysis

__all__ = [
    "AnalysisError",
    "AnalysisRequest",
    "AnalysisResult",
    "NewspaperAnalysisPipeline",
    "StageAgents",
    "StreamChunk",
    "StructuredAnalysis",
]
