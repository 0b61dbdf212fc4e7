"""
Newspaper Analysis Agents

- RelevanceAgent: syllabus relevance classification
- ContentGeneratorAgent: MCQs, Mains questions, knowledge graph and tags
- VerificationAgent: grounding and format re-check of generated content
"""

from .generator_agent import ContentGeneratorAgent
from .relevance_agent import RelevanceAgent
from .verification_agent import VerificationAgent

__all__ = [
    "RelevanceAgent",
    "ContentGeneratorAgent",
    "VerificationAgent",
]
