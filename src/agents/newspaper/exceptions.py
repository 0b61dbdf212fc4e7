# -*- coding: utf-8 -*-
"""
Newspaper Analysis Errors
=========================
"""

from typing import Optional

IRRELEVANT_MESSAGE = "Article not suitable for UPSC question generation"
GENERATION_FAILED_MESSAGE = "Content generation failed. Please try again with a different article."


class AnalysisError(Exception):
    """
    Terminal failure of an analysis run.

    Attributes:
        message: Human-readable message, safe to show to end users
        stage: Pipeline stage that failed ("relevance" or "generation")
        code: Machine-readable reason ("irrelevant" or "stage_failed")
    """

    def __init__(self, message: str, stage: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.code = code

    def to_dict(self) -> dict:
        return {"error": self.message, "stage": self.stage, "code": self.code}


__all__ = ["AnalysisError", "IRRELEVANT_MESSAGE", "GENERATION_FAILED_MESSAGE"]
