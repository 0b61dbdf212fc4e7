# -*- coding: utf-8 -*-
"""
RelevanceAgent - decides whether an article maps to the UPSC syllabus.
"""

from typing import Optional

from src.agents.base_agent import BaseAgent
from src.services.llm import StructuredCompletion

from ..schemas import AnalysisRequest, RelevanceAssessment, RelevanceInput, SyllabusReference


class RelevanceAgent(BaseAgent):
    def __init__(self, language: str = "en", log_dir: Optional[str] = None):
        super().__init__(
            module_name="newspaper",
            agent_name="relevance_agent",
            language=language,
            log_dir=log_dir,
        )

    async def process(
        self, request: AnalysisRequest, syllabus: SyllabusReference
    ) -> StructuredCompletion:
        """
        Classify the article.

        Returns:
            StructuredCompletion[RelevanceAssessment]
        """
        payload = RelevanceInput(
            source_text=request.source_text,
            exam_type=request.exam_type,
            analysis_focus=request.analysis_focus,
            syllabus=syllabus,
        )

        user_prompt = self.require_prompt("user_template").format(
            exam_type=payload.exam_type,
            analysis_focus=payload.analysis_focus,
            source_text=payload.source_text,
            prelims_syllabus=payload.syllabus.prelims_text,
            mains_syllabus=payload.syllabus.mains_text,
        )

        return await self.call_llm_structured(
            user_prompt=user_prompt,
            system_prompt=self.require_prompt("system"),
            schema=RelevanceAssessment,
            stage="relevance",
        )
