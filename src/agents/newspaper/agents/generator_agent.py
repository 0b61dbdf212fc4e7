# -*- coding: utf-8 -*-
"""
ContentGeneratorAgent - produces the study material for a relevant article.

Generates Prelims MCQs (multiple-statement, assertion-reason, matching-pairs and
direct-recall patterns), Mains questions with answer guidance, a knowledge
graph of the article's entities and topical tags, all anchored to the syllabus
topic identified by the relevance stage.
"""

from typing import Optional

from src.agents.base_agent import BaseAgent
from src.services.llm import StructuredCompletion

from ..schemas import AnalysisRequest, GenerationInput, StructuredAnalysis, SyllabusReference


class ContentGeneratorAgent(BaseAgent):
    def __init__(self, language: str = "en", log_dir: Optional[str] = None):
        super().__init__(
            module_name="newspaper",
            agent_name="content_generator",
            language=language,
            log_dir=log_dir,
        )

    async def process(
        self,
        request: AnalysisRequest,
        syllabus: SyllabusReference,
        syllabus_topic: str,
    ) -> StructuredCompletion:
        """
        Generate the analysis.

        Args:
            request: The analysis request
            syllabus: Syllabus reference texts
            syllabus_topic: Topic identified by the relevance stage (non-empty)

        Returns:
            StructuredCompletion[StructuredAnalysis]

        Raises:
            pydantic.ValidationError: If syllabus_topic is empty
        """
        payload = GenerationInput(
            source_text=request.source_text,
            exam_type=request.exam_type,
            analysis_focus=request.analysis_focus,
            output_language=request.output_language,
            syllabus=syllabus,
            syllabus_topic=syllabus_topic,
        )

        system_prompt = self.require_prompt("system").format(
            output_language=payload.output_language
        )
        user_prompt = self.require_prompt("user_template").format(
            exam_type=payload.exam_type,
            analysis_focus=payload.analysis_focus,
            syllabus_topic=payload.syllabus_topic,
            source_text=payload.source_text,
            prelims_syllabus=payload.syllabus.prelims_text,
            mains_syllabus=payload.syllabus.mains_text,
        )

        return await self.call_llm_structured(
            user_prompt=user_prompt,
            system_prompt=system_prompt,
            schema=StructuredAnalysis,
            stage="generation",
        )
