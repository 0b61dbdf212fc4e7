# -*- coding: utf-8 -*-
"""
VerificationAgent - re-checks generated content against the source article.
"""

from typing import Optional

from src.agents.base_agent import BaseAgent
from src.services.llm import StructuredCompletion

from ..schemas import AnalysisRequest, StructuredAnalysis, VerificationInput


class VerificationAgent(BaseAgent):
    def __init__(self, language: str = "en", log_dir: Optional[str] = None):
        super().__init__(
            module_name="newspaper",
            agent_name="verification_agent",
            language=language,
            log_dir=log_dir,
        )

    @staticmethod
    def serialize_analysis(analysis: StructuredAnalysis) -> str:
        """Generator output as the camelCase JSON the editor receives."""
        return analysis.model_dump_json(by_alias=True, exclude_none=True, indent=2)

    async def process(
        self, request: AnalysisRequest, analysis: StructuredAnalysis
    ) -> StructuredCompletion:
        """
        Return a corrected copy of ``analysis``.

        Returns:
            StructuredCompletion[StructuredAnalysis]
        """
        payload = VerificationInput(
            source_text=request.source_text,
            exam_type=request.exam_type,
            output_language=request.output_language,
            generated_analysis_json=self.serialize_analysis(analysis),
        )

        system_prompt = self.require_prompt("system").format(
            output_language=payload.output_language
        )
        user_prompt = self.require_prompt("user_template").format(
            exam_type=payload.exam_type,
            source_text=payload.source_text,
            generated_analysis_json=payload.generated_analysis_json,
        )

        return await self.call_llm_structured(
            user_prompt=user_prompt,
            system_prompt=system_prompt,
            schema=StructuredAnalysis,
            stage="verification",
        )
