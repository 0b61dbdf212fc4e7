# -*- coding: utf-8 -*-
"""
Newspaper Analysis Pipeline
===========================

Runs one article through the analysis graph and emits the result as stream
chunks.

Usage:
    from src.agents.newspaper import AnalysisRequest, NewspaperAnalysisPipeline

    pipeline = NewspaperAnalysisPipeline()

    # Streaming
    async for chunk in pipeline.stream(request):
        send(chunk.model_dump(by_alias=True))

    # Batch
    result = await pipeline.analyze(request)
"""

from dataclasses import dataclass, field
from typing import Any, AsyncGenerator, Awaitable, Callable, Optional
import uuid

from src.logging import get_logger
from src.services.config import get_pipeline_settings
from src.services.prompt import normalize_language
from src.services.syllabus import SyllabusCache, get_syllabus_cache
from src.services.usage import CostRates, UsageAccountant

from .exceptions import AnalysisError
from .graph import PipelineStatus, build_analysis_graph
from .graph.nodes import emit_progress
from .markdown import render_markdown
from .schemas import AnalysisRequest, AnalysisResult, ErrorChunk, MetadataChunk, StreamChunk
from .streaming import emit_chunks, reconstruct_analysis

logger = get_logger("Newspaper.Pipeline")

ProgressCallback = Callable[[dict[str, Any]], Awaitable[None]]


@dataclass
class StageAgents:
    """The three stage agents a run is wired with."""

    relevance: Any
    generator: Any
    verifier: Any

    @classmethod
    def create(cls, language: str = "en", log_dir: Optional[str] = None) -> "StageAgents":
        from .agents import ContentGeneratorAgent, RelevanceAgent, VerificationAgent

        return cls(
            relevance=RelevanceAgent(language=language, log_dir=log_dir),
            generator=ContentGeneratorAgent(language=language, log_dir=log_dir),
            verifier=VerificationAgent(language=language, log_dir=log_dir),
        )


@dataclass
class _RunContext:
    run_id: str
    accountant: UsageAccountant
    state: dict[str, Any] = field(default_factory=dict)


class NewspaperAnalysisPipeline:
    """
    Relevance → generation → verification over one article.

    Stages run strictly in sequence. Chunks are emitted only after the graph
    has finished, so a consumer never sees partial content from a run that
    later fails.
    """

    def __init__(
        self,
        agents: Optional[StageAgents] = None,
        syllabus_cache: Optional[SyllabusCache] = None,
        rates: Optional[CostRates] = None,
        min_relevance_confidence: Optional[float] = None,
        log_dir: Optional[str] = None,
    ):
        """
        Args:
            agents: Stage agents; built from prompts and agents.yaml when omitted
            syllabus_cache: Syllabus source; the process-wide cache when omitted
            rates: Cost rates; from PipelineSettings when omitted
            min_relevance_confidence: Relevance confidence floor; from
                PipelineSettings when omitted (0 disables it)
            log_dir: Optional log directory for agent loggers
        """
        if rates is None or min_relevance_confidence is None:
            settings = get_pipeline_settings()
            if rates is None:
                rates = CostRates.from_settings(settings)
            if min_relevance_confidence is None:
                min_relevance_confidence = settings.min_relevance_confidence

        self.rates = rates
        self.min_relevance_confidence = min_relevance_confidence
        self.syllabus_cache = syllabus_cache or get_syllabus_cache()
        self._agents = agents
        self._agents_by_language: dict[str, StageAgents] = {}
        self._log_dir = log_dir
        self._graph = build_analysis_graph()

    def agents_for(self, request: AnalysisRequest) -> StageAgents:
        if self._agents is not None:
            return self._agents
        language = normalize_language(request.output_language)
        if language not in self._agents_by_language:
            self._agents_by_language[language] = StageAgents.create(
                language=language, log_dir=self._log_dir
            )
        return self._agents_by_language[language]

    async def _run(
        self,
        request: AnalysisRequest,
        ctx: _RunContext,
        progress_callback: Optional[ProgressCallback],
    ) -> AsyncGenerator[StreamChunk, None]:
        config = {
            "configurable": {
                "thread_id": ctx.run_id,
                "agents": self.agents_for(request),
                "accountant": ctx.accountant,
                "min_relevance_confidence": self.min_relevance_confidence,
                "progress_callback": progress_callback,
            }
        }

        logger.info(
            f"[{ctx.run_id}] Analysis started: exam='{request.exam_type}', "
            f"focus='{request.analysis_focus}', {len(request.source_text)} chars"
        )

        await emit_progress(config, "loading", 10, "Loading syllabus")
        syllabus = self.syllabus_cache.get_syllabus_content()

        ctx.state = await self._graph.ainvoke(
            {"request": request, "syllabus": syllabus, "status": PipelineStatus.INIT},
            config=config,
        )

        if ctx.state.get("error"):
            logger.warning(
                f"[{ctx.run_id}] Analysis stopped at {ctx.state.get('error_stage')}: "
                f"{ctx.state['error']}"
            )
            yield ErrorChunk(data=ctx.state["error"])
            return

        usage = ctx.accountant.metrics()
        logger.debug(f"[{ctx.run_id}] status={PipelineStatus.STREAMING.value}")

        completed = False
        try:
            for chunk in emit_chunks(ctx.state["analysis"], ctx.state.get("syllabus_topic"), usage):
                if isinstance(chunk, MetadataChunk):
                    # Reported before the terminal chunk; consumers may stop once they have it
                    await emit_progress(config, "complete", 100, "Analysis complete")
                    logger.success(
                        f"[{ctx.run_id}] Analysis complete "
                        f"({ctx.state.get('status', PipelineStatus.DONE).value}): "
                        f"{usage.total_tokens} tokens, cost {usage.cost:.2f}"
                    )
                    completed = True
                yield chunk
        finally:
            if not completed:
                logger.info(f"[{ctx.run_id}] Consumer closed the stream before completion")

    async def stream(
        self,
        request: AnalysisRequest,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> AsyncGenerator[StreamChunk, None]:
        """
        Analyze an article and yield its chunks.

        Args:
            request: Validated analysis request
            progress_callback: Optional async callable for progress events

        Yields:
            StreamChunk items; either content chunks ending in one metadata
            chunk, or a single error chunk

        Raises:
            SyllabusLoadError: If the syllabus files cannot be read
        """
        ctx = _RunContext(run_id=uuid.uuid4().hex[:8], accountant=UsageAccountant(self.rates))
        run = self._run(request, ctx, progress_callback)
        try:
            async for chunk in run:
                yield chunk
        finally:
            await run.aclose()

    async def analyze(
        self,
        request: AnalysisRequest,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> AnalysisResult:
        """
        Batch mode: consume the stream and return the assembled result.

        Raises:
            AnalysisError: If the run ended with an error chunk
            SyllabusLoadError: If the syllabus files cannot be read
        """
        ctx = _RunContext(run_id=uuid.uuid4().hex[:8], accountant=UsageAccountant(self.rates))
        chunks = [chunk async for chunk in self._run(request, ctx, progress_callback)]

        if chunks and isinstance(chunks[-1], ErrorChunk):
            raise AnalysisError(
                chunks[-1].data,
                stage=ctx.state.get("error_stage"),
                code=ctx.state.get("error_code"),
            )

        usage = ctx.accountant.metrics()
        analysis = reconstruct_analysis(chunks).model_copy(
            update={"input_tokens": usage.input_tokens, "output_tokens": usage.output_tokens}
        )
        rendered = ctx.state.get("rendered") or render_markdown(analysis)
        return AnalysisResult(analysis=analysis, usage=usage, rendered=rendered)


__all__ = ["NewspaperAnalysisPipeline", "StageAgents", "ProgressCallback"]
