from __future__ import annotations

import json
from typing import Any

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from src.agents.newspaper import AnalysisError
from src.agents.newspaper.exceptions import GENERATION_FAILED_MESSAGE
from src.agents.newspaper.markdown import render_markdown
from src.agents.newspaper.schemas import (
    MCQ,
    AnalysisResult,
    ErrorChunk,
    MainsQuestion,
    MainsSection,
    Option,
    PrelimsSection,
    StructuredAnalysis,
)
from src.agents.newspaper.streaming import emit_chunks
from src.api.dependencies.pipeline import get_analysis_pipeline
from src.api.routers import newspaper
from src.services.usage import UsageMetrics

ARTICLE = (
    "The Union Cabinet approved the National Green Hydrogen Mission with an outlay "
    "for electrolyser manufacturing, pilot projects and research, aiming at five "
    "million tonnes of annual production capacity by 2030."
)
PAYLOAD = {"sourceText": ARTICLE, "analysisFocus": "Energy security"}
USAGE = UsageMetrics(input_tokens=2000, output_tokens=900, total_tokens=2900, cost=0.1)


def _analysis() -> StructuredAnalysis:
    return StructuredAnalysis(
        summary="Cabinet approved the Green Hydrogen Mission.",
        prelims=PrelimsSection(
            mcqs=[
                MCQ(
                    question="Which ministry anchors the mission?",
                    difficulty=5,
                    options=[
                        Option(text="MNRE", correct=True),
                        Option(text="MoP"),
                        Option(text="MoPNG"),
                        Option(text="MoEFCC"),
                    ],
                )
            ]
        ),
        mains=MainsSection(questions=[MainsQuestion(question="Discuss the mission's targets.")]),
        syllabus_topic="GS3: Energy",
        tags=["Energy"],
    )


class FakePipeline:
    def __init__(self, error: Exception | None = None, chunks: list[Any] | None = None):
        self.error = error
        self.chunks = chunks
        self.requests: list[Any] = []

    async def analyze(self, request, progress_callback=None):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        analysis = _analysis()
        return AnalysisResult(analysis=analysis, usage=USAGE, rendered=render_markdown(analysis))

    async def stream(self, request, progress_callback=None):
        self.requests.append(request)
        if progress_callback is not None:
            await progress_callback({"type": "progress", "stage": "relevance", "progress": 25, "message": "x"})
        for chunk in self.chunks if self.chunks is not None else emit_chunks(_analysis(), "GS3: Energy", USAGE):
            yield chunk


def _client(pipeline: FakePipeline) -> TestClient:
    app = FastAPI()
    app.include_router(newspaper.router, prefix="/api/v1/newspaper")
    app.dependency_overrides[get_analysis_pipeline] = lambda: pipeline
    return TestClient(app)


def test_analyze_returns_result_and_metadata():
    pipeline = FakePipeline()
    response = _client(pipeline).post("/api/v1/newspaper/analyze", json=PAYLOAD)

    assert response.status_code == 200
    body = response.json()
    assert body["analysis"]["summary"] == "Cabinet approved the Green Hydrogen Mission."
    assert body["usage"]["totalTokens"] == 2900
    assert "<mcq " in body["rendered"]["analysis"]
    assert body["metadata"]["examType"] == "UPSC Civil Services"
    assert body["metadata"]["articleLength"] == len(ARTICLE)
    assert pipeline.requests[0].analysis_focus == "Energy security"


def test_analyze_rejects_short_article():
    response = _client(FakePipeline()).post(
        "/api/v1/newspaper/analyze", json={"sourceText": "short", "analysisFocus": "x"}
    )
    assert response.status_code == 422


@pytest.mark.parametrize(
    "error, status_code",
    [
        (AnalysisError("Not exam material.", stage="relevance", code="irrelevant"), 422),
        (AnalysisError(GENERATION_FAILED_MESSAGE, stage="generation", code="stage_failed"), 502),
    ],
)
def test_analyze_maps_analysis_errors(error, status_code):
    response = _client(FakePipeline(error=error)).post("/api/v1/newspaper/analyze", json=PAYLOAD)

    assert response.status_code == status_code
    assert response.json()["detail"] == error.to_dict()


def test_analyze_hides_unexpected_errors():
    pipeline = FakePipeline(error=RuntimeError("stack trace with secrets"))
    response = _client(pipeline).post("/api/v1/newspaper/analyze", json=PAYLOAD)

    assert response.status_code == 500
    assert response.json()["detail"] == newspaper.GENERIC_ERROR_MESSAGE


def test_stream_emits_ndjson_lines():
    response = _client(FakePipeline()).post("/api/v1/newspaper/analyze/stream", json=PAYLOAD)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/x-ndjson")
    lines = [json.loads(line) for line in response.text.splitlines() if line]
    assert [line["type"] for line in lines] == ["summary", "prelims", "mains", "metadata"]
    assert lines[-1]["data"]["questionsCount"] == 2


def test_stream_error_run_is_single_error_line():
    pipeline = FakePipeline(chunks=[ErrorChunk(data="Not exam material.")])
    response = _client(pipeline).post("/api/v1/newspaper/analyze/stream", json=PAYLOAD)

    lines = [json.loads(line) for line in response.text.splitlines() if line]
    assert lines == [{"type": "error", "data": "Not exam material."}]


def test_websocket_sends_progress_chunks_and_complete():
    with _client(FakePipeline()).websocket_connect("/api/v1/newspaper/ws") as ws:
        ws.send_json(PAYLOAD)
        messages = [ws.receive_json() for _ in range(6)]

    assert messages[0]["type"] == "progress"
    assert [m["type"] for m in messages[1:5]] == ["summary", "prelims", "mains", "metadata"]
    assert messages[-1] == {"type": "complete", "success": True}


def test_websocket_rejects_invalid_request():
    with _client(FakePipeline()).websocket_connect("/api/v1/newspaper/ws") as ws:
        ws.send_json({"sourceText": "short"})
        message = ws.receive_json()

    assert message["type"] == "error"
    assert message["data"] == "Invalid request"
    assert message["details"]


def test_unavailable_pipeline_returns_503(monkeypatch: pytest.MonkeyPatch):
    from src.api.dependencies import pipeline as pipeline_dependency

    def broken():
        raise RuntimeError("syllabus missing")

    monkeypatch.setattr(pipeline_dependency, "_build_analysis_pipeline", broken)

    app = FastAPI()
    app.include_router(newspaper.router, prefix="/api/v1/newspaper")
    response = TestClient(app).post("/api/v1/newspaper/analyze", json=PAYLOAD)

    assert response.status_code == 503
