"""
Newspaper Analysis API

- POST /analyze         batch analysis, JSON response
- POST /analyze/stream  NDJSON, one chunk per line
- WS   /ws              progress events and chunks over a WebSocket
"""

from datetime import datetime, timezone
import json
from typing import Any, AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from src.agents.base_agent import BaseAgent
from src.agents.newspaper import AnalysisError, AnalysisRequest, NewspaperAnalysisPipeline
from src.agents.newspaper.schemas import ErrorChunk
from src.api.dependencies.pipeline import get_analysis_pipeline
from src.logging import get_logger
from src.services.config import load_config_with_main

config = load_config_with_main("newspaper_config.yaml")
log_dir = config.get("logging", {}).get("log_dir")
logger = get_logger("NewspaperAPI", log_dir=log_dir)

router = APIRouter()

GENERIC_ERROR_MESSAGE = "Unable to analyze article. Please try again with valid article content."


def _request_metadata(request: AnalysisRequest) -> dict[str, Any]:
    return {
        "examType": request.exam_type,
        "analysisFocus": request.analysis_focus,
        "processedAt": datetime.now(timezone.utc).isoformat(),
        "articleLength": len(request.source_text),
    }


def _status_for(error: AnalysisError) -> int:
    if error.code == "irrelevant":
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    return status.HTTP_502_BAD_GATEWAY


@router.post("/analyze")
async def analyze_article(
    payload: AnalysisRequest,
    pipeline: NewspaperAnalysisPipeline = Depends(get_analysis_pipeline),
):
    """Analyze an article and return the complete result."""
    try:
        result = await pipeline.analyze(payload)
    except AnalysisError as exc:
        raise HTTPException(status_code=_status_for(exc), detail=exc.to_dict()) from exc
    except Exception as exc:
        logger.exception(f"Article analysis failed: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERIC_ERROR_MESSAGE
        ) from exc

    return {
        **result.model_dump(by_alias=True, mode="json"),
        "metadata": _request_metadata(payload),
    }


async def _ndjson_lines(
    pipeline: NewspaperAnalysisPipeline, payload: AnalysisRequest
) -> AsyncIterator[str]:
    stream = pipeline.stream(payload)
    try:
        async for chunk in stream:
            yield chunk.model_dump_json(by_alias=True) + "\n"
    except Exception as exc:
        logger.exception(f"Streaming analysis failed: {exc}")
        yield ErrorChunk(data=GENERIC_ERROR_MESSAGE).model_dump_json(by_alias=True) + "\n"
    finally:
        await stream.aclose()


@router.post("/analyze/stream")
async def stream_article_analysis(
    payload: AnalysisRequest,
    pipeline: NewspaperAnalysisPipeline = Depends(get_analysis_pipeline),
):
    """Analyze an article and stream chunks as newline-delimited JSON."""
    return StreamingResponse(
        _ndjson_lines(pipeline, payload),
        media_type="application/x-ndjson",
    )


@router.websocket("/ws")
async def websocket_analyze(
    websocket: WebSocket,
    pipeline: NewspaperAnalysisPipeline = Depends(get_analysis_pipeline),
):
    """
    WebSocket endpoint for article analysis.

    The client sends one AnalysisRequest JSON message. The server replies with
    progress messages, one message per chunk, and a final ``complete`` message.
    """
    await websocket.accept()

    async def progress_callback(event: dict):
        await websocket.send_json(event)

    try:
        data = await websocket.receive_json()
        try:
            request = AnalysisRequest.model_validate(data)
        except ValidationError as exc:
            await websocket.send_json(
                {"type": "error", "data": "Invalid request", "details": json.loads(exc.json(include_url=False))}
            )
            return

        failed = False
        async for chunk in pipeline.stream(request, progress_callback=progress_callback):
            failed = failed or chunk.type == "error"
            await websocket.send_json(chunk.model_dump(by_alias=True, mode="json"))

        await websocket.send_json({"type": "complete", "success": not failed})
        BaseAgent.print_stats("newspaper")

    except WebSocketDisconnect:
        logger.debug("Client disconnected")
    except Exception as exc:
        logger.exception(f"WebSocket analysis failed: {exc}")
        try:
            await websocket.send_json({"type": "error", "data": GENERIC_ERROR_MESSAGE})
        except (RuntimeError, WebSocketDisconnect, ConnectionError):
            pass
    finally:
        try:
            await websocket.close()
        except (RuntimeError, WebSocketDisconnect, ConnectionError):
            pass
