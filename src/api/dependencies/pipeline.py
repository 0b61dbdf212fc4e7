from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException, status

from src.agents.newspaper import NewspaperAnalysisPipeline
from src.services.config import load_config_with_main


@lru_cache(maxsize=1)
def _build_analysis_pipeline() -> NewspaperAnalysisPipeline:
    config = load_config_with_main("newspaper_config.yaml")
    log_dir = config.get("logging", {}).get("log_dir")
    return NewspaperAnalysisPipeline(log_dir=log_dir)


def get_analysis_pipeline() -> NewspaperAnalysisPipeline:
    try:
        return _build_analysis_pipeline()
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analysis service unavailable. Please try again later.",
        ) from exc
