from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .loader import PROJECT_ROOT, load_config_with_main

load_dotenv(PROJECT_ROOT / ".env", override=False)

DEFAULT_PRELIMS_SYLLABUS_PATH = "./data/knowledge/upsc-prelims-syllabus.md"
DEFAULT_MAINS_SYLLABUS_PATH = "./data/knowledge/upsc-mains-syllabus.md"


def _as_float(value: str | None, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    return float(value)


def _resolve_path(value: str, project_root: Path) -> Path:
    path = Path(value)
    if not path.is_absolute():
        path = (project_root / path).resolve()
    return path


@dataclass(frozen=True)
class PipelineSettings:
    prelims_syllabus_path: Path
    mains_syllabus_path: Path
    input_rate_per_1k: float
    output_rate_per_1k: float
    currency_rate: float
    min_relevance_confidence: float
    log_dir: str | None


def get_pipeline_settings(project_root: Path | None = None) -> PipelineSettings:
    """
    Get settings for the newspaper analysis pipeline.

    Priority:
    1) Environment variables
    2) config/main.yaml (+ config/newspaper_config.yaml)
    3) Built-in defaults
    """
    if project_root is None:
        project_root = PROJECT_ROOT

    cfg: dict[str, Any] = load_config_with_main("newspaper_config.yaml", project_root)
    syllabus_cfg = cfg.get("syllabus", {}) or {}
    pricing_cfg = cfg.get("pricing", {}) or {}
    pipeline_cfg = cfg.get("pipeline", {}) or {}
    logging_cfg = cfg.get("logging", {}) or {}

    prelims_path = os.getenv("NEWSPREP_PRELIMS_SYLLABUS_PATH") or str(
        syllabus_cfg.get("prelims_path", DEFAULT_PRELIMS_SYLLABUS_PATH)
    )
    mains_path = os.getenv("NEWSPREP_MAINS_SYLLABUS_PATH") or str(
        syllabus_cfg.get("mains_path", DEFAULT_MAINS_SYLLABUS_PATH)
    )

    min_confidence = _as_float(
        os.getenv("NEWSPREP_MIN_RELEVANCE_CONFIDENCE"),
        float(pipeline_cfg.get("min_relevance_confidence", 0.0)),
    )
    if not 0.0 <= min_confidence <= 1.0:
        raise ValueError("min_relevance_confidence must be between 0 and 1")

    return PipelineSettings(
        prelims_syllabus_path=_resolve_path(prelims_path, project_root),
        mains_syllabus_path=_resolve_path(mains_path, project_root),
        input_rate_per_1k=_as_float(
            os.getenv("NEWSPREP_INPUT_RATE_PER_1K"),
            float(pricing_cfg.get("input_rate_per_1k", 0.00035)),
        ),
        output_rate_per_1k=_as_float(
            os.getenv("NEWSPREP_OUTPUT_RATE_PER_1K"),
            float(pricing_cfg.get("output_rate_per_1k", 0.00105)),
        ),
        currency_rate=_as_float(
            os.getenv("NEWSPREP_CURRENCY_RATE"),
            float(pricing_cfg.get("currency_rate", 83.0)),
        ),
        min_relevance_confidence=min_confidence,
        log_dir=logging_cfg.get("log_dir"),
    )
