# -*- coding: utf-8 -*-
"""
Syllabus Reference Cache
========================

Holds the prelims and mains syllabus texts for the lifetime of the process.
Both files are read on the first request and never again; concurrent first
requests wait on a lock and all receive the same SyllabusReference.
"""

from functools import lru_cache
from pathlib import Path
import threading
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.logging import get_logger

logger = get_logger("Syllabus")


class SyllabusReference(BaseModel):
    """Raw prelims and mains syllabus texts."""

    model_config = ConfigDict(frozen=True)

    prelims_text: str
    mains_text: str


class SyllabusLoadError(RuntimeError):
    """A syllabus file is missing or unreadable."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Failed to load syllabus file {path}: {reason}")
        self.path = path


class SyllabusCache:
    def __init__(self, prelims_path: Path, mains_path: Path):
        self.prelims_path = Path(prelims_path)
        self.mains_path = Path(mains_path)
        self._content: Optional[SyllabusReference] = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._content is not None

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SyllabusLoadError(path, str(e)) from e

    def get_syllabus_content(self) -> SyllabusReference:
        """
        Return the cached syllabus texts, loading them on first use.

        Raises:
            SyllabusLoadError: If either file cannot be read
        """
        content = self._content
        if content is not None:
            return content

        with self._lock:
            if self._content is None:
                prelims = self._read(self.prelims_path)
                mains = self._read(self.mains_path)
                self._content = SyllabusReference(prelims_text=prelims, mains_text=mains)
                logger.info(
                    f"Syllabus loaded: prelims={len(prelims)} chars, mains={len(mains)} chars"
                )
            return self._content


@lru_cache(maxsize=1)
def get_syllabus_cache() -> SyllabusCache:
    """Process-wide cache built from PipelineSettings."""
    from src.services.config import get_pipeline_settings

    settings = get_pipeline_settings()
    return SyllabusCache(settings.prelims_syllabus_path, settings.mains_syllabus_path)


__all__ = ["SyllabusReference", "SyllabusCache", "SyllabusLoadError", "get_syllabus_cache"]
