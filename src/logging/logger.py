# -*- coding: utf-8 -*-
"""
Unified Logger
==============

Thin wrapper over the standard library ``logging`` module that every module in
the project goes through. It adds:

- a SUCCESS level (between INFO and WARNING) and ``logger.success()``
- a console handler with a compact ``[Name] LEVEL message`` format
- an optional file handler under ``log_dir``
- ``log_llm_input`` / ``log_llm_output`` helpers used by the LLM orchestrator

Usage:
    from src.logging import get_logger

    logger = get_logger("Pipeline")
    logger.info("Starting")
    logger.success("Done")
"""

import logging
from pathlib import Path
import threading
from typing import Any, Optional

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_CONSOLE_FORMAT = "%(asctime)s [%(name)s] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s [%(name)s] %(levelname)s %(module)s:%(lineno)d %(message)s"

_loggers: dict[str, "Logger"] = {}
_loggers_lock = threading.Lock()


def _resolve_level(level: Any) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


class Logger:
    """Named project logger."""

    def __init__(self, name: str, level: Any = "INFO", log_dir: Optional[str] = None):
        self.name = name
        self._logger = logging.getLogger(f"newsprep.{name}")
        self._logger.setLevel(_resolve_level(level))
        self._logger.propagate = False

        if not any(getattr(h, "_newsprep_console", False) for h in self._logger.handlers):
            console = logging.StreamHandler()
            console.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
            console._newsprep_console = True  # type: ignore[attr-defined]
            self._logger.addHandler(console)

        if log_dir:
            self.add_file_handler(log_dir)

    def add_file_handler(self, log_dir: str) -> None:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        log_file = path / f"{self.name.lower().replace('.', '_')}.log"
        for handler in self._logger.handlers:
            if getattr(handler, "baseFilename", None) == str(log_file.resolve()):
                return
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        self._logger.addHandler(file_handler)

    def set_level(self, level: Any) -> None:
        self._logger.setLevel(_resolve_level(level))

    # -------------------------------------------------------------------------
    # Standard levels
    # -------------------------------------------------------------------------

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(message, *args, **kwargs)

    def success(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.log(SUCCESS, message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(message, *args, **kwargs)

    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._logger.exception(message, *args, **kwargs)

    # -------------------------------------------------------------------------
    # LLM call tracing
    # -------------------------------------------------------------------------

    def log_llm_input(
        self,
        agent_name: str,
        stage: str,
        system_prompt: str,
        user_prompt: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Record an outgoing LLM request (debug level)."""
        self._logger.debug(
            f"LLM input [{agent_name}/{stage}] "
            f"system={len(system_prompt)} chars, user={len(user_prompt)} chars, "
            f"metadata={metadata or {}}"
        )

    def log_llm_output(
        self,
        agent_name: str,
        stage: str,
        response: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Record an LLM response (debug level)."""
        preview = response[:200] + "..." if len(response) > 200 else response
        self._logger.debug(f"LLM output [{agent_name}/{stage}] {preview} metadata={metadata or {}}")


def get_logger(name: str, level: Any = "INFO", log_dir: Optional[str] = None) -> Logger:
    """
    Get (or create) a named logger.

    Args:
        name: Logger name, shown in every record as ``[name]``
        level: Level name or number
        log_dir: Optional directory for a per-logger log file

    Returns:
        Logger instance (cached per name)
    """
    with _loggers_lock:
        logger = _loggers.get(name)
        if logger is None:
            logger = Logger(name, level=level, log_dir=log_dir)
            _loggers[name] = logger
        elif log_dir:
            logger.add_file_handler(log_dir)
        return logger


__all__ = ["Logger", "get_logger", "SUCCESS"]
