# -*- coding: utf-8 -*-
"""
Logging
=======

Project-wide logging entry point.

Usage:
    from src.logging import get_logger, LLMStats
"""

from .logger import SUCCESS, Logger, get_logger
from .stats import LLMStats

__all__ = [
    "get_logger",
    "Logger",
    "LLMStats",
    "SUCCESS",
]
