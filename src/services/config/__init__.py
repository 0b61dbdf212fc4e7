# -*- coding: utf-8 -*-
"""
Configuration Services
======================

Usage:
    from src.services.config import load_config_with_main, get_agent_params
    from src.services.config import get_pipeline_settings
"""

from .loader import PROJECT_ROOT, get_agent_params, load_config_with_main, load_yaml_file
from .settings import PipelineSettings, get_pipeline_settings

__all__ = [
    "PROJECT_ROOT",
    "load_yaml_file",
    "load_config_with_main",
    "get_agent_params",
    "PipelineSettings",
    "get_pipeline_settings",
]
