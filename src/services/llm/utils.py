# -*- coding: utf-8 -*-
"""
LLM Utilities
=============

Helpers shared by the provider: URL normalisation, local-server detection and
per-model parameter adjustments.
"""

from typing import Optional
from urllib.parse import urlparse

_LOCAL_HOSTS = {"localhost", "127.0.0.1", "0.0.0.0", "host.docker.internal"}
_LOCAL_PORTS = {11434, 1234, 8080}

_REASONING_PREFIXES = ("o1", "o3", "o4")


def sanitize_url(base_url: str, model: Optional[str] = None) -> str:
    """
    Normalise a user supplied base URL.

    Strips whitespace and trailing slashes, and removes a pasted
    ``/chat/completions`` suffix so the SDK can append its own path.
    """
    url = base_url.strip().rstrip("/")
    for suffix in ("/chat/completions", "/completions"):
        if url.endswith(suffix):
            url = url[: -len(suffix)]
    return url


def is_local_llm_server(base_url: Optional[str]) -> bool:
    """True for Ollama / LM Studio style servers on the local machine."""
    if not base_url:
        return False
    parsed = urlparse(base_url if "://" in base_url else f"http://{base_url}")
    return parsed.hostname in _LOCAL_HOSTS and parsed.port in _LOCAL_PORTS


def get_effective_temperature(binding: str, model: Optional[str], temperature: float) -> float:
    """Reasoning models reject any temperature other than 1.0."""
    if binding in ("openai", "azure_openai") and (model or "").lower().startswith(
        _REASONING_PREFIXES
    ):
        return 1.0
    return temperature


__all__ = ["sanitize_url", "is_local_llm_server", "get_effective_temperature"]
