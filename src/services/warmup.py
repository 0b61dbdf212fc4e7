# -*- coding: utf-8 -*-
"""
Application Warmup Service
==========================

Pre-initializes resources at startup to reduce first-request latency.

Warmup targets:
1. Configuration (config/*.yaml, LLM environment)
2. Syllabus reference texts (fatal on failure)
3. Prompt templates
4. LLM connection (optional minimal call)
"""

import asyncio
import time

from src.logging import get_logger

logger = get_logger("Warmup")

NEWSPAPER_AGENTS = ("relevance_agent", "content_generator", "verification_agent")


async def warmup_llm_connection(timeout: float = 30.0) -> bool:
    """
    Warm up LLM connection by making a minimal API call.

    Args:
        timeout: Maximum time to wait for warmup (seconds)

    Returns:
        True if warmup succeeded, False otherwise
    """
    try:
        from src.services.llm import complete as llm_complete, get_llm_config

        config = get_llm_config()
        if not config.api_key and config.binding != "ollama":
            logger.warning("LLM API key not configured, skipping connection warmup")
            return False

        logger.info(f"Warming up LLM connection (model={config.model})...")
        start = time.time()

        await asyncio.wait_for(
            llm_complete(
                prompt="Hi",
                system_prompt="Reply with just 'ok'",
                binding=config.binding,
                model=config.model,
                api_key=config.api_key,
                base_url=config.base_url,
                api_version=config.api_version,
                max_tokens=5,
                temperature=0,
            ),
            timeout=timeout,
        )

        elapsed = time.time() - start
        logger.success(f"LLM connection warmed up in {elapsed:.2f}s")
        return True

    except asyncio.TimeoutError:
        logger.warning(f"LLM warmup timed out after {timeout}s")
        return False
    except Exception as e:
        logger.warning(f"LLM warmup failed: {e}")
        return False


def warmup_syllabus() -> bool:
    """
    Load the syllabus texts into the process-wide cache.

    Raises:
        SyllabusLoadError: If a syllabus file cannot be read
    """
    from src.services.syllabus import get_syllabus_cache

    logger.info("Loading syllabus reference texts...")
    start = time.time()
    get_syllabus_cache().get_syllabus_content()
    logger.success(f"Syllabus loaded in {time.time() - start:.3f}s")
    return True


def warmup_prompt_manager() -> bool:
    """
    Pre-load the newspaper agent prompt templates.

    Returns:
        True if every template loaded, False otherwise
    """
    from src.services.prompt import get_prompt_manager

    logger.info("Loading prompt templates...")
    start = time.time()
    pm = get_prompt_manager()

    loaded = 0
    for agent in NEWSPAPER_AGENTS:
        try:
            if pm.load_prompts("newspaper", agent, "en"):
                loaded += 1
        except Exception as e:
            logger.warning(f"Prompt template {agent} failed to load: {e}")

    elapsed = time.time() - start
    logger.success(f"Loaded {loaded}/{len(NEWSPAPER_AGENTS)} prompt templates in {elapsed:.3f}s")
    return loaded == len(NEWSPAPER_AGENTS)


def warmup_config_services() -> bool:
    """
    Pre-load configuration services.

    Returns:
        True if warmup succeeded, False otherwise
    """
    try:
        from src.services.config import get_agent_params, get_pipeline_settings
        from src.services.llm import get_llm_config

        logger.info("Loading configuration services...")
        start = time.time()

        get_pipeline_settings()
        get_agent_params("newspaper")
        get_llm_config()

        elapsed = time.time() - start
        logger.success(f"Configuration loaded in {elapsed:.3f}s")
        return True

    except Exception as e:
        logger.warning(f"Config warmup failed: {e}")
        return False


async def warmup_all(
    skip_llm_call: bool = False,
    llm_timeout: float = 30.0,
) -> dict[str, bool | None]:
    """
    Run all warmup tasks.

    Only a syllabus failure propagates; every other task reports False.

    Args:
        skip_llm_call: If True, skip the actual LLM API call (useful for offline mode)
        llm_timeout: Timeout for LLM warmup call

    Returns:
        Dictionary with warmup results for each component
    """
    logger.info("=" * 50)
    logger.info("Starting application warmup...")
    logger.info("=" * 50)

    start = time.time()
    results: dict[str, bool | None] = {}

    results["config"] = warmup_config_services()
    results["syllabus"] = warmup_syllabus()
    results["prompts"] = warmup_prompt_manager()

    if not skip_llm_call:
        results["llm_connection"] = await warmup_llm_connection(timeout=llm_timeout)
    else:
        logger.info("Skipping LLM connection warmup (offline mode)")
        results["llm_connection"] = None

    elapsed = time.time() - start
    succeeded = sum(1 for v in results.values() if v is True)
    total = sum(1 for v in results.values() if v is not None)

    logger.info("=" * 50)
    logger.success(f"Warmup completed: {succeeded}/{total} tasks in {elapsed:.2f}s")
    logger.info("=" * 50)

    return results


__all__ = [
    "warmup_all",
    "warmup_llm_connection",
    "warmup_syllabus",
    "warmup_prompt_manager",
    "warmup_config_services",
]
