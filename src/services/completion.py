"""Language model completion through LangChain, bounded by a hard timeout."""

import asyncio
import os
import time
from typing import Optional

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from src.utils.config import AppConfig
from src.utils.errors import CompletionError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


class CompletionProvider:
    """Chat-style completion: (system text, user text, temperature) -> text."""

    name = "abstract"

    async def complete(self, system: str, user: str, temperature: float) -> str:
        raise NotImplementedError


def get_llm_model(temperature: float):
    """Get configured chat model."""
    provider = AppConfig.LLM_PROVIDER
    model_name = AppConfig.LLM_MODEL
    timeout = AppConfig.LLM_TIMEOUT_SECONDS

    logger.debug(
        "Getting LLM model",
        llm_provider=provider,
        llm_model=model_name
    )

    if provider == "openai":
        api_key = os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise CompletionError("OPENAI_API_KEY not set")
        return ChatOpenAI(
            model=model_name,
            api_key=api_key,
            temperature=temperature,
            timeout=timeout,
            max_retries=0,
        )
    elif provider == "anthropic":
        api_key = os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise CompletionError("ANTHROPIC_API_KEY not set")
        return ChatAnthropic(
            model=model_name,
            api_key=api_key,
            temperature=temperature,
            timeout=timeout,
            max_retries=0,
        )
    else:
        raise CompletionError(f"Unsupported LLM provider: {provider}")


class LangChainCompletionProvider(CompletionProvider):
    """Completion provider backed by a LangChain chat model."""

    name = "langchain"

    async def complete(self, system: str, user: str, temperature: float) -> str:
        model = get_llm_model(temperature)
        response = await model.ainvoke([
            SystemMessage(content=system),
            HumanMessage(content=user),
        ])
        content = response.content if hasattr(response, "content") else response
        if isinstance(content, list):
            # Anthropic may answer with content blocks
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return content if isinstance(content, str) else str(content)


_provider: Optional[CompletionProvider] = None


def get_completion_provider() -> CompletionProvider:
    """Get or create the default completion provider."""
    global _provider
    if _provider is None:
        _provider = LangChainCompletionProvider()
    return _provider


async def request_completion(
    provider: CompletionProvider,
    system: str,
    user: str,
    temperature: float,
    timeout: Optional[float] = None,
) -> str:
    """
    Run one completion and return the trimmed text.

    Raises CompletionError on provider error, timeout, or blank output.
    """
    if timeout is None:
        timeout = AppConfig.LLM_TIMEOUT_SECONDS

    try:
        text = await asyncio.wait_for(provider.complete(system, user, temperature), timeout=timeout)
    except asyncio.TimeoutError:
        raise CompletionError(f"Completion timed out after {timeout}s")
    except CompletionError:
        raise
    except Exception as e:
        raise CompletionError(f"Completion failed: {e}") from e

    if not isinstance(text, str) or not text.strip():
        raise CompletionError("Empty completion")
    return text.strip()


async def complete_or_none(
    provider: CompletionProvider,
    system: str,
    user: str,
    temperature: float,
    operation: str,
    timeout: Optional[float] = None,
) -> Optional[str]:
    """Provider path of the provider-or-fallback composition: text, or None on any failure."""
    start_time = time.perf_counter()
    try:
        text = await request_completion(provider, system, user, temperature, timeout)
    except CompletionError as e:
        logger.warning(
            "Completion unavailable, using fallback",
            operation=operation,
            provider=getattr(provider, "name", type(provider).__name__),
            error=str(e),
            llm_latency_ms=round((time.perf_counter() - start_time) * 1000, 2)
        )
        return None

    logger.info(
        "Completion received",
        operation=operation,
        provider=getattr(provider, "name", type(provider).__name__),
        completion_length=len(text),
        llm_latency_ms=round((time.perf_counter() - start_time) * 1000, 2)
    )
    return text
