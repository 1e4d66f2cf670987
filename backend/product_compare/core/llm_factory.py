"""
Multi-Provider LLM Factory Pattern
Centralizes chat model creation for product extraction.
All modules should use get_shared_llm() instead of creating new instances.

Supported providers:
  - openai    → ChatOpenAI (GPT-4-turbo, GPT-4o, GPT-4o-mini, …)
  - anthropic → ChatAnthropic (Claude Sonnet 4, Claude 3.5 Sonnet, Claude 3 Haiku, …)
  - ollama    → ChatOllama (Llama 3.1, Qwen, any local model via Ollama)
  - lmstudio  → ChatOpenAI (any local model via LM Studio — OpenAI-compatible API)
"""

import logging
from typing import Optional, Dict, Any
from langchain_core.language_models.chat_models import BaseChatModel

from product_compare.core.config import get_settings

logger = logging.getLogger(__name__)

# ── Provider → Model defaults ──────────────────────────────────────────────
PROVIDER_DEFAULTS: Dict[str, str] = {
    "openai": "gpt-4-turbo",
    "anthropic": "claude-sonnet-4-20250514",
    "ollama": "llama3.1:8b",
    "lmstudio": "qwen/qwen2.5-7b",
}

PROVIDER_MODELS: Dict[str, list] = {
    "openai": [
        "gpt-4-turbo", "gpt-4o", "gpt-4o-mini",
    ],
    "anthropic": [
        "claude-sonnet-4-20250514", "claude-3-5-sonnet-20241022",
        "claude-3-haiku-20240307",
    ],
    "ollama": [
        "llama3.1:8b", "llama3.3:latest", "qwen2.5:latest",
    ],
    "lmstudio": [
        "qwen/qwen2.5-7b",
        "meta-llama/llama-3.1-8b",
    ],
}

# ── Singleton cache ─────────────────────────────────────────────────────────
_instances: Dict[str, BaseChatModel] = {}

# Runtime overrides set through set_provider(); take precedence over settings
_overrides: Dict[str, str] = {}


def _resolve_provider() -> str:
    """Return the active provider name (runtime override, then LLM_PROVIDER)."""
    provider = _overrides.get("provider") or get_settings().llm_provider
    return provider.lower().strip()


def _resolve_model(provider: str) -> str:
    """Return the active model name from override, LLM_MODEL or provider default."""
    explicit = (_overrides.get("model") or get_settings().llm_model or "").strip()
    if explicit:
        return explicit
    return PROVIDER_DEFAULTS.get(provider, "gpt-4-turbo")


def _build_llm(provider: str, model: str) -> BaseChatModel:
    """Instantiate the correct LangChain chat model for the given provider."""
    settings = get_settings()
    temperature = settings.llm_temperature

    if provider == "openai":
        from langchain_openai import ChatOpenAI
        return ChatOpenAI(
            model=model,
            temperature=temperature,
            api_key=settings.openai_api_key or None,
        )

    elif provider == "anthropic":
        from langchain_anthropic import ChatAnthropic
        return ChatAnthropic(
            model=model,
            temperature=temperature,
            api_key=settings.anthropic_api_key or None,
            max_tokens=settings.llm_max_tokens,
        )

    elif provider == "ollama":
        from langchain_ollama import ChatOllama
        return ChatOllama(
            model=model,
            temperature=temperature,
            base_url=settings.ollama_base_url,
        )

    elif provider == "lmstudio":
        # LM Studio uses OpenAI-compatible API on localhost:1234
        from langchain_openai import ChatOpenAI
        return ChatOpenAI(
            model=model,
            temperature=temperature,
            base_url=settings.lmstudio_base_url,
            api_key="lm-studio",  # LM Studio doesn't require real API key
        )

    else:
        raise ValueError(
            f"Unsupported LLM provider: '{provider}'. "
            f"Supported: {', '.join(PROVIDER_DEFAULTS.keys())}"
        )


def get_shared_llm() -> BaseChatModel:
    """
    Get the singleton chat model instance for the active provider.

    The provider/model are determined from settings (LLM_PROVIDER, LLM_MODEL)
    unless switched at runtime with set_provider().
    """
    provider = _resolve_provider()
    model = _resolve_model(provider)
    cache_key = f"{provider}:{model}"

    if cache_key not in _instances:
        logger.info("Creating LLM instance: provider=%s model=%s", provider, model)
        _instances[cache_key] = _build_llm(provider, model)

    return _instances[cache_key]


def set_provider(provider: str, model: Optional[str] = None) -> Dict[str, str]:
    """
    Switch LLM provider and model at runtime. Clears cached instances.

    Args:
        provider: Provider name (openai, anthropic, ollama, lmstudio)
        model: Optional model name; uses provider default if omitted

    Returns:
        Dict with active provider and model
    """
    provider = provider.lower().strip()
    if provider not in PROVIDER_DEFAULTS:
        raise ValueError(f"Unsupported provider: '{provider}'. Supported: {', '.join(PROVIDER_DEFAULTS.keys())}")

    _overrides["provider"] = provider
    if model:
        _overrides["model"] = model
    else:
        _overrides.pop("model", None)
        # An explicit LLM_MODEL belongs to the configured provider only
        if provider != get_settings().llm_provider.lower().strip():
            _overrides["model"] = PROVIDER_DEFAULTS[provider]

    reset_llm_instances()

    active_model = _resolve_model(provider)
    logger.info("Switched LLM to provider=%s model=%s", provider, active_model)
    return {"provider": provider, "model": active_model}


def get_current_provider_info() -> Dict[str, Any]:
    """Return current provider, model, and available options."""
    provider = _resolve_provider()
    model = _resolve_model(provider)
    return {
        "current_provider": provider,
        "current_model": model,
        "providers": {
            name: {
                "models": models,
                "default_model": PROVIDER_DEFAULTS[name],
                "configured": _is_provider_configured(name),
            }
            for name, models in PROVIDER_MODELS.items()
        },
    }


def _is_provider_configured(provider: str) -> bool:
    """Check if the required API key / service is available for a provider."""
    settings = get_settings()
    if provider == "openai":
        return bool(settings.openai_api_key)
    elif provider == "anthropic":
        return bool(settings.anthropic_api_key)
    elif provider in ("ollama", "lmstudio"):
        # Local servers — always "configured"
        return True
    return False


def reset_llm_instances(clear_overrides: bool = False):
    """
    Reset all cached LLM instances (useful for testing or changing models at runtime).
    """
    _instances.clear()
    if clear_overrides:
        _overrides.clear()
