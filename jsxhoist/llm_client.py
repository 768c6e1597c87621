"""Unified LLM client supporting Anthropic and OpenAI-compatible providers."""

from __future__ import annotations

import json
import os
import re
from typing import Any, Optional

import anthropic
import openai

from .errors import JsxHoistAPIError

_PROVIDER_BASE_URLS: dict[str, str] = {
    "moonshot": "https://api.moonshot.ai/v1",
    "deepseek": "https://api.deepseek.com/v1",
    "lmstudio": "http://localhost:1234/v1",
}

# Maps provider name to its required environment variable.
# None means no API key is required (e.g. LM Studio running locally).
_PROVIDER_ENV_VARS: dict[str, Optional[str]] = {
    "anthropic": "ANTHROPIC_API_KEY",
    "moonshot": "MOONSHOT_API_KEY",
    "openai": "OPENAI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "lmstudio": None,
}

# OpenAI reasoning and 4o/4.1/5-series models reject max_tokens.
_COMPLETION_TOKENS_MODELS = re.compile(
    r"^(o\d|gpt-4o|gpt-4\.1|gpt-5|computer-use)"
)


def get_api_key(provider: str, caller: str = "jsxhoist") -> str:
    """Return the API key for *provider* from the environment.

    Raises JsxHoistAPIError if the required environment variable is not set.
    LM Studio does not require an API key and always returns a placeholder.
    """
    env_var = _PROVIDER_ENV_VARS.get(provider, "ANTHROPIC_API_KEY")
    if env_var is None:
        return "lm-studio"
    api_key = os.environ.get(env_var)
    if not api_key:
        raise JsxHoistAPIError(
            f"{caller}: {env_var} is not set.\n"
            "Set it, or run with --framework none to skip relabeling."
        )
    return api_key


def make_client(
    provider: str,
    api_key: str,
    timeout: float = 60.0,
    base_url: Optional[str] = None,
) -> Any:
    """Create and return an LLM client for *provider*.

    For OpenAI-compatible providers the base URL is *base_url* when given,
    otherwise the built-in default for the provider (None for OpenAI itself).
    """
    if provider == "anthropic":
        return anthropic.Anthropic(api_key=api_key, timeout=timeout)
    resolved_url = base_url or _PROVIDER_BASE_URLS.get(provider)
    return openai.OpenAI(api_key=api_key, base_url=resolved_url, timeout=timeout)


def _token_param(model: str) -> str:
    """Return the name of the output-token limit parameter for an OpenAI model."""
    if _COMPLETION_TOKENS_MODELS.match(model):
        return "max_completion_tokens"
    return "max_tokens"


def _openai_tool(tool: dict) -> dict:
    return {
        "type": "function",
        "function": {
            "name": tool["name"],
            "description": tool.get("description", ""),
            "parameters": tool["input_schema"],
        },
    }


def call_with_tool(
    client: Any,
    provider: str,
    model: str,
    max_tokens: int,
    tool: dict,
    tool_name: str,
    messages: list,
    system: Optional[str] = None,
    caller: str = "jsxhoist",
) -> Optional[dict]:
    """Call the LLM with forced tool use; return the tool input dict or None.

    Raises JsxHoistAPIError on API errors.
    """
    if provider == "anthropic":
        create_kwargs: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "tools": [tool],
            "tool_choice": {"type": "tool", "name": tool_name},
            "messages": messages,
        }
        if system:
            create_kwargs["system"] = system
        try:
            response = client.messages.create(**create_kwargs)
        except anthropic.APIError as exc:
            raise JsxHoistAPIError(f"{caller}: Anthropic API error: {exc}") from exc
        for block in response.content:
            if block.type == "tool_use" and block.name == tool_name:
                return block.input
        return None

    if system:
        messages = [{"role": "system", "content": system}] + list(messages)
    create_kwargs = {
        "model": model,
        _token_param(model): max_tokens,
        "tools": [_openai_tool(tool)],
        "tool_choice": {"type": "function", "function": {"name": tool_name}},
        "messages": messages,
    }
    if provider == "moonshot":
        create_kwargs["extra_body"] = {"thinking": {"type": "disabled"}}
    try:
        response = client.chat.completions.create(**create_kwargs)
    except openai.APIError as exc:
        raise JsxHoistAPIError(f"{caller}: {provider} API error: {exc}") from exc
    if response.choices and response.choices[0].message.tool_calls:
        tc = response.choices[0].message.tool_calls[0]
        try:
            return json.loads(tc.function.arguments)
        except json.JSONDecodeError:
            return None
    return None
