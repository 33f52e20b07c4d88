"""Adapters around hosted generative model APIs (Gemini / OpenAI-compatible)."""

from __future__ import annotations

import json
import os
from http.client import HTTPException
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from ..config import LLMConfig
from ..errors import ConfigError, LLMError
from ..logging import get_logger

logger = get_logger("llm")

PROVIDERS: tuple[str, ...] = ("gemini", "openai")


@dataclass
class LLMRequest:
    """Represents a single inference request for the configured provider."""

    prompt: str
    system: Optional[str]
    provider: str
    model: str
    base_url: str
    api_key: Optional[str]
    temperature: Optional[float]
    top_k: Optional[int]
    top_p: Optional[float]
    max_tokens: Optional[int]
    request_timeout: Optional[float]


class LLMRunner:
    """Executes prompts against a hosted model provider."""

    DEFAULT_PROVIDER = "gemini"
    DEFAULT_MODELS = {"gemini": "gemini-pro", "openai": "gpt-4o-mini"}
    DEFAULT_BASE_URLS = {
        "gemini": "https://generativelanguage.googleapis.com/v1beta",
        "openai": "https://api.openai.com/v1",
    }
    DEFAULT_TEMPERATURE = 0.7
    DEFAULT_TOP_K = 40
    DEFAULT_TOP_P = 0.95
    DEFAULT_MAX_TOKENS = 8192
    ENV_PROVIDER_KEYS = ("CODESCRIBE_LLM_PROVIDER",)
    ENV_MODEL_KEYS = ("CODESCRIBE_LLM_MODEL",)
    ENV_BASE_URL_KEYS = ("CODESCRIBE_LLM_BASE_URL",)
    ENV_API_KEY_KEYS = {
        "gemini": ("CODESCRIBE_LLM_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY"),
        "openai": ("CODESCRIBE_LLM_API_KEY", "OPENAI_API_KEY"),
    }

    def __init__(
        self,
        provider: str | None = None,
        model: str | None = None,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        temperature: Optional[float] = DEFAULT_TEMPERATURE,
        top_k: Optional[int] = DEFAULT_TOP_K,
        top_p: Optional[float] = DEFAULT_TOP_P,
        max_tokens: Optional[int] = DEFAULT_MAX_TOKENS,
        request_timeout: Optional[float] = 60.0,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> None:
        self.provider = self._resolve_provider(provider)
        self.model = model or self._first_env_value(self.ENV_MODEL_KEYS) or self.DEFAULT_MODELS[self.provider]
        self.base_url = self._normalize_base_url(
            base_url or self._first_env_value(self.ENV_BASE_URL_KEYS) or self.DEFAULT_BASE_URLS[self.provider]
        )
        self.api_key = api_key or self._first_env_value(self.ENV_API_KEY_KEYS[self.provider])
        self.temperature = temperature
        self.top_k = top_k
        self.top_p = top_p
        self.max_tokens = max_tokens
        self.request_timeout = request_timeout
        self._custom_runner = runner is not None
        if runner is not None:
            self._runner = runner
        elif self.provider == "gemini":
            self._runner = self._gemini_runner
        else:
            self._runner = self._openai_runner

    @classmethod
    def from_config(
        cls,
        config: LLMConfig | None,
        *,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> "LLMRunner":
        """Build a runner from the llm section of .codescribe.yml, environment filling the gaps."""
        config = config or LLMConfig()
        return cls(
            config.provider,
            config.model,
            base_url=config.base_url,
            api_key=config.api_key,
            temperature=config.temperature if config.temperature is not None else cls.DEFAULT_TEMPERATURE,
            top_k=config.top_k if config.top_k is not None else cls.DEFAULT_TOP_K,
            top_p=config.top_p if config.top_p is not None else cls.DEFAULT_TOP_P,
            max_tokens=config.max_tokens if config.max_tokens is not None else cls.DEFAULT_MAX_TOKENS,
            request_timeout=config.request_timeout if config.request_timeout is not None else 60.0,
            runner=runner,
        )

    @property
    def available(self) -> bool:
        """True when a request can be attempted at all."""
        return self._custom_runner or bool(self.api_key)

    def run(
        self,
        prompt: str,
        *,
        system: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send the prompt to the configured provider and return the response text."""
        request = LLMRequest(
            prompt=prompt,
            system=system,
            provider=self.provider,
            model=self.model,
            base_url=self.base_url,
            api_key=self.api_key,
            temperature=self.temperature,
            top_k=self.top_k,
            top_p=self.top_p,
            max_tokens=max_tokens if max_tokens is not None else self.max_tokens,
            request_timeout=self.request_timeout,
        )
        logger.debug("Sending %d character prompt to %s/%s", len(prompt), self.provider, self.model)
        return self._runner(request)

    @staticmethod
    def _normalize_base_url(url: str) -> str:
        return url.rstrip("/")

    @staticmethod
    def _gemini_runner(request: LLMRequest) -> str:
        if not request.api_key:
            raise LLMError("Gemini runner requires an API key.")
        endpoint = (
            f"{request.base_url}/models/{request.model}:generateContent?"
            f"{urlencode({'key': request.api_key})}"
        )
        generation: Dict[str, Any] = {}
        if request.temperature is not None:
            generation["temperature"] = request.temperature
        if request.top_k is not None:
            generation["topK"] = request.top_k
        if request.top_p is not None:
            generation["topP"] = request.top_p
        if request.max_tokens is not None:
            generation["maxOutputTokens"] = request.max_tokens
        text = request.prompt if not request.system else f"{request.system}\n\n{request.prompt}"
        payload: Dict[str, Any] = {"contents": [{"parts": [{"text": text}]}]}
        if generation:
            payload["generationConfig"] = generation

        response = LLMRunner._post_json(endpoint, payload, {}, request.request_timeout)
        content = LLMRunner._extract_gemini_content(response)
        if not content:
            raise LLMError("Gemini returned an empty response")
        return content.strip()

    @staticmethod
    def _openai_runner(request: LLMRequest) -> str:
        endpoint = f"{request.base_url}/chat/completions"
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": LLMRunner._build_messages(request.system, request.prompt),
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.top_p is not None:
            payload["top_p"] = request.top_p
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens
        headers: Dict[str, str] = {}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"

        response = LLMRunner._post_json(endpoint, payload, headers, request.request_timeout)
        content = LLMRunner._extract_openai_content(response)
        if not content:
            raise LLMError("Chat completion returned an empty response")
        return content.strip()

    @staticmethod
    def _post_json(
        endpoint: str,
        payload: Dict[str, Any],
        headers: Dict[str, str],
        timeout: Optional[float],
    ) -> Dict[str, Any]:
        data = json.dumps(payload).encode("utf-8")
        http_request = Request(
            endpoint,
            data=data,
            headers={"Content-Type": "application/json", **headers},
            method="POST",
        )
        try:
            with urlopen(http_request, timeout=timeout or 60.0) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise LLMError(f"Model request failed with status {exc.code}: {message}") from exc
        except URLError as exc:
            raise LLMError(f"Model request failed: {exc.reason}") from exc
        except (OSError, HTTPException) as exc:
            raise LLMError(f"Model request failed: {exc}") from exc

        try:
            decoded = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise LLMError("Model endpoint returned invalid JSON") from exc
        if not isinstance(decoded, dict):
            raise LLMError("Model endpoint returned an unexpected payload")
        return decoded

    @staticmethod
    def _build_messages(system: str | None, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _extract_gemini_content(payload: Dict[str, Any]) -> str:
        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return ""
        first = candidates[0]
        content = first.get("content") if isinstance(first, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts:
            return ""
        text = parts[0].get("text") if isinstance(parts[0], dict) else None
        return text if isinstance(text, str) else ""

    @staticmethod
    def _extract_openai_content(payload: Dict[str, Any]) -> str:
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        text = first.get("text")
        if isinstance(text, str):
            return text
        return ""

    def _resolve_provider(self, provider: str | None) -> str:
        value = (provider or self._first_env_value(self.ENV_PROVIDER_KEYS) or self.DEFAULT_PROVIDER).lower()
        if value not in PROVIDERS:
            raise ConfigError(f"Unknown LLM provider '{value}'. Expected one of: {', '.join(PROVIDERS)}")
        return value

    @staticmethod
    def _first_env_value(keys: Sequence[str]) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value
        return None


__all__ = ["LLMRequest", "LLMRunner", "PROVIDERS"]
