"""
LLM Client Module
=================

Infrastructure layer for the Hugging Face inference router
(OpenAI-compatible chat completions). Handles authentication and ordered
model fallback. Agnostic to the content being generated.
"""

import requests
from dataclasses import dataclass
from typing import Optional, List
from config.constants import HF_CHAT_COMPLETIONS_URL, LLM_TIMEOUT_SECONDS, DEFAULT_LLM_MODELS
from config.settings import settings
from utils.errors import ModelUnavailableError
from utils.logger import setup_logger

logger = setup_logger('llm_client')

DEFAULT_SYSTEM_PROMPT = (
    "You are a professional equity analyst. Answer in clear, plain English, "
    "ground every statement in the data you are given, and never invent numbers."
)


@dataclass
class GenerationResult:
    text: str
    model: str


class LLMClient:
    """
    Client for chat-completion models behind the Hugging Face router.
    """

    DEFAULT_MODELS = DEFAULT_LLM_MODELS

    def __init__(
        self,
        api_token: Optional[str] = None,
        models: Optional[List[str]] = None,
        url: str = HF_CHAT_COMPLETIONS_URL,
        timeout: float = LLM_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.api_token = api_token if api_token is not None else settings.HUGGINGFACE_TOKEN
        self.models = list(models or self.DEFAULT_MODELS)
        self.url = url
        self.timeout = timeout
        self.session = session
        if not self.api_token:
            logger.warning("Hugging Face token not provided. AI generation will be disabled.")

    @property
    def enabled(self) -> bool:
        return bool(self.api_token)

    def generate_text(
        self,
        prompt: str,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        max_tokens: int = 2500,
        extra_models: Optional[List[str]] = None,
        model_hint: Optional[str] = None,
    ) -> Optional[GenerationResult]:
        """
        Generate text, trying each model in order until one answers.

        Args:
            prompt: User message
            system_prompt: System message
            max_tokens: Completion budget
            extra_models: Models appended after the default list
            model_hint: Model moved to the front of the list

        Returns:
            GenerationResult, or None when every model failed or no token is set
        """
        if not self.enabled:
            return None

        models = self.models + [m for m in (extra_models or []) if m not in self.models]
        if model_hint:
            if model_hint in models:
                models.remove(model_hint)
            models.insert(0, model_hint)

        for model in models:
            try:
                text = self._call_api(model, prompt, system_prompt, max_tokens)
                logger.info(f"Model {model} answered ({len(text)} chars)")
                return GenerationResult(text=text, model=model)
            except ModelUnavailableError as e:
                logger.warning(str(e))
                continue

        logger.error("All models failed to generate text.")
        return None

    def _call_api(self, model: str, prompt: str, system_prompt: str, max_tokens: int) -> str:
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": 0.7,
            "top_p": 0.9,
        }
        headers = {"Authorization": f"Bearer {self.api_token}"}
        http = self.session or requests

        try:
            response = http.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ModelUnavailableError(model, f"request failed: {e}") from e

        if response.status_code != 200:
            raise ModelUnavailableError(model, f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            body = response.json()
        except ValueError as e:
            raise ModelUnavailableError(model, "invalid JSON body") from e
        if not isinstance(body, dict):
            raise ModelUnavailableError(model, f"unexpected body type {type(body).__name__}")

        choices = body.get("choices") or []
        first = choices[0] if isinstance(choices, list) and choices else {}
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        text = content.strip() if isinstance(content, str) else ""
        if not text:
            raise ModelUnavailableError(model, "empty completion")
        return text
