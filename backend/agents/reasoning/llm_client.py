"""
LLM Client

OpenAI wrapper that runs consultation flows: schema-checked input, JSON-mode
completion, schema-checked output. Backend failures are translated into the
AIServiceError taxonomy. Retries belong to the OpenAI transport (max_retries).
"""

import os
import json
import logging
from datetime import datetime
from typing import Optional, Dict, Any
from dataclasses import dataclass

import openai
from pydantic import ValidationError

from ..errors import (
    AIServiceError, RateLimitedError, ServiceUnavailableError, UnknownAIServiceError,
)
from .flows import get_flow
from .prompts import DEFAULT_LANGUAGE

logger = logging.getLogger(__name__)


@dataclass
class LLMConfig:
    """Configuration for LLM client"""
    api_key: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: int = 1200
    timeout: Optional[float] = None
    max_retries: Optional[int] = None
    language: str = DEFAULT_LANGUAGE

    def __post_init__(self):
        if not self.api_key:
            self.api_key = os.getenv("OPENAI_API_KEY")
        if not self.model:
            self.model = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        if self.temperature is None:
            self.temperature = float(os.getenv("LLM_TEMPERATURE", "0.7"))
        if self.timeout is None:
            self.timeout = float(os.getenv("OPENAI_TIMEOUT", "60"))
        if self.max_retries is None:
            self.max_retries = int(os.getenv("OPENAI_MAX_RETRIES", "2"))


@dataclass
class LLMResponse:
    """Response from LLM"""
    text: str
    tokens_used: int
    model: str
    finish_reason: str
    latency_ms: int


@dataclass
class TokenUsage:
    """Token usage tracking"""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def add(self, prompt: int, completion: int):
        self.prompt_tokens += prompt
        self.completion_tokens += completion
        self.total_tokens += prompt + completion


def translate_openai_error(error: Exception, flow: Optional[str] = None) -> AIServiceError:
    """Map an OpenAI SDK exception onto the AIServiceError taxonomy"""
    if isinstance(error, AIServiceError):
        return error
    if isinstance(error, openai.RateLimitError):
        return RateLimitedError(str(error), flow=flow)
    if isinstance(error, (openai.APIConnectionError, openai.InternalServerError)):
        # APITimeoutError is an APIConnectionError
        return ServiceUnavailableError(str(error), flow=flow)
    if isinstance(error, openai.APIStatusError):
        if error.status_code == 429:
            return RateLimitedError(str(error), flow=flow)
        if error.status_code == 503:
            return ServiceUnavailableError(str(error), flow=flow)
    return UnknownAIServiceError(str(error), flow=flow)


def extract_json(text: str) -> Dict[str, Any]:
    """Parse a JSON object from model output, tolerating markdown fences"""
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]
    return json.loads(text)


class ConsultationLLMClient:
    """
    OpenAI client for consultation flows.

    One instance per process: create it at startup and pass it to the
    orchestrator. Implements the FlowBackend contract.
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        client: Optional[openai.AsyncOpenAI] = None,
    ):
        self.config = config or LLMConfig()
        self.usage = TokenUsage()
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.config.api_key)

    def _ensure_client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            if not self.config.api_key:
                raise UnknownAIServiceError("OPENAI_API_KEY is not configured")
            self._client = openai.AsyncOpenAI(
                api_key=self.config.api_key,
                timeout=self.config.timeout,
                max_retries=self.config.max_retries,
            )
        return self._client

    async def complete(
        self,
        prompt: str,
        system_prompt: str,
        flow: Optional[str] = None,
    ) -> LLMResponse:
        """
        Get a JSON-mode completion from the LLM.

        Args:
            prompt: The user prompt
            system_prompt: System prompt for the flow
            flow: Flow name, used for error attribution

        Returns:
            LLMResponse with text and metadata

        Raises:
            AIServiceError: on any backend failure
        """
        client = self._ensure_client()

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]

        start_time = datetime.utcnow()

        try:
            response = await client.chat.completions.create(
                model=self.config.model,
                messages=messages,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as e:
            error = translate_openai_error(e, flow=flow)
            logger.warning(f"LLM call for {flow} failed ({error.code}): {e}")
            raise error from e

        latency_ms = int((datetime.utcnow() - start_time).total_seconds() * 1000)

        usage = response.usage
        tokens_used = 0
        if usage is not None:
            self.usage.add(usage.prompt_tokens, usage.completion_tokens)
            tokens_used = usage.total_tokens

        choice = response.choices[0]
        return LLMResponse(
            text=choice.message.content or "",
            tokens_used=tokens_used,
            model=response.model,
            finish_reason=choice.finish_reason,
            latency_ms=latency_ms,
        )

    async def invoke(self, name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run a consultation flow.

        Args:
            name: Flow name (see flows.FLOWS)
            payload: camelCase flow input

        Returns:
            camelCase flow output, shape-checked against the flow's output model
        """
        flow = get_flow(name)

        try:
            request = flow.input_model.model_validate(payload)
        except ValidationError as e:
            raise UnknownAIServiceError(f"Invalid input for {name}: {e}", flow=name) from e

        prompt = flow.render_prompt(request, language=self.config.language)
        response = await self.complete(prompt, flow.system_prompt, flow=name)

        try:
            output = flow.output_model.model_validate(extract_json(response.text))
        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Malformed output from {name}: {response.text[:200]!r}")
            raise UnknownAIServiceError(f"Malformed output from {name}: {e}", flow=name) from e

        logger.debug(f"Flow {name} answered in {response.latency_ms}ms ({response.tokens_used} tokens)")
        return output.model_dump(by_alias=True)

    async def close(self):
        if self._client is not None:
            await self._client.close()

    def get_usage_stats(self) -> Dict[str, Any]:
        """Get token usage statistics"""
        return {
            "prompt_tokens": self.usage.prompt_tokens,
            "completion_tokens": self.usage.completion_tokens,
            "total_tokens": self.usage.total_tokens,
        }
