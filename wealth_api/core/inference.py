# wealth_api/core/inference.py
"""
External text-generation access for the recommendation pipeline.

`InferenceClient.generate` never raises: it returns an `InferenceSuccess` or an
`InferenceFailure` and leaves the fallback decision to the caller.
`InferenceClient.test_connection` is a diagnostic and lets `InferenceError`
propagate.
"""
from dataclasses import dataclass
from typing import Optional, Protocol, Union
import json
import logging

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool
from openai import AsyncOpenAI, OpenAIError

from wealth_api.core.prompts import CONNECTION_TEST_PROMPT

logger = logging.getLogger(__name__)

BEDROCK_ANTHROPIC_VERSION = "bedrock-2023-05-31"
CONNECTION_TEST_MAX_TOKENS = 50

PROVIDER_LABELS = {
    "bedrock": "AWS Bedrock",
    "openai": "OpenAI",
}


class InferenceError(Exception):
    """Raised when the model cannot be reached or its reply can't be read."""


@dataclass(frozen=True)
class InferenceConfig:
    provider: str = "bedrock"
    model_id: str = "anthropic.claude-3-haiku-20240307-v1:0"
    region: str = "us-east-2"
    max_tokens: int = 1000
    temperature: float = 0.7
    timeout_seconds: float = 30.0
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    openai_api_key: Optional[str] = None

    @classmethod
    def from_settings(cls, settings) -> "InferenceConfig":
        provider = settings.LLM_PROVIDER.lower()
        if provider not in PROVIDER_LABELS:
            raise ValueError(f"Unsupported LLM_PROVIDER: {settings.LLM_PROVIDER}")
        return cls(
            provider=provider,
            model_id=settings.OPENAI_MODEL if provider == "openai" else settings.BEDROCK_MODEL_ID,
            region=settings.AWS_REGION,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
            timeout_seconds=settings.LLM_TIMEOUT_SECONDS,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            openai_api_key=settings.OPENAI_API_KEY,
        )

    @property
    def provider_label(self) -> str:
        return PROVIDER_LABELS.get(self.provider, self.provider)


@dataclass(frozen=True)
class InferenceSuccess:
    text: str


@dataclass(frozen=True)
class InferenceFailure:
    reason: str


InferenceOutcome = Union[InferenceSuccess, InferenceFailure]


class TextGenerator(Protocol):
    async def generate(self, prompt: str, max_tokens: int, temperature: Optional[float] = None) -> str:
        ...


def _require_text(text) -> str:
    if not isinstance(text, str) or not text.strip():
        raise InferenceError("empty response")
    return text


class BedrockTextGenerator:
    """Anthropic messages API served through the bedrock-runtime client."""

    def __init__(self, config: InferenceConfig, client=None):
        self.config = config
        self._client = client

    def _get_client(self):
        if self._client is None:
            logger.info(f"Initializing Bedrock client for region {self.config.region}")
            self._client = boto3.client(
                "bedrock-runtime",
                region_name=self.config.region,
                aws_access_key_id=self.config.aws_access_key_id,
                aws_secret_access_key=self.config.aws_secret_access_key,
                config=BotoConfig(
                    connect_timeout=self.config.timeout_seconds,
                    read_timeout=self.config.timeout_seconds,
                ),
            )
        return self._client

    def build_payload(self, prompt: str, max_tokens: int, temperature: Optional[float] = None) -> dict:
        payload = {
            "anthropic_version": BEDROCK_ANTHROPIC_VERSION,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if temperature is not None:
            payload["temperature"] = temperature
        return payload

    def _invoke(self, prompt: str, max_tokens: int, temperature: Optional[float]) -> str:
        payload = self.build_payload(prompt, max_tokens, temperature)
        try:
            response = self._get_client().invoke_model(
                modelId=self.config.model_id,
                contentType="application/json",
                accept="application/json",
                body=json.dumps(payload),
            )
        except (BotoCoreError, ClientError) as e:
            raise InferenceError(f"Bedrock invocation failed: {e}") from e

        try:
            body = json.loads(response["body"].read())
            text = body["content"][0]["text"]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise InferenceError(f"Malformed Bedrock response: {e}") from e

        return _require_text(text)

    async def generate(self, prompt: str, max_tokens: int, temperature: Optional[float] = None) -> str:
        # boto3 is blocking
        return await run_in_threadpool(self._invoke, prompt, max_tokens, temperature)


class OpenAITextGenerator:
    def __init__(self, config: InferenceConfig, client: Optional[AsyncOpenAI] = None):
        self.config = config
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.config.openai_api_key,
                timeout=self.config.timeout_seconds,
            )
        return self._client

    async def generate(self, prompt: str, max_tokens: int, temperature: Optional[float] = None) -> str:
        kwargs = {
            "model": self.config.model_id,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            response = await self._get_client().chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise InferenceError(f"OpenAI request failed: {e}") from e

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise InferenceError(f"Malformed OpenAI response: {e}") from e

        return _require_text(text)


def build_text_generator(config: InferenceConfig) -> TextGenerator:
    if config.provider == "openai":
        return OpenAITextGenerator(config)
    return BedrockTextGenerator(config)


class InferenceClient:
    def __init__(self, config: InferenceConfig, generator: Optional[TextGenerator] = None):
        self.config = config
        self.generator = generator or build_text_generator(config)

    async def generate(self, prompt: str) -> InferenceOutcome:
        logger.info(f"Calling {self.config.provider_label} model {self.config.model_id}")
        logger.debug(f"Prompt sent to model: {prompt}")
        try:
            text = await self.generator.generate(
                prompt,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
            )
        except InferenceError as e:
            logger.error(f"Inference call failed: {e}")
            return InferenceFailure(reason=str(e))
        except Exception as e:
            logger.error(f"Unexpected inference error: {e}", exc_info=True)
            return InferenceFailure(reason=f"{type(e).__name__}: {e}")

        logger.info("Response received from model")
        return InferenceSuccess(text=text)

    async def test_connection(self) -> dict:
        text = await self.generator.generate(
            CONNECTION_TEST_PROMPT,
            max_tokens=CONNECTION_TEST_MAX_TOKENS,
        )
        return {
            "success": True,
            "message": f"{self.config.provider_label} connection successful",
            "model": self.config.model_id,
            "response": text,
        }
