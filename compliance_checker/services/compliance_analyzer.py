import asyncio
import json
import logging
import random
from typing import Awaitable, Callable, Optional

from openai import AsyncOpenAI
from pydantic import ValidationError

from compliance_checker.config import DEFAULT_RETRY_POLICY, RetryPolicy, Settings
from compliance_checker.exceptions import MalformedResponse
from compliance_checker.schemas.compliance import ComplianceReport, RegulationProfile
from compliance_checker.services.prompt_builder import build_prompts
from compliance_checker.services.retry import call_with_retry

logger = logging.getLogger(__name__)


def build_llm_client(settings: Settings) -> AsyncOpenAI:
    """
    one client per process, shared read-only by every request.
    the SDK's own retries are switched off, call_with_retry owns that.
    """
    if not settings.llm_api_key:
        raise ValueError("LLM api key not found (set GROQ_API_KEY).")

    return AsyncOpenAI(
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        timeout=settings.llm_timeout_seconds,
        max_retries=0,
    )


class ComplianceAnalyzer:
    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        temperature: float = 0.1,
        retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        uniform: Callable[[float, float], float] = random.uniform,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.retry_policy = retry_policy
        self._sleep = sleep
        self._uniform = uniform

    @classmethod
    def from_settings(cls, settings: Settings) -> "ComplianceAnalyzer":
        return cls(
            client=build_llm_client(settings),
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            retry_policy=settings.retry_policy,
        )

    async def analyze(self, document_text: str, profile: RegulationProfile) -> ComplianceReport:
        system_prompt, user_prompt = build_prompts(document_text, profile)
        logger.info(f'Analyzing {len(document_text)} chars against {profile.name} regulations')
        return await self.invoke(system_prompt, user_prompt)

    async def invoke(self, system_prompt: str, user_prompt: str) -> ComplianceReport:
        """
        sends both prompts in JSON mode and returns a validated report.

        raises RateLimitExhausted / UpstreamError from the retry loop,
        MalformedResponse when the reply isn't a schema conformant JSON object.
        """
        async def _complete() -> Optional[str]:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
            if not response.choices:
                return None  # parse_report rejects it as an empty response
            return response.choices[0].message.content

        raw_content = await call_with_retry(
            _complete,
            policy=self.retry_policy,
            sleep=self._sleep,
            uniform=self._uniform,
        )
        return self.parse_report(raw_content)

    @staticmethod
    def parse_report(raw_content: str) -> ComplianceReport:
        if not raw_content:
            logger.error('LLM returned an empty response')
            raise MalformedResponse("Model returned an empty response", raw_payload=raw_content)

        try:
            data = json.loads(raw_content)
        except json.JSONDecodeError as e:
            logger.error(f'LLM returned Invalid JSON: {raw_content[:200]}')
            raise MalformedResponse(f"Model parsing failed: {e}", raw_payload=raw_content) from e

        if not isinstance(data, dict):
            logger.error('LLM returned JSON that is not an object')
            raise MalformedResponse("Model output is not a JSON object", raw_payload=raw_content)

        try:
            return ComplianceReport.model_validate(data)
        except ValidationError as ve:
            logger.error(f'Pydantic validation failed: {ve}')
            raise MalformedResponse("Model output schema mismatch", raw_payload=raw_content) from ve
