import asyncio
import logging
import math
import random
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar, Union

import openai

from compliance_checker.config import DEFAULT_RETRY_POLICY, RetryPolicy
from compliance_checker.exceptions import RateLimitExhausted, UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T")

#fallback for transports that only report errors as text
RATE_LIMIT_MARKERS = ("429", "too many requests", "quota", "rate limit")
RETRY_IN_PATTERN = re.compile(r"(?:retry|try again)\s+in\s+([\d.]+)\s*s", re.IGNORECASE)


@dataclass(frozen=True)
class RateLimited:
    message: str
    suggested_delay_ms: Optional[int] = None


@dataclass(frozen=True)
class AuthFailure:
    message: str


@dataclass(frozen=True)
class OtherFailure:
    message: str


Failure = Union[RateLimited, AuthFailure, OtherFailure]


def extract_retry_delay_ms(message: str) -> Optional[int]:
    """
    parses a server suggested wait ("retry in 5.5s") into milliseconds.
    """
    match = RETRY_IN_PATTERN.search(message or "")
    if not match:
        return None
    try:
        return math.ceil(float(match.group(1)) * 1000)
    except ValueError:
        return None


def _retry_after_header_ms(exc: openai.APIStatusError) -> Optional[int]:
    headers = exc.response.headers if exc.response is not None else {}

    retry_after_ms = headers.get("retry-after-ms")
    if retry_after_ms:
        try:
            return math.ceil(float(retry_after_ms))
        except ValueError:
            pass

    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            return math.ceil(float(retry_after) * 1000)
        except ValueError:
            pass  # HTTP-date form, fall through to the message text

    return None


def is_rate_limit_message(message: str) -> bool:
    lowered = (message or "").lower()
    return any(marker in lowered for marker in RATE_LIMIT_MARKERS)


def classify_failure(exc: BaseException) -> Failure:
    """
    maps a failed remote call to RateLimited / AuthFailure / OtherFailure.
    typed openai errors win, substring matching on the message is the fallback.
    """
    message = str(exc)

    if isinstance(exc, openai.RateLimitError) or (
        isinstance(exc, openai.APIStatusError) and exc.status_code == 429
    ):
        suggested = _retry_after_header_ms(exc) or extract_retry_delay_ms(message)
        return RateLimited(message=message, suggested_delay_ms=suggested)

    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return AuthFailure(message=message)

    if isinstance(exc, openai.APIStatusError):
        return OtherFailure(message=message)

    if is_rate_limit_message(message):
        return RateLimited(message=message, suggested_delay_ms=extract_retry_delay_ms(message))

    return OtherFailure(message=message)


def compute_delay(
    attempt: int,
    server_suggested_ms: Optional[int] = None,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
) -> int:
    """
    pre-jitter backoff for a zero indexed attempt, capped at max_delay_ms.
    a server suggestion can lengthen the wait but never past the cap.
    """
    delay = policy.base_delay_ms * policy.backoff_multiplier ** attempt
    if server_suggested_ms:
        delay = max(delay, server_suggested_ms)
    return int(min(delay, policy.max_delay_ms))


def apply_jitter(
    delay_ms: int,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    uniform: Callable[[float, float], float] = random.uniform,
) -> int:
    jitter = delay_ms * policy.jitter_ratio * uniform(-1, 1)
    return round(delay_ms + jitter)


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    uniform: Callable[[float, float], float] = random.uniform,
) -> T:
    """
    runs operation, retrying rate limited failures with exponential backoff + jitter.

    - rate limited & retries left: sleep, try again
    - rate limited & retries used up: RateLimitExhausted
    - anything else: UpstreamError straight away, no retry
    """
    attempt = 0

    while True:
        try:
            return await operation()

        except Exception as e:
            failure = classify_failure(e)

            if isinstance(failure, AuthFailure):
                logger.error(f'LLM call rejected (auth): {failure.message}')
                raise UpstreamError(failure.message, is_auth_error=True) from e

            if isinstance(failure, OtherFailure):
                logger.error(f'LLM call failed: {failure.message}')
                raise UpstreamError(failure.message) from e

            if attempt >= policy.max_retries:
                logger.error(f'Max retries ({policy.max_retries}) exceeded for rate limit error')
                raise RateLimitExhausted(
                    f'Rate limit persisted after {attempt + 1} attempts: {failure.message}',
                    attempts=attempt + 1,
                    retry_after_ms=failure.suggested_delay_ms,
                ) from e

            delay = apply_jitter(
                compute_delay(attempt, failure.suggested_delay_ms, policy),
                policy,
                uniform,
            )
            logger.warning(f'Rate limit hit. Retry attempt {attempt + 1}/{policy.max_retries} after {delay}ms...')

            await sleep(delay / 1000)
            attempt += 1
