import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

load_dotenv()

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
LLM_MODEL = "llama-3.3-70b-versatile"  # free tier model on Groq


class RetryPolicy(BaseModel):
    """
    bounded exponential backoff for rate limited LLM calls.
    attempts are zero indexed, so at most max_retries + 1 calls are made.
    """
    max_retries: int = 3
    base_delay_ms: int = 2000
    max_delay_ms: int = 60000
    backoff_multiplier: float = 2
    jitter_ratio: float = 0.1

    model_config = ConfigDict(frozen=True)


DEFAULT_RETRY_POLICY = RetryPolicy()


class Settings(BaseModel):
    """
    process wide configuration, built once at startup and shared read-only.
    """
    llm_api_key: Optional[str] = None
    llm_base_url: str = GROQ_BASE_URL
    llm_model: str = LLM_MODEL
    llm_temperature: float = 0.1
    llm_timeout_seconds: float = 120.0
    retry_policy: RetryPolicy = DEFAULT_RETRY_POLICY

    database_url: str = "sqlite:///./compliance.db"
    country_guides_dir: str = "data/country_guides"
    sample_contracts_dir: str = "data/sample_contracts"
    cors_origins: List[str] = ["*"]
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls) -> "Settings":
        retry_policy = RetryPolicy(
            max_retries=int(os.getenv("LLM_MAX_RETRIES", DEFAULT_RETRY_POLICY.max_retries)),
            base_delay_ms=int(os.getenv("LLM_BASE_DELAY_MS", DEFAULT_RETRY_POLICY.base_delay_ms)),
            max_delay_ms=int(os.getenv("LLM_MAX_DELAY_MS", DEFAULT_RETRY_POLICY.max_delay_ms)),
            backoff_multiplier=float(os.getenv("LLM_BACKOFF_MULTIPLIER", DEFAULT_RETRY_POLICY.backoff_multiplier)),
        )
        origins = os.getenv("CORS_ORIGINS", "*")

        return cls(
            llm_api_key=os.getenv("GROQ_API_KEY") or os.getenv("LLM_API_KEY"),
            llm_base_url=os.getenv("LLM_BASE_URL", GROQ_BASE_URL),
            llm_model=os.getenv("LLM_MODEL", LLM_MODEL),
            llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.1")),
            llm_timeout_seconds=float(os.getenv("LLM_TIMEOUT_SECONDS", "120")),
            retry_policy=retry_policy,
            database_url=os.getenv("DATABASE_URL", "sqlite:///./compliance.db"),
            country_guides_dir=os.getenv("COUNTRY_GUIDES_DIR", "data/country_guides"),
            sample_contracts_dir=os.getenv("SAMPLE_CONTRACTS_DIR", "data/sample_contracts"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", 10 * 1024 * 1024)),
        )
