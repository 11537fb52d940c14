import os
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel


DEFAULT_SYSTEM_PROMPT = (
    "You are an expert CV and resume writer. Write clear, truthful, ATS-friendly content. "
    "Never fabricate experience, skills or qualifications. Prefer concise bullet points "
    "with measurable impact and standard section headers."
)


def _csv_env(name: str, default: str = "") -> List[str]:
    val = os.getenv(name, default)
    return [x.strip() for x in val.split(",") if x.strip()] if val else []


class Settings(BaseModel):
    gemini_api_key: Optional[str] = None
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    text_model: str = "gemini-1.5-flash"
    vision_model: str = "gemini-1.5-pro"
    request_timeout: float = 60.0
    image_timeout: float = 10.0
    max_history: int = 20
    max_retries: int = 2
    retry_initial_delay_ms: int = 500
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    cors_origins: List[str] = ["*"]
    public_dir: str = "./public"
    log_level: str = "INFO"
    port: int = 3000


def load_settings() -> Settings:
    """Build settings from the process environment."""
    return Settings(
        gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("APIKEY") or None,
        gemini_base_url=os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"),
        text_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
        vision_model=os.getenv("GEMINI_VISION_MODEL", "gemini-1.5-pro"),
        request_timeout=float(os.getenv("MODEL_TIMEOUT", "60")),
        image_timeout=float(os.getenv("IMAGE_TIMEOUT", "10")),
        max_history=int(os.getenv("MAX_HISTORY", "20")),
        max_retries=int(os.getenv("MAX_RETRIES", "2")),
        retry_initial_delay_ms=int(os.getenv("RETRY_INITIAL_DELAY_MS", "500")),
        system_prompt=os.getenv("SYSTEM_PROMPT") or DEFAULT_SYSTEM_PROMPT,
        cors_origins=_csv_env("CORS_ORIGINS", "*") or ["*"],
        public_dir=os.getenv("PUBLIC_DIR", "./public"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        port=int(os.getenv("PORT", "3000")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
