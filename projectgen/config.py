from __future__ import annotations
from dataclasses import dataclass
import os

def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default

def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default

@dataclass
class Settings:
    host: str = "0.0.0.0"
    port: int = 3001

    # Text generation
    llm_provider: str = "openrouter"
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "mistralai/mistral-7b-instruct"
    llm_timeout_s: float = 120.0

    # Rendering
    render_timeout_ms: int = 30000

    # Job lifecycle
    pacing_delay_s: float = 0.5
    download_cleanup_s: float = 60.0
    job_retention_s: float = 0.0  # 0 disables the retention sweep

    static_dir: str = "dist"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 3001),
            llm_provider=(os.getenv("LLM_PROVIDER") or "openrouter").strip().lower(),
            openrouter_api_key=(os.getenv("OPENROUTER_API_KEY") or "").strip(),
            openrouter_base_url=os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"),
            openrouter_model=os.getenv("OPENROUTER_MODEL", "mistralai/mistral-7b-instruct"),
            llm_timeout_s=max(1.0, _env_float("LLM_TIMEOUT_S", 120.0)),
            render_timeout_ms=max(1000, _env_int("RENDER_TIMEOUT_MS", 30000)),
            pacing_delay_s=max(0.0, _env_float("PACING_DELAY_S", 0.5)),
            download_cleanup_s=max(0.0, _env_float("DOWNLOAD_CLEANUP_S", 60.0)),
            job_retention_s=max(0.0, _env_float("JOB_RETENTION_S", 0.0)),
            static_dir=os.getenv("STATIC_DIR", "dist"),
        )
