import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# .env name can be overridden with ENV_FILE
env_file = os.getenv("ENV_FILE", ".env")
load_dotenv(Path(__file__).parent.parent / env_file)


@dataclass(frozen=True)
class Settings:
    bot_token: str
    evaluator_path: Path
    evaluator_timeout: Optional[float] = None
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read settings from the environment (already populated from .env)."""
    bot_token = os.getenv("BOT_TOKEN")
    if not bot_token:
        raise RuntimeError("BOT_TOKEN is not set")

    evaluator_path = os.getenv("EVALUATOR_PATH")
    if not evaluator_path:
        raise RuntimeError("EVALUATOR_PATH is not set")

    timeout = os.getenv("EVALUATOR_TIMEOUT")
    try:
        evaluator_timeout = float(timeout) if timeout else None
    except ValueError:
        raise RuntimeError(f"EVALUATOR_TIMEOUT must be a number, got {timeout!r}")

    return Settings(
        bot_token=bot_token,
        evaluator_path=Path(evaluator_path).resolve(),
        evaluator_timeout=evaluator_timeout,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
