"""Configuration — environment variables, constants and the run configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from playsearch.models import RunType

# .env is looked up from the working directory upwards
load_dotenv(find_dotenv(usecwd=True))

# --- google-play-scraper API ---
API_PATH = "/api/apps"
MAX_APPS_PER_CALL = 50

# --- defaults (overridable from .env) ---
DEFAULT_HOST: str = os.environ.get("PLAYSEARCH_HOST", "localhost:3000")
DEFAULT_INPUT: str = os.environ.get("PLAYSEARCH_INPUT", "terms.txt")
DEFAULT_OUTPUT: str = os.environ.get("PLAYSEARCH_OUTPUT", "results.csv")
DEFAULT_NUM_APPS: str = os.environ.get("PLAYSEARCH_NUM_APPS", "5")  # checked by the CLI

# --- request settings ---
RETRY_MAX = 3  # retries after the first attempt
RETRY_DELAY = 10.0  # seconds
REQUEST_TIMEOUT = 30  # seconds

# --- logging ---
LOG_DIR = Path("logs")  # relative to the working directory


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-delay, bounded retry policy used by the fetcher."""

    max_retries: int = RETRY_MAX
    delay: float = RETRY_DELAY

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


@dataclass(frozen=True)
class RunConfig:
    """Settings for one batch run, built once at startup."""

    run_type: RunType
    input_path: Path = Path(DEFAULT_INPUT)
    output_path: Path = Path(DEFAULT_OUTPUT)
    host: str = DEFAULT_HOST
    num_apps: int = 5
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    @property
    def endpoint(self) -> str:
        return f"http://{self.host}{API_PATH}"
