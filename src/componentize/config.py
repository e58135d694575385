"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "COMPONENTIZE_"


class Settings(BaseModel):
    app_name:           str   = "componentize"
    db_url:             str   = "sqlite:///componentize.db"
    max_sections:       int   = Field(default=20,   ge=1, description="Max sections returned by one segmentation")
    min_section_length: int   = Field(default=100,  ge=0, description="Sections with shorter markup are discarded")
    retry_attempts:     int   = Field(default=2,    ge=1, description="Render attempts while preview libraries are missing")
    retry_delay_ms:     int   = Field(default=600,  ge=0, description="Delay before a library-availability retry")
    retry_backoff:      float = Field(default=1.0,  ge=1.0, description="Delay multiplier per further retry; 1.0 = fixed")
    ready_poll_ms:      int   = Field(default=50,   ge=1, description="Surface readiness poll interval")
    ready_timeout_ms:   int   = Field(default=30000, ge=0, description="Stop polling for readiness after this long")
    fetch_timeout:      float = Field(default=15.0, gt=0, description="Seconds allowed for fetching a page")
    max_html_length:    int   = Field(default=1_200_000, ge=1, description="Reject fetched pages larger than this")
    headless:           bool  = Field(default=True, description="Run the preview browser without a window")
    log_level:          str   = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then COMPONENTIZE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
