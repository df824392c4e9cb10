"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:         str = "postblocks"
    db_url:           str = "sqlite:///postblocks.db"
    words_per_minute: int = Field(default=200, ge=1, description="Reading speed used for read-time estimates")
    keep_pass_order:  bool = Field(default=False, description="Sequence parsed blocks by extraction pass instead of source position")
    parser_config:    str = Field(default="gfm-like", description="MarkdownIt preset name for markdown imports")
    output_dir:       str = Field(default="dist", description="Directory for exported HTML + JSON files")
    toc_title:        str = Field(default="Table of Contents", description="Heading of the rendered TOC nav")
    pros_label:       str = "Pros"
    cons_label:       str = "Cons"
    log_level:        str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then POSTBLOCKS_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"POSTBLOCKS_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
