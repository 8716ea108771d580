"""Application configuration: settings schema and mdsite.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "mdsite.yaml"


class Settings(BaseModel):
    source_dir:       str = Field(default="content",   description="Source root: markdown, templates and assets")
    output_dir:       str = Field(default="public",    description="Directory the rendered site is written to")
    template_dir:     str = Field(default="templates", description="Template directory, relative to source_dir")
    default_template: str = Field(default="base",      description="Template used when a page names none")
    base_url:         str = Field(default="/",         description="URL prefix for generated links")
    date_format:      str = Field(default="%Y-%m-%d",  description="strftime format for page and listing dates")
    parser_config:    str = Field(default="gfm-like",  description="MarkdownIt parser preset name")
    workers:          int = Field(default=0, ge=0,     description="Worker threads per phase; 0 = executor default")
    log_level:        str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$", description="Logging level")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from mdsite.yaml, then MDSITE_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSITE_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
