from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from judgeview.session import QUERY_FILE_TEMPLATE, RESULT_FILE_TEMPLATE
from judgeview.utils.io import read_yaml

load_dotenv()


class BrowserConfig(BaseModel):
    source: str = Field(
        default_factory=lambda: os.getenv("JUDGEVIEW_SOURCE", "."),
        description="Directory or http(s) base URL holding the dataset files.",
    )
    datasets: list[str] = Field(default_factory=list, description="Selectable dataset names.")
    default_dataset: str | None = Field(
        default_factory=lambda: os.getenv("JUDGEVIEW_DATASET") or None
    )
    query_file_template: str = QUERY_FILE_TEMPLATE
    result_file_template: str = RESULT_FILE_TEMPLATE

    # Initial filter selection; None = every label present in the judgments
    judgements: list[str] | None = None
    strata: list[str] | None = None

    strict: bool = Field(False, description="Fail on malformed lines instead of skipping them.")
    http_timeout: float | None = Field(None, description="Seconds; None waits indefinitely.")
    log_level: str = "INFO"

    @field_validator("query_file_template", "result_file_template")
    @classmethod
    def _has_dataset_slot(cls, v: str) -> str:
        if "{dataset}" not in v:
            raise ValueError("file template must contain '{dataset}'")
        return v

    def resolve_dataset(self, dataset: str | None) -> str:
        name = dataset or self.default_dataset or (self.datasets[0] if self.datasets else None)
        if not name:
            raise ValueError("No dataset given and no default_dataset/datasets configured.")
        return name


def load_config(
    path: str | Path | None = None, overrides: dict[str, Any] | None = None
) -> BrowserConfig:
    raw: dict[str, Any] = read_yaml(path) if path is not None else {}
    if overrides:
        raw.update({k: v for k, v in overrides.items() if v is not None})
    return BrowserConfig.model_validate(raw)
