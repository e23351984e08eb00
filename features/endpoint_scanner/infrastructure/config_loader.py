from __future__ import annotations

from pathlib import Path
from typing import Any, List

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from features.endpoint_scanner.application.ports import ConfigSource
from features.endpoint_scanner.domain.errors import ConfigError
from features.endpoint_scanner.domain.models import (
    EndpointAddress,
    PeriodSpec,
    PeriodUnit,
    ScannerConfig,
)


class EndpointIn(BaseModel):
    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)

    @field_validator("host")
    @classmethod
    def _strip_host(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("host must not be blank")
        return stripped


class PeriodIn(BaseModel):
    period_type: PeriodUnit = Field(alias="periodType")
    period: int = Field(gt=0)

    @field_validator("period_type", mode="before")
    @classmethod
    def _normalise_unit(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value


class ScannerConfigIn(BaseModel):
    endpoints: List[EndpointIn] = Field(default_factory=list)
    period: PeriodIn

    def to_domain(self) -> ScannerConfig:
        return ScannerConfig(
            endpoints=[EndpointAddress(host=e.host, port=str(e.port)) for e in self.endpoints],
            period=PeriodSpec(unit=self.period.period_type, count=self.period.period),
        )


def parse_config(text: str) -> ScannerConfig:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse endpoint scanner config: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Endpoint scanner config must be a mapping with 'endpoints' and 'period'")
    try:
        return ScannerConfigIn.model_validate(data).to_domain()
    except ValidationError as exc:
        raise ConfigError(f"Invalid endpoint scanner config: {exc}") from exc


class YamlConfigSource(ConfigSource):
    def __init__(self, file_path: Path):
        self._file_path = file_path

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> ScannerConfig:
        try:
            text = self._file_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Error reading file {self._file_path}: {exc}") from exc
        return parse_config(text)
