"""Exporter settings.

Values come from, in increasing priority: field defaults, command-line
flags (passed as init kwargs by ``main``), then environment variables.
"""

import re
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DEFAULT_DSN = "host=/tmp port=6432 user=pgbouncer dbname=pgbouncer sslmode=disable"

_KEYWORD_PASSWORD_RE = re.compile(r"(password\s*=\s*)(?:'(?:[^'\\]|\\.)*'|\S+)", re.IGNORECASE)
_URL_PASSWORD_RE = re.compile(r"(://[^:/@]+:)[^@]*@")


def mask_dsn(dsn: str) -> str:
    """Hide the password in a keyword/value or URL style DSN."""
    masked = _KEYWORD_PASSWORD_RE.sub(r"\1***", dsn)
    return _URL_PASSWORD_RE.sub(r"\1***@", masked)


class Settings(BaseSettings):
    """Runtime configuration for the exporter."""

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )

    listen_address: str = Field(
        default=":9186",
        validation_alias="PGB_EXPORTER_WEB_LISTEN_ADDRESS",
        description="Address to listen on for web interface and telemetry",
    )
    telemetry_path: str = Field(
        default="/debug/metrics",
        validation_alias="PGB_EXPORTER_WEB_TELEMETRY_PATH",
        description="URL path under which to expose metrics",
    )
    data_source_name: str = Field(
        default=DEFAULT_DSN,
        validation_alias="DATA_SOURCE_NAME",
        description="PgBouncer admin DSN/URL in postgres format",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        validation_alias="PGB_EXPORTER_LOG_LEVEL",
    )
    log_format: Literal["text", "json"] = Field(
        default="text",
        validation_alias="PGB_EXPORTER_LOG_FORMAT",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment overrides command-line flags.
        return env_settings, init_settings

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @field_validator("listen_address")
    @classmethod
    def _check_listen_address(cls, value: str) -> str:
        host, sep, port = value.rpartition(":")
        if not sep or not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"listen address must be [host]:port, got '{value}'")
        return value

    @field_validator("telemetry_path")
    @classmethod
    def _check_telemetry_path(cls, value: str) -> str:
        if not value.startswith("/") or value == "/":
            raise ValueError(f"telemetry path must start with '/' and not be '/', got '{value}'")
        return value

    @property
    def host(self) -> str:
        """Interface to bind; an empty host in the listen address means all."""
        host = self.listen_address.rpartition(":")[0]
        return host.strip("[]") or "0.0.0.0"

    @property
    def port(self) -> int:
        return int(self.listen_address.rpartition(":")[2])

    @property
    def masked_data_source_name(self) -> str:
        return mask_dsn(self.data_source_name)
