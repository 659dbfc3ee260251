from __future__ import annotations

from datetime import date
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tally_xml.common.utils import applicable_from as fiscal_year_start
from tally_xml.common.utils import format_date


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    request_type: str = Field(default="Import", alias="TALLY_REQUEST_TYPE")
    report_name: str = Field(default="All Masters", alias="TALLY_REPORT_NAME")
    xml_indent: int = Field(default=2, alias="TALLY_XML_INDENT")

    # YYYYMMDD; when unset, 1 April of the year ``applicable_from_years_back`` years ago.
    applicable_from: str | None = Field(default=None, alias="TALLY_APPLICABLE_FROM")
    applicable_from_years_back: int = Field(default=1, alias="TALLY_APPLICABLE_FROM_YEARS_BACK")

    auth_mode: Literal["none", "api_key"] = Field(default="none", alias="TALLY_AUTH_MODE")
    api_key: str = Field(default="", alias="TALLY_API_KEY")

    @field_validator("xml_indent", mode="before")
    @classmethod
    def _clamp_indent(cls, value: object) -> int:
        """Indentation is 0..8 spaces; anything unparseable falls back to 2."""
        try:
            indent = int(value)
        except (TypeError, ValueError):
            return 2
        return max(0, min(indent, 8))

    @field_validator("applicable_from", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def effective_applicable_from(self, today: date | None = None) -> str:
        """APPLICABLEFROM date for GST, unit and mailing sub-records."""
        if self.applicable_from:
            return format_date(self.applicable_from)
        return fiscal_year_start(today, self.applicable_from_years_back)


@lru_cache
def get_settings() -> Settings:
    return Settings()
