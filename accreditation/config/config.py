# accreditation/config/config.py
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_DATA_DIR = _PROJECT_ROOT / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        populate_by_name=True,
        extra="ignore",
    )

    # environment
    env: str = Field("dev", alias="ENV")
    data_dir: Path = Field(_DEFAULT_DATA_DIR, alias="DATA_DIR")

    # all engine timestamps are naive wall-clock values in this zone
    timezone_name: str = Field("Asia/Kolkata", alias="TIMEZONE")

    # database
    db_url: str | None = Field(None, alias="DATABASE_URL")
    db_filename: str = Field("accreditation.db", alias="DB_FILENAME")
    db_echo: bool = Field(False, alias="DB_ECHO")

    # ───────────────── Phase windows ─────────────────────────────────
    # Pre-qualifier phase starts at registration.
    pre_qualifier_months: int = Field(3, alias="PRE_QUALIFIER_MONTHS")
    # SAR phase starts where the pre-qualifier window ends.
    sar_months: int = Field(6, alias="SAR_MONTHS")

    # ───────────────── Application identifiers ───────────────────────
    institute_info_suffix: str = Field("IS", alias="INSTITUTE_INFO_SUFFIX")

    @model_validator(mode="before")
    def _preprocess(cls, values: dict[str, Any]) -> dict[str, Any]:
        raw = values.get("data_dir", values.get("DATA_DIR", _DEFAULT_DATA_DIR))
        values["data_dir"] = Path(raw).expanduser().resolve()
        values.pop("DATA_DIR", None)
        return values

    @property
    def timezone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone_name)

    @property
    def database_url(self) -> str:
        return self.db_url or f"sqlite:///{self.data_dir / self.db_filename}"


settings = Settings()
