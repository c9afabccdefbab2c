# Copyright 2025 Domyn
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from functools import lru_cache
import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized environment configuration for ksvc-compiler.

    Env var naming: KSVC_COMPILER_<FIELD_NAME> (custom aliases below).
    A .env file in CWD or ~/.ksvc_compiler/.env is read automatically.
    """

    model_config = SettingsConfigDict(
        env_prefix="KSVC_COMPILER_",
        env_file=(".env", "~/.ksvc_compiler/.env"),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # --- General -------------------------------------------------------------
    log_level: str = "INFO"
    home: Path = Field(
        default=Path("~/.ksvc_compiler").expanduser(),
        description="Path to the ksvc-compiler home directory",
    )
    # YAML with overridable model defaults (probe timings, ports, ...)
    defaults_file: Path | None = Field(
        default_factory=lambda data: data["home"] / "defaults.yaml",
        alias="KSVC_COMPILER_DEFAULTS",
        description="Path to YAML with overridable deployment model defaults",
    )

    # --- Output --------------------------------------------------------------
    output_format: str = Field(
        default="yaml",
        description="Default manifest format printed by `ksvc-compiler compile`",
    )  # KSVC_COMPILER_OUTPUT_FORMAT

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level {v!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached accessor. Call this wherever you need settings.
    Tests can `cache_clear()` before reading to pick up monkeypatched env.
    """
    return Settings()


def reload_settings_cache() -> None:
    get_settings.cache_clear()  # type: ignore[attr-defined]
