"""DpkgSizeSettings: one frozen object for CLI flags, env and dpkgsize.toml.

Highest priority first: CLI flags, ``DPKGSIZE_*`` env vars (``__`` reaches
into a section, e.g. ``DPKGSIZE_QUERY__BATCH_SIZE=50``), the TOML file,
then the defaults in :mod:`dpkgsize.config.models`.
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from dpkgsize.config.discovery import find_config, read_config
from dpkgsize.config.models import QueryConfig, ReportConfig

# Set by from_cli() for the duration of one model construction.
_active_toml: ContextVar[Path | None] = ContextVar("dpkgsize_active_toml", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """``[query]`` and ``[report]`` tables of a dpkgsize.toml."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._tables = read_config(toml_path) if toml_path is not None else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._tables.get(field_name), field_name, field_name in self._tables

    def __call__(self) -> dict[str, Any]:
        return self._tables


class DpkgSizeSettings(BaseSettings):
    """Settings stored on the CLI context.

    Attributes:
        config_path: The dpkgsize.toml that was applied, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "DPKGSIZE_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    query: QueryConfig = Field(default_factory=QueryConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # dotenv and secrets-dir sources are not consulted.
        return init_settings, env_settings, TomlSettingsSource(settings_cls, _active_toml.get())

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        search_from: Path | None = None,
        **cli_flags: Any,
    ) -> DpkgSizeSettings:
        """Build settings for one invocation.

        An explicit *config_path* that does not exist is ignored rather than
        rejected, so ``-c`` can point at an optional file.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(search_from)

        token = _active_toml.set(toml_path)
        try:
            return cls(config_path=toml_path, **cli_flags)
        finally:
            _active_toml.reset(token)
