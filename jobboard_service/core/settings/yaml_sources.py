"""YAML config source with conf.d directory support.

Each settings domain may be configured from a base file plus drop-in
overrides, merged in alphabetical order::

    conf/redis.yaml
    conf/redis.d/10-local.yaml

The base directory defaults to ``conf`` and can be moved per domain with an
environment variable (``REDIS_CONFIG_DIR=/etc/jobboard``).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic_settings.sources.providers.yaml import YamlConfigSettingsSource

if TYPE_CHECKING:
    from pydantic_settings import BaseSettings


class ConfDYamlConfigSettingsSource(YamlConfigSettingsSource):
    """YAML settings source reading ``<name>.yaml`` and ``<name>.d/*``."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: str = "app.yaml",
        confd_dir: str | None = "app.d",
        config_dir_env: str = "CONFIG_DIR",
        base_dir: str = "conf",
        yaml_file_encoding: str | None = "utf-8",
    ) -> None:
        config_base = Path(os.getenv(config_dir_env, base_dir))

        yaml_files: list[Path] = []
        main_file = config_base / yaml_file
        if main_file.exists():
            yaml_files.append(main_file)

        if confd_dir:
            confd_path = config_base / confd_dir
            if confd_path.is_dir():
                yaml_files.extend(sorted(confd_path.glob("*.yaml")))
                yaml_files.extend(sorted(confd_path.glob("*.yml")))
                yaml_files.extend(sorted(confd_path.glob("*.json")))

        self._yaml_files = yaml_files
        super().__init__(
            settings_cls=settings_cls,
            yaml_file=yaml_files or None,
            yaml_file_encoding=yaml_file_encoding,
        )

    def __repr__(self) -> str:
        files = ", ".join(str(f) for f in self._yaml_files)
        return f"{self.__class__.__name__}(yaml_files=[{files}])"


def create_yaml_source(
    settings_cls: type[BaseSettings],
    name: str,
    env_prefix: str,
) -> ConfDYamlConfigSettingsSource:
    """Build the conf.d source for one settings domain.

    Args:
        settings_cls: Settings class being configured.
        name: File stem, e.g. ``"redis"`` for ``conf/redis.yaml``.
        env_prefix: Prefix of the directory override variable, e.g. ``"REDIS_"``.
    """
    return ConfDYamlConfigSettingsSource(
        settings_cls,
        yaml_file=f"{name}.yaml",
        confd_dir=f"{name}.d",
        config_dir_env=f"{env_prefix}CONFIG_DIR",
    )


def create_app_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    return create_yaml_source(settings_cls, "app", "APP_")


def create_redis_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    return create_yaml_source(settings_cls, "redis", "REDIS_")


def create_http_cache_yaml_source(
    settings_cls: type[BaseSettings],
) -> ConfDYamlConfigSettingsSource:
    return create_yaml_source(settings_cls, "http_cache", "HTTP_CACHE_")


def create_db_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    return create_yaml_source(settings_cls, "database", "DB_")


def create_logging_yaml_source(settings_cls: type[BaseSettings]) -> ConfDYamlConfigSettingsSource:
    return create_yaml_source(settings_cls, "logging", "LOG_")
