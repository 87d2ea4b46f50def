"""
Configuração do tag-auditor.

Precedência (menor -> maior):
1. defaults do AuditSettings
2. arquivo YAML (--config)
3. variáveis de ambiente TAG_AUDITOR_*
4. opções do CLI

Exemplo de arquivo:

    profile: auditoria
    region: sa-east-1
    services: [ec2, s3]
    connect_timeout: 5
    read_timeout: 20
    timeout: 120
    log_level: INFO
"""
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from boto3.session import Session
from botocore.config import Config

from .models import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TAG_AUDITOR_"

DEFAULT_SERVICES: Tuple[str, ...] = ("ec2", "s3", "rds", "lambda")

_FLOAT_KEYS = {"connect_timeout", "read_timeout", "timeout"}


@dataclass(frozen=True)
class AuditSettings:
    profile: Optional[str] = None
    region: Optional[str] = None
    services: Tuple[str, ...] = field(default=DEFAULT_SERVICES)
    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    timeout: Optional[float] = None
    log_level: str = "WARNING"

    def session(self) -> Session:
        return Session(profile_name=self.profile, region_name=self.region)

    def client_config(self) -> Config:
        # uma única tentativa por chamada: sem retry/backoff
        return Config(
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            retries={"total_max_attempts": 1, "mode": "standard"},
        )

    def merge(self, values: Mapping[str, Any]) -> "AuditSettings":
        """
        Devolve uma cópia com os valores não-nulos de `values` aplicados.
        """
        known = {f.name for f in fields(self)}
        updates: Dict[str, Any] = {}
        for key, value in values.items():
            if key not in known:
                raise ConfigError(f"unknown configuration key: {key}")
            if value is None:
                continue
            updates[key] = _coerce(key, value)
        return replace(self, **updates)


def _coerce(key: str, value: Any) -> Any:
    if key == "services":
        if isinstance(value, str):
            value = value.split(",")
        return tuple(s.strip() for s in value if str(s).strip())
    if key in _FLOAT_KEYS:
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid value for {key}: {value!r}") from e
        if not number > 0:
            raise ConfigError(f"{key} must be a positive number of seconds, got {value!r}")
        return number
    return value


def load_config_file(path: Path) -> Dict[str, Any]:
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"unable to read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    logger.debug(f"Loaded config file {path}: {sorted(data)}")
    return data


def load_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}
    for key in ("profile", "region", "services", "timeout", "log_level"):
        env_name = ENV_PREFIX + key.upper()
        if environ.get(env_name):
            values[key] = environ[env_name]
    return values


def load_settings(
    config_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AuditSettings:
    settings = AuditSettings()
    if config_path is not None:
        settings = settings.merge(load_config_file(config_path))
    settings = settings.merge(load_env(environ))
    if overrides:
        settings = settings.merge(overrides)
    return settings
