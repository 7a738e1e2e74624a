"""
Configuración del logger.

Orden de precedencia (de menor a mayor):
1. Defaults (definidos en el schema Pydantic)
2. Diccionario pasado por el llamador (p.ej. la sección ``logging`` de su YAML)
3. Variables de entorno
4. Argumentos CLI

El parseo de archivos de configuración queda fuera: el llamador pasa
el diccionario ya cargado.
"""

import os
from typing import Any

from pydantic import BaseModel, Field

from .levels import DEFAULT_LEVEL, resolve_level

ENV_LEVEL = "PRETTYLOG_LEVEL"
ENV_ADD_SOURCE = "PRETTYLOG_ADD_SOURCE"
ENV_JSON = "PRETTYLOG_JSON"


class LoggingConfig(BaseModel):
    """Logging options: threshold, call-site capture and output format."""

    # Free-form on purpose: unknown names fall back to "info" in leveler()
    level: str = DEFAULT_LEVEL
    add_source: bool = Field(
        default=False,
        alias="add-source",
        description="Render the call site (file.py:line) of each record",
    )
    json_output: bool = Field(
        default=False,
        alias="json",
        description="One JSON object per line instead of colorized text",
    )

    model_config = {"extra": "forbid", "populate_by_name": True}

    def leveler(self) -> int:
        """Numeric level for the configured name, INFO if unrecognized."""
        return resolve_level(self.level)


def load_env_overrides() -> dict[str, Any]:
    """Carga overrides desde variables de entorno.

    Variables soportadas:
        PRETTYLOG_LEVEL: sobreescribe level
        PRETTYLOG_ADD_SOURCE: sobreescribe add-source (true/false, 1/0, yes/no)
        PRETTYLOG_JSON: sobreescribe json

    Returns:
        Diccionario con overrides desde env vars
    """
    overrides: dict[str, Any] = {}

    if level := os.environ.get(ENV_LEVEL):
        overrides["level"] = level.lower()

    # Pydantic valida los booleanos ("true", "0", "yes", ...)
    if add_source := os.environ.get(ENV_ADD_SOURCE):
        overrides["add-source"] = add_source

    if json_output := os.environ.get(ENV_JSON):
        overrides["json"] = json_output

    return overrides


def _to_aliases(data: dict[str, Any]) -> dict[str, Any]:
    """Normaliza nombres de campo a sus alias para que el merge no duplique claves."""
    aliases = {
        name: field.alias
        for name, field in LoggingConfig.model_fields.items()
        if field.alias
    }
    return {aliases.get(key, key): value for key, value in data.items()}


def apply_cli_overrides(config_dict: dict[str, Any], cli_args: dict[str, Any]) -> dict[str, Any]:
    """Aplica overrides desde argumentos CLI.

    Solo cuentan los argumentos con valor distinto de None (flags no pasados).

    Args:
        config_dict: Configuración base (ya merged con env)
        cli_args: Diccionario con argumentos CLI (level, add_source, json_output)

    Returns:
        Configuración con overrides de CLI aplicados
    """
    overrides: dict[str, Any] = {}

    if cli_args.get("level"):
        overrides["level"] = cli_args["level"]

    if cli_args.get("add_source") is not None:
        overrides["add-source"] = cli_args["add_source"]

    if cli_args.get("json_output") is not None:
        overrides["json"] = cli_args["json_output"]

    return {**config_dict, **overrides}


def load_config(
    data: dict[str, Any] | None = None,
    cli_args: dict[str, Any] | None = None,
) -> LoggingConfig:
    """Carga y valida la configuración del logger.

    Args:
        data: Diccionario con opciones (level, add-source, json), o None
        cli_args: Diccionario con argumentos de la CLI

    Returns:
        LoggingConfig validado

    Raises:
        ValidationError: Si algún valor no es válido (p.ej. json="quizás")
    """
    merged = {**_to_aliases(data or {}), **load_env_overrides()}
    merged = apply_cli_overrides(merged, cli_args or {})
    return LoggingConfig.model_validate(merged)
