"""
Construcción del logger y puente opcional con structlog.

new_logger() arma el conjunto completo (umbral compartido, PrettyHandler,
fachada Logger) a partir de un LoggingConfig. No instala nada global:
el llamador recibe la instancia y la pasa a quien la necesite.

configure_structlog() es opt-in: enruta structlog.get_logger() a través
del logger stdlib de la fachada, de modo que los kwargs de structlog
aparecen como attrs y el umbral es el mismo.
"""

import sys

import structlog

from .config import LoggingConfig
from .levels import LevelVar
from .logger import Logger
from .pretty import HandlerOptions, PrettyHandler, ReplaceAttr
from .record import ATTRS_FIELD

# Claves del event_dict que logging acepta como argumentos de _log()
_LOG_KWARGS = ("exc_info", "stack_info", "stacklevel")


def new_logger(
    config: LoggingConfig | None = None,
    stream=None,
    replace_attr: ReplaceAttr | None = None,
    colors: bool | None = None,
) -> Logger:
    """Crea un Logger listo para usar.

    Args:
        config: Configuración (level, add-source, json). None usa los defaults.
        stream: Destino de las líneas. Por defecto sys.stdout.
        replace_attr: Hook opcional para reescribir time, level y source
        colors: Forzar colores (True/False). None los activa solo en una TTY.

    Returns:
        Logger con su umbral inicializado desde config.level
    """
    config = config or LoggingConfig()

    level = LevelVar(config.leveler())
    handler = PrettyHandler(
        stream or sys.stdout,
        HandlerOptions(
            level=level,
            add_source=config.add_source,
            replace_attr=replace_attr,
            json=config.json_output,
            colors=colors,
        ),
    )
    return Logger(handler, level)


def render_to_attrs(_, __, event_dict: dict) -> dict:
    """Último processor: pasa el evento como msg y el resto como attrs.

    Los attrs viajan dentro de ATTRS_FIELD y no como claves sueltas de
    extra=, así que claves como "name" o "module" no chocan con los
    atributos del LogRecord.
    """
    kwargs = {key: event_dict.pop(key) for key in _LOG_KWARGS if key in event_dict}
    kwargs["msg"] = event_dict.pop("event", "")
    kwargs["extra"] = {ATTRS_FIELD: list(event_dict.items())}
    return kwargs


def configure_structlog(logger: Logger) -> None:
    """Enruta structlog a través del logger stdlib de la fachada.

    Args:
        logger: Logger cuyo handler y umbral usará structlog
    """
    stdlib_logger = logger.stdlib_logger

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            render_to_attrs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args: stdlib_logger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Obtiene un logger estructurado.

    Args:
        name: Nombre del logger (usualmente __name__)

    Returns:
        Logger estructurado de structlog
    """
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name)
