"""
Package raiz de bitsearch: algoritmos evolutivos configurables para problemas
pseudo-booleanos de caja negra.

Capas: nucleo compartido (configuracion, telemetria, contratos), logica de
busqueda (operadores y motores), problemas de referencia, registro de
trayectorias y presentacion.
"""

from .core.config import Config, ConfigurationError, make_rng  # noqa: F401
from .core.telemetry import setup_logger  # noqa: F401

__all__ = ["Config", "ConfigurationError", "make_rng", "setup_logger"]


if __name__ == "__main__":
    # Prueba rapida para verificar que los imports principales funcionan.
    cfg = Config()
    logger = setup_logger()
    logger.info("Inicializacion basica completada.")
    print(cfg)
