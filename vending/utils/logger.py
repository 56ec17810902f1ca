import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_DIR") or "logs")
LOG_FILE = LOG_DIR / "vending.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] - %(message)s"
# Formato más conciso para producción (sin información sensible)
LOG_FORMAT_PROD = "%(asctime)s [%(levelname)s] - %(message)s"


def get_environment() -> str:
    """Obtiene el entorno actual de ejecución ("prod" o "dev")."""
    env = (os.getenv("ENV") or "dev").strip().lower()
    if env in {"prod", "production"}:
        return "prod"
    return "dev"


def get_logger(name: str) -> logging.Logger:
    """
    Obtiene un logger configurado según el entorno.

    En producción el nivel es WARNING y el formato omite el módulo;
    en desarrollo el nivel es INFO. Ambos escriben a consola y a
    ``logs/vending.log`` con rotación de 5 MB.

    Parámetros:
        name: Nombre del módulo/componente

    Retorna:
        Logger configurado
    """
    logger = logging.getLogger(name)
    if getattr(logger, "_configured", False):
        return logger

    is_prod = get_environment() == "prod"
    formatter = logging.Formatter(LOG_FORMAT_PROD if is_prod else LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as exc:
        # Sistemas de archivos de solo lectura (serverless): solo consola.
        logger.warning("No se pudo abrir %s: %s", LOG_FILE, exc)

    logger.setLevel(logging.WARNING if is_prod else logging.INFO)
    logger.propagate = False
    logger._configured = True
    return logger
