import logging, json, sys, time, os

from .config import Settings, load_settings


def get_logger(name="nkeys", level=None, to_file=None):
    """Structured JSON logger shared by the nkey_core modules.

    Loggers are created at import time, so a bad NKEYS_LOG_LEVEL falls back
    to the default settings with a warning instead of breaking the import.
    """
    config_error = None
    try:
        settings = load_settings()
    except ValueError as e:
        settings, config_error = Settings(), e

    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else settings.level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt=json.dumps({
                "ts": "%(asctime)s",
                "level": "%(levelname)s",
                "name": "%(name)s",
                "msg": "%(message)s"
            }),
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime  # UTC timestamps
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        to_file = to_file or settings.log_file
        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    if config_error is not None:
        logger.warning(f"[CONFIG] {config_error}; using {settings.log_level}")

    return logger
