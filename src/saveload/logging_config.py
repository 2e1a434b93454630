import logging

from .config import load_config


def configure_logging(default_level: int = logging.INFO) -> None:
    """Configure root logger with a sane default format.

    Respects SAVELOAD_LOG_LEVEL env var if present.
    """
    level = load_config().log_level
    if level is None:
        level = default_level
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
