import sys
import logging
from typing import Any

from loguru import logger

from src.config.settings import settings


def sensitive_data_filter(record: dict[str, Any]) -> bool:
    """Filter function to mask sensitive data in log records."""
    sensitive_keys = ["key", "token", "password", "secret", "apikey"]

    def mask(value: str) -> str:
        if len(value) > 8:
            return value[:4] + "****" + value[-4:]
        return "********"

    def mask_value(value: Any, key: str = "") -> Any:
        if isinstance(value, dict):
            return {k: mask_value(v, k) for k, v in value.items()}
        if isinstance(value, list):
            return [mask_value(item, key) for item in value]
        if isinstance(value, str) and any(sk in key.lower() for sk in sensitive_keys):
            return mask(value)
        return value

    # Apply masking to the 'extra' dictionary
    if "extra" in record and isinstance(record["extra"], dict):
        record["extra"] = mask_value(record["extra"])

    # Known secrets can leak through f-string messages (e.g. client init errors)
    for secret in (settings.supabase_key, settings.supabase_service_key):
        if secret and secret in record["message"]:
            record["message"] = record["message"].replace(secret, "********")

    return True  # Keep the record after filtering/masking


def setup_logging() -> None:
    """Configures Loguru logger based on application settings."""
    logger.remove()  # Remove default handler

    logger.add(
        sys.stderr,
        level=settings.log_level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=True,
        filter=sensitive_data_filter,
    )

    logger.info(f"Logging initialized with level: {settings.log_level}")

    # Intercept standard logging messages (httpx, postgrest, ...)
    class InterceptHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            try:
                level = logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

            # Find caller from where originated the logged message
            frame, depth = logging.currentframe(), 2
            while frame.f_code.co_filename == logging.__file__:
                frame = frame.f_back
                depth += 1

            logger.opt(depth=depth, exception=record.exc_info).log(
                level, record.getMessage()
            )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.info("Standard logging intercepted.")
