import os
import sys

from loguru import logger


def setup_logger(
    *,
    json_logs: bool = False,
    level: str = "INFO",
    log_dir: str | None = "logs",
    respect_env: bool = True,
) -> None:
    """Configure loguru for the service.

    Console level comes from the LOG_LEVEL env when ``respect_env`` is set,
    else ``level`` as given (the CLI's --verbose must not be overridden).
    File sink, when ``log_dir`` is set, always captures DEBUG so degraded
    audits can be traced back to the failing probe.
    """
    console_level = (os.getenv("LOG_LEVEL", level) if respect_env else level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stdout, serialize=True, level=console_level)
    else:
        logger.add(
            sys.stdout,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
                "<level>{message}</level>"
            ),
            level=console_level,
            colorize=True,
        )

    if log_dir:
        logger.add(
            os.path.join(log_dir, "token_audit_{time:YYYY-MM-DD}.log"),
            rotation="50 MB",
            retention="7 days",
            compression="gz",
            level="DEBUG",
            serialize=json_logs,
        )
