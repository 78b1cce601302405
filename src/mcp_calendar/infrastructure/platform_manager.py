import logging
import os
from pathlib import Path


def create_logger(
    log_level: str = "INFO",
    logger_name: str = "mcp_calendar",
    logs_dir: str | Path | None = None,
) -> logging.Logger:
    """
    Create a logger that writes to stderr and optionally to a file.

    Stdout is reserved for the stdio protocol stream, so console output always goes
    to stderr. An already configured logger is returned unchanged.

    Args:
        log_level (str): Logging level (e.g., "INFO", "DEBUG").
        logger_name (str): Name for the logger instance.
        logs_dir (str | Path | None): Directory for log files. If None, only the console
            handler is attached.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(logger_name)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

    if not logger.handlers:  # Prevent handler duplication
        logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if logs_dir is not None:
            try:
                logs_path = Path(logs_dir)
                logs_path.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(logs_path / f"{logger_name}.log")
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)
            except OSError as e:
                logger.warning(f"File logging disabled: {e}")

    return logger


def get_parameters(
    param_names: list[str] | str,
    prefix: str = "",
) -> dict[str, str | None]:
    """
    Read configuration parameters from environment variables.

    Parameters are stored in the environment in uppercase (optionally prefixed) but are
    returned keyed by their lowercase name. Empty values are treated as missing.

    Args:
        param_names (list[str] | str): Parameter name or names to read.
        prefix (str): Optional environment variable prefix, e.g. "MCP_CALENDAR_".

    Returns:
        dict[str, str | None]: Mapping of lowercase parameter name to value or None.
    """
    if isinstance(param_names, str):
        param_names = [param_names]

    result: dict[str, str | None] = {}
    for param_name in param_names:
        value = os.getenv(f"{prefix}{param_name.upper()}")
        result[param_name.lower()] = value or None
    return result
