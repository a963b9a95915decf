from __future__ import annotations

import logging
from pathlib import Path

from ..config.loader import ConfigError, default_config, load_config
from ..logging.init import log_summary, setup_logging
from ..models.processing_result import ProcessingResult
from .file_processor import process_all
from .summary import render_summary_line

"""Library entry point: config -> logging -> import run -> SUMMARY line."""

DEFAULT_CONFIG_PATH = Path("config/importer.yml")


def run_import(config_path: Path | None = None, *, debug: bool = False) -> ProcessingResult:
    """Load the config, process every workbook of its source directory and log the summary.

    Without ``config_path`` the default config file is used when it exists,
    the built-in defaults otherwise (``source_directory`` is required then).

    Raises:
        ConfigError: invalid config file
        ProcessingError: missing or unreadable source directory
    """
    logger = setup_logging(logging.DEBUG if debug else logging.INFO)

    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = DEFAULT_CONFIG_PATH
    try:
        config = load_config(config_path) if config_path is not None else default_config()
    except ConfigError as e:
        logger.error(f"config: {e}")
        raise

    result = process_all(config)
    log_summary(render_summary_line(result))
    return result
