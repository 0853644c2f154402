"""
Configuration loading utility for MailCorpus.

This module provides a function to safely load and validate a YAML pipeline
configuration file. Without a file the built-in defaults are used.
"""

import yaml
from pathlib import Path
import logging
from typing import Optional
from pydantic import ValidationError

from .config_models import PipelineConfig
from ..core.errors import PipelineSetupError

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str] = None) -> dict:
    """
    Loads and validates a YAML configuration file from the specified path.

    Sections missing from the file take their default values. If the file is
    not found, unreadable, empty or fails validation, the error is logged and
    a PipelineSetupError is raised.

    Args:
        config_path (Optional[str]): The path to the YAML configuration file,
            or None to use the defaults.

    Returns:
        dict: A dictionary containing the validated configuration.
    """
    if config_path is None:
        logger.debug("No configuration file given. Using default configuration.")
        return PipelineConfig().model_dump()

    path = Path(config_path)
    if not path.is_file():
        logger.error(f"Configuration file not found or is not a file: '{path}'")
        raise PipelineSetupError(f"Configuration file not found: '{path}'")

    logger.debug(f"Attempting to load and validate configuration from: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (yaml.YAMLError, IOError) as e:
        logger.error(
            f"Error reading or parsing YAML file '{path}': {e}", exc_info=True
        )
        raise PipelineSetupError(f"Could not read configuration '{path}'") from e

    if not config:
        logger.error(f"Configuration file is empty: '{path}'")
        raise PipelineSetupError(f"Configuration file is empty: '{path}'")

    try:
        validated = PipelineConfig.model_validate(config)
    except ValidationError as e:
        # Pydantic provides detailed, user-friendly error messages.
        logger.error(f"Configuration validation failed:\n{e}")
        raise PipelineSetupError(f"Invalid configuration '{path}'") from e

    logger.info(f"Successfully loaded and validated configuration from: '{path}'")
    return validated.model_dump()
