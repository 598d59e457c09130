# soapreply/utils/config_loader.py
"""
soapreply Configuration Loader with Pydantic Validation

This module loads and validates configuration from a YAML file using Pydantic.
Validation happens at load time so that a malformed file fails fast, before
any reply is decoded.

Key Design Decisions:
- Pydantic models mirror the exact structure of config.yaml
- Log levels support both string names ("DEBUG") and numeric values (10)
- File logging is optional; console logging is always enabled
"""

import logging
from pathlib import Path
from typing import Any, Literal, cast

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

# Set up a logger for this module
logger: logging.Logger = logging.getLogger(__name__)

# Level names accepted in config.yaml
LogLevelName = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

STANDARD_LEVELS: frozenset[int] = frozenset(
    {logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL}
)

# =============================================================================
# Configuration Models (Schema)
# =============================================================================


class DecoderSection(BaseModel):
    """
    Schema for the 'decoder' section of config.yaml.

    Controls how response bodies are read before they are parsed.
    """

    model_config = ConfigDict(extra='forbid', frozen=True)

    read_timeout: float | None = Field(
        default=30.0,
        gt=0.0,
        description='Deadline in seconds for reading a whole response body. '
        'Checked between chunks. Null disables the deadline.',
    )

    chunk_size: int = Field(
        default=8192,
        ge=1,
        description='Number of bytes requested per read from the response stream.',
    )


def level_to_int(level: LogLevelName | int) -> int:
    """Translate a level name such as 'DEBUG' to its logging constant."""
    if isinstance(level, int):
        return level
    return cast(int, logging.getLevelName(level))


class LoggingSection(BaseModel):
    """
    Schema for the 'logging' section of config.yaml.

    The console handler (stderr) is always installed. A log file is added
    when ``file_path`` is set; it usually runs at DEBUG so that the 'RPC'
    event of every decoded reply is kept.
    """

    model_config = ConfigDict(extra='forbid')

    console_level: LogLevelName | int = Field(
        default='INFO',
        description='Level of the console handler, by name or number.',
    )
    file_path: Path | None = Field(
        default=None,
        description='Log file to append to. Unset disables file logging.',
    )
    file_level: LogLevelName | int | None = Field(
        default=None,
        description='Level of the file handler. Defaults to DEBUG when file_path is set.',
    )

    @field_validator('console_level', 'file_level')
    @classmethod
    def check_numeric_level(
        cls, level: LogLevelName | int | None
    ) -> LogLevelName | int | None:
        """Numeric levels must be one of the five standard levels."""
        if isinstance(level, int) and level not in STANDARD_LEVELS:
            raise ValueError(
                f'Numeric log level must be one of {sorted(STANDARD_LEVELS)}, got {level}'
            )
        return level

    @model_validator(mode='after')
    def pair_file_settings(self) -> 'LoggingSection':
        """A file level needs a file; a file without a level logs at DEBUG."""
        if self.file_path is None:
            if self.file_level is not None:
                raise ValueError('file_level is set but file_path is not')
            return self

        if self.file_level is None:
            logger.warning('No file_level for %s, logging DEBUG to it', self.file_path)
            self.file_level = 'DEBUG'
        return self

    def get_console_level_int(self) -> int:
        return level_to_int(self.console_level)

    def get_file_level_int(self) -> int | None:
        return level_to_int(self.file_level) if self.file_level is not None else None


class SoapReplyConfig(BaseModel):
    """
    Root configuration model.

    Usage:
        config = load_config()
        decoder = ResponseDecoder(config.decoder)
        setup_logger(config.logging)
    """

    model_config = ConfigDict(extra='forbid')
    decoder: DecoderSection = Field(default_factory=DecoderSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)


# =============================================================================
# Loader Logic
# =============================================================================


def _get_default_config_path() -> Path:
    """
    Resolve the absolute path to the packaged config.yaml.

    Directory Structure:
        src/
        └── soapreply/
            ├── config/
            │   └── config.yaml       <-- Target file
            └── utils/
                └── config_loader.py  <-- This file
    """
    package_root: Path = Path(__file__).resolve().parent.parent
    return package_root / 'config' / 'config.yaml'


def load_config(config_path: Path | str | None = None) -> SoapReplyConfig:
    """
    Load, parse, and validate the configuration file.

    Args:
        config_path: Optional explicit path to a config file. If None, the
                     packaged default is used.

    Returns:
        A fully validated SoapReplyConfig object.

    Raises:
        FileNotFoundError: The config file does not exist.
        yaml.YAMLError: The file contains invalid YAML syntax.
        ValidationError: The YAML is valid but the configuration is not.

    Example:
        config = load_config('/etc/soapreply/config.yaml')
        timeout = config.decoder.read_timeout
    """
    path_obj: Path = Path(config_path) if config_path else _get_default_config_path()

    logger.debug('Resolving configuration from: %s', path_obj)

    if not path_obj.exists():
        error_msg: str = f'Configuration file not found at: {path_obj}'
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    try:
        with open(path_obj, encoding='utf-8') as f:
            raw_config: dict[str, Any] | None = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error('Failed to parse YAML config file: %s', e)
        raise

    # An empty file means "all defaults"
    try:
        config = SoapReplyConfig.model_validate(raw_config or {})
        logger.debug('Configuration validated successfully.')
        return config
    except ValidationError as e:
        logger.error('Configuration validation failed: %s', e)
        raise
