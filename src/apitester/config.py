"""
Configuration management for apitester.
"""

import os
from pathlib import Path
from typing import List, Optional, Union

import orjson
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError, ValidationError
from .executor import DEFAULT_TIMEOUT

# Default file locations, relative to the working directory
DEFAULT_CONFIG_FILE = os.path.join(".", "config", "apitester.json")
DEFAULT_TEMPLATES_DIR = os.path.join(".", "templates")
DEFAULT_HEADERS_FILE = os.path.join(".", "config", "default_headers.conf")
DEFAULT_HISTORY_FILE = os.path.join(".", "api_tester_history.log")


class ApiTesterConfig(BaseModel):
    """Configuration for the apitester CLI and suite runner."""

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    verify_ssl: bool = True
    follow_redirects: bool = False
    templates_dir: str = DEFAULT_TEMPLATES_DIR
    default_headers_file: str = DEFAULT_HEADERS_FILE
    history_file: str = DEFAULT_HISTORY_FILE
    history_enabled: bool = True


def load_config(config_file: Optional[str] = None) -> ApiTesterConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_file: Path to the configuration file. If None, the default path is used.

    Returns:
        Loaded configuration, or the defaults when the file does not exist

    Raises:
        ConfigurationError: If the file exists but cannot be read or parsed
    """
    path = Path(config_file or DEFAULT_CONFIG_FILE)

    if not path.exists():
        if config_file:
            raise ConfigurationError(f"Config file '{config_file}' not found")
        return ApiTesterConfig()

    try:
        config_data = orjson.loads(path.read_bytes())
        return ApiTesterConfig(**config_data)
    except (OSError, orjson.JSONDecodeError, TypeError, PydanticValidationError) as e:
        raise ConfigurationError(f"Error loading config '{path}': {e}") from e


def save_config(config: ApiTesterConfig, config_file: Optional[str] = None) -> Path:
    """
    Save configuration to a JSON file.

    Args:
        config: Configuration to save
        config_file: Path to the configuration file. If None, the default path is used.

    Returns:
        The path written
    """
    path = Path(config_file or DEFAULT_CONFIG_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(config.model_dump(), option=orjson.OPT_INDENT_2))
    return path


def load_default_headers(path: Union[str, Path]) -> List[str]:
    """Read default header lines, one per line; a missing file means none."""
    path = Path(path)
    if not path.exists():
        return []
    return [line for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def add_default_header(path: Union[str, Path], header: str) -> List[str]:
    """
    Append a default header line.

    Raises:
        ValidationError: If the line is not in "Name: Value" form
    """
    header = header.strip()
    if ":" not in header or not header.split(":", 1)[0].strip():
        raise ValidationError(f"Invalid header '{header}'. Expected format: Name: Value")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(header + "\n")
    return load_default_headers(path)


def remove_default_header(path: Union[str, Path], header: str) -> bool:
    """
    Remove every line exactly equal to ``header``.

    Returns:
        True if at least one line was removed
    """
    path = Path(path)
    headers = load_default_headers(path)
    remaining = [line for line in headers if line != header]
    if len(remaining) == len(headers):
        return False
    path.write_text("".join(line + "\n" for line in remaining), encoding="utf-8")
    return True
