"""
Template storage for apitester.

Templates are JSON files holding a default request and an optional list of
test cases. Loading validates the whole file up front so a bad template fails
before any request is sent.
"""

import logging
import os
from pathlib import Path
from typing import List, Tuple, Union

import orjson
from pydantic import ValidationError as PydanticValidationError

from .exceptions import TemplateError
from .models import Template

logger = logging.getLogger("apitester.templates")

PathLike = Union[str, Path]


def _describe_errors(error: PydanticValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "template"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def parse_template(data: bytes, source: str = "<template>") -> Template:
    """
    Parse template JSON.

    Raises:
        TemplateError: If the JSON is invalid or required fields are missing
    """
    try:
        raw = orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise TemplateError(f"Failed to parse template JSON '{source}': {e}", path=source) from e

    if not isinstance(raw, dict):
        raise TemplateError(f"Template '{source}' must be a JSON object", path=source)

    try:
        return Template.model_validate(raw)
    except PydanticValidationError as e:
        raise TemplateError(
            f"Invalid template '{source}': {_describe_errors(e)}", path=source
        ) from e


def load_template_file(path: PathLike) -> Template:
    """
    Load a template from a file path.

    Raises:
        TemplateError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.is_file():
        raise TemplateError(f"Template file '{path}' not found.", path=str(path))
    try:
        data = path.read_bytes()
    except OSError as e:
        raise TemplateError(f"Cannot read template file '{path}': {e}", path=str(path)) from e
    return parse_template(data, source=str(path))


def get_template_path(name: str, templates_dir: PathLike) -> Path:
    """
    Get the path to a named template.

    Args:
        name: Template name, with or without the ``.json`` suffix
        templates_dir: Directory holding templates

    Returns:
        Template file path
    """
    if name.endswith(".json"):
        name = name[: -len(".json")]
    return Path(templates_dir) / f"{name}.json"


def resolve_template(name_or_path: str, templates_dir: PathLike) -> Path:
    """An existing file path wins; otherwise look the name up in ``templates_dir``."""
    candidate = Path(name_or_path)
    if candidate.is_file():
        return candidate
    return get_template_path(name_or_path, templates_dir)


def save_template(template: Template, path: PathLike) -> Path:
    """Write ``template`` to ``path`` in the storage layout."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(template.to_storage(), option=orjson.OPT_INDENT_2))
    return path


def list_templates(templates_dir: PathLike) -> List[Tuple[str, Template]]:
    """
    List all readable templates in a directory.

    Returns:
        Sorted list of (template_name, template) tuples; invalid files are skipped
    """
    templates_dir = Path(templates_dir)
    if not templates_dir.is_dir():
        return []

    result = []
    for file_name in sorted(os.listdir(templates_dir)):
        if not file_name.endswith(".json"):
            continue
        try:
            template = load_template_file(templates_dir / file_name)
        except TemplateError as e:
            logger.warning(f"Skipping template: {e.message}")
            continue
        result.append((file_name[: -len(".json")], template))

    return result
