"""
Request template rendering.

Templates are plain strings (usually taken from the environment) written in
jinja2 syntax. Every top-level key of the request data is available as a
variable, and the whole mapping is also exposed as ``data`` (unless the
request itself carries a ``data`` key):

    {"project": "{{ project }}", "zone": "{{ zone }}",
     "instance_resource": {"name": "{{ name | ToLower }}"}}

Undefined variables are an error, never an empty string.
"""

import json
from typing import Any, Dict

from jinja2 import Environment, StrictUndefined, TemplateError
from loguru import logger

from vmlauncher.utils.errors import InstanceOperationError


def _build_environment() -> Environment:
    env = Environment(
        undefined=StrictUndefined,
        autoescape=False,  # nosec B701
        keep_trailing_newline=True,
    )
    env.filters["ToUpper"] = lambda value: str(value).upper()
    env.filters["ToLower"] = lambda value: str(value).lower()
    return env


template_env = _build_environment()


def render_request_template(name: str, source: str, data: Dict[str, Any]) -> str:
    """
    Render a request template with the given data.

    Args:
        name (str): Template name, used in error messages.
        source (str): Template source.
        data (Dict[str, Any]): Request data, keys become template variables.

    Returns:
        str: The rendered template.

    Raises:
        InstanceOperationError: If the template cannot be parsed or references a missing key.
    """
    try:
        template = template_env.from_string(source)
        return template.render({"data": data, **data})
    except TemplateError as e:
        raise InstanceOperationError(f"{name}: {e}") from e


def parse_rendered_request(name: str, rendered: str) -> Dict[str, Any]:
    """Parse rendered template output, which must be a JSON object."""
    try:
        payload = json.loads(rendered)
    except json.JSONDecodeError as e:
        logger.debug(f"  ! [Template] '{name}' rendered to invalid JSON: {rendered!r}")
        raise InstanceOperationError(f"{name}: rendered request is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise InstanceOperationError(f"{name}: rendered request must be a JSON object")
    return payload
