"""Datasource configuration checks -- field presence and type rules per connector.

Validity is a pure function of (connector-type tag, configuration value):
nothing here touches the network. The tag selects the configuration variant,
``authConfig.type`` selects the HTTP auth variant, and the SSL verification
policy gates ``selfSignedCert``. Only the fields a variant reports through
``active_fields()`` are checked; inert fields (e.g. Mongo host fields while
``usingUri`` is set) and unknown extra fields are ignored.

``collect_config_issues`` returns a list of issue dicts and can be used to
render form errors. ``validate_config`` raises ``ConfigValidationError``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from ..core.enums import DatasourceType
from ..core.exceptions import ConfigValidationError
from ..core.utils.logging_config import get_logger
from ..models.configs import WireModel, config_model_for, parse_config, tag_value

logger = get_logger("quality.checks")

# Fields holding a TCP port, checked for range once present
_PORT_FIELDS = {"port"}
_PORT_RANGE = (1, 65535)


def _issue(field: str | None, issue: str, message: str) -> dict[str, Any]:
    return {"field": field, "issue": issue, "message": message}


def _wire_name(model: WireModel, name: str) -> str:
    info = type(model).model_fields.get(name)
    if info is not None and info.alias:
        return info.alias
    return name


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _check_port(path: str, value: str) -> list[dict[str, Any]]:
    low, high = _PORT_RANGE
    if not value.strip().isdecimal() or not low <= int(value) <= high:
        return [_issue(path, "invalid", f"{path} must be a port number between {low} and {high}")]
    return []


def _active_field_issues(model: WireModel, prefix: str = "") -> list[dict[str, Any]]:
    """Check the active fields of *model* and, recursively, its nested configs."""
    issues: list[dict[str, Any]] = []

    for name in model.active_fields():
        path = prefix + _wire_name(model, name)
        value = getattr(model, name, None)
        if _is_blank(value):
            issues.append(_issue(path, "missing", f"{path} is required"))
        elif name in _PORT_FIELDS:
            issues.extend(_check_port(path, value))

    for name, nested in model.nested_configs().items():
        issues.extend(_active_field_issues(nested, f"{prefix}{_wire_name(model, name)}."))

    return issues


def _type_issues(exc: ValidationError) -> list[dict[str, Any]]:
    issues = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or None
        issues.append(_issue(path, "type", error["msg"]))
    return issues


def collect_config_issues(tag: str | DatasourceType, config: Any) -> list[dict[str, Any]]:
    """Return every rule violation of *config* for connector type *tag*.

    Args:
        tag: Connector-type tag of the owning datasource.
        config: A configuration model or its wire mapping.

    Returns:
        List of dicts with keys: field (camelCase path or None), issue
        (missing, invalid or type), message. Empty when the value is valid.
    """
    tag = tag_value(tag)

    if config_model_for(tag) is None:
        # Plugin-provided connector: the shape belongs to the plugin.
        if isinstance(config, (Mapping, BaseModel)):
            return []
        return [_issue(None, "type", f"config for plugin type '{tag}' must be a mapping")]

    try:
        model = parse_config(tag, config)
    except ValidationError as exc:
        return _type_issues(exc)
    except TypeError as exc:
        return [_issue(None, "type", str(exc))]

    return _active_field_issues(model)


def is_valid_config(tag: str | DatasourceType, config: Any) -> bool:
    return not collect_config_issues(tag, config)


def validate_config(tag: str | DatasourceType, config: Any) -> WireModel | dict[str, Any]:
    """Check *config* against *tag* and return it as the tag's variant.

    Raises:
        ConfigValidationError: If any rule is violated; ``issues`` lists them.
    """
    issues = collect_config_issues(tag, config)
    if issues:
        logger.warning(
            "config_validation_failed",
            datasource_type=tag_value(tag),
            issues=len(issues),
            fields=[issue["field"] for issue in issues],
        )
        summary = "; ".join(issue["message"] for issue in issues)
        raise ConfigValidationError(
            f"invalid '{tag_value(tag)}' datasource config: {summary}",
            issues=issues,
        )
    return parse_config(tag, config)
