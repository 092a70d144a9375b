"""Configuration validation utilities."""

from dataclasses import dataclass, fields
from typing import Any

from .defaults import ChartParams, FeedParams, LoggingParams, ParserParams

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

SECTION_PARAMS = {
    "parser": ParserParams,
    "feed": FeedParams,
    "chart": ChartParams,
    "logging": LoggingParams,
}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_parser_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate quote parser parameters."""
        errors = []

        if "delimiter" in params:
            value = params["delimiter"]
            if not isinstance(value, str) or value == "" or value.strip() == "":
                errors.append(ValidationError(
                    field="delimiter",
                    message="Must be a non-empty, non-whitespace string",
                    value=value
                ))

        # Fewer fields than a quote carries would let the parser read past the message
        if "min_fields" in params:
            value = params["min_fields"]
            if (not isinstance(value, int) or isinstance(value, bool)
                    or value < ParserParams.min_fields):
                errors.append(ValidationError(
                    field="min_fields",
                    message=f"Must be an integer >= {ParserParams.min_fields}",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_feed_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate feed parameters."""
        errors = []

        if "source" in params:
            value = params["source"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="source",
                    message="Must be a file path or '-'",
                    value=value
                ))

        if "encoding" in params:
            value = params["encoding"]
            try:
                "".encode(value)
            except (LookupError, TypeError):
                errors.append(ValidationError(
                    field="encoding",
                    message="Must be a known text encoding",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(VALID_LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        for section, value in config.items():
            params_cls = SECTION_PARAMS.get(section)
            if params_cls is None:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=value
                ))
                continue
            if not isinstance(value, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=value
                ))
                continue
            known = {f.name for f in fields(params_cls)}
            for key in value:
                if key not in known:
                    errors.append(ValidationError(
                        field=f"{section}.{key}",
                        message="Unknown parameter",
                        value=value[key]
                    ))
        if errors:
            return errors

        if "parser" in config:
            errors.extend(ConfigValidator.validate_parser_params(config["parser"]))

        if "feed" in config:
            errors.extend(ConfigValidator.validate_feed_params(config["feed"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
