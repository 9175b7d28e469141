"""YAML configuration loading with validation."""

import hashlib
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from article_recommender.config.constants import COMPONENT_CONFIG
from article_recommender.config.schemas import RecommenderConfig


logger = structlog.get_logger()


class ConfigValidationError(Exception):
    """Raised when a configuration file cannot be loaded or validated."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of error details with ``loc``, ``msg`` and ``type``.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


def load_yaml_mapping(file_path: Path) -> tuple[dict[str, object], str]:
    """Load a YAML file that must contain a mapping.

    Args:
        file_path: Path to the YAML file.

    Returns:
        Tuple of (parsed content, SHA-256 checksum of the raw bytes).

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If YAML parsing fails.
        ValueError: If the document is not a mapping.
    """
    content_bytes = file_path.read_bytes()
    checksum = hashlib.sha256(content_bytes).hexdigest()
    parsed = yaml.safe_load(content_bytes.decode("utf-8")) or {}
    if not isinstance(parsed, dict):
        msg = f"Expected a mapping at the top of {file_path}"
        raise ValueError(msg)
    return parsed, checksum


def _format_validation_errors(error: ValidationError) -> list[dict[str, str]]:
    return [
        {
            "loc": ".".join(str(loc) for loc in err["loc"]),
            "msg": err["msg"],
            "type": err["type"],
        }
        for err in error.errors()
    ]


def load_recommender_config(file_path: Path | None = None) -> RecommenderConfig:
    """Load recommender weights and limits.

    With no path the built-in defaults are returned.

    Args:
        file_path: Optional path to a recommender.yaml file.

    Returns:
        Validated recommender configuration.

    Raises:
        ConfigValidationError: If the file is missing, unparsable or invalid.
    """
    if file_path is None:
        return RecommenderConfig()

    log = logger.bind(component=COMPONENT_CONFIG, file_path=str(file_path))
    log.info("loading_config_file")

    try:
        data, checksum = load_yaml_mapping(file_path)
        config = RecommenderConfig.model_validate(data)
    except ValidationError as e:
        errors = _format_validation_errors(e)
        log.error(
            "config_validation_failed",
            validation_error_count=len(errors),
            errors=errors,
        )
        raise ConfigValidationError(errors, str(file_path)) from e
    except FileNotFoundError as e:
        log.error("config_file_not_found", error=str(e))
        raise ConfigValidationError(
            [{"loc": "file", "msg": str(e), "type": "file_not_found"}],
            str(file_path),
        ) from e
    except (yaml.YAMLError, ValueError) as e:
        log.error("config_yaml_parse_error", error=str(e))
        raise ConfigValidationError(
            [{"loc": "yaml", "msg": str(e), "type": "yaml_parse_error"}],
            str(file_path),
        ) from e

    log.info("config_file_loaded", file_sha256=checksum)
    return config
