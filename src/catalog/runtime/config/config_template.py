"""Loading of ``config.yaml`` with environment variable placeholders."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic_core import ValidationError

from src.catalog.runtime.config.config_data import ConfigData

# ${NAME}, ${NAME:-default} or ${NAME:?message}
_PLACEHOLDER = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"(?:(?P<op>:-|:\?)(?P<arg>[^}]*))?\}"
)

DEFAULT_CONFIG_PATH = Path("config.yaml")


def substitute_env_vars(text: str) -> str:
    """Replace ``${...}`` placeholders in ``text`` with environment values.

    Full-line YAML comments are dropped first so placeholder syntax quoted in
    them is never resolved.

    ``${NAME}`` and ``${NAME:?message}`` require the variable to be set;
    ``${NAME:-default}`` falls back to ``default`` when it is unset or empty.

    Raises:
        ValueError: If a required variable is not set
    """

    def resolve(match: re.Match[str]) -> str:
        name, op, arg = match.group("name", "op", "arg")
        value = os.getenv(name)

        if op == ":-":
            return value or arg
        if value is None:
            if op == ":?":
                raise ValueError(f"Required environment variable {name}: {arg}")
            raise ValueError(f"Required environment variable {name} not set")
        return value

    lines = [
        line
        for line in text.splitlines(keepends=True)
        if not line.lstrip().startswith("#")
    ]
    return _PLACEHOLDER.sub(resolve, "".join(lines))


def apply_environment_overrides(env_mode: str) -> None:
    """Promote ``<ENV>_NAME`` variables to ``NAME`` for the active environment.

    With ``APP_ENVIRONMENT=production``, ``PRODUCTION_JWT_SECRET`` wins over
    ``JWT_SECRET``.
    """
    prefix = f"{env_mode.upper()}_"
    promoted = {
        name[len(prefix):]: value
        for name, value in os.environ.items()
        if name.startswith(prefix) and len(name) > len(prefix)
    }
    if promoted:
        logger.info("Applying {} overrides: {}", env_mode, sorted(promoted))
    os.environ.update(promoted)


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Parse a templated YAML file into ``ConfigData``.

    Raises:
        ValueError: If a required variable is missing, the YAML is malformed,
            the values do not validate, or production runs without a JWT secret
        FileNotFoundError: If the YAML file doesn't exist
    """
    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.info("Loading configuration for environment: {}", env_mode)
    apply_environment_overrides(env_mode)

    rendered = substitute_env_vars(file_path.read_text())
    try:
        document = yaml.safe_load(rendered) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e

    try:
        config = ConfigData.model_validate(document.get("config") or {})
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    if config.app.environment == "production" and not config.jwt.secret:
        raise ValueError("JWT_SECRET must be set in production")

    return config


def load_config(file_path: Path | None = None) -> ConfigData:
    """Load configuration from ``file_path`` or ``$CATALOG_CONFIG``.

    Falls back to the built-in defaults when no configuration file exists.
    """
    path = file_path or Path(os.getenv("CATALOG_CONFIG", DEFAULT_CONFIG_PATH))
    if not path.exists():
        logger.warning("Configuration file {} not found; using defaults", path)
        return ConfigData()
    return load_templated_yaml(path)
