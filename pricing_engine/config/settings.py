"""Central configuration for the pricing engine."""

import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 2
DEFAULT_PROFILE = "default"


def get_app_name() -> str:
    """Get application name."""
    return "Pricing Engine"


def get_app_version() -> str:
    """Get application version from pyproject.toml."""
    try:
        import tomli
        pyproject_path = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            pyproject = tomli.load(f)
            return pyproject.get("project", {}).get("version", "0.1.0")
    except (OSError, ImportError, ValueError):
        # Fallback version if pyproject.toml cannot be read
        return "0.1.0"


def get_default_precision() -> int:
    """Get default rounding precision.

    Returns:
        Decimal places from PRICING_PRECISION environment variable,
        default 2. Non-integer or negative values are ignored.
    """
    env_value = os.getenv('PRICING_PRECISION')
    if env_value is None or env_value.strip() == "":
        return DEFAULT_PRECISION
    try:
        precision = int(env_value)
    except ValueError:
        logger.warning(f"Invalid PRICING_PRECISION: {env_value}, using {DEFAULT_PRECISION}")
        return DEFAULT_PRECISION
    if precision < 0:
        logger.warning(f"Negative PRICING_PRECISION: {env_value}, using {DEFAULT_PRECISION}")
        return DEFAULT_PRECISION
    return precision


def get_default_profile_name() -> str:
    """Get default profile name.

    Returns:
        Profile name from PRICING_PROFILE environment variable, default 'default'
    """
    return os.getenv('PRICING_PROFILE') or DEFAULT_PROFILE
