"""Configuration package."""

from .settings import (
    get_app_name,
    get_app_version,
    get_default_precision,
    get_default_profile_name,
)

__all__ = [
    'get_app_name',
    'get_app_version',
    'get_default_precision',
    'get_default_profile_name',
]
