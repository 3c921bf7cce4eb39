"""
Utility functions and helpers.

This package contains utility functions for validation, record value
formatting, configuration and logging setup.
"""

from .config import config_logger, get_default_config, load_config
from .validators import (
    validate_fqdn,
    validate_ipv4,
    validate_ipv6,
    validate_record_name,
    validate_record_value,
    validate_zone_name,
)

__all__ = [
    "config_logger",
    "get_default_config",
    "load_config",
    "validate_fqdn",
    "validate_ipv4",
    "validate_ipv6",
    "validate_record_name",
    "validate_record_value",
    "validate_zone_name",
]
