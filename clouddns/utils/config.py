"""
Configuration loading and logging setup.
"""

import logging
import sys
from typing import Dict

import yaml
from dotenv import load_dotenv

from ..exceptions import ProviderConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/config.yaml"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_default_config() -> Dict:
    """Return default configuration."""
    return {
        "default_provider": "mock",
        "timeout": 30,
        "dns_providers": {
            "aws": {"region": "us-east-1"},
            "cloudflare": {},
            "digitalocean": {},
            "mock": {"zones": ["example.com"]},
        },
        "logging": {"level": "INFO", "file": "clouddns.log"},
    }


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict:
    """
    Load configuration from YAML file.

    A .env file in the working directory is loaded first so API tokens can
    live there instead of in the config file.
    """
    load_dotenv()

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Configuration loaded from {config_path}")
    except FileNotFoundError:
        logger.warning(f"Config file {config_path} not found, using defaults")
        return get_default_config()
    except yaml.YAMLError as e:
        raise ProviderConfigError(f"Error parsing config file {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ProviderConfigError(f"Config file {config_path} must contain a mapping")

    defaults = get_default_config()
    for key, value in defaults.items():
        config.setdefault(key, value)
    return config


def config_logger(config: Dict, verbose: bool = False):
    """Configure logging."""
    logging_config = config.get("logging", None)
    level = "DEBUG" if verbose else "INFO"
    handlers = [logging.StreamHandler(sys.stdout)]

    if logging_config:
        level = "DEBUG" if verbose else logging_config.get("level", "INFO")
        log_file = logging_config.get("file")
        if log_file:
            handlers.insert(0, logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)

    # SDK wire logging is too noisy below WARNING
    for noisy in ("botocore", "boto3", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
