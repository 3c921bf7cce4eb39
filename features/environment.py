"""
Behave environment configuration for Cloud DNS Manager integration tests.
"""

import io
import logging
import shutil
from pathlib import Path

import yaml
from rich.console import Console

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def before_all(context):
    """Set up test environment before all tests."""
    context.base_dir = Path(__file__).parent.parent
    context.test_data_dir = context.base_dir / "test_data"
    context.test_data_dir.mkdir(exist_ok=True)

    context.test_zone = "test.bigbank.com"

    context.test_config = {
        "dns_providers": {
            "mock": {"zones": [context.test_zone, "example.com"]},
        },
        "default_provider": "mock",
        "timeout": 30,
        "logging": {
            "level": "DEBUG",
            "file": str(context.test_data_dir / "test_dns_manager.log"),
        },
    }

    context.test_config_file = context.test_data_dir / "test_config.yaml"
    with open(context.test_config_file, "w") as f:
        yaml.dump(context.test_config, f)

    logger.info("Test environment setup complete")


def before_scenario(context, scenario):
    """Set up each test scenario."""
    context.scenario_name = scenario.name
    context.output = io.StringIO()
    context.console = Console(file=context.output, width=200)
    context.result = None

    logger.info(f"Starting scenario: {scenario.name}")


def after_scenario(context, scenario):
    """Clean up after each test scenario."""
    # The mock provider keeps records in memory; drop it between scenarios
    if hasattr(context, "dns_manager"):
        del context.dns_manager

    logger.info(f"Completed scenario: {scenario.name}")


def after_all(context):
    """Clean up test environment after all tests."""
    if context.test_data_dir.exists():
        shutil.rmtree(context.test_data_dir, ignore_errors=True)

    logger.info("Test environment cleanup complete")
