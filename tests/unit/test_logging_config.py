"""Tests pour la configuration loguru."""

import json

import pytest
from loguru import logger

from src.logging_config import configure_logging, configure_logging_from_settings


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()


class TestConfigureLogging:
    """Tests des handlers configures."""

    def test_file_handler_writes_json(self, tmp_path):
        log_file = tmp_path / "logs" / "animeta.log"
        configure_logging(log_level="WARNING", log_file=log_file)

        logger.debug("Champs mis a jour episode 'Asteroid Blues'")
        logger.complete()

        records = [json.loads(line) for line in log_file.read_text().splitlines()]
        messages = [record["record"]["message"] for record in records]
        assert "Champs mis a jour episode 'Asteroid Blues'" in messages

    def test_from_settings_uses_configured_file(self, test_settings):
        configure_logging_from_settings(test_settings)

        logger.info("Balayage termine")
        logger.complete()

        assert test_settings.log_file.exists()
