"""Logfire and logging setup for Darwin applications."""

import logging
from typing import Optional

import logfire

from src.core.config import Settings, settings as default_settings


def configure_logfire(settings: Optional[Settings] = None) -> None:
    """
    Configure Logfire for observability.

    Spans are only shipped when a token is configured; console output is
    controlled by the logfire_console setting.
    """
    settings = settings or default_settings
    logfire.configure(
        send_to_logfire="if-token-present",
        console=None if settings.logfire_console else False,
        **settings.get_logfire_settings()
    )
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
