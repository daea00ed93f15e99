"""Utility helpers for the TVmaze client."""

from tvmaze_client.utils.logging_setup import setup_logging, setup_logging_from_config

__all__ = ["setup_logging", "setup_logging_from_config"]
