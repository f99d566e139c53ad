"""Shared utilities for Amarillo AI."""

from amarillo_ai.utils.logging import setup_logging

__all__ = ['setup_logging']
