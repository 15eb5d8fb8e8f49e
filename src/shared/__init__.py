"""Shared helpers for services (JSON responses, health checks)."""

from .utils import json_response, error_response

__all__ = [
    'json_response',
    'error_response',
]
