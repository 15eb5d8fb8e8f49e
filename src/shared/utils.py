"""Utility helpers shared across services."""

from flask import jsonify

def json_response(payload, status: int = 200):
    """Return a JSON response with given status."""
    return jsonify(payload), status

def error_response(message: str, status: int):
    """Return ``{"error": message}`` with given status."""
    return json_response({'error': message}, status)
