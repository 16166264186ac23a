"""Local HTTP trigger surface."""

from .app import create_app, generate_token

__all__ = ["create_app", "generate_token"]
