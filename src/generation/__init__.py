"""
Generation module - client for the external book generation service.
"""

from .client import GenerationClient

__all__ = ["GenerationClient"]
