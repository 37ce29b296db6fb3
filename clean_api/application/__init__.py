"""
Application layer: commands, queries, validators and their handlers.

Importing this package registers every product handler with the mediator.
"""

from . import products  # noqa: F401
from .mediator import Mediator, RequestHandler, handles

__all__ = ["Mediator", "RequestHandler", "handles"]
