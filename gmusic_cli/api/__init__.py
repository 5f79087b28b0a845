"""
Music API Layer.

This package handles all communication with the music web API.
"""

from .client import MusicAPIClient
from .deserializer import Deserializer, JsonDeserializer
from .forms import FormBuilder
from .transport import AiohttpTransport, Transport

__all__ = [
    "AiohttpTransport",
    "Deserializer",
    "FormBuilder",
    "JsonDeserializer",
    "MusicAPIClient",
    "Transport",
]
