"""
Turns raw response text into typed records.
"""

import logging
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from gmusic_cli.exceptions import FormatError

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Deserializer(Protocol):
    """Capability that parses response text into a record of the given type."""

    def deserialize(self, text: str, model: type[ModelT]) -> ModelT: ...


class JsonDeserializer:
    """Default deserializer backed by pydantic JSON validation."""

    def deserialize(self, text: str, model: type[ModelT]) -> ModelT:
        """
        Validates ``text`` as JSON against ``model``.

        Raises:
            FormatError: If the text is not JSON or does not match the model.
        """
        try:
            return model.model_validate_json(text)
        except ValidationError as e:
            log.debug(f"Response did not match {model.__name__}: {text[:200]!r}")
            raise FormatError(
                f"Response could not be read as {model.__name__}: "
                f"{e.error_count()} validation error(s)"
            ) from e
