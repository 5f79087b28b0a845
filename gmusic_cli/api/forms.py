"""
Builds the form-encoded request bodies expected by the web endpoints.
"""

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from gmusic_cli.exceptions import FormClosedError


class FormBuilder:
    """
    Accumulates string fields for a form-encoded POST.

    Once closed, the form is frozen and can be encoded for sending. Most
    endpoints take a single ``json`` field; see ``json_form``.
    """

    CONTENT_TYPE = "application/x-www-form-urlencoded"

    def __init__(self):
        self._fields: dict[str, str] = {}
        self._closed = False

    @classmethod
    def json_form(cls, payload: Mapping[str, Any]) -> "FormBuilder":
        """Creates a closed form carrying ``payload`` as a compact ``json`` field."""
        return cls.from_fields({"json": json.dumps(payload, separators=(",", ":"))})

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> "FormBuilder":
        """Creates a closed form from a mapping of field names to values."""
        form = cls()
        form.add_fields(fields)
        form.close()
        return form

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def content_type(self) -> str:
        return self.CONTENT_TYPE

    @property
    def fields(self) -> dict[str, str]:
        """A copy of the accumulated fields, in insertion order."""
        return dict(self._fields)

    def add_field(self, name: str, value: str) -> None:
        if self._closed:
            raise FormClosedError(f"Cannot add field '{name}' to a closed form.")
        self._fields[name] = value

    def add_fields(self, fields: Mapping[str, str]) -> None:
        for name, value in fields.items():
            self.add_field(name, value)

    def close(self) -> None:
        self._closed = True

    def encode(self) -> bytes:
        """
        Encodes the closed form as an ``application/x-www-form-urlencoded`` body.

        Raises:
            FormClosedError: If the form has not been closed yet.
        """
        if not self._closed:
            raise FormClosedError("Form must be closed before it can be encoded.")
        return urlencode(self._fields).encode("utf-8")

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"FormBuilder({list(self._fields)}, {state})"
