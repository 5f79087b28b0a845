"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, Field, field_validator, model_validator


class ClientConfig(BaseModel):
    """A validated configuration model for the application."""

    # Authentication
    email: str = ""
    password: str = ""

    # Client Settings
    storage_directory: str = "."
    request_timeout: int = 60

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Rejects values that cannot be an account email."""
        if v and "@" not in v:
            raise ValueError(f"Email must be a full account address, got: {v}")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Ensures a reasonable request timeout."""
        if v < 1 or v > 600:
            raise ValueError("Request timeout must be between 1 and 600 seconds.")
        return v

    @field_validator("storage_directory")
    @classmethod
    def validate_storage_directory(cls, v: str) -> str:
        if not v:
            raise ValueError("Storage directory cannot be empty.")
        return v

    @model_validator(mode="after")
    def validate_credentials(self) -> "ClientConfig":
        """Validates that both login fields are present."""
        if not (self.email and self.password):
            raise ValueError(
                "Authentication not configured. Provide both email and password."
            )
        return self

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
