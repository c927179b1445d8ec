"""Base model configuration for all data structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base model with standard configuration.

    Unknown fields are rejected so that a misspelled option in a directly
    built Config fails loudly instead of being dropped.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
