"""Base model configuration for configuration structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Frozen model that rejects unknown keys."""

    model_config = ConfigDict(frozen=True, extra="forbid")
