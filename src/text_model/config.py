"""Configuration for reading and writing annotated text documents."""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class MapperConfig(BaseModel):
    """Options for ModelMapper."""

    indent: Optional[int] = Field(
        default=None,
        ge=0,
        description="Indentation for JSON text output, None for compact output",
        examples=[None, 2],
    )
    sort_keys: bool = Field(default=False, description="Sort object keys in JSON text output")
    ensure_ascii: bool = Field(
        default=False,
        description="Escape non-ASCII characters in JSON text output",
    )
    strict_attributes: bool = Field(
        default=False,
        description=(
            "Reject layers stored under attribute keys outside the catalog. "
            "When False such layers are kept verbatim as plain JSON trees."
        ),
    )

    model_config = ConfigDict(extra="forbid", frozen=True)
