"""
Overlay definitions.

An overlay names an ordered list of source tables that are layered into one
temporary table, lowest precedence first. Definitions are the boundary where
table names enter the system, so every name is checked against a strict
identifier pattern before it can be interpolated into SQL.
"""

import re
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import ConfigurationError

# Plain or schema-qualified MySQL identifier, no quoting.
IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z0-9_$]+(\.[A-Za-z0-9_$]+)?$')


def validate_identifier(name: str) -> str:
    """
    Check that a table name is safe to interpolate into SQL.

    Raises:
        ValueError: If the name is not a plain or schema-qualified identifier
    """
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
        raise ValueError(f'Invalid table identifier: {name!r}')
    return name


class OverlayDefinition(BaseModel):
    """A named set of source tables merged into one temporary table."""

    name: str = Field(..., min_length=1, description="Registry name of the overlay")
    table_name: str = Field(..., description="Temporary table to create")
    source_tables: List[str] = Field(
        ...,
        min_length=1,
        description="Source tables, lowest precedence first"
    )
    description: Optional[str] = Field(None, description="What the overlay combines")

    @field_validator('table_name')
    @classmethod
    def validate_table_name(cls, v):
        return validate_identifier(v)

    @field_validator('source_tables')
    @classmethod
    def validate_source_tables(cls, v):
        return [validate_identifier(table) for table in v]

    @classmethod
    def build(cls, **data) -> "OverlayDefinition":
        """
        Validate and build a definition.

        Raises:
            ConfigurationError: If any field fails validation
        """
        try:
            return cls(**data)
        except ValidationError as e:
            table_name = data.get('table_name') or data.get('name')
            raise ConfigurationError(
                f"Invalid overlay definition '{data.get('name')}': {e}",
                table_name=table_name
            ) from e
