from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from chronoid.utils.snowflake import DeconstructedSnowflake


class GenerateSnowflake(BaseModel):
    """Request model for generating a snowflake.

    Args:
        timestamp (Optional[Union[int, datetime]]): UNIX milliseconds or an ISO
            8601 date. Defaults to now.
        increment (Optional[int]): Explicit increment, the shared counter is
            used when omitted.
        worker_id (Optional[int]): Worker ID, defaults to the configured one.
        process_id (Optional[int]): Process ID, defaults to the configured one.
    """

    timestamp: Optional[Union[int, datetime]] = Field(
        None,
        description="UNIX timestamp in milliseconds or ISO 8601 date",
        examples=[1768617781186],
    )
    increment: Optional[int] = Field(
        None,
        ge=0,
        description="Explicit increment, truncated to 12 bits",
        examples=[0],
    )
    worker_id: Optional[int] = Field(
        None,
        ge=0,
        description="Worker ID, truncated to 5 bits",
        examples=[1],
    )
    process_id: Optional[int] = Field(
        None,
        ge=0,
        description="Process ID, truncated to 5 bits",
        examples=[1],
    )

    @field_validator("timestamp", mode="before")
    @classmethod
    def validate_timestamp(cls, value):
        """Only accept whole milliseconds or dates, never floats or booleans."""

        if isinstance(value, (bool, float)):
            raise ValueError(
                "Timestamp must be an integer amount of milliseconds or an ISO 8601"
                " date."
            )
        return value


class SnowflakeOut(BaseModel):
    """Response model carrying a snowflake as a decimal string."""

    id: str = Field(..., examples=["1461913675098095707"])


class DeconstructedSnowflakeOut(BaseModel):
    """Response model for a deconstructed snowflake.

    The id is serialized as a string because it does not fit in a JSON number
    without losing precision.
    """

    id: str
    timestamp: int
    worker_id: int
    process_id: int
    increment: int
    epoch: int

    @classmethod
    def from_deconstructed(cls, data: DeconstructedSnowflake) -> "DeconstructedSnowflakeOut":
        return cls(**{**data.model_dump(), "id": str(data.id)})


class CompareSnowflakes(BaseModel):
    """Request model for comparing two snowflakes.

    Args:
        a (Union[str, int]): The first snowflake.
        b (Union[str, int]): The second snowflake.
    """

    a: Union[str, int] = Field(..., examples=["254360814063058944"])
    b: Union[str, int] = Field(..., examples=["737141877803057244"])

    @model_validator(mode="after")
    def validate_snowflakes(cls, values):
        """Reject integers that can't be snowflakes."""

        for name in ("a", "b"):
            value = getattr(values, name)
            if isinstance(value, int) and value < 0:
                raise ValueError(f"Snowflake '{name}' must be non-negative.")

        return values


class CompareResult(BaseModel):
    result: int = Field(..., description="-1, 0 or 1", examples=[-1])


class ParsedDuration(BaseModel):
    """Response model for a parsed duration, ``ms`` is null when unparseable."""

    ms: Optional[float]


class FormattedDuration(BaseModel):
    text: str
