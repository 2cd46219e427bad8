"""
Common/shared Pydantic schemas.
"""

from typing import Any, Generic, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    All schemas should inherit from this.
    """

    model_config = ConfigDict(
        from_attributes=True,  # Allow ORM mode (SQLAlchemy objects)
        populate_by_name=True,  # Allow population by field name or alias
        str_strip_whitespace=True,  # Strip whitespace from strings
        validate_assignment=True,  # Validate on assignment, not just creation
    )


class ExtensibleSchema(BaseSchema):
    """
    Schema for open-ended JSON blobs with a known core.

    Keys the schema declares are validated as fields; any other key is kept
    verbatim in ``extra`` so data written by newer clients survives a
    round trip through older code.
    """

    extra: dict[str, Any] = Field(
        default_factory=dict,
        description="Unrecognized keys, preserved as is",
    )

    @model_validator(mode="before")
    @classmethod
    def _collect_unknown_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        known = set(cls.model_fields)
        extra = dict(data.get("extra") or {})
        values = {}
        for key, value in data.items():
            if key == "extra":
                continue
            if key in known:
                values[key] = value
            else:
                extra[key] = value
        values["extra"] = extra
        return values

    def to_storage(self) -> dict[str, Any]:
        """Flat dict for a JSON column: set fields plus the preserved extras."""
        return self.model_dump(exclude_none=True, mode="json")

    @model_serializer(mode="wrap")
    def _flatten_extra(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        # Extras go back to the top level, so output has the shape that was accepted
        data = handler(self)
        data.pop("extra", None)
        return {**self.extra, **data}


T = TypeVar('T')


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Generic paginated response wrapper.

    Usage:
        PaginatedResponse[TenantDomainRead](items=domains, total=100, skip=0, limit=20)
    """

    items: list[T]
    total: int = Field(..., description="Total number of items")
    skip: int = Field(..., description="Number of items skipped")
    limit: int = Field(..., description="Maximum items per page")

    @property
    def has_next(self) -> bool:
        """Check if there are more pages."""
        return self.skip + self.limit < self.total


class MessageResponse(BaseModel):
    """Simple message response."""
    message: str
