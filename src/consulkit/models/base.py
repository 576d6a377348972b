"""Base Pydantic model configuration for consulkit models.

Two bases:
- ConsulBaseModel for values the client builds and sends (strict: unknown
  fields are rejected so typos surface at construction time)
- ConsulResponseModel for payloads decoded from the agent (tolerant: newer
  agents add fields, which are ignored)

Both are frozen and accept either the Python field name or the agent's
PascalCase alias.
"""

from pydantic import BaseModel, ConfigDict


class ConsulBaseModel(BaseModel):
    """Base model for request-side values (options, descriptors, registrations)."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        use_enum_values=False,
        validate_default=True,
    )


class ConsulResponseModel(BaseModel):
    """Base model for payloads returned by the agent."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
