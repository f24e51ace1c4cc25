"""Pydantic schema describing the fields a host exposes on its issues."""

from pydantic import BaseModel, Field


class HostSchemaModel(BaseModel):
    """Host issue fields, keyed by field name, with their enumeration value names.

    Fields that are not enumerations (such as a sprint reference) map to an
    empty list.
    """

    fields: dict[str, list[str]] = Field(default_factory=dict)

    def has_field(self, field_name: str) -> bool:
        """Return whether the host exposes a field with this name."""
        return field_name in self.fields

    def has_value(self, field_name: str, value_name: str) -> bool:
        """Return whether the host field defines an enumeration value with this name."""
        return value_name in self.fields.get(field_name, [])
