"""Shared model configuration for interchange-shaped schemas."""

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Frozen model serialised with camelCase keys.

    Accepts both field names and camelCase aliases on input so partial
    updates coming from the editor (camelCase) and from Python callers
    (snake_case) validate the same way.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to the interchange shape, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def resolve_field_names(model_cls: type[BaseModel], fields: dict[str, Any]) -> dict[str, Any]:
    """Map alias or field-name keys of a partial update onto field names.

    Keys that match neither are passed through unchanged so validation
    decides what to do with them.
    """
    lookup: dict[str, str] = {}
    for name, info in model_cls.model_fields.items():
        lookup[name] = name
        if info.alias:
            lookup[info.alias] = name
    return {lookup.get(key, key): value for key, value in fields.items()}


def merge_model(model: ModelT, fields: dict[str, Any]) -> ModelT:
    """Return a validated copy of ``model`` with ``fields`` shallow-merged in."""
    data = model.model_dump()
    data.update(resolve_field_names(type(model), fields))
    return type(model).model_validate(data)
