"""Decoding helpers for Firefly API payloads.

Some Firefly endpoints are inconsistent about response shapes: label
fields arrive either as a list of strings or as a single bare string, and
guardrail creation returns either a bare rule id or an object. The
helpers here normalize both into one canonical shape so the rest of the
client only ever sees lists and structured responses.
"""

import logging
import types
from functools import lru_cache
from typing import (
    Annotated,
    Any,
    ClassVar,
    FrozenSet,
    List,
    Set,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    SerializerFunctionWrapHandler,
    TypeAdapter,
    ValidationError,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from ..exceptions import DecodingError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _string_or_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return value


# Always a list after validation; always encoded as a JSON array.
FlexibleStringList = Annotated[List[str], BeforeValidator(_string_or_list)]


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


_UNION_TYPES = tuple(
    t for t in (Union, getattr(types, "UnionType", None)) if t is not None
)


def _admits_none(annotation: Any) -> bool:
    if annotation is Any or annotation is None or annotation is type(None):
        return True
    if get_origin(annotation) in _UNION_TYPES:
        return type(None) in get_args(annotation)
    return False


def _input_keys(name: str, field: Any) -> List[str]:
    keys = [name]
    if field.alias:
        keys.append(field.alias)
    if isinstance(field.validation_alias, str):
        keys.append(field.validation_alias)
    elif isinstance(field.validation_alias, AliasChoices):
        keys.extend(c for c in field.validation_alias.choices if isinstance(c, str))
    return keys


class FireflyModel(BaseModel):
    """Base class for Firefly request and response shapes.

    Field names are snake_case in Python and camelCase on the wire. Fields
    listed in ``omit_empty_fields`` are left out of the serialized payload
    when they hold an empty value.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    omit_empty_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def _null_means_default(cls, data: Any) -> Any:
        # JSON null on a non-Optional field decodes as the field default
        if not isinstance(data, dict):
            return data
        non_nullable: Set[str] = set()
        for name, field in cls.model_fields.items():
            if not _admits_none(field.annotation):
                non_nullable.update(_input_keys(name, field))
        return {
            key: value
            for key, value in data.items()
            if value is not None or key not in non_nullable
        }

    @model_serializer(mode="wrap")
    def _drop_empty_fields(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        if not self.omit_empty_fields or not isinstance(data, dict):
            return data
        fields = type(self).model_fields
        for name in self.omit_empty_fields:
            field = fields[name]
            for key in {name, field.serialization_alias or field.alias or name}:
                if key in data and _is_empty(data[key]):
                    del data[key]
        return data

    def to_payload(self) -> Any:
        """Serialize to the JSON-compatible value sent on the wire."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@lru_cache(maxsize=None)
def _adapter_for(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def _shape_name(shape: Any) -> str:
    return getattr(shape, "__name__", None) or str(shape)


def decode_json(content: bytes, shape: Any) -> Any:
    """Decode a JSON response body into the given type.

    Args:
        content: Raw response body
        shape: A pydantic model or any type ``TypeAdapter`` accepts

    Returns:
        The validated value

    Raises:
        DecodingError: If the body is not valid JSON or does not match
    """
    try:
        return _adapter_for(shape).validate_json(content)
    except ValidationError as e:
        logger.debug(f"Failed to decode response as {_shape_name(shape)}")
        raise DecodingError(
            f"Failed to decode response as {_shape_name(shape)}", details=str(e)
        ) from e


_STRING_ADAPTER = TypeAdapter(str)


def decode_string_or_object(
    content: bytes, model: Type[ModelT], string_field: str
) -> ModelT:
    """Decode a body that is either a ``model`` object or a bare JSON string.

    The object form is tried first. A bare string is stored in
    ``string_field`` and every other field keeps its default.

    Raises:
        DecodingError: If the body is neither form
    """
    try:
        return model.model_validate_json(content)
    except ValidationError as object_error:
        try:
            value = _STRING_ADAPTER.validate_json(content)
        except ValidationError:
            raise DecodingError(
                f"Response is neither a {model.__name__} object nor a string",
                details=str(object_error),
            ) from object_error

    return model.model_validate({string_field: value})
