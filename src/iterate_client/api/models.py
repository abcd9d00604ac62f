"""
Wire Models

The response envelope and the JSON codec used by the API client.
Field names on the wire are snake_case. ``WireModel`` subclasses carry an
alias table generated from their own field names, so ``someField`` and
``some_field`` both map to ``some_field``. Plain dataclasses and TypedDicts
get the same mapping from their declared fields when decoded or encoded.
"""

import dataclasses
import logging
import types
from typing import (
    Any,
    Dict,
    Generic,
    Optional,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_snake
from typing_extensions import is_typeddict

from .errors import JSONDecodingError


logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNION_TYPES = (Union, getattr(types, "UnionType", Union))


class WireModel(BaseModel):
    """Base class for request and result bodies exchanged with the API."""

    model_config = ConfigDict(
        alias_generator=to_snake,
        populate_by_name=True,
    )


class Response(BaseModel, Generic[T]):
    """Envelope every API response is decoded into."""
    results: Optional[T] = None
    error: Optional[str] = None


def _is_model(tp: Any) -> bool:
    return get_origin(tp) is None and isinstance(tp, type) and issubclass(tp, BaseModel)


def _declared_fields(tp: Any) -> Optional[Dict[str, Any]]:
    """Field types of a plain dataclass or TypedDict, None for anything else."""
    if not isinstance(tp, type) or get_origin(tp) is not None or _is_model(tp):
        return None
    # pydantic dataclasses carry their own config
    if hasattr(tp, "__pydantic_fields__"):
        return None
    if dataclasses.is_dataclass(tp) or is_typeddict(tp):
        return get_type_hints(tp)
    return None


def map_field_keys(tp: Any, value: Any, to_wire: bool) -> Any:
    """
    Rename dict keys between field names and snake_case wire names.

    Walks ``value`` along the declared type ``tp``, descending into
    nested dataclasses, TypedDicts, lists, dicts and Optionals. Keys with
    no matching field are left alone.

    Args:
        tp: Declared type of ``value``.
        value: Plain JSON-like data.
        to_wire: True to rename field names to wire names, False for the reverse.

    Returns:
        A renamed copy of ``value``.
    """
    if value is None or tp is None:
        return value

    fields = _declared_fields(tp)
    if fields is not None and isinstance(value, dict):
        if to_wire:
            renames = {name: to_snake(name) for name in fields}
        else:
            renames = {to_snake(name): name for name in fields}

        mapped = {}
        for key, item in value.items():
            new_key = renames.get(key, key)
            field_name = key if to_wire else new_key
            mapped[new_key] = map_field_keys(fields.get(field_name), item, to_wire)
        return mapped

    origin = get_origin(tp)
    args = get_args(tp)

    if origin in _UNION_TYPES:
        candidates = [arg for arg in args if arg is not type(None)]
        if len(candidates) == 1:
            return map_field_keys(candidates[0], value, to_wire)
        return value

    if isinstance(value, list) and args:
        return [map_field_keys(args[0], item, to_wire) for item in value]

    if isinstance(value, dict) and len(args) == 2:
        return {key: map_field_keys(args[1], item, to_wire) for key, item in value.items()}

    return value


class JSONCodec:
    """
    Encoder/decoder pair converting between wire JSON and models.

    Encoding writes snake_case keys and omits null fields. Decoding
    parses the ``{results, error}`` envelope for a given result type.
    """

    def encode(self, value: Any) -> bytes:
        """
        Serialize a model (or any pydantic-serializable value) to JSON bytes.

        Args:
            value: The value to serialize.

        Returns:
            UTF-8 encoded JSON.
        """
        if isinstance(value, BaseModel):
            return value.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")

        plain = TypeAdapter(type(value)).dump_python(value, mode="json", exclude_none=True)
        return TypeAdapter(Any).dump_json(map_field_keys(type(value), plain, to_wire=True))

    def decode(self, data: bytes, result_type: Optional[Type[T]] = None) -> Response:
        """
        Parse envelope bytes into a ``Response`` of ``result_type``.

        Args:
            data: Raw response body.
            result_type: Type of the ``results`` field (untyped if None).

        Returns:
            The decoded envelope.

        Raises:
            JSONDecodingError: If the bytes do not fit the envelope.
        """
        try:
            if result_type is None:
                return Response[Any].model_validate_json(data)
            if _is_model(result_type):
                return Response[result_type].model_validate_json(data)

            raw = Response[Any].model_validate_json(data)
            return Response[result_type].model_validate({
                "results": map_field_keys(result_type, raw.results, to_wire=False),
                "error": raw.error,
            })
        except ValidationError as e:
            logger.debug(f"Envelope decoding failed: {e}")
            raise JSONDecodingError() from e
