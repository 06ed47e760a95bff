"""Row-to-record mapping for querywrap.

Destination types are dataclasses or pydantic models whose fields carry a
``db`` tag naming the backend column:

    @dataclass
    class Bug:
        id: int = column("INTERNAL_ID", default=0)
        ext_id: str = column("EXTERNAL_ID", default="")

    class Product(BaseModel):
        id: str = model_column("id", default="")
        price: float = model_column("price", default=0.0)

The field table for each type is built once and cached; mapping a row is a
walk over that table with no further introspection.
"""

from __future__ import annotations

import dataclasses
import functools
import re
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field
from pydantic_core import PydanticUndefined

from querywrap.exceptions import ConversionError, ValidationError

TAG = "db"

_INT_PATTERN = re.compile(r"[+-]?\d+")


def column(name: str, **kwargs: Any) -> Any:
    """Declare a dataclass field mapped to backend column ``name``.

    Accepts the same keyword arguments as ``dataclasses.field``.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG] = name
    return dataclasses.field(metadata=metadata, **kwargs)


def model_column(name: str, default: Any = PydanticUndefined, **kwargs: Any) -> Any:
    """Declare a pydantic field mapped to backend column ``name``."""
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra[TAG] = name
    return Field(default, json_schema_extra=extra, **kwargs)


class FieldKind(StrEnum):
    """Conversion applied to a raw value before it is stored on a field."""

    INT = "int"
    FLOAT = "float"
    STR = "str"
    UNSUPPORTED = "unsupported"


_ZERO_VALUES: dict[FieldKind, Any] = {
    FieldKind.INT: 0,
    FieldKind.FLOAT: 0.0,
    FieldKind.STR: "",
    FieldKind.UNSUPPORTED: None,
}


def _kind_of(annotation: Any) -> FieldKind:
    # bool is an int subclass but has no textual column form here
    if annotation is int:
        return FieldKind.INT
    if annotation is float:
        return FieldKind.FLOAT
    if annotation is str:
        return FieldKind.STR
    return FieldKind.UNSUPPORTED


def to_text(raw: Any) -> str:
    """Render a backend value as the text a column would carry.

    Multi-valued fields (Solr returns them as JSON arrays) are joined with
    commas, so a single-element array reads as its element.
    """
    if raw is None:
        return ""
    if isinstance(raw, bytes | bytearray | memoryview):
        return bytes(raw).decode("utf-8", errors="replace")
    if isinstance(raw, list | tuple):
        return ",".join(to_text(item) for item in raw)
    if isinstance(raw, bool):
        return "true" if raw else "false"
    return str(raw)


def _parse_int(text: str) -> int:
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid base-10 integer: {text!r}")
    return int(text)


def _parse_float(text: str) -> float:
    if text != text.strip() or "_" in text:
        raise ValueError(f"invalid float: {text!r}")
    return float(text)


@dataclass(frozen=True)
class FieldDescriptor:
    """One entry of a destination type's field table."""

    name: str
    column: str | None
    kind: FieldKind
    has_default: bool
    init: bool = True
    default: Any = None

    @property
    def zero(self) -> Any:
        return _ZERO_VALUES[self.kind]

    def convert(self, raw: Any) -> Any:
        """Convert a raw backend value to this field's type.

        Raises:
            ValueError: If the text does not parse as the field's type
        """
        text = to_text(raw)
        if self.kind is FieldKind.INT:
            return _parse_int(text)
        if self.kind is FieldKind.FLOAT:
            return _parse_float(text)
        return text


@dataclass(frozen=True)
class TypeDescriptor:
    """Cached field table for one destination type."""

    cls: type
    fields: tuple[FieldDescriptor, ...]
    is_model: bool

    @property
    def tagged(self) -> tuple[FieldDescriptor, ...]:
        return tuple(f for f in self.fields if f.column is not None)

    def field_for(self, column_name: str) -> FieldDescriptor | None:
        """Return the field tagged with ``column_name``, if any."""
        for f in self.fields:
            if f.column == column_name:
                return f
        return None


def _describe_dataclass(cls: type) -> TypeDescriptor:
    hints = typing.get_type_hints(cls)
    fields = []
    for f in dataclasses.fields(cls):
        has_default = (
            f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        )
        fields.append(
            FieldDescriptor(
                name=f.name,
                column=f.metadata.get(TAG),
                kind=_kind_of(hints.get(f.name)),
                has_default=has_default,
                init=f.init,
                default=None if f.default is dataclasses.MISSING else f.default,
            )
        )
    return TypeDescriptor(cls=cls, fields=tuple(fields), is_model=False)


def _describe_model(cls: type[BaseModel]) -> TypeDescriptor:
    fields = []
    for name, info in cls.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        tag = extra.get(TAG)
        fields.append(
            FieldDescriptor(
                name=name,
                column=tag if isinstance(tag, str) else None,
                kind=_kind_of(info.annotation),
                has_default=not info.is_required(),
                default=None if info.default is PydanticUndefined else info.default,
            )
        )
    return TypeDescriptor(cls=cls, fields=tuple(fields), is_model=True)


@functools.lru_cache(maxsize=None)
def describe(cls: type) -> TypeDescriptor:
    """Build (once per type) the field table of a destination type.

    Args:
        cls: A dataclass or pydantic model class

    Returns:
        The cached field table

    Raises:
        ValidationError: If ``cls`` is neither a dataclass nor a pydantic model
    """
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return _describe_model(cls)
    if isinstance(cls, type) and dataclasses.is_dataclass(cls):
        return _describe_dataclass(cls)
    raise ValidationError(
        f"Destination type {cls!r} must be a dataclass or a pydantic model "
        f"with fields tagged through column() or model_column()."
    )


class StructMapper:
    """Materializes rows into instances of one destination type.

    Tagged fields missing from the row, or holding NULL, keep their default,
    or the zero value of their type when they have none. In lenient mode (the
    default) a value that fails to parse also becomes the zero value: a
    malformed numeric column silently reads as 0. Strict mode raises
    ConversionError instead.
    """

    def __init__(self, destination: type, strict: bool = False) -> None:
        """Initialize the mapper.

        Args:
            destination: Dataclass or pydantic model class to build
            strict: Raise ConversionError on unparsable values
        """
        self._descriptor = describe(destination)
        self._strict = strict

    @property
    def destination(self) -> type:
        return self._descriptor.cls

    def map(self, row: Mapping[str, Any]) -> Any:
        """Build one destination instance from a column-name -> value mapping."""
        values: dict[str, Any] = {}
        late: dict[str, Any] = {}

        for field in self._descriptor.fields:
            if field.column is not None and row.get(field.column) is not None:
                if field.kind is FieldKind.UNSUPPORTED:
                    value = field.zero
                    if field.has_default:
                        continue
                else:
                    value = self._convert(field, row[field.column])
            elif field.has_default:
                continue
            else:
                value = field.zero

            if field.init:
                values[field.name] = value
            else:
                late[field.name] = value

        if self._descriptor.is_model:
            return self._descriptor.cls.model_construct(**values)  # type: ignore[attr-defined]

        instance = self._descriptor.cls(**values)
        for name, value in late.items():
            object.__setattr__(instance, name, value)
        return instance

    def _convert(self, field: FieldDescriptor, raw: Any) -> Any:
        try:
            return field.convert(raw)
        except ValueError as e:
            if self._strict:
                raise ConversionError(field.name, field.column or "", to_text(raw), field.kind) from e
            return field.zero


def tagged_values(data: Any) -> list[tuple[FieldDescriptor, Any]]:
    """List (field, current value) for every tagged field of a payload instance."""
    descriptor = describe(type(data))
    return [(f, getattr(data, f.name)) for f in descriptor.tagged]
