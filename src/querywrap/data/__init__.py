"""Row-to-record mapping for querywrap."""

from querywrap.data.mapper import (
    FieldDescriptor,
    FieldKind,
    StructMapper,
    TypeDescriptor,
    column,
    describe,
    model_column,
    tagged_values,
)

__all__ = [
    "FieldDescriptor",
    "FieldKind",
    "StructMapper",
    "TypeDescriptor",
    "column",
    "describe",
    "model_column",
    "tagged_values",
]
