"""Bidirectional, fallible converters between typed values and wire values."""

from .base import Codec
from .combinators import (
    ArrayCodec,
    IntersectionCodec,
    NamedCodec,
    ObjectCodec,
    PartialCodec,
    ReadonlyCodec,
    RecordCodec,
    RecursiveCodec,
    RefinementCodec,
    UnionCodec,
    array,
    intersection,
    named,
    nullable,
    object_,
    partial,
    readonly,
    record,
    recursive,
    refinement,
    union,
)
from .errors import DecodeFailure, ErrorTree
from .excess import ExcessCodec, declared_keys, strict
from .primitives import (
    AdaptedCodec,
    IsoCodec,
    KeyofCodec,
    LiteralCodec,
    adapted,
    boolean,
    integer,
    iso_date,
    iso_datetime,
    iso_duration,
    keyof,
    literal,
    model,
    null,
    number,
    string,
    unknown,
)
from .strings import (
    BooleanFromString,
    CaseInsensitiveObject,
    CaseInsensitivePartial,
    CommaSeparated,
    Expected,
    HandleUnexpected,
    IntFromString,
    LiteralFromString,
    NumberFromString,
    Unexpected,
    boolean_from_string,
    boolean_literal_from_string,
    case_insensitive_object,
    case_insensitive_partial,
    int_from_string,
    number_from_string,
    number_literal_from_string,
)

__all__ = [
    "AdaptedCodec",
    "ArrayCodec",
    "BooleanFromString",
    "CaseInsensitiveObject",
    "CaseInsensitivePartial",
    "Codec",
    "CommaSeparated",
    "DecodeFailure",
    "ErrorTree",
    "ExcessCodec",
    "Expected",
    "HandleUnexpected",
    "IntFromString",
    "IntersectionCodec",
    "IsoCodec",
    "KeyofCodec",
    "LiteralCodec",
    "LiteralFromString",
    "NamedCodec",
    "NumberFromString",
    "ObjectCodec",
    "PartialCodec",
    "ReadonlyCodec",
    "RecordCodec",
    "RecursiveCodec",
    "RefinementCodec",
    "Unexpected",
    "UnionCodec",
    "adapted",
    "array",
    "boolean",
    "boolean_from_string",
    "boolean_literal_from_string",
    "case_insensitive_object",
    "case_insensitive_partial",
    "declared_keys",
    "int_from_string",
    "integer",
    "intersection",
    "iso_date",
    "iso_datetime",
    "iso_duration",
    "keyof",
    "literal",
    "model",
    "named",
    "null",
    "nullable",
    "number",
    "number_from_string",
    "number_literal_from_string",
    "object_",
    "partial",
    "readonly",
    "record",
    "recursive",
    "refinement",
    "strict",
    "string",
    "union",
]
