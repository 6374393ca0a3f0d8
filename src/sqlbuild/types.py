"""
Argument types and value conversion.

This module provides:
- Capability protocols an argument may implement (raw literal, driver
  value) and the QueryProducer base for nested queries
- Marker types: Embedded raw SQL text, JsonMap / JsonList structures
- classify_arg: decide how a bound argument expands
- TypeConverter / to_literal: render a parameter as SQL literal text
"""
import datetime
import decimal
import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum, auto
from typing import Any, Protocol, runtime_checkable

import numpy as np
import pandas as pd
from sqlbuild.exceptions import TypeConversionError

from libb import issequence

NUMPY_FLOAT_TYPES = (np.floating,)
NUMPY_INT_TYPES = (np.integer, np.unsignedinteger)
STRING_TYPES = (str, bytes, bytearray)


# Capabilities

@runtime_checkable
class RawLiteral(Protocol):
    """Supplies SQL text spliced verbatim, with no parameter."""

    def raw_value(self) -> str: ...


@runtime_checkable
class DriverValue(Protocol):
    """Supplies the single scalar a driver should bind for it."""

    def sql_value(self) -> Any: ...


class QueryProducer(ABC):
    """Renders to `(text, params, errors)` with internal placeholders.

    Only subclasses, or classes registered with `QueryProducer.register`,
    are spliced as nested queries; a stray `render` attribute is not enough.
    """

    @abstractmethod
    def render(self) -> Any:
        """Return `(text, params, errors)`."""


class Embedded(str):
    """Raw SQL text, spliced without escaping and without a parameter.

    >>> Embedded('now()').raw_value()
    'now()'
    """

    def raw_value(self) -> str:
        return str(self)


class JsonMap(dict):
    """Mapping bound as its JSON encoding."""


class JsonList(list):
    """List bound as its JSON encoding."""


class ArgKind(Enum):
    """How an argument expands at its placeholder."""
    RAW = auto()
    DRIVER = auto()
    NESTED = auto()
    JSON = auto()
    SEQUENCE = auto()
    SCALAR = auto()


def is_sequence_arg(arg: Any) -> bool:
    """Check if an argument expands to one placeholder per element."""
    return (issequence(arg) and not isinstance(arg, STRING_TYPES)
            and not isinstance(arg, Mapping))


def classify_arg(arg: Any) -> ArgKind:
    """Dispatch an argument by capability, most specific first.

    >>> classify_arg([1, 2]).name, classify_arg('a').name
    ('SEQUENCE', 'SCALAR')
    >>> classify_arg(JsonList([1])).name
    'JSON'
    """
    if isinstance(arg, RawLiteral):
        return ArgKind.RAW
    if isinstance(arg, DriverValue):
        return ArgKind.DRIVER
    if isinstance(arg, QueryProducer):
        return ArgKind.NESTED
    if isinstance(arg, JsonMap | JsonList):
        return ArgKind.JSON
    if is_sequence_arg(arg):
        return ArgKind.SEQUENCE
    return ArgKind.SCALAR


# Literal rendering

def _convert_numpy_value(val: Any) -> Any:
    """Convert NumPy value to Python type."""
    if isinstance(val, np.floating) and np.isnan(val):
        return None

    if isinstance(val, np.datetime64) and np.isnat(val):
        return None

    if isinstance(val, np.bool_):
        return bool(val)

    if isinstance(val, (*NUMPY_FLOAT_TYPES, *NUMPY_INT_TYPES)):
        return val.item()

    return val


class TypeConverter:
    """Normalize parameter values before literal rendering.

    Handles NumPy and Pandas scalars and missing-value markers.
    """

    @staticmethod
    def convert_value(value: Any) -> Any:
        """Convert a single value to a plain Python scalar."""
        if value is None:
            return None

        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return None

        if isinstance(value, type(pd.NaT)):
            return None

        if isinstance(value, (*NUMPY_FLOAT_TYPES, *NUMPY_INT_TYPES, np.bool_, np.datetime64)):
            return _convert_numpy_value(value)

        if value is pd.NA:
            return None

        return value

    @staticmethod
    def convert_params(params: list[Any]) -> list[Any]:
        """Convert a parameter list for literal rendering."""
        return [TypeConverter.convert_value(v) for v in params]


def quote_string(value: str) -> str:
    """Quote a string as a SQL literal.

    >>> quote_string("it's")
    "'it''s'"
    """
    return "'" + value.replace("'", "''") + "'"


def to_literal(param: Any) -> str:
    """Render one parameter as SQL literal text.

    Raises TypeConversionError for values with no literal form.

    >>> to_literal(None), to_literal(True), to_literal(7), to_literal('x')
    ('NULL', 'true', '7', "'x'")
    """
    value = TypeConverter.convert_value(param)

    if value is None:
        return 'NULL'

    if isinstance(value, bool):
        return 'true' if value else 'false'

    if isinstance(value, int | float | decimal.Decimal):
        return str(value)

    if isinstance(value, str):
        return quote_string(value)

    if isinstance(value, datetime.date | datetime.time):
        raise TypeConversionError(
            f'unsupported type for raw query: {type(param).__name__} '
            '(bind dates as parameters or format them as strings)')

    raise TypeConversionError(f'unsupported type for raw query: {type(param).__name__}')
