"""Unit tests for argument classification and literal rendering."""
import datetime
import decimal

import numpy as np
import pandas as pd
import pytest
from sqlbuild.exceptions import TypeConversionError
from sqlbuild.expression import valf
from sqlbuild.query import Query
from sqlbuild.types import ArgKind, Embedded, JsonList, JsonMap, QueryProducer
from sqlbuild.types import TypeConverter
from sqlbuild.types import classify_arg, quote_string, to_literal


class TestClassifyArg:
    """Tests for capability dispatch order."""

    @pytest.mark.parametrize(('arg', 'expected'), [
        (1, ArgKind.SCALAR),
        ('text', ArgKind.SCALAR),
        (b'bytes', ArgKind.SCALAR),
        (None, ArgKind.SCALAR),
        ({'a': 1}, ArgKind.SCALAR),
        ([1, 2], ArgKind.SEQUENCE),
        ((1, 2), ArgKind.SEQUENCE),
        (JsonMap(a=1), ArgKind.JSON),
        (JsonList([1]), ArgKind.JSON),
        (Embedded('now()'), ArgKind.RAW),
    ], ids=['int', 'str', 'bytes', 'none', 'dict', 'list', 'tuple',
            'json_map', 'json_list', 'embedded'])
    def test_builtin_shapes(self, arg, expected):
        assert classify_arg(arg) is expected

    def test_capabilities(self, money, table_name):
        assert classify_arg(money(1)) is ArgKind.DRIVER
        assert classify_arg(table_name('t')) is ArgKind.RAW
        assert classify_arg(Query.new('SELECT 1')) is ArgKind.NESTED

    def test_render_attribute_alone_is_scalar(self):
        """Test that an unrelated object with a render method is bound as a value."""
        class Template:
            def render(self):
                return 'Hello'

        assert classify_arg(Template()) is ArgKind.SCALAR

    def test_registered_producer_is_nested(self):
        class Fragment:
            def render(self):
                return 'x', [], []

        QueryProducer.register(Fragment)
        assert classify_arg(Fragment()) is ArgKind.NESTED
        assert classify_arg(valf('a = ?', 1)) is ArgKind.NESTED

    def test_raw_before_driver(self):
        """Test that raw literal capability wins over driver value."""
        class Both:
            def raw_value(self):
                return 'x'

            def sql_value(self):
                return 1

        assert classify_arg(Both()) is ArgKind.RAW


class TestToLiteral:
    """Tests for SQL literal rendering."""

    @pytest.mark.parametrize(('value', 'expected'), [
        (None, 'NULL'),
        (True, 'true'),
        (False, 'false'),
        (42, '42'),
        (-7, '-7'),
        (2.5, '2.5'),
        (decimal.Decimal('123.45'), '123.45'),
        ('abc', "'abc'"),
        ("it's", "'it''s'"),
        ('', "''"),
        (float('nan'), 'NULL'),
        (np.int64(5), '5'),
        (np.float64(1.5), '1.5'),
        (np.bool_(True), 'true'),
        (pd.NA, 'NULL'),
        (pd.NaT, 'NULL'),
    ], ids=['none', 'true', 'false', 'int', 'negative', 'float', 'decimal',
            'str', 'quote', 'empty_str', 'nan', 'np_int', 'np_float',
            'np_bool', 'pd_na', 'pd_nat'])
    def test_supported(self, value, expected):
        assert to_literal(value) == expected

    @pytest.mark.parametrize('value', [
        datetime.date(2025, 1, 1),
        b'bytes',
        [1, 2],
        {'a': 1},
    ], ids=['date', 'bytes', 'list', 'dict'])
    def test_unsupported(self, value):
        with pytest.raises(TypeConversionError, match='unsupported type'):
            to_literal(value)

    def test_unsupported_object(self, opaque):
        with pytest.raises(TypeConversionError, match='Opaque'):
            to_literal(opaque)

    def test_quote_string(self):
        assert quote_string("a'b''c") == "'a''b''''c'"


def test_convert_params():
    assert TypeConverter.convert_params([np.int32(1), float('inf'), 'x']) == [1, None, 'x']
