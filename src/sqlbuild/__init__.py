"""
SQL statement assembly from composable fragments.

Fragments are written with `?` placeholders (`??` for a literal question
mark) and rendered per dialect into final SQL plus an ordered parameter
list:

- Expressions: valf(template, *args), and_(...), or_(...), group(sep, ...)
- Queries: Query.new(text, *args).space(...).to_pgsql() / .to_sql() / .to_raw()
- Argument types: Embedded raw SQL, JsonMap / JsonList, objects exposing
  `raw_value()`, `sql_value()` or `render()`
"""
__version__ = '0.1.0'

from sqlbuild.dialect import MYSQL, PGSQL, RAW, SQL, SQLITE
from sqlbuild.dialect import get_available_dialects, get_dialect_name
from sqlbuild.dialect import register_dialect
from sqlbuild.exceptions import EncodingError, ParameterMismatchError
from sqlbuild.exceptions import RenderError, SqlBuildError
from sqlbuild.exceptions import TypeConversionError, ValidationError
from sqlbuild.exceptions import ValueRetrievalError
from sqlbuild.expression import Expression, and_, group, or_, valf
from sqlbuild.options import BuilderOptions, get_default_options
from sqlbuild.options import set_default_options
from sqlbuild.part import QueryPart, make_part
from sqlbuild.query import Query, render_sql
from sqlbuild.types import DriverValue, Embedded, JsonList, JsonMap
from sqlbuild.types import QueryProducer, RawLiteral

__all__ = [
    'Query',
    'render_sql',
    'Expression',
    'valf',
    'group',
    'and_',
    'or_',
    'make_part',
    'QueryPart',
    'Embedded',
    'JsonMap',
    'JsonList',
    'RawLiteral',
    'DriverValue',
    'QueryProducer',
    'BuilderOptions',
    'get_default_options',
    'set_default_options',
    'register_dialect',
    'get_available_dialects',
    'get_dialect_name',
    'PGSQL',
    'MYSQL',
    'SQLITE',
    'SQL',
    'RAW',
    'SqlBuildError',
    'ValidationError',
    'ParameterMismatchError',
    'EncodingError',
    'ValueRetrievalError',
    'TypeConversionError',
    'RenderError',
]
