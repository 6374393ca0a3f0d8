"""
Query composition and rendering.

A `Query` is an ordered list of expanded fragments joined by separators.
It renders the same way for every dialect: fragments are expanded once,
joined, then handed to the dialect renderer.

>>> q = Query.new('SELECT * FROM users').space('WHERE id IN (?)', [1, 2])
>>> q.to_pgsql()
('SELECT * FROM users WHERE id IN ($1, $2)', [1, 2])
>>> q.to_raw()
'SELECT * FROM users WHERE id IN (1, 2)'
"""
import logging
from typing import Any, Self

from sqlbuild.dialect import MYSQL, PGSQL, RAW, SQLITE, dialect_replace
from sqlbuild.dialect import get_dialect_name
from sqlbuild.exceptions import ErrorList, RenderError
from sqlbuild.options import BuilderOptions, get_default_options
from sqlbuild.part import QueryPart, make_part
from sqlbuild.types import QueryProducer

logger = logging.getLogger(__name__)


class Query(QueryProducer):
    """Fluent holder of SQL fragments.

    >>> where = Query.optional('WHERE')
    >>> where.render().text
    ''
    >>> Query.new('SELECT * FROM t').space('?', where.space('a = ?', 1)).to_pgsql()
    ('SELECT * FROM t WHERE a = $1', [1])
    """

    def __init__(self, prefix: str | None = None):
        self.prefix = prefix
        self.parts: list[tuple[str, QueryPart]] = []

    @classmethod
    def new(cls, text: str, *args: Any) -> Self:
        """Create a query starting with one fragment."""
        return cls().space(text, *args)

    @classmethod
    def optional(cls, prefix: str) -> Self:
        """Create a query that renders empty until a fragment is added."""
        return cls(prefix=prefix)

    @classmethod
    def empty(cls) -> Self:
        return cls()

    def join(self, sep: str, text: str, *args: Any) -> Self:
        """Append a fragment, separated from the previous one by `sep`."""
        self.parts.append((sep, make_part(text, *args)))
        return self

    def space(self, text: str, *args: Any) -> Self:
        return self.join(' ', text, *args)

    def comma(self, text: str, *args: Any) -> Self:
        return self.join(', ', text, *args)

    def concat(self, text: str, *args: Any) -> Self:
        return self.join('', text, *args)

    def __len__(self) -> int:
        return len(self.parts)

    def render(self) -> QueryPart:
        """Join fragments; text still carries internal placeholders.
        """
        if not self.parts:
            return QueryPart('', [], [])

        texts = []
        params: list[Any] = []
        errors: list[Exception] = []

        for i, (sep, part) in enumerate(self.parts):
            if i > 0:
                texts.append(sep)
            texts.append(part.text)
            params.extend(part.params)
            errors.extend(part.errors)

        text = ''.join(texts)
        if self.prefix:
            text = f'{self.prefix} {text}'

        return QueryPart(text, params, errors)

    def to_dialect(self, dialect: Any, options: BuilderOptions | None = None) -> tuple[str, list[Any]]:
        """Render for a dialect name, engine or connection.

        Raises RenderError carrying every problem found.
        """
        return render_sql(self, dialect, options=options)

    def to_pgsql(self) -> tuple[str, list[Any]]:
        return self.to_dialect(PGSQL)

    def to_mysql(self) -> tuple[str, list[Any]]:
        return self.to_dialect(MYSQL)

    def to_sqlite(self) -> tuple[str, list[Any]]:
        return self.to_dialect(SQLITE)

    def to_sql(self, options: BuilderOptions | None = None) -> tuple[str, list[Any]]:
        """Render for the configured default dialect."""
        if options is None:
            options = get_default_options()
        return self.to_dialect(options.dialect, options=options)

    def to_raw(self) -> str:
        """Render with every value inlined as a SQL literal."""
        sql, _ = self.to_dialect(RAW)
        return sql

    def print(self) -> str:
        """Return inlined SQL for debugging, even when rendering fails.
        """
        try:
            return self.to_raw()
        except RenderError as e:
            logger.warning(f'Query has {len(e.exceptions)} error(s): {e.exceptions}')
            return e.sql or ''

    def __repr__(self) -> str:
        return f'Query({self.render().text!r})'


def render_sql(producer: Any, dialect: Any = None,
               options: BuilderOptions | None = None) -> tuple[str, list[Any]]:
    """Render a Query or Expression for a dialect.

    Fragment errors and dialect conversion errors are joined into one
    RenderError, which carries the partially rendered text.
    """
    if options is None:
        options = get_default_options()
    dialect = options.dialect if dialect is None else get_dialect_name(dialect)
    dialect = options.check_dialect(dialect)

    text, params, part_errors = producer.render()
    sql, params, render_errors = dialect_replace(dialect, text, list(params))

    errors = ErrorList(part_errors)
    errors.extend(render_errors)
    errors.raise_if_any(f'cannot render {dialect} query', sql=sql, params=params)

    logger.debug(f'Rendered {dialect} query with {len(params)} parameters: {sql[:60]}...')
    return sql, params
