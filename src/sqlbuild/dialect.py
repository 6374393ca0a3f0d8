"""
Dialect rendering of expanded SQL.

Expanded text marks every bound value with an internal placeholder. A
dialect renderer rewrites those markers into the syntax a driver expects:

    sql, sqlite, mysql  ->  ?          (parameters passed through)
    postgresql          ->  $1 .. $n   (`??` first collapsed to `?`)
    raw                 ->  literals   (no parameters left)

Unknown dialects pass text and parameters through unchanged.
"""
import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

from sqlbuild.exceptions import ErrorList
from sqlbuild.exceptions import SqlBuildError
from sqlbuild.placeholder import ESCAPED_QUESTION_MARK, PARAM_PLACEHOLDER
from sqlbuild.placeholder import QUESTION_MARK
from sqlbuild.scan import Scan, replace_with_scans
from sqlbuild.types import to_literal

logger = logging.getLogger(__name__)

PGSQL = 'postgresql'
MYSQL = 'mysql'
SQLITE = 'sqlite'
SQL = 'sql'
RAW = 'raw'

_ALIASES = {
    'postgres': PGSQL,
    'pgsql': PGSQL,
}

# Registry of dialect name -> renderer class
_RENDERER_REGISTRY: dict[str, type['DialectRenderer']] = {}


@lru_cache(maxsize=16)
def _get_renderer(dialect: str) -> 'DialectRenderer':
    """Get cached renderer instance for a registered dialect."""
    return _RENDERER_REGISTRY[dialect]()


def register_dialect(*dialects: str):
    """Decorator to register a renderer class for one or more dialects.

    Usage:
        @register_dialect('sqlite', 'mysql')
        class NativeRenderer(DialectRenderer):
            ...
    """
    def decorator(cls: type['DialectRenderer']) -> type['DialectRenderer']:
        for dialect in dialects:
            _RENDERER_REGISTRY[dialect] = cls
        _get_renderer.cache_clear()
        return cls
    return decorator


class DialectRenderer(ABC):
    """Base class for dialect-specific placeholder rewriting.
    """

    returns_params: bool = True

    @abstractmethod
    def scans(self, params: list[Any], errors: ErrorList) -> list[Scan]:
        """Scans to apply, in order, to the expanded text.

        Args:
            params: Values bound to the placeholders, in order
            errors: Collector for per-parameter conversion errors
        """

    def render(self, sql: str, params: list[Any]) -> tuple[str, list[Any], ErrorList]:
        """Rewrite placeholders; return `(sql, params, errors)`.

        Errors never stop rendering: the partial text is always returned.
        """
        errors = ErrorList()
        scans = self.scans(params, errors)
        sql, scan_errors = replace_with_scans(sql, *scans)
        errors.extend(scan_errors)
        return sql, (list(params) if self.returns_params else []), errors


@register_dialect(SQL, SQLITE, MYSQL)
class NativeRenderer(DialectRenderer):
    """Drivers taking `?` placeholders.
    """

    def scans(self, params, errors):
        return [Scan(PARAM_PLACEHOLDER, lambda i: QUESTION_MARK)]


@register_dialect(PGSQL)
class NumberedRenderer(DialectRenderer):
    """Drivers taking `$1 .. $n` placeholders.

    A literal `?` is free to appear here, so `??` is collapsed first.
    Numbering follows occurrence order, never value identity.
    """

    def scans(self, params, errors):
        return [
            Scan(ESCAPED_QUESTION_MARK, lambda i: QUESTION_MARK),
            Scan(PARAM_PLACEHOLDER, lambda i: f'${i + 1}'),
        ]


@register_dialect(RAW)
class LiteralRenderer(DialectRenderer):
    """Inline every parameter as a SQL literal.

    Values are converted up front; one that cannot be rendered leaves a
    bare `?` in the text and an error behind.
    """

    returns_params = False

    def scans(self, params, errors):
        literals = []
        for param in params:
            try:
                literals.append(to_literal(param))
            except SqlBuildError as e:
                errors.append(e)
                literals.append(QUESTION_MARK)
        return [Scan(PARAM_PLACEHOLDER, lambda i: literals[i])]


def normalize_dialect(dialect: str) -> str:
    """Lowercase a dialect tag and resolve aliases.

    >>> normalize_dialect('Postgres')
    'postgresql'
    """
    name = dialect.lower()
    return _ALIASES.get(name, name)


def get_renderer(dialect: str) -> DialectRenderer | None:
    """Get renderer for a dialect name, or None if it is not registered.

    Unknown names are never cached, so a dialect registered later is
    picked up on the next lookup.
    """
    name = normalize_dialect(dialect)
    if name not in _RENDERER_REGISTRY:
        return None
    return _get_renderer(name)


def get_available_dialects() -> list[str]:
    """Return list of registered dialect names."""
    return list(_RENDERER_REGISTRY.keys())


def is_supported_dialect(dialect: str) -> bool:
    """Check if a dialect is supported."""
    return normalize_dialect(dialect) in _RENDERER_REGISTRY


def dialect_replace(dialect: str, sql: str, params: list[Any]) -> tuple[str, list[Any], ErrorList]:
    """Render expanded SQL for a dialect; return `(sql, params, errors)`.
    """
    renderer = get_renderer(dialect)
    if renderer is None:
        logger.debug(f'No renderer for dialect {dialect!r}, passing through')
        return sql, list(params), ErrorList()
    return renderer.render(sql, params)


def get_dialect_name(obj: Any) -> str:
    """Get dialect name for a dialect tag, engine or connection.

    Accepts a string, a SQLAlchemy engine or connection, or anything else
    exposing `dialect` or `engine.dialect`.
    """
    if isinstance(obj, str):
        return normalize_dialect(obj)

    if hasattr(obj, 'dialect'):
        dialect = obj.dialect
        if isinstance(dialect, str):
            return normalize_dialect(dialect)
        return normalize_dialect(str(dialect.name))

    if hasattr(obj, 'engine') and hasattr(obj.engine, 'dialect'):
        return normalize_dialect(str(obj.engine.dialect.name))

    raise AttributeError(f'Cannot determine dialect for {type(obj)}')
