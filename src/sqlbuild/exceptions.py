"""
Query building exception classes.

Usage errors (plain text carrying an unescaped placeholder, unsupported
fragment types) are raised immediately. Data errors are collected per
fragment and raised together as a single `RenderError` at render time.
"""
from typing import Any, Self


class SqlBuildError(Exception):
    """Base class for all query building errors.
    """


class ValidationError(SqlBuildError):
    """Error in fragment construction (programmer misuse).
    """


class ParameterMismatchError(SqlBuildError):
    """Placeholder count and argument count disagree.
    """


class EncodingError(SqlBuildError):
    """Error JSON-encoding a structured argument.
    """


class ValueRetrievalError(SqlBuildError):
    """Error retrieving the driver value of an argument.
    """


class TypeConversionError(SqlBuildError):
    """Value cannot be rendered as a SQL literal.
    """


class RenderError(ExceptionGroup):
    """All errors found while rendering one statement.

    Carries the partially rendered `sql` and `params` for diagnostics.
    The partial text must never be executed.
    """

    def __new__(cls, message: str, exceptions, sql: str | None = None,
                params: list[Any] | None = None) -> Self:
        self = super().__new__(cls, message, exceptions)
        self.sql = sql
        self.params = params
        return self

    def __init__(self, message: str, exceptions, sql: str | None = None,
                 params: list[Any] | None = None):
        super().__init__(message, exceptions)

    def derive(self, excs):
        return RenderError(self.message, excs, self.sql, self.params)


class ErrorList:
    """Collect zero or more errors and expose them as one.

    >>> errs = ErrorList()
    >>> bool(errs)
    False
    >>> errs.append(ParameterMismatchError('missing argument'))
    >>> errs.extend([EncodingError('bad json')])
    >>> len(errs)
    2
    """

    def __init__(self, errors=None):
        self._errors: list[Exception] = []
        if errors:
            self.extend(errors)

    def append(self, error: Exception | None) -> None:
        if error is not None:
            self._errors.append(error)

    def extend(self, errors) -> None:
        for error in errors:
            self.append(error)

    def __iter__(self):
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def as_tuple(self) -> tuple[Exception, ...]:
        return tuple(self._errors)

    def combined(self, message: str, sql: str | None = None,
                 params: list[Any] | None = None) -> RenderError | None:
        """Return one `RenderError` covering every collected error, or None.
        """
        if not self._errors:
            return None
        return RenderError(message, list(self._errors), sql=sql, params=params)

    def raise_if_any(self, message: str, sql: str | None = None,
                     params: list[Any] | None = None) -> None:
        err = self.combined(message, sql=sql, params=params)
        if err is not None:
            raise err
