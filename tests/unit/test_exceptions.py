"""Unit tests for error collection and joining."""
import pytest
from sqlbuild.exceptions import EncodingError, ErrorList, ParameterMismatchError
from sqlbuild.exceptions import RenderError, SqlBuildError, TypeConversionError
from sqlbuild.exceptions import ValidationError, ValueRetrievalError


@pytest.mark.parametrize('exc_type', [
    ValidationError,
    ParameterMismatchError,
    EncodingError,
    ValueRetrievalError,
    TypeConversionError,
])
def test_hierarchy(exc_type):
    assert issubclass(exc_type, SqlBuildError)


class TestErrorList:
    """Tests for the error accumulator."""

    def test_empty(self):
        errors = ErrorList()

        assert not errors
        assert len(errors) == 0
        assert errors.combined('nothing') is None
        errors.raise_if_any('nothing')

    def test_none_ignored(self):
        errors = ErrorList([None, EncodingError('a'), None])
        assert len(errors) == 1

    def test_combined(self):
        first = ParameterMismatchError('missing argument')
        second = TypeConversionError('unsupported type')
        errors = ErrorList([first])
        errors.append(second)

        err = errors.combined('cannot render', sql='a = ?', params=[1])

        assert isinstance(err, RenderError)
        assert err.exceptions == (first, second)
        assert err.sql == 'a = ?'
        assert err.params == [1]
        assert errors.as_tuple() == (first, second)

    def test_raise_if_any(self):
        errors = ErrorList([EncodingError('bad json')])

        with pytest.raises(RenderError, match='cannot render'):
            errors.raise_if_any('cannot render', sql='x')


class TestRenderError:
    """Tests for the joined render error."""

    def test_split_keeps_diagnostics(self):
        err = RenderError('cannot render', [EncodingError('a'), TypeConversionError('b')],
                          sql='a = ?', params=[])

        match, rest = err.split(EncodingError)

        assert isinstance(match, RenderError)
        assert match.sql == 'a = ?'
        assert len(match.exceptions) == 1
        assert len(rest.exceptions) == 1

    def test_except_star(self):
        caught = []
        try:
            raise RenderError('cannot render', [TypeConversionError('b')])
        except* TypeConversionError as group:
            caught.extend(group.exceptions)

        assert len(caught) == 1
