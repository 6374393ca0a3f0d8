"""Unit tests for the marker scanning replacer."""
import pytest
from sqlbuild.exceptions import ParameterMismatchError, TypeConversionError
from sqlbuild.scan import Scan, iter_chunks, replace_with_scans, scan_replace


class TestScanReplace:
    """Tests for single-marker scanning."""

    @pytest.mark.parametrize(('text', 'expected'), [
        ('a X b X c', 'a <0> b <1> c'),
        ('X starts', '<0> starts'),
        ('ends X', 'ends <0>'),
        ('XX', '<0><1>'),
        ('X', '<0>'),
        ('nothing here', 'nothing here'),
        ('', ''),
    ], ids=['middle', 'start', 'end', 'adjacent', 'only_marker', 'no_marker', 'empty'])
    def test_positions(self, text, expected):
        """Test markers at the edges, adjacent, and absent."""
        result, errors = scan_replace(text, 'X', lambda i: f'<{i}>')
        assert result == expected
        assert errors == []

    def test_multi_character_marker(self):
        """Test that partial marker matches pass through."""
        result, _ = scan_replace('PH P H PHP', 'PH', lambda i: str(i + 1))
        assert result == '1 P H 2P'

    def test_replacement_not_rescanned(self):
        """Test that replacement text containing the marker is not matched again."""
        result, _ = scan_replace('a ? b ?', '?', lambda i: '??')
        assert result == 'a ?? b ??'

    def test_index_error_recorded(self):
        """Test that running out of values becomes a mismatch error."""
        values = ['one']
        result, errors = scan_replace('X and X', 'X', lambda i: values[i])
        assert result == 'one and X'
        assert len(errors) == 1
        assert isinstance(errors[0], ParameterMismatchError)

    def test_build_error_recorded(self):
        """Test that errors from the replacement function are collected."""
        def fn(i):
            raise TypeConversionError(f'bad {i}')

        result, errors = scan_replace('X X', 'X', fn)
        assert result == 'X X'
        assert [str(e) for e in errors] == ['bad 0', 'bad 1']

    def test_empty_marker_rejected(self):
        with pytest.raises(ValueError):
            list(iter_chunks('abc', ''))


class TestReplaceWithScans:
    """Tests for composed scans."""

    def test_scans_applied_in_order(self):
        """Test literal-escape resolution before parameter numbering."""
        text, errors = replace_with_scans(
            'a ?? b PH c PH',
            Scan('??', lambda i: '?'),
            Scan('PH', lambda i: f'${i + 1}'),
        )
        assert text == 'a ? b $1 c $2'
        assert not errors

    def test_errors_joined_across_scans(self):
        """Test that one scan failing does not stop the next."""
        first = []
        second = ['x']
        text, errors = replace_with_scans(
            'A B B',
            Scan('A', lambda i: first[i]),
            Scan('B', lambda i: second[i]),
        )
        assert text == 'A x B'
        assert len(errors) == 2
