"""
Marker scanning and replacement.

`scan_replace` walks text once, left to right, and hands every occurrence
of a marker to a replacement function together with its zero-based
occurrence index. Text between occurrences passes through verbatim and is
never rescanned, so replacement output cannot be matched again by the same
scan. `replace_with_scans` chains several scans and gathers the errors of
all of them.
"""
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from sqlbuild.exceptions import ErrorList, ParameterMismatchError
from sqlbuild.exceptions import SqlBuildError

logger = logging.getLogger(__name__)

ReplaceFn = Callable[[int], str]


@dataclass(frozen=True, slots=True)
class Scan:
    """One marker and the function producing its replacement."""
    pattern: str
    fn: ReplaceFn


def iter_chunks(text: str, marker: str) -> Iterator[tuple[bool, str]]:
    """Yield `(is_marker, chunk)` pairs covering `text` exactly.

    >>> list(iter_chunks('?a??', '?'))
    [(True, '?'), (False, 'a'), (True, '?'), (True, '?')]
    """
    if not marker:
        raise ValueError('Scan marker must be a non-empty string')

    pos = 0
    size = len(marker)
    while True:
        idx = text.find(marker, pos)
        if idx < 0:
            break
        if idx > pos:
            yield False, text[pos:idx]
        yield True, marker
        pos = idx + size

    if pos < len(text):
        yield False, text[pos:]


def scan_replace(text: str, marker: str, fn: ReplaceFn) -> tuple[str, list[Exception]]:
    """Replace each occurrence of `marker` with `fn(i)`.

    Returns the rewritten text and the errors raised by `fn`. An occurrence
    whose replacement failed is left as the marker itself.
    """
    parts = []
    errors = []
    i = 0

    for is_marker, chunk in iter_chunks(text, marker):
        if not is_marker:
            parts.append(chunk)
            continue
        try:
            parts.append(fn(i))
        except IndexError:
            errors.append(ParameterMismatchError(
                f'no parameter for placeholder #{i + 1}'))
            parts.append(chunk)
        except SqlBuildError as e:
            errors.append(e)
            parts.append(chunk)
        i += 1

    return ''.join(parts), errors


def replace_with_scans(text: str, *scans: Scan) -> tuple[str, ErrorList]:
    """Apply scans in order, joining their errors.

    A later scan sees the output of an earlier one, but one scan's failure
    never stops the next from running.
    """
    errors = ErrorList()
    for s in scans:
        text, errs = scan_replace(text, s.pattern, s.fn)
        if errs:
            logger.debug(f'Scan for {s.pattern!r} produced {len(errs)} error(s)')
        errors.extend(errs)
    return text, errors
