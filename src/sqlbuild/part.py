"""
Formatted fragment expansion.

`make_part` pairs each `?` of a template with the next argument and expands
it according to the argument's shape:

    scalar          -> one placeholder, value bound
    sequence of N   -> N placeholders joined by ', ' (empty -> one NULL)
    nested query    -> its text inlined, its parameters spliced in order
    JsonMap/List    -> one placeholder bound to the JSON text
    driver value    -> one placeholder bound to `sql_value()`
    raw literal     -> its text inlined, nothing bound

`??` is kept as `??` by default so it stays inert through further nesting,
and the dialect renderer decides what a literal question mark looks like.
Expressions pass `escaped='?'` and carry the final literal instead.

Problems are collected on the resulting `QueryPart` rather than raised, so
every problem with a fragment is visible at once.
"""
import json
import logging
from typing import Any, NamedTuple

from sqlbuild.exceptions import EncodingError, ParameterMismatchError
from sqlbuild.exceptions import ValueRetrievalError
from sqlbuild.placeholder import ESCAPED_QUESTION_MARK, PARAM_PLACEHOLDER
from sqlbuild.placeholder import QUESTION_MARK, TokenType
from sqlbuild.placeholder import count_placeholders, make_placeholders
from sqlbuild.placeholder import tokenize_template
from sqlbuild.types import ArgKind, classify_arg

logger = logging.getLogger(__name__)


class QueryPart(NamedTuple):
    """Expanded fragment: text with internal placeholders, bound values, errors."""
    text: str
    params: list[Any]
    errors: list[Exception]


def _nested_errors(err: Any) -> list[Exception]:
    """Normalize the error slot of a nested render result."""
    if err is None:
        return []
    if isinstance(err, BaseException):
        return [err]
    return list(err)


def encode_json(value: Any) -> str:
    """Compact JSON encoding used for JsonMap / JsonList arguments."""
    return json.dumps(value, separators=(',', ':'), sort_keys=True)


def convert_arg(arg: Any) -> tuple[str, list[Any], list[Exception]]:
    """Expand one argument into `(text, params, errors)`.

    The returned text replaces exactly one `?` of the template.
    """
    kind = classify_arg(arg)

    if kind is ArgKind.RAW:
        return arg.raw_value(), [], []

    if kind is ArgKind.DRIVER:
        try:
            value = arg.sql_value()
        except Exception as e:
            return PARAM_PLACEHOLDER, [None], [
                ValueRetrievalError(f'cannot get value of {type(arg).__name__}: {e}')]
        return PARAM_PLACEHOLDER, [value], []

    if kind is ArgKind.NESTED:
        text, params, err = arg.render()
        return text, list(params), _nested_errors(err)

    if kind is ArgKind.JSON:
        try:
            encoded = encode_json(arg)
        except (TypeError, ValueError) as e:
            return PARAM_PLACEHOLDER, [None], [EncodingError(f'cannot jsonify {type(arg).__name__}: {e}')]
        return PARAM_PLACEHOLDER, [encoded], []

    if kind is ArgKind.SEQUENCE:
        values = list(arg)
        if not values:
            # keep marker/argument balance: `IN (?)` with [] binds NULL
            return PARAM_PLACEHOLDER, [None], []
        return make_placeholders(len(values)), values, []

    return PARAM_PLACEHOLDER, [arg], []


def check_param_counts(text: str, params: list[Any]) -> ParameterMismatchError | None:
    """Check that expanded text carries one placeholder per bound value."""
    placeholder_count = count_placeholders(text)
    if placeholder_count != len(params):
        return ParameterMismatchError(
            f'mismatched parameters: {placeholder_count} placeholders '
            f'for {len(params)} values')
    return None


def make_part(text: str, *args: Any, escaped: str = ESCAPED_QUESTION_MARK) -> QueryPart:
    """Expand a `?` template against its arguments.

    Each `??` of the template becomes `escaped`; spliced argument text is
    left as it is.

    >>> part = make_part('id IN (?) AND name = ?', [1, 2], 'x')
    >>> part.params, part.errors
    ([1, 2, 'x'], [])
    >>> make_part('a ?? b', escaped='?').text
    'a ? b'
    """
    original = text
    parts = []
    params: list[Any] = []
    errors: list[Exception] = []

    remaining = iter(args)
    consumed = 0
    missing = 0

    for token in tokenize_template(text):
        if token.type is TokenType.ESCAPED:
            parts.append(escaped)
            continue
        if token.type is TokenType.TEXT:
            parts.append(token.text)
            continue
        try:
            arg = next(remaining)
        except StopIteration:
            parts.append(QUESTION_MARK)
            missing += 1
            continue
        consumed += 1
        arg_text, arg_params, arg_errors = convert_arg(arg)
        parts.append(arg_text)
        params.extend(arg_params)
        errors.extend(arg_errors)

    if missing:
        errors.append(ParameterMismatchError(
            f'missing argument for {missing} ? in text: {original} ({len(args)} args)'))

    if consumed < len(args):
        errors.append(ParameterMismatchError(
            f'extra {len(args) - consumed} argument(s) for text: {original} ({len(args)} args)'))

    expanded = ''.join(parts)

    if err := check_param_counts(expanded, params):
        errors.append(err)

    if errors:
        logger.debug(f'Fragment {original[:60]!r} has {len(errors)} error(s)')

    return QueryPart(text=expanded, params=params, errors=errors)
