"""
SQL expressions and their combinators.

An `Expression` is a piece of SQL text with the values bound to it, in
left-to-right order. Expressions are built with `valf` from a `?` template,
and combined with `group`, `and_` and `or_`:

    >>> e = and_(valf('a = ?', 1), 'b IS NULL', valf('c IN (?)', [2, 3]))
    >>> e.values
    (1, 2, 3)
"""
from dataclasses import dataclass
from typing import Any

from more_itertools import flatten
from sqlbuild.exceptions import ValidationError
from sqlbuild.part import QueryPart, make_part
from sqlbuild.placeholder import QUESTION_MARK, has_unescaped_placeholder
from sqlbuild.placeholder import unescape_template
from sqlbuild.types import QueryProducer


@dataclass(frozen=True, slots=True)
class Expression(QueryProducer):
    """SQL fragment text and its ordered values."""
    text: str
    values: tuple[Any, ...] = ()
    errors: tuple[Exception, ...] = ()

    def render(self) -> QueryPart:
        return QueryPart(self.text, list(self.values), list(self.errors))

    def __str__(self) -> str:
        return self.text


def valf(template: str, *args: Any) -> Expression:
    """Build an expression from a `?` template and its arguments.

    Argument/placeholder mismatches are recorded in `errors`; the
    expanded text is kept for diagnostics. `??` becomes a literal `?`.

    >>> valf("?? and ?", 1).values
    (1,)
    """
    part = make_part(template, *args, escaped=QUESTION_MARK)
    return Expression(part.text, tuple(part.params), tuple(part.errors))


def to_expression(obj: Any) -> Expression:
    """Coerce a plain string or an Expression.

    A plain string must not carry a placeholder: values only enter through
    `valf`. Anything else is a broken call site and raises immediately.
    """
    if isinstance(obj, Expression):
        return obj
    if isinstance(obj, str):
        if has_unescaped_placeholder(obj):
            raise ValidationError(f'String value without parameters: {obj}')
        return Expression(unescape_template(obj))
    raise ValidationError(f'Unsupported expression type: {type(obj).__name__}')


def group(sep: str, *exprs: Any) -> Expression:
    """Join expressions with `sep`, parenthesized when more than one.

    >>> group(' AND ', 'a', 'b').text
    '(a AND b)'
    >>> group(' AND ', 'a').text
    'a'
    """
    items = [to_expression(e) for e in exprs]
    text = sep.join(e.text for e in items)
    if len(items) > 1:
        text = f'({text})'
    return Expression(
        text,
        tuple(flatten(e.values for e in items)),
        tuple(flatten(e.errors for e in items)),
    )


def and_(*exprs: Any) -> Expression:
    """Join expressions with AND."""
    return group(' AND ', *exprs)


def or_(*exprs: Any) -> Expression:
    """Join expressions with OR."""
    return group(' OR ', *exprs)
