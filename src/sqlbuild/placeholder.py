"""
Placeholder markers and template tokenization.

Templates use `?` for a positional placeholder and `??` for a literal
question mark. After expansion every bound parameter is marked in the
fragment text by `PARAM_PLACEHOLDER`, independent of the final dialect.
"""
import re
from dataclasses import dataclass
from enum import Enum, auto

QUESTION_MARK = '?'
ESCAPED_QUESTION_MARK = '??'

# Not escaped anywhere: user SQL must never contain it.
PARAM_PLACEHOLDER = '\x1f~sqlbuild:param~\x1f'

# `??` must be tried before `?`
_TEMPLATE_MARKERS = re.compile(r'\?\?|\?')


class TokenType(Enum):
    """Token types identified in a template."""
    TEXT = auto()
    PLACEHOLDER = auto()        # ?
    ESCAPED = auto()            # ??


@dataclass(slots=True)
class Token:
    """Token from template tokenization."""
    type: TokenType
    text: str


def tokenize_template(text: str) -> list[Token]:
    """Split a template into text, placeholder and escaped-marker tokens.

    A single forward pass; spliced argument text is never fed back through
    here, so it cannot be mistaken for a placeholder.

    >>> [t.type.name for t in tokenize_template('a = ? AND b ?? c')]
    ['TEXT', 'PLACEHOLDER', 'TEXT', 'ESCAPED', 'TEXT']
    """
    tokens = []
    last_end = 0

    for match in _TEMPLATE_MARKERS.finditer(text):
        start, end = match.span()
        if start > last_end:
            tokens.append(Token(TokenType.TEXT, text[last_end:start]))
        if match.group(0) == ESCAPED_QUESTION_MARK:
            tokens.append(Token(TokenType.ESCAPED, ESCAPED_QUESTION_MARK))
        else:
            tokens.append(Token(TokenType.PLACEHOLDER, QUESTION_MARK))
        last_end = end

    if last_end < len(text):
        tokens.append(Token(TokenType.TEXT, text[last_end:]))

    return tokens


def has_unescaped_placeholder(text: str) -> bool:
    """Check if text carries a `?` that is not part of a `??` pair.

    >>> has_unescaped_placeholder('a ?? b')
    False
    >>> has_unescaped_placeholder('a ??? b')
    True
    """
    if QUESTION_MARK not in text:
        return False
    return any(t.type == TokenType.PLACEHOLDER for t in tokenize_template(text))


def unescape_template(text: str) -> str:
    """Collapse every `??` of a template to a literal `?`.

    >>> unescape_template("data ?? 'key'")
    "data ? 'key'"
    """
    return ''.join(QUESTION_MARK if t.type is TokenType.ESCAPED else t.text
                   for t in tokenize_template(text))


def count_placeholders(text: str) -> int:
    """Count internal parameter placeholders in expanded text."""
    return text.count(PARAM_PLACEHOLDER)


def make_placeholders(count: int) -> str:
    """Return `count` internal placeholders joined by `, `.
    """
    return ', '.join([PARAM_PLACEHOLDER] * count)
