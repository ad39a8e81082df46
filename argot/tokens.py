"""Tokens are the tokenizer's output and the grammar walker's input:
a raw string paired with its classification, its position in the
token stream, and where it came from.
"""

from enum import Enum

from argot.utils import format_nonexp_repr


IMPLICIT_POSITION = -1

USER_SOURCE = 'User'
INTERNAL_SOURCE = 'Internal'
IMPLICIT_SOURCE = 'Implicit'
RESPONSE_SOURCE_PREFIX = 'Response:'


class TokenType(Enum):
    ARGUMENT = 'argument'
    COMMAND = 'command'
    OPTION = 'option'
    DIRECTIVE = 'directive'
    END_OF_ARGUMENTS = 'end_of_arguments'
    OPERAND = 'operand'


class Location(object):
    """Provenance of a token.

    Args:
       text (str): The raw element the token was produced from.
       source (str): One of ``'User'``, ``'Internal'``,
          ``'Implicit'``, or ``'Response:<path>'``.
       index (int): Index of the element within its source.
       outer (Location): For tokens read from a response file, the
          location of the ``@file`` element that referenced it.
       start (int): Character offset within the element. Non-zero for
          pieces split off a bundle or an inline value.
    """
    def __init__(self, text, source, index, outer=None, start=0):
        self.text = text
        self.source = source
        self.index = index
        self.outer = outer
        self.start = start

    @classmethod
    def user(cls, text, index, start=0):
        return cls(text, USER_SOURCE, index, start=start)

    @classmethod
    def internal(cls, text, index=0):
        return cls(text, INTERNAL_SOURCE, index)

    @classmethod
    def implicit(cls, text=''):
        return cls(text, IMPLICIT_SOURCE, IMPLICIT_POSITION)

    @classmethod
    def from_response_file(cls, path, text, index, outer):
        return cls(text, RESPONSE_SOURCE_PREFIX + path, index, outer=outer)

    @property
    def is_from_response_file(self):
        return self.source.startswith(RESPONSE_SOURCE_PREFIX)

    @property
    def root(self):
        "The outermost location, always a User or Internal one."
        cur = self
        while cur.outer is not None:
            cur = cur.outer
        return cur

    def __eq__(self, other):
        if not isinstance(other, Location):
            return NotImplemented
        return ((self.text, self.source, self.index, self.start, self.outer)
                == (other.text, other.source, other.index, other.start, other.outer))

    def __ne__(self, other):
        ret = self.__eq__(other)
        return ret if ret is NotImplemented else not ret

    def __hash__(self):
        return hash((self.text, self.source, self.index, self.start))

    def __repr__(self):
        return format_nonexp_repr(self, ['source', 'index'], ['start', 'outer'],
                                  opt_key=lambda v: not v)


class Token(object):
    """A single classified piece of input.

    *symbol* is the Command or Option the token names, filled in by
    the tokenizer, or the Argument a value token was assigned to,
    filled in by the grammar walker.
    """
    def __init__(self, value, kind, position=IMPLICIT_POSITION,
                 symbol=None, location=None):
        if not isinstance(kind, TokenType):
            raise TypeError('expected TokenType for kind, not: %r' % (kind,))
        self.value = value
        self.kind = kind
        self.position = position
        self.symbol = symbol
        self.location = location

    @property
    def is_implicit(self):
        return self.position == IMPLICIT_POSITION

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.value, self.kind) == (other.value, other.kind)

    def __ne__(self, other):
        ret = self.__eq__(other)
        return ret if ret is NotImplemented else not ret

    def __hash__(self):
        return hash((self.value, self.kind))

    def __str__(self):
        return self.value

    def __repr__(self):
        return '%s(%r, %s)' % (self.__class__.__name__, self.value, self.kind.name)
