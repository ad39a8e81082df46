"""Value converters usable as an Argument's ``parse_as``.

Any callable taking a single string works as a converter; the ones
here add nicer type labels for error messages and, where it makes
sense, completions for the ``[suggest]`` directive.
"""

from csv import reader, Dialect, QUOTE_MINIMAL


_BOOL_LITERALS = {'true': True, 'false': False}


def is_bool_literal(text):
    "Whether *text* would be accepted by :func:`parse_bool`"
    return text.strip().lower() in _BOOL_LITERALS


def parse_bool(text):
    """Parse ``true`` or ``false`` (any case, surrounding whitespace
    ignored). Anything else raises a ValueError.
    """
    try:
        return _BOOL_LITERALS[text.strip().lower()]
    except KeyError:
        raise ValueError('expected true or false, not: %r' % text)

parse_bool.display_name = 'boolean'


def parse_sv_line(line, sep=','):
    """Parse a single line of values, separated by the delimiter
    *sep*. Supports quoting.
    """
    class _argot_dialect(Dialect):
        delimiter = sep
        escapechar = '\\'
        quotechar = '"'
        doublequote = True
        skipinitialspace = False
        lineterminator = '\n'
        quoting = QUOTE_MINIMAL

    parsed = list(reader([line], dialect=_argot_dialect))
    return parsed[0] if parsed else []


class ListParam(object):
    """Converts a single token holding a character-separated list into
    a Python list of converted values::

      --tags a1,b2,c3

    yields ``['a1', 'b2', 'c3']``. Quoting is supported when values
    contain the separator (``'a1,"b,2",c3'``).

    Args:
       parse_one_as (callable): Converts one item's text. Defaults to str.
       sep (str): A single-character separator. Defaults to ``,``.
       strip (bool): Strip whitespace around each item before
          converting it. Defaults to False.

    To accept several *tokens* instead, give the Argument an arity
    with a maximum above one.
    """
    def __init__(self, parse_one_as=str, sep=',', strip=False):
        if not callable(parse_one_as):
            raise TypeError('expected callable for parse_one_as, not: %r' % parse_one_as)
        if not isinstance(sep, str) or len(sep) != 1:
            raise ValueError('expected single-character separator, not: %r' % sep)
        self.parse_one_as = parse_one_as
        self.sep = sep
        self.strip = strip

    @property
    def display_name(self):
        one_name = getattr(self.parse_one_as, 'display_name', None)
        one_name = one_name or getattr(self.parse_one_as, '__name__', 'value')
        return '%s-separated list of %s' % (self.sep, one_name)

    def parse(self, list_text):
        "Parse a single string argument into a list of values."
        split_vals = parse_sv_line(list_text, self.sep)
        if self.strip:
            split_vals = [v.strip() for v in split_vals]
        return [self.parse_one_as(v) for v in split_vals]

    __call__ = parse

    def __repr__(self):
        cn = self.__class__.__name__
        return ("%s(%r, sep=%r, strip=%r)"
                % (cn, self.parse_one_as, self.sep, self.strip))


class ChoicesParam(object):
    """Converts a single value, limited to a set of *choices*. The
    converter applied before the membership check is inferred from
    the type of the first choice, unless *parse_as* is given.

    The string forms of the choices double as completions for the
    ``[suggest]`` directive.
    """
    def __init__(self, choices, parse_as=None):
        if not choices:
            raise ValueError('expected at least one choice, not: %r' % (choices,))
        try:
            self.choices = sorted(choices)
        except TypeError:
            # in case choices aren't sortable
            self.choices = list(choices)
        if parse_as is None:
            parse_as = type(self.choices[0])
            if parse_as is bool:
                parse_as = parse_bool
        self.parse_as = parse_as

    @property
    def display_name(self):
        return 'one of %s' % ', '.join([str(c) for c in self.choices])

    def get_completions(self):
        return [str(c) for c in self.choices]

    def parse(self, text):
        choice = self.parse_as(text)
        if choice not in self.choices:
            raise ValueError('expected one of %r, not: %r' % (self.choices, text))
        return choice

    __call__ = parse

    def __repr__(self):
        cn = self.__class__.__name__
        return "%s(%r, parse_as=%r)" % (cn, self.choices, self.parse_as)
