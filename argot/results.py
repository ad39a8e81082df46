"""The Symbol-Result Tree: one node per Symbol exercised by a parse,
recording which tokens matched it. Built by the grammar walker,
annotated with defaults and conversion results by validation, and
then handed off to the ParseResult.
"""

from argot.tokens import Token, TokenType, Location
from argot.utils import format_nonexp_repr


class SymbolResult(object):
    """Base type for all results. *tree* is the SymbolResultTree of
    the parse, used to look up results for other symbols.
    """
    kind = None

    def __init__(self, symbol, parent=None, tree=None):
        self.symbol = symbol
        self.parent = parent
        self.tree = tree
        self.tokens = []
        self.children = []
        # may be set by custom converters and default factories
        self.error_message = None

    @property
    def identifier(self):
        return self.symbol.name

    @property
    def root(self):
        cur = self
        while cur.parent is not None:
            cur = cur.parent
        return cur

    def add_token(self, token):
        self.tokens.append(token)

    def add_child(self, child):
        self.children.append(child)
        return child

    def get_result(self, symbol):
        "Find the result for another *symbol* in the same parse, or None"
        if self.tree is None:
            return None
        return self.tree.get(symbol)

    def __repr__(self):
        cn = self.__class__.__name__
        return '<%s %s: %s>' % (cn, self.identifier,
                                ' '.join(['<%s>' % t.value for t in self.tokens]))


class CommandResult(SymbolResult):
    """Records the invocation of a command, the root or a subcommand.
    Its children are the option, argument, and subcommand results
    matched within its scope.
    """
    kind = 'command'

    def __init__(self, command, token, parent=None, tree=None):
        super(CommandResult, self).__init__(command, parent, tree)
        self.identifier_token = token

    @property
    def command(self):
        return self.symbol

    @property
    def identifier(self):
        return self.identifier_token.value

    @property
    def option_results(self):
        return [c for c in self.children if isinstance(c, OptionResult)]

    @property
    def argument_results(self):
        return [c for c in self.children if isinstance(c, ArgumentResult)]

    @property
    def subcommand_result(self):
        for child in self.children:
            if isinstance(child, CommandResult):
                return child
        return None


class OptionResult(SymbolResult):
    """Records an option. Repeated occurrences of the same option in
    one parse share a single OptionResult.

    *token* is None for implicit results, which are created during
    validation for options that were not passed but have a default.
    """
    kind = 'option'

    def __init__(self, option, token=None, parent=None, tree=None):
        super(OptionResult, self).__init__(option, parent, tree)
        self.identifier_token = token
        self.identifier_token_count = 0 if token is None else 1
        # the option's value tokens double as its argument's tokens
        self.argument_result = ArgumentResult(option.argument, parent=self, tree=tree)
        self.argument_result.tokens = self.tokens
        self.children.append(self.argument_result)

    @property
    def option(self):
        return self.symbol

    @property
    def implicit(self):
        return self.identifier_token is None

    @property
    def identifier(self):
        if self.identifier_token is not None:
            return self.identifier_token.value
        return self.symbol.longest_alias

    def add_occurrence(self, token):
        if self.identifier_token is None:
            self.identifier_token = token
        self.identifier_token_count += 1


class ArgumentConversionResult(object):
    """The tri-state outcome of converting an argument's tokens:
    NO_ARGUMENT, SUCCESSFUL (with a value), or FAILED (with a
    ParseError).
    """
    NO_ARGUMENT = 'no_argument'
    SUCCESSFUL = 'successful'
    FAILED = 'failed'

    def __init__(self, status, value=None, error=None):
        self.status = status
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value):
        return cls(cls.SUCCESSFUL, value=value)

    @classmethod
    def failure(cls, error):
        return cls(cls.FAILED, error=error)

    @classmethod
    def no_argument(cls):
        return cls(cls.NO_ARGUMENT)

    @property
    def is_successful(self):
        return self.status == self.SUCCESSFUL

    @property
    def is_failed(self):
        return self.status == self.FAILED

    @property
    def error_message(self):
        return None if self.error is None else self.error.message

    def __repr__(self):
        return format_nonexp_repr(self, ['status'], ['value', 'error'])


class ArgumentResult(SymbolResult):
    """Records the values matched by an Argument: a command's
    positional argument, or the value part of an option.
    """
    kind = 'argument'

    def __init__(self, argument, parent=None, tree=None):
        super(ArgumentResult, self).__init__(argument, parent, tree)
        self.conversion_result = None
        self.passed_on_tokens = None

    @property
    def argument(self):
        return self.symbol

    @property
    def implicit(self):
        return not self.tokens and self.symbol.has_default

    def get_value(self, default=None):
        "The converted value if conversion succeeded, else *default*"
        result = self.conversion_result
        if result is None or not result.is_successful:
            return default
        return result.value

    def only_take(self, count):
        """For use in custom converters: keep only the first *count*
        tokens, passing the rest on to the next positional argument of
        the same command (or to the unmatched tokens).
        """
        if count < 0:
            raise ValueError('expected count >= 0, not: %r' % count)
        if self.passed_on_tokens is not None:
            raise RuntimeError('only_take() can only be called once')
        if count >= len(self.tokens):
            self.passed_on_tokens = []
            return
        self.passed_on_tokens = self.tokens[count:]
        del self.tokens[count:]


class DirectiveResult(SymbolResult):
    "Records a declared Directive and the values passed to it."
    kind = 'directive'

    def __init__(self, directive, token, parent=None, tree=None):
        super(DirectiveResult, self).__init__(directive, parent, tree)
        self.identifier_token = token
        self.values = []

    @property
    def directive(self):
        return self.symbol

    def add_value(self, value):
        if value is not None:
            self.values.append(value)


def make_implicit_token(value, symbol=None):
    return Token(value, TokenType.ARGUMENT, symbol=symbol,
                 location=Location.implicit(value))


class SymbolResultTree(object):
    """Owns everything one parse produces: a mapping from Symbol (by
    identity) to its result, and the ordered list of diagnostics.
    """
    def __init__(self):
        self._results = {}
        self.errors = []
        self._priority_count = 0

    def add(self, symbol, result):
        self._results[symbol] = result
        return result

    def get(self, symbol, default=None):
        return self._results.get(symbol, default)

    def __contains__(self, symbol):
        return symbol in self._results

    def __len__(self):
        return len(self._results)

    def iter_results(self):
        return iter(self._results.values())

    def add_error(self, error, priority=False):
        """Record a diagnostic. *priority* diagnostics (missing required
        values) are kept ahead of all others, in the order added.
        """
        if priority:
            self.errors.insert(self._priority_count, error)
            self._priority_count += 1
        else:
            self.errors.append(error)
        return error

    def __repr__(self):
        cn = self.__class__.__name__
        return '<%s results=%s errors=%r>' % (cn, len(self._results), self.errors)
