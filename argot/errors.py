
class ArgotException(Exception):
    """The basest base exception argot has. Rarely directly
    instantiated if ever, but useful for catching.
    """
    pass


class SymbolDefinitionError(ArgotException, ValueError):
    """Raised when a Command, Option, or Argument is declared
    incorrectly. These are programmer errors, surfaced at definition
    time, never at parse time.
    """
    pass


class DuplicateAlias(SymbolDefinitionError):
    """Raised when a command would end up with two immediate children
    answering to the same alias. A child may share an alias with the
    command itself, since the two are never in scope together.
    """
    @classmethod
    def from_add(cls, command, symbol, alias):
        return cls('conflicting alias %r for %s %r in command %r'
                   % (alias, symbol.kind_name, symbol.name, command.name))


class UsageError(ArgotException):
    """Raised by :meth:`ParseResult.check()` when a parse produced one
    or more diagnostics. The diagnostics are available as the
    ``errors`` attribute.
    """
    def __init__(self, msg, errors=()):
        super(UsageError, self).__init__(msg)
        self.errors = list(errors)


class ParseError(ArgotException):
    """A single diagnostic produced while parsing.

    ParseErrors are collected on the result tree rather than raised;
    they are exceptions so that callers can raise them as-is when a
    hard failure is preferable.

    Args:
       message (str): The user-facing description of the problem.
       symbol_result: The SymbolResult the problem is attached to, if
          any, so that renderers can point at the offending tokens.
    """
    def __init__(self, message, symbol_result=None):
        super(ParseError, self).__init__(message)
        self.message = message
        self.symbol_result = symbol_result

    def __str__(self):
        return self.message

    def __repr__(self):
        cn = self.__class__.__name__
        return '%s(%r)' % (cn, self.message)


class TokenizationError(ParseError):
    """A response file could not be expanded. Tokenization continues
    without that file's contents.
    """
    @classmethod
    def file_not_found(cls, path):
        return cls("Response file not found '%s'." % path)

    @classmethod
    def read_failed(cls, path, exc):
        return cls("Error reading response file '%s': %s." % (path, exc))

    @classmethod
    def invalid_reference(cls, path):
        return cls('Invalid response file token: %s' % path)

    @classmethod
    def self_reference(cls, path):
        return cls("Response file '%s' references itself." % path)


class UnmatchedTokenError(ParseError):
    """A token that could not be assigned to any command, option, or
    argument.
    """
    @classmethod
    def from_parse(cls, command_result, token):
        return cls("Unrecognized command or argument '%s'." % token.value,
                   command_result)


class RequiredCommandMissing(ParseError):
    """A command which requires a subcommand was invoked without one."""
    @classmethod
    def from_parse(cls, command_result):
        return cls('Required command was not provided.', command_result)


class RequiredMissing(ParseError):
    """A required option was not passed, or a required value is
    missing and has no default.
    """
    @classmethod
    def for_option(cls, option_result):
        option = option_result.option
        return cls("Option '%s' is required." % option.longest_alias,
                   option_result)

    @classmethod
    def for_argument(cls, symbol_result):
        return cls('Required argument missing for %s: %s.'
                   % (_owner_kind(symbol_result), _owner_label(symbol_result)),
                   symbol_result)


class ArityError(ParseError):
    """Too many or too few values were passed for an option or
    argument.
    """
    @classmethod
    def from_parse(cls, symbol_result, arity, token_count):
        if token_count < arity.min_count:
            return RequiredMissing.for_argument(symbol_result)
        kind = _owner_kind(symbol_result).capitalize()
        label = _owner_label(symbol_result)
        if arity.max_count == 1:
            msg = ('%s %s expects a single argument but %s were provided.'
                   % (kind, label, token_count))
        else:
            msg = ('%s %s expects no more than %s arguments, but %s were provided.'
                   % (kind, label, arity.max_count, token_count))
        return cls(msg, symbol_result)


class ConversionError(ParseError):
    """An argument's value could not be converted to its declared type,
    or its custom converter reported a failure.
    """
    @classmethod
    def from_parse(cls, symbol_result, value, type_label):
        msg = ("Cannot parse argument '%s' for %s %s as expected type %s."
               % (value, _owner_kind(symbol_result),
                  _owner_label(symbol_result), type_label))
        if value.startswith('-'):
            msg += ' (Did you forget to pass an argument?)'
        return cls(msg, symbol_result)


class ValidationError(ParseError):
    """A user-supplied validator rejected a result."""
    pass


def _owner_kind(symbol_result):
    # option arguments are reported against their option
    if symbol_result.kind == 'argument' and symbol_result.parent is not None:
        symbol_result = symbol_result.parent
    return 'command' if symbol_result.kind == 'command' else 'option'


def _owner_label(symbol_result):
    if symbol_result.kind == 'argument' and symbol_result.parent is not None:
        symbol_result = symbol_result.parent
    return "'%s'" % symbol_result.identifier
