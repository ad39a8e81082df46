"""The Symbol Model: the static declaration of a command line's
grammar. Commands contain options, positional arguments, and
subcommands. Options own exactly one Argument, which carries arity,
conversion, defaults, and validation.

Symbols are built once and then only read by the parser, so a single
tree can serve any number of parses.
"""

import sys
import inspect

from boltons.typeutils import make_sentinel

from argot.errors import SymbolDefinitionError, DuplicateAlias
from argot.params import parse_bool
from argot.utils import (validate_alias,
                         split_prefix,
                         remove_prefix,
                         get_default_root_name,
                         format_nonexp_repr)


MISSING = make_sentinel('MISSING', var_name='MISSING')

BUILTIN_DIRECTIVES = ('parse', 'diagram', 'suggest', 'env')

_ARITY_SHORTCUTS = {'?': (0, 1), '*': (0, None), '+': (1, None)}


class Arity(object):
    """The number of value tokens a symbol accepts.

    Args:
       min_count (int): Minimum number of values. Defaults to 0.
       max_count (int): Maximum number of values. None (the default)
          means there is no maximum.
    """
    def __init__(self, min_count=0, max_count=None):
        self.min_count = int(min_count) if min_count else 0
        self.max_count = int(max_count) if max_count is not None else None

        if self.min_count < 0:
            raise ValueError('expected min_count >= 0, not: %r' % self.min_count)
        if self.max_count is not None and self.max_count < 0:
            raise ValueError('expected max_count >= 0, not: %r' % self.max_count)
        if self.max_count is not None and self.min_count > self.max_count:
            raise ValueError('expected min_count <= max_count, not: %r > %r'
                             % (self.min_count, self.max_count))

    @classmethod
    def coerce(cls, arity, parse_as=str):
        """Turn any of the accepted arity shorthands into an Arity:
        None (inferred from *parse_as*), an int (exactly that many), a
        ``(min, max)`` pair, or one of ``'?'``, ``'*'``, ``'+'``.
        """
        if arity is None:
            return cls.ZERO_OR_ONE if parse_as is bool else cls.EXACTLY_ONE
        if isinstance(arity, cls):
            return arity
        if isinstance(arity, bool):
            raise TypeError('expected int, pair, shortcut string or Arity'
                            ' for arity, not: %r' % arity)
        if isinstance(arity, int):
            return cls(arity, arity)
        if isinstance(arity, str):
            try:
                return cls(*_ARITY_SHORTCUTS[arity])
            except KeyError:
                raise ValueError('expected one of %r for arity, not: %r'
                                 % (sorted(_ARITY_SHORTCUTS), arity))
        try:
            min_count, max_count = arity
        except (TypeError, ValueError):
            raise TypeError('expected int, pair, shortcut string or Arity'
                            ' for arity, not: %r' % (arity,))
        return cls(min_count, max_count)

    @property
    def is_unbounded(self):
        return self.max_count is None

    def accepts(self, count):
        "True if *count* values fall within this arity"
        if count < self.min_count:
            return False
        return self.max_count is None or count <= self.max_count

    def has_room(self, count):
        "True if a symbol already holding *count* values can take another"
        return self.max_count is None or count < self.max_count

    def __eq__(self, other):
        if not isinstance(other, Arity):
            return NotImplemented
        return (self.min_count, self.max_count) == (other.min_count, other.max_count)

    def __ne__(self, other):
        ret = self.__eq__(other)
        return ret if ret is NotImplemented else not ret

    def __hash__(self):
        return hash((self.min_count, self.max_count))

    def __repr__(self):
        return '%s(%r, %r)' % (self.__class__.__name__, self.min_count, self.max_count)


Arity.ZERO = Arity(0, 0)
Arity.ZERO_OR_ONE = Arity(0, 1)
Arity.EXACTLY_ONE = Arity(1, 1)
Arity.ZERO_OR_MORE = Arity(0, None)
Arity.ONE_OR_MORE = Arity(1, None)


class Symbol(object):
    """Base type for every named element of the grammar. Not
    instantiated directly.
    """
    kind_name = 'symbol'

    def __init__(self, name, doc=None, hidden=False):
        self.name = name
        self.doc = doc
        self.hidden = bool(hidden)
        self.parent = None

    @property
    def aliases(self):
        return (self.name,)

    def has_alias(self, alias):
        return alias in self.aliases

    def iter_ancestors(self):
        cur = self.parent
        while cur is not None:
            yield cur
            cur = cur.parent

    def _set_parent(self, parent):
        if self.parent is not None and self.parent is not parent:
            raise SymbolDefinitionError('%s %r already belongs to %s %r'
                                        % (self.kind_name, self.name,
                                           self.parent.kind_name, self.parent.name))
        self.parent = parent

    def __repr__(self):
        return format_nonexp_repr(self, ['name'])


def _call_factory(factory, argument_result):
    try:
        sig = inspect.signature(factory)
    except (TypeError, ValueError):
        return factory()
    required = [p for p in sig.parameters.values()
                if p.default is p.empty
                and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]
    if required:
        return factory(argument_result)
    return factory()


class Argument(Symbol):
    """A value-bearing symbol: either a command's positional argument,
    or the value part of an Option.

    Args:
       name (str): Used in diagrams, messages, and lookups.
       parse_as (callable): Converts each value token. Doubles as the
          value type tag: ``bool`` arguments accept only ``true`` and
          ``false`` and let options act as flags. Defaults to ``str``.
       arity: How many value tokens are accepted. See
          :meth:`Arity.coerce` for accepted forms. Defaults to one
          value, or zero-or-one for ``bool``.
       default: The value used when no tokens were passed.
       default_factory (callable): Builds the default lazily, called
          at most once per parse. May accept the ArgumentResult.
       convert (callable): A custom conversion function, receiving
          the whole ArgumentResult. Returns the value, returns an
          ArgumentConversionResult, or raises ValueError to fail.
       validators (list): Callables receiving the ArgumentResult and
          returning an error message, or None when valid. Run in
          order; the first message wins.
       completions: An iterable of strings, or a callable returning
          one, offered by the ``[suggest]`` directive.
       doc (str): A summary of the argument.
       hidden (bool): Hide from suggestions.
    """
    kind_name = 'argument'

    def __init__(self, name, parse_as=str, arity=None, default=MISSING,
                 default_factory=None, convert=None, validators=None,
                 completions=None, doc=None, hidden=False):
        if not name or not isinstance(name, str):
            raise ValueError('expected non-zero length string for argument name, not: %r' % name)
        super(Argument, self).__init__(name, doc=doc, hidden=hidden)
        if not callable(parse_as):
            raise TypeError('expected callable for parse_as, not: %r' % parse_as)
        if default is not MISSING and default_factory is not None:
            raise ValueError('expected default or default_factory, not both')
        if default_factory is not None and not callable(default_factory):
            raise TypeError('expected callable for default_factory, not: %r' % default_factory)
        if convert is not None and not callable(convert):
            raise TypeError('expected callable for convert, not: %r' % convert)

        self.value_type = parse_as
        self.parse_as = parse_bool if parse_as is bool else parse_as
        self.arity = Arity.coerce(arity, parse_as)
        self.default = default
        self.default_factory = default_factory
        self.convert = convert
        self.validators = []
        for validator in (validators or ()):
            self.add_validator(validator)
        self.completions = completions

    @property
    def aliases(self):
        return ()

    @property
    def is_bool(self):
        return self.value_type is bool

    @property
    def has_default(self):
        return self.default is not MISSING or self.default_factory is not None

    def get_default(self, argument_result=None):
        "Produce the default value. Returns MISSING if there is none."
        if self.default_factory is not None:
            return _call_factory(self.default_factory, argument_result)
        return self.default

    def add_validator(self, validator):
        if not callable(validator):
            raise TypeError('expected callable validator, not: %r' % validator)
        self.validators.append(validator)

    def get_completions(self):
        completions = self.completions
        if completions is None:
            get_comps = getattr(self.parse_as, 'get_completions', None)
            if callable(get_comps):
                return list(get_comps())
            if self.is_bool:
                return ['false', 'true']
            return []
        if callable(completions):
            completions = completions()
        return [str(c) for c in completions]

    def __repr__(self):
        return format_nonexp_repr(self, ['name', 'parse_as', 'arity'])


class Option(Symbol):
    """A named symbol introduced by one of its aliases (e.g.,
    ``--config`` or ``-c``), optionally followed by values. Every
    Option is backed by exactly one Argument.

    Args:
       *aliases (str): One or more aliases, prefix included.
       parse_as, arity, default, default_factory, convert, completions:
          Passed through to the backing Argument (see Argument).
       arg_validators (list): Validators for the backing Argument.
       validators (list): Validators receiving the OptionResult.
       required (bool): The option must be passed. Defaults to False.
       recursive (bool): The option is also accepted by every
          subcommand of its command. Defaults to False.
       allow_multiple_args_per_token (bool): When True, a single
          occurrence may consume several following values, up to the
          arity maximum. When False (the default), each occurrence
          takes at most one value (``-x a -x b``).
       argument (Argument): Pass a prebuilt Argument instead of the
          value keywords above.
       doc (str): A summary of the option.
       hidden (bool): Hide from suggestions.
    """
    kind_name = 'option'

    def __init__(self, *aliases, **kwargs):
        if not aliases:
            raise ValueError('expected at least one alias for option')
        self._aliases = tuple(validate_alias(a, 'option') for a in aliases)
        name = remove_prefix(self._aliases[0]) or self._aliases[0]
        super(Option, self).__init__(name,
                                     doc=kwargs.pop('doc', None),
                                     hidden=kwargs.pop('hidden', False))
        self.required = bool(kwargs.pop('required', False))
        self.recursive = bool(kwargs.pop('recursive', False))
        self.allow_multiple_args_per_token = bool(kwargs.pop('allow_multiple_args_per_token', False))
        self.validators = list(kwargs.pop('validators', None) or [])
        for validator in self.validators:
            if not callable(validator):
                raise TypeError('expected callable validator, not: %r' % validator)

        argument = kwargs.pop('argument', None)
        if argument is None:
            argument = Argument(name,
                                parse_as=kwargs.pop('parse_as', str),
                                arity=kwargs.pop('arity', None),
                                default=kwargs.pop('default', MISSING),
                                default_factory=kwargs.pop('default_factory', None),
                                convert=kwargs.pop('convert', None),
                                validators=kwargs.pop('arg_validators', None),
                                completions=kwargs.pop('completions', None))
        elif not isinstance(argument, Argument):
            raise TypeError('expected Argument instance, not: %r' % argument)
        if kwargs:
            raise TypeError('unexpected keyword arguments: %r' % sorted(kwargs.keys()))
        argument._set_parent(self)
        self.argument = argument

    @property
    def aliases(self):
        return self._aliases

    @property
    def longest_alias(self):
        return max(self._aliases, key=len)

    @property
    def single_char_aliases(self):
        "Aliases usable in a POSIX bundle, e.g., ``-v``"
        ret = []
        for alias in self._aliases:
            prefix, rest = split_prefix(alias)
            if prefix and len(rest) == 1:
                ret.append((rest, alias))
        return ret

    def __repr__(self):
        return format_nonexp_repr(self, ['aliases'], ['required', 'recursive'],
                                  opt_key=lambda v: not v)


class Command(Symbol):
    """A command, the scope in which options, positional arguments,
    and subcommands are recognized.

    Args:
       name (str): The primary alias of the command.
       doc (str): A summary of the command.
       aliases (list): Additional aliases.
       children (list): Options, Arguments, and subcommands to add
          right away. More can be added with :meth:`~Command.add()`.
       treat_unmatched_tokens_as_errors (bool): When True (the
          default), tokens that cannot be placed produce a diagnostic
          when this is the invoked command.
       subcommand_required (bool): When True, invoking this command
          without one of its subcommands is an error.
       validators (list): Callables receiving the CommandResult of
          the invoked command, returning an error message or None.
       hidden (bool): Hide from suggestions.
    """
    kind_name = 'command'

    def __init__(self, name, doc=None, aliases=None, children=None,
                 treat_unmatched_tokens_as_errors=True,
                 subcommand_required=False, validators=None, hidden=False):
        validate_alias(name, 'command')
        super(Command, self).__init__(name, doc=doc, hidden=hidden)
        if isinstance(aliases, str):
            aliases = [aliases]
        self._aliases = (name,) + tuple(validate_alias(a, 'command')
                                        for a in (aliases or ()))
        self.treat_unmatched_tokens_as_errors = treat_unmatched_tokens_as_errors
        self.subcommand_required = subcommand_required
        self.validators = list(validators or [])

        self.subcommands = []
        self.options = []
        self.arguments = []
        self.children = []
        self._child_alias_map = {}
        for child in (children or ()):
            self.add(child)

    @property
    def aliases(self):
        return self._aliases

    def add(self, *a, **kw):
        """Add an Option, Argument, or subcommand to this Command, and
        return it.

        If the first argument is a string alias (starting with ``-``
        or ``/``), an Option is constructed from the arguments. See
        the Option docs for the full set of keywords.

        May raise DuplicateAlias if the new child's aliases conflict
        with an existing child's, or SymbolDefinitionError if the
        symbol already belongs to another command.
        """
        target = a[0] if a else None
        if isinstance(target, Symbol):
            if len(a) > 1 or kw:
                raise TypeError('unexpected arguments after %r: %r, %r' % (target, a[1:], kw))
            return self._add_symbol(target)
        if isinstance(target, str) and split_prefix(target)[0]:
            return self._add_symbol(Option(*a, **kw))
        raise ValueError('expected Command, Option, Argument, or Option'
                         ' parameters, not: %r, %r' % (a, kw))

    def add_validator(self, validator):
        if not callable(validator):
            raise TypeError('expected callable validator, not: %r' % validator)
        self.validators.append(validator)

    def _add_symbol(self, symbol):
        if isinstance(symbol, Argument):
            for existing in self.arguments:
                if existing.name == symbol.name:
                    raise SymbolDefinitionError('duplicate argument name %r in command %r'
                                                % (symbol.name, self.name))
        elif isinstance(symbol, (Option, Command)):
            for alias in symbol.aliases:
                if alias in self._child_alias_map:
                    raise DuplicateAlias.from_add(self, symbol, alias)
        else:
            raise TypeError('expected Command, Option, or Argument, not: %r' % symbol)

        symbol._set_parent(self)
        for alias in symbol.aliases:
            self._child_alias_map[alias] = symbol

        if isinstance(symbol, Command):
            self.subcommands.append(symbol)
        elif isinstance(symbol, Option):
            self.options.append(symbol)
        else:
            self.arguments.append(symbol)
        self.children.append(symbol)
        return symbol

    def get_child(self, alias):
        "Get an immediate child Option or Command by alias, or None"
        return self._child_alias_map.get(alias)

    def get_recursive_options(self):
        """The recursive options declared on this command's ancestors,
        nearest ancestor first.
        """
        ret = []
        for ancestor in self.iter_ancestors():
            ret.extend([opt for opt in ancestor.options if opt.recursive])
        return ret

    def get_visible_options(self):
        "Options usable in this command's scope, its own first"
        return self.options + self.get_recursive_options()

    def __repr__(self):
        return format_nonexp_repr(self, ['name'], ['doc'])


class RootCommand(Command):
    """The top of a command tree. Its name defaults to the name of the
    running executable, without directory or extension.
    """
    def __init__(self, name=None, doc=None, **kwargs):
        if name is None:
            name = get_default_root_name(sys.argv)
        super(RootCommand, self).__init__(name, doc=doc, **kwargs)


class Directive(Symbol):
    """A bracketed pseudo-option (``[name]`` or ``[name:value]``),
    recognized before any other token. The names ``parse``,
    ``diagram``, ``suggest``, and ``env`` have built-in actions; other
    names are simply recorded in the parse result.
    """
    kind_name = 'directive'

    def __init__(self, name, enabled=True, doc=None):
        if not name or not isinstance(name, str):
            raise ValueError('expected non-zero length string for directive name, not: %r' % name)
        if any(c.isspace() or c in '[]:' for c in name):
            raise ValueError('directive names cannot contain whitespace,'
                             ' brackets, or colons: %r' % name)
        super(Directive, self).__init__(name, doc=doc, hidden=True)
        self.enabled = bool(enabled)

    @property
    def aliases(self):
        return ('[%s]' % self.name,)

    def __repr__(self):
        return format_nonexp_repr(self, ['name', 'enabled'])
