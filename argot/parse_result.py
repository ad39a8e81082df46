from argot.errors import UsageError
from argot.actions import diagram, apply_env_directives
from argot.results import OptionResult, ArgumentResult
from argot.symbols import Symbol, Option, Command
from argot.suggest import get_typo_suggestions, DEFAULT_MAX_DISTANCE
from argot.validation import convert_argument_result


class ParseResult(object):
    """The outcome of :meth:`Parser.parse()`. Never partial: when the
    input had problems, ``errors`` lists them and everything that did
    parse is still available.

    Attributes:
       parser: The Parser which produced this result.
       root_command_result: The CommandResult for the root command.
       command_result: The CommandResult for the innermost command,
          the one actually invoked.
       command_path (list): CommandResults from the root to the
          innermost command.
       tokens (list): All tokens, excluding the root command's.
       unmatched_tokens (list): Strings which could not be placed.
       unparsed_tokens (list): Strings following ``--`` which were
          left over after the positional arguments were filled.
       directives (OrderedMultiDict): Every directive passed, name to
          value, in order. Directives passed without a value map to
          None. Use ``getlist(name)`` for all values of one name.
       errors (list): ParseErrors, response file problems first.
       tokenize_errors (list): Just the response file problems.
       args (list): The argument list that was parsed.
       raw_input (str): The command line string, if one was parsed.
       action: The post-parse action selected by a directive or by
          typo correction, or None.
    """
    def __init__(self, parser, tree, command_results, tokens, unmatched_tokens,
                 unparsed_tokens, directives, tokenize_errors, args,
                 raw_input=None, action=None):
        self.parser = parser
        self.tree = tree
        self.command_path = list(command_results)
        self.root_command_result = self.command_path[0]
        self.command_result = self.command_path[-1]
        self.tokens = tokens
        self.unmatched_tokens = unmatched_tokens
        self.unparsed_tokens = unparsed_tokens
        self.directives = directives
        self.tokenize_errors = list(tokenize_errors)
        self.errors = self.tokenize_errors + list(tree.errors)
        self.args = args
        self.raw_input = raw_input
        self.action = action
        self._default_results = {}

    @property
    def command_names(self):
        return [c.identifier for c in self.command_path]

    def get_result(self, symbol):
        "The SymbolResult for *symbol*, or None if it has none"
        return self.tree.get(symbol)

    def _iter_scope_symbols(self):
        for command_result in reversed(self.command_path):
            command = command_result.command
            yield command
            for child in command.children:
                yield child
            for option in command.get_recursive_options():
                yield option

    def find_symbol(self, name):
        """Find a symbol in the scope of the parsed command path by
        alias or name, innermost command first. Returns None if not
        found.
        """
        for symbol in self._iter_scope_symbols():
            if name in symbol.aliases or symbol.name == name:
                return symbol
        return None

    def find_result(self, name):
        "Like :meth:`find_symbol()`, but returns the symbol's result"
        symbol = self.find_symbol(name)
        if symbol is None:
            return None
        return self.tree.get(symbol)

    def _resolve(self, symbol_or_name):
        if isinstance(symbol_or_name, Symbol):
            return symbol_or_name
        symbol = self.find_symbol(symbol_or_name)
        if symbol is None:
            raise KeyError('no option, argument, or command named %r in command path %r'
                           % (symbol_or_name, self.command_names))
        return symbol

    def get_value(self, symbol_or_name, default=None):
        """Get the converted value for an Option or Argument, passed as
        the symbol itself or by alias or name.

        Absent boolean options are False. Absent symbols with defaults
        get their default value. Otherwise, absent symbols and values
        which failed to convert return *default*.
        """
        symbol = self._resolve(symbol_or_name)
        if isinstance(symbol, Command):
            raise TypeError('expected Option or Argument, not Command: %r' % symbol)
        argument = symbol.argument if isinstance(symbol, Option) else symbol
        result = self.tree.get(argument)
        if result is None and argument.has_default:
            result = self._default_results.get(argument)
            if result is None:
                # symbols outside the validated path, defaulted once on demand
                result = ArgumentResult(argument, tree=self.tree)
                convert_argument_result(result)
                self._default_results[argument] = result
        if result is None:
            if isinstance(symbol, Option) and argument.is_bool:
                return False
            return default
        return result.get_value(default)

    def has_option(self, symbol_or_name):
        "Whether an option was actually passed, not just defaulted"
        symbol = self._resolve(symbol_or_name)
        result = self.tree.get(symbol)
        return isinstance(result, OptionResult) and not result.implicit

    def get_typo_suggestions(self, max_distance=None):
        """Map each unmatched token to its list of suggested aliases.
        Tokens without suggestions are omitted.
        """
        if max_distance is None:
            max_distance = self.parser.typo_correction or DEFAULT_MAX_DISTANCE
        command = self.command_result.command
        ret = {}
        for token in self.unmatched_tokens:
            suggestions = get_typo_suggestions(command, token, max_distance)
            if suggestions:
                ret[token] = suggestions
        return ret

    def diagram(self):
        return diagram(self)

    def check(self):
        """Raise a :exc:`UsageError` carrying all the diagnostics if
        there are any, otherwise return this result.
        """
        if self.errors:
            msg = '\n'.join([e.message for e in self.errors])
            raise UsageError(msg, self.errors)
        return self

    def invoke_action(self, out=None, environ=None):
        """Apply any ``[env]`` directives to *environ* (see
        :func:`apply_env_directives`), then invoke the selected action,
        writing to *out* (defaults to ``sys.stdout``). Returns the
        action's exit code, or None if no action was selected.
        """
        apply_env_directives(self, environ)
        if self.action is None:
            return None
        return self.action.invoke(self, out=out)

    def __repr__(self):
        cn = self.__class__.__name__
        return ('<%s command_path=%r errors=%r>'
                % (cn, self.command_names, [e.message for e in self.errors]))
