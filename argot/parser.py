import sys
import logging
from collections import OrderedDict

from boltons.dictutils import OrderedMultiDict as OMD

from argot.symbols import Command, Directive, BUILTIN_DIRECTIVES
from argot.params import is_bool_literal
from argot.tokens import TokenType
from argot.tokenizer import (Tokenizer,
                             ResponseFileHandling,
                             split_command_line,
                             split_directive,
                             DEFAULT_DELIMITERS)
from argot.results import (CommandResult,
                           OptionResult,
                           ArgumentResult,
                           DirectiveResult,
                           SymbolResultTree)
from argot.validation import validate_results
from argot.actions import (ParseDiagramAction,
                           SuggestDirectiveAction,
                           TypoCorrectionAction)
from argot.parse_result import ParseResult


log = logging.getLogger('argot.parser')

DEFAULT_MAX_TYPO_DISTANCE = 3

_DIAGRAM_DIRECTIVES = ('parse', 'diagram')


def _process_directives(directives):
    if directives is True:
        directives = BUILTIN_DIRECTIVES
    elif not directives:
        directives = ()
    elif isinstance(directives, (str, Directive)):
        directives = [directives]
    ret = OrderedDict()
    for directive in directives:
        if isinstance(directive, str):
            directive = Directive(directive)
        elif not isinstance(directive, Directive):
            raise TypeError('expected directive name or Directive instance, not: %r'
                            % (directive,))
        if directive.name in ret:
            raise ValueError('duplicate directive: %r' % directive.name)
        ret[directive.name] = directive
    return ret


def _process_typo_correction(typo_correction):
    if typo_correction is True:
        return DEFAULT_MAX_TYPO_DISTANCE
    if typo_correction is False or typo_correction is None:
        return 0
    if not isinstance(typo_correction, int) or typo_correction < 0:
        raise ValueError('expected True, False, or a positive integer max distance'
                         ' for typo_correction, not: %r' % (typo_correction,))
    return typo_correction


class Parser(object):
    """The Parser binds a command tree to a tokenizer configuration,
    and turns argument lists into :class:`ParseResult` objects.

    Args:
       root_command (Command): The root of the command tree. Usually a
          :class:`RootCommand`.
       response_files: ``'line'`` (the default) expands ``@path``
          arguments with one argument per line of the file, ``'space'``
          splits each line like a command line, and ``False`` disables
          response files.
       posix_bundling (bool): Defaults to enabled, pass ``False`` to
          disable expanding ``-abc`` into ``-a -b -c``.
       directives: ``True`` (the default) recognizes the built-in
          ``[parse]``, ``[diagram]``, ``[suggest]``, and ``[env]``
          directives. Pass ``False`` to disable directives, or a list
          of names and/or :class:`Directive` instances to choose.
       typo_correction: The maximum edit distance for suggestions
          made for unmatched tokens. Defaults to 3. Pass ``False`` to
          disable.
       delimiters (str): Characters separating an option alias from
          an inline value. Defaults to ``':='``.

    Parsers do not change after construction, and each parse has its
    own state, so one Parser may be used for any number of parses.
    """
    def __init__(self, root_command, response_files=ResponseFileHandling.LINE_SEPARATED,
                 posix_bundling=True, directives=True,
                 typo_correction=DEFAULT_MAX_TYPO_DISTANCE,
                 delimiters=DEFAULT_DELIMITERS):
        if not isinstance(root_command, Command):
            raise TypeError('expected Command instance for root_command, not: %r'
                            % (root_command,))
        self.root_command = root_command
        self.directives = _process_directives(directives)
        self.typo_correction = _process_typo_correction(typo_correction)
        self.tokenizer = Tokenizer(root_command,
                                   response_files=response_files,
                                   posix_bundling=posix_bundling,
                                   directives=bool(self.directives),
                                   delimiters=delimiters)

    @property
    def response_files(self):
        return self.tokenizer.response_files

    @property
    def posix_bundling(self):
        return self.tokenizer.posix_bundling

    def get_directive(self, name):
        return self.directives.get(name)

    def parse(self, args=None):
        """Parse *args* into a :class:`ParseResult`.

        Args:
           args: A list of strings, whose first element may be the
              program name, or a single command line string, which is
              split with :func:`split_command_line`. Pass ``None`` to
              use ``sys.argv``.

        Problems with the input never raise. They are collected as
        diagnostics on the returned result's ``errors``.
        """
        raw_input = None
        if args is None:
            args = sys.argv
        elif isinstance(args, str):
            raw_input = args
            args = split_command_line(args)
        args = list(args)

        tokenize_result = self.tokenizer.tokenize(args)
        return ParseOperation(self, tokenize_result, args, raw_input).run()

    def __repr__(self):
        cn = self.__class__.__name__
        return ('<%s root_command=%r directives=%r typo_correction=%r>'
                % (cn, self.root_command.name, list(self.directives),
                   self.typo_correction))


class ParseOperation(object):
    """A single forward pass over a token list, building the
    SymbolResultTree. Used once per parse, via :meth:`Parser.parse()`.
    """
    def __init__(self, parser, tokenize_result, args, raw_input=None):
        self.parser = parser
        self.tokens = tokenize_result.tokens
        self.tokenize_errors = tokenize_result.errors
        self.args = args
        self.raw_input = raw_input
        self.index = 0

        self.tree = SymbolResultTree()
        self.directives = OMD()
        self.unmatched_tokens = []
        self.unparsed_tokens = []
        self.command_results = []
        self.action = None

    @property
    def current_token(self):
        return self.tokens[self.index]

    def _more(self):
        return self.index < len(self.tokens)

    def _advance(self):
        self.index += 1

    def run(self):
        root_result = CommandResult(self.parser.root_command, self.current_token,
                                    tree=self.tree)
        self.tree.add(root_result.command, root_result)
        self.command_results.append(root_result)
        self._advance()

        while self._more() and self.current_token.kind is TokenType.DIRECTIVE:
            self._parse_directive(root_result)

        self._parse_command_children(root_result)

        for command_result in reversed(self.command_results):
            self._reassign_arguments(command_result)

        validate_results(self.tree, self.command_results, self.unmatched_tokens)

        if self.action is None and self.unmatched_tokens and self.parser.typo_correction:
            self.action = TypoCorrectionAction(self.parser.typo_correction)

        log.debug('parsed %s tokens, command path: %r, errors: %s',
                  len(self.tokens), [c.identifier for c in self.command_results],
                  len(self.tree.errors))

        return ParseResult(parser=self.parser,
                           tree=self.tree,
                           command_results=self.command_results,
                           tokens=self.tokens[1:],
                           unmatched_tokens=[t.value for t in self.unmatched_tokens],
                           unparsed_tokens=[t.value for t in self.unparsed_tokens],
                           directives=self.directives,
                           tokenize_errors=self.tokenize_errors,
                           args=self.args,
                           raw_input=self.raw_input,
                           action=self.action)

    def _parse_directive(self, command_result):
        token = self.current_token
        name, value = split_directive(token.value)
        self.directives.add(name, value)

        directive = self.parser.get_directive(name)
        if directive is not None:
            token.symbol = directive
            result = self.tree.get(directive)
            if result is None:
                result = DirectiveResult(directive, token, parent=command_result,
                                         tree=self.tree)
                command_result.add_child(result)
                self.tree.add(directive, result)
            result.add_value(value)
            if directive.enabled and self.action is None:
                self._select_directive_action(directive, value)
        self._advance()

    def _select_directive_action(self, directive, value):
        if directive.name in _DIAGRAM_DIRECTIVES:
            self.action = ParseDiagramAction()
        elif directive.name == 'suggest':
            position = None
            if value is not None and value.strip().isdigit():
                position = int(value)
            self.action = SuggestDirectiveAction(position)
        else:
            return
        log.debug('selected action %r for directive [%s]', self.action, directive.name)

    def _parse_command_children(self, command_result):
        arg_index, arg_count = 0, 0
        arguments = command_result.command.arguments

        while self._more():
            token = self.current_token
            kind = token.kind
            if kind is TokenType.COMMAND:
                self._parse_subcommand(command_result)
                return
            elif kind is TokenType.OPTION:
                self._parse_option(command_result)
                continue
            elif kind is TokenType.DIRECTIVE:
                self._parse_directive(command_result)
                continue
            elif kind is TokenType.END_OF_ARGUMENTS:
                self._advance()
                continue

            # argument or operand: fill the next positional argument with room
            placed = False
            while arg_index < len(arguments):
                argument = arguments[arg_index]
                if argument.arity.has_room(arg_count):
                    self._add_argument_token(command_result, argument, token)
                    arg_count += 1
                    placed = True
                    break
                arg_index, arg_count = arg_index + 1, 0

            if not placed:
                if kind is TokenType.OPERAND:
                    self.unparsed_tokens.append(token)
                else:
                    self.unmatched_tokens.append(token)
            self._advance()

    def _add_argument_token(self, command_result, argument, token):
        result = self.tree.get(argument)
        if result is None:
            result = ArgumentResult(argument, parent=command_result, tree=self.tree)
            command_result.add_child(result)
            self.tree.add(argument, result)
        token.symbol = argument
        result.add_token(token)

    def _parse_subcommand(self, parent_result):
        token = self.current_token
        result = CommandResult(token.symbol, token, parent=parent_result, tree=self.tree)
        parent_result.add_child(result)
        self.tree.add(result.command, result)
        self.command_results.append(result)
        self._advance()
        self._parse_command_children(result)

    def _parse_option(self, command_result):
        token = self.current_token
        option = token.symbol
        result = self.tree.get(option)
        if result is None:
            result = OptionResult(option, token, parent=command_result, tree=self.tree)
            command_result.add_child(result)
            self.tree.add(option, result)
            self.tree.add(option.argument, result.argument_result)
        else:
            result.add_occurrence(token)
        self._advance()
        self._parse_option_arguments(result)

    def _parse_option_arguments(self, option_result):
        option = option_result.option
        argument = option.argument
        arity = argument.arity
        count = 0

        while self._more() and self.current_token.kind is TokenType.ARGUMENT:
            token = self.current_token
            if not arity.has_room(count):
                return
            if argument.is_bool and not is_bool_literal(token.value):
                return
            token.symbol = argument
            option_result.add_token(token)
            count += 1
            self._advance()
            if not option.allow_multiple_args_per_token:
                return

    def _reassign_arguments(self, command_result):
        """Greedy positional filling can leave later arguments without
        the values they need, e.g., ``<sources...> <dest>``. Shift
        values from the end of the last filled argument into the
        arguments after it, as far as the last one's own minimum allows.
        """
        arguments = command_result.command.arguments
        results = []
        for argument in arguments:
            result = self.tree.get(argument)
            if result is None or result.parent is not command_result:
                break
            results.append(result)
        if not results or len(results) >= len(arguments):
            return

        last = results[-1]
        remaining = arguments[len(results):]
        needed = sum([a.arity.min_count for a in remaining])
        spare = len(last.tokens) - last.argument.arity.min_count
        shift = min(needed, spare)
        if shift <= 0:
            return

        moved = last.tokens[-shift:]
        del last.tokens[-shift:]
        log.debug('reassigning %r from argument %r', [t.value for t in moved],
                  last.argument.name)
        for argument in remaining:
            if not moved:
                break
            take, moved = moved[:argument.arity.min_count], moved[argument.arity.min_count:]
            for token in take:
                self._add_argument_token(command_result, argument, token)

