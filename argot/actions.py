"""Post-parse actions. A parse selects at most one action, recorded as
``ParseResult.action``: ``[parse]`` and ``[diagram]`` select a
ParseDiagramAction, ``[suggest]`` a SuggestDirectiveAction, and
unmatched tokens (absent a directive) a TypoCorrectionAction.

Actions do nothing until invoked. Each ``invoke()`` writes to *out*
(defaulting to ``sys.stdout``) and returns an exit code.
"""

import os
import sys

from argot.results import (OptionResult,
                           ArgumentResult,
                           DirectiveResult)
from argot.symbols import Command
from argot.tokens import TokenType, USER_SOURCE
from argot.suggest import get_typo_suggestions, get_completions
from argot.utils import format_nonexp_repr


def get_directive_free_args(parse_result):
    """The arguments of *parse_result*, minus the program name and any
    directives.
    """
    skip = set()
    root_token = parse_result.root_command_result.identifier_token
    if root_token.location is not None and root_token.location.source == USER_SOURCE:
        skip.add(root_token.location.index)
    for token in parse_result.tokens:
        if token.kind is TokenType.DIRECTIVE and token.location.source == USER_SOURCE:
            skip.add(token.location.index)
    return [arg for i, arg in enumerate(parse_result.args) if i not in skip]


def _format_value(value):
    if isinstance(value, str):
        return '<%s>' % value
    if isinstance(value, (list, tuple, set, frozenset)):
        return '<%s>' % '> <'.join([str(v) for v in value])
    return '<%s>' % (value,)


def _diagram(parts, symbol_result, error_results):
    if any(symbol_result is r for r in error_results):
        parts.append('!')

    if isinstance(symbol_result, DirectiveResult):
        return

    if isinstance(symbol_result, ArgumentResult):
        argument = symbol_result.argument
        owner = argument.parent
        include_name = isinstance(owner, Command) and len(owner.arguments) > 1
        if include_name:
            parts.append('[ %s ' % argument.name)
        if argument.arity.max_count != 0:
            conversion = symbol_result.conversion_result
            if conversion is None or conversion.status == conversion.NO_ARGUMENT:
                pass
            elif conversion.is_successful and conversion.value is not None:
                parts.append(_format_value(conversion.value))
            elif symbol_result.tokens:
                parts.append('<%s>' % '> <'.join([t.value for t in symbol_result.tokens]))
        if include_name:
            parts.append(' ]')
        return

    if isinstance(symbol_result, OptionResult) and symbol_result.implicit:
        parts.append('*')
    parts.append('[ ')
    parts.append(symbol_result.identifier)

    for child in symbol_result.children:
        if isinstance(child, DirectiveResult):
            continue
        if isinstance(child, ArgumentResult) and (child.argument.is_bool
                                                  or child.argument.arity.max_count == 0):
            continue
        parts.append(' ')
        _diagram(parts, child, error_results)
    parts.append(' ]')


def diagram(parse_result):
    """Render *parse_result* as a bracketed tree, e.g.::

      [ prog [ build [ --config <Release> ] [ -v ] <src/a.cs> <src/b.cs> ] ]

    Results with diagnostics are marked with ``!``, options filled in
    by default values with ``*``. Unmatched tokens are listed at the
    end after ``???-->``.
    """
    error_results = [e.symbol_result for e in parse_result.errors
                     if getattr(e, 'symbol_result', None) is not None]
    parts = []
    _diagram(parts, parse_result.root_command_result, error_results)
    if parse_result.unmatched_tokens:
        parts.append('   ???-->')
        for token in parse_result.unmatched_tokens:
            parts.append(' ')
            parts.append(token)
    return ''.join(parts)


def apply_env_directives(parse_result, environ=None):
    """Set the environment variables named by ``[env:NAME=VALUE]``
    directives in *environ* (defaults to ``os.environ``). Nothing is
    set unless the parser declares an enabled ``env`` directive.
    Values without an ``=`` or with an empty name are ignored. Returns
    the list of names set.
    """
    directive = parse_result.parser.get_directive('env')
    if directive is None or not directive.enabled:
        return []
    environ = os.environ if environ is None else environ
    ret = []
    for value in parse_result.directives.getlist('env'):
        if value is None:
            continue
        name, sep, env_value = value.partition('=')
        name = name.strip()
        if not sep or not name:
            continue
        environ[name] = env_value.strip()
        ret.append(name)
    return ret


class ParseAction(object):
    "Base type for post-parse actions"
    def invoke(self, parse_result, out=None):
        raise NotImplementedError()

    def __repr__(self):
        return format_nonexp_repr(self)


class ParseDiagramAction(ParseAction):
    """Writes the :func:`diagram` of the input following the
    directives. Returns 0, or *error_exit_code* if that input has
    diagnostics.
    """
    def __init__(self, error_exit_code=1):
        self.error_exit_code = error_exit_code

    def invoke(self, parse_result, out=None):
        out = sys.stdout if out is None else out
        target = parse_result.parser.parse(get_directive_free_args(parse_result))
        out.write(diagram(target) + '\n')
        return self.error_exit_code if target.errors else 0

    def __repr__(self):
        return format_nonexp_repr(self, ['error_exit_code'])


class SuggestDirectiveAction(ParseAction):
    """Writes one completion per line for the input following the
    directives, at *position* (defaults to the end of that input).
    """
    def __init__(self, position=None):
        self.position = position

    def invoke(self, parse_result, out=None):
        out = sys.stdout if out is None else out
        text = ' '.join(get_directive_free_args(parse_result))
        for completion in get_completions(parse_result.parser, text, self.position):
            out.write(completion + '\n')
        return 0

    def __repr__(self):
        return format_nonexp_repr(self, ['position'])


class TypoCorrectionAction(ParseAction):
    """Writes suggestions for each unmatched token which has aliases
    within *max_distance* edits.
    """
    def __init__(self, max_distance=3):
        if max_distance <= 0:
            raise ValueError('expected positive max_distance, not: %r' % max_distance)
        self.max_distance = max_distance

    def invoke(self, parse_result, out=None):
        out = sys.stdout if out is None else out
        command = parse_result.command_result.command
        for token in parse_result.unmatched_tokens:
            suggestions = get_typo_suggestions(command, token, self.max_distance)
            if not suggestions:
                continue
            out.write("'%s' was not matched. Did you mean one of the following?\n" % token)
            for suggestion in suggestions:
                out.write(suggestion + '\n')
        return 0

    def __repr__(self):
        return format_nonexp_repr(self, ['max_distance'])
