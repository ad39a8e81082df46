"""Turns a raw argument vector into a flat sequence of classified
Tokens. Handles root command normalization, directives, ``--``,
``@file`` response files, POSIX bundling, and inline ``--opt=value``
splitting.

Tokenization never raises for bad user input. Problems with response
files are collected as TokenizationErrors and the remaining input is
still tokenized.
"""

import os
import logging
from enum import Enum

from argot.errors import TokenizationError
from argot.symbols import Option, Command
from argot.tokens import Token, TokenType, Location
from argot.utils import split_prefix


log = logging.getLogger('argot.tokenizer')

END_OF_ARGUMENTS = '--'
RESPONSE_FILE_PREFIX = '@'
DEFAULT_DELIMITERS = ':='


class ResponseFileHandling(Enum):
    LINE_SEPARATED = 'line'
    SPACE_SEPARATED = 'space'
    DISABLED = 'disabled'

    @classmethod
    def coerce(cls, value):
        if isinstance(value, cls):
            return value
        if value is True:
            return cls.LINE_SEPARATED
        if value is False or value is None:
            return cls.DISABLED
        try:
            return cls(value)
        except ValueError:
            raise ValueError("expected one of 'line', 'space', True or False"
                             " for response file handling, not: %r" % (value,))


def split_command_line(text):
    """Split a single command-line string into arguments.

    Whitespace separates arguments, except inside double quotes. The
    quote characters themselves are removed from the result. A quote
    opened at the start of an argument and never closed swallows the
    rest of the input.

    >>> split_command_line('build --name "my app" -v')
    ['build', '--name', 'my app', '-v']
    """
    ret = []
    start = 0
    in_word = False
    in_quote = False
    length = len(text)

    def _current(end):
        return text[start:end].replace('"', '')

    for pos, c in enumerate(text):
        if c.isspace():
            if not in_quote:
                if in_word:
                    ret.append(_current(pos))
                    in_word = False
                start = pos
        elif c == '"':
            if not in_word:
                if in_quote:
                    ret.append(_current(pos))
                    start = pos
                    in_quote = False
                else:
                    start = pos + 1
                    in_quote = True
            else:
                in_quote = not in_quote
        elif not in_word and not in_quote:
            in_word = True
            start = pos

        if pos == length - 1 and in_word:
            ret.append(_current(length))
    return ret


def is_directive(arg):
    "Whether *arg* has the shape of ``[name]`` or ``[name:value]``"
    return (arg.startswith('[') and arg.endswith(']')
            and len(arg) > 2 and arg[1] not in ']:')


def split_directive(arg):
    "``'[name:value]'`` -> ``('name', 'value')``, value None if absent"
    inner = arg[1:-1]
    name, sep, value = inner.partition(':')
    return name, (value if sep else None)


def get_response_file_path(arg):
    if arg.startswith(RESPONSE_FILE_PREFIX) and len(arg) > 1:
        return arg[1:]
    return None


class TokenizeResult(object):
    def __init__(self, tokens, errors):
        self.tokens = tokens
        self.errors = errors

    def __repr__(self):
        cn = self.__class__.__name__
        return '<%s tokens=%r errors=%r>' % (cn, self.tokens, self.errors)


class _Element(object):
    # one raw input string awaiting classification
    def __init__(self, text, location, force_argument=False):
        self.text = text
        self.location = location
        self.force_argument = force_argument


class Tokenizer(object):
    """Tokenizes argument vectors against a single command tree.

    Args:
       root_command (Command): The root of the command tree.
       response_files: ``'line'`` (one argument per line, the
          default), ``'space'`` (lines split like a command line), or
          False to treat ``@``-prefixed arguments literally.
       posix_bundling (bool): Expand ``-abc`` into ``-a -b -c``.
          Defaults to True.
       directives (bool): Recognize leading ``[name]`` and
          ``[name:value]`` arguments. Defaults to True.
       delimiters (str): Characters separating an option alias from
          an inline value. Defaults to ``':='``.

    Tokenizers hold no per-parse state, so one instance may tokenize
    any number of argument vectors.
    """
    def __init__(self, root_command, response_files=ResponseFileHandling.LINE_SEPARATED,
                 posix_bundling=True, directives=True, delimiters=DEFAULT_DELIMITERS):
        if not isinstance(root_command, Command):
            raise TypeError('expected Command instance, not: %r' % (root_command,))
        if not isinstance(delimiters, str):
            raise TypeError('expected string of delimiter characters, not: %r' % (delimiters,))
        self.root_command = root_command
        self.response_files = ResponseFileHandling.coerce(response_files)
        self.posix_bundling = bool(posix_bundling)
        self.directives = bool(directives)
        self.delimiters = delimiters

    def tokenize(self, args):
        """Tokenize the argument vector *args*, whose first element may
        be the program name. Returns a TokenizeResult. The first token
        is always the root command's.
        """
        if isinstance(args, str):
            raise TypeError('expected list of arguments, not string: %r'
                            ' (see split_command_line())' % args)
        args = list(args or [])
        return _TokenizeOperation(self, args).run()

    def __repr__(self):
        cn = self.__class__.__name__
        return ('<%s root_command=%r response_files=%s posix_bundling=%r directives=%r>'
                % (cn, self.root_command.name, self.response_files.value,
                   self.posix_bundling, self.directives))


def tokenize(args, root_command, **kwargs):
    "Convenience wrapper: ``Tokenizer(root_command, **kwargs).tokenize(args)``"
    return Tokenizer(root_command, **kwargs).tokenize(args)


def get_known_aliases(command):
    """Map each alias recognized in the scope of *command* to its
    Symbol: the command's own aliases, its children's aliases, and
    the recursive options of its ancestors.
    """
    ret = {}
    for option in command.get_recursive_options():
        for alias in option.aliases:
            ret.setdefault(alias, option)
    for child in command.children:
        for alias in child.aliases:
            ret[alias] = child
    for alias in command.aliases:
        ret.setdefault(alias, command)
    return ret


class _TokenizeOperation(object):
    def __init__(self, tokenizer, args):
        self.tokenizer = tokenizer
        self.args = args
        self.root_command = tokenizer.root_command
        self.tokens = []
        self.errors = []

        self.current_command = None
        self.known = {}

    def run(self):
        elements = self._normalize_root()
        self._enter_command(self.root_command)

        root_element = elements[0]
        self._add(root_element.text, TokenType.COMMAND, root_element.location,
                  self.root_command)

        found_end_of_args = False
        found_end_of_directives = not self.tokenizer.directives
        root_aliases = self.root_command.aliases

        i = 1
        while i < len(elements):
            elem = elements[i]
            arg = elem.text
            i += 1

            if found_end_of_args:
                self._add(arg, TokenType.OPERAND, elem.location)
                continue

            if elem.force_argument:
                self._add(arg, TokenType.ARGUMENT, elem.location)
                continue

            if arg == END_OF_ARGUMENTS:
                self._add(arg, TokenType.END_OF_ARGUMENTS, elem.location)
                found_end_of_args = True
                continue

            if not found_end_of_directives:
                if is_directive(arg):
                    self._add(arg, TokenType.DIRECTIVE, elem.location)
                    continue
                if arg not in root_aliases:
                    found_end_of_directives = True

            if self.tokenizer.response_files is not ResponseFileHandling.DISABLED:
                path = get_response_file_path(arg)
                if path is not None:
                    elements[i:i] = self._read_response_file(path, elem.location)
                    continue

            if self.tokenizer.posix_bundling:
                pieces = self._unbundle(elem)
                if pieces:
                    log.debug('unbundled %r into %r', arg, [p.text for p in pieces])
                    elem = pieces[0]
                    arg = elem.text
                    elements[i:i] = pieces[1:]

            self._classify(elem)

        return TokenizeResult(self.tokens, self.errors)

    def _normalize_root(self):
        root = self.root_command
        elements = [_Element(arg, Location.user(arg, idx))
                    for idx, arg in enumerate(self.args)]
        if elements:
            first = os.path.basename(elements[0].text)
            if first in root.aliases:
                elements[0].text = first
                return elements
            stem = os.path.splitext(first)[0]
            if stem in root.aliases:
                elements[0].text = stem
                return elements
            if first.lower() in (root.name.lower() + '.exe', root.name.lower() + '.dll'):
                elements[0].text = root.name
                return elements
        return [_Element(root.name, Location.internal(root.name))] + elements

    def _enter_command(self, command):
        self.current_command = command
        self.known = get_known_aliases(command)

    def _add(self, value, kind, location, symbol=None):
        token = Token(value, kind, position=len(self.tokens),
                      symbol=symbol, location=location)
        self.tokens.append(token)
        return token

    def _classify(self, elem):
        arg = elem.text
        location = elem.location
        known = self.known

        if arg not in known:
            alias, value = self._split_inline_value(arg)
            if alias is not None:
                value_loc = Location(value, location.source, location.index,
                                     outer=location.outer,
                                     start=location.start + len(alias) + 1)
                self._add(alias, TokenType.OPTION, location, known[alias])
                # trim outer quotes in case of, e.g., -x="why"
                self._add(value.strip('"'), TokenType.ARGUMENT, value_loc)
                return
            self._add(arg, TokenType.ARGUMENT, location)
            return

        symbol = known[arg]
        if symbol is self.current_command:
            # the current command's own name is just an argument here
            self._add(arg, TokenType.ARGUMENT, location)
        elif isinstance(symbol, Option):
            self._add(arg, TokenType.OPTION, location, symbol)
        else:
            self._add(arg, TokenType.COMMAND, location, symbol)
            self._enter_command(symbol)

    def _split_inline_value(self, arg):
        idxs = [arg.find(d) for d in self.tokenizer.delimiters]
        idxs = [idx for idx in idxs if idx >= 0]
        if not idxs:
            return None, None
        idx = min(idxs)
        alias, value = arg[:idx], arg[idx + 1:]
        if isinstance(self.known.get(alias), Option):
            return alias, value
        return None, None

    def _last_option_requires_argument(self):
        if not self.tokens:
            return False
        last = self.tokens[-1]
        if last.kind is not TokenType.OPTION or not isinstance(last.symbol, Option):
            return False
        return last.symbol.argument.arity.min_count > 0

    def _option_for_char(self, c):
        if c in self.tokenizer.delimiters:
            return None, None
        matches = []
        for alias, symbol in self.known.items():
            prefix, rest = split_prefix(alias)
            if isinstance(symbol, Option) and prefix and rest == c:
                matches.append((prefix != '-', alias, symbol))
        if not matches:
            return None, None
        _, alias, symbol = min(matches, key=lambda m: m[0])
        return alias, symbol

    def _unbundle(self, elem):
        """Returns the list of elements replacing *elem*, or None if
        *elem* should not be unbundled.
        """
        arg = elem.text
        if arg in self.known or self._last_option_requires_argument():
            return None
        prefix, rest = split_prefix(arg)
        if prefix != '-' or not rest:
            return None

        location = elem.location
        ret = []

        def _piece(text, start, force_argument=False):
            loc = Location(text, location.source, location.index,
                           outer=location.outer, start=location.start + start)
            return _Element(text, loc, force_argument)

        def _add_rest(start):
            rest_text = rest[start:]
            if rest_text[0] in self.tokenizer.delimiters:
                # keep -l=value together so the inline split applies
                last = ret[-1]
                ret[-1] = _piece(last.text + rest_text, last.location.start - location.start)
            else:
                ret.append(_piece(rest_text, 1 + start, force_argument=True))

        last_takes_argument = False
        for i, c in enumerate(rest):
            alias, option = self._option_for_char(c)
            if option is None:
                if last_takes_argument:
                    _add_rest(i)
                    break
                return None
            ret.append(_piece(alias, 1 + i))
            arity = option.argument.arity
            last_takes_argument = arity.max_count is None or arity.max_count > 0
            if arity.min_count > 0 and i < len(rest) - 1:
                _add_rest(i + 1)
                break
        return ret

    def _read_response_file(self, path, location):
        if not path.strip():
            self.errors.append(TokenizationError.invalid_reference(path))
            return []
        try:
            ret = self._expand_response_file(path, location, ())
        except TokenizationError as te:
            log.debug('response file %r not expanded: %s', path, te)
            self.errors.append(te)
            return []
        log.debug('expanded response file %r into %s arguments', path, len(ret))
        return ret

    def _expand_response_file(self, path, outer, seen):
        full_path = os.path.abspath(path)
        if full_path in seen:
            raise TokenizationError.self_reference(path)
        seen = seen + (full_path,)

        try:
            with open(path, encoding='utf-8') as f:
                lines = f.read().splitlines()
        except FileNotFoundError:
            raise TokenizationError.file_not_found(path)
        except (OSError, UnicodeDecodeError) as e:
            raise TokenizationError.read_failed(path, e)

        ret = []
        for line_idx, line in enumerate(lines):
            for part in self._split_line(line):
                loc = Location.from_response_file(path, part, line_idx, outer)
                nested_path = get_response_file_path(part)
                if nested_path is not None and nested_path.strip():
                    ret.extend(self._expand_response_file(nested_path, loc, seen))
                else:
                    ret.append(_Element(part, loc))
        return ret

    def _split_line(self, line):
        arg = line.strip()
        if not arg or arg.startswith('#'):
            return []
        if self.tokenizer.response_files is ResponseFileHandling.SPACE_SEPARATED:
            return split_command_line(arg)
        return [arg]
