"""Suggestions: "did you mean" typo correction for unmatched tokens,
and completions for the ``[suggest]`` directive.
"""

from boltons.iterutils import unique

from argot.symbols import Option, Command
from argot.tokens import TokenType
from argot.tokenizer import split_command_line


DEFAULT_MAX_DISTANCE = 3


def levenshtein(first, second):
    """The edit distance between two strings, counting insertions,
    deletions, and substitutions as one edit each. Only two rows of
    the table are kept.

    >>> levenshtein('hlep', 'help')
    2
    """
    n, m = len(first), len(second)
    if n == 0:
        return m
    if m == 0:
        return n

    cur_row = list(range(m + 1))
    for i in range(1, n + 1):
        next_row = [i] + [0] * m
        for j in range(1, m + 1):
            cost = 0 if first[i - 1] == second[j - 1] else 1
            next_row[j] = min(cur_row[j] + 1,
                              next_row[j - 1] + 1,
                              cur_row[j - 1] + cost)
        cur_row = next_row
    return cur_row[m]


def starts_with_length(first, second):
    "Length of the common prefix of *first* and *second*"
    i = 0
    while i < len(first) and i < len(second) and first[i] == second[i]:
        i += 1
    return i


def _rank_key(token):
    return lambda alias: (levenshtein(token, alias), -starts_with_length(token, alias))


def get_typo_suggestions(command, token, max_distance=DEFAULT_MAX_DISTANCE):
    """Get the aliases in *command*'s scope closest to the unmatched
    *token*: every alias tied for the smallest edit distance, up to
    *max_distance*, those sharing a longer prefix with *token* first.

    Each visible child option and subcommand contributes its single
    best alias, as does the command itself.
    """
    candidates = []
    symbols = [command] + [c for c in command.children
                           if isinstance(c, (Option, Command)) and not c.hidden]
    key = _rank_key(token)
    for symbol in symbols:
        if symbol.aliases:
            candidates.append(sorted(symbol.aliases, key=key)[0])

    scored = [(levenshtein(token, c), c) for c in unique(candidates)]
    scored = [(d, c) for d, c in scored if d <= max_distance]
    scored.sort(key=lambda dc: (dc[0], -starts_with_length(token, dc[1])))
    if not scored:
        return []
    best = scored[0][0]
    return [c for d, c in scored if d == best]


def _get_word_to_complete(text):
    if not text or text[-1].isspace():
        return ''
    words = split_command_line(text)
    return words[-1] if words else ''


def get_completions(parser, text, position=None):
    """Get the completions for the word at *position* (defaults to the
    end) of the command line *text*, parsed by *parser*.

    When the preceding token is an option expecting a value, the
    option's value completions are offered. Otherwise the aliases of
    the current command's visible options and subcommands are offered,
    along with completions for its positional arguments. Results
    contain the partial word (ignoring case) and are sorted.
    """
    if position is None:
        position = len(text)
    text = text[:position]
    word = _get_word_to_complete(text)
    context_text = text[:len(text) - len(word)] if word else text
    context_result = parser.parse(split_command_line(context_text))

    candidates = None
    tokens = context_result.tokens
    if tokens and tokens[-1].kind is TokenType.OPTION:
        option = tokens[-1].symbol
        if option.argument.arity.max_count != 0:
            candidates = option.argument.get_completions()

    if candidates is None:
        command = context_result.command_result.command
        candidates = []
        for child in command.children + command.get_recursive_options():
            if isinstance(child, (Option, Command)) and not child.hidden:
                candidates.extend(child.aliases)
        for argument in command.arguments:
            if not argument.hidden:
                candidates.extend(argument.get_completions())

    lower_word = word.lower()
    ret = [c for c in unique(candidates) if lower_word in c.lower()]
    return sorted(ret)
