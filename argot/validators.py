"""Ready-made validators for Arguments (and, through ``arg_validators``,
Options). A validator takes an ArgumentResult and returns an error
message, or None if the values are acceptable.

    Option('--input', arg_validators=[existing_file])
"""

import os


if os.name == 'nt':
    INVALID_PATH_CHARS = '"<>|\0' + ''.join([chr(i) for i in range(1, 32)])
    INVALID_FILE_NAME_CHARS = INVALID_PATH_CHARS + ':*?\\/'
else:
    INVALID_PATH_CHARS = '\0'
    INVALID_FILE_NAME_CHARS = '\0/'


def _values(argument_result):
    return [t.value for t in argument_result.tokens]


def existing_file(argument_result):
    for value in _values(argument_result):
        if not os.path.exists(value):
            return "File does not exist: '%s'." % value
    return None


def existing_directory(argument_result):
    for value in _values(argument_result):
        if not os.path.isdir(value):
            return "Directory does not exist: '%s'." % value
    return None


def existing_path(argument_result):
    "Accepts either files or directories, as long as they exist"
    for value in _values(argument_result):
        if not os.path.exists(value):
            return "File or directory does not exist: '%s'." % value
    return None


def _first_invalid_char(value, invalid_chars):
    for c in value:
        if c in invalid_chars:
            return c
    return None


def legal_path(argument_result):
    for value in _values(argument_result):
        c = _first_invalid_char(value, INVALID_PATH_CHARS)
        if c is not None:
            return "Character not allowed in a path: '%s'." % c
    return None


def legal_file_name(argument_result):
    for value in _values(argument_result):
        c = _first_invalid_char(value, INVALID_FILE_NAME_CHARS)
        if c is not None:
            return "Character not allowed in a file name: '%s'." % c
    return None


def only_from(*values):
    """Build a validator accepting only the given string *values*.

    Unlike :class:`~argot.params.ChoicesParam`, this checks the raw
    tokens, before conversion, and does not provide completions. Pass
    the same values as the Argument's *completions* for those.
    """
    if not values:
        raise ValueError('expected at least one accepted value')
    values = [str(v) for v in values]
    allowed = '\n\t' + '\n\t'.join(["'%s'" % v for v in values])

    def _only_from(argument_result):
        for token in argument_result.tokens:
            if token.value not in values:
                return "Argument '%s' not recognized. Must be one of:%s" % (token.value, allowed)
        return None

    _only_from.values = values
    return _only_from
