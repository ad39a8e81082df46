import os
import sys

from boltons.iterutils import unique


OPTION_PREFIXES = ('--', '-', '/')

FRIENDLY_TYPE_NAMES = {int: 'integer',
                       float: 'decimal',
                       bool: 'boolean',
                       str: 'string'}


def validate_alias(alias, kind='option'):
    """Validate a raw alias as given to an Option or Command
    constructor. Aliases are kept verbatim (prefix included), so the
    only requirements are that they be non-empty strings without
    whitespace. Returns the alias.
    """
    if not alias or not isinstance(alias, str):
        raise ValueError('expected non-zero length string for %s alias, not: %r'
                         % (kind, alias))
    if any(c.isspace() for c in alias):
        raise ValueError('%s alias cannot contain whitespace: %r' % (kind, alias))
    return alias


def split_prefix(alias):
    """Split an option alias into its prefix and the remainder, e.g.,
    ``'--verbose'`` -> ``('--', 'verbose')``. Strings without one of
    the recognized prefixes (``--``, ``-``, ``/``) have a prefix of None.
    """
    for prefix in OPTION_PREFIXES:
        if alias.startswith(prefix):
            return prefix, alias[len(prefix):]
    return None, alias


def remove_prefix(alias):
    return split_prefix(alias)[1]


def get_default_root_name(argv=None):
    "The executable name, without directory or extension"
    argv = sys.argv if argv is None else argv
    try:
        exe_path = argv[0]
    except IndexError:
        return 'command'
    name = os.path.splitext(os.path.basename(exe_path))[0]
    return name or 'command'


def get_type_desc(parse_as):
    "Kind of a hacky way to improve message readability around argument types"
    if not callable(parse_as):
        raise TypeError('expected parse_as to be callable, not %r' % parse_as)
    try:
        return 'as', FRIENDLY_TYPE_NAMES[parse_as]
    except (KeyError, TypeError):
        pass
    display_name = getattr(parse_as, 'display_name', None)
    if display_name:
        return 'as', display_name
    try:
        # return the type name if it looks like a type
        return 'as', parse_as.__name__
    except AttributeError:
        pass
    # if all else fails
    return 'with', repr(parse_as)


def format_nonexp_repr(obj, req_names=None, opt_names=None, opt_key=None):
    """Format a non-expression-style repr

    Some object reprs look like object instantiation, e.g., App(r=[], mw=[]).

    This makes sense for smaller, lower-level objects whose state
    roundtrips. But a lot of objects contain values that don't
    roundtrip, like types and functions.

    For those objects, there is the non-expression style repr, which
    mimic's Python's default style to make a repr like this:

    <Option aliases=['--count', '-c'] parse_as=<class 'int'>>
    """
    cn = obj.__class__.__name__
    req_names = req_names or []
    opt_names = opt_names or []
    all_names = unique(req_names + opt_names)

    if opt_key is None:
        opt_key = lambda v: v is None
    assert callable(opt_key)

    items = [(name, getattr(obj, name, None)) for name in all_names]
    labels = ['%s=%r' % (name, val) for name, val in items
              if not (name in opt_names and opt_key(val))]
    if not labels:
        labels = ['id=%s' % id(obj)]
    ret = '<%s %s>' % (cn, ' '.join(labels))
    return ret
