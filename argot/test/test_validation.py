import pytest

from argot import (Parser,
                   RootCommand,
                   Command,
                   Argument,
                   ArgumentConversionResult,
                   ArityError,
                   ConversionError,
                   RequiredMissing,
                   RequiredCommandMissing,
                   ValidationError,
                   ChoicesParam)
from argot.validators import only_from, existing_file, legal_file_name


def _messages(res):
    return [e.message for e in res.errors]


def test_required_missing_comes_first():
    root = RootCommand('prog')
    root.add('--count', parse_as=int)
    root.add('--name', required=True)
    res = Parser(root).parse(['prog', '--count', 'x'])

    assert _messages(res) == [
        "Option '--name' is required.",
        "Cannot parse argument 'x' for option '--count' as expected type integer."]
    assert isinstance(res.errors[0], RequiredMissing)
    assert isinstance(res.errors[1], ConversionError)
    # the implicit result stands in for the missing option
    assert res.find_result('--name').implicit
    assert not res.has_option('--name')


def test_forgot_argument_hint():
    root = RootCommand('prog')
    root.add('--count', parse_as=int)
    res = Parser(root).parse(['prog', '--count', '-x'])

    assert _messages(res) == [
        "Cannot parse argument '-x' for option '--count' as expected type integer."
        " (Did you forget to pass an argument?)"]


def test_choices_type_label():
    root = RootCommand('prog')
    root.add('--mode', parse_as=ChoicesParam(['fast', 'slow']))
    res = Parser(root).parse(['prog', '--mode', 'medium'])

    assert _messages(res) == [
        "Cannot parse argument 'medium' for option '--mode' as expected type one of fast, slow."]


def test_required_subcommand():
    root = RootCommand('prog', subcommand_required=True)
    root.add(Command('build'))
    prs = Parser(root)

    res = prs.parse(['prog'])
    assert _messages(res) == ['Required command was not provided.']
    assert isinstance(res.errors[0], RequiredCommandMissing)

    assert prs.parse(['prog', 'build']).errors == []


def test_default_materialization():
    root = RootCommand('prog')
    root.add('--verbosity', default='normal')
    prs = Parser(root)

    res = prs.parse(['prog'])
    assert res.errors == []
    assert res.get_value('--verbosity') == 'normal'
    assert not res.has_option('--verbosity')
    assert res.diagram() == '[ prog *[ --verbosity <normal> ] ]'

    res = prs.parse(['prog', '--verbosity', 'quiet'])
    assert res.get_value('--verbosity') == 'quiet'
    assert res.diagram() == '[ prog [ --verbosity <quiet> ] ]'

    # passed without a value, the default does not apply
    res = prs.parse(['prog', '--verbosity'])
    assert _messages(res) == ["Required argument missing for option: '--verbosity'."]


def test_default_factory():
    calls = []

    def _get_name():
        calls.append(1)
        return 'generated'

    def _get_target(arg_result):
        return arg_result.argument.name.upper()

    root = RootCommand('prog')
    root.add('--name', default_factory=_get_name)
    root.add(Argument('target', default_factory=_get_target))
    res = Parser(root).parse(['prog'])

    assert res.errors == []
    assert res.get_value('--name') == 'generated'
    assert res.get_value('--name') == 'generated'
    assert res.get_value('target') == 'TARGET'
    assert calls == [1]

    with pytest.raises(ValueError):
        Argument('both', default='x', default_factory=_get_name)


def test_default_factory_error_message():
    def _get_port(arg_result):
        arg_result.error_message = 'No port configured.'

    root = RootCommand('prog')
    root.add('--port', parse_as=int, default_factory=_get_port)
    res = Parser(root).parse(['prog'])

    assert _messages(res) == ['No port configured.']
    assert res.get_value('--port') is None


def test_custom_convert():
    def _double(arg_result):
        return int(arg_result.tokens[0].value) * 2

    def _always_fail(arg_result):
        raise ValueError()

    def _tri_state(arg_result):
        return ArgumentConversionResult.no_argument()

    root = RootCommand('prog')
    root.add('--num', convert=_double)
    root.add('--bad', convert=_always_fail)
    root.add('--none', convert=_tri_state)
    prs = Parser(root)

    res = prs.parse(['prog', '--num', '21', '--none', 'x'])
    assert res.errors == []
    assert res.get_value('--num') == 42
    assert res.get_value('--none', 'dflt') == 'dflt'

    res = prs.parse(['prog', '--num', 'twenty'])
    assert len(res.errors) == 1
    assert 'twenty' in res.errors[0].message

    res = prs.parse(['prog', '--bad', 'x'])
    assert _messages(res) == ['Invalid: --bad x']


def test_only_take():
    def _first_only(arg_result):
        arg_result.only_take(1)
        return arg_result.tokens[0].value

    root = RootCommand('prog')
    root.add(Argument('first', arity='*', convert=_first_only))
    root.add(Argument('rest', arity='*'))
    res = Parser(root).parse(['prog', 'a', 'b', 'c'])

    assert res.errors == []
    assert res.get_value('first') == 'a'
    assert res.get_value('rest') == ['b', 'c']


def test_only_take_last_argument():
    def _first_only(arg_result):
        arg_result.only_take(1)
        return arg_result.tokens[0].value

    root = RootCommand('prog')
    root.add(Argument('first', arity='*', convert=_first_only))
    res = Parser(root).parse(['prog', 'a', 'b'])

    assert res.get_value('first') == 'a'
    assert _messages(res) == ["Unrecognized command or argument 'b'."]


def test_only_take_option():
    def _first_only(arg_result):
        arg_result.only_take(1)
        return arg_result.tokens[0].value

    root = RootCommand('prog')
    root.add('--x', arity='*', allow_multiple_args_per_token=True, convert=_first_only)
    res = Parser(root).parse(['prog', '--x', 'a', 'b'])

    assert res.get_value('--x') == 'a'
    assert res.unmatched_tokens == ['b']
    assert _messages(res) == ["Unrecognized command or argument 'b'."]


def test_default_outside_command_path():
    calls = []

    def _get_target(arg_result):
        calls.append(arg_result)
        return arg_result.argument.name.upper()

    root = RootCommand('prog')
    build = root.add(Command('build'))
    target = build.add(Argument('target', default_factory=_get_target))
    root.add(Command('clean'))
    res = Parser(root).parse(['prog', 'clean'])

    assert res.errors == []
    assert res.get_value(target) == 'TARGET'
    assert res.get_value(target) == 'TARGET'
    assert len(calls) == 1
    assert calls[0].argument is target


def test_validators():
    def _check_port(arg_result):
        if arg_result.get_value() > 65535:
            return 'Port out of range.'

    def _never_called(arg_result):
        raise AssertionError('later validators are skipped')

    root = RootCommand('prog')
    root.add('--port', parse_as=int, arg_validators=[_check_port, _never_called])
    root.add(Argument('mode', validators=[only_from('fast', 'slow')]))
    prs = Parser(root)

    res = prs.parse(['prog', '--port', '80000', 'fast'])
    assert _messages(res) == ['Port out of range.']
    assert isinstance(res.errors[0], ValidationError)
    assert res.errors[0].symbol_result is res.find_result('--port').argument_result

    res = prs.parse(['prog', 'medium'])
    assert _messages(res) == ["Argument 'medium' not recognized. Must be one of:\n\t'fast'\n\t'slow'"]


def test_option_and_command_validators():
    def _exclusive(cmd_result):
        if len(cmd_result.option_results) > 1:
            return 'Options --a and --b cannot be combined.'

    def _not_empty(opt_result):
        if not opt_result.get_result(opt_result.option.argument).get_value():
            return 'Option --a cannot be empty.'

    root = RootCommand('prog', validators=[_exclusive])
    root.add('--a', validators=[_not_empty])
    root.add('--b')
    prs = Parser(root)

    assert _messages(prs.parse(['prog', '--a', 'x', '--b', 'y'])) == [
        'Options --a and --b cannot be combined.']
    assert _messages(prs.parse(['prog', '--a', ''])) == ['Option --a cannot be empty.']
    assert prs.parse(['prog', '--b', 'y']).errors == []


def test_path_validators(tmpdir):
    existing = tmpdir.join('exists.txt')
    existing.write('')
    missing = str(tmpdir.join('missing.txt'))

    root = RootCommand('prog')
    root.add('--input', arg_validators=[existing_file])
    root.add('--output-name', arg_validators=[legal_file_name])
    prs = Parser(root)

    assert prs.parse(['prog', '--input', str(existing)]).errors == []
    assert _messages(prs.parse(['prog', '--input', missing])) == [
        "File does not exist: '%s'." % missing]
    assert _messages(prs.parse(['prog', '--output-name', 'a/b'])) == [
        "Character not allowed in a file name: '/'."]


def test_ancestor_checks():
    root = RootCommand('prog')
    root.add('--name', required=True)
    root.add(Argument('target'))
    build = root.add(Command('build'))
    build.add(Argument('files', arity='+'))
    prs = Parser(root)

    # the root's required option is still checked, its positionals are not
    res = prs.parse(['prog', 'build', 'a.cs'])
    assert _messages(res) == ["Option '--name' is required."]

    res = prs.parse(['prog', '--name', 'x', 'build'])
    assert _messages(res) == ["Required argument missing for command: 'build'."]

    res = prs.parse(['prog', '--name', 'x'])
    assert _messages(res) == ["Required argument missing for command: 'prog'."]


def test_option_arity_bounds():
    root = RootCommand('prog')
    root.add('-x', arity=(2, 3))
    root.add('-s', arity=1)
    prs = Parser(root)

    def _errors(count, alias='-x'):
        args = ['prog']
        for i in range(count):
            args.extend([alias, 'v%s' % i])
        return prs.parse(args).errors

    errors = _errors(1)
    assert [e.message for e in errors] == ["Required argument missing for option: '-x'."]
    assert _errors(2) == []
    assert _errors(3) == []
    errors = _errors(4)
    assert [e.message for e in errors] == [
        "Option '-x' expects no more than 3 arguments, but 4 were provided."]
    assert isinstance(errors[0], ArityError)

    # going past the max never becomes valid again
    for count in (4, 5, 6):
        assert _errors(count)

    errors = _errors(2, '-s')
    assert [e.message for e in errors] == [
        "Option '-s' expects a single argument but 2 were provided."]


def test_missing_required_argument():
    root = RootCommand('prog')
    root.add(Argument('target'))
    res = Parser(root).parse(['prog'])

    assert _messages(res) == ["Required argument missing for command: 'prog'."]
    assert res.get_value('target') is None
    assert res.diagram() == '[ prog ! ]'

    root.add(Argument('dest', arity='?'))
    res = Parser(root).parse(['prog'])
    assert res.diagram() == '[ prog ![ target  ] ]'
