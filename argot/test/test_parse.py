import pytest

from argot import (Parser,
                   RootCommand,
                   Command,
                   Argument,
                   Option,
                   ListParam,
                   UsageError,
                   UnmatchedTokenError,
                   TypoCorrectionAction,
                   TokenType)


def get_build_parser():
    root = RootCommand('prog')
    build = Command('build', doc='build the project')
    build.add('--config', '-c')
    build.add('-v', '--verbose', parse_as=bool)
    build.add(Argument('files', arity='*'))
    root.add(build)
    return Parser(root)


def test_build_scenario():
    prs = get_build_parser()
    res = prs.parse(['build', '--config', 'Release', '-v', 'src/a.cs', 'src/b.cs'])

    assert res.errors == []
    assert res.command_names == ['prog', 'build']
    assert res.command_result.command.name == 'build'
    assert res.root_command_result.subcommand_result is res.command_result
    assert res.get_value('--config') == 'Release'
    assert res.get_value('-c') == 'Release'
    assert res.get_value('--verbose') is True
    assert res.get_value('files') == ['src/a.cs', 'src/b.cs']
    assert res.diagram() == '[ prog [ build [ --config <Release> ] [ -v ] <src/a.cs> <src/b.cs> ] ]'

    # the root token is not part of the result's tokens
    assert [t.value for t in res.tokens] == ['build', '--config', 'Release',
                                              '-v', 'src/a.cs', 'src/b.cs']
    assert res.tokens[0].kind is TokenType.COMMAND
    assert res.action is None
    assert res.check() is res


def test_string_input():
    prs = get_build_parser()
    res = prs.parse('build --config "Release Candidate"')

    assert res.raw_input == 'build --config "Release Candidate"'
    assert res.args == ['build', '--config', 'Release Candidate']
    assert res.get_value('--config') == 'Release Candidate'


def test_script_path_as_root():
    root = RootCommand('prog')
    root.add('--name')
    res = Parser(root).parse(['/usr/bin/prog.py', '--name', 'x'])

    assert res.errors == []
    assert res.unmatched_tokens == []
    assert res.get_value('--name') == 'x'


def test_unmatched_scenario():
    root = RootCommand('prog')
    root.add(Command('build', children=[Option('-v', parse_as=bool)]))
    res = Parser(root).parse(['build', '--unknown'])

    assert res.unmatched_tokens == ['--unknown']
    assert len(res.errors) == 1
    err = res.errors[0]
    assert isinstance(err, UnmatchedTokenError)
    assert err.message == "Unrecognized command or argument '--unknown'."
    assert err.symbol_result is res.command_result
    assert isinstance(res.action, TypoCorrectionAction)

    with pytest.raises(UsageError) as exc_info:
        res.check()
    assert exc_info.value.errors == res.errors
    assert 'Unrecognized' in str(exc_info.value)


def test_unmatched_tolerated():
    root = RootCommand('prog', treat_unmatched_tokens_as_errors=False)
    res = Parser(root, typo_correction=False).parse(['prog', 'extra', 'stuff'])

    assert res.unmatched_tokens == ['extra', 'stuff']
    assert res.errors == []
    assert res.action is None


def test_argument_reassignment():
    root = RootCommand('prog')
    root.add(Argument('sources', arity='+'))
    root.add(Argument('dest'))
    prs = Parser(root)

    res = prs.parse(['prog', 'a', 'b', 'c'])
    assert res.errors == []
    assert res.get_value('sources') == ['a', 'b']
    assert res.get_value('dest') == 'c'

    res = prs.parse(['prog', 'a', 'b'])
    assert res.get_value('sources') == ['a']
    assert res.get_value('dest') == 'b'

    # sources needs its one value, so dest goes without
    res = prs.parse(['prog', 'a'])
    assert res.get_value('sources') == ['a']
    assert [e.message for e in res.errors] == ["Required argument missing for command: 'prog'."]


def test_positional_overflow():
    root = RootCommand('prog')
    root.add(Argument('name'))
    prs = Parser(root, typo_correction=False)

    res = prs.parse(['prog', 'a', 'b'])
    assert res.get_value('name') == 'a'
    assert res.unmatched_tokens == ['b']
    assert len(res.errors) == 1


def test_operands():
    root = RootCommand('prog')
    root.add('--force', parse_as=bool)
    root.add(Argument('name'))
    prs = Parser(root)

    res = prs.parse(['prog', '--', '--force', 'extra'])
    assert res.errors == []
    assert res.get_value('name') == '--force'
    assert res.get_value('--force') is False
    assert res.unparsed_tokens == ['extra']
    assert res.unmatched_tokens == []
    assert [t.kind for t in res.tokens] == [TokenType.END_OF_ARGUMENTS,
                                            TokenType.OPERAND,
                                            TokenType.OPERAND]


def test_repeated_options():
    root = RootCommand('prog')
    root.add('-x', '--exclude', arity='*')
    root.add('-i', '--include', arity='*', allow_multiple_args_per_token=True)
    root.add(Argument('target', arity='?'))
    prs = Parser(root)

    res = prs.parse(['prog', '-x', 'a', '--exclude', 'b', 'c'])
    assert res.errors == []
    assert res.get_value('-x') == ['a', 'b']
    assert res.get_value('target') == 'c'
    opt_res = res.find_result('--exclude')
    assert opt_res.identifier == '-x'
    assert opt_res.identifier_token_count == 2

    res = prs.parse(['prog', '-i', 'a', 'b', 'c'])
    assert res.get_value('--include') == ['a', 'b', 'c']
    assert res.get_value('target') is None


def test_bool_options():
    root = RootCommand('prog')
    root.add('--force', '-f', parse_as=bool)
    root.add(Argument('target', arity='?'))
    prs = Parser(root)

    res = prs.parse(['prog', '--force'])
    assert res.get_value('--force') is True
    assert res.has_option('-f')

    res = prs.parse(['prog', '--force', 'FALSE'])
    assert res.get_value('--force') is False
    assert res.get_value('target') is None

    # non-literals are left for the positional arguments
    res = prs.parse(['prog', '--force', 'file.txt'])
    assert res.get_value('--force') is True
    assert res.get_value('target') == 'file.txt'

    res = prs.parse(['prog'])
    assert res.get_value('--force') is False
    assert not res.has_option('--force')
    assert res.get_result(root.get_child('--force')) is None


def test_list_param():
    root = RootCommand('prog')
    root.add('--tags', parse_as=ListParam())
    root.add('--nums', parse_as=ListParam(int, strip=True))
    res = Parser(root).parse(['prog', '--tags', 'a,b,"c,d"', '--nums', '1, 2,3'])

    assert res.errors == []
    assert res.get_value('--tags') == ['a', 'b', 'c,d']
    assert res.get_value('--nums') == [1, 2, 3]


def test_recursive_options():
    root = RootCommand('prog')
    root.add('--debug', parse_as=bool, recursive=True)
    root.add('--level', parse_as=int, recursive=True)
    build = root.add(Command('build'))
    build.add(Command('docs'))
    prs = Parser(root)

    res = prs.parse(['prog', 'build', 'docs', '--debug', '--level', '3'])
    assert res.errors == []
    assert res.command_names == ['prog', 'build', 'docs']
    assert res.get_value('--debug') is True
    assert res.get_value('--level') == 3
    assert res.find_result('--debug').parent is res.command_result

    res = prs.parse(['prog', 'build', '--level', 'three'])
    assert [e.message for e in res.errors] == [
        "Cannot parse argument 'three' for option '--level' as expected type integer."]


def test_subcommand_scope():
    root = RootCommand('prog')
    root.add('--name')
    build = root.add(Command('build', aliases=['b']))
    build.add('--name')
    prs = Parser(root)

    res = prs.parse(['prog', '--name', 'outer', 'b', '--name', 'inner'])
    assert res.errors == []
    assert res.command_names == ['prog', 'b']
    # lookups by name search the innermost command first
    assert res.get_value('--name') == 'inner'
    assert res.get_value(root.get_child('--name')) == 'outer'


def test_get_value_errors():
    prs = get_build_parser()
    res = prs.parse(['build'])

    with pytest.raises(KeyError):
        res.get_value('--nonexistent')
    with pytest.raises(TypeError):
        res.get_value('build')
    assert res.get_value('--config') is None
    assert res.get_value('--config', 'Debug') == 'Debug'
    assert res.get_value('files') is None


def test_conversion_failure_value():
    root = RootCommand('prog')
    root.add('--count', parse_as=int)
    res = Parser(root).parse(['prog', '--count', 'many'])

    assert len(res.errors) == 1
    assert res.get_value('--count') is None
    assert res.get_value('--count', 0) == 0
    conversion = res.find_result('--count').argument_result.conversion_result
    assert conversion.is_failed
    assert conversion.error_message == res.errors[0].message


def test_parser_config_errors():
    root = RootCommand('prog')
    with pytest.raises(TypeError):
        Parser('prog')
    with pytest.raises(ValueError):
        Parser(root, typo_correction=-1)
    with pytest.raises(ValueError):
        Parser(root, directives=['parse', 'parse'])
    with pytest.raises(TypeError):
        Parser(root, directives=[object()])

    prs = Parser(root, response_files='space', posix_bundling=False, typo_correction=True)
    assert prs.response_files.value == 'space'
    assert prs.posix_bundling is False
    assert prs.typo_correction == 3


def test_parser_reuse():
    prs = get_build_parser()
    first = prs.parse(['build', '-c', 'Debug', 'a.cs'])
    second = prs.parse(['build', 'b.cs'])

    assert first.get_value('--config') == 'Debug'
    assert first.get_value('files') == ['a.cs']
    assert second.get_value('--config') is None
    assert second.get_value('files') == ['b.cs']


def test_tokenize_errors_first(tmpdir):
    prs = get_build_parser()
    missing = str(tmpdir.join('missing.rsp'))
    res = prs.parse(['@' + missing, 'extra'])

    assert [e.message for e in res.errors] == [
        "Response file not found '%s'." % missing,
        "Unrecognized command or argument 'extra'."]
    assert res.tokenize_errors == res.errors[:1]
