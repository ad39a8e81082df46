"""Post-walk validation and conversion.

The innermost command gets the complete set of checks. Its ancestors
only get the checks which cannot depend on which subcommand was
chosen: required options, defaults, and arity and conversion of
values the user actually passed. Nothing here raises for bad input,
every problem becomes a ParseError on the result tree.
"""

import logging

from argot.errors import (ArityError,
                          ConversionError,
                          ValidationError,
                          RequiredMissing,
                          RequiredCommandMissing,
                          UnmatchedTokenError)
from argot.results import (OptionResult,
                           ArgumentResult,
                           ArgumentConversionResult)
from argot.symbols import MISSING
from argot.utils import get_type_desc


log = logging.getLogger('argot.validation')


def _uses_default(arg_result):
    if arg_result.tokens or not arg_result.argument.has_default:
        return False
    parent = arg_result.parent
    # a passed option with no value is not the same as an absent option
    return not isinstance(parent, OptionResult) or parent.implicit


def _convert_token(arg_result, value):
    argument = arg_result.argument
    try:
        return True, argument.parse_as(value)
    except (ValueError, TypeError):
        type_label = get_type_desc(argument.value_type)[1]
        return False, ConversionError.from_parse(arg_result, value, type_label)


def _invalid_message(arg_result):
    owner = arg_result.parent if isinstance(arg_result.parent, OptionResult) else arg_result
    values = ' '.join([t.value for t in arg_result.tokens])
    return ('Invalid: %s %s' % (owner.identifier, values)).strip()


def convert_argument_result(arg_result):
    """Convert *arg_result*'s tokens into its value, returning an
    ArgumentConversionResult. Conversion happens once per result, the
    outcome is cached on ``arg_result.conversion_result``.
    """
    if arg_result.conversion_result is not None:
        return arg_result.conversion_result
    ret = _convert(arg_result)
    arg_result.conversion_result = ret
    return ret


def _convert(arg_result):
    argument = arg_result.argument
    tokens = arg_result.tokens
    parent = arg_result.parent

    if _uses_default(arg_result):
        value = argument.get_default(arg_result)
        if arg_result.error_message:
            return ArgumentConversionResult.failure(
                ConversionError(arg_result.error_message, arg_result))
        if value is MISSING:
            return ArgumentConversionResult.no_argument()
        return ArgumentConversionResult.success(value)

    if argument.convert is not None:
        try:
            value = argument.convert(arg_result)
        except (ValueError, TypeError) as e:
            msg = arg_result.error_message or str(e) or _invalid_message(arg_result)
            return ArgumentConversionResult.failure(ConversionError(msg, arg_result))
        if isinstance(value, ArgumentConversionResult):
            return value
        if arg_result.error_message:
            return ArgumentConversionResult.failure(
                ConversionError(arg_result.error_message, arg_result))
        return ArgumentConversionResult.success(value)

    max_count = argument.arity.max_count
    if not tokens and argument.is_bool and isinstance(parent, OptionResult):
        return ArgumentConversionResult.success(True)
    if max_count == 0:
        return ArgumentConversionResult.success(True)
    if max_count == 1:
        if not tokens:
            return ArgumentConversionResult.no_argument()
        ok, value = _convert_token(arg_result, tokens[0].value)
        if not ok:
            return ArgumentConversionResult.failure(value)
        return ArgumentConversionResult.success(value)

    values = []
    for token in tokens:
        ok, value = _convert_token(arg_result, token.value)
        if not ok:
            return ArgumentConversionResult.failure(value)
        values.append(value)
    return ArgumentConversionResult.success(values)


def _run_validators(validators, symbol_result):
    "Returns a ValidationError for the first failing validator, or None"
    for validator in validators:
        msg = validator(symbol_result)
        if msg:
            return ValidationError(msg, symbol_result)
    return None


def validate_results(tree, command_results, unmatched_tokens):
    """Validate and convert the results in *tree*, innermost command
    first, adding any diagnostics to the tree.
    """
    _TreeValidator(tree, command_results, unmatched_tokens).run()


class _TreeValidator(object):
    def __init__(self, tree, command_results, unmatched_tokens):
        self.tree = tree
        self.command_results = command_results
        self.unmatched_tokens = unmatched_tokens

    def add_error(self, error):
        return self.tree.add_error(error, priority=isinstance(error, RequiredMissing))

    def run(self):
        innermost = self.command_results[-1]
        log.debug('validating innermost command %r', innermost.identifier)
        self.validate_command(innermost, complete=True)
        for command_result in reversed(self.command_results[:-1]):
            log.debug('validating ancestor command %r', command_result.identifier)
            self.validate_command(command_result, complete=False)

        if innermost.command.treat_unmatched_tokens_as_errors:
            for token in self.unmatched_tokens:
                self.add_error(UnmatchedTokenError.from_parse(innermost, token))

    def validate_command(self, command_result, complete):
        command = command_result.command
        if complete:
            if command.subcommand_required and command.subcommands:
                self.add_error(RequiredCommandMissing.from_parse(command_result))
            error = _run_validators(command.validators, command_result)
            if error is not None:
                self.add_error(error)

        for option in command.options:
            result = self.tree.get(option)
            if option.recursive and result is not None and result.parent is not command_result:
                # passed within a subcommand, validated at that level
                continue
            self.validate_option(command_result, option, complete or option.recursive)

        for option in command.get_recursive_options():
            result = self.tree.get(option)
            if result is not None and result.parent is command_result:
                self.validate_option(command_result, option, True)

        arguments = command.arguments
        for i, argument in enumerate(arguments):
            next_argument = arguments[i + 1] if i + 1 < len(arguments) else None
            self.validate_argument(command_result, argument, next_argument, complete)

    def validate_option(self, command_result, option, complete):
        result = self.tree.get(option)
        if result is None:
            if not (option.argument.has_default or option.required):
                return
            result = OptionResult(option, None, parent=command_result, tree=self.tree)
            command_result.add_child(result)
            self.tree.add(option, result)
            self.tree.add(option.argument, result.argument_result)
            if not option.argument.has_default:
                error = RequiredMissing.for_option(result)
                result.argument_result.conversion_result = ArgumentConversionResult.failure(error)
                self.add_error(error)
                return
        arg_result = result.argument_result

        if not result.implicit:
            arity = option.argument.arity
            count = len(result.tokens)
            if not arity.accepts(count):
                error = ArityError.from_parse(result, arity, count)
                arg_result.conversion_result = ArgumentConversionResult.failure(error)
                self.add_error(error)
                return

        conversion = convert_argument_result(arg_result)
        if arg_result.passed_on_tokens:
            # options have no next argument to pass leftovers to
            self.unmatched_tokens.extend(arg_result.passed_on_tokens)
            arg_result.passed_on_tokens = []
        if conversion.is_failed:
            self.add_error(conversion.error)
            return

        if not complete:
            return
        error = _run_validators(option.argument.validators, arg_result)
        if error is None:
            error = _run_validators(option.validators, result)
        if error is not None:
            self.add_error(error)

    def validate_argument(self, command_result, argument, next_argument, complete):
        result = self.tree.get(argument)
        if result is None:
            if argument.has_default:
                result = ArgumentResult(argument, parent=command_result, tree=self.tree)
                command_result.add_child(result)
                self.tree.add(argument, result)
            elif complete and argument.arity.min_count > 0:
                result = ArgumentResult(argument, parent=command_result, tree=self.tree)
                command_result.add_child(result)
                self.tree.add(argument, result)
                error = RequiredMissing.for_argument(result)
                result.conversion_result = ArgumentConversionResult.failure(error)
                self.add_error(error)
                return
            else:
                return

        if result.tokens:
            arity = argument.arity
            count = len(result.tokens)
            if not arity.accepts(count):
                error = ArityError.from_parse(result, arity, count)
                result.conversion_result = ArgumentConversionResult.failure(error)
                self.add_error(error)
                return

        conversion = convert_argument_result(result)
        if result.passed_on_tokens:
            self._pass_on_tokens(command_result, result, next_argument)
        if conversion.is_failed:
            self.add_error(conversion.error)
            return

        if complete:
            error = _run_validators(argument.validators, result)
            if error is not None:
                self.add_error(error)

    def _pass_on_tokens(self, command_result, result, next_argument):
        tokens, result.passed_on_tokens = result.passed_on_tokens, []
        if next_argument is None:
            self.unmatched_tokens.extend(tokens)
            return
        next_result = self.tree.get(next_argument)
        if next_result is None:
            next_result = ArgumentResult(next_argument, parent=command_result, tree=self.tree)
            command_result.add_child(next_result)
            self.tree.add(next_argument, next_result)
        for token in tokens:
            token.symbol = next_argument
        next_result.tokens[:0] = tokens

