from argot.symbols import (MISSING,
                           Arity,
                           Symbol,
                           Argument,
                           Option,
                           Command,
                           RootCommand,
                           Directive)

from argot.errors import (ArgotException,
                          SymbolDefinitionError,
                          DuplicateAlias,
                          UsageError,
                          ParseError,
                          TokenizationError,
                          UnmatchedTokenError,
                          RequiredCommandMissing,
                          RequiredMissing,
                          ArityError,
                          ConversionError,
                          ValidationError)

from argot.tokens import Token, TokenType, Location
from argot.tokenizer import (Tokenizer,
                             TokenizeResult,
                             ResponseFileHandling,
                             tokenize,
                             split_command_line)
from argot.results import (SymbolResult,
                           CommandResult,
                           OptionResult,
                           ArgumentResult,
                           DirectiveResult,
                           ArgumentConversionResult,
                           SymbolResultTree)
from argot.params import ListParam, ChoicesParam, parse_bool
from argot.parser import Parser, ParseOperation
from argot.parse_result import ParseResult
from argot.actions import (ParseDiagramAction,
                           SuggestDirectiveAction,
                           TypoCorrectionAction,
                           diagram,
                           apply_env_directives)
from argot.suggest import levenshtein, get_typo_suggestions, get_completions
