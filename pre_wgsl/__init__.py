from .config import Config
from .errors import (
    ConfigError,
    DanglingElifOrElse,
    FileNotFound,
    MalformedDirective,
    MalformedExpression,
    PreprocessorError,
    RecursiveInclude,
    UnclosedConditional,
    UnknownDirective,
)
from .macros import MacroTable, Precedence
from .preprocessor import Preprocessor, process, process_file

__version__ = "0.1.0"
