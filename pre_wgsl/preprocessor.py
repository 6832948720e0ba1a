import logging
import re

from .conditional import ConditionalStack
from .config import Config
from .errors import MalformedDirective, PreprocessorError, UnclosedConditional, UnknownDirective
from .macros import IDENTIFIER_PAT, MacroTable, Precedence
from .parser import evaluate
from .resolver import IncludeResolver

logger = logging.getLogger(__name__)

# Strings and number literals are matched whole so they are never scanned for macro names
CODE_TOKEN_PAT = re.compile(
    r'(?P<STRING>"(?:\\.|[^"\\])*")'
    r'|(?P<NUMBER>[0-9][A-Za-z0-9_.]*)'
    r'|(?P<IDENT>[A-Za-z_][A-Za-z0-9_]*)',
    re.ASCII,
)

def split_lines(text):
    lines = text.split('\n')
    if lines and lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]

class Preprocessor:
    """Expands #include/#define and resolves #if-family directives in shader text.

    Macros passed through the config become global options and are kept for
    the life of the instance. Every preprocess/preprocess_file call is an
    independent run: in-file #defines, per-call macros, include tracking and
    conditional state start empty.
    """

    def __init__(self, config=None):
        self.config = config or Config()
        self.macros = MacroTable()
        self.macros.define_all(self.config.macros, Precedence.GLOBAL_OPTION)
        self.resolver = IncludeResolver(self.config.include_path)

    def preprocess(self, source, macros=None):
        """Processes in-memory source. `macros` apply to this call only."""
        self.begin_run(macros)
        logger.debug("Preprocessing <input> (%d chars)", len(source))
        output = self.process_text(source, "<input>")
        logger.debug("Preprocessing finished: %d chars out", len(output))
        return output

    def preprocess_file(self, path, macros=None):
        self.begin_run(macros)
        logger.debug("Preprocessing file %s", path)
        output = self.resolver.process_path(path, self.process_text)
        logger.debug("Preprocessing finished: %d chars out", len(output))
        return output

    def begin_run(self, macros):
        self.macros.reset_run()
        self.macros.define_all(macros, Precedence.PER_INVOCATION)
        self.resolver.reset()

    def process_text(self, text, filename):
        # Conditionals never span file boundaries
        cond = ConditionalStack()
        out = []

        for line_no, line in enumerate(split_lines(text), 1):
            stripped = line.strip()

            if stripped.startswith('#'):
                try:
                    self.handle_directive(stripped, cond, out, line_no)
                except PreprocessorError as e:
                    e.locate(filename, line_no)
                    raise
            elif cond.current_active():
                out.append(self.expand_macros(line) + '\n')

        if cond:
            opened_at = cond.top("#if")["line"]
            raise UnclosedConditional(
                f"Unclosed conditional: {len(cond)} block(s) still open at end of input",
                filename, opened_at)

        return ''.join(out)

    def handle_directive(self, stripped, cond, out, line_no):
        parts = stripped[1:].split(None, 1)
        directive = parts[0] if parts else ''
        rest = parts[1].strip() if len(parts) > 1 else ''

        if directive == 'include':
            # Dead branches must not pull in files
            if not cond.current_active():
                return
            out.append(self.resolver.include(self.include_name(rest), self.process_text))

        elif directive == 'define':
            if not cond.current_active():
                return
            name, value = self.split_define(rest)
            if self.macros.define(name, value, Precedence.FILE_DEFINE):
                logger.debug("Defined %s = %r", name, value)

        elif directive == 'ifdef':
            name = self.require_name(directive, rest)
            cond.push(lambda: self.macros.defined(name), line_no)

        elif directive == 'ifndef':
            name = self.require_name(directive, rest)
            cond.push(lambda: not self.macros.defined(name), line_no)

        elif directive == 'if':
            cond.push(lambda: evaluate(rest, self.macros) != 0, line_no)

        elif directive == 'elif':
            cond.elif_(lambda: evaluate(rest, self.macros) != 0)

        elif directive == 'else':
            cond.else_()

        elif directive == 'endif':
            cond.endif()

        else:
            raise UnknownDirective(f"Unknown directive: #{directive}")

    def include_name(self, rest):
        if not rest:
            raise MalformedDirective("#include requires a filename")
        if rest.startswith('"'):
            end = rest.find('"', 1)
            if end == -1:
                raise MalformedDirective(f"Unterminated filename in #include {rest}")
            if end == 1:
                raise MalformedDirective("#include requires a filename")
            return rest[1:end]
        return rest.split()[0]

    def split_define(self, rest):
        parts = rest.split(None, 1)
        if not parts:
            raise MalformedDirective("#define requires a name")
        name = parts[0]
        if not IDENTIFIER_PAT.match(name):
            raise MalformedDirective(f"Invalid macro name '{name}' in #define")
        value = parts[1].strip() if len(parts) > 1 else ''
        return name, value

    def require_name(self, directive, rest):
        if not rest:
            raise MalformedDirective(f"#{directive} requires a name")
        return rest.split()[0]

    def expand_macros(self, line):
        """Single-pass substitution of macro names found in a code line."""
        def substitute(mo):
            word = mo.group()
            if mo.lastgroup != 'IDENT':
                return word
            value = self.macros.lookup(word)
            return word if value is None else value

        return CODE_TOKEN_PAT.sub(substitute, line)

def process(source, config=None, macros=None):
    return Preprocessor(config).preprocess(source, macros)

def process_file(path, config=None, macros=None):
    return Preprocessor(config).preprocess_file(path, macros)
