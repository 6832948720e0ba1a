import re

class Token:
    def __init__(self, type, value, column):
        self.type = type
        self.value = value
        self.column = column

    def __repr__(self):
        return f"Token({self.type}, {repr(self.value)}, Col:{self.column})"

class ExpressionLexer:
    """Tokenizes the expression of an #if/#elif directive.

    Produces NUMBER, IDENT, OP, LPAREN and RPAREN tokens and always finishes
    with a single END token. A character that belongs to no token class ends
    the stream early instead of raising.
    """

    def __init__(self, text):
        self.text = text

        # Regex patterns
        self.token_specs = [
            ('NUMBER', r'[0-9]+'),
            ('IDENT', r'[A-Za-z_][A-Za-z0-9_]*'),
            ('OP', r'==|!=|<=|>=|&&|\|\||<<|>>|[+\-*/%<>!]'), # Two-char operators first
            ('LPAREN', r'\('),
            ('RPAREN', r'\)'),
            ('SKIP', r'\s+'),
            ('MISMATCH', r'.'),
        ]

        # Compile regex
        self.master_pat = re.compile('|'.join('(?P<%s>%s)' % pair for pair in self.token_specs), re.ASCII | re.DOTALL)

    def tokenize(self):
        for mo in self.master_pat.finditer(self.text):
            kind = mo.lastgroup
            value = mo.group()
            column = mo.start() + 1

            if kind == 'SKIP':
                continue
            elif kind == 'MISMATCH':
                # Unrecognized character terminates the expression
                yield Token('END', '', column)
                return

            yield Token(kind, value, column)

        yield Token('END', '', len(self.text) + 1)
