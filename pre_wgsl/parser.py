import operator
import re

from .errors import MalformedExpression
from .lexer import ExpressionLexer, Token

INTEGER_PAT = re.compile(r'[+-]?[0-9]+\Z', re.ASCII)

def wrap_int(value):
    """Wraps to a 32-bit two's-complement integer."""
    value &= 0xFFFFFFFF
    if value & 0x80000000:
        value -= 0x100000000
    return value

def _div(lhs, rhs):
    if rhs == 0:
        return 0
    # Truncate toward zero
    quotient = abs(lhs) // abs(rhs)
    return -quotient if (lhs < 0) != (rhs < 0) else quotient

def _mod(lhs, rhs):
    if rhs == 0:
        return 0
    return lhs - rhs * _div(lhs, rhs)

def _shl(lhs, rhs):
    if rhs < 0 or rhs >= 32:
        return 0
    return lhs << rhs

def _shr(lhs, rhs):
    if rhs < 0:
        return 0
    return lhs >> min(rhs, 63)

def _bool(fn):
    return lambda lhs, rhs: int(fn(lhs, rhs))

LOGICAL_OR = {'||': lambda lhs, rhs: int(bool(lhs) or bool(rhs))}
LOGICAL_AND = {'&&': lambda lhs, rhs: int(bool(lhs) and bool(rhs))}
EQUALITY = {'==': _bool(operator.eq), '!=': _bool(operator.ne)}
RELATIONAL = {
    '<': _bool(operator.lt),
    '>': _bool(operator.gt),
    '<=': _bool(operator.le),
    '>=': _bool(operator.ge),
}
SHIFT = {'<<': _shl, '>>': _shr}
ADDITIVE = {'+': operator.add, '-': operator.sub}
MULTIPLICATIVE = {'*': operator.mul, '/': _div, '%': _mod}

class ExpressionParser:
    """Recursive-descent parser that evaluates while it parses.

    Each precedence level is one method, lowest first: || && == != < > <= >=
    << >> + - * / % and finally the unary operators. Binary operators are
    left-associative, and both operands of && and || are always evaluated.
    """

    def __init__(self, text, macros):
        self.text = text
        self.macros = macros
        self.tokens = list(ExpressionLexer(text).tokenize())
        self.pos = 0
        self.current_token = None
        self.advance()

    def advance(self):
        if self.pos < len(self.tokens):
            self.current_token = self.tokens[self.pos]
            self.pos += 1
        else:
            self.current_token = Token('END', '', len(self.text) + 1)

    def match(self, type_name, value=None):
        if self.current_token.type != type_name:
            return False
        if value is not None and self.current_token.value != value:
            return False
        return True

    def consume(self, type_name, value=None):
        if not self.match(type_name, value):
            return False
        self.advance()
        return True

    def error(self, message):
        return MalformedExpression(f"{message} in expression '{self.text}'")

    def parse(self):
        value = self.parse_logical_or()
        if self.match('RPAREN'):
            raise self.error(f"Unbalanced ')' at column {self.current_token.column}")
        if not self.match('END'):
            raise self.error(f"Unexpected '{self.current_token.value}' at column {self.current_token.column}")
        return value

    def parse_binary(self, operators, operand):
        value = operand()
        while self.current_token.type == 'OP' and self.current_token.value in operators:
            fn = operators[self.current_token.value]
            self.advance()
            rhs = operand()
            value = wrap_int(fn(value, rhs))
        return value

    def parse_logical_or(self):
        return self.parse_binary(LOGICAL_OR, self.parse_logical_and)

    def parse_logical_and(self):
        return self.parse_binary(LOGICAL_AND, self.parse_equality)

    def parse_equality(self):
        return self.parse_binary(EQUALITY, self.parse_relational)

    def parse_relational(self):
        return self.parse_binary(RELATIONAL, self.parse_shift)

    def parse_shift(self):
        return self.parse_binary(SHIFT, self.parse_additive)

    def parse_additive(self):
        return self.parse_binary(ADDITIVE, self.parse_multiplicative)

    def parse_multiplicative(self):
        return self.parse_binary(MULTIPLICATIVE, self.parse_unary)

    def parse_unary(self):
        if self.consume('OP', '!'):
            return int(not self.parse_unary())
        if self.consume('OP', '-'):
            return wrap_int(-self.parse_unary())
        if self.consume('OP', '+'):
            return self.parse_unary()
        return self.parse_primary()

    def parse_primary(self):
        if self.consume('LPAREN'):
            value = self.parse_logical_or()
            if not self.consume('RPAREN'):
                raise self.error("Missing ')'")
            return value

        if self.match('NUMBER'):
            value = wrap_int(int(self.current_token.value, 10))
            self.advance()
            return value

        if self.match('IDENT', 'defined'):
            self.advance()
            if self.consume('LPAREN'):
                name = self.expect_identifier("defined()")
                if not self.consume('RPAREN'):
                    raise self.error("Missing ')' after defined(" + name)
            else:
                name = self.expect_identifier("defined NAME")
            return int(self.macros.defined(name))

        if self.match('IDENT'):
            name = self.current_token.value
            self.advance()
            return self.macro_value(name)

        # Anything else reads as 0 without consuming the token
        return 0

    def expect_identifier(self, construct):
        if not self.match('IDENT'):
            raise self.error(f"Expected identifier in {construct}")
        name = self.current_token.value
        self.advance()
        return name

    def macro_value(self, name):
        value = self.macros.lookup(name)
        if value is None:
            return 0
        if value == '':
            return 1

        value = value.strip()
        if not INTEGER_PAT.match(value):
            raise self.error(f"Macro '{name}' has non-integer value '{value}'")
        return wrap_int(int(value, 10))

def evaluate(text, macros):
    """Evaluates one #if/#elif expression to a signed integer."""
    return ExpressionParser(text, macros).parse()
