"""
Pratt Parser for Monkey

Structure:
- Lexer: token stream pulled one token at a time
- Parser: recursive descent for statements, Pratt parsing for expressions
- AST: node classes from tree.py

Errors are accumulated instead of raised, so one pass reports every problem
it can find and still returns a (partial) Program.
"""

from enum import IntEnum
from typing import Callable, Dict, List, Optional

from .lexer_rd import Lexer
from .token_types import TT, Tok
from .tree import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Optional[Expression]], Optional[Expression]]

INT64_MAX = 2 ** 63 - 1

# ============================================================================
# Precedence
# ============================================================================

class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # ==, !=
    LESSGREATER = 3  # <, >
    SUM = 4          # +, -
    PRODUCT = 5      # *, /
    PREFIX = 6       # -x, !x
    CALL = 7         # f(x)
    INDEX = 8        # a[i]


PRECEDENCES: Dict[TT, Precedence] = {
    TT.EQ: Precedence.EQUALS,
    TT.NOT_EQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.SLASH: Precedence.PRODUCT,
    TT.ASTERISK: Precedence.PRODUCT,
    TT.LPAREN: Precedence.CALL,
    TT.LBRACKET: Precedence.INDEX,
}

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Raised by parse_source() when the parser accumulated errors"""
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class Parser:
    """
    Pratt parser for Monkey.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. comparison (<, >)
    3. sum (+, -)
    4. product (*, /)
    5. prefix (-, !)
    6. call (f(...))
    7. index (a[...])
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: List[str] = []

        self.cur_token = Tok(TT.EOF, "")
        self.peek_token = Tok(TT.EOF, "")

        self.prefix_parse_fns: Dict[TT, PrefixParseFn] = {}
        self.infix_parse_fns: Dict[TT, InfixParseFn] = {}

        self.register_prefix(TT.IDENT, self.parse_identifier)
        self.register_prefix(TT.INT, self.parse_integer_literal)
        self.register_prefix(TT.STRING, self.parse_string_literal)
        self.register_prefix(TT.TRUE, self.parse_boolean)
        self.register_prefix(TT.FALSE, self.parse_boolean)
        self.register_prefix(TT.BANG, self.parse_prefix_expression)
        self.register_prefix(TT.MINUS, self.parse_prefix_expression)
        self.register_prefix(TT.LPAREN, self.parse_grouped_expression)
        self.register_prefix(TT.IF, self.parse_if_expression)
        self.register_prefix(TT.FUNCTION, self.parse_function_literal)
        self.register_prefix(TT.LBRACKET, self.parse_array_literal)
        self.register_prefix(TT.LBRACE, self.parse_hash_literal)

        for tt in (TT.PLUS, TT.MINUS, TT.SLASH, TT.ASTERISK, TT.EQ, TT.NOT_EQ, TT.LT, TT.GT):
            self.register_infix(tt, self.parse_infix_expression)
        self.register_infix(TT.LPAREN, self.parse_call_expression)
        self.register_infix(TT.LBRACKET, self.parse_index_expression)

        # Read two tokens so cur_token and peek_token are both set
        self.next_token()
        self.next_token()

    def register_prefix(self, token_type: TT, fn: PrefixParseFn) -> None:
        self.prefix_parse_fns[token_type] = fn

    def register_infix(self, token_type: TT, fn: InfixParseFn) -> None:
        self.infix_parse_fns[token_type] = fn

    def get_errors(self) -> List[str]:
        return self.errors

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, token_type: TT) -> bool:
        return self.cur_token.type == token_type

    def peek_token_is(self, token_type: TT) -> bool:
        return self.peek_token.type == token_type

    def expect_peek(self, token_type: TT) -> bool:
        """Advance if the next token has the given type, else record an error"""
        if self.peek_token_is(token_type):
            self.next_token()
            return True

        self.peek_error(token_type)
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    # ========================================================================
    # Errors
    # ========================================================================

    def peek_error(self, token_type: TT) -> None:
        self.errors.append(
            f"expected next token to be {token_type.value}, got {self.peek_token.type.value} instead"
        )

    def no_prefix_parse_fn_error(self, token_type: TT) -> None:
        self.errors.append(f"no prefix parse function for {token_type.value} found")

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        """Parse statements until EOF"""
        program = Program()

        while not self.cur_token_is(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                program.statements.append(stmt)
            self.next_token()

        return program

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[Statement]:
        if self.cur_token_is(TT.LET):
            return self.parse_let_statement()
        if self.cur_token_is(TT.RETURN):
            return self.parse_return_statement()

        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        stmt = LetStatement(token=self.cur_token)

        if not self.expect_peek(TT.IDENT):
            return None

        stmt.name = Identifier(token=self.cur_token, value=self.cur_token.literal)

        if not self.expect_peek(TT.ASSIGN):
            return None

        self.next_token()
        stmt.value = self.parse_expression(Precedence.LOWEST)

        if self.peek_token_is(TT.SEMICOLON):
            self.next_token()

        return stmt

    def parse_return_statement(self) -> ReturnStatement:
        stmt = ReturnStatement(token=self.cur_token)

        self.next_token()
        stmt.return_value = self.parse_expression(Precedence.LOWEST)

        if self.peek_token_is(TT.SEMICOLON):
            self.next_token()

        return stmt

    def parse_expression_statement(self) -> ExpressionStatement:
        stmt = ExpressionStatement(token=self.cur_token)
        stmt.expression = self.parse_expression(Precedence.LOWEST)

        if self.peek_token_is(TT.SEMICOLON):
            self.next_token()

        return stmt

    def parse_block_statement(self) -> BlockStatement:
        """Parse statements until '}' or EOF; cur_token is the opening '{'"""
        block = BlockStatement(token=self.cur_token)
        self.next_token()

        while not self.cur_token_is(TT.RBRACE) and not self.cur_token_is(TT.EOF):
            stmt = self.parse_statement()
            if stmt is not None:
                block.statements.append(stmt)
            self.next_token()

        return block

    # ========================================================================
    # Expressions (Pratt core)
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token.type)
            return None

        left_exp = prefix()

        while not self.peek_token_is(TT.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left_exp

            self.next_token()
            left_exp = infix(left_exp)

        return left_exp

    # ========================================================================
    # Prefix Parse Functions
    # ========================================================================

    def parse_identifier(self) -> Expression:
        return Identifier(token=self.cur_token, value=self.cur_token.literal)

    def parse_integer_literal(self) -> Optional[Expression]:
        literal = self.cur_token.literal

        try:
            value = int(literal)
        except ValueError:
            value = None

        if value is None or value > INT64_MAX:
            self.errors.append(f"could not parse {literal} as integer")
            return None

        return IntegerLiteral(token=self.cur_token, value=value)

    def parse_string_literal(self) -> Expression:
        return StringLiteral(token=self.cur_token, value=self.cur_token.literal)

    def parse_boolean(self) -> Expression:
        return BooleanLiteral(token=self.cur_token, value=self.cur_token_is(TT.TRUE))

    def parse_prefix_expression(self) -> Expression:
        expression = PrefixExpression(token=self.cur_token, operator=self.cur_token.literal)

        self.next_token()
        expression.right = self.parse_expression(Precedence.PREFIX)

        return expression

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.next_token()
        exp = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RPAREN):
            return None

        return exp

    def parse_if_expression(self) -> Optional[Expression]:
        expression = IfExpression(token=self.cur_token)

        if not self.expect_peek(TT.LPAREN):
            return None

        self.next_token()
        expression.condition = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RPAREN):
            return None
        if not self.expect_peek(TT.LBRACE):
            return None

        expression.consequence = self.parse_block_statement()

        if self.peek_token_is(TT.ELSE):
            self.next_token()

            if not self.expect_peek(TT.LBRACE):
                return None

            expression.alternative = self.parse_block_statement()

        return expression

    def parse_function_literal(self) -> Optional[Expression]:
        literal = FunctionLiteral(token=self.cur_token)

        if not self.expect_peek(TT.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None:
            return None
        literal.parameters = parameters

        if not self.expect_peek(TT.LBRACE):
            return None

        literal.body = self.parse_block_statement()
        return literal

    def parse_function_parameters(self) -> Optional[List[Identifier]]:
        identifiers: List[Identifier] = []

        if self.peek_token_is(TT.RPAREN):
            self.next_token()
            return identifiers

        if not self.expect_peek(TT.IDENT):
            return None
        identifiers.append(Identifier(token=self.cur_token, value=self.cur_token.literal))

        while self.peek_token_is(TT.COMMA):
            self.next_token()
            if not self.expect_peek(TT.IDENT):
                return None
            identifiers.append(Identifier(token=self.cur_token, value=self.cur_token.literal))

        if not self.expect_peek(TT.RPAREN):
            return None

        return identifiers

    def parse_array_literal(self) -> Optional[Expression]:
        token = self.cur_token
        elements = self.parse_expression_list(TT.RBRACKET)
        if elements is None:
            return None

        return ArrayLiteral(token=token, elements=elements)

    def parse_hash_literal(self) -> Optional[Expression]:
        hash_lit = HashLiteral(token=self.cur_token)

        while not self.peek_token_is(TT.RBRACE):
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)

            if not self.expect_peek(TT.COLON):
                return None

            self.next_token()
            value = self.parse_expression(Precedence.LOWEST)

            if key is None or value is None:
                return None

            hash_lit.pairs.append((key, value))

            if not self.peek_token_is(TT.RBRACE) and not self.expect_peek(TT.COMMA):
                return None

        if not self.expect_peek(TT.RBRACE):
            return None

        return hash_lit

    # ========================================================================
    # Infix Parse Functions
    # ========================================================================

    def parse_infix_expression(self, left: Optional[Expression]) -> Expression:
        expression = InfixExpression(token=self.cur_token, left=left, operator=self.cur_token.literal)

        precedence = self.cur_precedence()
        self.next_token()
        expression.right = self.parse_expression(precedence)

        return expression

    def parse_call_expression(self, function: Optional[Expression]) -> Optional[Expression]:
        token = self.cur_token
        arguments = self.parse_expression_list(TT.RPAREN)
        if arguments is None:
            return None

        return CallExpression(token=token, function=function, arguments=arguments)

    def parse_index_expression(self, left: Optional[Expression]) -> Optional[Expression]:
        expression = IndexExpression(token=self.cur_token, left=left)

        self.next_token()
        expression.index = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RBRACKET):
            return None

        return expression

    # ========================================================================
    # Helpers
    # ========================================================================

    def parse_expression_list(self, end: TT) -> Optional[List[Expression]]:
        """Comma-separated expressions up to `end`; handles the empty list"""
        items: List[Expression] = []

        if self.peek_token_is(end):
            self.next_token()
            return items

        self.next_token()
        item = self.parse_expression(Precedence.LOWEST)
        if item is not None:
            items.append(item)

        while self.peek_token_is(TT.COMMA):
            self.next_token()
            self.next_token()
            item = self.parse_expression(Precedence.LOWEST)
            if item is not None:
                items.append(item)

        if not self.expect_peek(end):
            return None

        return items

# ============================================================================
# Usage Example
# ============================================================================

def parse_source(source: str) -> Program:
    """
    Parse Monkey source code to AST.

    Raises ParseError carrying every accumulated message when the parser
    reported problems.
    """
    parser = Parser(Lexer(source))
    program = parser.parse_program()

    if parser.errors:
        raise ParseError(parser.errors)

    return program


# ============================================================================
# Main - AST dump
# ============================================================================

if __name__ == '__main__':
    import sys

    from .tree import to_lark

    args = [arg for arg in sys.argv[1:] if not arg.startswith('--')]

    # Read source from file or stdin
    if len(args) > 0 and args[0] != '-':
        with open(args[0], 'r') as f:
            source = f.read()
    else:
        source = sys.stdin.read()

    try:
        program = parse_source(source)
        print(to_lark(program).pretty())
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)
