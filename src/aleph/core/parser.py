"""
Term Parser: signature strings back into terms.

Accepts the notation produced by Term.signature() plus ASCII alternatives.

Grammar:
    expr    := primary (SEQ_OP primary | IMPL_OP primary)*
    primary := '[' expr ']'
             | '(' expr ')'
             | 'N' '(' INT ')'
             | 'FUSE' '(' INT ',' INT ',' INT ')'
             | 'CHAIN' '(' '[' INT* ']' ',' expr ')'
             | ('A' '(' INT ')')+ primary?
    SEQ_OP  := '∘' | ';'
    IMPL_OP := '⇒' | '=>'

Examples:
    "A(2)A(3)N(7)"
    "FUSE(3,5,11)"
    "[N(7)] ; [A(2)N(11)]"
    "([N(7)] => [N(11)])"
"""

import re
from typing import List, Optional, Tuple

from aleph.core.terms import Adj, Chain, Fuse, Impl, Noun, Sentence, Seq, Term


class TermParseError(Exception):
    """Error parsing a term expression."""

    def __init__(self, message: str, text: str, position: int):
        self.text = text
        self.position = position
        super().__init__(f"{message} at position {position} in {text!r}")


SEQ_OPS = {"∘", ";"}
IMPL_OPS = {"⇒", "=>"}


class TermParser:
    """Recursive-descent parser over a regex token stream."""

    TOKEN_PATTERN = re.compile(r"\s*(FUSE|CHAIN|N|A|\d+|=>|[()\[\],;∘⇒])")
    NOUN_STARTS = {"N", "FUSE", "CHAIN", "A", "("}

    def __init__(self):
        self._tokens: List[Tuple[str, int]] = []
        self._pos = 0
        self._text = ""

    def parse(self, text: str) -> Term:
        """
        Parse a term expression.

        Args:
            text: The expression to parse.

        Returns:
            The parsed Term.

        Raises:
            TermParseError: On unknown tokens or unexpected structure.
            MalformedTermError: When a parsed term fails construction checks.
        """
        self._text = text
        self._tokens = self._tokenize(text)
        self._pos = 0
        if not self._tokens:
            raise TermParseError("Empty expression", text, 0)
        term = self._parse_expr()
        if self._peek() is not None:
            raise TermParseError(f"Unexpected token {self._peek()!r}", text, self._offset())
        return term

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def _tokenize(self, text: str) -> List[Tuple[str, int]]:
        tokens = []
        pos = 0
        while pos < len(text):
            if text[pos:].strip() == "":
                break
            m = self.TOKEN_PATTERN.match(text, pos)
            if not m:
                raise TermParseError("Unrecognized input", text, pos)
            tokens.append((m.group(1), m.start(1)))
            pos = m.end()
        return tokens

    def _peek(self) -> Optional[str]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos][0]
        return None

    def _offset(self) -> int:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos][1]
        return len(self._text)

    def _advance(self) -> str:
        tok = self._peek()
        if tok is None:
            raise TermParseError("Unexpected end of input", self._text, len(self._text))
        self._pos += 1
        return tok

    def _expect(self, expected: str) -> None:
        offset = self._offset()
        tok = self._advance()
        if tok != expected:
            raise TermParseError(f"Expected {expected!r}, found {tok!r}", self._text, offset)

    def _int(self) -> int:
        offset = self._offset()
        tok = self._advance()
        if not tok.isdigit():
            raise TermParseError(f"Expected integer, found {tok!r}", self._text, offset)
        return int(tok)

    # -------------------------------------------------------------------------
    # Grammar
    # -------------------------------------------------------------------------

    def _parse_expr(self) -> Term:
        left = self._parse_primary()
        while self._peek() in SEQ_OPS or self._peek() in IMPL_OPS:
            op = self._advance()
            right = self._parse_primary()
            left = Seq(left, right) if op in SEQ_OPS else Impl(left, right)
        return left

    def _parse_primary(self) -> Term:
        offset = self._offset()
        tok = self._advance()

        if tok == "[":
            inner = self._parse_expr()
            self._expect("]")
            return Sentence(inner)

        if tok == "(":
            inner = self._parse_expr()
            self._expect(")")
            return inner

        if tok == "N":
            self._expect("(")
            p = self._int()
            self._expect(")")
            return Noun(p)

        if tok == "FUSE":
            self._expect("(")
            p = self._int()
            self._expect(",")
            q = self._int()
            self._expect(",")
            r = self._int()
            self._expect(")")
            return Fuse(p, q, r)

        if tok == "CHAIN":
            self._expect("(")
            self._expect("[")
            ops: List[int] = []
            while self._peek() != "]":
                ops.append(self._int())
                if self._peek() == ",":
                    self._advance()
            self._expect("]")
            self._expect(",")
            base = self._parse_expr()
            self._expect(")")
            return Chain(tuple(ops), base)

        if tok == "A":
            self._pos -= 1
            ops = []
            while self._peek() == "A":
                self._advance()
                self._expect("(")
                ops.append(self._int())
                self._expect(")")
            if self._peek() in self.NOUN_STARTS:
                return Chain(tuple(ops), self._parse_primary())
            if len(ops) == 1:
                return Adj(ops[0])
            raise TermParseError("Adjective chain without a base noun", self._text, self._offset())

        raise TermParseError(f"Unexpected token {tok!r}", self._text, offset)


def parse_term(text: str) -> Term:
    """Parse a term expression with a fresh TermParser."""
    return TermParser().parse(text)


__all__ = ["TermParseError", "TermParser", "parse_term"]
