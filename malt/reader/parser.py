"""
  malt Reader: Tokenizer and Parser

- One line of text in, a list of forms out; no state survives a call.
- Tokenizer yields (kind, text) pairs; comments are kept as tokens and
  dropped by the parser.
- Parser emits Value variants (see malt.types):

    - atoms -> Symbol (raw text, never classified as number/keyword/nil)
    - strings -> String (unescaped payload)
    - ( ... ) -> List
    - [ ... ] -> Vector
    - { ... } -> Map (pairs in source order)
    - 'x `x ~x ~@x @x -> (quote x) (quasiquote x) (unquote x)
                        (splice-unquote x) (deref x)
    - ^m x -> (with-meta x m)

  String escaping is deliberately narrow: \\" is a literal quote, any
  other backslash is kept as written.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, NamedTuple, Optional

from malt.errors import (
    NestingTooDeep,
    OddMapLiteral,
    UnbalancedList,
    UnbalancedMap,
    UnbalancedString,
    UnbalancedVector,
    UnexpectedEndOfInput,
)
from malt.reader.reader_macros import reader_macros
from malt.types.symbol import Symbol
from malt.types.values import List, Map, String, Value, Vector

logger = logging.getLogger(__name__)


TOKEN_RE = re.compile(
    r"(?P<whitespace>[\s,]+)"  # whitespace and commas separate tokens
    r"|(?P<splice_unquote>~@)"  # must precede unquote
    r"|(?P<unquote>~)"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<lbracket>\[)"
    r"|(?P<rbracket>\])"
    r"|(?P<lbrace>\{)"
    r"|(?P<rbrace>\})"
    r"|(?P<quote>')"
    r"|(?P<quasiquote>`)"
    r"|(?P<meta>\^)"
    r"|(?P<deref>@)"
    r'|(?P<string>"(?:\\"|\\(?!")|[^"\\])*")'  # a backslash only escapes '"'
    r'|(?P<unterminated>")'  # opening quote with no closing quote
    r"|(?P<comment>;[^\n]*)"  # up to, not including, the newline
    r'|(?P<atom>[^\s\[\]{}()\'"`,;]+)'  # fallback: anything else
)


class Token(NamedTuple):
    kind: str
    text: str

    def __str__(self):
        return self.text


def _unescape(body: str) -> str:
    return body.replace('\\"', '"')


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Token(kind, text) for each lexical unit."""
    pos = 0
    n = len(source)

    while pos < n:
        # The atom fallback claims any character the other groups do not
        m = TOKEN_RE.match(source, pos)
        kind = m.lastgroup
        text = m.group()
        pos = m.end()

        if kind == "whitespace":
            continue
        if kind == "unterminated":
            raise UnbalancedString("Unbalanced string", m.start())
        if kind == "string":
            text = _unescape(text[1:-1])
        yield Token(kind, text)


def tokenize(source: str) -> list[Token]:
    """Tokenize a whole line. Raises UnbalancedString."""
    tokens = list(lex(source))
    logger.debug("tokenized %d chars into %d tokens", len(source), len(tokens))
    return tokens


# opener kind -> (closer kind, collection name, error raised when unbalanced)
COLLECTIONS: dict[str, tuple[str, str, type[UnbalancedList]]] = {
    "lparen": ("rparen", "list", UnbalancedList),
    "lbracket": ("rbracket", "vector", UnbalancedVector),
    "lbrace": ("rbrace", "map", UnbalancedMap),
}

CLOSERS: dict[str, tuple[str, type[UnbalancedList]]] = {
    close: (name, error) for close, name, error in COLLECTIONS.values()
}


class TokenStream:
    def __init__(self, tokens: Iterable[Token]):
        self.tokens = iter(tokens)
        self.buffer: list[Token] = []

    def peek(self) -> Optional[Token]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None
        return self.buffer[0]

    def advance(self) -> Optional[Token]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, None)

    def skip_comments(self) -> Optional[Token]:
        """Discard comment tokens; return the next real token without consuming it."""
        tok = self.peek()
        while tok is not None and tok.kind == "comment":
            self.advance()
            tok = self.peek()
        return tok

    def read_form(self) -> Value:
        tok = self.skip_comments()
        if tok is None:
            raise UnexpectedEndOfInput("Unexpected end of input")

        kind, text = tok

        if kind in COLLECTIONS:
            self.advance()
            return self.read_collection(kind)

        if kind in CLOSERS:
            name, error = CLOSERS[kind]
            raise error(f"Unbalanced {name}: unexpected {text!r}")

        # ------------------------
        # Reader macros: ' ` ~ ~@ @ ^
        # ------------------------
        if reader_macros.is_macro(kind):
            self.advance()
            return reader_macros.dispatch(kind, self)

        if kind == "string":
            self.advance()
            return String(text)

        # atom: kept verbatim, never classified
        self.advance()
        return Symbol(text)

    def read_collection(self, open_kind: str) -> Value:
        close_kind, name, error = COLLECTIONS[open_kind]
        items: list[Value] = []
        while True:
            tok = self.skip_comments()
            if tok is None:
                raise error(f"Unbalanced {name}: end of input before closing delimiter")
            if tok.kind == close_kind:
                self.advance()
                break
            items.append(self.read_form())

        if open_kind == "lbrace":
            if len(items) % 2:
                raise OddMapLiteral(f"Map literal has {len(items)} forms; expected key/value pairs")
            return Map.from_flat(items)
        if open_kind == "lbracket":
            return Vector(tuple(items))
        return List(tuple(items))

    def read_all(self) -> Iterator[Value]:
        while self.skip_comments() is not None:
            try:
                form = self.read_form()
            except RecursionError:
                raise NestingTooDeep("Form nested too deeply") from None
            yield form


def read(tokens: Iterable[Token]) -> list[Value]:
    """Parse every top-level form in the token sequence."""
    forms = list(TokenStream(tokens).read_all())
    logger.debug("read %d top-level forms", len(forms))
    return forms


def read_str(source: str) -> list[Value]:
    """Tokenize and parse one line of text."""
    return read(tokenize(source))
