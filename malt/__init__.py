# Reader for a small Clojure-flavoured Lisp.
#
# - Value:     closed set of variants the reader builds (see malt.types).
# - tokenize:  one line of text -> list of Token.
# - read:      tokens -> list of top-level forms.
# - read_str:  tokenize + read in one call.
#
# Each call owns its own state; nothing persists between lines.

from malt.types.values import Value
from malt.reader.parser import Token, tokenize, read, read_str

__all__ = ["Value", "Token", "tokenize", "read", "read_str"]
