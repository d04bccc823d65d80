from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from malt.types.symbol import Symbol
from malt.types.values import List, Map, Value, Vector

if TYPE_CHECKING:
    from malt.reader.parser import TokenStream


class Template(NamedTuple):
    """Expansion of a reader macro: read one form per formal, then substitute."""

    formals: tuple[Symbol, ...]
    body: Value


def _subst(expr: Value, bindings: dict[Symbol, Value]) -> Value:
    """Syntactic substitution over lists, vectors, maps and Symbols.

    Every node of the result is new, so two expansions of one template
    never share a node.
    """
    if isinstance(expr, Symbol):
        return bindings[expr] if expr in bindings else Symbol(expr.name)
    if isinstance(expr, List):
        return List(tuple(_subst(x, bindings) for x in expr))
    if isinstance(expr, Vector):
        return Vector(tuple(_subst(x, bindings) for x in expr))
    if isinstance(expr, Map):
        return Map(tuple((_subst(k, bindings), _subst(v, bindings)) for k, v in expr.pairs))
    return expr


class ReaderMacros:
    """
    Registry of reader macros keyed by token kind.
    Each macro is a Template whose formals are bound, in order, to the
    forms that follow the marker in the token stream.
    """

    def __init__(self):
        self.macros: dict[str, Template] = {}

    def define(self, kind: str, template: Template) -> None:
        """Register a reader macro for a given token kind."""
        self.macros[kind] = template

    def is_macro(self, kind: str) -> bool:
        return kind in self.macros

    def dispatch(self, kind: str, stream: TokenStream) -> Value:
        """Read the macro's arguments from the stream and expand the template."""
        if kind not in self.macros:
            raise ValueError(f"No reader macro defined for {kind!r}")

        template = self.macros[kind]
        # Each argument is required; read_form raises at end of input
        args = [stream.read_form() for _ in template.formals]
        bindings = dict(zip(template.formals, args))
        return _subst(template.body, bindings)


# -------------------------
# Single global instance
# -------------------------
reader_macros: ReaderMacros = ReaderMacros()

QUOTE_FORMS: dict[str, Symbol] = {
    "quote": Symbol("quote"),
    "quasiquote": Symbol("quasiquote"),
    "unquote": Symbol("unquote"),
    "splice_unquote": Symbol("splice-unquote"),
    "deref": Symbol("deref"),
}

# Unary forms: 'x `x ~x ~@x @x => (<name> x)
for kind, name in QUOTE_FORMS.items():
    _x = Symbol("x")
    reader_macros.define(kind, Template((_x,), List((name, _x))))

# ^meta target => (with-meta target meta); arguments swap relative to source
_meta, _target = Symbol("meta"), Symbol("target")
reader_macros.define(
    "meta", Template((_meta, _target), List((Symbol("with-meta"), _target, _meta)))
)
