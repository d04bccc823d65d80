"""Value variants produced by the reader.

Symbol and Nil live in their own modules; the remaining variants are frozen
dataclasses so that equality is structural and a form cannot change once
the parser has built it. Collections hold tuples: the parser accumulates
into a Python list and freezes it when the closing delimiter is read.

Number, Keyword and Boolean are never produced by the reader itself. Atoms
stay Symbols until a later stage classifies them.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import Union

from malt.types.nil import NilType
from malt.types.symbol import Symbol


@dataclass(frozen=True)
class String:
    text: str

    def __str__(self) -> str:
        # Inverse of the tokenizer's escaping: only '"' is escaped
        escaped = self.text.replace('"', '\\"')
        return f'"{escaped}"'


@dataclass(frozen=True)
class Keyword:
    name: str

    def __str__(self) -> str:
        return f":{self.name}"


@dataclass(frozen=True)
class Number:
    value: int | float

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


def _render_seq(open_: str, items, close: str) -> str:
    with StringIO() as buffer:
        buffer.write(open_)
        buffer.write(" ".join(str(item) for item in items))
        buffer.write(close)
        return buffer.getvalue()


@dataclass(frozen=True)
class List:
    items: tuple[Value, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def __str__(self) -> str:
        return _render_seq("(", self.items, ")")


@dataclass(frozen=True)
class Vector:
    items: tuple[Value, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def __str__(self) -> str:
        return _render_seq("[", self.items, "]")


@dataclass(frozen=True)
class Map:
    """Key/value pairs in source order. Duplicate keys are kept as written."""

    pairs: tuple[tuple[Value, Value], ...] = ()

    @classmethod
    def from_flat(cls, forms) -> Map:
        """Pair up k1 v1 k2 v2 ...; the caller guarantees an even count."""
        forms = list(forms)
        return cls(tuple(zip(forms[0::2], forms[1::2])))

    def __len__(self) -> int:
        return len(self.pairs)

    def keys(self):
        return [k for k, _ in self.pairs]

    def get(self, key, default=None):
        for k, v in self.pairs:
            if k == key:
                return v
        return default

    def __str__(self) -> str:
        return _render_seq("{", (x for pair in self.pairs for x in pair), "}")


Value = Union[Symbol, String, List, Vector, Map, Number, Keyword, Boolean, NilType]
