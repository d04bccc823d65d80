from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Symbol:
    """An atom exactly as the tokenizer saw it.

    The reader never classifies atoms, so "42", ":kw", "nil" and "true"
    all arrive here unchanged; turning them into Number, Keyword, Nil or
    Boolean is left to a later stage.
    """

    name: str

    def __str__(self) -> str:
        return self.name
