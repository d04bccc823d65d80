from malt.reader.parser import Token, TokenStream, lex, read, read_str, tokenize

__all__ = ["Token", "TokenStream", "lex", "read", "read_str", "tokenize"]
