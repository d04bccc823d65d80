from __future__ import annotations


class MaltError(Exception):
    """ Base class for all malt errors"""
    pass


class MaltSyntaxError(MaltError):
    """ Raised when the reader cannot turn input into forms"""

    def __init__(self, message: str, position: int | None = None):
        super().__init__(message)
        self.message = message
        # Character offset into the line, when the tokenizer knows it
        self.position = position

    def __str__(self):
        if self.position is None:
            return self.message
        return f"{self.message} (at offset {self.position})"


class UnbalancedString(MaltSyntaxError):
    """ Raised when a string literal has no closing quote"""


class UnbalancedList(MaltSyntaxError):
    """ Raised when a list is never closed, or a ')' has no opener"""


class UnbalancedVector(UnbalancedList):
    """ Raised when a vector is never closed, or a ']' has no opener"""


class UnbalancedMap(UnbalancedList):
    """ Raised when a map is never closed, or a '}' has no opener"""


class UnexpectedEndOfInput(MaltSyntaxError):
    """ Raised when input ends where a form is required"""


class OddMapLiteral(MaltSyntaxError):
    """ Raised when a map literal holds a key without a value"""


class NestingTooDeep(MaltSyntaxError):
    """ Raised when a form nests deeper than the interpreter stack allows"""


class LineSourceError(MaltError):
    """ Base class for errors raised by the line source, not the reader"""


class ReadInterrupt(LineSourceError):
    """ Raised on Ctrl-C / Ctrl-D; ends the session cleanly"""


class ReadFailure(LineSourceError):
    """ Raised when reading a line fails at the I/O level"""
