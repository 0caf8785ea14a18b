from __future__ import annotations


class ComptimeError(Exception):
    """ Base class for all compile-time errors"""

    def __init__(self, message: str, pos=None):
        super().__init__(message)
        self.message = message
        self.pos = pos

    def __str__(self):
        if self.pos is None:
            return self.message
        return f"{self.pos}: {self.message}"


class DuplicateMacroError(ComptimeError):
    """ Raised when a macro name is registered twice"""


class UnknownMacroError(ComptimeError):
    """ Raised when invoking a macro that was never registered"""


class ArityError(ComptimeError):
    """ Raised when the number of arguments passed to a macro is incorrect"""


class NoActiveCompilationError(ComptimeError):
    """ Raised when the current position is queried outside any macro invocation"""


class MalformedLiteralError(ComptimeError):
    """ Raised when a literal payload cannot be turned into a constant"""


class RecursionLimitError(ComptimeError):
    """ Raised when nested macro invocations exceed the configured depth"""


class ExprTypeError(ComptimeError):
    """ Raised when an expression (or a macro result) is not well-formed"""


class MacroError(ComptimeError):
    """ Raised by macro bodies through CompilationContext.error"""


class ConfigError(ComptimeError):
    """ Raised when an environment setting has an invalid value"""
