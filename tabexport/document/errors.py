from __future__ import annotations


class ExportError(Exception):
    """Base class; ``str(err)`` is the diagnostic handed back to the caller."""


class EmptyInputError(ExportError):
    pass


class MissingParameterError(ExportError):
    def __init__(self, message: str, parameter: str):
        super().__init__(message)
        self.parameter = parameter


class EncodingError(ExportError):
    pass


class UnexpectedError(ExportError):
    pass
