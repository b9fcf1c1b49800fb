"""Exceptions raised by halgen."""


class HalgenError(Exception):
    """Base class for halgen errors."""


class MissingInterfaceError(HalgenError):
    """The unit declares no interface, so no output can be produced."""
