# src/narcengine/errors.py


class NarcDetectError(Exception):
    """Base class for every error raised by the detection calculator."""


class SelectionNotFound(NarcDetectError, LookupError):
    """
    A substance or route name matched neither a canonical entry nor a synonym.

    kind : "substance" or "route"
    name : the text that was looked up (as typed)
    """

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind}: {name!r}")


class InvalidPrecondition(NarcDetectError, ValueError):
    """An engine input would lead to a division by zero or a negative quantity."""
