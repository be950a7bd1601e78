"""
Error taxonomy. Every error is fatal for a run.
"""

from typing import Optional


class TzCoordsError(RuntimeError):
    pass


class MalformedCoordinate(TzCoordsError):
    """An ISO 6709 token (or one of its sub-fields) could not be decoded."""

    def __init__(self, field: str, raw: str, reason: str):
        self.field = field
        self.raw = raw
        self.reason = reason
        super().__init__(f"malformed {field} [{raw}]: {reason}")


class UnresolvableZone(TzCoordsError):
    """The timezone database has no zone for the identifier."""

    def __init__(self, identifier: str, reason: str = "not found in timezone database"):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"unresolvable zone '{identifier}': {reason}")


class TableBuildError(TzCoordsError):
    """
    A row failed while building the zone table.

    stage is "decode" or "validate"; cause is the MalformedCoordinate or
    UnresolvableZone that stopped the pass.
    """

    def __init__(self, stage: str, line_no: int, identifier: str, raw: str, cause: TzCoordsError):
        self.stage = stage
        self.line_no = line_no
        self.identifier = identifier
        self.raw = raw
        self.cause = cause
        super().__init__(f"line {line_no}: {stage} {identifier} [{raw}]: {cause}")


class InputReadError(TzCoordsError):
    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"reading source table {path}: {reason}")


class OutputWriteError(TzCoordsError):
    def __init__(self, path: Optional[object], reason: str):
        self.path = path
        super().__init__(f"writing output {path}: {reason}")
