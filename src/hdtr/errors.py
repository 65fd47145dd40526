from __future__ import annotations

from pathlib import Path


class HdtrError(Exception):
    """Base class for every failure that aborts a compositing run."""


class NoInputFilesSpecified(HdtrError):
    def __init__(self):
        super().__init__("No input files specified")


class InputFileDoesNotExist(HdtrError):
    def __init__(self, path: str | Path):
        self.path = str(path)
        super().__init__(f"Input file does not exist: {self.path}")


class InputFileReadError(HdtrError):
    def __init__(self, path: str | Path, reason: str = "could not be decoded"):
        self.path = str(path)
        super().__init__(f"Unable to read image {self.path}: {reason}")


class DimensionMismatch(HdtrError, ValueError):
    def __init__(self, expected: tuple[int, int], received: tuple[int, int], details: str):
        self.expected = tuple(expected)
        self.received = tuple(received)
        self.details = details
        super().__init__(
            f"Dimension mismatch: expected {self.expected[0]}x{self.expected[1]}, "
            f"received {self.received[0]}x{self.received[1]} ({details})"
        )


class InvalidPipeline(HdtrError):
    def __init__(self, details: str):
        self.details = details
        super().__init__(f"Invalid pipeline: {details}")


class NoSaveOperationSpecified(HdtrError):
    def __init__(self):
        super().__init__("Pipeline does not specify an output file to save")


class ErrorWritingFile(HdtrError):
    def __init__(self, path: str | Path):
        self.path = str(path)
        super().__init__(f"Error writing file: {self.path}")
