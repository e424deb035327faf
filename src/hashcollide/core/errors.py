"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy for the collision-detection pipeline.

Every pipeline error carries an ErrorKind. Components raise these unchanged;
the detector is the only place that turns them into caller-facing messages.
"""
from typing import Dict, Type

from hashcollide.core.models import ErrorKind


class CollisionDetectionError(Exception):
    """Base class for terminal pipeline errors."""
    kind: ErrorKind = None

    def __init__(self, message: str = ""):
        super().__init__(message or ERROR_MESSAGES.get(self.kind, ""))


class EmptyInputError(CollisionDetectionError):
    kind = ErrorKind.EMPTY_INPUT


class InvalidHexFormatError(CollisionDetectionError, ValueError):
    kind = ErrorKind.INVALID_HEX_FORMAT


class ModelNotInitializedError(CollisionDetectionError, RuntimeError):
    kind = ErrorKind.MODEL_NOT_INITIALIZED


class ParameterShapeError(ValueError):
    """Classifier parameters do not match the fixed network layout."""


class DetectionTimeoutError(TimeoutError):
    """A detection run did not finish within the caller's timeout."""


ERROR_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.EMPTY_INPUT: "Both messages are required.",
    ErrorKind.INVALID_HEX_FORMAT: "Invalid hex format. Please enter valid hexadecimal values.",
    ErrorKind.MODEL_NOT_INITIALIZED: "Classifier model is not initialized.",
}

_ERROR_CLASSES: Dict[ErrorKind, Type[CollisionDetectionError]] = {
    ErrorKind.EMPTY_INPUT: EmptyInputError,
    ErrorKind.INVALID_HEX_FORMAT: InvalidHexFormatError,
    ErrorKind.MODEL_NOT_INITIALIZED: ModelNotInitializedError,
}


def error_for_kind(kind: ErrorKind, message: str = "") -> CollisionDetectionError:
    """Builds the exception instance matching an error kind."""
    return _ERROR_CLASSES[kind](message)
