"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/classifier.py
Feed-forward collision classifier (inference only).

Layout, fixed:
    dense(64 → 128, ReLU) → dropout(0.3) → dense(128 → 64, ReLU) → dropout(0.2) → dense(64 → 1, sigmoid)

Dropout is inert at inference time: no masking, scale factor 1.
Parameters are an explicit immutable object handed to the classifier at construction,
so one classifier can be shared by concurrent detection runs without locking.
"""

import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import numpy as np

from hashcollide.core.config import DetectionConfig
from hashcollide.core.errors import ModelNotInitializedError, ParameterShapeError
from hashcollide.core.interfaces import Classifier

logger = logging.getLogger(__name__)

_ARRAY_NAMES = ("W1", "b1", "W2", "b2", "W3", "b3")


@dataclass(frozen=True)
class ClassifierParameters:
    """
    Weights and biases of the three dense layers plus the two dropout rates.
    Arrays are copied to float32 and write-locked; shapes are checked once here.
    """
    W1: np.ndarray
    b1: np.ndarray
    W2: np.ndarray
    b2: np.ndarray
    W3: np.ndarray
    b3: np.ndarray
    dropout_rates: Tuple[float, float] = field(default=DetectionConfig.DROPOUT_RATES)

    def __post_init__(self):
        expected = [shape for layer in DetectionConfig.get_layer_shapes() for shape in layer]
        for name, shape in zip(_ARRAY_NAMES, expected):
            try:
                array = np.array(getattr(self, name), dtype=np.float32, copy=True)
            except (ValueError, TypeError) as e:
                raise ParameterShapeError(f"Parameter '{name}' is not numeric: {e}") from e
            if array.shape != shape:
                raise ParameterShapeError(
                    f"Parameter '{name}' has shape {array.shape}, expected {shape}"
                )
            if not np.all(np.isfinite(array)):
                raise ParameterShapeError(f"Parameter '{name}' contains NaN or infinite values")
            array.setflags(write=False)
            object.__setattr__(self, name, array)

        try:
            rates = tuple(float(r) for r in self.dropout_rates)
        except (ValueError, TypeError) as e:
            raise ParameterShapeError(f"Dropout rates are not numeric: {e}") from e
        if len(rates) != 2 or not all(0.0 <= r < 1.0 for r in rates):
            raise ParameterShapeError(f"Expected two dropout rates in [0, 1), got {rates}")
        object.__setattr__(self, "dropout_rates", rates)

    # ---------------------------------------------------------------------
    # Construction helpers
    # ---------------------------------------------------------------------
    @classmethod
    def random(cls, seed: Optional[int] = DetectionConfig.DEFAULT_SEED) -> 'ClassifierParameters':
        """
        Untrained parameters: Glorot-uniform kernels and zero biases.
        The same seed always yields the same parameters.
        """
        rng = np.random.default_rng(seed)
        arrays = {}
        for index, (kernel_shape, bias_shape) in enumerate(DetectionConfig.get_layer_shapes(), start=1):
            fan_in, fan_out = kernel_shape
            limit = np.sqrt(6.0 / (fan_in + fan_out))
            arrays[f"W{index}"] = rng.uniform(-limit, limit, kernel_shape)
            arrays[f"b{index}"] = np.zeros(bias_shape)
        logger.debug(f"Initialized random classifier parameters (seed={seed})")
        return cls(**arrays)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ClassifierParameters':
        """
        Loads parameters from a .npz archive with keys W1 b1 W2 b2 W3 b3.

        Raises:
            ParameterShapeError: if the file is not a .npz archive, a key is missing
                                 or an array is non-numeric or has the wrong shape.
            OSError: if the file cannot be read.
        """
        path = Path(path)
        logger.debug(f"Loading classifier parameters from {path}")
        try:
            archive = np.load(path, allow_pickle=False)
        except (ValueError, EOFError, zipfile.BadZipFile) as e:
            raise ParameterShapeError(f"{path.name} is not a numpy archive: {e}") from e
        if not isinstance(archive, np.lib.npyio.NpzFile):
            raise ParameterShapeError(f"{path.name} holds a single array, expected a .npz archive")

        with archive:
            missing = [name for name in _ARRAY_NAMES if name not in archive.files]
            if missing:
                raise ParameterShapeError(f"Missing parameters in {path.name}: {', '.join(missing)}")
            try:
                arrays = {name: archive[name] for name in _ARRAY_NAMES}
                if "dropout_rates" in archive.files:
                    arrays["dropout_rates"] = tuple(np.atleast_1d(archive["dropout_rates"]).tolist())
            except (ValueError, EOFError, zipfile.BadZipFile) as e:
                raise ParameterShapeError(f"Cannot read arrays from {path.name}: {e}") from e
        return cls(**arrays)

    def save(self, path: Union[str, Path]) -> Path:
        """Writes parameters to a .npz archive and returns the written path."""
        path = Path(path)
        if path.suffix != ".npz":
            path = path.with_suffix(".npz")
        np.savez(path, dropout_rates=np.array(self.dropout_rates), **self.as_dict())
        logger.debug(f"Saved classifier parameters to {path}")
        return path

    def as_dict(self) -> Dict[str, np.ndarray]:
        return {name: getattr(self, name) for name in _ARRAY_NAMES}

    def __eq__(self, other):
        if not isinstance(other, ClassifierParameters):
            return NotImplemented
        return (self.dropout_rates == other.dropout_rates and
                all(np.array_equal(getattr(self, n), getattr(other, n)) for n in _ARRAY_NAMES))

    __hash__ = None

    def __repr__(self):
        return f"<ClassifierParameters layers={DetectionConfig.LAYER_SIZES}, dropout={self.dropout_rates}>"


# ---------------------------------------------------------------------
# Activations
# ---------------------------------------------------------------------
def relu(x: np.ndarray) -> np.ndarray:
    return np.maximum(x, 0.0)


def sigmoid(x: np.ndarray) -> np.ndarray:
    # 1 / (1 + e^-x) without overflow for large |x|
    return np.exp(-np.logaddexp(0.0, -x))


def dropout(x: np.ndarray, rate: float, training: bool = False) -> np.ndarray:
    """Inference-time dropout is the identity."""
    if training:
        raise NotImplementedError("Training is not supported")
    return x


class ClassifierImpl(Classifier):
    """
    numpy forward pass over ClassifierParameters.
    Built without parameters, predict() raises ModelNotInitializedError.
    """

    def __init__(self, parameters: Optional[ClassifierParameters] = None):
        self._parameters = parameters

    @property
    def parameters(self) -> Optional[ClassifierParameters]:
        return self._parameters

    @property
    def is_initialized(self) -> bool:
        return self._parameters is not None

    @property
    def input_size(self) -> int:
        return DetectionConfig.FEATURE_SIZE

    def _forward(self, x: np.ndarray) -> np.ndarray:
        """
        Forward pass.

        x: (batch, 64)
        Returns: (batch, 1)
        """
        p = self._parameters
        first_rate, second_rate = p.dropout_rates
        h1 = dropout(relu(x @ p.W1 + p.b1), first_rate)   # (batch, 128)
        h2 = dropout(relu(h1 @ p.W2 + p.b2), second_rate)  # (batch, 64)
        return sigmoid(h2 @ p.W3 + p.b3)                   # (batch, 1)

    def predict(self, features: np.ndarray) -> float:
        if self._parameters is None:
            raise ModelNotInitializedError()

        x = np.asarray(features, dtype=np.float32)
        if x.shape != (DetectionConfig.FEATURE_SIZE,):
            raise ValueError(
                f"Feature vector must have shape ({DetectionConfig.FEATURE_SIZE},), got {x.shape}"
            )

        probability = float(self._forward(x.reshape(1, -1))[0, 0])
        return min(max(probability, 0.0), 1.0)
