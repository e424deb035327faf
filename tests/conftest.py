"""
Shared fixtures for collision-detection tests.
Provides the published MD5 collision pair, seeded classifier parameters and ready detectors.
"""
import sys
from pathlib import Path

import pytest

# Add src/ to sys.path so 'hashcollide' is importable from a plain checkout
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from hashcollide.core import ClassifierParameters, CollisionDetectorImpl
from hashcollide.samples import SAMPLE_MESSAGE_1, SAMPLE_MESSAGE_2


@pytest.fixture
def collision_pair():
    """Published MD5 collision pair as hex text (128 bytes each, six bytes differ)."""
    return SAMPLE_MESSAGE_1, SAMPLE_MESSAGE_2


@pytest.fixture(scope="session")
def parameters() -> ClassifierParameters:
    """Seeded random classifier parameters, shared read-only across tests."""
    return ClassifierParameters.random(seed=42)


@pytest.fixture
def detector(parameters) -> CollisionDetectorImpl:
    """Detector with default MD5 engine and seeded classifier."""
    return CollisionDetectorImpl.with_parameters(parameters)
