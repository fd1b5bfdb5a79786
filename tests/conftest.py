"""Pytest configuration for dataknobs_validator tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_validator import ShapeRegistry, Validator, ValidatorConfig  # noqa: E402


@pytest.fixture
def registry():
    """A fresh shape registry with the default tag."""
    return ShapeRegistry()


@pytest.fixture
def validator(registry):
    """A validator that does not share state with the process-wide default."""
    return Validator(ValidatorConfig(), registry=registry)
