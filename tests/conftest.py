"""
Pytest configuration and shared fixtures for MagicPhotos tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import numpy as np
import pytest

from MP_Libs.ImageEditingLib.image_models import new_buffer


def make_gradient(width=40, height=40):
    """Opaque buffer whose R grows with x and G grows with y."""
    buffer = new_buffer(width, height, (0, 0, 0, 255))
    xs = np.arange(width, dtype=np.int64)
    ys = np.arange(height, dtype=np.int64)
    buffer[:, :, 0] = ((xs * 6) % 256)[None, :]
    buffer[:, :, 1] = ((ys * 6) % 256)[:, None]
    buffer[:, :, 2] = 77
    return buffer


def make_noise(width=40, height=40, seed=1234):
    """Opaque buffer of random colors."""
    rng = np.random.default_rng(seed)
    buffer = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    buffer[:, :, 3] = 255
    return buffer


def make_loader(buffer):
    """Image loader stand-in that returns a copy of buffer and records calls."""
    calls = []

    def loader(location, mpix_limit):
        calls.append((location, mpix_limit))
        return buffer.copy()

    loader.calls = calls
    return loader


@pytest.fixture
def temp_project_dir(tmp_path):
    """
    Provide a temporary directory for image files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]


@pytest.fixture
def gradient_buffer():
    return make_gradient()


@pytest.fixture
def noise_buffer():
    return make_noise()
