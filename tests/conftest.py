"""Pytest configuration for raycanvas tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture
def demo_camera():
    """Camera two units in front of the origin looking down -Z."""
    from raycanvas.camera.camera import Camera

    return Camera(16.0 / 9.0, 2, 1.0, origin=(0.0, 0.0, 2.0))
