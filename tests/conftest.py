"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls; a second call
    resets the runtime and invalidates the module-level fields.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear the uploaded scene before and after each test."""
    # Import here so Taichi is initialized before fields are declared
    from softray.scene.intersection import clear_scene

    clear_scene()
    yield
    clear_scene()
