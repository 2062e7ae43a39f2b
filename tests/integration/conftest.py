"""Pytest configuration and fixtures for integration tests.

These tests call the live Gemini API. They are skipped unless a real
GEMINI_API_KEY is available from the environment or the project's .env.
"""

import os
from pathlib import Path

import pytest

from tests.conftest import TEST_API_KEY

IMAGES_DIR = Path(__file__).parent.parent.parent / "images"


@pytest.fixture(scope="session", autouse=True)
def check_api_key():
    """Skip integration tests when only the placeholder key is configured."""
    gemini_key = os.getenv("GEMINI_API_KEY")
    if not gemini_key or gemini_key == TEST_API_KEY:
        pytest.skip("Integration tests skipped. Set GEMINI_API_KEY in your .env file.")


@pytest.fixture(scope="session")
def dish_images():
    """Sample dish photos from images/ (jpg, jpeg, png, webp)."""
    paths = sorted(
        path for path in IMAGES_DIR.glob("*") if path.suffix.lower() in (".jpg", ".jpeg", ".png", ".webp")
    )
    if not paths:
        pytest.skip("No test images found in images/ directory")
    return paths
