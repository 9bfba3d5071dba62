"""Pytest configuration and shared fixtures."""

import pytest


@pytest.fixture(scope="function")
def app():
    """Create test Flask app."""
    from aitools.app import create_app
    from aitools.config import TestingConfig

    app = create_app(TestingConfig)
    app.config["TESTING"] = True

    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def installed_languages():
    """A small set of installed languages."""
    return {
        "en": "English",
        "de": "German",
        "fr": "French",
        "it": "Italian",
        "es-es": "Spanish",
        "pt": "Portuguese",
    }
