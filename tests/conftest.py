"""Test configuration and fixtures for the bookstore services."""

from tests.fixtures import *  # noqa: F401,F403
