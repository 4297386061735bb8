"""Pytest configuration and shared fixtures."""

# Load LISTING_* settings from a local .env file before fixtures are created
from dotenv import load_dotenv
load_dotenv()

pytest_plugins = [
    "tests.fixtures.transcripts",
    "tests.fixtures.api",
]
