"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import toolbelt...' works, and
gives every test a clean settings singleton with no TOOLBELT_* overrides
inherited from the developer's environment or .env file.
"""
import os
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from toolbelt.config.settings import reset_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in list(os.environ):
        if name.startswith("TOOLBELT_"):
            monkeypatch.delenv(name)
    reset_settings()
    yield
    reset_settings()
