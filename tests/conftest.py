"""
Shared fixtures.
"""

import os
import sys
from pathlib import Path

import pytest

# Headless runs have no display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication

sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication for Qt tests"""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
