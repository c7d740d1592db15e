"""Shared fixtures. Qt runs on the offscreen platform so the suite works headless."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from fakes import FakeSurface, FakeTooltipView, ManualSource


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def tooltip_view():
    return FakeTooltipView()


@pytest.fixture
def manual_source():
    return ManualSource()
