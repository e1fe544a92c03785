"""Shared fixtures for laserstrike tests."""

import pytest

from laserstrike.api.config import ProcessorSettings, TargetSpec
from laserstrike.api.types import PolygonCandidate
from laserstrike.detect.laser import LaserDetector

from tests.helpers import SHEET, FakeVision


@pytest.fixture
def settings():
    return ProcessorSettings()


@pytest.fixture
def target():
    return TargetSpec()


@pytest.fixture
def sheet_candidate():
    return PolygonCandidate(vertices=tuple(SHEET), area=400.0 * 300.0)


@pytest.fixture
def fake_vision(sheet_candidate):
    return FakeVision([sheet_candidate])


@pytest.fixture
def detector(settings):
    return LaserDetector(settings)
