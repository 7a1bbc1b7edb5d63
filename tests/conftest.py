"""Shared pytest fixtures for bankgen tests."""

import os

import pytest

import fake_studio
from fake_studio import write_bank


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep BANKGEN_* variables from the outer environment out of tests."""
    for key in list(os.environ):
        if key.startswith("BANKGEN_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fake_systems():
    """Systems created by the fake backend during the test.

    Yields:
        list: FakeStudioSystem instances, oldest first.
    """
    fake_studio.CREATED.clear()
    yield fake_studio.CREATED
    fake_studio.CREATED.clear()


@pytest.fixture
def project(tmp_path):
    """A project root with a typical FMOD desktop build.

    Build/Desktop holds a strings bank, a master bank with events, buses
    and a snapshot, and a music bank.

    Yields:
        Path: Resolved project root.
    """
    root = tmp_path.resolve() / "game"
    desktop = root / "Build" / "Desktop"
    write_bank(desktop / "Master.strings.bank")
    write_bank(
        desktop / "Master.bank",
        events=[
            "event:/Weapons/Fire",
            "event:/UI/Click",
            {"path": "snapshot:/Underwater", "snapshot": True},
            {"path": "event:/Mixer/Pause", "snapshot": True},
        ],
        buses=["bus:/", "bus:/Music", "bus:/SFX"],
    )
    write_bank(desktop / "Music.bank", events=["event:/Music/Level 01", "event:/weapons/fire"])
    yield root
