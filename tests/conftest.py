"""Shared pytest fixtures."""

from pathlib import Path

import pytest

from fixtures import SAMPLE_CONFIG, file_resource


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep tests away from the real ~/.parashift and PP_* variables."""
    monkeypatch.delenv("PP_CONFIG", raising=False)
    monkeypatch.delenv("PP_PROFILE", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Profiles file with a non-default 'a' and a default 'b'."""
    path = tmp_path / "pp.yaml"
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def sample_files_payload() -> dict:
    """Two page images interleaved with the original PDF and a thumbnail."""
    return {
        "data": [
            file_resource("f1", "color_jpeg", "image/jpeg", "https://files.parashift.test/p0.jpg"),
            file_resource("f2", "input_file", "application/pdf", "https://files.parashift.test/in.pdf"),
            file_resource("f3", "thumbnail", "image/png", "https://files.parashift.test/t.png"),
            file_resource("f4", "color_jpeg", "image/jpeg", "https://files.parashift.test/p1.jpg"),
        ]
    }
