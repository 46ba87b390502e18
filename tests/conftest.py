"""Pytest fixtures for eda-sexp tests."""

import pytest

# Board document in canonical layout (one-space indent, blank line kept)
SAMPLE_BOARD = r"""(board 5f8b1f2e-3c4d-4e5f-8a9b-0c1d2e3f4a5b
 (name "Main Board")
 (default_font "newstroke.bene")
 (grid (type lines) (interval 0.635))
 (layers 4)
 (layer "top_cu") (layer "bottom_cu")

 (description "Two-layer\nboard")
 (created 2024-01-02T03:04:05Z)
 (locked false)
)"""


@pytest.fixture
def sample_board_text() -> str:
    """Canonical text of a small board document."""
    return SAMPLE_BOARD


@pytest.fixture
def sample_board_file(tmp_path):
    """Write the sample board to a temporary file."""
    path = tmp_path / "board.lp"
    path.write_text(SAMPLE_BOARD + "\n", encoding="utf-8")
    return path


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with tmp_path as project root and no user config."""
    monkeypatch.setattr("eda_sexp.config.USER_CONFIG_PATH", tmp_path / "no-user-config.toml")
    (tmp_path / ".git").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path
