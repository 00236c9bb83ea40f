"""
Shared pytest fixtures for bracket engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


def player_names(count):
    """Names 'Player 1'..'Player N' in seed order."""
    return [f"Player {i + 1}" for i in range(count)]


@pytest.fixture
def five_players():
    return player_names(5)


@pytest.fixture
def eight_players():
    return player_names(8)


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the API's tournament store at a temporary directory."""
    import app as app_module

    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setattr(app_module, 'DATA_DIR', str(data_dir))
    monkeypatch.setattr(app_module, 'GAME_MODES_FILE', str(data_dir / "game_modes.yaml"))
    return str(data_dir)


@pytest.fixture
def client(temp_data_dir):
    """Create a test client backed by a temporary data directory."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client
