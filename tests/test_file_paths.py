from datetime import datetime

from swingmetrics.config.app_config import AppPaths
from swingmetrics.dataio.file_paths import default_output_path, session_output_path


def test_session_output_path_is_sanitized_and_timestamped(tmp_path) -> None:
    path = session_output_path("fore hand/#1", tmp_path, now=datetime(2025, 12, 4, 15, 30, 45))
    assert path == tmp_path / "fore_hand_1_20251204_153045.csv"


def test_blank_session_name_falls_back(tmp_path) -> None:
    path = session_output_path("///", tmp_path, now=datetime(2025, 1, 2, 3, 4, 5))
    assert path.name == "session_20250102_030405.csv"


def test_data_root_env_override(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("SWINGMETRICS_DATA_ROOT", str(tmp_path))
    paths = AppPaths()
    assert paths.data_root == tmp_path
    assert paths.recordings == tmp_path / "recordings"
    assert default_output_path() == tmp_path / "data.csv"
