from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from xrefsync.config import (
    ConfigurationError,
    MissingConfigurationError,
    env_flag,
    env_list,
    get_database_config,
    get_storage_config,
    require_env_vars,
)


def test_database_uri_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_config().uri == "sqlite:///override.db"


def test_database_uri_defaults_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("XREFSYNC_DATA_DIR", str(tmp_path / "data-dir"))

    uri = get_database_config().uri

    assert uri == f"sqlite+pysqlite:///{(tmp_path / 'data-dir').resolve() / 'xrefsync.db'}"
    assert (tmp_path / "data-dir").is_dir()


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("XREFSYNC_DATA_DIR", str(tmp_path / "custom"))

    assert get_storage_config().resolve_data_dir() == (tmp_path / "custom").resolve()


def test_require_env_vars_treats_blank_as_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XREFSYNC_BLANK", "   ")

    with pytest.raises(MissingConfigurationError, match="XREFSYNC_BLANK"):
        require_env_vars(["XREFSYNC_BLANK"])


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("YES", True), ("1", True), ("false", False), ("no", False), ("0", False)],
)
def test_env_flag_values(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("XREFSYNC_FLAG", raw)

    assert env_flag("XREFSYNC_FLAG") is expected


def test_env_flag_default_and_invalid(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("XREFSYNC_FLAG", raising=False)
    assert env_flag("XREFSYNC_FLAG", default=True) is True

    monkeypatch.setenv("XREFSYNC_FLAG", "maybe")
    with pytest.raises(ConfigurationError):
        env_flag("XREFSYNC_FLAG")


def test_env_list_drops_empty_entries(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XREFSYNC_LIST", " a, ,b ,")

    assert env_list("XREFSYNC_LIST") == ("a", "b")
