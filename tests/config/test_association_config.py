from __future__ import annotations

from pathlib import Path

import pytest

from xrefsync.config import (
    DEFAULT_IGNORED_ENTITY_TYPES,
    AssociationLoadConfig,
    ConfigurationError,
    MissingConfigurationError,
    get_association_load_config,
)

_VARIABLES = (
    "XREFSYNC_TARGET_TYPE",
    "XREFSYNC_JOB_STREAM",
    "XREFSYNC_REFERENCE_KEY",
    "XREFSYNC_SINGLE_NAMESPACES",
    "XREFSYNC_MULTIPLE_NAMESPACES",
    "XREFSYNC_LINKABLE_TYPE",
    "XREFSYNC_IGNORED_TYPES",
    "XREFSYNC_DELETE_RELOAD",
    "XREFSYNC_INPUT_FILE",
    "XREFSYNC_PRIVATE_IDS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARIABLES:
        monkeypatch.delenv(name, raising=False)


def _set_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XREFSYNC_TARGET_TYPE", "Marker")
    monkeypatch.setenv("XREFSYNC_JOB_STREAM", "genbank_assocload")
    monkeypatch.setenv("XREFSYNC_REFERENCE_KEY", "61025")


def test_minimal_configuration_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required(monkeypatch)

    config = get_association_load_config()

    assert config.target_type == "Marker"
    assert config.job_stream == "genbank_assocload"
    assert config.reference_key == 61025
    assert config.single_namespaces == ()
    assert config.multiple_namespaces == ()
    assert config.linkable_type is None
    assert config.ignored_entity_types == DEFAULT_IGNORED_ENTITY_TYPES
    assert config.delete_reload is False
    assert config.input_file is None
    assert config.private_identifiers is False


def test_full_configuration(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _set_required(monkeypatch)
    input_file = tmp_path / "associations.txt"
    monkeypatch.setenv("XREFSYNC_SINGLE_NAMESPACES", "Sequence DB, RefSeq")
    monkeypatch.setenv("XREFSYNC_MULTIPLE_NAMESPACES", "UniGene,")
    monkeypatch.setenv("XREFSYNC_LINKABLE_TYPE", "Molecular Segment")
    monkeypatch.setenv("XREFSYNC_IGNORED_TYPES", "21")
    monkeypatch.setenv("XREFSYNC_DELETE_RELOAD", "yes")
    monkeypatch.setenv("XREFSYNC_INPUT_FILE", str(input_file))
    monkeypatch.setenv("XREFSYNC_PRIVATE_IDS", "1")

    config = get_association_load_config()

    assert config.single_namespaces == ("Sequence DB", "RefSeq")
    assert config.multiple_namespaces == ("UniGene",)
    assert config.linkable_type == "Molecular Segment"
    assert config.ignored_entity_types == (21,)
    assert config.delete_reload is True
    assert config.input_file == input_file
    assert config.private_identifiers is True


def test_blank_ignored_types_ignores_nothing(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required(monkeypatch)
    monkeypatch.setenv("XREFSYNC_IGNORED_TYPES", " ")

    config = get_association_load_config()

    assert config.ignored_entity_types == ()


def test_missing_required_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XREFSYNC_TARGET_TYPE", "Marker")

    with pytest.raises(MissingConfigurationError) as excinfo:
        get_association_load_config()

    assert "XREFSYNC_JOB_STREAM" in str(excinfo.value)
    assert "XREFSYNC_REFERENCE_KEY" in str(excinfo.value)


def test_invalid_reference_key(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required(monkeypatch)
    monkeypatch.setenv("XREFSYNC_REFERENCE_KEY", "J:61025")

    with pytest.raises(ConfigurationError, match="XREFSYNC_REFERENCE_KEY"):
        get_association_load_config()


def test_invalid_boolean(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required(monkeypatch)
    monkeypatch.setenv("XREFSYNC_DELETE_RELOAD", "sometimes")

    with pytest.raises(ConfigurationError, match="XREFSYNC_DELETE_RELOAD"):
        get_association_load_config()


def test_namespace_in_both_lists_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="RefSeq"):
        AssociationLoadConfig(
            target_type="Marker",
            job_stream="job",
            reference_key=1,
            single_namespaces=("RefSeq",),
            multiple_namespaces=("RefSeq", "UniGene"),
        )


def test_with_overrides_keeps_unset_values() -> None:
    config = AssociationLoadConfig(
        target_type="Marker",
        job_stream="job",
        reference_key=1,
        delete_reload=True,
        input_file=Path("original.txt"),
    )

    unchanged = config.with_overrides()
    overridden = config.with_overrides(input_file=Path("other.txt"), delete_reload=False)

    assert unchanged == config
    assert overridden.input_file == Path("other.txt")
    assert overridden.delete_reload is False
