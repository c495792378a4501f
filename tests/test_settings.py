from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from common.config import VisualizerSettings, load_settings

_ENV_KEYS = ("SMVIZ_CONFIG", "SMVIZ_IMPL_SUFFIX", "SMVIZ_FACTORY_FIELD", "SMVIZ_PLUGINS", "SMVIZ_LOG_LEVEL")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    settings = load_settings()
    assert settings == VisualizerSettings()
    assert settings.impl_suffix == "Impl"
    assert settings.factory_field == "state_machine_factory"
    assert settings.plugins == ()


def test_yaml_file(tmp_path: Path) -> None:
    config = tmp_path / "smviz.yaml"
    config.write_text("impl_suffix: Service\nplugins:\n  - app.machines\n  - app.more\n", encoding="utf-8")
    settings = load_settings(config)
    assert settings.impl_suffix == "Service"
    assert settings.plugins == ("app.machines", "app.more")


def test_config_path_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "smviz.yaml"
    config.write_text("factory_field: transitions\n", encoding="utf-8")
    monkeypatch.setenv("SMVIZ_CONFIG", str(config))
    assert load_settings().factory_field == "transitions"


def test_precedence(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "smviz.yaml"
    config.write_text("impl_suffix: FromFile\nfactory_field: fromFile\n", encoding="utf-8")
    monkeypatch.setenv("SMVIZ_IMPL_SUFFIX", "FromEnv")
    monkeypatch.setenv("SMVIZ_PLUGINS", "a.b, ,c.d")
    settings = load_settings(config, impl_suffix="FromFlag", log_level=None)
    assert settings.impl_suffix == "FromFlag"
    assert settings.factory_field == "fromFile"
    assert settings.plugins == ("a.b", "c.d")
    assert settings.log_level is None

    assert load_settings(config).impl_suffix == "FromEnv"


def test_empty_suffix_disables_stripping(tmp_path: Path) -> None:
    config = tmp_path / "smviz.yaml"
    config.write_text("impl_suffix:\n", encoding="utf-8")
    assert load_settings(config).impl_suffix == ""


def test_rejects_non_mapping(tmp_path: Path) -> None:
    config = tmp_path / "smviz.yaml"
    config.write_text("- impl_suffix\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must contain a mapping"):
        load_settings(config)


def test_rejects_unknown_keys(tmp_path: Path) -> None:
    config = tmp_path / "smviz.yaml"
    config.write_text("impl_sufix: Impl\n", encoding="utf-8")
    with pytest.raises(ValueError, match="impl_sufix"):
        load_settings(config)
