"""Tests for config discovery and loading."""

from pathlib import Path

import click
import pytest

from dpkgsize.config.discovery import CONFIG_ENV_VAR, find_config, read_config


class TestFindConfig:
    def test_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_found_in_parent(self, tmp_path: Path) -> None:
        cfg = tmp_path / "dpkgsize.toml"
        cfg.write_text("")
        child = tmp_path / "x"
        child.mkdir()
        assert find_config(child) == cfg.resolve()

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        cfg = tmp_path / "elsewhere.toml"
        cfg.write_text("")
        (tmp_path / "dpkgsize.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(cfg))
        assert find_config(tmp_path) == cfg

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "gone.toml"))
        assert find_config(tmp_path) is None


class TestReadConfig:
    def test_sparse_file(self, tmp_path: Path) -> None:
        cfg = tmp_path / "dpkgsize.toml"
        cfg.write_text("[query]\nworkers = 4\n")
        assert read_config(cfg) == {"query": {"workers": 4}}

    def test_empty_file(self, tmp_path: Path) -> None:
        cfg = tmp_path / "dpkgsize.toml"
        cfg.write_text("")
        assert read_config(cfg) == {}

    def test_invalid_toml_names_file(self, tmp_path: Path) -> None:
        cfg = tmp_path / "dpkgsize.toml"
        cfg.write_text("[report\n")
        with pytest.raises(click.ClickException, match="dpkgsize.toml"):
            read_config(cfg)
