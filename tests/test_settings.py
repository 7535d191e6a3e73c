"""
Unit Tests for Theme Settings
"""

import pytest

from queens_ultimate.settings import DEFAULT_THEME, THEMES, load_theme, next_theme, save_theme, settings_path


class TestSettings:
    """Tests for loading and saving the theme choice."""

    def test_load_theme_when_file_missing_then_default(self, tmp_path):
        assert load_theme(tmp_path / "settings.json") == DEFAULT_THEME

    def test_save_theme_then_load_returns_it(self, tmp_path):
        path = tmp_path / "settings.json"
        save_theme("dark", path)
        assert load_theme(path) == "dark"

    def test_load_theme_when_file_corrupt_then_default(self, tmp_path, capsys):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_theme(path) == DEFAULT_THEME
        assert "Couldn't read settings" in capsys.readouterr().out

    def test_load_theme_when_unknown_theme_then_default(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text('{"theme": "neon"}', encoding="utf-8")
        assert load_theme(path) == DEFAULT_THEME

    def test_save_theme_when_unknown_then_raises_error(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown theme"):
            save_theme("neon", tmp_path / "settings.json")

    def test_next_theme_cycles_through_all(self):
        seen = [DEFAULT_THEME]
        for _ in range(len(THEMES)):
            seen.append(next_theme(seen[-1]))
        assert seen[-1] == DEFAULT_THEME
        assert set(seen) == set(THEMES)

    def test_settings_path_when_env_set_later_then_followed(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        monkeypatch.setenv("QUEENS_SETTINGS", str(path))
        assert settings_path() == path
        save_theme("dark")
        assert load_theme() == "dark"
        assert path.exists()

    def test_settings_path_when_env_unset_then_home_dotfile(self, tmp_path, monkeypatch):
        monkeypatch.delenv("QUEENS_SETTINGS", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert settings_path() == tmp_path / ".queens_ultimate.json"
