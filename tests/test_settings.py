"""Tests for settings persistence."""

import json
from datetime import date

from rollcall.analytics.periods import SYSTEM_START_DATE
from rollcall.settings import Settings, load_settings, save_settings


class TestLoadSave:

    def test_defaults_when_missing(self, tmp_path):
        settings = load_settings(tmp_path / "settings.json")
        assert settings == Settings()
        assert settings.required_weekdays == ["Monday", "Tuesday", "Thursday", "Friday"]

    def test_roundtrip(self, tmp_path):
        path = tmp_path / "nested" / "settings.json"
        save_settings(Settings(required_weekdays=["Wednesday"], trend_days=14), path)
        loaded = load_settings(path)
        assert loaded.required_weekdays == ["Wednesday"]
        assert loaded.trend_days == 14

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"trend_days": 7, "theme": "dark"}))
        assert load_settings(path).trend_days == 7

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        assert load_settings(path) == Settings()

    def test_non_object_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2, 3]")
        assert load_settings(path) == Settings()


class TestDerivedValues:

    def test_schedule(self):
        schedule = Settings(required_weekdays=["Monday", "Friday"]).schedule()
        assert schedule.weekdays == [0, 4]
        assert schedule.expected_sessions("week") == 2

    def test_system_start(self):
        assert Settings(system_start_date="2023-09-01").system_start() == date(2023, 9, 1)

    def test_invalid_system_start_falls_back(self):
        assert Settings(system_start_date="soon").system_start() == SYSTEM_START_DATE


class TestValidation:

    def _load(self, tmp_path, **values):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps(values))
        return load_settings(path)

    def test_unknown_weekday_falls_back(self, tmp_path):
        settings = self._load(tmp_path, required_weekdays=["Monday", "Funday"], trend_days=7)
        assert settings.required_weekdays == Settings().required_weekdays
        assert settings.trend_days == 7

    def test_weekday_string_instead_of_list(self, tmp_path):
        settings = self._load(tmp_path, required_weekdays="Monday")
        assert settings.required_weekdays == Settings().required_weekdays

    def test_bad_log_level_falls_back(self, tmp_path):
        assert self._load(tmp_path, log_level="LOUD").log_level == "WARNING"
        assert self._load(tmp_path, log_level=10).log_level == "WARNING"

    def test_valid_log_level_kept(self, tmp_path):
        assert self._load(tmp_path, log_level="debug").log_level == "debug"

    def test_bad_period_and_trend(self, tmp_path):
        settings = self._load(tmp_path, default_period="fortnight", trend_days=0)
        assert settings.default_period == "week"
        assert settings.trend_days == 30

    def test_valid_values_kept(self, tmp_path):
        settings = self._load(
            tmp_path, required_weekdays=["wed", "sat"], default_period="month", log_level="INFO",
        )
        assert settings.schedule().weekdays == [2, 5]
        assert settings.default_period == "month"
        assert settings.log_level == "INFO"

    def test_fallback_is_logged(self, tmp_path, caplog):
        with caplog.at_level("WARNING", logger="rollcall.settings"):
            self._load(tmp_path, log_level="LOUD")
        assert "log_level" in caplog.text
