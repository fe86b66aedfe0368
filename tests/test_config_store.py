"""
test_config_store.py: Unit tests for core/config_store.py
"""

import json

import pytest
from pydantic import ValidationError

from route_console.core import ApiConfig, ConfigStore
from route_console.core.config_store import CONFIG_KEY


class TestApiConfig:
    def test_accepts_camel_case_and_snake_case(self):
        a = ApiConfig.model_validate({"baseUrl": "http://x/apisix/admin", "apiKey": "k"})
        b = ApiConfig(base_url="http://x/apisix/admin", api_key="k")
        assert a == b

    @pytest.mark.parametrize("base_url,api_key", [("", "key"), ("http://x", ""), ("   ", "key")])
    def test_rejects_empty_fields(self, base_url, api_key):
        with pytest.raises(ValidationError):
            ApiConfig(base_url=base_url, api_key=api_key)

    def test_masked_hides_the_key(self):
        config = ApiConfig(base_url="http://x", api_key="edd1c9f034335f136f87ad84b625c8f1")
        masked = config.masked()
        assert masked["api_key"] == "****c8f1"
        assert "edd1c9f0" not in json.dumps(masked)


class TestConfigStore:
    def test_missing_file_loads_as_none(self, tmp_path):
        store = ConfigStore(tmp_path / "config.json")
        assert store.load() is None
        assert not store.is_configured

    def test_save_then_reload(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        config = ApiConfig(base_url="http://127.0.0.1:9180/apisix/admin", api_key="secret")

        ConfigStore(path).save(config)

        assert ConfigStore(path).load() == config

    def test_record_stored_under_fixed_key(self, tmp_path):
        path = tmp_path / "config.json"
        ConfigStore(path).save(ApiConfig(base_url="http://gw/apisix/admin", api_key="k1"))

        record = json.loads(path.read_text())
        assert record == {CONFIG_KEY: {"baseUrl": "http://gw/apisix/admin", "apiKey": "k1"}}

    def test_save_replaces_previous_value(self, tmp_path):
        store = ConfigStore(tmp_path / "config.json")
        store.save(ApiConfig(base_url="http://old", api_key="old"))
        store.save(ApiConfig(base_url="http://new", api_key="new"))

        assert store.load().base_url == "http://new"
        assert ConfigStore(tmp_path / "config.json").load().api_key == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["config.json"]

    def test_corrupt_file_loads_as_none(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("not valid json}")
        assert ConfigStore(path).load() is None

    def test_incomplete_record_loads_as_none(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({CONFIG_KEY: {"baseUrl": "http://x", "apiKey": ""}}))
        assert ConfigStore(path).load() is None

    def test_failed_write_keeps_in_memory_value(self, tmp_path, monkeypatch):
        store = ConfigStore(tmp_path / "config.json")
        first = ApiConfig(base_url="http://first", api_key="k")
        store.save(first)

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("route_console.core.config_store.os.replace", broken_replace)
        with pytest.raises(OSError):
            store.save(ApiConfig(base_url="http://second", api_key="k"))

        assert store.load() == first
        assert ConfigStore(tmp_path / "config.json").load() == first

    def test_memory_only_store(self):
        store = ConfigStore()
        config = ApiConfig(base_url="http://x", api_key="k")
        store.save(config)
        assert store.load() is config
