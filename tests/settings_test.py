"""
Tests for AssetLoaderSettings and its project manager.
"""

import json
import unittest

import pytest

from assetlink.project.settings import AssetLoaderSettings, AssetLoaderSettingsManager


class AssetLoaderSettingsTest(unittest.TestCase):
    def test_defaults(self):
        settings = AssetLoaderSettings()
        self.assertIsNone(settings.server_url)
        self.assertIsNone(settings.page_scheme)
        self.assertTrue(settings.prune_runtime_nodes)
        self.assertTrue(settings.placeholder_on_error)

    def test_dict_round_trip(self):
        settings = AssetLoaderSettings(server_url="http://localhost:3000", page_scheme="file")
        self.assertEqual(AssetLoaderSettings.from_dict(settings.to_dict()), settings)

    def test_scheme_normalized(self):
        self.assertEqual(AssetLoaderSettings.from_dict({"page_scheme": "HTTPS:"}).page_scheme, "https")
        self.assertIsNone(AssetLoaderSettings.from_dict({"page_scheme": ":"}).page_scheme)
        self.assertIsNone(AssetLoaderSettings.from_dict({"page_scheme": 5}).page_scheme)


@pytest.fixture
def manager():
    return AssetLoaderSettingsManager()


def test_missing_file_gives_defaults(manager, tmp_path):
    manager.set_project_path(tmp_path)
    assert manager.settings == AssetLoaderSettings()


def test_loads_project_file(manager, tmp_path):
    settings_dir = tmp_path / "project_settings"
    settings_dir.mkdir()
    (settings_dir / "asset_loader.json").write_text(
        json.dumps({"server_url": "http://assets.local", "prune_runtime_nodes": False})
    )

    manager.set_project_path(tmp_path)

    assert manager.settings.server_url == "http://assets.local"
    assert manager.settings.prune_runtime_nodes is False


def test_broken_file_gives_defaults(manager, tmp_path):
    settings_dir = tmp_path / "project_settings"
    settings_dir.mkdir()
    (settings_dir / "asset_loader.json").write_text("{oops")

    manager.set_project_path(tmp_path)

    assert manager.settings == AssetLoaderSettings()


def test_save_and_reload(manager, tmp_path):
    manager.set_project_path(tmp_path)
    manager.update(page_scheme="file", placeholder_on_error=False)

    assert manager.save()

    other = AssetLoaderSettingsManager()
    other.set_project_path(tmp_path)
    assert other.settings.page_scheme == "file"
    assert other.settings.placeholder_on_error is False


def test_save_without_project(manager):
    assert manager.save() is False


def test_update_rejects_unknown_key(manager):
    with pytest.raises(KeyError):
        manager.update(colour="red")


def test_instance_is_shared():
    assert AssetLoaderSettingsManager.instance() is AssetLoaderSettingsManager.instance()
