"""Tests for PluginManager — registration, hook relay, and field collection."""

from __future__ import annotations

import logging

import pluggy
import pytest

from profilectl.domain.fields import FieldDefinition
from profilectl.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("profilectl")


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    @hookimpl
    def post_user_create(self, user_id: str, email: str) -> None:
        pass


class _ModelFieldsPlugin:
    @hookimpl
    def register_profile_fields(self) -> list[FieldDefinition]:
        return [FieldDefinition(name="nickname", max_length=20)]


class _DictFieldsPlugin:
    @hookimpl
    def register_profile_fields(self) -> list[dict[str, object]]:
        return [
            {"name": "team", "kind": "enum", "choices": ["red", "blue"]},
            {"name": "email"},
            {"name": "broken", "kind": "enum"},
        ]


class _ExplodingFieldsPlugin:
    @hookimpl
    def register_profile_fields(self) -> list[FieldDefinition]:
        raise RuntimeError("no fields for you")


class _RecordingPlugin:
    def __init__(self) -> None:
        self.updates: list[tuple[str, list[str], bool]] = []

    @hookimpl
    def post_profile_update(
        self, user_id: str, fields_changed: list[str], email_changed: bool
    ) -> None:
        self.updates.append((user_id, fields_changed, email_changed))


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "register_profile_fields")
        assert hasattr(pm.hook, "post_user_create")
        assert hasattr(pm.hook, "post_profile_update")

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin)
        pm.unregister(plugin)
        assert pm.get_plugins() == []

    def test_is_loaded_after_discovery(self) -> None:
        pm = PluginManager()
        assert pm.is_loaded is False
        pm.discover_and_load()
        assert pm.is_loaded is True

    def test_lifecycle_hook_dispatch(self) -> None:
        pm = PluginManager()
        recorder = _RecordingPlugin()
        pm.register_plugin(recorder)
        pm.hook.post_profile_update(
            user_id="usr_1", fields_changed=["email"], email_changed=True
        )
        assert recorder.updates == [("usr_1", ["email"], True)]


class TestCollectFieldDefinitions:
    def test_no_plugins(self) -> None:
        assert PluginManager().collect_field_definitions() == []

    def test_model_definitions(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_ModelFieldsPlugin())
        definitions = pm.collect_field_definitions()
        assert [d.name for d in definitions] == ["nickname"]

    def test_dict_definitions_validated(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_DictFieldsPlugin())
        with caplog.at_level(logging.WARNING, logger="profilectl"):
            definitions = pm.collect_field_definitions()
        assert [d.name for d in definitions] == ["team"]
        assert definitions[0].choices == ("red", "blue")
        assert caplog.text.count("Skipping invalid field definition") == 2

    def test_failing_plugin_does_not_hide_others(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_ExplodingFieldsPlugin())
        pm.register_plugin(_ModelFieldsPlugin())
        assert [d.name for d in pm.collect_field_definitions()] == ["nickname"]
