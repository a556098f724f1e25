"""Tests for the editable container model."""

import json

import pytest

from formats.gamenative.converter import convert_text
from formats.gamenative.editor import (
    EDITOR_TABS,
    TABS_BY_ID,
    ContainerDraft,
    field_options,
    import_container,
    sync_renderer,
)
from formats.gamenative.errors import EditorImportError
from formats.gamenative.fields import Drive, EnvVar


def _spec(tab: str, key: str):
    return next(f for f in TABS_BY_ID[tab].fields if f.key == key)


def _draft(**config) -> ContainerDraft:
    config.setdefault("id", "STEAM_646570")
    return ContainerDraft(config=config, container_name="Slay the Spire")


class TestImportContainer:
    def test_envelope(self) -> None:
        raw = json.dumps({
            "version": 1,
            "exportedFrom": "GameNative",
            "timestamp": 1,
            "containerName": "My Game",
            "config": {"id": "STEAM_1", "name": "internal"},
        })
        draft = import_container(raw)
        assert draft.container_name == "My Game"
        assert draft.config == {"id": "STEAM_1", "name": "internal"}

    def test_bare_config_uses_name(self) -> None:
        draft = import_container('{"id": "x", "name": "Portal"}')
        assert draft.container_name == "Portal"

    def test_bare_config_default_name(self) -> None:
        draft = import_container('{"id": "x"}')
        assert draft.container_name == "Imported Config"

    def test_invalid_json(self) -> None:
        with pytest.raises(EditorImportError, match="Failed to parse JSON."):
            import_container("{nope")

    @pytest.mark.parametrize("raw", [
        "[]",
        '{"name": "no id"}',
        '{"config": {"id": ""}}',
        '"text"',
    ])
    def test_invalid_configuration(self, raw) -> None:
        with pytest.raises(EditorImportError, match="Invalid configuration."):
            import_container(raw)

    def test_syncs_dxwrapper_config(self) -> None:
        draft = import_container('{"id": "x", "dxwrapperConfig": "version=2.3,renderer=gl"}')
        assert draft.config["dxwrapperConfig"] == "version=2.3,renderer=gl,gpuName=gl"

    def test_gpu_name_wins_over_renderer(self) -> None:
        assert sync_renderer("renderer=gl,gpuName=Adreno") == "renderer=Adreno,gpuName=Adreno"


class TestFieldAccess:
    def test_plain_defaults(self) -> None:
        draft = _draft()
        assert draft.get_value(_spec("general", "audioDriver")) == "pulseaudio"
        assert draft.get_value(_spec("general", "showFPS")) is False

    def test_plain_round_trip(self) -> None:
        draft = _draft()
        draft.set_value(_spec("general", "showFPS"), True)
        draft.set_value(_spec("general", "wineVersion"), "9.0")
        assert draft.config["showFPS"] is True
        assert draft.config["wineVersion"] == "9.0"

    def test_nested_toggle_stored_as_digit(self) -> None:
        draft = _draft(containerVariant="bionic")
        spec = _spec("graphics", "syncFrame")
        assert draft.get_value(spec) is False
        draft.set_value(spec, True)
        assert draft.nested("graphicsDriverConfig")["syncFrame"] == "1"
        assert draft.get_value(spec) is True

    def test_nested_toggle_default_on(self) -> None:
        draft = _draft(containerVariant="bionic")
        assert draft.get_value(_spec("graphics", "adrenotoolsTurnip")) is True

    def test_nested_select_keeps_other_keys(self) -> None:
        draft = _draft(graphicsDriverConfig="version=24.1,presentMode=fifo")
        draft.set_value(_spec("graphics", "presentMode"), "mailbox")
        assert draft.config["graphicsDriverConfig"] == "version=24.1,presentMode=mailbox"

    def test_driver_version_mirrors_into_config(self) -> None:
        draft = _draft(graphicsDriverConfig="vulkanVersion=1.3")
        draft.set_value(_spec("graphics", "graphicsDriverVersion"), "25.0")
        assert draft.config["graphicsDriverVersion"] == "25.0"
        assert draft.nested("graphicsDriverConfig")["version"] == "25.0"

    def test_driver_version_falls_back_to_nested(self) -> None:
        draft = _draft(graphicsDriverConfig="version=24.3")
        assert draft.get_value(_spec("graphics", "graphicsDriverVersion")) == "24.3"

    def test_renderer_and_gpu_name_stay_in_sync(self) -> None:
        draft = _draft(dxwrapperConfig="version=2.3,renderer=gl,gpuName=gl")
        draft.set_value(_spec("wine", "gpuName"), "NVIDIA GeForce GTX 480")
        values = draft.nested("dxwrapperConfig")
        assert values["renderer"] == values["gpuName"] == "NVIDIA GeForce GTX 480"
        assert values["version"] == "2.3"

    def test_numeric_select_stores_int(self) -> None:
        draft = _draft()
        draft.set_value(_spec("controller", "dinputMapperType"), "2")
        assert draft.config["dinputMapperType"] == 2

    def test_container_name_field(self) -> None:
        draft = _draft()
        spec = _spec("hidden", "containerName")
        assert draft.get_value(spec) == "Slay the Spire"
        draft.set_value(spec, "Renamed")
        assert draft.container_name == "Renamed"
        assert "containerName" not in draft.config


class TestVisibility:
    def _keys(self, draft: ContainerDraft, tab: str) -> set[str]:
        return {f.key for f in draft.visible_fields(TABS_BY_ID[tab])}

    def test_bionic_only_fields(self) -> None:
        assert "presentMode" in self._keys(_draft(containerVariant="bionic"), "graphics")
        assert "presentMode" not in self._keys(_draft(containerVariant="glibc"), "graphics")

    def test_glibc_turnip_hides_driver_tuning(self) -> None:
        keys = self._keys(_draft(containerVariant="glibc", graphicsDriver="turnip"), "graphics")
        assert "maxDeviceMemory" not in keys
        assert "vulkanVersion" not in keys

    def test_glibc_vortek_shows_tuning(self) -> None:
        keys = self._keys(_draft(containerVariant="glibc", graphicsDriver="vortek"), "graphics")
        assert {"maxDeviceMemory", "vulkanVersion", "imageCacheSize"} <= keys

    def test_dxvk_version_only_for_dxvk(self) -> None:
        assert "version" in self._keys(_draft(dxwrapper="dxvk"), "graphics")
        assert "version" not in self._keys(_draft(dxwrapper="wined3d"), "graphics")

    def test_startup_options_depend_on_variant(self) -> None:
        spec = _spec("advanced", "startupSelection")
        assert len(field_options(spec, {"containerVariant": "glibc"})) == 3
        assert len(field_options(spec, {"containerVariant": "bionic"})) == 2

    def test_driver_options_depend_on_variant(self) -> None:
        spec = _spec("graphics", "graphicsDriver")
        glibc = [v for v, _ in field_options(spec, {"containerVariant": "glibc"})]
        bionic = [v for v, _ in field_options(spec, {})]
        assert "turnip" in glibc
        assert "Wrapper" in bionic

    def test_every_tab_has_unique_id(self) -> None:
        ids = [t.id for t in EDITOR_TABS]
        assert len(ids) == len(set(ids))


class TestPackedLists:
    def test_env_vars(self) -> None:
        draft = _draft(envVars="A=1")
        draft.add_env_var("B", "2")
        assert draft.config["envVars"] == "A=1 B=2"
        draft.remove_env_var(0)
        assert draft.env_vars() == [EnvVar("B", "2")]
        draft.remove_env_var(5)
        assert draft.config["envVars"] == "B=2"

    def test_add_drive_picks_free_letter(self) -> None:
        draft = _draft(drives="C:/aD:/b")
        drive = draft.add_drive()
        assert drive == Drive("A", "/storage/emulated/0/")
        assert draft.config["drives"] == "C:/aD:/bA:/storage/emulated/0/"

    def test_edit_and_remove_drive(self) -> None:
        draft = _draft(drives="D:/aE:/b")
        draft.set_drive_path(1, "/sdcard")
        draft.remove_drive(0)
        assert draft.config["drives"] == "E:/sdcard"

    def test_wincomponents(self) -> None:
        draft = _draft(wincomponents="direct3d=1,directsound=0")
        draft.set_wincomponent("directsound", "1")
        assert draft.wincomponents() == {"direct3d": "1", "directsound": "1"}

    def test_toggle_core_keeps_converted_zero(self) -> None:
        draft = ContainerDraft(config=convert_text("id\nSTEAM_1\ncpuList\n0"))
        assert draft.config["cpuList"] == 0
        draft.toggle_core("cpuList", 1)
        assert draft.config["cpuList"] == "0,1"

    def test_scalar_packed_fields_read_as_empty(self) -> None:
        draft = ContainerDraft(config=convert_text("id\nx\nenvVars\n1\nwincomponents\ntrue"))
        assert draft.env_vars() == []
        assert draft.wincomponents() == {}

    def test_toggle_core(self) -> None:
        draft = _draft(cpuList="0,1,2,3")
        draft.toggle_core("cpuList", 2)
        assert draft.config["cpuList"] == "0,1,3"


class TestExport:
    def test_envelope(self) -> None:
        draft = _draft(showFPS=True)
        data = draft.to_export(timestamp=42).to_dict()
        assert data["exportedFrom"] == "WebEditor"
        assert data["containerName"] == "Slay the Spire"
        assert data["timestamp"] == 42
        assert data["config"] == {"id": "STEAM_646570", "showFPS": True}

    def test_export_is_a_copy(self) -> None:
        draft = _draft(extraData={"a": 1})
        export = draft.to_export(timestamp=1)
        export.config["extraData"]["a"] = 2
        assert draft.config["extraData"] == {"a": 1}

    def test_filename(self) -> None:
        assert _draft().export_filename() == "STEAM_646570_export.json"
        assert ContainerDraft().export_filename() == "config_export.json"
