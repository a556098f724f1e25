"""Editable container model behind the tabbed config editor.

:func:`import_container` turns pasted JSON (an export envelope or a bare
config) into a :class:`ContainerDraft`.  The draft owns every mutation the
editor can make, including the packed ``key=value`` sub-fields, so the Qt
form only reads and writes through :meth:`ContainerDraft.get_value` and
:meth:`ContainerDraft.set_value`.

The form layout itself is declared in :data:`EDITOR_TABS`.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Union

from .errors import EditorImportError
from .export import build_export
from .fields import (
    BOX_PRESETS,
    CONTAINER_VARIANTS,
    DEFAULT_DRIVE_PATH,
    FEXCORE_PRESETS,
    GRAPHICS_DRIVERS,
    Drive,
    EnvVar,
    next_drive_letter,
    parse_drives,
    parse_env,
    parse_kv,
    stringify_drives,
    stringify_env,
    stringify_kv,
    toggle_core,
)
from .models import DEFAULT_CONTAINER_NAME, EXPORTED_FROM_EDITOR, ExportData

log = logging.getLogger(__name__)

CONTAINER_NAME_KEY = "containerName"

Options = Union[tuple, Callable[[dict], list]]


@dataclass(frozen=True)
class FieldSpec:
    """One editable row of the editor form.

    *kind* is ``text``, ``toggle``, ``select`` or ``cores``.  When *parent*
    is set the value lives inside that packed ``key=value`` config field
    and toggles are stored as ``"1"``/``"0"``.
    """
    key: str
    label: str
    kind: str = "text"
    options: Options = ()
    default: Any = ""
    parent: str | None = None
    numeric: bool = False
    description: str = ""
    placeholder: str = ""
    when: Callable[[dict], bool] | None = None


@dataclass(frozen=True)
class TabSpec:
    id: str
    label: str
    description: str
    fields: tuple[FieldSpec, ...] = ()


def _variant(name: str) -> Callable[[dict], bool]:
    return lambda cfg: cfg.get("containerVariant") == name


def _driver_tuning_visible(cfg: dict) -> bool:
    return not (
        cfg.get("containerVariant") == "glibc"
        and cfg.get("graphicsDriver") in ("turnip", "virgl")
    )


def _glibc_tuning_visible(cfg: dict) -> bool:
    return cfg.get("containerVariant") == "glibc" and _driver_tuning_visible(cfg)


def _graphics_driver_options(cfg: dict) -> list:
    variant = cfg.get("containerVariant")
    return GRAPHICS_DRIVERS["glibc" if variant == "glibc" else "bionic"]


def _startup_options(cfg: dict) -> list:
    options = [
        (0, "Normal (Load all services)"),
        (1, "Essential (Load only essential services)"),
        (2, "Aggressive (Stop services on startup)"),
    ]
    if cfg.get("containerVariant") != "glibc":
        options = options[:2]
    return options


def _plain(*values: str) -> tuple:
    return tuple((v, v) for v in values)


_GDC = "graphicsDriverConfig"
_DXC = "dxwrapperConfig"

EDITOR_TABS: tuple[TabSpec, ...] = (
    TabSpec("general", "General", "Container identity and basic runtime.", (
        FieldSpec("containerVariant", "Container Variant", "select", _plain(*CONTAINER_VARIANTS)),
        FieldSpec("wineVersion", "Wine Version"),
        FieldSpec("executablePath", "Executable Path", placeholder="e.g. SlayTheSpire.exe"),
        FieldSpec("execArgs", "Exec Arguments", placeholder="-windowed -skipintro"),
        FieldSpec("language", "Language"),
        FieldSpec("screenSize", "Screen Size"),
        FieldSpec("audioDriver", "Audio Driver", "select",
                  _plain("pulseaudio", "alsa", "disabled"), default="pulseaudio"),
        FieldSpec("showFPS", "Show FPS", "toggle", default=False),
        FieldSpec("forceDlc", "Force DLC", "toggle", default=False),
        FieldSpec("useLegacyDRM", "Use Legacy DRM", "toggle", default=False),
        FieldSpec("launchRealSteam", "Launch Steam Client (Beta)", "toggle", default=False),
        FieldSpec("steamType", "Steam Type", "select",
                  _plain("normal", "light", "ultralight"), default="normal"),
    )),
    TabSpec("graphics", "Graphics", "Drivers, layers, and visual tweaks.", (
        FieldSpec("graphicsDriver", "Graphics Driver", "select", _graphics_driver_options),
        FieldSpec("graphicsDriverVersion", "Driver Version"),
        FieldSpec("dxwrapper", "DX Wrapper"),
        FieldSpec("version", "DXVK Version", parent=_DXC,
                  when=lambda cfg: cfg.get("dxwrapper") == "dxvk"),
        FieldSpec("vulkanVersion", "Vulkan Version", "select",
                  _plain("1.0", "1.1", "1.2", "1.3"), default="1.3",
                  parent=_GDC, when=_glibc_tuning_visible),
        FieldSpec("exposedDeviceExtensions", "Exposed Extensions", default="all",
                  parent=_GDC, when=_driver_tuning_visible),
        FieldSpec("imageCacheSize", "Image Cache Size", "select",
                  _plain("64", "128", "256", "512"), default="256",
                  parent=_GDC, when=_glibc_tuning_visible),
        FieldSpec("maxDeviceMemory", "Max Device Memory", "select",
                  (("0", "Unlimited"),) + _plain("512", "1024", "2048", "4096", "8192"),
                  default="0", parent=_GDC, when=_driver_tuning_visible),
        FieldSpec("adrenotoolsTurnip", "Adrenotools Turnip", "toggle", default="1",
                  parent=_GDC, when=_variant("bionic")),
        FieldSpec("presentMode", "Present Modes", "select",
                  _plain("Never", "mailbox", "Normal", "fifo", "Always", "immediate", "relaxed"),
                  default="mailbox", parent=_GDC, when=_variant("bionic")),
        FieldSpec("resourceType", "Memory Resource", "select",
                  (("ato", "auto"),) + _plain("dmabuf", "ahb", "opaque"),
                  default="ato", parent=_GDC, when=_variant("bionic")),
        FieldSpec("bcnEmulation", "BCn Emulation", "select",
                  _plain("none", "partial", "full", "auto"), default="auto",
                  parent=_GDC, when=_variant("bionic")),
        FieldSpec("bcnEmulationType", "BCn Emulation Type", "select",
                  _plain("software"), default="software",
                  parent=_GDC, when=_variant("bionic")),
        FieldSpec("bcnEmulationCache", "BCn Emulation Cache", "toggle", default="0",
                  parent=_GDC, when=_variant("bionic")),
        FieldSpec("disablePresentWait", "Disable present_wait", "toggle", default="0",
                  parent=_GDC, when=_variant("bionic")),
        FieldSpec("syncFrame", "Sync Every Frame", "toggle", default="0",
                  parent=_GDC, when=_variant("bionic")),
        FieldSpec("sharpnessEffect", "Sharpness Boost", "select",
                  (("None", "None"), ("CAS", "CAS - Clear/Natural"), ("DLS", "DLS - Extra Sharp")),
                  default="None", when=_variant("bionic")),
        FieldSpec("useDRI3", "Use DRI3", "toggle", default=False),
    )),
    TabSpec("emulation", "Emulation", "Translation engines and presets.", (
        FieldSpec("fexcoreVersion", "FEXCore Version", when=_variant("bionic")),
        FieldSpec("emulator", "32-bit Emulator", "select",
                  _plain("FEXCore", "Box64"), when=_variant("bionic")),
        FieldSpec("box64Version", "Box64 Version"),
        FieldSpec("box64Preset", "Box64 Preset", "select", tuple(BOX_PRESETS)),
        FieldSpec("fexcorePreset", "FEXCore Preset", "select", tuple(FEXCORE_PRESETS),
                  when=_variant("bionic")),
    )),
    TabSpec("controller", "Controller", "Input APIs and compatibility.", (
        FieldSpec("sdlControllerAPI", "SDL Controller API", "toggle", default=False),
        FieldSpec("enableXInput", "Enable XInput", "toggle", default=False),
        FieldSpec("enableDInput", "Enable DirectInput", "toggle", default=False),
        FieldSpec("dinputMapperType", "DInput Mapper", "select",
                  ((1, "Standard"), (2, "XInput Mapper")), default=1, numeric=True),
        FieldSpec("disableMouseInput", "Disable Mouse", "toggle", default=False),
        FieldSpec("touchscreenMode", "Touchscreen Mode", "toggle", default=False),
    )),
    TabSpec("wine", "Wine", "Registry and hardware spoofing.", (
        FieldSpec("renderer", "Renderer", parent=_DXC),
        FieldSpec("gpuName", "GPU Name", parent=_DXC),
        FieldSpec("offScreenRenderingMode", "Offscreen Mode", "select",
                  _plain("fbo", "backbuffer"), default="fbo"),
        FieldSpec("videoMemorySize", "Video Memory", "select",
                  _plain("32", "64", "128", "256", "512", "1024", "2048", "4096",
                         "6144", "8192", "10240", "12288"), default="2048"),
        FieldSpec("csmt", "Enable CSMT", "toggle", default=False),
        FieldSpec("strictShaderMath", "Strict Shader Math", "toggle", default=False),
        FieldSpec("mouseWarpOverride", "Mouse Warp", "select",
                  _plain("enable", "disable", "force"), default="disable"),
    )),
    TabSpec("components", "Win Components", "Windows DLL implementation overrides."),
    TabSpec("environment", "Environment", "System-level environment variables."),
    TabSpec("drives", "Drives", "Android-to-Windows drive mapping."),
    TabSpec("advanced", "Advanced", "CPU affinity and startup modes.", (
        FieldSpec("startupSelection", "Startup Selection", "select",
                  _startup_options, default=0, numeric=True),
        FieldSpec("cpuList", "Affinity (64-bit)", "cores"),
        FieldSpec("cpuListWoW64", "Affinity (WoW64)", "cores"),
    )),
    TabSpec("hidden", "Hidden", "Manage identifiers and specialized flags.", (
        FieldSpec(CONTAINER_NAME_KEY, "Container Name", placeholder="e.g. Imported Config",
                  description="Display name for this container configuration."),
        FieldSpec("id", "Container Identifier (ID)",
                  description="Unique internal ID used for file system paths and reference."),
        FieldSpec("name", "Internal Profile Name",
                  description="Secondary internal name identifier used by the engine."),
        FieldSpec("midiSoundFont", "MIDI SoundFont Path"),
        FieldSpec("allowSteamUpdates", "Allow Steam Client Updates", "toggle", default=False),
        FieldSpec("sharpnessDenoise", "Sharpness Denoise Level", "select",
                  _plain("0", "25", "50", "75", "100"), default="100"),
        FieldSpec("box86Version", "Box86 Version"),
        FieldSpec("box86Preset", "Box86 Preset", "select", tuple(BOX_PRESETS[:4]),
                  default="COMPATIBILITY"),
        FieldSpec("wow64Mode", "Enable WoW64", "toggle", default=False),
    )),
)

TABS_BY_ID: dict[str, TabSpec] = {tab.id: tab for tab in EDITOR_TABS}


def field_options(spec: FieldSpec, config: dict) -> list:
    if callable(spec.options):
        return list(spec.options(config))
    return list(spec.options)


def sync_renderer(dxwrapper_config: str | None) -> str:
    """Make ``renderer`` and ``gpuName`` agree, preferring ``gpuName``."""
    values = parse_kv(dxwrapper_config)
    synced = values.get("gpuName") or values.get("renderer") or ""
    values["renderer"] = synced
    values["gpuName"] = synced
    return stringify_kv(values)


@dataclass
class ContainerDraft:
    """A config being edited plus the container name shown on export."""
    config: dict[str, Any] = field(default_factory=dict)
    container_name: str = DEFAULT_CONTAINER_NAME

    # ── Generic field access ─────────────────────────────────────────

    def update_field(self, key: str, value: Any) -> None:
        if key == CONTAINER_NAME_KEY:
            self.container_name = str(value)
        else:
            self.config[key] = value

    def update_nested(self, root_key: str, sub_key: str, value: str) -> None:
        values = parse_kv(self.config.get(root_key))
        values[sub_key] = value
        self.config[root_key] = stringify_kv(values)

    def nested(self, root_key: str) -> dict[str, str]:
        return parse_kv(self.config.get(root_key))

    def visible_fields(self, tab: TabSpec) -> list[FieldSpec]:
        return [f for f in tab.fields if f.when is None or f.when(self.config)]

    def get_value(self, spec: FieldSpec) -> Any:
        if spec.key == CONTAINER_NAME_KEY:
            return self.container_name
        if spec.parent:
            raw = self.nested(spec.parent).get(spec.key)
            if spec.kind == "toggle":
                return (raw if raw is not None else spec.default) == "1"
            return raw or spec.default
        if spec.key == "graphicsDriverVersion":
            return (
                self.config.get("graphicsDriverVersion")
                or self.nested(_GDC).get("version")
                or ""
            )
        value = self.config.get(spec.key)
        if spec.kind == "toggle":
            return bool(value) if value is not None else bool(spec.default)
        if value is None or value == "":
            return spec.default
        return value

    def set_value(self, spec: FieldSpec, value: Any) -> None:
        if spec.parent == _DXC and spec.key in ("renderer", "gpuName"):
            self.set_renderer(str(value))
            return
        if spec.parent:
            if spec.kind == "toggle":
                value = "1" if value else "0"
            self.update_nested(spec.parent, spec.key, str(value))
            return
        if spec.numeric:
            value = int(value)
        self.update_field(spec.key, value)
        if spec.key == "graphicsDriverVersion":
            self.update_nested(_GDC, "version", str(value))

    def set_renderer(self, value: str) -> None:
        values = self.nested(_DXC)
        values["renderer"] = value
        values["gpuName"] = value
        self.config[_DXC] = stringify_kv(values)

    # ── Packed list fields ───────────────────────────────────────────

    def env_vars(self) -> list[EnvVar]:
        return parse_env(self.config.get("envVars"))

    def set_env_vars(self, env: list[EnvVar]) -> None:
        self.config["envVars"] = stringify_env(env)

    def add_env_var(self, name: str, value: str = "") -> None:
        env = self.env_vars()
        env.append(EnvVar(name=name, value=value))
        self.set_env_vars(env)

    def remove_env_var(self, index: int) -> None:
        env = self.env_vars()
        if 0 <= index < len(env):
            env.pop(index)
            self.set_env_vars(env)

    def drives(self) -> list[Drive]:
        return parse_drives(self.config.get("drives"))

    def add_drive(self, path: str = DEFAULT_DRIVE_PATH) -> Drive:
        drives = self.drives()
        drive = Drive(letter=next_drive_letter(drives), path=path)
        drives.append(drive)
        self.config["drives"] = stringify_drives(drives)
        return drive

    def set_drive_path(self, index: int, path: str) -> None:
        drives = self.drives()
        if 0 <= index < len(drives):
            drives[index].path = path
            self.config["drives"] = stringify_drives(drives)

    def remove_drive(self, index: int) -> None:
        drives = self.drives()
        if 0 <= index < len(drives):
            drives.pop(index)
            self.config["drives"] = stringify_drives(drives)

    def wincomponents(self) -> dict[str, str]:
        return self.nested("wincomponents")

    def set_wincomponent(self, name: str, value: str) -> None:
        self.update_nested("wincomponents", name, value)

    def toggle_core(self, key: str, core: int) -> None:
        self.config[key] = toggle_core(self.config.get(key), core)

    # ── Export ───────────────────────────────────────────────────────

    def to_export(self, timestamp: int | None = None) -> ExportData:
        inner = copy.deepcopy(self.config)
        inner.pop(CONTAINER_NAME_KEY, None)
        return build_export(
            inner,
            container_name=self.container_name,
            exported_from=EXPORTED_FROM_EDITOR,
            timestamp=timestamp,
        )

    def export_filename(self) -> str:
        return f"{self.config.get('id') or 'config'}_export.json"


def import_container(raw: str) -> ContainerDraft:
    """Parse pasted editor JSON into a :class:`ContainerDraft`.

    Accepts an :class:`ExportData` envelope or a bare config.  Raises
    :class:`EditorImportError` on invalid JSON or a config without ``id``.
    """
    try:
        parsed = json.loads(raw)
    except ValueError as exc:
        raise EditorImportError("Failed to parse JSON.") from exc
    if not isinstance(parsed, dict):
        raise EditorImportError("Invalid configuration.")

    data = parsed.get("config") or parsed
    if not isinstance(data, dict) or not data.get("id"):
        raise EditorImportError("Invalid configuration.")

    config = copy.deepcopy(data)
    container_name = (
        parsed.get(CONTAINER_NAME_KEY)
        or config.get("name")
        or DEFAULT_CONTAINER_NAME
    )
    config.pop(CONTAINER_NAME_KEY, None)

    if config.get(_DXC):
        config[_DXC] = sync_renderer(config[_DXC])

    log.debug("Imported container %r (%d keys)", config.get("id"), len(config))
    return ContainerDraft(config=config, container_name=str(container_name))
