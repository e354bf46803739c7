"""
Settings component - site settings cache, subscription and editor.
"""

from .component import (
    SETTINGS_TABLE,
    SettingsEditor,
    SettingsStore,
    build_settings_map,
    validate_setting,
)
from .models import (
    DeleteSettingInput,
    FetchSettingsOutput,
    SettingsSnapshot,
    SettingValidationError,
    SettingWriteOutput,
    UpsertSettingInput,
)
from .ports import SettingsAdminPort, SettingsSourcePort

__all__ = [
    # Stores
    "SettingsStore",
    "SettingsEditor",
    # Functions
    "build_settings_map",
    "validate_setting",
    # Models
    "SettingsSnapshot",
    "FetchSettingsOutput",
    "UpsertSettingInput",
    "DeleteSettingInput",
    "SettingWriteOutput",
    "SettingValidationError",
    # Ports
    "SettingsSourcePort",
    "SettingsAdminPort",
    # Constants
    "SETTINGS_TABLE",
]
