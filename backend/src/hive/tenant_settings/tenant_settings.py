import copy
from typing import Annotated, Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from hive.main.config import KNOWN_PROVIDERS
from hive.retention.constants import (
    DEFAULT_RETENTION_DAYS,
    MAX_RETENTION_DAYS,
    MIN_RETENTION_DAYS,
)

MODEL_ENABLED_KEY = "modelEnabled"
RETENTION_DAYS_KEY = "retentionDays"
LEGAL_HOLD_KEY = "legalHold"

RECOGNIZED_KEYS = (MODEL_ENABLED_KEY, RETENTION_DAYS_KEY, LEGAL_HOLD_KEY)
OWNER_ONLY_KEYS = (RETENTION_DAYS_KEY, LEGAL_HOLD_KEY)

SETTINGS_UPDATED_ACTION = "tenant_settings.updated"
SETTINGS_TARGET_TYPE = "tenant_settings"


class TenantSettings(BaseModel):
    """Effective settings for one org.

    Values come from storage as-is, so they are not re-validated here;
    ``retention_days`` goes through ``clamp_retention`` before use.
    """

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model_enabled: dict[str, Any] = Field(alias=MODEL_ENABLED_KEY)
    retention_days: Any = Field(default=DEFAULT_RETENTION_DAYS, alias=RETENTION_DAYS_KEY)
    legal_hold: Any = Field(default=False, alias=LEGAL_HOLD_KEY)

    @property
    def on_legal_hold(self) -> bool:
        return bool(self.legal_hold)


class ProviderToggles(BaseModel):
    model_config = ConfigDict(extra="forbid")

    openai: StrictBool
    gemini: StrictBool
    anthropic: StrictBool


class TenantSettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", protected_namespaces=())

    model_enabled: Optional[ProviderToggles] = Field(default=None, alias=MODEL_ENABLED_KEY)
    retention_days: Optional[
        Annotated[int, Field(strict=True, ge=MIN_RETENTION_DAYS, le=MAX_RETENTION_DAYS)]
    ] = Field(default=None, alias=RETENTION_DAYS_KEY)
    legal_hold: Optional[StrictBool] = Field(default=None, alias=LEGAL_HOLD_KEY)

    def changed_values(self) -> dict[str, Any]:
        """Keys present in the request, by stored key name."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class TenantSettingsView(BaseModel):
    settings: TenantSettings
    defaults: TenantSettings


class TenantSettingsUpdated(BaseModel):
    ok: bool = True
    settings: TenantSettings


def default_tenant_settings(enabled_providers: Iterable[str]) -> TenantSettings:
    enabled = set(enabled_providers)
    return TenantSettings(
        model_enabled={provider: provider in enabled for provider in KNOWN_PROVIDERS},
        retention_days=DEFAULT_RETENTION_DAYS,
        legal_hold=False,
    )


def merge_settings(defaults: TenantSettings, stored: dict[str, Any]) -> TenantSettings:
    """Overlay stored rows on a copy of the defaults. Unknown keys are dropped.

    A stored provider map that is not a mapping keeps the default map.
    """
    merged = copy.deepcopy(defaults.model_dump(by_alias=True))
    for key in RECOGNIZED_KEYS:
        if key not in stored:
            continue
        if key == MODEL_ENABLED_KEY and not isinstance(stored[key], dict):
            continue
        merged[key] = copy.deepcopy(stored[key])

    return TenantSettings.model_validate(merged)
