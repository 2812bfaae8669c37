# -*- coding: utf-8 -*-
"""Application settings: provider activation, default provider and feature
toggles in a JSON file, provider secrets in a `.env` file.
The config file is rewritten wholesale on every change.
"""
from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv, set_key, unset_key

from .geocoding_base import UnsupportedProviderError
from .provider_registry import BASELINE_PROVIDER, credential_key, get_info, is_known, iter_providers

logger = logging.getLogger(__name__)

HOME_ENV = 'COORDKIT_HOME'


def default_home() -> Path:
    return Path(os.environ.get(HOME_ENV) or os.getcwd())


@dataclass
class ProviderConfig:
    display_name: str
    requires_credential: bool
    active: bool

    def to_dict(self) -> dict:
        return {'name': self.display_name, 'requiresKey': self.requires_credential, 'active': self.active}


def _flag(value: object, where: str) -> bool:
    # JSON booleans only
    if not isinstance(value, bool):
        raise ValueError(f'{where} must be true or false, got {value!r}')
    return value


def _default_features() -> Dict[str, bool]:
    return {'saveHistory': True, 'showProgress': True, 'colorOutput': True}


@dataclass
class AppConfig:
    default_provider: str = BASELINE_PROVIDER
    providers: Dict[str, ProviderConfig] = field(default_factory=dict)
    features: Dict[str, bool] = field(default_factory=_default_features)

    @classmethod
    def defaults(cls) -> 'AppConfig':
        providers = {
            p.provider_id: ProviderConfig(p.display_name, p.requires_credential, not p.requires_credential)
            for p in iter_providers()
        }
        return cls(default_provider=BASELINE_PROVIDER, providers=providers)

    @classmethod
    def from_dict(cls, data: object) -> 'AppConfig':
        """Parse a stored config, filling gaps from defaults.
        Raises ValueError when the structure is unusable.
        """
        if not isinstance(data, dict):
            raise ValueError('config root is not an object')
        stored_providers = data.get('providers', {})
        stored_features = data.get('features', {})
        if not isinstance(stored_providers, dict) or not isinstance(stored_features, dict):
            raise ValueError('providers/features must be objects')
        cfg = cls.defaults()
        for pid, pconf in cfg.providers.items():
            entry = stored_providers.get(pid)
            if entry is None:
                continue
            if not isinstance(entry, dict):
                raise ValueError(f'provider entry {pid!r} is not an object')
            # requiresKey always comes from the registry, never from the file
            pconf.active = _flag(entry.get('active', pconf.active), f'providers.{pid}.active')
        for name in cfg.features:
            if name in stored_features:
                cfg.features[name] = _flag(stored_features[name], f'features.{name}')
        default = data.get('defaultProvider', BASELINE_PROVIDER)
        if not isinstance(default, str):
            raise ValueError('defaultProvider must be a string')
        cfg.default_provider = default if is_known(default) else BASELINE_PROVIDER
        return cfg

    def to_dict(self) -> dict:
        return {
            'defaultProvider': self.default_provider,
            'providers': {pid: p.to_dict() for pid, p in self.providers.items()},
            'features': dict(self.features),
        }


class SettingsStore:
    CONFIG_FILE = 'config.json'
    ENV_FILE = '.env'

    def __init__(self, config_path: Optional[Path] = None, env_path: Optional[Path] = None):
        home = default_home()
        self.config_path = Path(config_path) if config_path else home / self.CONFIG_FILE
        self.env_path = Path(env_path) if env_path else home / self.ENV_FILE
        self.config = AppConfig.defaults()

    # ---- lifecycle ----
    def load(self) -> AppConfig:
        if self.env_path.exists():
            # variables already exported in the shell win over the file
            load_dotenv(self.env_path, override=False)
        if not self.config_path.exists():
            self.config = AppConfig.defaults()
            self.save()
            return self.config
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                self.config = AppConfig.from_dict(json.load(f))
        except (OSError, ValueError) as e:
            logger.warning("Discarding unreadable config %s: %s", self.config_path, e)
            self.config = AppConfig.defaults()
            self.save()
        return self.config

    def save(self, config: Optional[AppConfig] = None) -> None:
        if config is not None:
            self.config = config
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(self.config.to_dict(), f, indent=2)

    # ---- providers ----
    def _require_known(self, provider_id: str) -> None:
        if not is_known(provider_id):
            raise UnsupportedProviderError(provider_id)

    def active_providers(self) -> List[str]:
        return [pid for pid, p in self.config.providers.items() if p.active]

    def preferred_provider(self) -> str:
        active = self.active_providers()
        if self.config.default_provider in active:
            return self.config.default_provider
        if active:
            return active[0]
        logger.warning("No provider is active; falling back to %s", BASELINE_PROVIDER)
        return BASELINE_PROVIDER

    def set_provider_active(self, provider_id: str, active: bool) -> None:
        self._require_known(provider_id)
        self.config.providers[provider_id].active = bool(active)
        self.save()

    def get_default_provider(self) -> str:
        return self.config.default_provider

    def set_default_provider(self, provider_id: str) -> None:
        self._require_known(provider_id)
        self.config.default_provider = provider_id
        self.save()

    # ---- features ----
    def get_feature(self, name: str) -> bool:
        return self.config.features[name]

    def set_feature(self, name: str, value: bool) -> None:
        if name not in self.config.features:
            raise KeyError(name)
        self.config.features[name] = bool(value)
        self.save()

    # ---- credentials ----
    def get_credential(self, provider_id: str) -> str:
        self._require_known(provider_id)
        return os.environ.get(credential_key(provider_id), '')

    def has_credential(self, provider_id: str) -> bool:
        return bool(self.get_credential(provider_id))

    def set_credential(self, provider_id: str, secret: str) -> None:
        """Update or append `{PROVIDER}_API_KEY` in the env file and the live
        environment. An empty secret removes the key."""
        self._require_known(provider_id)
        key = credential_key(provider_id)
        secret = (secret or '').strip()
        if not secret:
            if self.env_path.exists():
                unset_key(str(self.env_path), key)
            os.environ.pop(key, None)
            return
        self.env_path.parent.mkdir(parents=True, exist_ok=True)
        self.env_path.touch(exist_ok=True)
        set_key(str(self.env_path), key, secret)
        os.environ[key] = secret

    @staticmethod
    def mask(secret: str) -> str:
        return f"{secret[:8]}..." if secret else ''

    def export_all(self) -> dict:
        data = self.config.to_dict()
        for pid, entry in data['providers'].items():
            if get_info(pid).requires_credential:
                entry['credential'] = self.mask(self.get_credential(pid))
        return data
