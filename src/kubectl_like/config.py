"""Configuration management for the CLI"""

import logging
import yaml
from pathlib import Path
from typing import Dict, Optional, Any
from dataclasses import dataclass, field

from .options import DEFAULT_MAX_FOLLOW_CONCURRENCY, DEFAULT_TAIL


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.kubectl-like' / 'config.yaml'


@dataclass
class ContextConfig:
    """A Docker Swarm Control backend to read logs through"""
    api_url: str
    token: Optional[str] = None
    verify_ssl: bool = True


@dataclass
class Defaults:
    """Flag values used when the flag is not given on the command line"""
    max_log_requests: int = DEFAULT_MAX_FOLLOW_CONCURRENCY
    prefix: bool = False
    ignore_errors: bool = False
    timestamps: bool = False
    tail: int = DEFAULT_TAIL


@dataclass
class Config:
    """Main configuration structure"""
    contexts: Dict[str, ContextConfig] = field(default_factory=dict)
    current_context: Optional[str] = None
    defaults: Defaults = field(default_factory=Defaults)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create config from dictionary"""
        contexts = {}
        for name, ctx_data in (data.get('contexts') or {}).items():
            contexts[name] = ContextConfig(
                api_url=ctx_data.get('api_url'),
                token=ctx_data.get('token'),
                verify_ssl=ctx_data.get('verify_ssl', True)
            )

        defaults_data = data.get('defaults') or {}
        defaults = Defaults(
            max_log_requests=int(defaults_data.get('max_log_requests', DEFAULT_MAX_FOLLOW_CONCURRENCY)),
            prefix=bool(defaults_data.get('prefix', False)),
            ignore_errors=bool(defaults_data.get('ignore_errors', False)),
            timestamps=bool(defaults_data.get('timestamps', False)),
            tail=int(defaults_data.get('tail', DEFAULT_TAIL))
        )

        return cls(
            contexts=contexts,
            current_context=data.get('current_context'),
            defaults=defaults
        )

    def get_context(self, name: Optional[str] = None) -> Optional[ContextConfig]:
        """The named context, or the current one"""
        name = name or self.current_context
        if not name:
            return None
        return self.contexts.get(name)


class ConfigManager:
    """Manages configuration file operations"""

    def __init__(self, config_path: str):
        self.config_path = Path(config_path)

    def load(self) -> Config:
        """Load configuration from file"""
        if not self.config_path.exists():
            # Return default config
            return Config()

        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
                return Config.from_dict(data)
        except (OSError, yaml.YAMLError, AttributeError, TypeError, ValueError) as e:
            # Return default config on error
            logger.warning("Failed to load config %s: %s", self.config_path, e)
            return Config()
