"""
symcore ALG Model: Engine Configuration
"""

import threading
from dataclasses import dataclass, replace
from typing import Optional

_VALID_ORDERS = ("lex", "grlex", "grevlex")


@dataclass
class EngineConfig:
    """Tunable limits for caches and bounded algorithms."""
    cache_capacity: int = 1024  # entries per cache kind
    cache_eviction_fraction: float = 0.25
    groebner_iteration_cap: int = 10000
    default_monomial_order: str = "lex"
    max_expand_terms: int = 10000

    def validate(self) -> None:
        """Reject nonsensical settings."""
        if self.cache_capacity < 1:
            raise ValueError(f"cache_capacity must be positive, got {self.cache_capacity}")
        if not 0.0 < self.cache_eviction_fraction <= 1.0:
            raise ValueError(
                f"cache_eviction_fraction must lie in (0, 1], got {self.cache_eviction_fraction}"
            )
        if self.groebner_iteration_cap < 1:
            raise ValueError(
                f"groebner_iteration_cap must be positive, got {self.groebner_iteration_cap}"
            )
        if self.default_monomial_order not in _VALID_ORDERS:
            raise ValueError(
                f"default_monomial_order must be one of {_VALID_ORDERS}, "
                f"got {self.default_monomial_order!r}"
            )
        if self.max_expand_terms < 1:
            raise ValueError(f"max_expand_terms must be positive, got {self.max_expand_terms}")

    def with_overrides(self, **changes) -> 'EngineConfig':
        cfg = replace(self, **changes)
        cfg.validate()
        return cfg


_CONFIG: Optional[EngineConfig] = None
_CONFIG_LOCK = threading.Lock()


def get_config() -> EngineConfig:
    """Get the process-wide configuration, creating defaults on first use."""
    global _CONFIG
    if _CONFIG is None:
        with _CONFIG_LOCK:
            if _CONFIG is None:
                _CONFIG = EngineConfig()
    return _CONFIG


def set_config(config: EngineConfig) -> EngineConfig:
    """Install a new process-wide configuration and return the previous one."""
    global _CONFIG
    config.validate()
    with _CONFIG_LOCK:
        previous = _CONFIG or EngineConfig()
        _CONFIG = config
    return previous
