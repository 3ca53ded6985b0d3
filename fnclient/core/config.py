"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .constants import ApplyPolicy


DEFAULT_BASE_URL = "http://localhost:8000"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 30.0
    max_workers: int = 4
    apply_policy: ApplyPolicy = ApplyPolicy.LAST_ARRIVAL

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        # Accept the plain string form coming from env vars and argparse.
        object.__setattr__(self, "apply_policy", ApplyPolicy(self.apply_policy))
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Build a config from ``FN_*`` environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            base_url=env.get("FN_BASE_URL", defaults.base_url),
            timeout_seconds=float(env.get("FN_TIMEOUT", defaults.timeout_seconds)),
            max_workers=int(env.get("FN_MAX_WORKERS", defaults.max_workers)),
            apply_policy=ApplyPolicy(env.get("FN_APPLY_POLICY", defaults.apply_policy.value)),
        )

    def with_overrides(self, **overrides) -> "ClientConfig":
        """Return a copy with every non-``None`` override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)
