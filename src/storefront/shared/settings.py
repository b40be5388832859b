"""Storefront settings from the ``[custom]`` section of ``domain.toml``.

``PROTEAN_ENV`` selects the overlay (``[test.custom]``, ``[production.custom]``).
An environment variable ``STOREFRONT_<NAME>`` overrides any single value,
e.g. ``STOREFRONT_NOTIFICATION_CHANNEL=fake``.
"""

import os

from protean.utils.globals import current_domain


def setting(name: str, default=None):
    override = os.environ.get(f"STOREFRONT_{name.upper()}")
    if override is not None:
        return override
    return (current_domain.config.get("custom") or {}).get(name, default)


def flag(name: str, default: bool = False) -> bool:
    value = setting(name, default)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
