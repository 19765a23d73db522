# ─────────────────────────────────────────────────────────────────────────────
# Rate Limiter — shared slowapi instance
# ─────────────────────────────────────────────────────────────────────────────
# Own module so route modules and main.py can both import it without a cycle.
# Guards the upstream token's quota: every generation call spends it.
# ─────────────────────────────────────────────────────────────────────────────


from slowapi import Limiter
from slowapi.util import get_remote_address

from hf3d.config import get_settings

limiter = Limiter(key_func=get_remote_address)


def generation_rate_limit() -> str:
    """Evaluated per request so tests can swap settings."""
    return get_settings().rate_limit
