"""Simple in-memory TTL cache for provider responses."""
import re
import time

_store: dict[str, tuple[object, float]] = {}


def make_key(namespace: str, query: str) -> str:
    """Normalise a provider query so equivalent lookups share an entry."""
    normalized = re.sub(r"[^a-z0-9\s]", "", query.lower().strip())
    return f"{namespace}:{normalized}"


def cache_get(key: str) -> object | None:
    """Return cached value if not expired, else None."""
    entry = _store.get(key)
    if entry is None:
        return None
    value, expiry = entry
    if time.time() > expiry:
        _store.pop(key, None)
        return None
    return value


def cache_set(key: str, value: object, ttl_seconds: int) -> None:
    """Store a value with TTL in seconds."""
    _store[key] = (value, time.time() + ttl_seconds)
    _evict_expired()


def _evict_expired() -> None:
    now = time.time()
    for key in [k for k, (_, expiry) in _store.items() if expiry < now]:
        _store.pop(key, None)
