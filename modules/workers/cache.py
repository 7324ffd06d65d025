# modules/workers/cache.py
import time

from flask import current_app

from modules.reference.contacts.models import Contact


class WorkersCache:
    """
    Single-slot, time-bounded memo of the active workers list.

    ``loader`` is called with no arguments on a miss; ``clock`` returns
    seconds and is injectable so tests can move time by hand.
    Concurrent misses just reload twice and overwrite the slot with the
    same data.
    """

    def __init__(self, loader, ttl=3600, clock=time.monotonic):
        self._loader = loader
        self._ttl = ttl
        self._clock = clock
        self._value = None
        self._expires_at = None

    @property
    def ttl(self):
        return self._ttl

    def is_fresh(self):
        return (
            self._value is not None
            and self._expires_at is not None
            and self._clock() < self._expires_at
        )

    def get(self):
        if self.is_fresh():
            return self._value

        value = self._loader()
        self._value = value
        self._expires_at = self._clock() + self._ttl
        return value

    def clear(self):
        self._value = None
        self._expires_at = None


def load_active_workers():
    workers = Contact.active_workers().order_by(Contact.name.asc()).all()
    return [
        {
            "id": w.id,
            "name": w.name,
            "email": w.email,
            "phone": w.phone,
            "whatsappPhone": w.whatsapp_phone,
            "company": w.company,
            "notes": w.notes,
        }
        for w in workers
    ]


def init_workers_cache(app, clock=time.monotonic):
    cache = WorkersCache(
        load_active_workers,
        ttl=app.config.get("WORKERS_CACHE_TTL", 3600),
        clock=clock,
    )
    app.extensions["workers_cache"] = cache
    return cache


def get_workers_cache() -> WorkersCache:
    return current_app.extensions["workers_cache"]
