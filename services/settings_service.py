# services/settings_service.py
"""
Settings Service - the organisation Settings row and its cached snapshot.

Integration credentials are edited at runtime from the dashboard, so every
consumer (M-Pesa client, notifier, reminder scheduler) reads them through a
SettingsProvider instead of querying the table directly. The provider keeps
an immutable SettingsSnapshot for a short TTL and is invalidated whenever
PUT /settings writes a new row state.
"""
import logging
import threading
import time
from typing import Callable, Optional

from sqlalchemy.orm import Session

import config
from models import Settings
from schemas.settings import (
     SettingsSnapshot,
     SettingsUpdate,
     NotificationToggles,
     Integrations,
)

logger = logging.getLogger(__name__)

_ORG_FIELDS = ("org_name", "org_email", "org_phone", "org_address", "tax_id", "currency", "timezone")


def get_or_create_settings(db: Session) -> Settings:
     """Return the single Settings row, creating it with defaults on first use."""
     settings = db.query(Settings).order_by(Settings.id).first()
     if settings is None:
          settings = Settings(
               notifications=NotificationToggles().model_dump(by_alias=True),
               integrations=Integrations().model_dump(by_alias=True),
          )
          db.add(settings)
          db.commit()
          db.refresh(settings)
          logger.info("Created default settings row id=%s", settings.id)
     return settings


def to_snapshot(settings: Settings) -> SettingsSnapshot:
     """Build a frozen snapshot, filling any missing JSON keys with defaults."""
     return SettingsSnapshot(
          id=settings.id,
          org_name=settings.org_name,
          org_email=settings.org_email,
          org_phone=settings.org_phone,
          org_address=settings.org_address,
          tax_id=settings.tax_id,
          currency=settings.currency,
          timezone=settings.timezone,
          notifications=NotificationToggles.model_validate(settings.notifications or {}),
          integrations=Integrations.model_validate(settings.integrations or {}),
          updated_at=settings.updated_at,
     )


def update_settings(db: Session, data: SettingsUpdate) -> Settings:
     """
     Apply a PUT /settings body.

     Org fields are overwritten only when supplied; the notifications and
     integrations blocks replace the stored JSON wholesale.
     """
     settings = get_or_create_settings(db)
     for field in _ORG_FIELDS:
          value = getattr(data, field)
          if value is not None:
               setattr(settings, field, value)
     if data.notifications is not None:
          settings.notifications = data.notifications.model_dump(by_alias=True)
     if data.integrations is not None:
          settings.integrations = data.integrations.model_dump(by_alias=True)
     db.commit()
     db.refresh(settings)
     return settings


class SettingsProvider:
     """
     TTL cache in front of the Settings row.

     get() hands back the cached snapshot while it is fresh and reloads it
     from the given session otherwise. invalidate() forces the next get()
     to reload.
     """

     def __init__(self, ttl_seconds: float = config.SETTINGS_CACHE_TTL, clock: Callable[[], float] = time.monotonic):
          self._ttl = ttl_seconds
          self._clock = clock
          self._lock = threading.Lock()
          self._snapshot: Optional[SettingsSnapshot] = None
          self._loaded_at = 0.0
          self._generation = 0

     def get(self, db: Session) -> SettingsSnapshot:
          with self._lock:
               if self._snapshot is not None and self._clock() - self._loaded_at < self._ttl:
                    return self._snapshot
               generation = self._generation

          snapshot = to_snapshot(get_or_create_settings(db))
          with self._lock:
               # An invalidate() during the load means the row may be stale
               if generation != self._generation:
                    logger.debug("Settings changed during reload; snapshot not cached")
                    return snapshot
               self._snapshot = snapshot
               self._loaded_at = self._clock()
          logger.debug("Settings snapshot refreshed")
          return snapshot

     def invalidate(self) -> None:
          with self._lock:
               self._snapshot = None
               self._generation += 1


settings_provider = SettingsProvider()


def get_settings_provider() -> SettingsProvider:
     """FastAPI dependency returning the process-wide provider."""
     return settings_provider
