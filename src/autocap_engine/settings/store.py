"""JSON-file persistence for ``CorrectionSettings``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, List, Optional

from autocap_engine.runtime import telemetry

from .models import CorrectionSettings

SettingsListener = Callable[[CorrectionSettings], None]


class SettingsStore:
    """Loads, saves, and broadcasts settings changes.

    ``path=None`` keeps settings in memory only, which is what tests and the
    demo use when no settings file is given.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        settings: Optional[CorrectionSettings] = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self._settings = settings or CorrectionSettings()
        self._listeners: List[SettingsListener] = []

    @property
    def settings(self) -> CorrectionSettings:
        return self._settings

    def subscribe(self, listener: SettingsListener) -> None:
        self._listeners.append(listener)

    def load(self) -> CorrectionSettings:
        data: Any = None
        if self.path is not None and self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                telemetry.record_event(
                    "settings.load_failed",
                    level="warning",
                    data={"path": str(self.path), "error": str(exc)},
                )
        self._set(CorrectionSettings.from_mapping(data))
        return self._settings

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(self._settings.to_mapping(), indent=2), encoding="utf-8"
        )

    def update(self, **changes: Any) -> CorrectionSettings:
        """Apply field changes, persist them, and notify subscribers."""

        self._set(self._settings.with_changes(**changes))
        self.save()
        return self._settings

    def _set(self, settings: CorrectionSettings) -> None:
        self._settings = settings
        telemetry.record_event(
            "settings.changed", level="debug", data=settings.to_mapping()
        )
        for listener in list(self._listeners):
            listener(settings)
