"""Pipeline controller: change notification in, single-character edits out.

State machine::

    IDLE --change--> EVALUATING --edit--> APPLYING --echo--> EVALUATING --> IDLE

Every replacement the controller issues arms a ``PendingEcho``. The host's
change notification for that replacement consumes it, so the controller never
reacts to its own edits. Only one echo can be outstanding at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal, Optional, Sequence

from autocap_engine.buffer import BufferValidationError, HostBuffer, read_line
from autocap_engine.runtime import telemetry
from autocap_engine.settings import CorrectionConfig, CorrectionSettings

from .regions import RegionScan, protection_reason, scan_regions
from .rules import CorrectionRule, Edit, default_rules
from .triggers import TriggerEvent, detect, is_terminator_key

PassStatus = Literal["suppressed", "no_trigger", "unchanged", "corrected"]


class PassState(str, Enum):
    IDLE = "idle"
    EVALUATING = "evaluating"
    APPLYING = "applying"


@dataclass(frozen=True, slots=True)
class PendingEcho:
    """Token for the one replacement whose change notification is expected."""

    line: int
    column: int
    text: str
    rule: str


@dataclass(slots=True)
class PassReport:
    status: PassStatus
    trigger: Optional[TriggerEvent] = None
    edits: List[Edit] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.edits)


class _PassSession:
    """``LineSession`` bound to one trigger event."""

    def __init__(
        self,
        controller: "CorrectionController",
        trigger: TriggerEvent,
        scan: RegionScan,
    ) -> None:
        self._controller = controller
        self.line = trigger.line
        self.scan = scan
        self.scan_column = trigger.scan_column

    @property
    def text(self) -> str:
        return read_line(self._controller.host, self.line)

    def is_protected(self, offset: int) -> bool:
        reason = protection_reason(self.scan, self.text, offset)
        if reason is not None:
            telemetry.record_event(
                "correction.protected",
                level="debug",
                data={"line": self.line, "offset": offset, "region": reason},
                logger_name=self._controller.logger_name,
            )
        return reason is not None

    def apply(self, edit: Edit) -> bool:
        return self._controller._apply(edit)


class CorrectionController:
    """Owns echo suppression and sequences the correction rules."""

    def __init__(
        self,
        host: HostBuffer,
        settings: Optional[CorrectionSettings] = None,
        *,
        rules: Optional[Sequence[CorrectionRule]] = None,
        logger_name: str = "autocap_engine.correction",
    ) -> None:
        self.host = host
        self.logger_name = logger_name
        self.rules: Sequence[CorrectionRule] = tuple(rules or default_rules())
        self._settings = settings or CorrectionSettings()
        self._config = CorrectionConfig.from_settings(self._settings)
        self._state = PassState.IDLE
        self._pending_echo: Optional[PendingEcho] = None
        self._last_key_was_terminator = False

    @property
    def state(self) -> PassState:
        return self._state

    @property
    def settings(self) -> CorrectionSettings:
        return self._settings

    @property
    def config(self) -> CorrectionConfig:
        return self._config

    @property
    def pending_echo(self) -> Optional[PendingEcho]:
        return self._pending_echo

    def update_settings(self, settings: CorrectionSettings) -> None:
        """Settings-change notification; rebuilds the lookup sets."""

        self._settings = settings
        self._config = CorrectionConfig.from_settings(settings)

    def on_keydown(self, key: str) -> None:
        if is_terminator_key(key):
            self._last_key_was_terminator = True

    def on_change(self, _delta: object | None = None) -> PassReport:
        """Handle one buffer change notification."""

        echo, self._pending_echo = self._pending_echo, None
        if echo is not None:
            telemetry.record_event(
                "correction.echo",
                level="debug",
                data={"line": echo.line, "column": echo.column, "rule": echo.rule},
                logger_name=self.logger_name,
            )
            return PassReport(status="suppressed")

        was_terminator, self._last_key_was_terminator = (
            self._last_key_was_terminator,
            False,
        )
        if self._state is not PassState.IDLE:
            # A user edit cannot arrive mid-pass on a synchronous host.
            telemetry.record_event(
                "correction.reentrant_change",
                level="warning",
                data={"state": self._state.value},
                logger_name=self.logger_name,
            )
            return PassReport(status="no_trigger")

        self._state = PassState.EVALUATING
        try:
            return self._run_pass(was_terminator)
        finally:
            self._state = PassState.IDLE

    def _run_pass(self, was_terminator: bool) -> PassReport:
        trigger = detect(was_terminator, self.host.get_cursor(), self.host)
        if trigger is None:
            return PassReport(status="no_trigger")

        with telemetry.span(
            "correction::pass",
            logger_name=self.logger_name,
            component="correction",
            metadata={"line": trigger.line, "enter": trigger.via_terminator},
        ):
            session = _PassSession(self, trigger, scan_regions(self.host, trigger.line))
            edits: List[Edit] = []
            for rule in self.rules:
                if rule.is_enabled(self._config):
                    edits.extend(rule.apply(session, self._config))

        telemetry.record_event(
            "correction.pass",
            level="debug",
            data={
                "line": trigger.line,
                "edits": len(edits),
                "rules": ",".join(edit.rule for edit in edits),
            },
            logger_name=self.logger_name,
        )
        return PassReport(
            status="corrected" if edits else "unchanged", trigger=trigger, edits=edits
        )

    def _apply(self, edit: Edit) -> bool:
        if self._pending_echo is not None:
            telemetry.record_event(
                "correction.echo_outstanding",
                level="warning",
                data={"rule": edit.rule, "pending": self._pending_echo.rule},
                logger_name=self.logger_name,
            )
            return False

        self._state = PassState.APPLYING
        self._pending_echo = PendingEcho(
            line=edit.line, column=edit.column, text=edit.after, rule=edit.rule
        )
        try:
            self.host.replace_range(
                edit.after, (edit.line, edit.column), (edit.line, edit.column + 1)
            )
        except BufferValidationError as exc:
            self._pending_echo = None
            telemetry.record_event(
                "correction.replace_failed",
                level="warning",
                data={"rule": edit.rule, "error": str(exc)},
                logger_name=self.logger_name,
            )
            return False
        finally:
            self._state = PassState.EVALUATING

        telemetry.record_event(
            "correction.applied",
            data={
                "line": edit.line,
                "column": edit.column,
                "before": edit.before,
                "after": edit.after,
                "rule": edit.rule,
            },
            logger_name=self.logger_name,
        )
        return True
