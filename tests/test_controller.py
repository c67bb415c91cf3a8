from __future__ import annotations

from typing import List, Tuple

import pytest

from autocap_engine.buffer import Buffer, BufferValidationError, Position
from autocap_engine.correction import CorrectionController, PassState
from autocap_engine.runtime import telemetry
from autocap_engine.settings import CorrectionSettings


def make_controller(
    text: str, cursor: Position | None = None, **settings: object
) -> Tuple[Buffer, CorrectionController]:
    buffer = Buffer.from_text(text)
    if cursor is None:
        last = buffer.line_count - 1
        cursor = (last, len(buffer.get_line(last)))
    buffer.set_cursor(*cursor)
    controller = CorrectionController(buffer, CorrectionSettings(**settings))
    buffer.on_change(controller.on_change)
    return buffer, controller


def press_enter(controller: CorrectionController):
    controller.on_keydown("Enter")
    return controller.on_change()


class SilentHost:
    """Host that never delivers change notifications."""

    def __init__(self, *lines: str, cursor: Position = (0, 0)) -> None:
        self.lines: List[str] = list(lines)
        self.cursor = cursor

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def get_line(self, index: int) -> str:
        return self.lines[index]

    def get_cursor(self) -> Position:
        return self.cursor

    def replace_range(self, text: str, start: Position, end: Position) -> None:
        row, col = start
        line = self.lines[row]
        self.lines[row] = line[:col] + text + line[end[1] :]


class FailingHost(SilentHost):
    """Host that rejects every replacement."""

    def replace_range(self, text: str, start: Position, end: Position) -> None:
        raise BufferValidationError("Column out of range", position=start)


class DoubleNotifyHost(SilentHost):
    """Host that reports each replacement twice, the second time mid-pass."""

    def __init__(self, *lines: str, cursor: Position = (0, 0)) -> None:
        super().__init__(*lines, cursor=cursor)
        self.controller: CorrectionController | None = None
        self.reports: list = []

    def replace_range(self, text: str, start: Position, end: Position) -> None:
        super().replace_range(text, start, end)
        assert self.controller is not None
        self.reports.append(self.controller.on_change())
        self.reports.append(self.controller.on_change())


def test_word_rule_fixes_double_capital_on_space() -> None:
    buffer, controller = make_controller("HAllo ")

    report = controller.on_change()

    assert buffer.text == "Hallo "
    assert report.status == "corrected"
    assert [edit.rule for edit in report.edits] == ["word"]
    assert controller.pending_echo is None
    assert controller.state is PassState.IDLE


def test_list_item_double_capital_on_enter() -> None:
    buffer, controller = make_controller("- HAllo\n", capitalize_list_items=True)

    report = press_enter(controller)

    assert buffer.text == "- Hallo\n"
    assert [edit.rule for edit in report.edits] == ["list_item"]


def test_list_item_lowercase_start_on_enter() -> None:
    buffer, controller = make_controller("- hallo\n", capitalize_list_items=True)

    press_enter(controller)

    assert buffer.text == "- Hallo\n"


def test_list_item_lowercase_start_on_punctuation() -> None:
    buffer, controller = make_controller("1. hallo,", capitalize_list_items=True)

    controller.on_change()

    assert buffer.text == "1. Hallo,"


def test_list_item_rule_disabled_by_default() -> None:
    buffer, controller = make_controller("- hallo\n")

    press_enter(controller)

    assert buffer.text == "- hallo\n"


def test_open_code_fence_blocks_every_rule() -> None:
    buffer, controller = make_controller(
        "```\nHAllo ",
        capitalize_list_items=True,
        capitalize_sentences=True,
    )

    report = controller.on_change()

    assert buffer.text == "```\nHAllo "
    assert report.status == "unchanged"


def test_sentence_start_after_terminator() -> None:
    buffer, controller = make_controller(
        "Hello world. this is new.", capitalize_sentences=True
    )

    controller.on_change()

    assert buffer.text == "Hello world. This is new."


def test_front_matter_is_never_corrected() -> None:
    text = "---\ntitle: HAllo \n---"
    buffer, controller = make_controller(
        text,
        cursor=(1, len("title: HAllo ")),
        capitalize_list_items=True,
        capitalize_sentences=True,
    )

    controller.on_change()

    assert buffer.text == text


def test_abbreviation_does_not_end_sentence() -> None:
    text = "This is e.g. not a new sentence."
    buffer, controller = make_controller(text, capitalize_sentences=True)

    controller.on_change()

    assert buffer.text == text


def test_excluded_word_is_left_alone() -> None:
    buffer, controller = make_controller("HAllo ", exclusion_list=("hallo",))

    controller.on_change()

    assert buffer.text == "HAllo "


def test_excluded_list_word_is_left_alone() -> None:
    buffer, controller = make_controller(
        "- HAllo\n", capitalize_list_items=True, exclusion_list=("HALLO",)
    )

    press_enter(controller)

    assert buffer.text == "- HAllo\n"


def test_second_pass_on_stable_text_is_noop() -> None:
    buffer, controller = make_controller(
        "- hallo. and more ",
        capitalize_list_items=True,
        capitalize_sentences=True,
    )

    first = controller.on_change()
    corrected = buffer.text
    second = controller.on_change()

    assert first.status == "corrected"
    assert second.status == "unchanged"
    assert buffer.text == corrected


def test_rules_reread_line_between_edits() -> None:
    buffer, controller = make_controller("- hAllo ", capitalize_list_items=True)

    report = controller.on_change()

    # list rule capitalizes "h", then the word rule sees "HAllo" and repairs it
    assert buffer.text == "- Hallo "
    assert [edit.rule for edit in report.edits] == ["list_item", "word"]


def test_own_replacements_are_not_reprocessed() -> None:
    buffer, controller = make_controller("HAllo ")
    reports = []
    buffer.on_change(lambda delta: reports.append(delta.label))

    report = controller.on_change()

    assert report.changed
    assert reports == ["replace_range"]
    assert controller.pending_echo is None


def test_user_edit_after_pass_is_evaluated() -> None:
    buffer, controller = make_controller("HAllo ")
    controller.on_change()

    buffer.insert_text("WOrld ")

    assert buffer.text == "Hallo World "


def test_host_without_echo_allows_only_one_outstanding_edit() -> None:
    host = SilentHost("- hAllo ", cursor=(0, 8))
    controller = CorrectionController(
        host, CorrectionSettings(capitalize_list_items=True)
    )

    report = controller.on_change()

    assert host.lines == ["- HAllo "]
    assert [edit.rule for edit in report.edits] == ["list_item"]
    assert controller.pending_echo is not None

    echo = controller.on_change()

    assert echo.status == "suppressed"
    assert controller.pending_echo is None


def test_cursor_past_document_end_is_noop() -> None:
    host = SilentHost("HAllo ", cursor=(4, 0))
    controller = CorrectionController(host)

    report = controller.on_change()

    assert report.status == "no_trigger"
    assert host.lines == ["HAllo "]


def test_update_settings_rebuilds_lookups() -> None:
    buffer, controller = make_controller("hello ")
    controller.on_change()
    assert buffer.text == "hello "

    controller.update_settings(CorrectionSettings(capitalize_sentences=True))
    controller.on_change()

    assert buffer.text == "Hello "
    assert controller.config.capitalize_sentences


def test_enter_flag_is_consumed_by_one_change() -> None:
    buffer, controller = make_controller("hallo\nx", capitalize_sentences=True)
    controller.on_keydown("Enter")
    controller.on_change()
    assert buffer.text == "Hallo\nx"

    report = controller.on_change()

    assert report.status == "no_trigger"


def test_rejected_replacement_is_skipped() -> None:
    host = FailingHost("HAllo ", cursor=(0, 6))
    controller = CorrectionController(host)

    report = controller.on_change()

    assert report.status == "unchanged"
    assert controller.pending_echo is None
    assert controller.state is PassState.IDLE
    assert host.lines == ["HAllo "]


def test_change_during_pass_is_not_evaluated() -> None:
    host = DoubleNotifyHost("HAllo ", cursor=(0, 6))
    controller = CorrectionController(host)
    host.controller = controller

    report = controller.on_change()

    assert [inner.status for inner in host.reports] == ["suppressed", "no_trigger"]
    assert report.status == "corrected"
    assert host.lines == ["Hallo "]
    assert controller.state is PassState.IDLE


def test_pass_logs_edit_count(monkeypatch: pytest.MonkeyPatch) -> None:
    events: list = []
    monkeypatch.setattr(
        telemetry,
        "record_event",
        lambda name, **kwargs: events.append((name, kwargs.get("data"))),
    )
    buffer, controller = make_controller("HAllo ")

    controller.on_change()

    passes = [data for name, data in events if name == "correction.pass"]
    assert passes == [{"line": 0, "edits": 1, "rules": "word"}]


def test_sentence_capital_leaves_double_capital_for_next_trigger() -> None:
    buffer, controller = make_controller("hAllo ", capitalize_sentences=True)

    controller.on_change()
    assert buffer.text == "HAllo "

    controller.on_change()
    assert buffer.text == "Hallo "
