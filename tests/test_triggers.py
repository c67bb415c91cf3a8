from autocap_engine.buffer import Buffer
from autocap_engine.correction import detect


def test_space_after_word_triggers_on_cursor_line() -> None:
    buffer = Buffer.from_text("HAllo ")

    trigger = detect(False, (0, 6), buffer)

    assert trigger is not None
    assert trigger.line == 0
    assert trigger.scan_column == 6
    assert not trigger.via_terminator


def test_letters_do_not_trigger() -> None:
    buffer = Buffer.from_text("HAl")

    assert detect(False, (0, 3), buffer) is None


def test_only_text_left_of_cursor_is_considered() -> None:
    buffer = Buffer.from_text("HAl lo")

    assert detect(False, (0, 3), buffer) is None
    assert detect(False, (0, 4), buffer) is not None


def test_enter_targets_previous_full_line() -> None:
    buffer = Buffer.from_text("- hallo\n")

    trigger = detect(True, (1, 0), buffer)

    assert trigger is not None
    assert trigger.line == 0
    assert trigger.via_terminator
    assert trigger.scan_column == len("- hallo")


def test_enter_on_first_line_falls_back_to_cursor_line() -> None:
    buffer = Buffer.from_text("word")

    assert detect(True, (0, 4), buffer) is None


def test_empty_or_missing_lines_never_trigger() -> None:
    buffer = Buffer.from_text("\n")

    assert detect(True, (1, 0), buffer) is None
    assert detect(False, (9, 0), buffer) is None


def test_every_trigger_character_fires() -> None:
    for ch in " .,;:!?{\")]%}":
        buffer = Buffer.from_text(f"word{ch}")
        assert detect(False, (0, 5), buffer) is not None, ch
