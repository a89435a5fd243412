"""Tests for initial and update prompt construction."""
import pytest

from prompts.app_prompts import INITIAL_CODE_ONLY_DIRECTIVE, UPDATE_CODE_ONLY_DIRECTIVE, get_template_by_name
from services.errors import ValidationError
from services.prompt_service import compose, is_update_request


class TestInitialPrompt:

    @pytest.mark.parametrize("description", [
        "a counter app",
        "A pomodoro timer with {braces} and \"quotes\"",
        "multi\nline\ndescription",
    ])
    def test_contains_description_verbatim(self, description):
        result = compose(description)
        assert description in result

    def test_ends_with_code_only_directive(self):
        result = compose("a counter app")
        assert result.endswith(INITIAL_CODE_ONLY_DIRECTIVE)

    def test_lists_requirements(self):
        result = compose("a counter app")
        assert "responsive" in result.lower()
        assert "JavaScript" in result
        assert "well-structured" in result

    def test_explicit_none_is_initial_mode(self):
        assert compose("a counter app", None, None) == compose("a counter app")


class TestUpdatePrompt:

    def test_embeds_code_and_instruction_verbatim(self):
        prior = "<!DOCTYPE html>\n<html><body><button id=\"b\">0</button></body></html>"
        result = compose("a counter app", prior, "make button red")
        assert prior in result
        assert "make button red" in result
        assert "a counter app" in result

    def test_ends_with_code_only_directive(self):
        result = compose("a counter app", "<html></html>", "make button red")
        assert result.endswith(UPDATE_CODE_ONLY_DIRECTIVE)

    def test_asks_to_preserve_existing_functionality(self):
        result = compose("a counter app", "<html></html>", "make button red")
        assert "Keep all existing functionality intact" in result
        assert "Preserve the overall structure" in result

    def test_code_with_format_placeholders_is_untouched(self):
        prior = "<script>const t = `${a}`; const o = {x: 1};</script>"
        result = compose("app", prior, "rename {x}")
        assert prior in result
        assert "rename {x}" in result


class TestInvalidInput:

    @pytest.mark.parametrize("prior, instruction", [
        ("<html></html>", None),
        (None, "make button red"),
        ("", "make button red"),
        ("<html></html>", ""),
    ])
    def test_partial_update_state_is_rejected(self, prior, instruction):
        with pytest.raises(ValidationError):
            compose("a counter app", prior, instruction)

    @pytest.mark.parametrize("description", ["", None, 42])
    def test_missing_description_is_rejected(self, description):
        with pytest.raises(ValidationError) as exc_info:
            compose(description)
        assert exc_info.value.status_code == 400


@pytest.mark.parametrize("code, instruction, expected", [
    ("<html></html>", "make it blue", True),
    ("<html></html>", "", False),
    ("", "make it blue", False),
    (None, "make it blue", False),
    ("<html></html>", None, False),
])
def test_is_update_request(code, instruction, expected):
    assert is_update_request(code, instruction) is expected


def test_unknown_template_name():
    with pytest.raises(ValueError):
        get_template_by_name("refactor")


def test_empty_update_fields_compose_an_initial_prompt():
    assert compose("a counter app", "", "") == compose("a counter app")


@pytest.mark.parametrize("code, instruction", [
    ("<html></html>", "make it blue"),
    ("<html></html>", ""),
    ("", "make it blue"),
    ("", ""),
])
def test_compose_mode_agrees_with_is_update_request(code, instruction):
    if is_update_request(code, instruction):
        assert code in compose("a counter app", code, instruction)
    elif code or instruction:
        with pytest.raises(ValidationError):
            compose("a counter app", code, instruction)
    else:
        assert compose("a counter app", code, instruction) == compose("a counter app")
