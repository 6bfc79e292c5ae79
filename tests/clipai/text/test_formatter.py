import pytest


def test_format_text_uses_prompt_for_known_type(run, make_orchestrator):
    from clipai.text.formatter import format_text

    orch, gw = make_orchestrator(responses={"fast": ["# Title\n"]})

    out = run(format_text(orch, "<h1>Title</h1>", "html-to-markdown"))

    # returned exactly as the model produced it
    assert out == "# Title\n"
    prompt = gw.calls[0][2]["messages"][0]["content"]
    assert prompt.startswith("Convert the following HTML to clean Markdown format.")
    assert prompt.endswith("<h1>Title</h1>")


def test_unknown_format_type_falls_back_to_remove_formatting():
    from clipai.text.formatter import FormatType, resolve_format_type

    assert resolve_format_type("uppercase") is FormatType.UPPERCASE
    assert resolve_format_type(FormatType.JSON_FORMAT) is FormatType.JSON_FORMAT
    assert resolve_format_type("sparkle") is FormatType.REMOVE_FORMATTING
    assert resolve_format_type(None) is FormatType.REMOVE_FORMATTING


def test_every_format_type_has_a_prompt():
    from clipai.text.formatter import FORMAT_PROMPTS, FormatType

    assert set(FORMAT_PROMPTS) == set(FormatType)


def test_format_text_rejects_oversized_input(run, make_orchestrator):
    from clipai.llm import budget
    from clipai.llm.errors import OversizedRequestError
    from clipai.text.formatter import format_text

    orch, gw = make_orchestrator()
    with pytest.raises(OversizedRequestError):
        run(format_text(orch, "x" * (budget.HARD_MAX_INPUT_CHARS + 1), "lowercase"))
    assert gw.calls == []
