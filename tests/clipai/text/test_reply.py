import pytest


def test_generate_reply_single_message(run, make_orchestrator):
    from clipai.text.reply import generate_reply

    orch, gw = make_orchestrator(responses={"fast": ["  Sure, see you at 5!  "]})

    out = run(generate_reply(orch, "Meet at 5?", context="Slack"))

    assert out == "Sure, see you at 5!"
    prompt = gw.calls[0][2]["messages"][0]["content"]
    assert "draft a concise and appropriate reply. Context: Slack" in prompt
    assert "Messages:\nMeet at 5?\n\nDraft a reply:" in prompt


def test_reply_prompt_numbers_and_caps_messages():
    from clipai.text.reply import build_reply_prompt

    prompt = build_reply_prompt([f"m{i}" for i in range(1, 8)])

    # only the five most recent messages are kept
    assert "m1" not in prompt and "m2" not in prompt
    assert "Message 1: m3\n\nMessage 2: m4" in prompt
    assert "Message 5: m7" in prompt
    assert "Context:" not in prompt


def test_reply_prompt_truncates_context_and_messages():
    from clipai.llm import budget
    from clipai.text.reply import build_reply_prompt

    prompt = build_reply_prompt(
        ["a" * (budget.MAX_INPUT_CHARS + 10)], context="c" * 600
    )
    assert "c" * budget.REPLY_CONTEXT_CHARS + budget.TRUNCATION_MARKER in prompt
    assert "c" * (budget.REPLY_CONTEXT_CHARS + 1) not in prompt
    assert "a" * (budget.MAX_INPUT_CHARS + 1) not in prompt


def test_generate_reply_rejects_oversized_prompt(run, make_orchestrator):
    from clipai.llm import budget
    from clipai.llm.errors import OversizedRequestError
    from clipai.text.reply import generate_reply

    orch, gw = make_orchestrator(responses={"fast": ["never"]})
    # ~4000 tokens of messages after per-message truncation
    messages = ["z" * 4000 for _ in range(budget.REPLY_MAX_MESSAGES)]

    with pytest.raises(OversizedRequestError) as exc:
        run(generate_reply(orch, messages))
    assert "too large" in str(exc.value)
    assert gw.calls == []


def test_generate_reply_propagates_after_fallback_exhausted(run, make_orchestrator):
    from clipai.llm.errors import MissingCredentialError
    from clipai.text.reply import generate_reply

    orch, _ = make_orchestrator(primary_key=None, fast_key=None)

    with pytest.raises(MissingCredentialError):
        run(generate_reply(orch, "hi"))
