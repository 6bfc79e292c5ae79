import pytest


def _assistant(replies=None, fail=None):
    from clipai.assistant import ChatAssistant

    calls = []

    async def reply_fn(message, context):
        calls.append((message, context))
        if fail is not None:
            raise fail
        return (replies or {}).get(message, "  ok  ")

    return ChatAssistant(reply_fn), calls


def test_watch_and_unwatch():
    assistant, _ = _assistant()

    assistant.watch("Slack")
    assistant.watch("Slack")
    assistant.watch("Discord")
    assert assistant.watched_apps == ["Slack", "Discord"]

    assistant.unwatch("Slack")
    assert assistant.watched_apps == ["Discord"]


def test_matches_watched_is_case_insensitive_substring():
    assistant, _ = _assistant()
    assert assistant.matches_watched("Anything") is True

    assistant.watch("slack")
    assert assistant.matches_watched("Slack - #general") is True
    assert assistant.matches_watched("Terminal") is False


@pytest.mark.parametrize(
    "text,expected",
    [
        (None, False),
        ("", False),
        ("short", False),
        ("exactly 10", False),
        ("https://example.com/long/path", False),
        ("Are we still on for lunch?", True),
    ],
)
def test_is_candidate_clipboard_message(text, expected):
    from clipai.assistant import ChatAssistant

    assert ChatAssistant.is_candidate_clipboard_message(text) is expected


def test_start_stop_manage_listeners():
    assistant, _ = _assistant()
    seen = []

    assistant.start(seen.append)
    assistant.start(seen.append)
    assert assistant.is_monitoring is True

    assistant.stop()
    assert assistant.is_monitoring is False
    assert assistant._listeners == []


def test_observe_drafts_reply_for_new_text(run):
    assistant, calls = _assistant()
    events = []
    assistant.watch("Slack")
    assistant.start(events.append)

    replies = run(assistant.observe("Slack", "Hello, can you review my PR?"))

    assert replies == ["ok"]
    assert calls == [("Hello, can you review my PR?", "Slack")]
    assert len(events) == 1
    assert events[0].app == "Slack"
    assert events[0].reply == "ok"
    assert events[0].active_app == "Slack"


def test_observe_only_sends_the_appended_part(run):
    assistant, calls = _assistant()
    assistant.watch("Slack")

    run(assistant.observe("Slack", "First message here"))
    run(assistant.observe("Slack", "First message here\nSecond message arrived"))

    assert [c[0] for c in calls] == ["First message here", "Second message arrived"]


def test_observe_ignores_unchanged_short_and_unwatched(run):
    assistant, calls = _assistant()
    assistant.watch("Slack")

    run(assistant.observe("Slack", "A long enough message"))
    assert run(assistant.observe("Slack", "A long enough message")) == []
    assert run(assistant.observe("Slack", "A long enough message ok")) == []
    assert run(assistant.observe("Terminal", "something else entirely")) == []
    assert len(calls) == 1


def test_large_messages_are_skipped(run):
    from clipai.assistant import MAX_DETECTED_CHARS, MAX_REPLY_SOURCE_CHARS

    assistant, calls = _assistant()

    assert run(assistant.handle_new_message("Slack", "x" * (MAX_DETECTED_CHARS + 1))) is None
    assert run(assistant.draft_reply("y" * (MAX_REPLY_SOURCE_CHARS + 1))) is None
    assert calls == []


def test_draft_reply_truncates_source(run):
    from clipai.assistant import MAX_REPLY_MESSAGE_CHARS
    from clipai.llm import budget

    assistant, calls = _assistant()

    run(assistant.draft_reply("m" * (MAX_REPLY_MESSAGE_CHARS + 100), "Mail"))

    sent, context = calls[0]
    assert sent == "m" * MAX_REPLY_MESSAGE_CHARS + budget.TRUNCATION_MARKER
    assert context == "Mail"


def test_draft_reply_failure_yields_none_and_still_notifies(run):
    from clipai.llm.errors import RateLimitedError

    assistant, _ = _assistant(fail=RateLimitedError("TPM"))
    events = []
    assistant.add_listener(events.append)

    assert run(assistant.handle_new_message("Slack", "Ping me when free")) is None
    assert events[0].reply is None


def test_listener_failure_does_not_block_others(run):
    assistant, _ = _assistant()
    events = []

    def broken(_event):
        raise RuntimeError("listener bug")

    assistant.add_listener(broken)
    assistant.add_listener(events.append)

    assert run(assistant.handle_new_message("Slack", "Anyone around today?")) == "ok"
    assert len(events) == 1


def test_observe_clipboard_requires_monitoring(run):
    assistant, calls = _assistant()

    assert run(assistant.observe_clipboard("Slack", "Are we still on for lunch?")) is None
    assert calls == []


def test_observe_clipboard_filters_and_dedupes(run):
    assistant, calls = _assistant()
    events = []
    assistant.watch("slack")
    assistant.start(events.append)

    assert run(assistant.observe_clipboard("Terminal", "Are we still on for lunch?")) is None
    assert run(assistant.observe_clipboard("Slack", "https://example.com/long/path")) is None
    assert run(assistant.observe_clipboard("Slack", "short")) is None

    assert run(assistant.observe_clipboard("Slack - #team", "Are we still on for lunch?")) == "ok"
    assert run(assistant.observe_clipboard("Slack - #team", "Are we still on for lunch?")) is None

    assert calls == [("Are we still on for lunch?", "Slack - #team")]
    assert [e.app for e in events] == ["Slack - #team"]


def test_observe_clipboard_with_no_watched_apps_accepts_any_app(run):
    assistant, calls = _assistant()
    assistant.start()

    assert run(assistant.observe_clipboard("Mail", "Can you send the report?")) == "ok"
    assert calls == [("Can you send the report?", "Mail")]


def test_assistant_drives_service_reply(run, make_gateway):
    from clipai import ChatAssistant, ClipboardAI

    gw = make_gateway(responses={"fast": ["Sounds good."]})
    ai = ClipboardAI(gw)
    assistant = ChatAssistant(ai.generate_reply)

    assert run(assistant.draft_reply("Lunch at noon tomorrow?", "Slack")) == "Sounds good."
