from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from clipai import logger as logger_mod
from clipai.llm import budget
from clipai.llm.errors import LLMError

log = logger_mod.get_logger()

MIN_MESSAGE_CHARS = 10
MAX_DETECTED_CHARS = 10000  # larger text is a document, not a chat message
MAX_REPLY_SOURCE_CHARS = 8000
MAX_REPLY_MESSAGE_CHARS = 5000

ReplyFn = Callable[[str, str], Awaitable[str]]


@dataclass(frozen=True)
class DetectedMessage:
    app: str
    message: str
    reply: Optional[str]
    active_app: Optional[str] = None


Listener = Callable[[DetectedMessage], None]


class ChatAssistant:
    """Experimental auto-responder.

    Capturing text from other applications is left to the host; it feeds
    observations in and receives DetectedMessage notifications with a drafted
    reply (or None when drafting was skipped or failed).
    """

    def __init__(self, reply_fn: ReplyFn) -> None:
        self._reply_fn = reply_fn
        self._watched: list[str] = []
        self._last_seen: dict[str, str] = {}
        self._listeners: list[Listener] = []
        self._monitoring = False
        self._last_clipboard: Optional[str] = None

    @property
    def watched_apps(self) -> list[str]:
        return list(self._watched)

    @property
    def is_monitoring(self) -> bool:
        return self._monitoring

    def watch(self, app: str) -> None:
        if app not in self._watched:
            self._watched.append(app)
            self._last_seen[app] = ""

    def unwatch(self, app: str) -> None:
        self._watched = [a for a in self._watched if a != app]
        self._last_seen.pop(app, None)

    def add_listener(self, callback: Listener) -> None:
        self._listeners.append(callback)

    def start(self, callback: Optional[Listener] = None) -> None:
        if self._monitoring:
            return
        self._monitoring = True
        if callback is not None:
            self._listeners.append(callback)

    def stop(self) -> None:
        self._monitoring = False
        self._listeners = []
        self._last_clipboard = None

    def matches_watched(self, active_app: str) -> bool:
        if not self._watched:
            return True
        active = active_app.lower()
        return any(app.lower() in active for app in self._watched)

    @staticmethod
    def is_candidate_clipboard_message(text: Optional[str]) -> bool:
        if not text or len(text) <= MIN_MESSAGE_CHARS:
            return False
        return not text.startswith("http")

    async def observe(self, active_app: str, current_text: str) -> list[Optional[str]]:
        """Compare the focused text of `active_app` with what was last seen.

        Text that grew by more than MIN_MESSAGE_CHARS is treated as a newly
        received message. Returns the replies drafted for this observation.
        """

        replies: list[Optional[str]] = []
        active = active_app.lower()
        for app in list(self._watched):
            if app.lower() not in active:
                continue
            last = self._last_seen.get(app, "")
            if not current_text or current_text == last or len(current_text) <= len(last):
                continue
            new_message = current_text[len(last) :].strip()
            if len(new_message) <= MIN_MESSAGE_CHARS:
                continue
            self._last_seen[app] = current_text
            replies.append(await self.handle_new_message(app, new_message, active_app))
        return replies

    async def observe_clipboard(
        self, active_app: str, clipboard_text: Optional[str]
    ) -> Optional[str]:
        """Clipboard mode: a copied message in a watched app is treated as received.

        The host polls the clipboard and calls this with each reading. Repeated
        readings of the same text are ignored.
        """

        if not self._monitoring:
            return None
        if clipboard_text == self._last_clipboard:
            return None
        if not self.is_candidate_clipboard_message(clipboard_text):
            return None
        if not self.matches_watched(active_app):
            return None

        self._last_clipboard = clipboard_text
        return await self.handle_new_message(active_app, clipboard_text, active_app)

    async def handle_new_message(
        self, app: str, message: str, active_app: Optional[str] = None
    ) -> Optional[str]:
        if len(message) > MAX_DETECTED_CHARS:
            log.info(f"Skipping large message in {app} ({len(message)} chars)")
            return None

        log.info(f"New message detected in {app}: {message[:100]}")
        reply = await self.draft_reply(message, app)

        event = DetectedMessage(app=app, message=message, reply=reply, active_app=active_app)
        for callback in list(self._listeners):
            try:
                callback(event)
            except Exception:  # noqa: BLE001
                log.exception(f"Listener failed for message in {app}")
        return reply

    async def draft_reply(self, message: str, context: str = "") -> Optional[str]:
        if len(message) > MAX_REPLY_SOURCE_CHARS:
            log.info("Message too large for AI reply, skipping")
            return None

        limited = budget.truncate(message, MAX_REPLY_MESSAGE_CHARS)
        try:
            reply = await self._reply_fn(limited, context)
        except LLMError as e:
            log.error(f"Error generating reply: {e}")
            return None
        return reply.strip() if reply else None
