"""Unit tests for the message store and models."""
import json
import threading

import pytest
from pydantic import ValidationError

from pyconverse.conversation import (
    TYPING,
    ChatMessage,
    Direction,
    InvalidStateError,
    MessageStore,
    Sender,
)


class TestChatMessage:
    """Tests for ChatMessage model."""

    def test_user_message(self):
        message = ChatMessage.from_user("hi")
        assert message.content == "hi"
        assert message.direction == Direction.OUTGOING
        assert message.sender == Sender.USER
        assert message.rendered_content is None
        assert message.outgoing

    def test_assistant_message_best_content(self):
        message = ChatMessage.from_assistant("**hi**", "<strong>hi</strong>")
        assert message.direction == Direction.INCOMING
        assert message.best_content == "<strong>hi</strong>"

    def test_best_content_falls_back_to_raw(self):
        assert ChatMessage.from_system("oops").best_content == "oops"

    def test_message_is_immutable(self):
        message = ChatMessage.from_user("hi")
        with pytest.raises(ValidationError):
            message.content = "changed"  # type: ignore[misc]

    def test_messages_get_distinct_ids(self):
        assert ChatMessage.from_user("a").uid != ChatMessage.from_user("a").uid


class TestMessageStore:
    """Tests for MessageStore."""

    def test_append_preserves_order(self, store):
        first = ChatMessage.from_user("one")
        second = ChatMessage.from_assistant("two")
        store.append(first)
        store.append(second)
        assert store.snapshot() == (first, second)
        assert len(store) == 2

    def test_listeners_receive_snapshot(self, store):
        received = []
        store.add_listener(received.append)
        message = ChatMessage.from_user("hi")
        store.append(message)
        assert received == [(message,)]

    def test_removed_listener_is_not_called(self, store):
        received = []
        store.add_listener(received.append)
        store.remove_listener(received.append)
        store.append(ChatMessage.from_user("hi"))
        assert received == []

    def test_typing_placeholder_excluded_from_snapshot(self, store):
        store.append(ChatMessage.from_user("hi"))
        store.append_typing_placeholder()
        assert store.has_typing_placeholder
        assert len(store.snapshot()) == 1
        assert store.entries()[-1] is TYPING

    def test_second_typing_placeholder_fails(self, store):
        store.append_typing_placeholder()
        with pytest.raises(InvalidStateError):
            store.append_typing_placeholder()
        assert store.entries() == [TYPING]

    def test_remove_typing_placeholder_when_absent_is_noop(self, store):
        received = []
        store.add_listener(received.append)
        store.remove_typing_placeholder()
        assert not store.has_typing_placeholder
        assert received == []

    def test_placeholder_stays_last(self, store):
        """Test that messages appended while typing land before the placeholder."""
        store.append_typing_placeholder()
        message = ChatMessage.from_system("notice")
        store.append(message)
        assert store.entries() == [message, TYPING]

    def test_clear_keeps_pending_placeholder(self, store):
        store.append(ChatMessage.from_user("hi"))
        store.append_typing_placeholder()
        store.clear()
        assert store.snapshot() == ()
        assert store.entries() == [TYPING]

    def test_last_message_by_sender(self, store):
        store.append(ChatMessage.from_assistant("first"))
        store.append(ChatMessage.from_user("question"))
        assert store.last_message().content == "question"
        assert store.last_message(Sender.ASSISTANT).content == "first"
        assert store.last_message(Sender.SYSTEM) is None

    def test_to_json(self, store):
        assert store.to_json() is None
        store.append(ChatMessage.from_user("hi"))
        exported = json.loads(store.to_json())
        assert exported[0]["content"] == "hi"
        assert exported[0]["sender"] == "user"
        assert exported[0]["direction"] == "outgoing"

    def test_mutation_from_other_thread_is_refused(self, store):
        errors = []

        def worker():
            try:
                store.append(ChatMessage.from_user("from thread"))
            except InvalidStateError as e:
                errors.append(e)

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert len(errors) == 1
        assert store.snapshot() == ()

    def test_thread_check_can_be_disabled(self):
        store = MessageStore(check_thread=False)
        thread = threading.Thread(target=lambda: store.append(ChatMessage.from_user("x")))
        thread.start()
        thread.join()
        assert len(store) == 1
