"""Unit tests for the conversation controller."""
import pytest

from pyconverse.conversation import (
    FAILURE_NOTICE,
    TYPING,
    ConversationController,
    ConversationState,
    Direction,
    InvalidConfigurationError,
    InvalidStateError,
    Sender,
)
from pyconverse.engine import FunctionEngine


class TestConfiguration:
    """Tests for engine configuration and input gating."""

    def test_missing_engine_rejected(self, store):
        controller = ConversationController(store=store)
        with pytest.raises(InvalidConfigurationError):
            controller.configure_engine(None)

    def test_non_callable_engine_rejected(self, store):
        controller = ConversationController(store=store)
        with pytest.raises(InvalidConfigurationError):
            controller.configure_engine(42)

    def test_submit_without_engine_fails(self, store):
        controller = ConversationController(store=store)
        with pytest.raises(InvalidConfigurationError):
            controller.submit("hi")
        assert len(store) == 0

    def test_engine_instance_is_kept(self, store):
        engine = FunctionEngine(str.upper, title="upper")
        controller = ConversationController(store=store)
        controller.configure_engine(engine)
        assert controller.engine is engine

    def test_can_submit_is_derived(self, store):
        controller = ConversationController(store=store)
        assert not controller.can_submit("hi")
        controller.configure_engine(str.upper)
        assert controller.can_submit("hi")
        assert not controller.can_submit("   ")
        assert not controller.can_submit("")

    def test_blank_submission_is_noop(self, controller, store):
        assert controller.submit("  \n\t ") is None
        assert len(store) == 0
        assert controller.state == ConversationState.IDLE


class TestRoundTrip:
    """Tests for dispatch and reconciliation."""

    @pytest.mark.asyncio
    async def test_upper_case_scenario(self, controller, store):
        """Test the basic request/reply round trip."""
        task = controller.submit("hi")
        await task

        transcript = store.snapshot()
        assert [(m.content, m.sender) for m in transcript] == [
            ("hi", Sender.USER),
            ("HI", Sender.ASSISTANT),
        ]
        assert transcript[0].direction == Direction.OUTGOING
        assert transcript[1].direction == Direction.INCOMING
        assert controller.state == ConversationState.IDLE
        assert not store.has_typing_placeholder

    @pytest.mark.asyncio
    async def test_outgoing_message_appended_before_completion(self, controller, store, gated_engine):
        controller.configure_engine(gated_engine)
        task = controller.submit("hi")
        try:
            assert [m.content for m in store.snapshot()] == ["hi"]
            assert store.entries()[-1] is TYPING
            assert controller.state == ConversationState.AWAITING_RESPONSE
            assert not controller.can_submit("another")
        finally:
            gated_engine.release.set()
        await task
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_reply_is_rendered(self, store):
        controller = ConversationController(store=store)
        controller.configure_engine(lambda text: "**done**")
        await controller.submit("go")
        reply = store.last_message()
        assert reply.content == "**done**"
        assert reply.rendered_content == "<strong>done</strong>"

    @pytest.mark.asyncio
    async def test_engine_failure_becomes_system_message(self, store, debug_log):
        def failing(text: str) -> str:
            raise RuntimeError("boom")

        controller = ConversationController(store=store)
        controller.configure_engine(failing)
        controller.set_debug_callback(debug_log)

        await controller.submit("hi")

        transcript = store.snapshot()
        assert len(transcript) == 2
        notice = transcript[1]
        assert notice.sender == Sender.SYSTEM
        assert notice.direction == Direction.INCOMING
        assert notice.content == f"{FAILURE_NOTICE} boom"
        assert controller.state == ConversationState.IDLE
        assert not store.has_typing_placeholder
        assert any(level == "error" and "boom" in message for level, _, message in debug_log.entries)

    @pytest.mark.asyncio
    async def test_controller_usable_after_failure(self, store):
        replies = iter([RuntimeError("first"), "second"])

        def flaky(text: str) -> str:
            reply = next(replies)
            if isinstance(reply, Exception):
                raise reply
            return reply

        controller = ConversationController(store=store)
        controller.configure_engine(flaky)
        await controller.submit("one")
        await controller.submit("two")

        assert [m.sender for m in store.snapshot()] == [
            Sender.USER,
            Sender.SYSTEM,
            Sender.USER,
            Sender.ASSISTANT,
        ]

    @pytest.mark.asyncio
    async def test_second_submit_rejected_while_awaiting(self, controller, store, gated_engine):
        """Test that only one request can be in flight."""
        controller.configure_engine(gated_engine)
        task = controller.submit("first")
        try:
            with pytest.raises(InvalidStateError):
                controller.submit("second")
            assert [m.content for m in store.snapshot()] == ["first"]
        finally:
            gated_engine.release.set()
        await task

        assert gated_engine.calls == ["first"]
        assert [m.content for m in store.snapshot()] == ["first", "reply to first"]

    @pytest.mark.asyncio
    async def test_transcript_grows_by_two_per_submission(self, controller, store):
        for index in range(3):
            await controller.submit(f"message {index}")
            assert len(store) == 2 * (index + 1)
        assert [m.outgoing for m in store.snapshot()] == [True, False] * 3

    @pytest.mark.asyncio
    async def test_state_listener_sees_transitions(self, controller):
        states = []
        controller.add_state_listener(states.append)
        await controller.submit("hi")
        assert states == [ConversationState.AWAITING_RESPONSE, ConversationState.IDLE]

    @pytest.mark.asyncio
    async def test_placeholder_removed_before_reply_appended(self, controller, store):
        """Test that observers never see the placeholder ahead of a reply."""
        seen = []
        store.add_listener(lambda snapshot: seen.append((len(snapshot), store.has_typing_placeholder)))
        await controller.submit("hi")
        assert seen == [(1, False), (1, True), (1, False), (2, False)]

    @pytest.mark.asyncio
    async def test_user_message_template_is_expanded_for_engine(self, store):
        received = []

        def engine(text: str) -> str:
            received.append(text)
            return "ok"

        controller = ConversationController(store=store)
        controller.configure_engine(engine)
        controller.user_message_template = "Translate: {{message}}"
        await controller.submit("bonjour")

        assert received == ["Translate: bonjour"]
        assert store.snapshot()[0].content == "bonjour"

    @pytest.mark.asyncio
    async def test_wait_idle(self, controller, store):
        await controller.wait_idle()
        controller.submit("hi")
        await controller.wait_idle()
        assert controller.state == ConversationState.IDLE
        assert len(store) == 2


class EngineAbort(BaseException):
    """Raised by an engine to simulate a non-Exception failure."""


class TestFailureKinds:
    """Tests for failures that are not ordinary exceptions."""

    @pytest.mark.asyncio
    async def test_base_exception_becomes_system_message(self, store, debug_log):
        def aborting(text: str) -> str:
            raise EngineAbort("halted")

        controller = ConversationController(store=store)
        controller.configure_engine(aborting)
        controller.set_debug_callback(debug_log)

        await controller.submit("hi")

        notice = store.last_message()
        assert notice.sender == Sender.SYSTEM
        assert notice.content == f"{FAILURE_NOTICE} halted"
        assert controller.state == ConversationState.IDLE
        assert not store.has_typing_placeholder
        assert any(level == "error" for level, _, _ in debug_log.entries)


class TestSystemMessageTemplate:
    """Tests for the system message shown when a conversation starts."""

    @pytest.mark.asyncio
    async def test_added_on_first_send_only(self, store):
        engine = FunctionEngine(str.upper, system_message_template="Reply in French to: {{message}}")
        controller = ConversationController(store=store)
        controller.configure_engine(engine)

        await controller.submit("hello")
        assert len(store) == 3
        system, user, reply = store.snapshot()
        assert system.sender == Sender.SYSTEM
        assert system.direction == Direction.INCOMING
        assert system.content == "Reply in French to: hello"
        assert (user.content, reply.content) == ("hello", "HELLO")

        await controller.submit("again")
        assert len(store) == 5
        assert [m.sender for m in store.snapshot()].count(Sender.SYSTEM) == 1

    @pytest.mark.asyncio
    async def test_added_again_after_clear(self, store):
        engine = FunctionEngine(str.upper, system_message_template="Be brief")
        controller = ConversationController(store=store)
        controller.configure_engine(engine)

        await controller.submit("one")
        store.clear()
        await controller.submit("two")

        assert [m.content for m in store.snapshot()] == ["Be brief", "two", "TWO"]

    @pytest.mark.asyncio
    async def test_not_sent_to_engine(self, store):
        received = []

        def engine(text: str) -> str:
            received.append(text)
            return "ok"

        controller = ConversationController(store=store)
        controller.configure_engine(FunctionEngine(engine, system_message_template="System {{message}}"))
        await controller.submit("hi")

        assert received == ["hi"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("template", [None, ""])
    async def test_empty_template_adds_nothing(self, store, template):
        controller = ConversationController(store=store)
        controller.configure_engine(FunctionEngine(str.upper, system_message_template=template))
        await controller.submit("hi")
        assert [m.sender for m in store.snapshot()] == [Sender.USER, Sender.ASSISTANT]


class TestUserMessageTemplate:
    """Tests for expansion of the user message template."""

    @pytest.mark.asyncio
    async def test_only_message_is_expanded_in_user_template(self, store):
        received = []
        controller = ConversationController(store=store)
        controller.configure_engine(lambda text: received.append(text) or "ok")
        controller.user_message_template = "{{message}} in {{city}}"
        await controller.submit("weather")
        assert received == ["weather in {{city}}"]
