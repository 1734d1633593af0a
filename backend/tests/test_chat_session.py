import pytest

from healthmate.core.errors import UpstreamError
from healthmate.services.chat_service import ChatSession, ConversationWindow
from healthmate.services.llm_gateway import UnverifiedReply
from healthmate.utils.conversation_title import DEFAULT_TITLE, generate_conversation_title


def test_window_keeps_last_ten_in_order():
    window = ConversationWindow()
    for i in range(13):
        window.append("user", f"m{i}")

    assert len(window) == 10
    assert [e.content for e in window.entries()] == [f"m{i}" for i in range(3, 13)]


def test_turn_sets_and_clears_loading():
    session = ChatSession(conversation_id=1)

    session.append_user_message("hello")
    session.start_loading()
    assert session.is_loading

    session.append_reply(UnverifiedReply(text="hi there"))
    session.finish_loading()

    assert not session.is_loading
    assert [(e.role, e.content) for e in session.context()] == [("user", "hello"), ("assistant", "hi there")]


def test_error_turn_shows_friendly_message():
    session = ChatSession()
    error = UpstreamError("HTTP 500 from upstream")

    session.append_user_message("hello")
    session.start_loading()
    session.append_error(error)
    session.finish_loading()

    assert not session.is_loading
    assert session.last_error is error
    assert session.context()[-1].content == error.user_message
    assert "500" not in session.context()[-1].content


def test_cannot_send_while_loading():
    session = ChatSession()
    session.append_user_message("first")
    session.start_loading()

    with pytest.raises(RuntimeError):
        session.append_user_message("second")


def test_cannot_start_loading_without_user_message():
    with pytest.raises(RuntimeError):
        ChatSession().start_loading()


def test_title_from_first_message():
    assert generate_conversation_title("I have a headache, and fever since yesterday night!") == (
        "I have a headache and fever"
    )
    assert generate_conversation_title("???") == DEFAULT_TITLE
