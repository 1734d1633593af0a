from healthmate.services.conversation_router import (
    EMERGENCY_REPLY,
    Intent,
    classify_message,
    route_message,
)


def test_booking_takes_precedence_over_emergency():
    text = "Book an appointment with a cardiologist, it's an emergency"
    assert classify_message(text) == Intent.BOOKING


def test_book_doctor_is_booking():
    assert classify_message("Can I BOOK a doctor for tomorrow?") == Intent.BOOKING


def test_book_alone_is_not_booking():
    assert classify_message("Which book should I read about diabetes?") == Intent.GENERAL_QUESTION


def test_find_doctor():
    assert classify_message("please find doctor near me") == Intent.FIND_DOCTOR
    assert classify_message("Search doctor in Pune") == Intent.FIND_DOCTOR


def test_ambulance_routes_to_emergency_reply():
    decision = route_message("Need an ambulance now")

    assert decision.intent == Intent.EMERGENCY
    assert decision.canned_reply == EMERGENCY_REPLY
    assert "108" in decision.canned_reply
    assert not decision.needs_llm


def test_urgent_is_emergency():
    assert classify_message("This is urgent") == Intent.EMERGENCY


def test_general_question_needs_llm():
    decision = route_message("What are the symptoms of dengue?")

    assert decision.intent == Intent.GENERAL_QUESTION
    assert decision.canned_reply is None
    assert decision.needs_llm
