from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Intent(str, Enum):
    BOOKING = "booking"
    FIND_DOCTOR = "find_doctor"
    EMERGENCY = "emergency"
    GENERAL_QUESTION = "general_question"


EMERGENCY_NUMBERS = {
    "ambulance": "108",
    "police": "100",
    "fire": "101",
    "women_helpline": "1091",
}


BOOKING_REPLY = (
    "I'll help you book an appointment! Please tell me:\n\n"
    "1️⃣ **Doctor's name** or **specialization** (e.g., 'cardiologist', 'Dr. Smith')\n\n"
    "You can also visit the 'Find Doctors' section to browse available doctors and book directly."
)

FIND_DOCTOR_REPLY = (
    "I can help you find doctors! Please specify:\n\n"
    "🔍 **Search by:**\n"
    "- Specialization (e.g., cardiologist, pediatrician)\n"
    "- Doctor's name\n"
    "- Location (city or area)\n\n"
    "Example: 'Find cardiologist in Mumbai' or 'Dr. Smith'\n\n"
    "You can also use the 'Find Doctors' page for a complete search experience."
)

EMERGENCY_REPLY = (
    "🚨 **EMERGENCY SERVICES**\n\n"
    f"📞 **Ambulance**: {EMERGENCY_NUMBERS['ambulance']}\n"
    f"📞 **Police**: {EMERGENCY_NUMBERS['police']}\n"
    f"📞 **Fire**: {EMERGENCY_NUMBERS['fire']}\n"
    f"📞 **Women Helpline**: {EMERGENCY_NUMBERS['women_helpline']}\n\n"
    "For non-emergency help, you can:\n"
    "- Add emergency contacts in the Emergency section\n"
    "- Save your personal doctor's number\n"
    "- Add family members' contact information\n\n"
    f"*If this is a medical emergency, please call {EMERGENCY_NUMBERS['ambulance']} immediately.*"
)

CANNED_REPLIES = {
    Intent.BOOKING: BOOKING_REPLY,
    Intent.FIND_DOCTOR: FIND_DOCTOR_REPLY,
    Intent.EMERGENCY: EMERGENCY_REPLY,
}


@dataclass(frozen=True)
class RouteDecision:
    intent: Intent
    canned_reply: Optional[str] = None

    @property
    def needs_llm(self) -> bool:
        return self.canned_reply is None


def normalize_text(text: str) -> str:
    return (text or "").strip().lower()


def classify_message(text: str) -> Intent:
    """
    First matching rule wins. Booking and emergency never depend on the
    LLM being reachable.
    """
    t = normalize_text(text)

    if "book" in t and ("appointment" in t or "doctor" in t):
        return Intent.BOOKING

    if "find doctor" in t or "search doctor" in t:
        return Intent.FIND_DOCTOR

    if any(k in t for k in ("emergency", "ambulance", "urgent")):
        return Intent.EMERGENCY

    return Intent.GENERAL_QUESTION


def canned_response(intent: Intent) -> Optional[str]:
    return CANNED_REPLIES.get(intent)


def route_message(text: str) -> RouteDecision:
    intent = classify_message(text)
    return RouteDecision(intent=intent, canned_reply=canned_response(intent))
