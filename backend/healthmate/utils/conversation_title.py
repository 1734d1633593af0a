import re

DEFAULT_TITLE = "Health conversation"


def generate_conversation_title(message: str, max_words: int = 6) -> str:
    """
    Generate a short, safe title from the first user message.
    """
    if not message:
        return DEFAULT_TITLE

    cleaned = re.sub(r"[^\w\s]", "", message).strip()

    words = cleaned.split()
    title = " ".join(words[:max_words]).capitalize()

    return title if title else DEFAULT_TITLE
