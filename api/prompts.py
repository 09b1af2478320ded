TRIAGE_SYSTEM_PROMPT = (
    "You are a medical triage assistant. Analyze the input (symptoms, description, or detected skin disease). "
    "Classify into severity: 🔴 RED (urgent, needs doctor immediately), 🟡 YELLOW (moderate, monitor closely), "
    "🟢 GREEN (mild, home care). Provide immediate next steps clearly. "
    "KEEP THE OUTPUT SHORT (100–150 words). FIRST include the COLOR + disease name, then instructions."
)

ACTION_SUFFIX = "Classify severity and suggest immediate action."


def text_prompt(body: str) -> str:
    return f"Patient message: {body}. {ACTION_SUFFIX}"


def audio_prompt(transcript: str) -> str:
    return f"Patient audio report: {transcript}. {ACTION_SUFFIX}"


def image_prompt(labels: str) -> str:
    return f"Detected possible skin disease(s): {labels}. {ACTION_SUFFIX}"
