"""Prompt Builder — turns (topic, style, category) into the provider instruction.

Invariants:
    - build_joke_prompt is total: unknown styles get the generic clause, never an error
    - Output is deterministic for identical inputs
    - Every prompt ends with the "joke only" instruction
"""

COMEDIAN_SYSTEM_PROMPT = (
    "You are a professional comedian who creates funny, clever jokes. "
    "Your jokes are witty, appropriate, and make people laugh."
)

_STYLE_CLAUSES: dict[str, str] = {
    "pun": "Use wordplay and double meanings. Make it clever and witty.",
    "one-liner": "Keep it short and punchy. One sentence maximum.",
    "dad-joke": "Make it wholesome and groan-worthy in a good way.",
    "dark": "Make it edgy but tasteful. Not offensive.",
    "observational": "Point out something relatable and funny about everyday life.",
}

_GENERIC_CLAUSE = "Make it funny and entertaining."
_JOKE_ONLY = "Just return the joke, nothing else."


def build_joke_prompt(topic: str, style: str, category: str | None = None) -> str:
    """Build the user prompt for one joke."""
    style = getattr(style, "value", style)
    prompt = f"Generate a {style} joke"
    if category and category.strip():
        prompt += f" in the {category.strip()} category"
    prompt += f" about {topic}."
    prompt += " " + _STYLE_CLAUSES.get(style, _GENERIC_CLAUSE)
    prompt += " " + _JOKE_ONLY
    return prompt
