"""LLM prompt builders.

``build_summary_prompt`` asks for a free-form summary of the document text.
``build_primary_prompt`` and ``build_strict_prompt`` ask the model to restate
such a summary as one JSON object with the four structured ``SummaryRecord``
fields; the strict variant is used for the single retry after a reply that
did not parse.  All builders are pure templates.
"""


def build_summary_prompt(text: str) -> str:
    """Prompt for a natural-language summary of extracted document text."""
    return f"""\
Summarize the following PDF text in a natural, unstructured way. Provide key \
insights, deadlines, action items, and any relevant details for officials.

Text:
{text}"""


def build_primary_prompt(text: str) -> str:
    """Build the first-attempt structuring prompt.

    Args:
        text: The free-form summary (or document text) to restructure.

    Returns:
        A prompt requesting one JSON object with exactly the keys
        ``short_summary``, ``relevance_to_officials``, ``action_items`` and
        ``confidence_estimate``.
    """
    return f"""\
Convert the summary below into structured data.

Return exactly ONE valid JSON object with exactly these keys:
- "short_summary": a string with a concise synopsis of the document.
- "relevance_to_officials": a list of strings, each one point that matters to \
officials (deadlines, amounts, obligations, affected parties).
- "action_items": a list of strings, each one concrete action to take.
- "confidence_estimate": one of "high", "medium", "low", "unknown".

Output rules:
- Output only the JSON document, no prose, no markdown fences, no comments.
- Do not add extra keys.
- If a list value is unknown, use an empty list [].
- If the confidence is unknown, use "unknown".

Summary:
{text}"""


def build_strict_prompt(text: str) -> str:
    """Build the retry prompt: same schema, fewer words, harder constraints."""
    return f"""\
Return ONLY a JSON object. No other text before or after it.

Schema:
{{
  "short_summary": string,
  "relevance_to_officials": string[],
  "action_items": string[],
  "confidence_estimate": "high" | "medium" | "low" | "unknown"
}}

Unknown lists must be []. Unknown confidence must be "unknown".

Summary:
{text}"""
