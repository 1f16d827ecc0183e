"""
Fixed prompts, schemas and conversations used by the demo routes.
"""

from __future__ import annotations

import json

from routerproxy.models import ChatMessage, ResponseSchema

WEATHER_PROMPT = "What's the weather like in London? Give a dummy example if you don't know."

WEATHER_SCHEMA = ResponseSchema.model_validate(
    {
        "name": "weather",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": "City or location name",
                },
                "temperature": {
                    "type": "number",
                    "description": "Temperature in Celsius",
                },
                "conditions": {
                    "type": "string",
                    "description": "Weather conditions description",
                },
            },
            "required": ["location", "temperature", "conditions"],
            "additionalProperties": False,
        },
    }
)

JAVASCRIPT_HISTORY = (
    ChatMessage.user("What is JavaScript?"),
    ChatMessage.assistant(
        "JavaScript is a programming language used to build interactive websites and applications."
    ),
    ChatMessage.user("Can you explain what variables are in JavaScript?"),
)

LONDON_TRIP_HISTORY = (
    ChatMessage.user("Hey, I'm planning a trip to London."),
    ChatMessage.assistant("Sounds exciting! What info you need for the trip?"),
    ChatMessage.user("Can you tell me the current weather there?"),
)

# Embedded in the prompt text rather than sent as a response_format.
CONTENT_IDEA_SCHEMA = {
    "type": "object",
    "properties": {
        "response_message": {
            "type": "string",
            "description": "Response message for the user",
        },
        "title": {
            "type": "string",
            "description": "Title of the content",
        },
        "ideas": {
            "type": "array",
            "description": "List of content ideas",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "Title of the idea"},
                    "description": {"type": "string", "description": "Description of the idea"},
                    "example": {"type": "string", "description": "Example demonstrating the idea"},
                    "benefit": {"type": "string", "description": "Benefit of implementing this idea"},
                },
                "required": ["title", "description", "example", "benefit"],
            },
        },
        "follow_up_question": {
            "type": "string",
            "description": "Follow-up question to gather additional requirements or set to empty if none needed",
        },
    },
    "required": ["response_message", "title", "ideas", "follow_up_question"],
}

_CONTENT_IDEA_INSTRUCTIONS = """\
Expand the niche "Beginner-friendly personal finance" into a single useful content idea suitable for building a structured resource like a course or membership.

1. Do not describe the niche itself. Focus directly on the content idea.
2. Provide just one practical content idea that a creator could develop and offer to others.
3. Include:
   - A clear, concise title (avoid using buzzwords or promotional terms)
   - A short description explaining the focus of the course or membership
   - A specific example of what the content would include
   - A brief explanation of how it helps the learner or user

Before listing the idea, include a short and friendly summary (response_message) introducing the content idea in natural language, without referring to technical schema fields like "title" or "description".

Additionally, include a follow-up question to gather any final requirements or changes needed for the resource structure, such as:
- Any adjustments needed to the difficulty level or target audience?
- Should we modify the module structure or lesson focus?
- Any specific topics that should be emphasized or de-emphasized?
- Changes to the overall learning path or progression?
- Any other refinements to better serve your audience's needs?

Note: Text will be appended after your response asking if the user wants to proceed with creating the resource.

If the user has already provided comprehensive resource requirements and no adjustments are needed, set follow_up_question to null or empty string.

Avoid using words like "monetization", "innovation", "transformative", or similar jargon. Use simple, helpful language focused on clarity and usefulness.

Return the response as structured JSON."""


def build_schema_prompt(instructions: str, schema: dict) -> str:
    """Append a JSON-only instruction carrying `schema` to a prompt."""
    return (
        f"{instructions}"
        "\n\nYou must respond with JSON that strictly follows this exact schema:\n"
        f"{json.dumps(schema, separators=(',', ':'))}"
        "\n\nImportant: Only return the raw JSON with no additional text, commentary, "
        "or markdown formatting. The response must be valid JSON that can be parsed directly."
    )


CONTENT_IDEA_PROMPT = build_schema_prompt(_CONTENT_IDEA_INSTRUCTIONS, CONTENT_IDEA_SCHEMA)
