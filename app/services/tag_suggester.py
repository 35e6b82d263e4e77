"""
Tag suggestion service.

Asks an OpenAI-compatible chat completions endpoint which of a group's tags
fit an image. Without an API key, or when the call or its reply fails, the
first few available tags are suggested instead so labelers always get an
answer.
"""

import json

import httpx

from app.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful AI assistant that suggests relevant image tags based on available options."
)


def available_tags(group_tags: list[str], ignored_tags: list[str]) -> list[str]:
    """Group tag names minus the ignored ones, keeping group order."""
    ignored = set(ignored_tags)
    return [tag for tag in group_tags if tag not in ignored]


def fallback_suggestions(group_tags: list[str], ignored_tags: list[str]) -> list[str]:
    """First MAX_SUGGESTIONS available tags."""
    return available_tags(group_tags, ignored_tags)[: settings.MAX_SUGGESTIONS]


def build_request_body(base64_data: str, filetype: str, tags: list[str]) -> dict:
    prompt = (
        "Based on the image provided, suggest all relevant tags from the available list.\n\n"
        f"Available tags: {', '.join(tags)}\n\n"
        'Example: ["tag1", "tag2", "tag3"]\n'
        "Return only a JSON array of tag names, nothing else."
    )
    mime_subtype = "jpeg" if filetype == "jpg" else filetype
    return {
        "model": settings.OPENAI_MODEL,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:image/{mime_subtype};base64,{base64_data}"},
                    },
                ],
            },
        ],
        "temperature": 0.7,
        "max_tokens": 150,
    }


def parse_suggestions(content: str, tags: list[str]) -> list[str]:
    """
    Parse a JSON array of tag names out of the model reply.

    Names outside ``tags`` are dropped. Code fences around the array are
    tolerated.

    Raises:
        ValueError: the reply is not a JSON array of strings
    """
    text = content.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.startswith("json"):
            text = text[len("json") :]
    suggestions = json.loads(text)
    if not isinstance(suggestions, list) or not all(isinstance(s, str) for s in suggestions):
        raise ValueError("Reply is not a JSON array of strings")

    allowed = set(tags)
    return [s for s in dict.fromkeys(suggestions) if s in allowed]


async def suggest_tags(
    base64_data: str,
    filetype: str,
    group_tags: list[str],
    ignored_tags: list[str],
) -> list[str]:
    """
    Suggest tag names for an image.

    Args:
        base64_data: Image payload
        filetype: Image filetype (e.g. "png")
        group_tags: Names of every tag of the image's group
        ignored_tags: Names the labeler already chose or rejected

    Returns:
        Suggested names, all drawn from ``group_tags`` minus ``ignored_tags``
    """
    tags = available_tags(group_tags, ignored_tags)
    if not tags:
        return []

    if not settings.OPENAI_API_KEY:
        logger.info("tag_suggestion_fallback", reason="no_api_key")
        return fallback_suggestions(group_tags, ignored_tags)

    try:
        async with httpx.AsyncClient(timeout=settings.OPENAI_TIMEOUT) as client:
            response = await client.post(
                settings.OPENAI_API_URL,
                headers={"Authorization": f"Bearer {settings.OPENAI_API_KEY}"},
                json=build_request_body(base64_data, filetype, tags),
            )
            response.raise_for_status()
            result = response.json()

        content = result["choices"][0]["message"]["content"]
        suggestions = parse_suggestions(content, tags)

    except httpx.HTTPError as e:
        logger.error("tag_suggestion_api_error", error=str(e))
        return fallback_suggestions(group_tags, ignored_tags)
    except (KeyError, IndexError, TypeError, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        logger.warning("tag_suggestion_fallback", reason="unparseable_reply", error=str(e))
        return fallback_suggestions(group_tags, ignored_tags)

    logger.info("tag_suggestion_success", suggestion_count=len(suggestions))
    return suggestions
