"""
AI Gateway Service

Thin wrapper over an OpenAI-compatible chat-completions endpoint. Used for:
- drafting short reach-out messages, with tone matched to the relationship layer
- natural-language search over the user's contacts
- summarizing conversation notes
- transcribing recorded voice notes (base64 audio)
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from circles.config import Settings, get_settings

logger = logging.getLogger(__name__)


class AIGatewayError(Exception):
    """Upstream AI call failed."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class AIConfigurationError(AIGatewayError):
    status_code = 500


class AIRateLimitError(AIGatewayError):
    status_code = 429


class AIPaymentRequiredError(AIGatewayError):
    status_code = 402


# Tone guidance based on relationship layer
TONE_GUIDANCE = {
    "vip": "Use a very casual, warm, and friendly tone like you're texting your best friend. Use informal language, can include emojis, and be playful.",
    "inner": "Use a friendly and warm tone, somewhat casual but still thoughtful. Like texting a good friend you see regularly.",
    "regular": "Use a balanced tone that's friendly but not too casual. Professional yet personable.",
    "occasional": "Use a polite and professional tone. Friendly but more formal, suitable for acquaintances or professional contacts.",
    "distant": "Use a professional and courteous tone. Formal but not cold, appropriate for business contacts or people you don't know well.",
}

OPPORTUNITY_PROMPTS = {
    "birthday": "Write a birthday message",
    "anniversary": "Write a warm message marking an anniversary",
    "follow_up": "Write a follow-up message based on a previous conversation",
    "event": "Write a message about an upcoming or recent event",
    "milestone": "Write a congratulatory message for an important milestone or achievement",
    "check_in": "Write a casual check-in message to see how they're doing",
    "manual": "Write a thoughtful message to reach out",
    "contact-reminder": "Write a friendly message to reconnect after not being in touch for a while",
}

MESSAGE_SYSTEM_PROMPT = """You are a helpful assistant that generates short, personalized messages for maintaining relationships.

{tone}

Generate messages that are:
- Short and concise (2-3 sentences max)
- Genuine and not generic
- Easy to copy and send via text or email
- Appropriate for the relationship level

Do not include greetings like "Hey" at the start if the tone is very casual - just get to the point.
Do not include sign-offs or your name at the end."""

SEARCH_SYSTEM_PROMPT = """You are a helpful assistant that searches through a user's contact list based on their description.

Given a list of contacts and a user query, identify which contacts match the description.

CONTACTS:
{contacts}

Respond with a JSON object containing:
1. "matchedIds": an array of contact IDs that match the query (can be empty if no matches)
2. "message": a brief, friendly message explaining your findings

Be flexible with matching - consider partial matches, similar roles, related companies, etc.
If the query is vague, try to find the most likely matches.
Only return the JSON object, no other text."""

SUMMARY_SYSTEM_PROMPT = """You are an assistant that summarizes conversation notes. Extract and organize:
1. Key professional information (role, company, projects, skills)
2. Personal information (family names, birthdays, hobbies, interests)
3. Action items or follow-ups mentioned
4. Important dates or events

Keep the summary concise but comprehensive. Format as bullet points."""

TRANSCRIBE_SYSTEM_PROMPT = (
    "You are a transcription assistant. The user will provide audio content encoded as base64. "
    "Transcribe it accurately, preserving the speaker's intent and correcting obvious speech errors for clarity."
)

NO_CONTACTS_MESSAGE = "You don't have any contacts yet. Add some contacts first!"
UNPARSEABLE_SEARCH_MESSAGE = "I had trouble understanding that. Could you describe them differently?"

VIP_QUERY_PATTERN = re.compile(r"\bvips?\b", re.IGNORECASE)


def format_contact_line(contact: Dict[str, Any]) -> str:
    tags = contact.get("tags") or []
    return (
        f"ID: {contact.get('id')} | Name: {contact.get('name')} | "
        f"Company: {contact.get('company') or 'N/A'} | Role: {contact.get('role') or 'N/A'} | "
        f"Notes: {contact.get('notes') or 'N/A'} | Tags: {', '.join(tags) or 'N/A'} | "
        f"Layer: {contact.get('layer')}"
    )


def parse_search_reply(content: str) -> Dict[str, Any]:
    """Pull the JSON object out of a model reply, tolerating code fences."""
    match = re.search(r"\{[\s\S]*\}", content or "")
    if match:
        try:
            data = json.loads(match.group(0))
            matched = data.get("matchedIds") or []
            if not isinstance(matched, list):
                raise TypeError(f"matchedIds is {type(matched).__name__}, expected a list")
            return {
                "matched_ids": [str(i) for i in matched],
                "message": str(data.get("message") or ""),
            }
        except (json.JSONDecodeError, TypeError, AttributeError) as e:
            logger.warning(f"JSON parse failed: {e}")
    logger.error(f"Failed to parse AI search response: {content!r}")
    return {"matched_ids": [], "message": UNPARSEABLE_SEARCH_MESSAGE}


class AIGateway:
    """Client for the chat-completions gateway."""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self._transport = transport

    async def _chat(self, messages: List[Dict[str, Any]], temperature: Optional[float] = None) -> str:
        if not self.settings.ai_api_key:
            raise AIConfigurationError("AI_API_KEY is not configured")

        payload: Dict[str, Any] = {"model": self.settings.ai_model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.ai_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.settings.ai_gateway_url,
                    headers={"Authorization": f"Bearer {self.settings.ai_api_key}"},
                    json=payload,
                )
        except httpx.ConnectError:
            logger.error(f"Cannot connect to AI gateway at {self.settings.ai_gateway_url}")
            raise AIGatewayError("AI gateway unavailable", status_code=502)
        except httpx.TimeoutException:
            logger.error("AI gateway request timed out")
            raise AIGatewayError("AI gateway request timed out", status_code=504)
        except httpx.TransportError as e:
            logger.error(f"AI gateway transport error: {e}")
            raise AIGatewayError("AI gateway unavailable", status_code=502)

        if response.status_code == 429:
            raise AIRateLimitError("Rate limit exceeded, please try again later")
        if response.status_code == 402:
            raise AIPaymentRequiredError("Payment required, please add credits")
        if response.is_error:
            logger.error(f"AI gateway error: {response.status_code} {response.text}")
            raise AIGatewayError(f"AI gateway error: {response.status_code}")

        try:
            data = response.json()
            return (data.get("choices") or [{}])[0].get("message", {}).get("content") or ""
        except (ValueError, AttributeError, IndexError, TypeError) as e:
            logger.error(f"Malformed AI gateway response: {e}")
            raise AIGatewayError("Malformed AI gateway response", status_code=502)

    async def generate_message(
        self,
        contact_name: str,
        contact_layer: str,
        opportunity_type: str,
        title: str,
        description: Optional[str] = None,
    ) -> str:
        """Draft a short message to send to a contact."""
        tone = TONE_GUIDANCE.get(contact_layer, TONE_GUIDANCE["regular"])
        type_prompt = OPPORTUNITY_PROMPTS.get(opportunity_type, OPPORTUNITY_PROMPTS["manual"])

        user_prompt = f"{type_prompt} for {contact_name}.\n\nContext:\n- Title/Reason: {title}\n"
        if description:
            user_prompt += f"- Additional details: {description}\n"
        user_prompt += "\nGenerate just the message text, nothing else."

        logger.info(f"Generating message for {contact_name}, layer: {contact_layer}, type: {opportunity_type}")
        content = await self._chat([
            {"role": "system", "content": MESSAGE_SYSTEM_PROMPT.format(tone=tone)},
            {"role": "user", "content": user_prompt},
        ])

        message = content.strip()
        if not message:
            raise AIGatewayError("No message generated")
        return message

    async def search_contacts(self, query: str, contacts: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Match a free-text description against contact profiles."""
        if not contacts:
            return {"matched_ids": [], "message": NO_CONTACTS_MESSAGE}

        # Demo shortcut: "show me my VIPs" is answered from the layer field
        if VIP_QUERY_PATTERN.search(query):
            matched = [str(c["id"]) for c in contacts if c.get("layer") == "vip"]
            if matched:
                message = f"You have {len(matched)} VIP contact{'s' if len(matched) > 1 else ''}:"
            else:
                message = "You don't have any VIP contacts yet."
            return {"matched_ids": matched, "message": message}

        context = "\n".join(format_contact_line(c) for c in contacts)
        content = await self._chat(
            [
                {"role": "system", "content": SEARCH_SYSTEM_PROMPT.format(contacts=context)},
                {"role": "user", "content": query},
            ],
            temperature=0.3,
        )
        result = parse_search_reply(content)

        known = {str(c["id"]) for c in contacts}
        result["matched_ids"] = [i for i in result["matched_ids"] if i in known]
        return result

    async def summarize(self, text: str) -> str:
        content = await self._chat([
            {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
            {"role": "user", "content": f"Please summarize this conversation note:\n\n{text}"},
        ])
        return content.strip()

    async def transcribe(self, audio: str, audio_format: str = "webm") -> str:
        content = await self._chat([
            {"role": "system", "content": TRANSCRIBE_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Please transcribe this audio:"},
                    {"type": "input_audio", "input_audio": {"data": audio, "format": audio_format}},
                ],
            },
        ])
        return content.strip()


# ============== Global Instance ==============

_ai_gateway: Optional[AIGateway] = None


def get_ai_gateway() -> AIGateway:
    """Get or create the AI gateway instance."""
    global _ai_gateway
    if _ai_gateway is None:
        _ai_gateway = AIGateway()
    return _ai_gateway
