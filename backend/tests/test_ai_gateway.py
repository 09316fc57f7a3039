import asyncio

import httpx
import pytest

from circles.config import Settings
from circles.services.ai_gateway import (
    AIConfigurationError,
    AIGateway,
    AIGatewayError,
    AIPaymentRequiredError,
    AIRateLimitError,
    NO_CONTACTS_MESSAGE,
    TONE_GUIDANCE,
    UNPARSEABLE_SEARCH_MESSAGE,
    parse_search_reply,
)

CONTACTS = [
    {"id": "c1", "name": "Jane Doe", "company": "Acme", "role": "CTO", "notes": None, "tags": ["investor"], "layer": "vip"},
    {"id": "c2", "name": "Bob Smith", "company": None, "role": "Designer", "notes": "Met at a conference", "tags": None, "layer": "regular"},
]


def run(coro):
    return asyncio.run(coro)


def test_generate_message_uses_layer_tone(ai_gateway, fake_ai):
    fake_ai.reply("  Happy birthday! Drinks on me this weekend?  ")

    message = run(ai_gateway.generate_message("Jane", "vip", "birthday", "Jane's birthday", "Turning 40"))

    assert message == "Happy birthday! Drinks on me this weekend?"
    payload = fake_ai.requests[0]
    system, user = payload["messages"]
    assert TONE_GUIDANCE["vip"] in system["content"]
    assert user["content"].startswith("Write a birthday message for Jane.")
    assert "- Additional details: Turning 40" in user["content"]


def test_generate_message_defaults_for_unknown_values(ai_gateway, fake_ai):
    fake_ai.reply("Hope all is well.")

    run(ai_gateway.generate_message("Bob", "acquaintance", "surprise", "Catch up"))

    system, user = fake_ai.requests[0]["messages"]
    assert TONE_GUIDANCE["regular"] in system["content"]
    assert user["content"].startswith("Write a thoughtful message to reach out")
    assert "Additional details" not in user["content"]


def test_empty_generation_is_an_error(ai_gateway, fake_ai):
    fake_ai.reply("   ")
    with pytest.raises(AIGatewayError):
        run(ai_gateway.generate_message("Bob", "regular", "manual", "Hello"))


def test_missing_api_key_fails_before_any_request(fake_ai):
    gateway = AIGateway(settings=Settings(ai_api_key=""), transport=httpx.MockTransport(fake_ai.handler))
    with pytest.raises(AIConfigurationError) as excinfo:
        run(gateway.summarize("notes"))
    assert excinfo.value.status_code == 500
    assert fake_ai.requests == []


@pytest.mark.parametrize(
    "status,error,code",
    [(429, AIRateLimitError, 429), (402, AIPaymentRequiredError, 402), (503, AIGatewayError, 500)],
)
def test_upstream_status_codes_map_to_errors(ai_gateway, fake_ai, status, error, code):
    fake_ai.status_code = status
    with pytest.raises(error) as excinfo:
        run(ai_gateway.summarize("notes"))
    assert excinfo.value.status_code == code


def test_search_without_contacts_skips_the_model(ai_gateway, fake_ai):
    result = run(ai_gateway.search_contacts("anyone?", []))
    assert result == {"matched_ids": [], "message": NO_CONTACTS_MESSAGE}
    assert fake_ai.requests == []


def test_search_vip_shortcut_answers_locally(ai_gateway, fake_ai):
    result = run(ai_gateway.search_contacts("Who are my VIPs?", CONTACTS))
    assert result["matched_ids"] == ["c1"]
    assert result["message"] == "You have 1 VIP contact:"
    assert fake_ai.requests == []


def test_search_asks_the_model_and_drops_unknown_ids(ai_gateway, fake_ai):
    fake_ai.reply('```json\n{"matchedIds": ["c2", "ghost"], "message": "Found the designer."}\n```')

    result = run(ai_gateway.search_contacts("the designer from the conference", CONTACTS))

    assert result == {"matched_ids": ["c2"], "message": "Found the designer."}
    payload = fake_ai.requests[0]
    assert payload["temperature"] == 0.3
    system = payload["messages"][0]["content"]
    assert "ID: c1 | Name: Jane Doe | Company: Acme | Role: CTO | Notes: N/A | Tags: investor | Layer: vip" in system
    assert "ID: c2 | Name: Bob Smith | Company: N/A" in system


def test_unparseable_search_reply():
    assert parse_search_reply("no idea, sorry") == {"matched_ids": [], "message": UNPARSEABLE_SEARCH_MESSAGE}
    assert parse_search_reply("{not json}")["message"] == UNPARSEABLE_SEARCH_MESSAGE


def test_transcribe_sends_audio_part(ai_gateway, fake_ai):
    fake_ai.reply("Called Jane about the offsite.")

    text = run(ai_gateway.transcribe("UklGRg==", "webm"))

    assert text == "Called Jane about the offsite."
    user = fake_ai.requests[0]["messages"][1]
    assert user["content"][1] == {"type": "input_audio", "input_audio": {"data": "UklGRg==", "format": "webm"}}


def test_search_reply_with_null_ids_matches_nothing():
    assert parse_search_reply('{"matchedIds": null, "message": "none"}') == {"matched_ids": [], "message": "none"}


def test_search_reply_with_non_list_ids_is_unparseable():
    assert parse_search_reply('{"matchedIds": "c1", "message": "one"}')["message"] == UNPARSEABLE_SEARCH_MESSAGE
    assert parse_search_reply('{"matchedIds": 3}')["matched_ids"] == []


def gateway_with(handler):
    settings = Settings(ai_api_key="test-key", ai_gateway_url="https://ai.test/v1/chat/completions")
    return AIGateway(settings=settings, transport=httpx.MockTransport(handler))


def test_connection_failure_is_a_gateway_error():
    def refuse(request):
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(AIGatewayError) as excinfo:
        run(gateway_with(refuse).summarize("hi"))
    assert excinfo.value.status_code == 502


def test_timeout_is_a_gateway_error():
    def stall(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(AIGatewayError) as excinfo:
        run(gateway_with(stall).summarize("hi"))
    assert excinfo.value.status_code == 504


def test_non_json_body_is_a_gateway_error():
    def garbage(request):
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(AIGatewayError) as excinfo:
        run(gateway_with(garbage).summarize("hi"))
    assert excinfo.value.status_code == 502
