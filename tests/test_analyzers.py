"""
Message, link and screenshot analysis with the AI gateway stubbed out.

    pytest tests/test_analyzers.py
"""

import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from src.config import settings
from src.main import app
from src.services import link_service, llm_gateway, scam_detection_service, screenshot_service
from src.services.llm_gateway import (
    GatewayError,
    GatewayNotConfiguredError,
    GatewayPaymentError,
    GatewayRateLimitError,
)

client = TestClient(app)


def _stub_complete(monkeypatch, module, reply=None, error=None):
    calls = []

    async def fake_complete(system_prompt, user_content, temperature=None, max_tokens=None):
        calls.append(
            {
                "system_prompt": system_prompt,
                "user_content": user_content,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if error is not None:
            raise error
        return reply

    monkeypatch.setattr(module, "complete", fake_complete)
    return calls


# ---------------------------------------------------------------------------
# /message
# ---------------------------------------------------------------------------

def test_message_uses_gateway_verdict(monkeypatch):
    calls = _stub_complete(
        monkeypatch,
        scam_detection_service,
        reply='Result: {"risk": "high", "reason": "Requests a gift card payment"}',
    )

    r = client.post("/message", json={"message": "Pay me with a gift card"})

    assert r.status_code == 200
    assert r.json() == {
        "risk": "high",
        "reason": "Requests a gift card payment",
        "method": "gateway",
        "matched_phrases": [],
    }
    assert calls[0]["user_content"] == "Pay me with a gift card"
    assert "scam detection" in calls[0]["system_prompt"]


def test_message_unparsable_reply_is_medium(monkeypatch):
    _stub_complete(monkeypatch, scam_detection_service, reply="I think it is probably fine.")

    r = client.post("/message", json={"message": "hello there"})

    data = r.json()
    assert data["risk"] == "medium"
    assert data["reason"] == scam_detection_service.UNPARSABLE_REASON


def test_message_invalid_fields_are_repaired(monkeypatch):
    _stub_complete(monkeypatch, scam_detection_service, reply='{"risk": "extreme"}')

    r = client.post("/message", json={"message": "hello there"})

    data = r.json()
    assert data["risk"] == "medium"
    assert data["reason"] == scam_detection_service.DEFAULT_REASON


def test_message_falls_back_to_phrases_without_key(monkeypatch):
    monkeypatch.setattr(settings, "gateway_api_key", "")

    r = client.post("/message", json={"message": "Please send money via wire transfer immediately"})

    assert r.status_code == 200
    data = r.json()
    assert data["method"] == "phrases"
    assert data["risk"] == "high"
    assert data["matched_phrases"] == ["send money", "wire transfer"]


def test_message_falls_back_on_gateway_error(monkeypatch):
    _stub_complete(monkeypatch, scam_detection_service, error=GatewayError("AI gateway error"))

    r = client.post("/message", json={"message": "Click this link to confirm your identity"})

    data = r.json()
    assert data["method"] == "phrases"
    assert data["risk"] == "medium"


def test_message_rate_limit_is_429(monkeypatch):
    _stub_complete(
        monkeypatch,
        scam_detection_service,
        error=GatewayRateLimitError("Rate limit exceeded. Please try again later."),
    )

    r = client.post("/message", json={"message": "hello there"})

    assert r.status_code == 429
    assert r.json()["detail"] == "Rate limit exceeded. Please try again later."


def test_message_payment_required_is_402(monkeypatch):
    _stub_complete(monkeypatch, scam_detection_service, error=GatewayPaymentError("Payment required."))

    r = client.post("/message", json={"message": "hello there"})

    assert r.status_code == 402


def test_message_blank_is_rejected():
    assert client.post("/message", json={"message": "   "}).status_code == 422
    assert client.post("/message", json={}).status_code == 422


# ---------------------------------------------------------------------------
# /link
# ---------------------------------------------------------------------------

def test_link_parses_fenced_json(monkeypatch):
    reply = (
        "```json\n"
        '{"risk": "dangerous", "confidence": "high", "concerns": ["Typosquatted bank domain"], '
        '"analysis": "Imitates qnb.com.qa", "recommendation": "Do not open"}'
        "\n```"
    )
    calls = _stub_complete(monkeypatch, link_service, reply=reply)

    r = client.post("/link", json={"url": "http://qnb-secure-login.xyz"})

    assert r.status_code == 200
    data = r.json()
    assert data["risk"] == "dangerous"
    assert data["confidence"] == "high"
    assert data["concerns"] == ["Typosquatted bank domain"]
    assert data["url"] == "http://qnb-secure-login.xyz"
    assert calls[0]["user_content"] == "Analyze this URL for security threats: http://qnb-secure-login.xyz"


def test_link_unparsable_reply_is_suspicious(monkeypatch):
    _stub_complete(monkeypatch, link_service, reply="Looks odd, be careful.")

    r = client.post("/link", json={"url": "https://bit.ly/abc"})

    data = r.json()
    assert data["risk"] == "suspicious"
    assert data["confidence"] == "low"
    assert data["concerns"] == [link_service.FALLBACK_CONCERN]
    assert data["analysis"] == "Looks odd, be careful."
    assert data["recommendation"] == link_service.FALLBACK_RECOMMENDATION


def test_link_without_gateway_is_503(monkeypatch):
    _stub_complete(monkeypatch, link_service, error=GatewayNotConfiguredError("not configured"))

    r = client.post("/link", json={"url": "https://example.com"})

    assert r.status_code == 503


def test_link_payment_required_is_402(monkeypatch):
    _stub_complete(monkeypatch, link_service, error=GatewayPaymentError("Payment required."))

    r = client.post("/link", json={"url": "https://example.com"})

    assert r.status_code == 402
    assert r.json()["detail"] == "AI service requires payment. Please contact support."


def test_link_blank_url_is_rejected():
    assert client.post("/link", json={"url": "  "}).status_code == 422


# ---------------------------------------------------------------------------
# /screenshot
# ---------------------------------------------------------------------------

IMAGE = "data:image/png;base64,iVBORw0KGgo="


def test_screenshot_sends_image_and_parses_reply(monkeypatch):
    reply = (
        '{"riskLevel": "high", "confidence": 92, "scamType": "Banking fraud", '
        '"reasoning": "Fake bank notice", "redFlags": ["Unknown sender"], '
        '"recommendations": ["Call your bank"]}'
    )
    calls = _stub_complete(monkeypatch, screenshot_service, reply=reply)

    r = client.post("/screenshot", json={"image": IMAGE})

    assert r.status_code == 200
    assert r.json() == {
        "risk_level": "high",
        "confidence": 92,
        "scam_type": "Banking fraud",
        "reasoning": "Fake bank notice",
        "red_flags": ["Unknown sender"],
        "recommendations": ["Call your bank"],
    }
    content = calls[0]["user_content"]
    assert content[1] == {"type": "image_url", "image_url": {"url": IMAGE}}
    assert calls[0]["temperature"] == settings.screenshot_temperature
    assert calls[0]["max_tokens"] == settings.screenshot_max_tokens
    assert "Respond in English" in calls[0]["system_prompt"]


def test_screenshot_arabic_prompt(monkeypatch):
    calls = _stub_complete(monkeypatch, screenshot_service, reply='{"riskLevel": "low"}')

    r = client.post("/screenshot", json={"image": IMAGE, "language": "ar"})

    assert r.status_code == 200
    assert "Respond in Arabic" in calls[0]["system_prompt"]


def test_screenshot_repairs_partial_reply(monkeypatch):
    _stub_complete(monkeypatch, screenshot_service, reply='{"riskLevel": "severe", "confidence": 250}')

    data = client.post("/screenshot", json={"image": IMAGE}).json()

    assert data["risk_level"] == "medium"
    assert data["confidence"] == 100
    assert data["scam_type"] == "unknown"
    assert data["recommendations"] == [screenshot_service.FALLBACK_RECOMMENDATION]


def test_screenshot_unparsable_reply(monkeypatch):
    _stub_complete(monkeypatch, screenshot_service, reply="Cannot read the image.")

    data = client.post("/screenshot", json={"image": IMAGE}).json()

    assert data["risk_level"] == "medium"
    assert data["confidence"] == 50
    assert data["reasoning"] == "Cannot read the image."
    assert data["red_flags"] == []


@pytest.mark.parametrize("image", ["   ", "not-a-url", "ftp://example.com/a.png"])
def test_screenshot_rejects_bad_image(image):
    assert client.post("/screenshot", json={"image": image}).status_code == 422


def test_screenshot_without_gateway_is_503(monkeypatch):
    _stub_complete(monkeypatch, screenshot_service, error=GatewayNotConfiguredError("not configured"))

    r = client.post("/screenshot", json={"image": IMAGE})

    assert r.status_code == 503
    assert r.json()["detail"] == "AI service not configured"


@pytest.mark.parametrize("confidence", ["1e999", "-1e999", "Infinity", "NaN", '"high"'])
def test_screenshot_non_numeric_confidence_is_repaired(monkeypatch, confidence):
    reply = '{"riskLevel": "high", "confidence": %s}' % confidence
    _stub_complete(monkeypatch, screenshot_service, reply=reply)

    r = client.post("/screenshot", json={"image": IMAGE})

    assert r.status_code == 200
    data = r.json()
    assert data["risk_level"] == "high"
    assert data["confidence"] == 50


def test_message_falls_back_on_connection_error(monkeypatch):
    request = httpx.Request("POST", "https://gateway.test/v1/chat/completions")

    class _Unreachable:
        class chat:
            class completions:
                @staticmethod
                async def create(**kwargs):
                    raise openai.APIConnectionError(request=request)

    monkeypatch.setattr(llm_gateway, "_client", lambda: _Unreachable())

    r = client.post("/message", json={"message": "Please send money via wire transfer immediately"})

    assert r.status_code == 200
    data = r.json()
    assert data["method"] == "phrases"
    assert data["risk"] == "high"
