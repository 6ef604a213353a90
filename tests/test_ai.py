import json

import httpx
import pytest

from civiclink.services.ai import (
    AIGateway,
    AIServiceError,
    DepartmentClassifier,
    ImageVerdictKind,
    ImageVerifier,
    parse_verdict,
)

DEPARTMENTS = ["Public Works", "Sanitation", "Parks & Recreation"]


def completion(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def gateway_answering(handler) -> AIGateway:
    return AIGateway(url="https://ai.test/v1/chat/completions", api_key="key", transport=httpx.MockTransport(handler))


class TestGateway:
    async def test_sends_model_and_key(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return completion("  Sanitation  ")

        answer = await gateway_answering(handler).complete([{"role": "user", "content": "hi"}], temperature=0.3)

        assert answer == "Sanitation"
        assert seen["auth"] == "Bearer key"
        assert seen["body"]["temperature"] == 0.3
        assert seen["body"]["messages"] == [{"role": "user", "content": "hi"}]

    async def test_missing_key(self):
        gateway = AIGateway(api_key="")

        assert gateway.enabled is False
        with pytest.raises(AIServiceError):
            await gateway.complete([])

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(429, text="rate limited"),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={"choices": []}),
        ],
    )
    async def test_bad_responses(self, response):
        with pytest.raises(AIServiceError):
            await gateway_answering(lambda request: response).complete([])

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(AIServiceError):
            await gateway_answering(handler).complete([])


class TestDepartmentClassifier:
    def classifier(self, handler) -> DepartmentClassifier:
        return DepartmentClassifier(gateway_answering(handler), DEPARTMENTS, "Public Works")

    def test_prompt_lists_departments(self):
        prompt = self.classifier(lambda r: completion("")).build_prompt("Bins", "Overflowing bins", "waste")

        assert "- Sanitation" in prompt
        assert "Category: waste" in prompt

    @pytest.mark.parametrize(
        ("answer", "expected"),
        [
            ("Sanitation", "Sanitation"),
            ('"sanitation."', "Sanitation"),
            ("The best fit is Parks & Recreation", "Parks & Recreation"),
            ("Fire Department", "Public Works"),
        ],
    )
    def test_match_department(self, answer, expected):
        assert self.classifier(lambda r: completion("")).match_department(answer) == expected

    async def test_classify(self):
        assert await self.classifier(lambda r: completion("Sanitation")).classify("Bins", "Full", "waste") == (
            "Sanitation"
        )

    async def test_gateway_failure_falls_back_to_default(self):
        classifier = self.classifier(lambda r: httpx.Response(500))

        assert await classifier.classify("Bins", "Full", "waste") == "Public Works"


class TestParseVerdict:
    def test_bare_json(self):
        verdict = parse_verdict('{"verdict": "appropriate", "explanation": "Shows a pothole."}')

        assert verdict.verdict == ImageVerdictKind.APPROPRIATE
        assert verdict.explanation == "Shows a pothole."

    def test_code_fence(self):
        answer = '```json\n{"verdict": "Irrelevant", "explanation": "A cat."}\n```'

        assert parse_verdict(answer).verdict == ImageVerdictKind.IRRELEVANT

    def test_json_in_prose(self):
        answer = 'Here you go: {"verdict": "unclear", "explanation": "Too dark."} Hope it helps.'

        assert parse_verdict(answer).verdict == ImageVerdictKind.UNCLEAR

    @pytest.mark.parametrize(
        ("answer", "expected"),
        [
            ("This image is irrelevant to the report.", ImageVerdictKind.IRRELEVANT),
            ("The photo looks appropriate.", ImageVerdictKind.APPROPRIATE),
            ("Inappropriate content.", ImageVerdictKind.UNCLEAR),
            ("Hard to say.", ImageVerdictKind.UNCLEAR),
        ],
    )
    def test_keyword_fallback(self, answer, expected):
        verdict = parse_verdict(answer)

        assert verdict.verdict == expected
        assert verdict.explanation == answer

    def test_fallback_explanation_is_capped(self):
        assert len(parse_verdict("x" * 500).explanation) == 200

    def test_unknown_verdict_value_falls_back(self):
        verdict = parse_verdict('{"verdict": "maybe", "explanation": "?"}')

        assert verdict.verdict == ImageVerdictKind.UNCLEAR


class TestImageVerifier:
    async def test_sends_image_and_parses_answer(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return completion('{"verdict": "appropriate", "explanation": "Pothole visible."}')

        verdict = await ImageVerifier(gateway_answering(handler)).verify(
            "data:image/png;base64,AAAA", "Pothole", "Deep pothole", "roads"
        )

        assert verdict.verdict == ImageVerdictKind.APPROPRIATE
        content = seen["body"]["messages"][1]["content"]
        assert content[1] == {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}}

    async def test_failure_skips_verification(self):
        verifier = ImageVerifier(gateway_answering(lambda r: httpx.Response(503)))

        assert await verifier.verify("data:", "t", "d", "roads") is None

    async def test_empty_answer_skips_verification(self):
        verifier = ImageVerifier(gateway_answering(lambda r: completion("   ")))

        assert await verifier.verify("data:", "t", "d", "roads") is None
