import httpx
import openai
import pytest
from langchain_core.messages import AIMessage

from ibdp_coach.config import Settings
from ibdp_coach.errors import (
    AIGatewayError,
    GatewayNotConfiguredError,
    PaymentRequiredError,
    RateLimitedError,
)
from ibdp_coach.schemas.ai import CoachingResult, EvaluationResult
from ibdp_coach.services.ai import GatewayJSONClient
from ibdp_coach.services.coaching import COACHING_TOOL
from ibdp_coach.services.evaluation import EVALUATION_TOOL

from conftest import COACHING_PAYLOAD, EVALUATION_PAYLOAD

GATEWAY_REQUEST = httpx.Request("POST", "https://gateway.test/v1/chat/completions")


class FakeChat:
    def __init__(self, message=None, error=None):
        self.message = message
        self.error = error
        self.bound = None
        self.invocations = []

    def bind_tools(self, tools, tool_choice=None):
        self.bound = (tools, tool_choice)
        return self

    def invoke(self, messages):
        self.invocations.append(messages)
        if self.error is not None:
            raise self.error
        return self.message


def tool_message(name, args):
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": "call_1"}])


def status_error(cls, status_code):
    return cls(
        message=f"HTTP {status_code}",
        response=httpx.Response(status_code, request=GATEWAY_REQUEST),
        body=None,
    )


def make_client(chat):
    return GatewayJSONClient(Settings(ai_gateway_api_key="test-key"), chat=chat)


def test_structured_predict_forces_tool_choice():
    chat = FakeChat(message=tool_message("provide_coaching", COACHING_PAYLOAD))

    result = make_client(chat).structured_predict(CoachingResult, COACHING_TOOL, "system", "user")

    assert isinstance(result, CoachingResult)
    assert result.thesis_pattern == COACHING_PAYLOAD["thesisPattern"]
    assert chat.bound == ([COACHING_TOOL], "provide_coaching")
    assert len(chat.invocations) == 1


@pytest.mark.parametrize(
    "error, expected",
    [
        (status_error(openai.RateLimitError, 429), RateLimitedError),
        (status_error(openai.APIStatusError, 402), PaymentRequiredError),
        (status_error(openai.InternalServerError, 500), AIGatewayError),
        (status_error(openai.BadRequestError, 400), AIGatewayError),
        (openai.APIConnectionError(request=GATEWAY_REQUEST), AIGatewayError),
    ],
)
def test_upstream_errors_are_mapped(error, expected):
    chat = FakeChat(error=error)

    with pytest.raises(expected) as exc_info:
        make_client(chat).call_tool(EVALUATION_TOOL, "system", "user")

    assert len(chat.invocations) == 1
    if expected is AIGatewayError:
        assert exc_info.value.message == "AI gateway error"
        assert exc_info.value.status_code == 500


def test_rate_limit_message():
    chat = FakeChat(error=status_error(openai.RateLimitError, 429))

    with pytest.raises(RateLimitedError) as exc_info:
        make_client(chat).call_tool(EVALUATION_TOOL, "system", "user")

    assert exc_info.value.status_code == 429
    assert exc_info.value.message == "Rate limit exceeded, please try again later."


def test_missing_tool_call():
    chat = FakeChat(message=AIMessage(content="Here is some prose instead."))

    with pytest.raises(AIGatewayError) as exc_info:
        make_client(chat).call_tool(COACHING_TOOL, "system", "user")

    assert exc_info.value.message == "No tool call in response"


def test_schema_violation_is_gateway_error():
    payload = {**EVALUATION_PAYLOAD, "overallScore": 9}
    chat = FakeChat(message=tool_message("evaluate_draft", payload))

    with pytest.raises(AIGatewayError):
        make_client(chat).structured_predict(EvaluationResult, EVALUATION_TOOL, "system", "user")


def test_missing_api_key():
    client = GatewayJSONClient(Settings(ai_gateway_api_key=None))

    assert not client.is_available
    with pytest.raises(GatewayNotConfiguredError) as exc_info:
        client.call_tool(COACHING_TOOL, "system", "user")
    assert exc_info.value.status_code == 500
