"""OpenAI 兼容网关的 LangChain 封装：强制工具调用，返回结构化参数。"""

from __future__ import annotations

import logging
from typing import Any, Dict, TypeVar

import openai
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, ValidationError

from ibdp_coach.config import Settings, get_settings
from ibdp_coach.errors import (
    AIGatewayError,
    GatewayNotConfiguredError,
    PaymentRequiredError,
    RateLimitedError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

RATE_LIMITED_MESSAGE = "Rate limit exceeded, please try again later."
PAYMENT_REQUIRED_MESSAGE = "Payment required, please add credits to your AI gateway workspace."
GATEWAY_ERROR_MESSAGE = "AI gateway error"
NO_TOOL_CALL_MESSAGE = "No tool call in response"


class GatewayJSONClient:
    """使用 LangChain ``ChatOpenAI`` 调用网关，每次请求只调用一次上游、不重试。"""

    def __init__(
        self,
        settings: Settings,
        temperature: float | None = None,
        max_output_tokens: int = 2048,
        chat: Any | None = None,
    ) -> None:
        self.settings = settings
        self.temperature = settings.ai_temperature if temperature is None else temperature
        self.max_output_tokens = max_output_tokens
        self._chat = chat

    @property
    def is_available(self) -> bool:
        return bool(self._chat is not None or self.settings.ai_gateway_api_key)

    def _get_chat(self) -> Any:
        if not self.is_available:
            raise GatewayNotConfiguredError("AI gateway API key is not configured")
        if self._chat is None:
            self._chat = ChatOpenAI(
                model=self.settings.ai_model,
                api_key=self.settings.ai_gateway_api_key,
                base_url=self.settings.ai_gateway_url,
                temperature=self.temperature,
                max_tokens=self.max_output_tokens,
                max_retries=0,
            )
        return self._chat

    def call_tool(self, tool: Dict[str, Any], system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        """强制模型调用 ``tool``，返回第一个工具调用的参数。"""

        tool_name = tool["function"]["name"]
        chat = self._get_chat().bind_tools([tool], tool_choice=tool_name)
        logger.info("Calling tool %s on model %s", tool_name, self.settings.ai_model)
        try:
            message = chat.invoke(
                [
                    SystemMessage(content=system_prompt),
                    HumanMessage(content=user_prompt),
                ]
            )
        except openai.APIStatusError as exc:
            raise _map_status_error(exc) from exc
        except openai.APIError as exc:
            logger.error("AI gateway request failed: %s", exc)
            raise AIGatewayError(GATEWAY_ERROR_MESSAGE) from exc

        tool_calls = getattr(message, "tool_calls", None) or []
        if not tool_calls:
            logger.error("AI gateway returned no tool call for %s", tool_name)
            raise AIGatewayError(NO_TOOL_CALL_MESSAGE)
        args = tool_calls[0].get("args")
        if not isinstance(args, dict):
            raise AIGatewayError(NO_TOOL_CALL_MESSAGE)
        return args

    def structured_predict(
        self,
        schema: type[T],
        tool: Dict[str, Any],
        system_prompt: str,
        user_prompt: str,
    ) -> T:
        """调用工具并用 ``schema`` 校验返回参数。"""

        args = self.call_tool(tool, system_prompt, user_prompt)
        try:
            return schema.model_validate(args)
        except ValidationError as exc:
            logger.error("Tool call arguments failed validation: %s", exc)
            raise AIGatewayError(f"Invalid tool call arguments from {tool['function']['name']}") from exc


def _map_status_error(exc: openai.APIStatusError) -> AIGatewayError | RateLimitedError | PaymentRequiredError:
    if exc.status_code == 429:
        logger.warning("AI gateway rate limited the request")
        return RateLimitedError(RATE_LIMITED_MESSAGE)
    if exc.status_code == 402:
        logger.warning("AI gateway reported payment required")
        return PaymentRequiredError(PAYMENT_REQUIRED_MESSAGE)
    logger.error("AI gateway error: %s %s", exc.status_code, exc.message)
    return AIGatewayError(GATEWAY_ERROR_MESSAGE)


def get_ai_client() -> GatewayJSONClient:
    """FastAPI 依赖：按当前配置构造网关客户端。"""

    return GatewayJSONClient(get_settings())
