"""面向调用方的错误类型，统一渲染为 ``{"error": message}``。"""


class ApiError(Exception):
    """带 HTTP 状态码的业务错误基类。"""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(ApiError):
    """请求字段缺失、类型错误或超长。"""

    status_code = 400


class PaymentRequiredError(ApiError):
    """上游网关额度耗尽 (402)。"""

    status_code = 402


class RateLimitedError(ApiError):
    """上游网关限流 (429)。"""

    status_code = 429


class AIGatewayError(ApiError):
    """其他上游失败或缺少结构化结果。"""

    status_code = 500


class GatewayNotConfiguredError(AIGatewayError):
    """未配置网关 API Key。"""
