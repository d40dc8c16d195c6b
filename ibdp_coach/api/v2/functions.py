"""无状态 AI 函数：构思教练与草稿评价。

请求体按原样（camelCase）校验，校验失败时不会调用上游网关。
处理函数是同步的：阻塞的网关调用由 FastAPI 放到线程池执行。
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from ibdp_coach.schemas.ai import CoachingResult, EvaluationResult
from ibdp_coach.services.ai import GatewayJSONClient, get_ai_client
from ibdp_coach.services.coaching import coach, parse_coaching_request
from ibdp_coach.services.evaluation import evaluate, parse_evaluation_request

router = APIRouter()


@router.post("/coach-plan", response_model=CoachingResult)
def coach_plan(
    body: Any = Body(None),
    client: GatewayJSONClient = Depends(get_ai_client),
):
    return coach(parse_coaching_request(body), client)


@router.post("/evaluate-draft", response_model=EvaluationResult)
def evaluate_draft(
    body: Any = Body(None),
    client: GatewayJSONClient = Depends(get_ai_client),
):
    return evaluate(parse_evaluation_request(body), client)
