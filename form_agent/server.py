"""HTTP 接口：POST /api/workflow/run 触发一次运行"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .config import Settings, configure_logging
from .core import FormAgent
from .models import ObjectiveData

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields: firstName and lastName are required."

REQUIRED_FIELDS = ("firstName", "lastName")


def is_missing_required(errors) -> bool:
    """
    校验错误是否只是缺少 firstName / lastName（缺失、null 或空字符串）。
    其他错误（JSON 格式错误、字段类型错误）交给 FastAPI 默认处理。
    """
    if not errors:
        return False
    for err in errors:
        loc = tuple(err.get("loc", ()))
        if loc == ("body",) and err.get("type") == "missing":
            continue
        if len(loc) != 2 or loc[0] != "body" or loc[1] not in REQUIRED_FIELDS:
            return False
        if err.get("type") not in ("missing", "string_too_short") and err.get("input") is not None:
            return False
    return True


class WorkflowRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    firstName: str = Field(min_length=1)
    lastName: str = Field(min_length=1)
    dateOfBirth: Optional[str] = None
    medicalId: Optional[str] = None
    gender: Optional[str] = None
    bloodType: Optional[str] = None
    allergies: Optional[str] = None
    currentMedications: Optional[str] = None
    emergencyContactName: Optional[str] = None
    emergencyContactPhone: Optional[str] = None

    def to_objective(self) -> ObjectiveData:
        return ObjectiveData(**self.model_dump())


def create_app(agent: Optional[FormAgent] = None, settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(title="Form Agent", version="0.1.0")
    state = {"agent": agent}

    def get_agent() -> FormAgent:
        # 第一次请求时才构造，缺少 OPENAI_API_KEY 时服务仍可启动
        if state["agent"] is None:
            state["agent"] = FormAgent.from_settings(settings or Settings.from_env())
        return state["agent"]

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        if is_missing_required(exc.errors()):
            return JSONResponse(status_code=400, content={"message": MISSING_FIELDS_MESSAGE})
        return await request_validation_exception_handler(request, exc)

    @app.post("/api/workflow/run")
    async def run_workflow(payload: WorkflowRequest):
        logger.info("收到 API 请求，开始运行...")
        objective = payload.to_objective()
        try:
            result = await get_agent().run(objective)
        except Exception as e:
            logger.error("运行出错: %s", e)
            return JSONResponse(
                status_code=500,
                content={"message": "An error occurred during the workflow.", "error": str(e)},
            )

        return {
            "message": f"Workflow completed successfully for {objective.firstName} {objective.lastName}!",
            "outcome": result.outcome.value,
            "steps": result.steps,
        }

    return app


def serve(settings: Settings):
    configure_logging()
    if not settings.openai_api_key:
        logger.error("没有找到 OPENAI_API_KEY，请检查 .env 文件")
    app = create_app(settings=settings)
    logger.info("API 服务地址 http://%s:%d，POST /api/workflow/run 开始运行", settings.api_host, settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
