"""
명세 워크플로 엔진의 메인 진입점 파일입니다.
웹 서버 애플리케이션을 생성하고 설정하는 역할을 담당합니다.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from specflow.config import get_settings
from specflow.api.router import api_router
from specflow.exceptions import (
    SpecWorkflowError,
    InputValidationError,
    ImportFormatError,
    ProjectNotFoundError,
    PhaseTransitionError,
)
from specflow.services import get_document_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션의 생명주기(시작과 종료)를 관리하는 함수입니다.

    서버가 시작될 때:
    1. 저장된 상태 스냅샷을 복원합니다.
    2. 자동 저장 타이머를 무장합니다.

    서버가 종료될 때:
    1. 타이머를 해제하고 진행 중인 저장을 기다립니다.
    2. 현재 상태 스냅샷을 저장합니다.
    """
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    logger.info(f"명세 워크플로 엔진이 다음 주소에서 시작됩니다: {settings.host}:{settings.port}")

    store = get_document_store()
    if await store.load_snapshot():
        logger.info("이전 상태를 복원했습니다")
    store.initialize()

    yield

    await store.shutdown()
    await store.save_snapshot()
    logger.info("명세 워크플로 엔진이 종료됩니다")


def _status_code(exc: SpecWorkflowError) -> int:
    if isinstance(exc, (InputValidationError, ImportFormatError)):
        return 400
    if isinstance(exc, ProjectNotFoundError):
        return 404
    if isinstance(exc, PhaseTransitionError):
        return 409
    return 500


def create_app() -> FastAPI:
    """
    FastAPI 웹 애플리케이션을 생성하고 설정하는 함수입니다.

    주요 기능:
    1. 기본 앱 정보 설정 (제목, 설명 등)
    2. CORS 설정 (프론트엔드와의 통신 허용 설정)
    3. API 라우터 연결 (기능별 주소 연결)
    """
    settings = get_settings()

    app = FastAPI(
        title="명세 워크플로 엔진",
        description="요구사항 → 설계 → 작업 → 구현 단계별 명세 문서 작성과 검증",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 글로벌 예외 핸들러: 커스텀 예외를 구조화된 JSON 응답으로 변환
    @app.exception_handler(SpecWorkflowError)
    async def workflow_error_handler(request: Request, exc: SpecWorkflowError):
        return JSONResponse(
            status_code=_status_code(exc),
            content={
                "error_code": exc.error_code,
                "message": exc.message,
                "details": exc.details,
                "timestamp": datetime.now().isoformat(),
            },
        )

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.error(f"처리되지 않은 예외: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error_code": "ERR_INTERNAL",
                "message": "내부 서버 오류가 발생했습니다",
                "details": None,
                "timestamp": datetime.now().isoformat(),
            },
        )

    # API 라우터 포함: /api/v1 주소 아래에 모든 기능을 연결합니다.
    app.include_router(api_router, prefix="/api/v1")

    return app


# 애플리케이션 인스턴스 생성
app = create_app()


@app.get("/")
async def root():
    """루트 엔드포인트: 서버의 기본 정보를 반환합니다."""
    return {
        "name": "명세 워크플로 엔진",
        "version": "1.0.0",
        "description": "단계별 명세 문서 작성, 검증, 자동 저장",
        "docs": "/docs",
        "api": "/api/v1",
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "specflow.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
