"""
API 라우터 설정 파일입니다.
각 기능별로 나누어진 API 주소들을 하나로 모으는 역할을 합니다.
"""

from fastapi import APIRouter

from specflow.api.endpoints import health, projects, documents, phases, autosave

# 메인 API 라우터 생성
api_router = APIRouter()

# 헬스 체크 엔드포인트: 서버 상태 확인용 (/health)
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)

# 프로젝트 엔드포인트: 생성, 조회, 내보내기/가져오기 (/projects)
api_router.include_router(
    projects.router,
    prefix="/projects",
    tags=["projects"]
)

# 문서 엔드포인트: 현재 프로젝트의 문서 편집/검증/저장 (/documents)
api_router.include_router(
    documents.router,
    prefix="/documents",
    tags=["documents"]
)

# 단계 엔드포인트: 단계 검증과 이동 (/phases)
api_router.include_router(
    phases.router,
    prefix="/phases",
    tags=["phases"]
)

# 자동 저장 엔드포인트: 설정 조회/변경 (/autosave)
api_router.include_router(
    autosave.router,
    prefix="/autosave",
    tags=["autosave"]
)
