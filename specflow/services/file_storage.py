"""
파일 기반 저장소 서비스입니다.
데이터베이스 대신 파일 시스템(폴더와 파일)을 사용하여 데이터를 저장하고 관리합니다.

관리하는 데이터:
1. 명세 문서 (documents/<프로젝트 ID>/<문서 종류>.json)
2. 저장소 상태 스냅샷 (state.json)
"""

import logging
from pathlib import Path
from typing import Optional, TypeVar, Type

import aiofiles
from pydantic import BaseModel, TypeAdapter

from specflow.models import (
    AnyDocument,
    DocumentType,
    SpecificationDocument,
    StoreSnapshot,
)
from specflow.config import get_settings
from specflow.exceptions import StorageError
from specflow.services.persistence import DocumentPersistence

logger = logging.getLogger(__name__)


T = TypeVar("T", bound=BaseModel)

_document_adapter: TypeAdapter[AnyDocument] = TypeAdapter(AnyDocument)


class FileStorage(DocumentPersistence):
    """JSON 파일 기반의 단순 저장소 클래스입니다. (DocumentPersistence 구현)"""

    def __init__(self, base_path: str = "data"):
        # 기본 저장 경로 설정 (기본값: data 폴더)
        self.base_path = Path(base_path)
        self.documents_path = self.base_path / "documents"
        self.state_path = self.base_path / "state.json"

        # 필요한 폴더들이 없으면 만듭니다.
        self._ensure_directories()

    def _ensure_directories(self):
        """저장소 폴더 생성 함수"""
        self.documents_path.mkdir(parents=True, exist_ok=True)

    # ==================== 문서 관련 기능 ====================

    def _document_file(self, project_id: str, doc_type: DocumentType) -> Path:
        return self.documents_path / project_id / f"{DocumentType(doc_type).value}.json"

    async def commit(self, document: SpecificationDocument) -> None:
        """문서를 파일로 저장합니다."""
        file_path = self._document_file(document.project_id, document.type)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        await self._save_model(file_path, document)
        logger.debug(f"[FileStorage] 문서 저장: {file_path} (v{document.version})")

    async def load(
        self, project_id: str, doc_type: DocumentType
    ) -> Optional[SpecificationDocument]:
        """프로젝트 ID와 문서 종류로 문서를 불러옵니다."""
        file_path = self._document_file(project_id, doc_type)
        if not file_path.exists():
            return None

        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
                content = await f.read()
            return _document_adapter.validate_json(content)
        except Exception as e:
            logger.error(f"파일 로딩 에러 {file_path}: {e}", exc_info=True)
            return None

    # ==================== 상태 스냅샷 기능 ====================

    async def save_state(self, snapshot: StoreSnapshot) -> None:
        """저장소 상태 스냅샷을 저장합니다."""
        await self._save_model(self.state_path, snapshot)

    async def load_state(self) -> Optional[StoreSnapshot]:
        """저장된 상태 스냅샷을 불러옵니다. 없거나 손상되었으면 None."""
        return await self._load_model(self.state_path, StoreSnapshot)

    # ==================== 내부 도우미 함수들 ====================

    async def _save_model(self, file_path: Path, model: BaseModel):
        """데이터 모델을 JSON 파일로 저장하는 공통 함수"""
        try:
            async with aiofiles.open(file_path, "w", encoding="utf-8") as f:
                await f.write(model.model_dump_json(indent=2))
        except Exception as e:
            logger.error(f"파일 저장 실패 {file_path}: {e}", exc_info=True)
            raise StorageError(
                f"파일 저장에 실패했습니다: {file_path.name}",
                details={"path": str(file_path), "error": str(e)},
            )

    async def _load_model(self, file_path: Path, model_class: Type[T]) -> Optional[T]:
        """JSON 파일을 읽어서 데이터 모델로 변환하는 공통 함수"""
        if not file_path.exists():
            return None

        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
                content = await f.read()
            return model_class.model_validate_json(content)
        except Exception as e:
            logger.error(f"파일 로딩 에러 {file_path}: {e}", exc_info=True)
            return None


# 싱글톤 인스턴스 (프로그램 전체에서 공유)
_file_storage: Optional[FileStorage] = None


def get_file_storage() -> FileStorage:
    """FileStorage 인스턴스를 반환합니다."""
    global _file_storage
    if _file_storage is None:
        _file_storage = FileStorage(get_settings().storage_path)
    return _file_storage
