"""
문서 영속화 협력자(Persistence collaborator)의 기본 클래스입니다.

문서 저장소(DocumentStore)는 저장 방식(파일, DB, 원격 API)을 알지 못하고
이 클래스의 비동기 commit 만 호출합니다.
실패하면 예외를 던지며, 자동 재시도는 하지 않습니다.
"""

from abc import ABC, abstractmethod
from typing import Optional

from specflow.models import DocumentType, SpecificationDocument


class DocumentPersistence(ABC):
    """모든 문서 저장소 구현이 상속받는 기본 클래스입니다."""

    @abstractmethod
    async def commit(self, document: SpecificationDocument) -> None:
        """문서 하나를 저장합니다. (자식 클래스에서 반드시 구현해야 함)"""
        pass

    @abstractmethod
    async def load(
        self, project_id: str, doc_type: DocumentType
    ) -> Optional[SpecificationDocument]:
        """저장된 문서를 불러옵니다. 없으면 None."""
        pass
