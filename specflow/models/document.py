"""
명세 문서 데이터 모델입니다.

문서는 종류(type)로 구분되는 태그드 유니온입니다:
    RequirementsDocument | DesignDocument | TasksDocument

JSON에서 읽을 때는 "type" 필드를 보고 알맞은 클래스로 변환됩니다.
"""

from datetime import datetime
from typing import Annotated, Any, Iterator, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from .common import DocumentStatus, DocumentType
from .validation import ValidationResult


class DocumentMetadata(BaseModel):
    """
    문서 부가 정보입니다.
    호출자가 넘긴 임의의 메타데이터 키도 그대로 보관합니다.
    """

    model_config = ConfigDict(extra="allow")

    word_count: int = Field(default=0, description="단어 수")
    estimated_read_time: int = Field(default=0, description="예상 읽기 시간 (분)")
    completion_percentage: int = Field(default=0, ge=0, le=100, description="완성도 캐시")
    validation_results: list[ValidationResult] = Field(
        default_factory=list, description="마지막 검증 결과 캐시"
    )
    tags: list[str] = Field(default_factory=list)
    collaborators: list[str] = Field(default_factory=list, description="협업자 ID 목록")


class SpecificationDocument(BaseModel):
    """모든 명세 문서의 공통 필드입니다."""

    id: str
    project_id: str
    title: str
    content: str = ""
    version: int = Field(default=1, ge=1, description="편집할 때마다 1씩 증가")
    status: DocumentStatus = DocumentStatus.DRAFT
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    created_by: str = "current-user"
    last_modified_by: str = "current-user"
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)


class RequirementsDocument(SpecificationDocument):
    type: Literal[DocumentType.REQUIREMENTS] = DocumentType.REQUIREMENTS


class DesignDocument(SpecificationDocument):
    type: Literal[DocumentType.DESIGN] = DocumentType.DESIGN


class TasksDocument(SpecificationDocument):
    type: Literal[DocumentType.TASKS] = DocumentType.TASKS


AnyDocument = Annotated[
    Union[RequirementsDocument, DesignDocument, TasksDocument],
    Field(discriminator="type"),
]


# 문서 종류별 ID 접두사와 기본 제목
DOCUMENT_ID_PREFIX = {
    DocumentType.REQUIREMENTS: "req",
    DocumentType.DESIGN: "design",
    DocumentType.TASKS: "tasks",
}

DOCUMENT_TITLES = {
    DocumentType.REQUIREMENTS: "Requirements Document",
    DocumentType.DESIGN: "Design Document",
    DocumentType.TASKS: "Task Document",
}


def build_document(
    doc_type: DocumentType,
    project_id: str,
    content: str,
    **fields: Any,
) -> SpecificationDocument:
    """문서 종류에 맞는 문서 객체를 새로 만듭니다."""
    base = dict(
        id=f"{DOCUMENT_ID_PREFIX[doc_type]}-{project_id}",
        project_id=project_id,
        title=DOCUMENT_TITLES[doc_type],
        content=content,
    )
    base.update(fields)

    match doc_type:
        case DocumentType.REQUIREMENTS:
            return RequirementsDocument(**base)
        case DocumentType.DESIGN:
            return DesignDocument(**base)
        case DocumentType.TASKS:
            return TasksDocument(**base)
        case _:
            raise TypeError(f"Unknown document type: {doc_type!r}")


class DocumentSet(BaseModel):
    """
    현재 프로젝트의 문서 묶음입니다.
    문서 종류별로 최대 1개씩만 가질 수 있습니다.
    """

    requirements: Optional[RequirementsDocument] = None
    design: Optional[DesignDocument] = None
    tasks: Optional[TasksDocument] = None

    def get(self, doc_type: DocumentType) -> Optional[SpecificationDocument]:
        return getattr(self, DocumentType(doc_type).value)

    def put(self, document: SpecificationDocument) -> None:
        setattr(self, document.type.value, document)

    def present(self) -> Iterator[tuple[DocumentType, SpecificationDocument]]:
        """존재하는 문서만 (종류, 문서) 순서대로 돌려줍니다."""
        for doc_type in DocumentType:
            document = self.get(doc_type)
            if document is not None:
                yield doc_type, document

    def as_list(self) -> list[SpecificationDocument]:
        return [document for _, document in self.present()]

    @classmethod
    def from_documents(cls, documents: list[SpecificationDocument]) -> "DocumentSet":
        document_set = cls()
        for document in documents:
            document_set.put(document)
        return document_set
