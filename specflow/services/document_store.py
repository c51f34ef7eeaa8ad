"""
명세 프로젝트의 상태를 관리하는 '지휘자' 역할의 문서 저장소입니다.

담당 업무:
1. 프로젝트 관리: 생성, 수정, 삭제, 현재 프로젝트 전환
2. 문서 편집: 요구사항/설계/작업 문서 갱신 (저장 안 됨 표시)
3. 검증: 검증 엔진 호출, 단계별 검증 결과 캐시 갱신
4. 단계 이동: 단계 상태 머신을 통한 단계 이동 게이트
5. 저장: 영속화 협력자 호출, 자동 저장 스케줄러 소유
6. 내보내기/가져오기: JSON 포맷

실패 처리 원칙:
- 현재 프로젝트가 없을 때의 일반 변경 작업은 조용히 무시합니다.
- 명시적 조회(fetch_project_by_id)와 가져오기 해석 실패는 예외를 던집니다.
- 명시적 저장 실패는 호출자에게 전파되고, 타이머 저장 실패는 로그만 남깁니다.
"""

import asyncio
import logging
from collections import Counter
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Optional

from specflow.config import get_settings
from specflow.exceptions import ImportFormatError, ProjectNotFoundError
from specflow.layers.phases import PhaseStateMachine
from specflow.layers.validation import ValidationEngine
from specflow.models import (
    AutoSaveConfig,
    CreateProjectData,
    DocumentMetadata,
    DocumentSet,
    DocumentType,
    PhaseStatus,
    PhaseValidationResult,
    ProjectExport,
    ProjectStatus,
    ProjectUpdates,
    SpecificationDocument,
    SpecificationErrorState,
    SpecificationLoadingState,
    SpecificationPhase,
    SpecificationProject,
    StoreSnapshot,
    ValidationResult,
    build_document,
    new_project_id,
)
from specflow.models.document import DOCUMENT_ID_PREFIX
from specflow.services.autosave import AutoSaveScheduler
from specflow.services.file_storage import FileStorage, get_file_storage
from specflow.services.persistence import DocumentPersistence
from specflow.utils.text import estimated_read_time, word_count

logger = logging.getLogger(__name__)


# 편집 직후의 임시 완성도 (검증 전 추정치)
PROVISIONAL_COMPLETE = 80
PROVISIONAL_DRAFT = 20
PROVISIONAL_LENGTH = 100


def _default_auto_save_config() -> AutoSaveConfig:
    settings = get_settings()
    return AutoSaveConfig(
        enabled=settings.autosave_enabled,
        interval=settings.autosave_interval_ms,
        debounce_delay=settings.autosave_debounce_ms,
    )


class DocumentStore:
    """
    프로젝트/문서 상태와 세 컴포넌트(검증 엔진, 단계 상태 머신, 자동 저장)를 조율하는 클래스입니다.

    한 인스턴스가 현재 프로젝트, 문서, 검증 캐시를 독점적으로 소유합니다.
    """

    def __init__(
        self,
        validator: Optional[ValidationEngine] = None,
        persistence: Optional[DocumentPersistence] = None,
        storage: Optional[FileStorage] = None,
        auto_save_config: Optional[AutoSaveConfig] = None,
    ):
        """
        Args:
            validator: 검증 협력자 (기본: ValidationEngine)
            persistence: 문서 영속화 협력자 (기본: FileStorage 싱글톤)
            storage: 상태 스냅샷 저장소 (기본: persistence 가 FileStorage 이면 그것을 사용)
            auto_save_config: 자동 저장 설정 (기본: 환경 설정값)
        """
        self.validator = validator or ValidationEngine()
        self.persistence = persistence or get_file_storage()
        if storage is None and isinstance(self.persistence, FileStorage):
            storage = self.persistence
        self.storage = storage

        self.projects: list[SpecificationProject] = []
        self.current_project: Optional[SpecificationProject] = None
        self.documents = DocumentSet()
        self.phases = PhaseStateMachine()

        self.loading = SpecificationLoadingState()
        self.errors = SpecificationErrorState()
        self.last_saved: Optional[datetime] = None

        self._unsaved = False
        self._dirty: set[DocumentType] = set()
        self._in_flight: Counter = Counter()

        self.autosave = AutoSaveScheduler(
            save=self._autosave,
            has_unsaved_changes=lambda: self.unsaved_changes,
            config=auto_save_config or _default_auto_save_config(),
        )

    # ==================== 상태 조회 ====================

    @property
    def current_phase(self) -> SpecificationPhase:
        return self.phases.current_phase

    @property
    def phase_validation(self) -> dict[SpecificationPhase, Optional[PhaseValidationResult]]:
        return self.phases.phase_validation

    @property
    def unsaved_changes(self) -> bool:
        return self._unsaved

    @property
    def auto_save(self) -> AutoSaveConfig:
        return self.autosave.config

    def get_document(self, doc_type: DocumentType) -> Optional[SpecificationDocument]:
        return self.documents.get(doc_type)

    # ==================== 프로젝트 관리 ====================

    async def create_project(self, data: CreateProjectData) -> SpecificationProject:
        """새 프로젝트를 만들고 현재 프로젝트로 지정합니다. (단계: requirements)"""
        with self._tracking("projects"):
            project = SpecificationProject(
                name=data.name,
                description=data.description,
                domain=data.domain,
                complexity=data.complexity,
                methodology=data.methodology,
            )
            if data.template_id:
                project.settings.templates.default_templates.append(data.template_id)

            self.projects.append(project)
            self.set_current_project(project)

        logger.info(f"[DocumentStore] 프로젝트 생성: {project.id} ({project.name})")
        return project

    async def update_project(
        self, project_id: str, updates: ProjectUpdates
    ) -> Optional[SpecificationProject]:
        """프로젝트 정보를 수정합니다. 없는 ID면 아무것도 하지 않고 None 을 반환합니다."""
        with self._tracking("current_project"):
            changes = updates.model_dump(exclude_unset=True, exclude_none=True)
            if changes.get("status") == ProjectStatus.COMPLETED:
                changes["completed_at"] = datetime.now()
            return self._apply_project_changes(project_id, changes)

    async def delete_project(self, project_id: str) -> bool:
        """프로젝트를 삭제합니다. 현재 프로젝트였다면 현재 프로젝트 지정을 해제합니다."""
        with self._tracking("projects"):
            before = len(self.projects)
            self.projects = [p for p in self.projects if p.id != project_id]
            removed = len(self.projects) < before

            if self.current_project is not None and self.current_project.id == project_id:
                self.set_current_project(None)
                removed = True

        if removed:
            logger.info(f"[DocumentStore] 프로젝트 삭제: {project_id}")
        return removed

    async def fetch_projects(self) -> list[SpecificationProject]:
        with self._tracking("projects"):
            return list(self.projects)

    async def fetch_project_by_id(self, project_id: str) -> SpecificationProject:
        """
        ID로 프로젝트를 찾아 현재 프로젝트로 지정합니다.

        Raises:
            ProjectNotFoundError: 해당 ID의 프로젝트가 없음
        """
        with self._tracking("current_project"):
            project = self._find_project(project_id)
            if project is None:
                raise ProjectNotFoundError(details={"project_id": project_id})

            if self.current_project is None or self.current_project.id != project.id:
                self.set_current_project(project)
            return project

    def set_current_project(self, project: Optional[SpecificationProject]) -> None:
        """
        현재 프로젝트를 바꿉니다.

        단계는 프로젝트에 저장된 단계로 돌아가고, 문서와 검증 캐시는 비워집니다.
        문서는 호출자가 load_documents() 등으로 다시 불러와야 합니다.
        """
        if self._unsaved:
            logger.warning("[DocumentStore] 저장되지 않은 변경을 버리고 프로젝트를 전환합니다")

        self.autosave.cancel_pending()
        self.current_project = project
        self.phases.reset(project.current_phase if project else SpecificationPhase.REQUIREMENTS)
        self.documents = DocumentSet()
        self._dirty.clear()
        self._unsaved = False

    async def load_documents(self) -> DocumentSet:
        """
        현재 프로젝트의 문서를 영속화 협력자에서 다시 불러옵니다.
        저장된 문서가 없으면 프로젝트 레코드에 포함된 문서를 사용합니다.
        """
        project = self.current_project
        if project is None:
            return self.documents

        with self._tracking("documents"):
            embedded = DocumentSet.from_documents(project.documents)
            for doc_type in DocumentType:
                document = await self.persistence.load(project.id, doc_type)
                if document is None:
                    document = embedded.get(doc_type)
                if document is not None:
                    self.documents.put(document)

        return self.documents

    def projects_by_status(self, status: ProjectStatus) -> list[SpecificationProject]:
        return [p for p in self.projects if p.status == status]

    def projects_by_phase(self, phase: SpecificationPhase) -> list[SpecificationProject]:
        return [p for p in self.projects if p.current_phase == phase]

    def recent_projects(self, limit: int = 5) -> list[SpecificationProject]:
        """최근 수정된 순서대로 프로젝트를 반환합니다."""
        return sorted(self.projects, key=lambda p: p.updated_at, reverse=True)[:limit]

    # ==================== 단계 관리 ====================

    def set_current_phase(self, phase: SpecificationPhase) -> None:
        """게이트 검사 없이 현재 단계를 바꾸고 프로젝트 레코드에 기록합니다."""
        if self.current_project is None:
            return

        phase = SpecificationPhase(phase)
        self.phases.current_phase = phase
        self._apply_project_changes(self.current_project.id, {"current_phase": phase})

    async def validate_phase(self, phase: SpecificationPhase) -> PhaseValidationResult:
        """
        해당 단계 문서를 검증하고 결과를 단계별 캐시에 기록합니다.
        검증 캐시를 갱신하는 유일한 경로입니다.
        """
        phase = SpecificationPhase(phase)
        with self._tracking("validation"):
            result = await self.validator.validate_phase(phase, self.documents)
            self.phases.record(result)

            doc_type = phase.document_type
            document = self.documents.get(doc_type) if doc_type else None
            if document is not None:
                document.metadata.validation_results = list(result.validation_results)
                document.metadata.completion_percentage = result.completion_percentage

        logger.info(
            f"[DocumentStore] {phase.value} 단계 검증: "
            f"complete={result.is_complete}, {result.completion_percentage}%"
        )
        return result

    def can_transition_to_phase(self, target: SpecificationPhase) -> bool:
        """캐시된 검증 결과만 읽어서 판단합니다. (재검증하지 않음)"""
        return self.phases.can_transition_to(target)

    async def transition_to_phase(self, target: SpecificationPhase) -> None:
        """
        단계를 이동합니다.

        Raises:
            PhaseTransitionError: 선행 단계가 완료되지 않음
        """
        target = SpecificationPhase(target)
        with self._tracking("phase_transition"):
            # 게이트 검사는 프로젝트가 없어도 동일하게 적용
            if self.current_project is None and self.phases.can_transition_to(target):
                return

            self.phases.transition_to(target)
            self._apply_project_changes(self.current_project.id, {"current_phase": target})

    async def validate_phase_completion(self, phase: SpecificationPhase) -> bool:
        result = await self.validate_phase(phase)
        return result.is_complete

    def clear_validation_results(self, phase: Optional[SpecificationPhase] = None) -> None:
        self.phases.clear(phase)

    def phase_status(self, phase: SpecificationPhase) -> PhaseStatus:
        return self.phases.phase_status(phase)

    def first_incomplete_phase(self) -> Optional[SpecificationPhase]:
        return self.phases.first_incomplete_phase()

    def project_completion(self) -> int:
        if self.current_project is None:
            return 0
        return self.phases.project_completion()

    def can_complete_project(self) -> bool:
        return self.phases.can_complete_project()

    # ==================== 문서 편집 ====================

    async def update_requirements(
        self, content: str, metadata: Optional[dict[str, Any]] = None
    ) -> Optional[SpecificationDocument]:
        return self._update_document(DocumentType.REQUIREMENTS, content, metadata)

    async def update_design(
        self, content: str, metadata: Optional[dict[str, Any]] = None
    ) -> Optional[SpecificationDocument]:
        return self._update_document(DocumentType.DESIGN, content, metadata)

    async def update_tasks(
        self, content: str, metadata: Optional[dict[str, Any]] = None
    ) -> Optional[SpecificationDocument]:
        return self._update_document(DocumentType.TASKS, content, metadata)

    async def update_document(
        self,
        doc_type: DocumentType,
        content: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Optional[SpecificationDocument]:
        """문서 종류를 인자로 받는 편집 함수 (API 용)"""
        match DocumentType(doc_type):
            case DocumentType.REQUIREMENTS:
                return await self.update_requirements(content, metadata)
            case DocumentType.DESIGN:
                return await self.update_design(content, metadata)
            case DocumentType.TASKS:
                return await self.update_tasks(content, metadata)

    def _update_document(
        self,
        doc_type: DocumentType,
        content: str,
        metadata: Optional[dict[str, Any]],
    ) -> Optional[SpecificationDocument]:
        """
        문서를 새로 만들거나 갱신합니다. (편집은 호출 순서대로 즉시 반영)
        단어 수, 읽기 시간, 임시 완성도를 다시 계산하고 저장 안 됨으로 표시합니다.
        """
        project = self.current_project
        if project is None:
            return None

        existing = self.documents.get(doc_type)
        computed: dict[str, Any] = {
            "word_count": word_count(content),
            "estimated_read_time": estimated_read_time(content),
            "completion_percentage": (
                PROVISIONAL_COMPLETE if len(content) > PROVISIONAL_LENGTH else PROVISIONAL_DRAFT
            ),
            "validation_results": [],
        }
        if existing is not None:
            computed["tags"] = list(existing.metadata.tags)
            computed["collaborators"] = list(existing.metadata.collaborators)
        computed.update(metadata or {})
        doc_metadata = DocumentMetadata(**computed)

        if existing is None:
            document = build_document(doc_type, project.id, content, metadata=doc_metadata)
        else:
            document = existing.model_copy(update={
                "content": content,
                "version": existing.version + 1,
                "updated_at": datetime.now(),
                "metadata": doc_metadata,
            })

        self.documents.put(document)
        self._attach_to_project(project, document)
        self.mark_unsaved(doc_type)
        return document

    def _attach_to_project(self, project: SpecificationProject, document: SpecificationDocument) -> None:
        """프로젝트 레코드의 문서 목록에 반영 (종류별 최대 1개)"""
        order = list(DocumentType)
        others = [d for d in project.documents if d.type != document.type]
        project.documents = sorted(others + [document], key=lambda d: order.index(d.type))
        project.updated_at = datetime.now()

    def mark_unsaved(self, doc_type: Optional[DocumentType] = None) -> None:
        """저장 안 됨으로 표시하고 디바운스 타이머를 다시 무장합니다."""
        self._unsaved = True
        if doc_type is not None:
            self._dirty.add(DocumentType(doc_type))
        self.autosave.touch()

    def mark_saved(self) -> None:
        self._dirty.clear()
        self._unsaved = False
        self.last_saved = datetime.now()

    # ==================== 저장 ====================

    async def save_document(self, doc_type: DocumentType) -> None:
        """
        문서 하나를 영속화 협력자로 저장합니다.

        저장 도중 같은 문서가 다시 편집되었다면(version 변경) 그 편집은
        저장 안 됨 상태로 남습니다.

        Raises:
            Exception: 영속화 협력자의 실패를 그대로 전파 (errors.saving 에도 기록)
        """
        doc_type = DocumentType(doc_type)
        document = self.documents.get(doc_type)
        if document is None:
            return

        snapshot = document.model_copy(deep=True)
        with self._tracking("saving"):
            await self.persistence.commit(snapshot)

        self.last_saved = datetime.now()
        current = self.documents.get(doc_type)
        if current is not None and current.id == snapshot.id and current.version == snapshot.version:
            self._dirty.discard(doc_type)
            if not self._dirty:
                self._unsaved = False
        else:
            logger.debug(f"[DocumentStore] {doc_type.value}: 저장 중 새 편집 발생, 저장 안 됨 유지")

    async def save_all_documents(self, only_unsaved: bool = False) -> None:
        """
        메모리에 있는 문서를 모두 저장합니다.

        Args:
            only_unsaved: True 면 저장 안 된 문서만 저장
                (문서 구분 없이 저장 안 됨 표시만 있는 경우에는 전체 저장)
        """
        present = [doc_type for doc_type, _ in self.documents.present()]
        targets = present
        if only_unsaved:
            targets = [t for t in present if t in self._dirty] or present

        if targets:
            await asyncio.gather(*(self.save_document(t) for t in targets))

    async def _autosave(self) -> bool:
        """
        타이머 경로의 저장. 두 번 호출되어도 두 번째는 아무 일도 하지 않습니다.
        저장할 문서가 하나도 없으면 저장 안 됨 플래그만 내리고 False 를 돌려줍니다.
        """
        if not self.unsaved_changes:
            return False
        if not any(True for _ in self.documents.present()):
            self._dirty.clear()
            self._unsaved = False
            return False
        await self.save_all_documents(only_unsaved=True)
        return True

    # ==================== 자동 저장 ====================

    def initialize(self) -> None:
        """
        호스트가 저장소를 만든 뒤 호출합니다.
        설정에서 자동 저장이 켜져 있으면 주기 타이머를 무장합니다.
        """
        if self.auto_save.enabled and not self.autosave.is_running:
            self.enable_auto_save()

    def enable_auto_save(self) -> None:
        self.autosave.enable()

    def disable_auto_save(self) -> None:
        self.autosave.disable()

    def configure_auto_save(self, **changes: Any) -> AutoSaveConfig:
        return self.autosave.configure(**changes)

    async def shutdown(self) -> None:
        """저장소 폐기 시 호출: 타이머를 모두 해제하고 진행 중인 타이머 저장을 기다립니다."""
        self.autosave.shutdown()
        await self.autosave.drain()

    # ==================== 검증 ====================

    async def validate_document(self, doc_type: DocumentType) -> list[ValidationResult]:
        """단계 게이트와 무관한 개별 문서 검증. 실패 시 빈 목록을 반환합니다."""
        document = self.documents.get(DocumentType(doc_type))
        if document is None:
            return []

        self._in_flight["validation"] += 1
        self.loading.validation = True
        self.errors.validation = None
        try:
            results = await self.validator.validate_document(document)
        except Exception as e:
            logger.error(f"[DocumentStore] 문서 검증 실패 ({doc_type}): {e}", exc_info=True)
            self.errors.validation = str(e) or "Document validation failed"
            return []
        finally:
            self._in_flight["validation"] -= 1
            self.loading.validation = self._in_flight["validation"] > 0

        document.metadata.validation_results = list(results)
        return results

    async def validate_all_documents(self) -> dict[str, list[ValidationResult]]:
        results = {}
        for doc_type, _ in list(self.documents.present()):
            results[doc_type.value] = await self.validate_document(doc_type)
        return results

    # ==================== 내보내기 / 가져오기 ====================

    async def export_project(self, project_id: str) -> str:
        """
        프로젝트와 문서를 JSON 문자열로 내보냅니다.

        Raises:
            ProjectNotFoundError: 해당 ID의 프로젝트가 없음
        """
        project = self._find_project(project_id)
        if project is None:
            raise ProjectNotFoundError(details={"project_id": project_id})

        if self.current_project is not None and self.current_project.id == project_id:
            documents = self.documents.model_copy(deep=True)
        else:
            documents = DocumentSet.from_documents(project.documents)

        envelope = ProjectExport(project=project, documents=documents)
        return envelope.model_dump_json(indent=2, by_alias=True)

    async def import_project(self, serialized: str) -> SpecificationProject:
        """
        내보낸 JSON 을 새 프로젝트로 가져옵니다. 포함된 ID는 사용하지 않고 새 ID를 부여합니다.

        Raises:
            ImportFormatError: JSON 해석 실패 또는 형식 불일치
        """
        try:
            envelope = ProjectExport.model_validate_json(serialized)
        except (ValueError, TypeError) as e:
            self.errors.projects = "Invalid project data format"
            raise ImportFormatError(details={"error": str(e)}) from e

        new_id = new_project_id("imported")
        now = datetime.now()
        documents = [
            document.model_copy(update={
                "id": f"{DOCUMENT_ID_PREFIX[doc_type]}-{new_id}",
                "project_id": new_id,
            })
            for doc_type, document in envelope.documents.present()
        ]
        project = envelope.project.model_copy(update={
            "id": new_id,
            "documents": documents,
            "created_at": now,
            "updated_at": now,
        })

        self.projects.append(project)
        logger.info(f"[DocumentStore] 프로젝트 가져오기: {envelope.project.id} -> {new_id}")
        return project

    # ==================== 상태 스냅샷 ====================

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            projects=[p.model_copy(deep=True) for p in self.projects],
            current_project_id=self.current_project.id if self.current_project else None,
            current_phase=self.current_phase,
            documents=self.documents.model_copy(deep=True),
            auto_save=self.auto_save.model_copy(),
        )

    def restore(self, snapshot: StoreSnapshot) -> None:
        """스냅샷 상태로 되돌립니다. 타이머는 무장하지 않습니다. (initialize() 에서 무장)"""
        self.autosave.shutdown()
        self.autosave.config = snapshot.auto_save.model_copy()

        self.projects = list(snapshot.projects)
        self.current_project = (
            self._find_project(snapshot.current_project_id)
            if snapshot.current_project_id else None
        )
        self.phases.reset(snapshot.current_phase)
        self.documents = snapshot.documents.model_copy(deep=True)
        self._dirty.clear()
        self._unsaved = False

    async def save_snapshot(self) -> bool:
        if self.storage is None:
            return False
        await self.storage.save_state(self.snapshot())
        return True

    async def load_snapshot(self) -> bool:
        if self.storage is None:
            return False
        snapshot = await self.storage.load_state()
        if snapshot is None:
            return False
        self.restore(snapshot)
        logger.info(f"[DocumentStore] 상태 복원: 프로젝트 {len(self.projects)}개")
        return True

    # ==================== 에러 상태 ====================

    def clear_error(self, key: str) -> None:
        setattr(self.errors, key, None)

    def clear_all_errors(self) -> None:
        self.errors = SpecificationErrorState()

    # ==================== 내부 도우미 함수들 ====================

    def _find_project(self, project_id: str) -> Optional[SpecificationProject]:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def _apply_project_changes(
        self, project_id: str, changes: dict[str, Any]
    ) -> Optional[SpecificationProject]:
        """목록의 프로젝트와 현재 프로젝트(다른 객체일 수 있음)에 변경을 반영"""
        targets = [p for p in self.projects if p.id == project_id]
        current = self.current_project
        if current is not None and current.id == project_id and all(t is not current for t in targets):
            targets.append(current)

        now = datetime.now()
        for project in targets:
            for key, value in changes.items():
                setattr(project, key, value)
            project.updated_at = now

        return targets[0] if targets else None

    @contextmanager
    def _tracking(self, key: str):
        """loading/errors 상태를 함께 관리하는 공통 블록"""
        self._in_flight[key] += 1
        setattr(self.loading, key, True)
        setattr(self.errors, key, None)
        try:
            yield
        except Exception as e:
            setattr(self.errors, key, getattr(e, "message", None) or str(e))
            raise
        finally:
            self._in_flight[key] -= 1
            setattr(self.loading, key, self._in_flight[key] > 0)


# 싱글톤 인스턴스 (프로그램 전체에서 하나만 생성됨)
_document_store: Optional[DocumentStore] = None


def get_document_store() -> DocumentStore:
    """문서 저장소 인스턴스를 가져오거나 생성하는 함수"""
    global _document_store
    if _document_store is None:
        _document_store = DocumentStore()
    return _document_store
