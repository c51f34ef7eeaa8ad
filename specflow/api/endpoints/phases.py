"""
단계(Phase) 관리 API입니다.
단계별 검증, 단계 이동 가능 여부 확인, 단계 이동 기능을 제공합니다.
"""

from typing import Optional

from fastapi import APIRouter

from specflow.models import PHASE_ORDER, SpecificationPhase
from specflow.services import get_document_store

router = APIRouter()


@router.get("")
async def get_phase_overview() -> dict:
    """현재 단계, 단계별 상태, 프로젝트 완성도 조회"""
    store = get_document_store()
    cache = store.phase_validation
    first_incomplete = store.first_incomplete_phase()

    return {
        "project_id": store.current_project.id if store.current_project else None,
        "current_phase": store.current_phase.value,
        "first_incomplete_phase": first_incomplete.value if first_incomplete else None,
        "project_completion": store.project_completion(),
        "can_complete_project": store.can_complete_project(),
        "phases": [
            {
                "phase": phase.value,
                "status": store.phase_status(phase).value,
                "validation": cache[phase].model_dump(mode="json") if cache[phase] else None,
            }
            for phase in PHASE_ORDER
        ],
    }


@router.post("/{phase}/validate")
async def validate_phase(phase: SpecificationPhase) -> dict:
    """단계를 검증하고 결과를 단계 캐시에 기록합니다."""
    store = get_document_store()
    result = await store.validate_phase(phase)
    return result.model_dump(mode="json")


@router.get("/{phase}/can-transition")
async def can_transition(phase: SpecificationPhase) -> dict:
    """마지막 검증 결과 기준으로 이동 가능 여부를 알려줍니다. (재검증하지 않음)"""
    store = get_document_store()
    return {
        "current_phase": store.current_phase.value,
        "target_phase": phase.value,
        "allowed": store.can_transition_to_phase(phase),
    }


@router.post("/{phase}/transition")
async def transition(phase: SpecificationPhase) -> dict:
    """
    단계를 이동합니다.
    선행 단계가 완료되지 않았으면 409 를 반환합니다.
    """
    store = get_document_store()
    previous = store.current_phase
    await store.transition_to_phase(phase)
    return {
        "previous_phase": previous.value,
        "current_phase": store.current_phase.value,
    }


@router.delete("/validation")
async def clear_validation(phase: Optional[SpecificationPhase] = None) -> dict:
    """단계 검증 캐시를 비웁니다. (phase 가 없으면 전체)"""
    store = get_document_store()
    store.clear_validation_results(phase)
    return {"message": "검증 결과가 초기화되었습니다", "phase": phase.value if phase else None}
