"""Autosave scheduler.

자동 저장은 두 개의 독립적인 타이머로 동작합니다.

┌──────────────┬────────────────────────────────┬──────────────────────────────┐
│ 타이머        │ 무장 시점                        │ 동작                          │
├──────────────┼────────────────────────────────┼──────────────────────────────┤
│ 디바운스      │ 편집할 때마다 다시 무장            │ debounce_delay 동안 편집이     │
│              │ (마지막 편집 기준)                │ 없으면 저장 1회                │
│ 주기(interval)│ enable() 호출 시 1회             │ interval 마다, 저장 안 된       │
│              │                                │ 변경이 있을 때만 저장            │
└──────────────┴────────────────────────────────┴──────────────────────────────┘

- 두 타이머는 서로를 취소하지 않습니다. 먼저 발동한 쪽이 저장합니다.
- 타이머에서 시작된 저장의 실패는 로그만 남기고 전파하지 않습니다.
  (저장 안 됨 플래그가 그대로 남으므로 다음 타이머가 다시 시도합니다.)
- 타이머 핸들은 인스턴스 필드입니다. 소유자는 폐기 시 shutdown()을 호출해야 합니다.
- 모든 메서드는 실행 중인 asyncio 이벤트 루프 안에서 호출해야 합니다.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from specflow.models import AutoSaveConfig

logger = logging.getLogger(__name__)


class AutoSaveScheduler:
    """
    디바운스 타이머와 주기 타이머를 관리하는 클래스입니다.

    Attributes:
        config: 현재 자동 저장 설정
        debounce_saves: 디바운스 타이머가 실행한 저장 횟수
        interval_saves: 주기 타이머가 실행한 저장 횟수
    """

    def __init__(
        self,
        save: Callable[[], Awaitable[Any]],
        has_unsaved_changes: Callable[[], bool],
        config: Optional[AutoSaveConfig] = None,
    ):
        """
        Args:
            save: 저장 안 된 문서를 모두 저장하는 비동기 함수 (False 를 돌려주면 저장 횟수에 세지 않음)
            has_unsaved_changes: 저장 안 된 변경이 있는지 알려주는 함수
            config: 자동 저장 설정 (None 이면 기본값)
        """
        self._save = save
        self._has_unsaved_changes = has_unsaved_changes
        self.config = config.model_copy() if config else AutoSaveConfig()

        self._debounce_handle: Optional[asyncio.TimerHandle] = None
        self._interval_task: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()

        self.debounce_saves = 0
        self.interval_saves = 0

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @property
    def is_running(self) -> bool:
        """주기 타이머가 무장되어 있는지 여부"""
        return self._interval_task is not None and not self._interval_task.done()

    @property
    def debounce_pending(self) -> bool:
        return self._debounce_handle is not None

    # ==================== 설정 ====================

    def enable(self) -> None:
        """자동 저장을 켜고 주기 타이머를 무장합니다."""
        self._cancel_interval()
        self.config = self.config.model_copy(update={"enabled": True})
        self._interval_task = asyncio.get_running_loop().create_task(self._interval_loop())
        logger.info(
            f"[AutoSave] 활성화: interval={self.config.interval}ms, "
            f"debounce={self.config.debounce_delay}ms"
        )

    def disable(self) -> None:
        """자동 저장을 끄고 두 타이머를 모두 해제합니다."""
        self._cancel_timers()
        self.config = self.config.model_copy(update={"enabled": False})
        logger.info("[AutoSave] 비활성화")

    def configure(self, **changes: Any) -> AutoSaveConfig:
        """
        설정을 병합합니다.
        활성화 상태라면 두 타이머를 해제한 뒤 새 설정으로 다시 무장합니다.
        """
        merged = self.config.model_dump()
        merged.update({k: v for k, v in changes.items() if v is not None})
        self.config = AutoSaveConfig(**merged)

        if self.config.enabled:
            self._cancel_timers()
            self.enable()
            if self._has_unsaved_changes():
                self.touch()
        else:
            self._cancel_timers()

        return self.config

    # ==================== 타이머 ====================

    def touch(self) -> None:
        """
        편집이 발생했음을 알립니다.
        디바운스 타이머를 해제하고 마지막 편집 기준으로 다시 무장합니다.
        """
        self._cancel_debounce()
        if not self.config.enabled:
            return

        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(
            self.config.debounce_delay / 1000,
            self._on_debounce,
        )

    def cancel_pending(self) -> None:
        """대기 중인 디바운스 저장만 취소합니다. (프로젝트 전환 시)"""
        self._cancel_debounce()

    def _on_debounce(self) -> None:
        self._debounce_handle = None
        self._spawn_save("debounce")

    async def _interval_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.interval / 1000)
            if self._has_unsaved_changes():
                # 주기 타이머가 해제되어도 이미 시작된 저장은 끝까지 진행 (drain 대상)
                await asyncio.shield(self._spawn_save("interval"))

    def _spawn_save(self, trigger: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._run_save(trigger))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _run_save(self, trigger: str) -> None:
        """타이머 경로의 저장. 변경이 없으면 아무것도 하지 않습니다."""
        if not self._has_unsaved_changes():
            logger.debug(f"[AutoSave] {trigger}: 저장할 변경 없음")
            return

        try:
            saved = await self._save()
        except Exception as e:
            logger.error(f"[AutoSave] {trigger} 저장 실패 (다음 주기에 재시도): {e}", exc_info=True)
            return

        if saved is False:
            logger.debug(f"[AutoSave] {trigger}: 저장할 문서 없음")
            return

        if trigger == "debounce":
            self.debounce_saves += 1
        else:
            self.interval_saves += 1
        logger.info(f"[AutoSave] {trigger} 저장 완료")

    # ==================== 정리 ====================

    def shutdown(self) -> None:
        """두 타이머 핸들을 모두 해제합니다. 설정(enabled)은 바꾸지 않습니다."""
        self._cancel_timers()

    async def drain(self) -> None:
        """진행 중인 타이머 저장이 끝날 때까지 기다립니다."""
        if self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _cancel_interval(self) -> None:
        if self._interval_task is not None:
            self._interval_task.cancel()
            self._interval_task = None

    def _cancel_timers(self) -> None:
        self._cancel_debounce()
        self._cancel_interval()
