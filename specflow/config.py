from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """
    애플리케이션의 설정을 관리하는 클래스입니다.
    환경 변수(.env 파일)에서 설정값을 읽어옵니다. (접두사: SPECFLOW_)
    """

    model_config = SettingsConfigDict(
        env_prefix="SPECFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # 저장소 설정: 문서와 상태 스냅샷을 저장할 폴더
    storage_path: str = "data"

    # 자동 저장 설정 (밀리초)
    autosave_enabled: bool = True  # 서버 시작 시 자동 저장을 켤지 결정
    autosave_interval_ms: int = 30000  # 주기 저장 간격 (30초)
    autosave_debounce_ms: int = 2000  # 마지막 편집 후 저장까지 대기 시간 (2초)

    # 입력 제한
    max_document_chars: int = 500_000  # 문서 하나의 최대 글자 수
    max_import_bytes: int = 5_000_000  # 가져오기 데이터 최대 크기

    # 서버 설정: 서버가 실행될 주소와 포트 번호
    host: str = "0.0.0.0"  # 모든 외부 접속 허용
    port: int = 8000
    allowed_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """
    설정을 가져오는 함수입니다.
    @lru_cache를 사용하여 한 번 읽은 설정은 메모리에 저장해두고 재사용합니다.
    """
    return Settings()
