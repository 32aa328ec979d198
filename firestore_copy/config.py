"""설정 및 환경변수 관리 모듈"""
import os
import logging
from typing import Optional
from dotenv import load_dotenv

# 환경변수 파일 로드
load_dotenv()

logger = logging.getLogger(__name__)


def _get_int_env(name: str, default: int) -> int:
    """정수 환경변수 읽기 (잘못된 값이면 기본값)"""
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"환경변수 '{name}' 값이 정수가 아님: {value!r}, 기본값 {default} 사용")
        return default


class Config:
    """애플리케이션 설정 클래스"""

    # Google Cloud 설정
    PROJECT_ID = (
        os.getenv('PROJECT_ID')
        or os.getenv('FIREBASE_PROJECT_ID')
        or os.getenv('GOOGLE_CLOUD_PROJECT', '')
    )

    # Firestore REST API 설정
    FIRESTORE_API_BASE_URL = os.getenv('FIRESTORE_API_BASE_URL', 'https://firestore.googleapis.com')
    FIRESTORE_API_VERSION = os.getenv('FIRESTORE_API_VERSION', 'v1beta1')
    FIRESTORE_DATABASE = os.getenv('FIRESTORE_DATABASE', '(default)')

    # HTTP / 복사 설정
    HTTP_TIMEOUT = _get_int_env('HTTP_TIMEOUT', 30)
    COPY_BATCH_SIZE = _get_int_env('COPY_BATCH_SIZE', 50)

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def get_api_base(cls) -> str:
        return f"{cls.FIRESTORE_API_BASE_URL.rstrip('/')}/{cls.FIRESTORE_API_VERSION}"

    @classmethod
    def get_documents_root(cls, project: str) -> str:
        """프로젝트의 Firestore 문서 루트 리소스 이름 반환"""
        if not project:
            raise EnvironmentError("❌ Firestore 프로젝트 ID가 설정되어 있지 않습니다.")
        return f"projects/{project}/databases/{cls.FIRESTORE_DATABASE}/documents"

    @staticmethod
    def get_service_account_path() -> Optional[str]:
        """ADC가 없을 때 사용할 서비스 계정 키 파일 경로 (SERVICE_ACCOUNT_KEY_PATH)"""
        path = os.getenv('SERVICE_ACCOUNT_KEY_PATH')
        if not path:
            return None
        if not os.path.exists(path):
            logger.warning(f"SERVICE_ACCOUNT_KEY_PATH의 키 파일이 존재하지 않음: {path}")
            return None
        return path
