"""인증 관리 모듈"""
import logging
import threading
from typing import Optional, Tuple
from google.auth import default, exceptions
from google.auth.credentials import Credentials
from google.oauth2 import service_account

from .config import Config

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]

# 전역 인증 상태 (스레드 안전)
_auth_lock = threading.RLock()
_credentials: Optional[Credentials] = None
_project_id: Optional[str] = None
_is_initialized = False


def get_credentials() -> Optional[Credentials]:
    """인증 정보 반환"""
    with _auth_lock:
        if not _is_initialized:
            raise RuntimeError("Authentication is not initialized. Call initialize_auth() first.")
        return _credentials


def get_project_id() -> Optional[str]:
    """인증 과정에서 확정된 프로젝트 ID (초기화 전에는 설정값)"""
    with _auth_lock:
        return _project_id or Config.PROJECT_ID or None


def _choose_project(requested: Optional[str], detected: Optional[str]) -> Optional[str]:
    """명시한 프로젝트를 우선하고, 없으면 자격증명의 프로젝트 사용"""
    if requested and detected and requested != detected:
        logger.warning(f"자격증명의 프로젝트 '{detected}'와 요청한 프로젝트 '{requested}'가 다릅니다. '{requested}'를 사용합니다.")
    if not requested and detected:
        logger.info(f"프로젝트 ID를 자격증명에서 감지했습니다: {detected}")
    return requested or detected


def _load_key_file_credentials() -> Tuple[Credentials, Optional[str]]:
    key_path = Config.get_service_account_path()
    if not key_path:
        raise RuntimeError("No Application Default Credentials and no SERVICE_ACCOUNT_KEY_PATH set.")

    logger.info(f"서비스 계정 키 파일을 사용합니다: {key_path}")
    creds = service_account.Credentials.from_service_account_file(key_path, scopes=SCOPES)
    return creds, creds.project_id


def initialize_auth(project_id: Optional[str] = None) -> bool:
    """Google Cloud 인증 초기화

    Application Default Credentials를 먼저 시도하고, 없으면
    SERVICE_ACCOUNT_KEY_PATH의 키 파일을 사용한다. project_id를 주면
    자격증명에서 감지한 프로젝트보다 우선한다.
    """
    global _credentials, _project_id, _is_initialized

    with _auth_lock:
        if _is_initialized:
            return True

        requested = project_id or Config.PROJECT_ID or None
        try:
            try:
                creds, detected = default(scopes=SCOPES)
                logger.info("Application Default Credentials로 인증합니다.")
            except exceptions.DefaultCredentialsError:
                logger.info("Application Default Credentials가 없어 서비스 계정 키 파일을 확인합니다.")
                creds, detected = _load_key_file_credentials()

            _credentials = creds
            _project_id = _choose_project(requested, detected)
            _is_initialized = True
            logger.info(f"✅ 인증 성공. Project ID: {_project_id}")
            return True

        except Exception as e:
            logger.critical(f"❌ 인증 프로세스 중 심각한 오류 발생: {str(e)}", exc_info=True)
            _credentials = None
            _project_id = None
            _is_initialized = False
            return False
