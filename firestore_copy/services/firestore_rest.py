"""Firestore REST API 호출 서비스"""
import time
import logging
from typing import Dict, Any, Optional
from urllib.parse import quote

import requests
import google.auth.exceptions
import google.auth.transport.requests

from ..config import Config
from ..auth import get_credentials

logger = logging.getLogger(__name__)

# 인증 헤더 캐시 유지 시간 (초)
HEADERS_CACHE_SECONDS = 300


class FirestoreAPIError(Exception):
    """Firestore REST API 호출 오류"""
    def __init__(self, message: str, status_code: Optional[int] = None, error_body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.error_body = error_body


class FirestoreRestClient:
    """프로젝트 하나의 (default) 데이터베이스 문서를 다루는 REST 클라이언트"""

    def __init__(self,
                 project: str,
                 credentials=None,
                 session: Optional[requests.Session] = None,
                 base_url: Optional[str] = None,
                 timeout: Optional[int] = None):
        self.project = project
        self.credentials = credentials
        self.session = session or requests.Session()
        self.base_url = (base_url or Config.get_api_base()).rstrip('/')
        self.timeout = timeout or Config.HTTP_TIMEOUT
        self.documents_root = Config.get_documents_root(project)
        self._headers = None
        self._headers_cache_time = 0

    def _get_headers(self) -> Dict[str, str]:
        """인증 헤더 캐싱"""
        if self._headers is None or time.time() - self._headers_cache_time > HEADERS_CACHE_SECONDS:
            credentials = self.credentials or get_credentials()
            if not credentials:
                raise FirestoreAPIError("Server authentication is not configured.")

            try:
                auth_req = google.auth.transport.requests.Request()
                credentials.refresh(auth_req)
            except google.auth.exceptions.GoogleAuthError as e:
                logger.error(f"❌ Firestore 인증 헤더 생성 실패: {e}")
                raise FirestoreAPIError(f"Authentication failed: {e}") from e

            self._headers = {
                'Authorization': f'Bearer {credentials.token}',
                'Content-Type': 'application/json; charset=utf-8'
            }
            self._headers_cache_time = time.time()
            logger.debug("Firestore 인증 헤더 생성 완료")

        return self._headers

    def document_url(self, path) -> str:
        """문서/컬렉션 경로의 전체 REST URL"""
        encoded = "/".join(quote(segment, safe='') for segment in str(path).split('/'))
        return f"{self.base_url}/{self.documents_root}/{encoded}"

    def _request(self, method: str, path, **kwargs) -> requests.Response:
        url = self.document_url(path)
        logger.debug(f"Firestore {method} 요청: {url}")
        try:
            return self.session.request(
                method, url, headers=self._get_headers(), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"❌ Firestore {method} 요청 실패 ({path}): {e}")
            raise FirestoreAPIError(f"{method} {path} failed: {e}") from e

    @staticmethod
    def _raise_for_response(response: requests.Response, action: str, path) -> None:
        if not response.ok:
            error_body = response.text
            logger.error(f"❌ Firestore {action} 실패: {path} - {response.status_code} {error_body}")
            raise FirestoreAPIError(
                f"Firestore {action} error {response.status_code} for {path}",
                response.status_code,
                error_body
            )

    def get_document(self, path) -> Optional[Dict[str, Any]]:
        """문서 필드 조회 (존재하지 않으면 None)"""
        response = self._request('GET', path)
        if response.status_code == 404:
            logger.debug(f"문서가 존재하지 않음: {path}")
            return None
        self._raise_for_response(response, 'read', path)
        return response.json().get('fields', {})

    def create_document(self, collection_path, document_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """지정한 문서 ID로 컬렉션에 문서 생성"""
        response = self._request(
            'POST',
            collection_path,
            params={'documentId': document_id},
            json={'fields': fields}
        )
        self._raise_for_response(response, 'create', f"{collection_path}/{document_id}")
        return response.json()

    def delete_document(self, path) -> None:
        """문서 삭제"""
        response = self._request('DELETE', path)
        self._raise_for_response(response, 'delete', path)
