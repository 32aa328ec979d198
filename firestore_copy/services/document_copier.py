"""Firestore 문서 복사 서비스"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional

from ..cache import DocumentCache
from ..copy_request import ConfigurationError, ConflictPolicy, CopyRequest, FirestorePath
from .firestore_rest import FirestoreRestClient

logger = logging.getLogger(__name__)


class SourceNotFoundError(Exception):
    """복사할 원본 문서가 존재하지 않음"""
    def __init__(self, path):
        super().__init__(f"Source document does not exist: {path}")
        self.path = path


class CopyOutcome(Enum):
    CREATED = "created"
    OVERWRITTEN = "overwritten"
    SKIPPED = "skipped"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class CopyResult:
    """문서 한 건의 복사 결과"""
    source: FirestorePath
    target: FirestorePath
    outcome: CopyOutcome

    @property
    def succeeded(self) -> bool:
        return self.outcome is not CopyOutcome.CONFLICT


class DocumentCopier:
    """요청 하나에 대한 문서 복사 실행기

    원본 필드를 읽어 대상 경로에 그대로 생성한다. 대상 문서가 이미 있으면
    요청의 ConflictPolicy에 따라 덮어쓰기, 건너뛰기 또는 충돌 보고를 한다.
    """

    def __init__(self, request: CopyRequest, client: FirestoreRestClient):
        self.request = request
        self.client = client
        self.docs = DocumentCache()

    def get_document(self, path: FirestorePath) -> Optional[Dict[str, Any]]:
        """문서 필드 조회 후 캐시 (없으면 None)"""
        fields = self.client.get_document(path)
        if fields is None:
            return None
        self.docs.set(path, fields)
        return fields

    def create_document(self, source: FirestorePath, target: FirestorePath) -> None:
        """캐시된 원본 필드로 대상 문서 생성"""
        fields = self.docs.get(source)
        if fields is None:
            raise SourceNotFoundError(source)
        self.client.create_document(target.parent, target.document_id, fields)
        logger.info(f"✅ 문서 생성 완료: {target}")

    def delete_document(self, target: FirestorePath) -> None:
        """대상 문서 삭제 후 캐시에서 제거"""
        self.client.delete_document(target)
        self.docs.evict(target)
        logger.info(f"🗑️ 기존 문서 삭제 완료: {target}")

    def copy_one_document(self, source: FirestorePath, target: FirestorePath) -> CopyResult:
        """문서 한 건 복사 (중복 처리 포함)"""
        logger.info(f"🔄 문서 복사 시작: {source} → {target}")

        if self.get_document(source) is None:
            logger.error(f"❌ 원본 문서가 존재하지 않습니다: {source}")
            raise SourceNotFoundError(source)

        # 404만 '없음'으로 처리, 그 외 실패는 FirestoreAPIError로 전파
        target_exists = self.get_document(target) is not None

        if not target_exists:
            self.create_document(source, target)
            return CopyResult(source, target, CopyOutcome.CREATED)

        policy = self.request.conflict_policy
        if policy is ConflictPolicy.OVERWRITE:
            logger.info(f"대상 문서가 이미 존재하여 덮어씁니다: {target}")
            self.delete_document(target)
            self.create_document(source, target)
            return CopyResult(source, target, CopyOutcome.OVERWRITTEN)

        if policy is ConflictPolicy.SKIP:
            logger.info(f"⏭️ 대상 문서가 이미 존재하여 건너뜁니다: {target}")
            return CopyResult(source, target, CopyOutcome.SKIPPED)

        logger.warning(f"⚠️ 대상 문서가 이미 존재합니다: {target}")
        return CopyResult(source, target, CopyOutcome.CONFLICT)

    def resolve_target(self) -> FirestorePath:
        """컬렉션 대상이면 원본 문서 ID를 붙여 문서 경로로 변환"""
        source, target = self.request.source, self.request.target
        if target.is_collection_path:
            return target.child(source.document_id)
        return target

    def execute(self) -> CopyResult:
        """복사 요청 실행"""
        source = self.request.source
        if source.is_collection_path:
            raise ConfigurationError(
                f"Copying collections is not supported; source must be a document path: {source}"
            )

        target = self.resolve_target()
        if target == source:
            raise ConfigurationError(f"Source and target refer to the same document: {source}")

        return self.copy_one_document(source, target)
