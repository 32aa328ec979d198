"""문서 필드 캐시 모듈"""
from typing import Any, Dict, Optional


class DocumentCache:
    """경로별 문서 필드 캐시 (복사 작업 1회 동안만 유지)"""

    def __init__(self):
        self.docs: Dict[str, Dict[str, Any]] = {}

    def get(self, path) -> Optional[Dict[str, Any]]:
        """캐시에서 필드 조회"""
        return self.docs.get(str(path))

    def set(self, path, fields: Dict[str, Any]) -> None:
        """캐시에 필드 저장"""
        self.docs[str(path)] = fields

    def evict(self, path) -> None:
        """캐시에서 경로 제거"""
        self.docs.pop(str(path), None)

    def __contains__(self, path) -> bool:
        return str(path) in self.docs

    def size(self) -> int:
        """현재 캐시 크기"""
        return len(self.docs)
