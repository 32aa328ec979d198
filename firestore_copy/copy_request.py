"""복사 요청 모델 및 경로 검증"""
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .config import Config


class ConfigurationError(ValueError):
    """잘못된 옵션 조합 또는 경로 (네트워크 호출 전에 발생)"""


class TraversalMode(Enum):
    """컬렉션 탐색 방식"""
    DEFAULT = "default"
    RECURSIVE = "recursive"
    SHALLOW = "shallow"


class ConflictPolicy(Enum):
    """대상 문서가 이미 존재할 때의 처리 방식"""
    REPORT = "report"
    OVERWRITE = "overwrite"
    SKIP = "skip"


def _split(raw: str) -> Tuple[str, ...]:
    stripped = (raw or "").strip("/")
    if not stripped:
        return ()
    return tuple(stripped.split("/"))


def is_document_path(raw: str) -> bool:
    """문서 경로 여부 (세그먼트 수가 짝수)"""
    segments = _split(raw)
    if not segments:
        return False
    return len(segments) % 2 == 0


def is_collection_path(raw: str) -> bool:
    """컬렉션 경로 여부 (세그먼트 수가 홀수)"""
    if not _split(raw):
        return False
    return not is_document_path(raw)


@dataclass(frozen=True)
class FirestorePath:
    """'/'로 구분된 Firestore 문서 또는 컬렉션 경로"""
    segments: Tuple[str, ...]

    @classmethod
    def parse(cls, raw: str, label: str = "Path") -> "FirestorePath":
        """문자열 경로 파싱 및 검증 (앞뒤 '/' 제거)"""
        segments = _split(raw)
        if not segments:
            raise ConfigurationError(f"{label} length must be greater than zero.")
        if any(not segment for segment in segments):
            raise ConfigurationError(f"{label} must not have any empty segments: {raw!r}")
        return cls(segments)

    @property
    def is_document_path(self) -> bool:
        return len(self.segments) % 2 == 0

    @property
    def is_collection_path(self) -> bool:
        return not self.is_document_path

    @property
    def document_id(self) -> str:
        return self.segments[-1]

    @property
    def parent(self) -> "FirestorePath":
        """문서가 속한 컬렉션 경로"""
        if len(self.segments) < 2:
            raise ConfigurationError(f"Path {self} has no parent collection.")
        return FirestorePath(self.segments[:-1])

    def child(self, segment: str) -> "FirestorePath":
        if not segment or "/" in segment:
            raise ConfigurationError(f"Invalid path segment: {segment!r}")
        return FirestorePath(self.segments + (segment,))

    def __str__(self) -> str:
        return "/".join(self.segments)


@dataclass(frozen=True)
class CopyRequest:
    """한 번의 실행에서 사용되는 불변 복사 요청"""
    project: str
    source: FirestorePath
    target: FirestorePath
    traversal: TraversalMode = TraversalMode.DEFAULT
    conflict_policy: ConflictPolicy = ConflictPolicy.REPORT
    batch_size: int = 50

    @staticmethod
    def check_options(source: str,
                      target: str,
                      recursive: bool = False,
                      shallow: bool = False,
                      overwrite: bool = False,
                      skip: bool = False) -> Tuple[FirestorePath, FirestorePath]:
        """프로젝트와 무관한 플래그/경로 검증 (원본, 대상 경로 반환)"""
        if recursive and shallow:
            raise ConfigurationError("Cannot pass recursive and shallow options together.")
        if overwrite and skip:
            raise ConfigurationError("Cannot pass overwrite and skip options together.")
        return FirestorePath.parse(source, "Source path"), FirestorePath.parse(target, "Target path")

    @classmethod
    def from_flags(cls,
                   project: str,
                   source: str,
                   target: str,
                   recursive: bool = False,
                   shallow: bool = False,
                   overwrite: bool = False,
                   skip: bool = False,
                   batch_size: int = None) -> "CopyRequest":
        """CLI 플래그로부터 요청 생성 (모든 검증은 여기서 즉시 수행)"""
        source_path, target_path = cls.check_options(source, target, recursive, shallow, overwrite, skip)
        if not project:
            raise ConfigurationError("A Firestore project ID is required (--project or PROJECT_ID).")

        if batch_size is None:
            batch_size = Config.COPY_BATCH_SIZE
        if batch_size < 1:
            raise ConfigurationError(f"Batch size must be a positive integer, got {batch_size}.")

        if recursive:
            traversal = TraversalMode.RECURSIVE
        elif shallow:
            traversal = TraversalMode.SHALLOW
        else:
            traversal = TraversalMode.DEFAULT

        if overwrite:
            policy = ConflictPolicy.OVERWRITE
        elif skip:
            policy = ConflictPolicy.SKIP
        else:
            policy = ConflictPolicy.REPORT

        return cls(
            project=project,
            source=source_path,
            target=target_path,
            traversal=traversal,
            conflict_policy=policy,
            batch_size=batch_size,
        )

    @property
    def recursive(self) -> bool:
        return self.traversal is TraversalMode.RECURSIVE

    @property
    def shallow(self) -> bool:
        return self.traversal is TraversalMode.SHALLOW

    @property
    def overwrite(self) -> bool:
        return self.conflict_policy is ConflictPolicy.OVERWRITE

    @property
    def skip(self) -> bool:
        return self.conflict_policy is ConflictPolicy.SKIP
