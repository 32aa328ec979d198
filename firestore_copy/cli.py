"""firestore-copy 명령행 인터페이스"""
import argparse
import logging
import sys
from typing import List, Optional

from .auth import initialize_auth, get_credentials, get_project_id
from .config import Config
from .copy_request import ConfigurationError, CopyRequest
from .services.document_copier import CopyOutcome, DocumentCopier, SourceNotFoundError
from .services.firestore_rest import FirestoreAPIError, FirestoreRestClient

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='firestore-copy',
        description='Firestore 문서를 다른 경로로 복사합니다.'
    )
    parser.add_argument('--project', default=None,
                        help='Firestore 프로젝트 ID (기본값: PROJECT_ID 환경변수)')
    parser.add_argument('--verbose', action='store_true',
                        help='디버그 로그 출력')

    subparsers = parser.add_subparsers(dest='command')
    copy_parser = subparsers.add_parser(
        'copy',
        help='Copy Firestore documents and collections from one location to another.'
    )
    copy_parser.add_argument('source', nargs='?', help='원본 문서 경로')
    copy_parser.add_argument('target', nargs='?', help='대상 문서 또는 컬렉션 경로')
    copy_parser.add_argument('-r', '--recursive', action='store_true',
                             help='하위 컬렉션까지 복사 (--shallow와 함께 사용 불가)')
    copy_parser.add_argument('--shallow', action='store_true',
                             help='상위 문서만 복사 (-r과 함께 사용 불가)')
    copy_parser.add_argument('--overwrite', action='store_true',
                             help='대상에 같은 문서가 있으면 덮어쓰기 (--skip과 함께 사용 불가)')
    copy_parser.add_argument('--skip', action='store_true',
                             help='대상에 같은 문서가 있으면 건너뛰기 (--overwrite와 함께 사용 불가)')
    copy_parser.add_argument('-y', '--yes', action='store_true',
                             help='확인 프롬프트 없이 실행')
    return parser


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def confirm(source, target, project: Optional[str]) -> bool:
    """복사 실행 전 사용자 확인 (입력이 없으면 취소)"""
    project_label = project or "(project from credentials)"
    try:
        answer = input(f"Copy {source} to {target} in project {project_label}? (y/N) ")
    except EOFError:
        logger.warning("⚠️ 확인 입력을 받을 수 없습니다. 비대화형 실행에는 -y 옵션을 사용하세요.")
        return False
    return answer.strip().lower() in ('y', 'yes')


def run_copy(args: argparse.Namespace) -> int:
    """copy 서브커맨드 실행"""
    if not args.source or not args.target:
        logger.error("❌ Must specify a source path and a target path.")
        return 1

    flags = dict(
        recursive=args.recursive,
        shallow=args.shallow,
        overwrite=args.overwrite,
        skip=args.skip,
    )

    # 네트워크 호출 전 플래그/경로 검증
    try:
        source, target = CopyRequest.check_options(args.source, args.target, **flags)
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 1

    if not args.yes and not confirm(source, target, args.project or get_project_id()):
        logger.info("🛑 사용자에 의해 취소됨")
        return 1

    if not initialize_auth(args.project):
        logger.error("❌ Google Cloud 인증 실패")
        logger.info("💡 gcloud auth application-default login 또는 SERVICE_ACCOUNT_KEY_PATH 설정을 확인하세요")
        return 1

    try:
        request = CopyRequest.from_flags(
            project=args.project or get_project_id(),
            source=args.source,
            target=args.target,
            **flags
        )
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 1

    client = FirestoreRestClient(request.project, credentials=get_credentials())
    copier = DocumentCopier(request, client)

    try:
        result = copier.execute()
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 1
    except SourceNotFoundError as e:
        logger.error(f"❌ {e}")
        return 1
    except FirestoreAPIError as e:
        logger.error(f"❌ 복사 실패: {e}")
        if e.error_body:
            logger.debug(f"응답 본문: {e.error_body}")
        return 1

    if result.outcome is CopyOutcome.CONFLICT:
        logger.warning(f"⚠️ Document already exists at {result.target}; nothing was copied.")
        logger.info("💡 Re-run with --overwrite to replace it or --skip to leave it as is.")
        return 1

    logger.info(f"🎯 {result.source} → {result.target}: {result.outcome.value}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """메인 실행 함수"""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command != 'copy':
        parser.print_help()
        return 1

    try:
        return run_copy(args)
    except KeyboardInterrupt:
        logger.info("\n🛑 사용자에 의해 중단됨")
        return 1


if __name__ == "__main__":
    sys.exit(main())
