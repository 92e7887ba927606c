# adoptly/core/config.py

import os


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # Firestore 프로젝트 ID. 비어 있으면 인증 파일에 기록된 프로젝트를 사용합니다.
    FIRESTORE_PROJECT_ID = os.getenv('FIRESTORE_PROJECT_ID')

    # 컬렉션 이름
    REQUESTS_COLLECTION = os.getenv('REQUESTS_COLLECTION', 'adoption_requests')
    PETS_COLLECTION = os.getenv('PETS_COLLECTION', 'pets')

    # 이미 accepted 상태인 입양 요청을 다시 accepted로 바꿀 때 재고 차감을 또 수행할지 여부.
    # False면 상태만 저장하고 재고는 건드리지 않습니다.
    ALLOW_REQUEST_REACCEPT = _env_flag('ALLOW_REQUEST_REACCEPT')


class DevelopmentConfig(Config):
    """개발 환경 설정."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')


class TestingConfig(Config):
    """테스트 환경 설정. 테스트에서는 create_app(db=...)로 가짜 클라이언트를 주입합니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')


class ProductionConfig(Config):
    """운영 환경 설정."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')


# create_app에서 FLASK_ENV 값에 따라 설정 클래스를 고르는 데 사용합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
