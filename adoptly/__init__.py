# adoptly/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from typing import Optional, Dict, Any
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from adoptly.core.config import config_by_name

# - API 블루프린트
from adoptly.api.adoption_requests.routes import requests_bp
from adoptly.api.pets.routes import pets_bp

# - 서비스
from adoptly.api.pets.services import PetService
from adoptly.api.adoption_requests.services import AdoptionRequestService
from adoptly.services.inventory_reconciler import InventoryReconciler


def _init_firestore(app: Flask):
    """Firebase 앱을 한 번만 초기화하고 공용 Firestore 클라이언트를 반환합니다."""
    if not firebase_admin._apps:
        cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        options = {}
        if app.config.get('FIRESTORE_PROJECT_ID'):
            options['projectId'] = app.config['FIRESTORE_PROJECT_ID']
        firebase_admin.initialize_app(cred, options)
    return firestore.client()


def create_app(config_name: Optional[str] = None, db=None, test_config: Optional[Dict[str, Any]] = None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' / 'testing' / 'production'. 없으면 FLASK_ENV를 사용합니다.
    :param db: 주입할 Firestore 클라이언트. 없으면 Firebase를 초기화해 생성합니다.
    :param test_config: 설정 클래스 값을 덮어쓸 딕셔너리 (테스트용)
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    if test_config:
        app.config.update(test_config)
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 외부 서비스 초기화
    # =====================================================================================
    if db is None:
        db = _init_firestore(app)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 반려동물(재고) 서비스
    app.services['pets'] = PetService(db=db, collection_name=app.config['PETS_COLLECTION'])

    # 5-2. 재고 조정기와 입양 요청 서비스
    app.services['inventory'] = InventoryReconciler(pet_service=app.services['pets'])
    app.services['adoption_requests'] = AdoptionRequestService(
        inventory_reconciler=app.services['inventory'],
        db=db,
        collection_name=app.config['REQUESTS_COLLECTION'],
        allow_reaccept=app.config['ALLOW_REQUEST_REACCEPT']
    )

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(requests_bp, url_prefix='/request')
    app.register_blueprint(pets_bp, url_prefix='/pets')

    @app.route('/')
    def index():
        return 'Adoptly server is running'

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "message": "입력값이 올바르지 않습니다.", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({"error_code": err.name.upper().replace(' ', '_'), "message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
