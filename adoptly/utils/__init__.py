# adoptly/utils/__init__.py
"""
유틸리티 모듈 패키지

Firestore 시간 변환(datetime_utils)과 문서 ID 생성/검증(id_utils)을 포함합니다.
"""
