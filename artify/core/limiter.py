"""
Rate Limiter 모듈
순환 임포트를 피하기 위해 limiter를 중앙 집중화
"""
from slowapi import Limiter
from artify.core.config import RATE_LIMIT_PER_MINUTE
from artify.core.middleware import get_real_ip

# 프록시 뒤 실제 클라이언트 IP 기준으로 제한 (RealIPMiddleware가 request.state에 기록)
limiter = Limiter(key_func=get_real_ip)

# 작성/좋아요처럼 저장소에 쓰기가 발생하는 라우트에 적용
WRITE_RATE_LIMIT = f"{RATE_LIMIT_PER_MINUTE}/minute"
