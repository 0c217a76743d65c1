import sys
import os

# 현재 스크립트의 상위 디렉터리(프로젝트 루트)를 path에 추가
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from artify.core import config
from artify.core.supabase import create_supabase_client


def verify():
    """
    Supabase 연결 상태를 검증하는 유틸리티 스크립트.

    - artworks / favorites 테이블 조회 권한
    - 좋아요 증가 함수(increment_artwork_likes) 등록 여부 (존재하지 않는 ID로 호출 -> 0 반환)

    보안을 위해 API Key는 출력하지 않습니다.
    실행: python scripts/verify_supabase_connection.py
    """
    print("Verifying Supabase Connection...")
    credentials = config.load_supabase_credentials()
    if credentials is None:
        print("❌ SUPABASE_URL/SUPABASE_KEY 또는 자격증명 파일이 없습니다.")
        sys.exit(1)

    try:
        client = create_supabase_client(*credentials)
        print("✅ Client Initialization: Success")

        for table in (config.ARTWORKS_TABLE, config.FAVORITES_TABLE):
            client.table(table).select("id").limit(1).execute()
            print(f"✅ Table '{table}': Success")

        probe = client.rpc(
            "increment_artwork_likes",
            {"target_id": "00000000-0000-0000-0000-000000000000", "amount": 0},
        ).execute()
        print(f"✅ Function 'increment_artwork_likes': Success (matched={probe.data})")

    except Exception as e:
        print(f"❌ Connection Failed: {e}")
        sys.exit(1)

if __name__ == "__main__":
    verify()
