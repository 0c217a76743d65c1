from supabase import Client, ClientOptions, create_client


def create_supabase_client(url: str, key: str) -> Client:
    """
    Supabase 클라이언트 생성

    Returns:
        Client: Supabase Client 인스턴스

    Rationale:
        - 전역 싱글톤 대신 애플리케이션 lifespan에서 한 번 생성하여 app.state로 주입합니다.
        - 서버는 요청마다 전달받은 토큰만 검증하므로 세션 저장/자동 갱신을 끕니다.
          (한 사용자의 세션이 다른 요청에 섞이지 않도록)
    """
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")

    options = ClientOptions(
        schema="public",
        auto_refresh_token=False,
        persist_session=False,
    )
    return create_client(url, key, options=options)
