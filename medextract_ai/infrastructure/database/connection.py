"""데이터베이스 연결 관리.

참조 데이터(검사 유형, 문서 카테고리)를 보관하는 MySQL에 읽기 전용으로 연결합니다.
엔진은 애플리케이션 lifespan에서 명시적으로 생성/해제하며,
레포지토리에 주입되어 쿼리 단위로 세션을 엽니다.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from medextract_ai.core.config.settings import settings


class DatabaseNotInitializedError(RuntimeError):
    """connect() 호출 전에 세션을 요청한 경우."""


class Database:
    """프로세스 단위 커넥션 풀 핸들."""

    def __init__(
        self,
        url: str | None = None,
        pool_size: int | None = None,
        max_overflow: int | None = None,
        echo: bool | None = None,
    ) -> None:
        """연결 설정을 보관합니다. 실제 풀은 connect()에서 생성됩니다.

        Args:
            url: DB URL. None이면 설정에서 가져옴.
            pool_size: 커넥션 풀 크기
            max_overflow: 최대 오버플로우 연결 수
            echo: SQL 출력 여부 (기본: 디버그 모드에서만)
        """
        raw_url = url or str(settings.database_url)
        self.url = raw_url.replace("mysql://", "mysql+aiomysql://", 1)
        self.pool_size = pool_size or settings.database_pool_size
        self.max_overflow = (
            settings.database_max_overflow if max_overflow is None else max_overflow
        )
        self.echo = settings.debug if echo is None else echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseNotInitializedError("Database가 초기화되지 않았습니다")
        return self._engine

    async def connect(self) -> None:
        """엔진을 생성하고 연결 상태를 확인합니다."""
        if self._engine is not None:
            return

        self._engine = create_async_engine(
            self.url,
            echo=self.echo,
            pool_pre_ping=True,  # 연결 상태 사전 확인
            pool_size=self.pool_size,
            max_overflow=self.max_overflow,
        )
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        async with self._engine.begin() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """커넥션 풀을 해제합니다."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """단일 쿼리용 비동기 세션.

        Yields:
            비동기 데이터베이스 세션
        """
        if self._session_factory is None:
            raise DatabaseNotInitializedError("Database가 초기화되지 않았습니다")

        async with self._session_factory() as session:
            yield session
