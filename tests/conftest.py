"""Shared fixtures: a fresh SQLite database per test."""
import os
from types import SimpleNamespace

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./library_management.db")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import library_management.models  # noqa: F401
from library_management.database import Base, get_db
from library_management.main import app
from library_management.models import Book, Library, Loan, Member


@pytest.fixture
async def engine(tmp_path):
    """Engine bound to a throwaway database file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seed(session_factory):
    """Two libraries; the first has three books and two members.

    Ids are returned rather than instances so that tests can roll back
    their own session without touching expired objects.
    """
    async with session_factory() as session:
        central = Library(name="Central Library", address="1 Main St")
        annex = Library(name="East Annex", address="9 River Rd")
        session.add_all([central, annex])
        await session.flush()

        books = [
            Book(library_id=central.id, title="Dune", author="Frank Herbert",
                 isbn="9780441172719", publication_year=1965),
            Book(library_id=central.id, title="Emma", author="Jane Austen",
                 isbn="9780141439587", publication_year=1815),
            Book(library_id=central.id, title="Ulysses", author="James Joyce",
                 isbn="9780199535675", publication_year=1922),
        ]
        annex_book = Book(library_id=annex.id, title="Beloved", author="Toni Morrison",
                          isbn="9781400033416", publication_year=1987)
        adams = Member(library_id=central.id, first_name="Ada", last_name="Adams",
                       email="ada@example.com")
        zorn = Member(library_id=central.id, first_name="Zed", last_name="Zorn",
                      email="zed@example.com")
        session.add_all([*books, annex_book, adams, zorn])
        await session.commit()

        return SimpleNamespace(
            library_id=central.id,
            annex_id=annex.id,
            book_ids=[book.id for book in books],
            annex_book_id=annex_book.id,
            adams_id=adams.id,
            zorn_id=zorn.id,
        )


@pytest.fixture
def check_availability():
    """Assert that every book is available exactly when it has no active loan."""

    async def check(session: AsyncSession) -> None:
        result = await session.execute(
            select(Book).execution_options(populate_existing=True)
        )
        for book in result.scalars().all():
            active = await session.scalar(
                select(func.count())
                .select_from(Loan)
                .where(Loan.book_id == book.id, Loan.return_date.is_(None))
            )
            assert active <= 1, f"book {book.id} has {active} active loans"
            assert book.is_available == (active == 0), (
                f"book {book.id}: is_available={book.is_available}, active loans={active}"
            )

    return check


@pytest.fixture
async def client(session_factory):
    """Create test client."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
