"""Loan listing order, filters and detail reads."""
from datetime import timedelta

import pytest

from library_management.core.clock import utcnow
from library_management.core.exceptions import NotFoundError
from library_management.schemas.loan import LoanCreate, LoanDetailsResponse, LoanUpdate
from library_management.services import LoanQueryService, LoanService

NOW = utcnow()


def at(moment):
    return lambda: moment


async def lend(db, seed, book_id, member_id, due, clock=NOW):
    service = LoanService(db, clock=at(clock))
    return await service.create_loan(
        LoanCreate(
            library_id=seed.library_id,
            book_id=book_id,
            member_id=member_id,
            due_date=due,
        )
    )


@pytest.mark.asyncio
async def test_listing_puts_active_loans_first(db, seed):
    """Test active loans by due date descending, then returned loans."""
    l1 = await lend(db, seed, seed.book_ids[0], seed.adams_id, NOW + timedelta(days=5))
    l2 = await lend(
        db, seed, seed.book_ids[2], seed.adams_id,
        NOW - timedelta(days=10), clock=NOW - timedelta(days=20),
    )
    await LoanService(db).update_loan(l2.id, LoanUpdate(return_date=NOW - timedelta(days=12)))
    l3 = await lend(db, seed, seed.book_ids[1], seed.zorn_id, NOW + timedelta(days=3))

    loans = await LoanQueryService(db).list_by_library(seed.library_id)

    assert [loan.id for loan in loans] == [l1.id, l3.id, l2.id]
    assert [loan.is_active for loan in loans] == [True, True, False]


@pytest.mark.asyncio
async def test_listing_breaks_due_date_ties_by_surname(db, seed):
    due = NOW + timedelta(days=7)
    zorn_loan = await lend(db, seed, seed.book_ids[0], seed.zorn_id, due)
    adams_loan = await lend(db, seed, seed.book_ids[1], seed.adams_id, due)

    loans = await LoanQueryService(db).list_loans()

    assert [loan.id for loan in loans] == [adams_loan.id, zorn_loan.id]


@pytest.mark.asyncio
async def test_listing_orders_returned_loans_by_due_date(db, seed):
    """Test that returned loans follow the same due date ordering."""
    service = LoanService(db)
    early = await lend(
        db, seed, seed.book_ids[0], seed.adams_id,
        NOW - timedelta(days=15), clock=NOW - timedelta(days=30),
    )
    late = await lend(
        db, seed, seed.book_ids[1], seed.adams_id,
        NOW - timedelta(days=5), clock=NOW - timedelta(days=30),
    )
    await service.update_loan(early.id, LoanUpdate(return_date=NOW - timedelta(days=16)))
    await service.update_loan(late.id, LoanUpdate(return_date=NOW - timedelta(days=6)))

    loans = await LoanQueryService(db).list_loans(active=False)

    assert [loan.id for loan in loans] == [late.id, early.id]


@pytest.mark.asyncio
async def test_details_are_stable_between_reads(db, seed):
    """Test that two reads without writes in between agree."""
    await lend(db, seed, seed.book_ids[0], seed.adams_id, NOW + timedelta(days=5))
    await lend(db, seed, seed.book_ids[1], seed.zorn_id, NOW + timedelta(days=9))
    queries = LoanQueryService(db)

    def snapshot(loans):
        return [LoanDetailsResponse.model_validate(loan).model_dump() for loan in loans]

    first = snapshot(await queries.list_all_with_details())
    second = snapshot(await queries.list_all_with_details())

    assert first == second
    assert first[0]["library_name"] == "Central Library"
    assert first[0]["book_title"] == "Emma"
    assert first[0]["member_full_name"] == "Zed Zorn"


@pytest.mark.asyncio
async def test_list_by_library_only_returns_that_library(db, seed):
    await lend(db, seed, seed.book_ids[0], seed.adams_id, NOW + timedelta(days=5))
    annex_loan = await LoanService(db, clock=at(NOW)).create_loan(
        LoanCreate(
            library_id=seed.annex_id,
            book_id=seed.annex_book_id,
            member_id=seed.zorn_id,
            due_date=NOW + timedelta(days=5),
        )
    )
    queries = LoanQueryService(db)

    annex = await queries.list_by_library(seed.annex_id)
    assert [loan.id for loan in annex] == [annex_loan.id]
    assert annex[0].library_name == "East Annex"

    central = await queries.list_by_library(seed.library_id)
    assert all(loan.library_id == seed.library_id for loan in central)
    assert len(central) == 1


@pytest.mark.asyncio
async def test_library_name_without_loans(db, seed):
    queries = LoanQueryService(db)

    assert await queries.get_library_name(seed.annex_id) == "East Annex"
    assert await queries.list_by_library(seed.annex_id) == []

    with pytest.raises(NotFoundError):
        await queries.get_library_name(999)


@pytest.mark.asyncio
async def test_list_filters(db, seed):
    first = await lend(db, seed, seed.book_ids[0], seed.adams_id, NOW + timedelta(days=5))
    second = await lend(db, seed, seed.book_ids[1], seed.zorn_id, NOW + timedelta(days=4))
    await LoanService(db, clock=at(NOW)).update_loan(first.id, LoanUpdate(return_date=NOW))
    queries = LoanQueryService(db)

    assert [loan.id for loan in await queries.list_loans(active=True)] == [second.id]
    assert [loan.id for loan in await queries.list_loans(active=False)] == [first.id]
    assert [loan.id for loan in await queries.list_loans(member_id=seed.adams_id)] == [first.id]
    assert [loan.id for loan in await queries.list_loans(book_id=seed.book_ids[1])] == [second.id]


@pytest.mark.asyncio
async def test_has_active_loan(db, seed):
    loan = await lend(db, seed, seed.book_ids[0], seed.adams_id, NOW + timedelta(days=5))
    queries = LoanQueryService(db)

    assert await queries.has_active_loan(seed.book_ids[0]) is True
    assert await queries.has_active_loan(seed.book_ids[0], exclude_loan_id=loan.id) is False
    assert await queries.has_active_loan(seed.book_ids[1]) is False


@pytest.mark.asyncio
async def test_overdue_flag(db, seed):
    loan = await lend(
        db, seed, seed.book_ids[0], seed.adams_id,
        NOW - timedelta(days=1), clock=NOW - timedelta(days=10),
    )
    stored = await LoanQueryService(db).get_loan(loan.id)

    assert stored.is_overdue is True
