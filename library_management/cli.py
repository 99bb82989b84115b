"""
Library Management CLI.

Usage:
    library-management init-db                 # Create tables
    library-management serve --port 8000       # Run the API server
    library-management loans --library 1       # List loans in display order
    library-management return-loan 42          # Record a return as of now
"""
import argparse
import asyncio
import sys
from typing import Optional

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from library_management.core.exceptions import AppException  # noqa: E402
from library_management.database import close_db, init_db, session_scope  # noqa: E402
from library_management.models import Loan  # noqa: E402
from library_management.services import LoanQueryService, LoanService  # noqa: E402


class Colors:
    """ANSI color codes for terminal output."""
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    END = '\033[0m'


def print_success(text: str):
    print(f"{Colors.GREEN}✓ {text}{Colors.END}")


def print_error(text: str):
    print(f"{Colors.RED}✗ {text}{Colors.END}", file=sys.stderr)


def format_loan(loan: Loan) -> str:
    """One table row for a loan with details loaded."""
    if loan.return_date is None:
        state = f"{Colors.RED}overdue{Colors.END}" if loan.is_overdue else f"{Colors.YELLOW}active{Colors.END}"
        returned = "-"
    else:
        state = f"{Colors.GREEN}returned{Colors.END}"
        returned = f"{loan.return_date:%Y-%m-%d}"
    return (
        f"{loan.id:>5}  {loan.library_name[:18]:<18}  {loan.book_title[:28]:<28}  "
        f"{loan.member_full_name[:22]:<22}  {loan.due_date:%Y-%m-%d}  {returned:<10}  {state}"
    )


async def cmd_init_db(args: argparse.Namespace) -> int:
    await init_db()
    print_success("Database tables created")
    return 0


async def cmd_loans(args: argparse.Namespace) -> int:
    active: Optional[bool] = True if args.active else None
    async with session_scope() as db:
        queries = LoanQueryService(db)
        if args.library is not None:
            name = await queries.get_library_name(args.library)
            print(f"{Colors.BOLD}{Colors.CYAN}Loans of {name}{Colors.END}")
        loans = await queries.list_loans(
            library_id=args.library,
            book_id=args.book,
            member_id=args.member,
            active=active,
        )
        print(f"{Colors.BOLD}{'ID':>5}  {'Library':<18}  {'Book':<28}  {'Member':<22}  "
              f"{'Due':<10}  {'Returned':<10}  State{Colors.END}")
        for loan in loans:
            print(format_loan(loan))
    print(f"\n{len(loans)} loan(s)")
    return 0


async def cmd_return_loan(args: argparse.Namespace) -> int:
    async with session_scope() as db:
        loan = await LoanService(db).return_loan(args.loan_id)
    print_success(f"Loan {loan.id} returned; '{loan.book_title}' is available again")
    return 0


async def run_command(args: argparse.Namespace) -> int:
    try:
        return await args.handler(args)
    except AppException as exc:
        print_error(exc.message)
        return 1
    finally:
        await close_db()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="library-management",
        description="Library loan records from the command line",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init-db", help="Create database tables")
    init_parser.set_defaults(handler=cmd_init_db)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    loans_parser = subparsers.add_parser("loans", help="List loans")
    loans_parser.add_argument("--library", type=int, help="Only loans of this library")
    loans_parser.add_argument("--book", type=int, help="Only loans of this book")
    loans_parser.add_argument("--member", type=int, help="Only loans of this member")
    loans_parser.add_argument("--active", action="store_true", help="Only unreturned loans")
    loans_parser.set_defaults(handler=cmd_loans)

    return_parser = subparsers.add_parser("return-loan", help="Record a loan as returned")
    return_parser.add_argument("loan_id", type=int)
    return_parser.set_defaults(handler=cmd_return_loan)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("library_management.main:app", host=args.host, port=args.port)
        return 0

    return asyncio.run(run_command(args))


if __name__ == "__main__":
    sys.exit(main())
