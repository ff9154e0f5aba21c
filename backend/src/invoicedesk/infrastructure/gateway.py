"""
Persistence gateway for invoices and users.

Each call runs one parameterized statement in its own session and
transaction. Store-level failures surface as PersistenceError carrying
the driver's message; callers decide whether to recover.
"""

from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql.expression import TextClause

from invoicedesk.domain.errors import PersistenceError
from invoicedesk.domain.models import Invoice, InvoiceStatus, User


INSERT_INVOICE = text(
    "INSERT INTO invoices (id, customer_id, amount, status, date) "
    "VALUES (:id, :customer_id, :amount, :status, :date)"
)

UPDATE_INVOICE = text(
    "UPDATE invoices "
    "SET customer_id = :customer_id, amount = :amount, status = :status "
    "WHERE id = :id"
)

DELETE_INVOICE = text("DELETE FROM invoices WHERE id = :id")

SELECT_INVOICES = text(
    "SELECT id, customer_id, amount, status, date "
    "FROM invoices ORDER BY date DESC, id"
)

SELECT_USER_BY_EMAIL = text(
    "SELECT id, name, email, password FROM users WHERE email = :email"
)


class SqlGateway:
    """Runs single statements through an async session factory."""
    
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
    
    async def _run(
        self,
        statement: TextClause,
        params: Mapping[str, Any] | None = None,
    ) -> list[RowMapping]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(statement, dict(params or {}))
                    if not result.returns_rows:
                        return []
                    return list(result.mappings())
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e


class InvoiceGateway(SqlGateway):
    """Statements against the ``invoices`` table."""
    
    async def insert_invoice(
        self,
        customer_id: str,
        amount: int,
        status: InvoiceStatus,
        date: str,
    ) -> str:
        """Insert a new invoice and return its generated identifier."""
        invoice_id = str(uuid4())
        await self._run(
            INSERT_INVOICE,
            {
                "id": invoice_id,
                "customer_id": customer_id,
                "amount": amount,
                "status": status.value,
                "date": date,
            },
        )
        return invoice_id
    
    async def update_invoice(
        self,
        invoice_id: str,
        customer_id: str,
        amount: int,
        status: InvoiceStatus,
    ) -> None:
        """Overwrite customer, amount and status. Id and date are untouched."""
        await self._run(
            UPDATE_INVOICE,
            {
                "id": invoice_id,
                "customer_id": customer_id,
                "amount": amount,
                "status": status.value,
            },
        )
    
    async def delete_invoice(self, invoice_id: str) -> None:
        # No existence check; a missing row is a no-op
        await self._run(DELETE_INVOICE, {"id": invoice_id})
    
    async def list_invoices(self) -> list[Invoice]:
        rows = await self._run(SELECT_INVOICES)
        return [
            Invoice(
                id=row["id"],
                customer_id=row["customer_id"],
                amount=int(row["amount"]),
                status=InvoiceStatus(row["status"]),
                date=row["date"],
            )
            for row in rows
        ]


class UserGateway(SqlGateway):
    """Read access to the ``users`` table for sign-in."""
    
    async def get_user_by_email(self, email: str) -> User | None:
        rows = await self._run(SELECT_USER_BY_EMAIL, {"email": email})
        if not rows:
            return None
        row = rows[0]
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password=row["password"],
        )
