"""
Customer credit ledger

The only writer of Account.current_balance. A missing account never fails
the calling order operation: the call is logged and skipped.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import case, update
from sqlalchemy.ext.asyncio import AsyncSession

from bizhub.core.exceptions import NotFound, ValidationError
from bizhub.core.logging_config import get_logger
from bizhub.core.tenant import TenantContext
from bizhub.models.account import Account
from bizhub.repositories.accounts import AccountRepository

logger = get_logger(__name__)


class AccountCreditLedger:
    def __init__(self, db: AsyncSession, tenant: TenantContext):
        self.db = db
        self.tenant = tenant
        self.accounts = AccountRepository(db, tenant)

    async def resolve(
        self,
        account_id: Optional[int] = None,
        account_name: Optional[str] = None) -> Optional[Account]:
        """Find the account by id, else by name; None when neither matches"""
        if account_id is not None:
            try:
                return await self.accounts.get(account_id)
            except NotFound:
                logger.warning(f"Account {account_id} not found in company {self.tenant.company_id}")
                return None
        if account_name:
            account = await self.accounts.get_by_name(account_name)
            if account is None:
                logger.warning(f"Account '{account_name}' not found in company {self.tenant.company_id}")
            return account
        return None

    def _scoped_update(self, account: Account):
        return update(Account).where(
            Account.id == account.id,
            Account.company_id == self.tenant.company_id,
        ).execution_options(synchronize_session=False)

    async def debit(self, amount: Decimal, account: Optional[Account]) -> Optional[Account]:
        """Add ``amount`` to what the customer owes"""
        if account is None:
            logger.warning(f"Credit debit of {amount} skipped, no account")
            return None
        amount = Decimal(str(amount))
        if amount < 0:
            raise ValidationError("Debit amount must not be negative")

        await self.db.execute(
            self._scoped_update(account).values(current_balance=Account.current_balance + amount)
        )
        account = await self.accounts.get(account.id, refresh=True)
        logger.info(f"Account debited: account={account.id} amount={amount} balance={account.current_balance}")
        return account

    async def credit(self, amount: Decimal, account: Optional[Account]) -> Optional[Account]:
        """Subtract ``amount`` from what the customer owes, never below zero"""
        if account is None:
            logger.warning(f"Credit-back of {amount} skipped, no account")
            return None
        amount = Decimal(str(amount))
        if amount < 0:
            raise ValidationError("Credit amount must not be negative")

        new_balance = Account.current_balance - amount
        await self.db.execute(
            self._scoped_update(account).values(
                current_balance=case((new_balance > 0, new_balance), else_=0)
            )
        )
        account = await self.accounts.get(account.id, refresh=True)
        logger.info(f"Account credited: account={account.id} amount={amount} balance={account.current_balance}")
        return account
