from typing import Optional

from bizhub.models.account import Account
from bizhub.repositories.base import TenantRepository


class AccountRepository(TenantRepository[Account]):
    model = Account
    label = "Account"
    unique_fields = ("name",)

    async def get_by_name(self, name: str) -> Optional[Account]:
        """Account names are unique within a company"""
        if not name:
            return None
        return await self.find_one(Account.name == name.strip())
