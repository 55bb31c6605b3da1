"""
Tenant context

Resolves the acting user's company and carries it, together with the actor's
role, into every repository and ledger call. There is no code path that
queries core entities without a company id.
"""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bizhub.core.config import Settings, settings as default_settings
from bizhub.core.exceptions import AccessDenied, NotFound
from bizhub.core.logging_config import get_logger
from bizhub.models.company import Company
from bizhub.schemas.actor import Actor

logger = get_logger(__name__)


class TenantContext:
    """Company scope of one request"""

    def __init__(self, actor: Actor, company: Company, config: Optional[Settings] = None):
        self.actor = actor
        self.company = company
        # kept as a plain value so it survives expiry of the company row
        self._company_id = company.id
        self.config = config or default_settings

    def __repr__(self):
        return f"<TenantContext company={self.company_id} actor={self.actor_id} role={self.role}>"

    @classmethod
    async def resolve(
        cls,
        db: AsyncSession,
        actor: Actor,
        config: Optional[Settings] = None) -> "TenantContext":
        """Build the context for an actor; the company must exist and be active"""
        if actor.company_id is None:
            logger.warning(f"Actor {actor.id} has no company, request rejected")
            raise AccessDenied(
                "Access denied. User must be associated with a company. "
                "Please contact your administrator."
            )

        company = await db.get(Company, actor.company_id)
        if not company:
            raise NotFound("Company not found. Please contact your administrator.")
        if not company.is_active:
            raise AccessDenied("Your company account is inactive. Please contact your administrator.")

        return cls(actor, company, config)

    @property
    def company_id(self) -> int:
        return self._company_id

    @property
    def actor_id(self) -> int:
        return self.actor.id

    @property
    def role(self) -> str:
        return self.actor.role.value

    @property
    def is_restricted(self) -> bool:
        """Restricted roles only see and edit orders they created"""
        return self.role in self.config.RESTRICTED_ROLES

    @property
    def is_reviewer(self) -> bool:
        return self.role in self.config.REVIEWER_ROLES

    @property
    def is_elevated(self) -> bool:
        return self.role in self.config.ELEVATED_ROLES

    def require_role(self, roles, action: str) -> None:
        if self.role not in roles:
            raise AccessDenied(f"Access denied. Role '{self.role}' is not authorized to {action}.")

    def ensure_owned(self, entity: Any, label: str = "Resource") -> Any:
        """Re-check that a loaded entity belongs to this tenant"""
        if entity is None:
            raise NotFound(f"{label} not found")
        if getattr(entity, "company_id", None) != self.company_id:
            self.deny_foreign(label, getattr(entity, "id", None))
        return entity

    def deny_foreign(self, label: str, entity_id: Any) -> None:
        """Log a cross-tenant attempt and raise; the message does not confirm the row exists"""
        logger.warning(
            f"Cross-tenant access blocked: actor={self.actor_id} company={self.company_id} "
            f"{label.lower()}={entity_id}"
        )
        raise AccessDenied(f"Access denied. {label} not found in your company.")

    def ensure_same_company(self, company_id: Optional[int], action: str = "access") -> None:
        """Reject a client-supplied company id that is not the actor's"""
        if company_id is not None and company_id != self.company_id:
            logger.warning(
                f"Cross-tenant company reference blocked: actor={self.actor_id} "
                f"company={self.company_id} requested={company_id}"
            )
            raise AccessDenied(f"Access denied. You can only {action} resources of your own company.")
