from typing import List, Optional
from uuid import UUID

from adapters.record_store import RecordStore
from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import AuditAction, Role
from domain.models import AppUser
from domain.schemas import Actor, UserCreate, UserResponse, UserUpdate
from repositories.user_repository import UserRepository
from services.audit_service import AuditLogService
from services.base import BaseService


class UserService(BaseService):
    """Business logic for user accounts"""

    def __init__(self, store: RecordStore, audit_log: Optional[AuditLogService] = None):
        super().__init__("mealcount.users")
        self.store = store
        self.audit_log = audit_log or AuditLogService(store)

    def list_users(self) -> List[UserResponse]:
        with self.store.session_scope() as session:
            return [UserResponse.model_validate(u) for u in UserRepository(session).list_all()]

    def get_user(self, user_id: UUID) -> UserResponse:
        with self.store.session_scope() as session:
            user = UserRepository(session).get_by_id(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            return UserResponse.model_validate(user)

    def add_user(self, actor: Actor, data: UserCreate) -> UserResponse:
        """
        Create a user account.

        Raises:
            ServiceValidationError: On duplicate email or a teacher without a class
        """
        assigned_class = self._check_assignment(data.role, data.assigned_class)
        with self.store.session_scope() as session:
            repo = UserRepository(session)
            if repo.email_taken(data.email):
                raise ServiceValidationError(
                    f"Email '{data.email}' already exists", details={"email": data.email}
                )
            user = repo.create(
                AppUser(
                    email=data.email,
                    display_name=data.display_name.strip(),
                    role=data.role,
                    assigned_class=assigned_class,
                )
            )
            created = UserResponse.model_validate(user)

        self.log_info("user_created", user_id=created.user_id, role=created.role.value)
        self.audit_log.record(
            actor,
            AuditAction.CREATE_USER,
            {"email": created.email, "display_name": created.display_name, "role": created.role},
        )
        return created

    def update_user(self, actor: Actor, user_id: UUID, data: UserUpdate) -> UserResponse:
        submitted = data.model_dump(exclude_unset=True)
        # assigned_class may be cleared explicitly; other fields ignore null
        changes = {k: v for k, v in submitted.items() if v is not None}
        with self.store.session_scope() as session:
            repo = UserRepository(session)
            user = repo.get_by_id(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")

            email = changes.get("email")
            if email and repo.email_taken(email, exclude_id=user_id):
                raise ServiceValidationError(
                    f"Email '{email}' already exists", details={"email": email}
                )

            role = changes.get("role", user.role)
            if "assigned_class" in submitted:
                assigned = submitted["assigned_class"]
            else:
                assigned = user.assigned_class
            changes["assigned_class"] = self._check_assignment(role, assigned)

            repo.update(user, **changes)
            updated = UserResponse.model_validate(user)

        self.log_info("user_updated", user_id=user_id, fields=",".join(sorted(changes)))
        self.audit_log.record(actor, AuditAction.UPDATE_USER, {"user_id": user_id, **changes})
        return updated

    def delete_user(self, actor: Actor, user_id: UUID) -> None:
        with self.store.session_scope() as session:
            repo = UserRepository(session)
            user = repo.get_by_id(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            email = user.email
            repo.delete(user)

        self.log_info("user_deleted", user_id=user_id)
        self.audit_log.record(actor, AuditAction.DELETE_USER, {"user_id": user_id, "email": email})

    @staticmethod
    def _check_assignment(role: Role, assigned_class: Optional[str]) -> Optional[str]:
        assigned_class = assigned_class.strip() if assigned_class else None
        if role == Role.TEACHER and not assigned_class:
            raise ServiceValidationError("Teachers must be assigned to a class")
        return assigned_class
