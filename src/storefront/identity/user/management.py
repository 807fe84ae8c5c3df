"""User management — commands and handlers."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.auth import hash_password
from storefront.identity.user.user import User
from storefront.shared.errors import BusinessRuleError, ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_MIN_PASSWORD_LENGTH = 8


@storefront.command(part_of="User")
class RegisterUser:
    username: String(required=True, max_length=50)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)
    full_name: String(max_length=150)
    phone: String(max_length=20)
    role: String(max_length=20)


@storefront.command(part_of="User")
class UpdateUser:
    user_id: Identifier(required=True)
    email: String(max_length=254)
    password: String(max_length=128)
    full_name: String(max_length=150)
    phone: String(max_length=20)
    role: String(max_length=20)
    is_active: Boolean()


@storefront.command(part_of="User")
class DeleteUser:
    user_id: Identifier(required=True)


def _check_password(password):
    if len(password) < _MIN_PASSWORD_LENGTH:
        raise BusinessRuleError({"password": [f"Password must be at least {_MIN_PASSWORD_LENGTH} characters"]})


def _assert_unique(repo, field, value, user_id=None):
    clashes = [u for u in repo._dao.query.filter(**{field: value}).all().items if str(u.id) != str(user_id)]
    if clashes:
        raise ConflictError({field: [f"A user with this {field} already exists"]}, code="DUPLICATE_USER")


@storefront.command_handler(part_of=User)
class ManageUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        email = command.email.strip().lower()
        _assert_unique(repo, "username", command.username)
        _assert_unique(repo, "email", email)
        _check_password(command.password)

        user = User(
            username=command.username,
            email=email,
            password_hash=hash_password(command.password),
            full_name=command.full_name,
            phone=command.phone,
            role=command.role or "CUSTOMER",
        )
        repo.add(user)
        logger.info("user_registered", user_id=str(user.id), role=user.role)
        return str(user.id)

    @handle(UpdateUser)
    def update_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        email = command.email.strip().lower() if command.email else None
        if email and email != user.email:
            _assert_unique(repo, "email", email, user.id)

        user.update_profile(
            email=email,
            full_name=command.full_name,
            phone=command.phone,
            role=command.role,
            is_active=command.is_active,
        )
        if command.password:
            _check_password(command.password)
            user.change_password_hash(hash_password(command.password))

        repo.add(user)
        return str(user.id)

    @handle(DeleteUser)
    def delete_user(self, command):
        repo = current_domain.repository_for(User)
        repo._dao.delete(repo.get(command.user_id))
        logger.info("user_deleted", user_id=command.user_id)
