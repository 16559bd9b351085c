from mathquest.application.services.authentication_service import (
    AuthenticationService,
    SignInResult,
)
from mathquest.application.services.email_verification_service import (
    EmailVerificationService,
)
from mathquest.application.services.password_reset_service import (
    PasswordResetService,
)
from mathquest.application.services.principal_resolver import PrincipalResolver
from mathquest.application.services.role_seeder import RoleSeeder
from mathquest.application.services.user_account_service import UserAccountService

__all__ = [
    "AuthenticationService",
    "EmailVerificationService",
    "PasswordResetService",
    "PrincipalResolver",
    "RoleSeeder",
    "SignInResult",
    "UserAccountService",
]
