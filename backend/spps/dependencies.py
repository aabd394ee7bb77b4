"""
Dépendances FastAPI : services partagés et contrôle d'accès par rôle.

Le stockage et le service de données sont créés au démarrage (lifespan)
et rangés dans app.state ; les services métier sont construits à chaque requête.
"""

from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from spps.schemas.user import Role, UserResponse
from spps.services.auth_service import AuthService
from spps.services.data_service import DataService
from spps.services.kv_store import KeyValueStore
from spps.services.student_service import StudentService
from spps.services.violation_service import ViolationService

bearer_scheme = HTTPBearer(auto_error=False)

FORBIDDEN_MESSAGE = "Anda tidak memiliki izin untuk melakukan aksi ini."


def get_data_service(request: Request) -> DataService:
    return request.app.state.data_service


def get_store(data_service: DataService = Depends(get_data_service)) -> KeyValueStore:
    return data_service.store


def get_auth_service(data_service: DataService = Depends(get_data_service)) -> AuthService:
    return AuthService(data_service)


def get_student_service(data_service: DataService = Depends(get_data_service)) -> StudentService:
    return StudentService(data_service)


def get_violation_service(data_service: DataService = Depends(get_data_service)) -> ViolationService:
    return ViolationService(data_service)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Résout le jeton Bearer ; 401 si absent ou si la session n'est plus valide."""
    token = credentials.credentials if credentials else None
    user = await auth_service.get_current_user(token)
    if user is None:
        raise HTTPException(
            status_code=401,
            detail="Sesi tidak valid. Silakan login kembali.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_roles(*roles: Role) -> Callable:
    """Dépendance : 403 si l'utilisateur connecté n'a aucun des rôles donnés."""
    async def checker(user: UserResponse = Depends(get_current_user)) -> UserResponse:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail=FORBIDDEN_MESSAGE)
        return user

    return checker


require_admin = require_roles(Role.ADMIN)
require_staff = require_roles(Role.ADMIN, Role.GURU_PIKET)
