"""
Service d'authentification et de gestion des comptes.

Délègue au service de données et vérifie le jeton de session : un JWT signé
(voir spps/security.py), enregistré sous une clé unique du stockage.
Une seule session est active à la fois.
"""

import hmac
import logging
from typing import List, Optional

from spps.exceptions import SelfDeletionForbidden
from spps.schemas.user import LoginResponse, UserCreate, UserResponse, UserUpdate
from spps.security import decode_access_token
from spps.services.data_service import DataService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, data_service: DataService):
        self.data = data_service

    async def login(self, username: str, password: str) -> LoginResponse:
        """Lève InvalidCredentials si le couple username/password est inconnu."""
        user = await self.data.login(username, password)
        token = await self.data.get_session_token()
        return LoginResponse(access_token=token, user=user)

    async def logout(self) -> None:
        await self.data.logout()

    async def get_current_user(self, token: Optional[str]) -> Optional[UserResponse]:
        """
        Résout le jeton présenté par le client.
        Retourne None si la signature est invalide, si le jeton a expiré ou s'il ne
        correspond pas à la session enregistrée (déconnexion, autre utilisateur connecté).
        """
        if not token:
            return None
        user_id = decode_access_token(token)
        if user_id is None:
            return None

        session_token = await self.data.get_session_token()
        if not isinstance(session_token, str) or not hmac.compare_digest(session_token.encode(), token.encode()):
            return None

        user = await self.data.get_authenticated_user()
        if user is None or user.id != user_id:
            return None
        return user

    async def get_all_users(self) -> List[UserResponse]:
        return await self.data.get_all_users()

    async def add_user(self, data: UserCreate) -> UserResponse:
        return await self.data.add_user(data)

    async def update_user(self, user_id: str, data: UserUpdate) -> UserResponse:
        return await self.data.update_user(user_id, data)

    async def delete_user(self, user_id: str, current_user: UserResponse) -> bool:
        """Refuse la suppression de son propre compte avant tout accès au stockage."""
        if user_id == current_user.id:
            logger.warning("Tentative de suppression de son propre compte : %s", user_id)
            raise SelfDeletionForbidden()
        return await self.data.delete_user(user_id)
