"""
Schémas Pydantic pour les utilisateurs et l'authentification.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class Role(str, Enum):
    ADMIN = "admin"
    GURU_PIKET = "guru_piket"  # enseignant surveillant


class UserCreate(BaseModel):
    """Création d'un compte (POST /users). Le mot de passe est obligatoire."""
    username: str
    password: str
    role: Role = Role.GURU_PIKET

    @field_validator("username")
    @classmethod
    def username_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Username tidak boleh kosong.")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Password harus diisi untuk user baru.")
        return v


class UserUpdate(BaseModel):
    """
    Mise à jour d'un compte (PUT /users/{id}).
    `password` absent, None ou vide → le mot de passe existant est conservé.
    """
    username: str
    role: Role
    password: Optional[str] = None

    @field_validator("username")
    @classmethod
    def username_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Username tidak boleh kosong.")
        return v.strip()


class UserResponse(BaseModel):
    """Utilisateur tel qu'exposé aux clients : jamais de mot de passe."""
    id: str
    username: str
    role: Role


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
