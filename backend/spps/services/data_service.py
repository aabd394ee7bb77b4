"""
Service de données simulé.

Possède les quatre collections (utilisateurs, élèves, types d'infraction,
infractions) rangées dans le stockage clé-valeur. Chaque opération :
1. relit la collection complète
2. valide (unicité) et applique la modification sur une copie
3. réécrit la collection complète
4. attend la latence simulée avant de répondre

Aucun verrou : deux appels concurrents sur la même collection peuvent perdre
une mise à jour (le dernier écrivain gagne).
"""

import asyncio
import logging
import random
import string
import time
from typing import Any, Iterable, List, Optional

from spps.config import settings
from spps.exceptions import (
    DuplicateStudent,
    DuplicateUsername,
    DuplicateViolationType,
    InvalidCredentials,
    NotFound,
)
from spps.schemas.student import StudentCreate, StudentResponse, StudentUpdate
from spps.schemas.user import Role, UserCreate, UserResponse, UserUpdate
from spps.schemas.violation import (
    ViolationCreate,
    ViolationResponse,
    ViolationTypeResponse,
    ViolationUpdate,
)
from spps.security import create_access_token, decode_access_token, get_password_hash, verify_password
from spps.services.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

# Clés des collections dans le stockage
USERS_KEY = "mock_db_users"
STUDENTS_KEY = "mock_db_students"
VIOLATION_TYPES_KEY = "mock_db_violation_types"
VIOLATIONS_KEY = "mock_db_violations"
CURRENT_USER_TOKEN_KEY = "mock_db_current_user_token"

# Mots de passe en clair ici, hachés (bcrypt) à l'initialisation
DEFAULT_USERS = [
    {"id": "admin1", "username": "admin", "password": "adminpassword", "role": Role.ADMIN.value},
    {"id": "guru1", "username": "guru", "password": "gurupassword", "role": Role.GURU_PIKET.value},
]

INITIAL_VIOLATION_TYPES = [
    {"id": "v1", "name": "Tidak memakai topi"},
    {"id": "v2", "name": "Kaos kaki tidak sesuai"},
    {"id": "v3", "name": "Rambut tidak rapi"},
    {"id": "v4", "name": "Seragam tidak lengkap"},
    {"id": "v5", "name": "Terlambat masuk sekolah"},
    {"id": "v6", "name": "Membuang sampah sembarangan"},
]

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def _random_suffix(length: int = 7) -> str:
    return "".join(random.choices(_SUFFIX_ALPHABET, k=length))


def generate_id(prefix: str, existing_ids: Iterable[str], with_suffix: bool = False) -> str:
    """
    Génère un identifiant `<prefix>-<timestamp ms>`.
    Un suffixe aléatoire est ajouté pour les insertions en lot, ou si
    l'identifiant est déjà pris (deux insertions dans la même milliseconde).
    """
    taken = set(existing_ids)
    base = f"{prefix}-{int(time.time() * 1000)}"
    candidate = f"{base}-{_random_suffix()}" if with_suffix else base
    while candidate in taken:
        candidate = f"{base}-{_random_suffix()}"
    return candidate


def _is_same_student(record: dict, name: str, class_name: str) -> bool:
    """Comparaison (nom, classe) insensible à la casse."""
    return (
        record["name"].lower() == name.lower()
        and record["class_name"].lower() == class_name.lower()
    )


def _public_user(record: dict) -> UserResponse:
    """Retire le mot de passe avant de renvoyer un utilisateur."""
    return UserResponse(id=record["id"], username=record["username"], role=record["role"])


def _find_index(records: List[dict], record_id: str) -> int:
    for index, record in enumerate(records):
        if record["id"] == record_id:
            return index
    return -1


class DataService:
    def __init__(self, store: KeyValueStore, latency: Optional[float] = None):
        self.store = store
        self.latency = settings.API_LATENCY_MS / 1000 if latency is None else latency

    def initialize(self) -> None:
        """Insère les comptes et types d'infraction par défaut si les collections sont vides."""
        if not self.store.load(USERS_KEY, []):
            self.store.save(
                USERS_KEY,
                [{**u, "password": get_password_hash(u["password"])} for u in DEFAULT_USERS],
            )
            logger.info("Comptes par défaut créés (%d).", len(DEFAULT_USERS))

        if not self.store.load(VIOLATION_TYPES_KEY, []):
            self.store.save(VIOLATION_TYPES_KEY, INITIAL_VIOLATION_TYPES)
            logger.info("Types d'infraction initiaux créés (%d).", len(INITIAL_VIOLATION_TYPES))

        for key in (STUDENTS_KEY, VIOLATIONS_KEY):
            if self.store.load(key, None) is None:
                self.store.save(key, [])

    async def _respond(self, value: Any) -> Any:
        """Simule la latence réseau avant de rendre le résultat."""
        await asyncio.sleep(self.latency)
        return value

    def _delete(self, key: str, record_id: str) -> bool:
        records = self.store.load(key, [])
        remaining = [r for r in records if r["id"] != record_id]
        self.store.save(key, remaining)
        deleted = len(remaining) < len(records)
        if deleted:
            logger.info("Suppression %s : %s", key, record_id)
        return deleted

    # --- Authentification & utilisateurs ---

    async def login(self, username: str, password: str) -> UserResponse:
        """
        Vérifie les identifiants et enregistre un jeton signé comme session courante.
        Une nouvelle connexion remplace la session précédente.
        Lève InvalidCredentials si aucun compte ne correspond.
        """
        users = self.store.load(USERS_KEY, [])
        user = next(
            (
                u for u in users
                if u["username"] == username and verify_password(password, u["password"])
            ),
            None,
        )
        if user is None:
            logger.warning("Échec de connexion pour '%s'", username)
            raise InvalidCredentials()

        self.store.save(CURRENT_USER_TOKEN_KEY, create_access_token(user["id"]))
        logger.info("Connexion de '%s' (%s)", user["username"], user["role"])
        return await self._respond(_public_user(user))

    async def logout(self) -> bool:
        self.store.remove(CURRENT_USER_TOKEN_KEY)
        return await self._respond(True)

    async def get_session_token(self) -> Optional[str]:
        """Jeton de la session courante, ou None si personne n'est connecté."""
        return await self._respond(self.store.load(CURRENT_USER_TOKEN_KEY, None))

    async def get_authenticated_user(self) -> Optional[UserResponse]:
        """Retourne l'utilisateur du jeton de session enregistré, ou None (jeton expiré inclus)."""
        token = self.store.load(CURRENT_USER_TOKEN_KEY, None)
        user_id = decode_access_token(token) if isinstance(token, str) else None
        if user_id:
            users = self.store.load(USERS_KEY, [])
            index = _find_index(users, user_id)
            if index > -1:
                return await self._respond(_public_user(users[index]))
        return await self._respond(None)

    async def get_all_users(self) -> List[UserResponse]:
        users = self.store.load(USERS_KEY, [])
        return await self._respond([_public_user(u) for u in users])

    async def add_user(self, data: UserCreate) -> UserResponse:
        users = self.store.load(USERS_KEY, [])
        if any(u["username"] == data.username for u in users):
            logger.warning("Username déjà utilisé : %s", data.username)
            raise DuplicateUsername()

        record = {
            "id": generate_id("user", (u["id"] for u in users)),
            "username": data.username,
            "password": get_password_hash(data.password),
            "role": data.role.value,
        }
        users.append(record)
        self.store.save(USERS_KEY, users)
        logger.info("Utilisateur créé : %s (%s)", record["username"], record["id"])
        return await self._respond(_public_user(record))

    async def update_user(self, user_id: str, data: UserUpdate) -> UserResponse:
        """Un mot de passe None ou vide conserve le mot de passe existant."""
        users = self.store.load(USERS_KEY, [])
        index = _find_index(users, user_id)
        if index == -1:
            raise NotFound("Pengguna tidak ditemukan.")

        if any(u["id"] != user_id and u["username"] == data.username for u in users):
            raise DuplicateUsername()

        existing = users[index]
        if data.password and data.password.strip():
            password = get_password_hash(data.password)
        else:
            password = existing["password"]
        users[index] = {
            **existing,
            "username": data.username,
            "role": data.role.value,
            "password": password,
        }
        self.store.save(USERS_KEY, users)
        return await self._respond(_public_user(users[index]))

    async def delete_user(self, user_id: str) -> bool:
        return await self._respond(self._delete(USERS_KEY, user_id))

    # --- Élèves ---

    async def get_all_students(self) -> List[StudentResponse]:
        students = self.store.load(STUDENTS_KEY, [])
        return await self._respond([StudentResponse(**s) for s in students])

    async def get_student_by_id(self, student_id: str) -> Optional[StudentResponse]:
        students = self.store.load(STUDENTS_KEY, [])
        index = _find_index(students, student_id)
        return await self._respond(StudentResponse(**students[index]) if index > -1 else None)

    async def add_student(self, data: StudentCreate) -> StudentResponse:
        """Lève DuplicateStudent si (nom, classe) existe déjà, casse ignorée."""
        students = self.store.load(STUDENTS_KEY, [])
        if any(_is_same_student(s, data.name, data.class_name) for s in students):
            logger.warning("Élève déjà existant : %s (%s)", data.name, data.class_name)
            raise DuplicateStudent(data.name, data.class_name)

        record = {"id": generate_id("student", (s["id"] for s in students)), **data.model_dump(mode="json")}
        students.append(record)
        self.store.save(STUDENTS_KEY, students)
        logger.info("Élève créé : %s (%s)", record["name"], record["class_name"])
        return await self._respond(StudentResponse(**record))

    async def update_student(self, student_id: str, data: StudentUpdate) -> StudentResponse:
        students = self.store.load(STUDENTS_KEY, [])
        index = _find_index(students, student_id)
        if index == -1:
            raise NotFound("Siswa tidak ditemukan.")

        updated = {**students[index], **data.model_dump(mode="json", exclude_unset=True, exclude_none=True)}
        if any(
            s["id"] != student_id and _is_same_student(s, updated["name"], updated["class_name"])
            for s in students
        ):
            raise DuplicateStudent(updated["name"], updated["class_name"])

        students[index] = updated
        self.store.save(STUDENTS_KEY, students)
        return await self._respond(StudentResponse(**updated))

    async def delete_student(self, student_id: str) -> bool:
        return await self._respond(self._delete(STUDENTS_KEY, student_id))

    async def add_students_from_excel(self, new_students: List[StudentCreate]) -> List[StudentResponse]:
        """
        Insère uniquement les élèves absents (même règle de doublon que add_student).
        Les doublons, y compris à l'intérieur du lot, sont ignorés sans erreur.
        Retourne les élèves effectivement insérés.
        """
        students = self.store.load(STUDENTS_KEY, [])
        added: List[dict] = []

        for data in new_students:
            if any(_is_same_student(s, data.name, data.class_name) for s in students):
                continue
            record = {
                "id": generate_id("student", (s["id"] for s in students), with_suffix=True),
                **data.model_dump(mode="json"),
            }
            students.append(record)
            added.append(record)

        self.store.save(STUDENTS_KEY, students)
        logger.info(
            "Import élèves : %d insérés, %d ignorés",
            len(added), len(new_students) - len(added),
        )
        return await self._respond([StudentResponse(**s) for s in added])

    # --- Types d'infraction ---

    async def get_all_violation_types(self) -> List[ViolationTypeResponse]:
        types = self.store.load(VIOLATION_TYPES_KEY, INITIAL_VIOLATION_TYPES)
        return await self._respond([ViolationTypeResponse(**t) for t in types])

    async def add_violation_type(self, name: str) -> ViolationTypeResponse:
        types = self.store.load(VIOLATION_TYPES_KEY, [])
        if any(t["name"].lower() == name.lower() for t in types):
            logger.warning("Type d'infraction déjà existant : %s", name)
            raise DuplicateViolationType()

        record = {"id": generate_id("vtype", (t["id"] for t in types)), "name": name}
        types.append(record)
        self.store.save(VIOLATION_TYPES_KEY, types)
        logger.info("Type d'infraction créé : %s", name)
        return await self._respond(ViolationTypeResponse(**record))

    async def update_violation_type(self, type_id: str, name: str) -> ViolationTypeResponse:
        types = self.store.load(VIOLATION_TYPES_KEY, [])
        index = _find_index(types, type_id)
        if index == -1:
            raise NotFound("Jenis pelanggaran tidak ditemukan.")

        if any(t["id"] != type_id and t["name"].lower() == name.lower() for t in types):
            raise DuplicateViolationType()

        types[index] = {"id": type_id, "name": name}
        self.store.save(VIOLATION_TYPES_KEY, types)
        return await self._respond(ViolationTypeResponse(**types[index]))

    async def delete_violation_type(self, type_id: str) -> bool:
        # Pas de cascade : les infractions qui référencent ce type le gardent.
        return await self._respond(self._delete(VIOLATION_TYPES_KEY, type_id))

    # --- Infractions ---

    async def get_all_violations(self) -> List[ViolationResponse]:
        violations = self.store.load(VIOLATIONS_KEY, [])
        return await self._respond([ViolationResponse(**v) for v in violations])

    async def add_violation(self, data: ViolationCreate) -> ViolationResponse:
        violations = self.store.load(VIOLATIONS_KEY, [])
        record = {"id": generate_id("violation", (v["id"] for v in violations)), **data.model_dump(mode="json")}
        violations.append(record)
        self.store.save(VIOLATIONS_KEY, violations)
        logger.info(
            "Infraction enregistrée : élève %s, %d type(s), %s",
            record["student_id"], len(record["violation_type_ids"]), record["date"],
        )
        return await self._respond(ViolationResponse(**record))

    async def update_violation(self, violation_id: str, data: ViolationUpdate) -> ViolationResponse:
        violations = self.store.load(VIOLATIONS_KEY, [])
        index = _find_index(violations, violation_id)
        if index == -1:
            raise NotFound("Catatan pelanggaran tidak ditemukan.")

        changes = data.model_dump(mode="json", exclude_unset=True)
        # notes peut être effacée (None), pas les champs obligatoires
        for field in ("student_id", "date", "violation_type_ids"):
            if changes.get(field) is None:
                changes.pop(field, None)

        violations[index] = {**violations[index], **changes}
        self.store.save(VIOLATIONS_KEY, violations)
        return await self._respond(ViolationResponse(**violations[index]))

    async def delete_violation(self, violation_id: str) -> bool:
        return await self._respond(self._delete(VIOLATIONS_KEY, violation_id))
