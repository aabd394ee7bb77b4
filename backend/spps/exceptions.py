"""
Erreurs métier levées par les services.

Toutes dérivent de ValueError : les routers les interceptent et les
traduisent en HTTPException avec le code adapté (401, 403, 404, 409).
Les messages sont affichés tels quels à l'utilisateur.
"""


class ServiceError(ValueError):
    """Erreur métier générique. L'état stocké n'est pas modifié."""


class InvalidCredentials(ServiceError):
    def __init__(self, message: str = "Username atau password salah."):
        super().__init__(message)


class DuplicateUsername(ServiceError):
    def __init__(self, message: str = "Username sudah ada."):
        super().__init__(message)


class DuplicateStudent(ServiceError):
    def __init__(self, name: str, class_name: str):
        super().__init__(f'Siswa dengan nama "{name}" di kelas "{class_name}" sudah ada.')
        self.name = name
        self.class_name = class_name


class DuplicateViolationType(ServiceError):
    def __init__(self, message: str = "Jenis pelanggaran sudah ada."):
        super().__init__(message)


class NotFound(ServiceError):
    """Enregistrement introuvable lors d'une mise à jour."""


class SelfDeletionForbidden(ServiceError):
    def __init__(self, message: str = "Anda tidak bisa menghapus akun Anda sendiri."):
        super().__init__(message)
