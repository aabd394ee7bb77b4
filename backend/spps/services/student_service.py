"""
Service métier pour les élèves : relais vers le service de données.
"""

from typing import List, Optional

from spps.schemas.student import StudentCreate, StudentResponse, StudentUpdate
from spps.services.data_service import DataService


class StudentService:
    def __init__(self, data_service: DataService):
        self.data = data_service

    async def get_all_students(self) -> List[StudentResponse]:
        """Retourne tous les élèves triés par nom."""
        students = await self.data.get_all_students()
        return sorted(students, key=lambda s: s.name)

    async def get_student_by_id(self, student_id: str) -> Optional[StudentResponse]:
        return await self.data.get_student_by_id(student_id)

    async def add_student(self, data: StudentCreate) -> StudentResponse:
        return await self.data.add_student(data)

    async def update_student(self, student_id: str, data: StudentUpdate) -> StudentResponse:
        return await self.data.update_student(student_id, data)

    async def delete_student(self, student_id: str) -> bool:
        return await self.data.delete_student(student_id)

    async def add_students_from_excel(self, new_students: List[StudentCreate]) -> List[StudentResponse]:
        return await self.data.add_students_from_excel(new_students)
