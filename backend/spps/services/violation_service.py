"""
Service métier pour les types d'infraction et les infractions : relais vers le service de données.
"""

from typing import List

from spps.schemas.violation import (
    ViolationCreate,
    ViolationResponse,
    ViolationTypeResponse,
    ViolationUpdate,
)
from spps.services.data_service import DataService


class ViolationService:
    def __init__(self, data_service: DataService):
        self.data = data_service

    async def get_all_violation_types(self) -> List[ViolationTypeResponse]:
        return await self.data.get_all_violation_types()

    async def add_violation_type(self, name: str) -> ViolationTypeResponse:
        return await self.data.add_violation_type(name)

    async def update_violation_type(self, type_id: str, name: str) -> ViolationTypeResponse:
        return await self.data.update_violation_type(type_id, name)

    async def delete_violation_type(self, type_id: str) -> bool:
        return await self.data.delete_violation_type(type_id)

    async def get_all_violations(self) -> List[ViolationResponse]:
        return await self.data.get_all_violations()

    async def add_violation(self, data: ViolationCreate) -> ViolationResponse:
        return await self.data.add_violation(data)

    async def update_violation(self, violation_id: str, data: ViolationUpdate) -> ViolationResponse:
        return await self.data.update_violation(violation_id, data)

    async def delete_violation(self, violation_id: str) -> bool:
        return await self.data.delete_violation(violation_id)
