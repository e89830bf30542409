"""
Eco-map Service

School-scoped pins and the student request flow that feeds them.
"""
import logging
from typing import Dict, Any, List, Optional

from ecolearn import dynamo, dynamo_ecomap
from ecolearn.errors import NotFoundError
from ecolearn.logic import ecomap as rules
from ecolearn.services.access import GLOBAL_SCHOOL, content_school, ensure_can_manage, visible_to

logger = logging.getLogger(__name__)


def _newest_first(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(items, key=lambda i: i.get('createdAt', ''), reverse=True)


class EcoMapService:

    # ========== PINS ==========

    async def get_pin(self, pin_id: str) -> Dict[str, Any]:
        pin = await dynamo_ecomap.get_pin(pin_id)
        if not pin:
            raise NotFoundError("Eco pin not found")
        return pin

    async def list_pins(
        self,
        user: Optional[Dict[str, Any]],
        pin_type: Optional[str] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        radius_km: float = 10
    ) -> List[Dict[str, Any]]:
        """Active pins the caller's school can see, optionally by type and distance"""
        pins = [p for p in await dynamo_ecomap.list_pins(active_only=True) if visible_to(p, user)]
        if pin_type and pin_type != 'all':
            pins = [p for p in pins if p.get('type') == pin_type]
        if lat is not None and lng is not None:
            pins = [p for p in pins if rules.within_radius(p, lat, lng, radius_km)]
        return _newest_first(pins)

    async def create_pin(self, user: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        pin = {
            **data,
            'pin_id': dynamo.new_id(),
            'school': content_school(user),
            'createdBy': user['user_id'],
            'createdAt': dynamo.utc_now().isoformat(),
        }
        rules.validate_pin(pin)
        await dynamo_ecomap.save_pin(pin)
        logger.info(f"Pin {pin['pin_id']} ({pin.get('type')}) created by {user['user_id']}")
        return pin

    async def update_pin(self, user: Dict[str, Any], pin_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        pin = await self.get_pin(pin_id)
        ensure_can_manage(user, pin, "pin")
        pin.update(updates)
        rules.validate_pin(pin)
        return await dynamo_ecomap.save_pin(pin)

    async def delete_pin(self, user: Dict[str, Any], pin_id: str) -> None:
        pin = await self.get_pin(pin_id)
        ensure_can_manage(user, pin, "pin", action="delete")
        await dynamo_ecomap.delete_pin(pin_id)

    async def stats(self) -> Dict[str, int]:
        return rules.count_by_type(await dynamo_ecomap.list_pins(active_only=True))

    # ========== REQUESTS ==========

    async def get_request(self, request_id: str) -> Dict[str, Any]:
        pin_request = await dynamo_ecomap.get_pin_request(request_id)
        if not pin_request:
            raise NotFoundError("Pin request not found")
        return pin_request

    async def submit_request(self, user: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
        pin_request = {
            **data,
            'request_id': dynamo.new_id(),
            'requestedBy': user['user_id'],
            'requesterName': user.get('name'),
            'status': 'pending',
            'adminNotes': None,
            'createdAt': dynamo.utc_now().isoformat(),
        }
        rules.validate_pin(pin_request)
        await dynamo_ecomap.save_pin_request(pin_request)
        logger.info(f"Pin request {pin_request['request_id']} submitted by {user['user_id']}")
        return pin_request

    async def my_requests(self, user: Dict[str, Any]) -> List[Dict[str, Any]]:
        return _newest_first(await dynamo_ecomap.list_pin_requests(requested_by=user['user_id']))

    async def list_requests(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        if status == 'all':
            status = None
        return _newest_first(await dynamo_ecomap.list_pin_requests(status=status))

    async def approve_request(self, request_id: str, admin_notes: Optional[str] = None) -> Dict[str, Any]:
        """Approve and publish the pin under the requester's school"""
        pin_request = await self.get_request(request_id)
        requester = await dynamo.get_user(pin_request['requestedBy'])
        school = (requester or {}).get('school') or GLOBAL_SCHOOL

        pin = rules.approve_request(pin_request, school, admin_notes)
        await dynamo_ecomap.save_pin(pin)
        await dynamo_ecomap.save_pin_request(pin_request)
        logger.info(f"Pin request {request_id} approved as pin {pin['pin_id']}")
        return {'pinRequest': pin_request, 'ecoPin': pin}

    async def reject_request(self, request_id: str, admin_notes: Optional[str]) -> Dict[str, Any]:
        pin_request = await self.get_request(request_id)
        rules.reject_request(pin_request, admin_notes)
        await dynamo_ecomap.save_pin_request(pin_request)
        logger.info(f"Pin request {request_id} rejected")
        return pin_request


ecomap_service = EcoMapService()
