"""
Eco-map rules

Pins mark pollution spots, parks, projects and eco clubs. Students propose
pins through requests that an admin approves (creating the pin) or
rejects with notes. A request is decided once.
"""
from typing import Dict, Any, List, Optional
from datetime import datetime
import math

from ecolearn.dynamo import new_id, utc_now
from ecolearn.errors import ValidationError

PIN_TYPES = ["pollution", "park", "project", "club"]
REQUEST_STATUSES = ["pending", "approved", "rejected"]

# Fields copied from an approved request onto the new pin
PIN_FIELDS = [
    "title", "type", "description", "address", "latitude", "longitude",
    "contact", "website", "whatsapp", "discord",
]

KM_PER_DEGREE = 111.32


def validate_pin(pin: Dict[str, Any]) -> None:
    """Eco clubs need a group link people can join"""
    if pin.get('type') == 'club' and not (pin.get('whatsapp') or pin.get('discord')):
        raise ValidationError("For eco clubs, either WhatsApp group link or Discord server link is required")


def within_radius(pin: Dict[str, Any], lat: float, lng: float, radius_km: float) -> bool:
    """Bounding-box proximity check, longitude span widened by latitude"""
    lat_span = radius_km / KM_PER_DEGREE
    lng_span = radius_km / (KM_PER_DEGREE * max(math.cos(math.radians(lat)), 0.01))
    return (
        abs(float(pin.get('latitude', 0)) - lat) <= lat_span
        and abs(float(pin.get('longitude', 0)) - lng) <= lng_span
    )


def count_by_type(pins: List[Dict[str, Any]]) -> Dict[str, int]:
    counts = {pin_type: 0 for pin_type in PIN_TYPES}
    for pin in pins:
        if pin.get('type') in counts:
            counts[pin['type']] += 1
    counts['total'] = sum(counts.values())
    return counts


def _ensure_pending(pin_request: Dict[str, Any]) -> None:
    if pin_request.get('status') != 'pending':
        raise ValidationError(f"Pin request has already been {pin_request.get('status')}")


def approve_request(
    pin_request: Dict[str, Any],
    school: str,
    admin_notes: Optional[str] = None,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """Mark the request approved and build the pin it describes, owned by the requester"""
    _ensure_pending(pin_request)
    now = now or utc_now()
    pin_request['status'] = 'approved'
    pin_request['adminNotes'] = admin_notes
    pin_request['approvedAt'] = now.isoformat()

    pin = {field: pin_request.get(field) for field in PIN_FIELDS}
    pin.update({
        'pin_id': new_id(),
        'isActive': True,
        'school': school,
        'createdBy': pin_request['requestedBy'],
        'createdAt': now.isoformat(),
        'fromRequest': pin_request['request_id'],
    })
    return pin


def reject_request(pin_request: Dict[str, Any], admin_notes: Optional[str], now: Optional[datetime] = None) -> Dict[str, Any]:
    if not admin_notes:
        raise ValidationError("Admin notes are required when rejecting a request")
    _ensure_pending(pin_request)
    pin_request['status'] = 'rejected'
    pin_request['adminNotes'] = admin_notes
    pin_request['rejectedAt'] = (now or utc_now()).isoformat()
    return pin_request
