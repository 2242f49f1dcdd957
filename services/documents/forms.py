"""
Form Data Records

One frozen dataclass per document type. Records are parsed from the
camelCase JSON object captured by the document forms; the raw object is
what gets stored on the document, so parsing the same stored object always
yields an equal record.

Each field declares its form key (and any accepted aliases) plus a parser.
Fields without a default are required.
"""

from dataclasses import dataclass, field, fields, MISSING
from typing import Any, ClassVar, Dict, Optional, Tuple

from .exceptions import InvalidFormData
from .types import DocumentType

ISSUE_CATEGORIES = ('plumbing', 'electrical', 'hvac', 'appliance', 'structural', 'pest', 'other')
URGENCY_LEVELS = ('emergency', 'urgent', 'routine')
CHECKLIST_TYPES = ('move_in', 'move_out')
CONDITION_RATINGS = ('excellent', 'good', 'fair', 'poor', 'n/a')
OVERALL_CONDITIONS = ('excellent', 'good', 'fair', 'poor')


# =============================================================================
# VALUE PARSERS
# =============================================================================

def _text(value) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise TypeError("expected text")
    text = str(value).strip()
    if not text:
        raise ValueError("must not be blank")
    return text


def _money(value) -> float:
    if isinstance(value, bool):
        raise TypeError("expected a number")
    amount = float(value)
    if amount != amount or amount in (float('inf'), float('-inf')):
        raise ValueError("must be a finite number")
    return amount


def _integer(value) -> int:
    if isinstance(value, bool):
        raise TypeError("expected an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError("must be a whole number")
    return int(value)


def _boolean(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    raise TypeError("expected true or false")


def _choice(options):
    def parse(value) -> str:
        if value not in options:
            raise ValueError(f"must be one of {', '.join(options)}")
        return value
    return parse


def _text_list(value) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise TypeError("expected a list")
    return tuple(_text(item) for item in value if item not in (None, ''))


def _record_list(record_cls):
    def parse(value) -> tuple:
        if not isinstance(value, (list, tuple)):
            raise TypeError("expected a list")
        return tuple(_parse_record(record_cls, item) for item in value)
    return parse


def _record(record_cls):
    def parse(value):
        return _parse_record(record_cls, value)
    return parse


def form_field(key: str, parse=_text, aliases: Tuple[str, ...] = (), **kwargs):
    """Declare a dataclass field bound to a form key."""
    return field(metadata={'key': key, 'parse': parse, 'aliases': aliases}, **kwargs)


def _lookup(data: Dict[str, Any], key: str, aliases: Tuple[str, ...]):
    for candidate in (key,) + tuple(aliases):
        value = data.get(candidate)
        if value is not None and value != '':
            return value
    return None


def _parse_record(record_cls, data, document_type: str = None):
    if not isinstance(data, dict):
        raise InvalidFormData(f"{record_cls.__name__} must be an object", document_type)

    values = {}
    for f in fields(record_cls):
        if 'key' not in f.metadata:
            continue
        key = f.metadata['key']
        raw = _lookup(data, key, f.metadata['aliases'])
        if raw is None:
            if f.default is MISSING and f.default_factory is MISSING:
                raise InvalidFormData(f"Missing required field: {key}", document_type, key)
            continue
        try:
            values[f.name] = f.metadata['parse'](raw)
        except (InvalidFormData, TypeError, ValueError) as e:
            raise InvalidFormData(f"Invalid value for {key}: {e}", document_type, key) from None
    return record_cls(**values)


# =============================================================================
# NESTED RECORDS
# =============================================================================

@dataclass(frozen=True)
class Deduction:
    description: str = form_field('description')
    amount: float = form_field('amount', _money)


@dataclass(frozen=True)
class RoomCondition:
    room: str = form_field('room')
    walls: str = form_field('walls', _choice(CONDITION_RATINGS))
    floors: str = form_field('floors', _choice(CONDITION_RATINGS))
    windows: str = form_field('windows', _choice(CONDITION_RATINGS))
    fixtures: str = form_field('fixtures', _choice(CONDITION_RATINGS))
    notes: Optional[str] = form_field('notes', default=None)


@dataclass(frozen=True)
class MeterReadings:
    electric: Optional[str] = form_field('electric', default=None)
    gas: Optional[str] = form_field('gas', default=None)
    water: Optional[str] = form_field('water', default=None)


# =============================================================================
# FORM DATA VARIANTS
# =============================================================================

@dataclass(frozen=True, kw_only=True)
class FormData:
    """Fields shared by every document form."""
    document_type: ClassVar[DocumentType]

    tenant_name: str = form_field('tenantName')
    landlord_name: Optional[str] = form_field('landlordName', default=None)
    property_address: Optional[str] = form_field('propertyAddress', default=None)
    city: Optional[str] = form_field('city', default=None)
    state: Optional[str] = form_field('state', default=None)
    zip_code: Optional[str] = form_field('zip', default=None)
    property_id: Optional[str] = form_field('propertyId', default=None)
    tenant_id: Optional[str] = form_field('tenantId', default=None)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Parse and validate a stored or submitted form object."""
        return _parse_record(cls, data, cls.document_type.value)

    def full_address(self, unit_number: Optional[str] = None) -> str:
        street = self.property_address or ''
        if street and unit_number:
            street = f"{street}, Unit {unit_number}"
        state_zip = ' '.join(part for part in (self.state, self.zip_code) if part)
        parts = [part for part in (street, self.city, state_zip) if part]
        return ', '.join(parts) if parts else 'Not provided'


@dataclass(frozen=True, kw_only=True)
class LateRentNoticeData(FormData):
    document_type: ClassVar[DocumentType] = DocumentType.LATE_RENT

    total_owed: float = form_field('totalOwed', _money, aliases=('amountDue',))
    rent_amount: Optional[float] = form_field('rentAmount', _money, default=None)
    late_fee: Optional[float] = form_field('lateFee', _money, default=None)
    days_late: Optional[int] = form_field('daysLate', _integer, default=None)
    rent_due_date: Optional[str] = form_field('rentDueDate', default=None)
    notice_date: Optional[str] = form_field('noticeDate', default=None)


@dataclass(frozen=True, kw_only=True)
class LeaseRenewalData(FormData):
    document_type: ClassVar[DocumentType] = DocumentType.LEASE_RENEWAL

    new_lease_start: str = form_field('newLeaseStart')
    new_lease_end: str = form_field('newLeaseEnd')
    new_rent: float = form_field('newRent', _money)
    current_lease_end: Optional[str] = form_field('currentLeaseEnd', default=None)
    current_rent: Optional[float] = form_field('currentRent', _money, default=None)
    response_deadline: Optional[str] = form_field('responseDeadline', default=None)


@dataclass(frozen=True, kw_only=True)
class SecurityDepositReturnData(FormData):
    document_type: ClassVar[DocumentType] = DocumentType.DEPOSIT_RETURN

    move_out_date: str = form_field('moveOutDate')
    deposit_amount: float = form_field('depositAmount', _money)
    deductions: Tuple[Deduction, ...] = form_field('deductions', _record_list(Deduction), default=())
    forwarding_address: Optional[str] = form_field('forwardingAddress', default=None)

    @property
    def total_deductions(self) -> float:
        return sum(d.amount for d in self.deductions)

    @property
    def refund_amount(self) -> float:
        return self.deposit_amount - self.total_deductions


@dataclass(frozen=True, kw_only=True)
class MaintenanceResponseData(FormData):
    document_type: ClassVar[DocumentType] = DocumentType.MAINTENANCE

    issue_description: str = form_field('issueDescription')
    issue_category: str = form_field('issueCategory', _choice(ISSUE_CATEGORIES))
    urgency_level: str = form_field('urgencyLevel', _choice(URGENCY_LEVELS))
    request_date: Optional[str] = form_field('requestDate', default=None)
    response_date: Optional[str] = form_field('responseDate', default=None)
    scheduled_date: Optional[str] = form_field('scheduledDate', default=None)
    scheduled_time: Optional[str] = form_field('scheduledTime', default=None)
    contractor_name: Optional[str] = form_field('contractorName', default=None)
    contractor_phone: Optional[str] = form_field('contractorPhone', default=None)
    estimated_cost: Optional[float] = form_field('estimatedCost', _money, default=None)
    tenant_responsibility: bool = form_field('tenantResponsibility', _boolean, default=False)
    access_instructions: Optional[str] = form_field('accessInstructions', default=None)
    landlord_phone: Optional[str] = form_field('landlordPhone', default=None)
    landlord_email: Optional[str] = form_field('landlordEmail', default=None)


@dataclass(frozen=True, kw_only=True)
class MoveInOutChecklistData(FormData):
    document_type: ClassVar[DocumentType] = DocumentType.MOVE_IN_OUT

    checklist_type: str = form_field('checklistType', _choice(CHECKLIST_TYPES))
    inspection_date: str = form_field('inspectionDate')
    unit_number: Optional[str] = form_field('unitNumber', default=None)
    rooms: Tuple[RoomCondition, ...] = form_field('rooms', _record_list(RoomCondition), default=())
    overall_condition: Optional[str] = form_field('overallCondition', _choice(OVERALL_CONDITIONS), default=None)
    meter_readings: Optional[MeterReadings] = form_field('meterReadings', _record(MeterReadings), default=None)
    keys_provided: Tuple[str, ...] = form_field('keysProvided', _text_list, default=())
    additional_notes: Optional[str] = form_field('additionalNotes', default=None)

    @property
    def is_move_in(self) -> bool:
        return self.checklist_type == 'move_in'

    @property
    def type_label(self) -> str:
        return 'Move-In' if self.is_move_in else 'Move-Out'


@dataclass(frozen=True, kw_only=True)
class LeaseAgreementData(FormData):
    document_type: ClassVar[DocumentType] = DocumentType.LEASE_AGREEMENT

    lease_start_date: str = form_field('leaseStartDate')
    lease_end_date: str = form_field('leaseEndDate')
    monthly_rent: float = form_field('monthlyRent', _money)
    security_deposit: float = form_field('securityDeposit', _money)
    rent_due_day: int = form_field('rentDueDay', _integer)
    landlord_address: Optional[str] = form_field('landlordAddress', default=None)
    landlord_city: Optional[str] = form_field('landlordCity', default=None)
    landlord_state: Optional[str] = form_field('landlordState', default=None)
    landlord_zip: Optional[str] = form_field('landlordZip', default=None)
    landlord_phone: Optional[str] = form_field('landlordPhone', default=None)
    landlord_email: Optional[str] = form_field('landlordEmail', default=None)
    tenant_phone: Optional[str] = form_field('tenantPhone', default=None)
    tenant_email: Optional[str] = form_field('tenantEmail', default=None)
    unit_number: Optional[str] = form_field('unitNumber', default=None)
    late_fee_amount: Optional[float] = form_field('lateFeeAmount', _money, default=None)
    late_fee_grace_period: Optional[int] = form_field('lateFeeGracePeriod', _integer, default=None)
    pets_allowed: bool = form_field('petsAllowed', _boolean, default=False)
    pet_deposit: Optional[float] = form_field('petDeposit', _money, default=None)
    pet_rent: Optional[float] = form_field('petRent', _money, default=None)
    max_occupants: Optional[int] = form_field('maxOccupants', _integer, default=None)
    utilities_included: Tuple[str, ...] = form_field('utilitiesIncluded', _text_list, default=())
    parking_spaces: Optional[int] = form_field('parkingSpaces', _integer, default=None)
    additional_terms: Optional[str] = form_field('additionalTerms', default=None)

    def landlord_full_address(self) -> Optional[str]:
        state_zip = ' '.join(part for part in (self.landlord_state, self.landlord_zip) if part)
        parts = [part for part in (self.landlord_address, self.landlord_city, state_zip) if part]
        return ', '.join(parts) if parts else None


FORM_DATA_TYPES = {
    form_cls.document_type: form_cls
    for form_cls in (
        LateRentNoticeData,
        LeaseRenewalData,
        SecurityDepositReturnData,
        MaintenanceResponseData,
        MoveInOutChecklistData,
        LeaseAgreementData,
    )
}


def parse_form_data(document_type: DocumentType, data: Dict[str, Any]) -> FormData:
    """Parse raw form data into the record for its document type."""
    return FORM_DATA_TYPES[document_type].from_dict(data)
