"""
Prompt Builders

One pure function per document type rendering a validated form record into
the generation request sent to the model, plus the title rule for that type.
No I/O and no clock reads: identical form data always yields a byte-identical
prompt, which is what lets regeneration reproduce the original request.

Usage:
    from services.documents.prompt_builders import build_prompt, build_title

    prompt = build_prompt(DocumentType.LATE_RENT, {'tenantName': 'J. Smith', 'amountDue': 450})
    title = build_title(DocumentType.LATE_RENT, {'tenantName': 'J. Smith', 'amountDue': 450})
"""

from typing import Any, Callable, Dict, NamedTuple, Optional

from .forms import (
    FormData,
    LateRentNoticeData,
    LeaseRenewalData,
    SecurityDepositReturnData,
    MaintenanceResponseData,
    MoveInOutChecklistData,
    LeaseAgreementData,
    parse_form_data,
)
from .types import DocumentType


DOCUMENT_SYSTEM_PROMPT = """You are a legal document generator specializing in Texas landlord-tenant law.
Your role is to generate professional, legally-compliant documents for small landlords.

Guidelines:
- Always follow Texas Property Code requirements
- Use clear, professional language
- Include all legally required elements
- Format documents for easy printing
- Add appropriate headers and sections
- Include signature lines where needed
- Add a disclaimer that this is a template and users should consult an attorney for legal advice

Output format:
- Use markdown formatting
- Use ## for section headers
- Use **bold** for important terms
- Include clear spacing between sections"""

ISSUE_CATEGORY_LABELS = {
    'plumbing': 'Plumbing',
    'electrical': 'Electrical',
    'hvac': 'HVAC/Climate Control',
    'appliance': 'Appliance',
    'structural': 'Structural',
    'pest': 'Pest Control',
    'other': 'General Maintenance',
}

URGENCY_LABELS = {
    'emergency': 'EMERGENCY - Immediate attention required',
    'urgent': 'URGENT - Priority scheduling',
    'routine': 'Routine maintenance request',
}

CONDITION_LABELS = {
    'excellent': 'Excellent - Like new condition',
    'good': 'Good - Minor signs of use, no damage',
    'fair': 'Fair - Normal wear, minor issues',
    'poor': 'Poor - Significant wear or damage',
    'n/a': 'N/A - Not applicable',
}

OVERALL_CONDITION_LABELS = {
    'excellent': 'Excellent - Property in pristine condition',
    'good': 'Good - Property well-maintained with minor wear',
    'fair': 'Fair - Property shows normal wear and tear',
    'poor': 'Poor - Property requires attention/repairs',
}


def _usd(amount: float) -> str:
    return f"${amount:.2f}"


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(day % 10, 'th')
    return f"{day}{suffix}"


def _lines(*lines: Optional[str]) -> str:
    """Join the lines that are present, dropping the optional ones left as None."""
    return '\n'.join(line for line in lines if line is not None)


def _optional(label: str, value) -> Optional[str]:
    return f"- {label}: {value}" if value is not None else None


def _numbered(items) -> str:
    return '\n'.join(f"{i}. {item}" for i, item in enumerate(items, start=1))


# =============================================================================
# BUILDERS
# =============================================================================

def build_late_rent_prompt(data: LateRentNoticeData) -> str:
    details = _lines(
        _optional('Landlord Name', data.landlord_name),
        f"- Tenant Name: {data.tenant_name}",
        f"- Property Address: {data.full_address()}",
        _optional('Monthly Rent Amount', _usd(data.rent_amount) if data.rent_amount is not None else None),
        _optional('Late Fee', _usd(data.late_fee) if data.late_fee is not None else None),
        f"- Total Amount Owed: {_usd(data.total_owed)}",
        _optional('Days Past Due', data.days_late),
        _optional('Rent Due Date', data.rent_due_date),
        _optional('Notice Date', data.notice_date),
    )

    sections = _numbered([
        'Clear title: "THREE-DAY NOTICE TO PAY RENT OR VACATE"',
        'Property address prominently displayed',
        'Itemized breakdown of amounts owed',
        'Clear deadline (3 days from notice date)',
        'Payment instructions section',
        'Consequences of non-payment',
        'Landlord signature line with date',
        'Certificate of service section (how notice was delivered)',
    ])

    return f"""Generate a Texas-compliant Three-Day Notice to Pay Rent or Vacate.

Texas Property Code § 24.005 Requirements:
- Tenant must be given at least 3 days to pay rent or vacate
- Notice must be in writing
- Must specify the amount owed
- Must provide deadline for payment

Document Information:
{details}

Generate a formal notice document with:
{sections}

The document should be professional, clear, and suitable for legal proceedings if necessary."""


def build_lease_renewal_prompt(data: LeaseRenewalData) -> str:
    if data.current_rent is None:
        rent_line = f"- Proposed New Monthly Rent: {_usd(data.new_rent)}"
    else:
        change = data.new_rent - data.current_rent
        if change > 0:
            change_text = f"an increase of {_usd(change)}"
        elif change < 0:
            change_text = f"a decrease of {_usd(abs(change))}"
        else:
            change_text = 'no change'
        rent_line = _lines(
            f"- Current Monthly Rent: {_usd(data.current_rent)}",
            f"- Proposed New Monthly Rent: {_usd(data.new_rent)} ({change_text})",
        )

    details = _lines(
        _optional('Landlord Name', data.landlord_name),
        f"- Tenant Name: {data.tenant_name}",
        f"- Property Address: {data.full_address()}",
        _optional('Current Lease Ends', data.current_lease_end),
        f"- Proposed New Lease Period: {data.new_lease_start} to {data.new_lease_end}",
        rent_line,
        _optional('Response Deadline', data.response_deadline),
    )

    sections = _numbered([
        'Warm opening thanking tenant for their tenancy',
        'Clear statement of lease renewal offer',
        'New lease terms (dates, rent amount)',
        'Any changes from current lease highlighted',
        'Instructions for accepting the renewal',
        'Response deadline clearly stated',
        'Contact information for questions',
        'Professional closing',
        'Landlord signature line',
    ])

    return f"""Generate a professional lease renewal letter for a Texas rental property.

Document Information:
{details}

Generate a professional letter with:
{sections}

The tone should be professional yet friendly, encouraging the tenant to renew."""


def build_deposit_return_prompt(data: SecurityDepositReturnData) -> str:
    if data.deductions:
        deductions = '\n'.join(f"- {d.description}: {_usd(d.amount)}" for d in data.deductions)
    else:
        deductions = 'None'

    details = _lines(
        _optional('Landlord Name', data.landlord_name),
        f"- Tenant Name: {data.tenant_name}",
        f"- Property Address: {data.full_address()}",
        f"- Move-Out Date: {data.move_out_date}",
        f"- Original Security Deposit: {_usd(data.deposit_amount)}",
        f"- Total Deductions: {_usd(data.total_deductions)}",
        f"- Refund Amount: {_usd(data.refund_amount)}",
        _optional('Tenant Forwarding Address', data.forwarding_address),
    )

    sections = _numbered([
        'Clear title: "SECURITY DEPOSIT ACCOUNTING STATEMENT"',
        'Reference to Texas Property Code § 92.103',
        'Original deposit amount',
        'Itemized list of all deductions with descriptions',
        'Calculation showing refund amount',
        'Statement about enclosed check (if refund due)',
        'Explanation of any deductions',
        'Note distinguishing repairs from normal wear and tear',
        'Contact information for disputes',
        'Landlord signature line with date',
    ])

    return f"""Generate a Texas-compliant Security Deposit Return Letter.

Texas Property Code § 92.103 Requirements:
- Landlord has 30 days after move-out to return deposit
- Must provide itemized list of deductions
- Normal wear and tear cannot be deducted
- If not returned within 30 days, landlord may owe 3x deposit + $100

Document Information:
{details}

Itemized Deductions:
{deductions}

Generate a formal letter with:
{sections}

The document must comply with Texas 30-day requirement and be detailed enough to withstand legal scrutiny."""


def build_maintenance_prompt(data: MaintenanceResponseData) -> str:
    if data.scheduled_date:
        time_text = f" at {data.scheduled_time}" if data.scheduled_time else ''
        scheduling = f"- Scheduled Date: {data.scheduled_date}{time_text}"
    else:
        scheduling = '- Scheduling: To be determined'

    if data.contractor_name:
        phone_text = f" ({data.contractor_phone})" if data.contractor_phone else ''
        contractor = f"- Service Provider: {data.contractor_name}{phone_text}"
    else:
        contractor = '- Service Provider: Landlord/Property Management'

    if data.tenant_responsibility:
        responsibility = 'This repair has been determined to be tenant responsibility per the lease agreement.'
    else:
        responsibility = 'This repair will be covered by the landlord as part of property maintenance obligations.'

    contact = ' | '.join(
        text for text in (
            f"Phone: {data.landlord_phone}" if data.landlord_phone else None,
            f"Email: {data.landlord_email}" if data.landlord_email else None,
        ) if text
    )

    details = _lines(
        _optional('Landlord Name', data.landlord_name),
        f"- Tenant Name: {data.tenant_name}",
        f"- Property Address: {data.full_address()}",
        _optional('Original Request Date', data.request_date),
        _optional('Response Date', data.response_date),
        f"- Issue Category: {ISSUE_CATEGORY_LABELS[data.issue_category]}",
        f"- Priority: {URGENCY_LABELS[data.urgency_level]}",
        f"- Issue Description: {data.issue_description}",
        scheduling,
        contractor,
        _optional('Estimated Cost', _usd(data.estimated_cost) if data.estimated_cost is not None else None),
        f"- Access Instructions: {data.access_instructions}" if data.access_instructions else None,
    )

    sections = _numbered([
        'Clear title: "MAINTENANCE REQUEST RESPONSE"',
        'Reference to original request date and description',
        'Acknowledgment of the reported issue',
        f"Priority classification ({data.urgency_level})",
        'Scheduled repair date/time or timeline for scheduling',
        'Service provider information (if applicable)',
        'Instructions for tenant regarding access to property',
        'Clear statement of who is responsible for cost',
        'Expected timeline for completion',
        'Contact information for questions or updates',
        "Note about Texas landlord repair obligations under Property Code § 92.052",
        'Request for tenant confirmation of scheduling',
        'Professional closing with landlord signature line',
    ])

    return f"""Generate a professional maintenance response letter for a Texas rental property.

Texas Property Code § 92.052 Requirements:
- Landlord must make diligent effort to repair conditions that materially affect health or safety
- Tenant must give landlord reasonable time to repair (7 days for most repairs)
- Emergency repairs affecting health/safety require immediate attention
- Landlord must provide written notice of entry for non-emergency repairs

Document Information:
{details}

Responsibility: {responsibility}

Landlord Contact: {contact or 'See letter signature'}

Generate a professional maintenance response letter with:
{sections}

The tone should be professional, responsive, and reassuring to the tenant."""


def build_move_in_out_prompt(data: MoveInOutChecklistData) -> str:
    if data.is_move_in:
        purpose = ('This document records the condition of the property at the start of tenancy '
                   'to establish a baseline for comparison at move-out.')
        acknowledgment = 'Acknowledgment that tenant accepts property in documented condition'
        period = 'the start of'
        keys_label = 'Provided'
    else:
        purpose = ('This document records the condition of the property at the end of tenancy '
                   'to assess any damages beyond normal wear and tear.')
        acknowledgment = 'Acknowledgment that inspection was completed in tenant presence'
        period = 'the end of'
        keys_label = 'Returned'

    rooms = []
    for room in data.rooms:
        rooms.append(_lines(
            f"Room: {room.room}",
            f"  - Walls: {CONDITION_LABELS[room.walls]}",
            f"  - Floors: {CONDITION_LABELS[room.floors]}",
            f"  - Windows: {CONDITION_LABELS[room.windows]}",
            f"  - Fixtures: {CONDITION_LABELS[room.fixtures]}",
            f"  - Notes: {room.notes}" if room.notes else None,
        ))
    rooms_detail = '\n\n'.join(rooms) if rooms else 'No rooms recorded'

    meters = None
    if data.meter_readings is not None:
        meters = _lines(
            '',
            'Utility Meter Readings:',
            f"- Electric: {data.meter_readings.electric or 'Not recorded'}",
            f"- Gas: {data.meter_readings.gas or 'Not recorded'}",
            f"- Water: {data.meter_readings.water or 'Not recorded'}",
        )

    details = _lines(
        _optional('Landlord Name', data.landlord_name),
        f"- Tenant Name: {data.tenant_name}",
        f"- Property Address: {data.full_address(data.unit_number)}",
        f"- Inspection Type: {data.type_label}",
        f"- Inspection Date: {data.inspection_date}",
        _optional('Overall Condition', OVERALL_CONDITION_LABELS.get(data.overall_condition)),
        meters,
        f"Keys {keys_label}: {', '.join(data.keys_provided)}" if data.keys_provided else None,
    )

    notes = f"\n\nAdditional Notes: {data.additional_notes}" if data.additional_notes else ''

    sections = _numbered([
        f'Clear title: "{data.type_label.upper()} INSPECTION CHECKLIST"',
        'Property address and unit number prominently displayed',
        'Inspection date and type clearly stated',
        f"Purpose statement: {purpose}",
        'Detailed room-by-room condition assessment table format',
        'Condition rating legend/key',
        'Utility meter readings section',
        'Keys/access devices checklist',
        'Overall property condition summary',
        'Space for photographs reference (if attached)',
        acknowledgment,
        'Signature lines for both landlord and tenant with dates',
        "Note about tenant's right to dispute findings within 3 days",
        'Reference to Texas Property Code sections for legal compliance',
        'Statement about document being part of lease records',
    ])

    return f"""Generate a comprehensive {data.type_label} Inspection Checklist for a Texas rental property.

Texas Property Code Requirements:
- § 92.104: Landlord must provide written description of property condition at move-in
- § 92.103: Security deposit deductions must be itemized and documented
- § 92.109: Tenant has right to be present at move-out inspection
- Documentation of property condition protects both landlord and tenant

Document Information:
{details}

Room-by-Room Condition Assessment:
{rooms_detail}{notes}

Generate a formal inspection checklist document with:
{sections}

The document should be comprehensive, legally defensible, and serve as clear evidence of property condition at {period} tenancy."""


def build_lease_agreement_prompt(data: LeaseAgreementData) -> str:
    if data.utilities_included:
        utilities = f"Included utilities: {', '.join(data.utilities_included)}"
    else:
        utilities = 'No utilities included - tenant responsible for all utilities'

    if data.pets_allowed:
        pets = (f"Pets are allowed with a pet deposit of {_usd(data.pet_deposit or 0)} "
                f"and monthly pet rent of {_usd(data.pet_rent or 0)}.")
    else:
        pets = 'No pets allowed on the premises.'

    late_fee = None
    if data.late_fee_amount is not None:
        grace = data.late_fee_grace_period or 0
        late_fee = f"- Late Fee: {_usd(data.late_fee_amount)} after {grace} day grace period"

    landlord = _lines(
        f"- Name: {data.landlord_name or 'Not provided'}",
        _optional('Address', data.landlord_full_address()),
        _optional('Phone', data.landlord_phone),
        _optional('Email', data.landlord_email),
    )

    tenant = _lines(
        f"- Name: {data.tenant_name}",
        _optional('Phone', data.tenant_phone),
        _optional('Email', data.tenant_email),
    )

    terms = _lines(
        f"- Lease Start Date: {data.lease_start_date}",
        f"- Lease End Date: {data.lease_end_date}",
        f"- Monthly Rent: {_usd(data.monthly_rent)}",
        f"- Security Deposit: {_usd(data.security_deposit)}",
        f"- Rent Due Day: {_ordinal(data.rent_due_day)} of each month",
        late_fee,
        _optional('Maximum Occupants', data.max_occupants),
        _optional('Parking Spaces', data.parking_spaces),
    )

    additional = f"\n\nADDITIONAL TERMS:\n{data.additional_terms}" if data.additional_terms else ''

    sections = _numbered([
        'PARTIES - Identify landlord and tenant(s)',
        'PROPERTY DESCRIPTION - Full address and any included items/appliances',
        'LEASE TERM - Start date, end date, and renewal terms',
        'RENT - Amount, due date, payment methods, and late fees',
        'SECURITY DEPOSIT - Amount, conditions for return, Texas 30-day requirement',
        'UTILITIES - Which party is responsible for each utility',
        'OCCUPANCY - Maximum occupants, guest policies',
        'PETS - Pet policy as specified above',
        'MAINTENANCE AND REPAIRS - Landlord and tenant responsibilities per Texas law',
        'ENTRY BY LANDLORD - Notice requirements (reasonable notice under Texas law)',
        'ALTERATIONS - Tenant modifications to property',
        'PARKING - Number of spaces, vehicle requirements',
        'NOISE AND CONDUCT - Quiet enjoyment provisions',
        "INSURANCE - Renter's insurance recommendation",
        'DEFAULT AND TERMINATION - Breach conditions, notice requirements',
        'MOVE-OUT PROCEDURES - Notice requirements, inspection process',
        'DISCLOSURES - Lead-based paint (if applicable), known hazards',
        'SIGNATURES - Landlord and tenant signature lines with dates',
    ])

    return f"""Generate a comprehensive Texas Residential Lease Agreement.

Texas Property Code Requirements:
- Chapter 92: Residential Tenancies
- § 92.103: Security deposit must be returned within 30 days
- § 92.052: Landlord's duty to repair
- § 92.056: Landlord's liability for failure to repair
- Fair Housing Act compliance required

PARTIES TO THIS AGREEMENT:

LANDLORD:
{landlord}

TENANT:
{tenant}

PROPERTY:
- Address: {data.full_address(data.unit_number)}

LEASE TERMS:
{terms}

UTILITIES:
{utilities}

PET POLICY:
{pets}{additional}

Generate a complete residential lease agreement with the following sections:

{sections}

Include standard legal language and Texas-specific provisions. The document should be comprehensive and professionally formatted.

Add a disclaimer at the end: "This lease agreement is provided as a template and may not address all situations. Landlords and tenants are encouraged to consult with a licensed attorney for legal advice specific to their situation.\""""


# =============================================================================
# TITLE RULES
# =============================================================================

def _move_in_out_title(data: MoveInOutChecklistData) -> str:
    return f"{data.type_label} Checklist - {data.tenant_name}"


class PromptBuilder(NamedTuple):
    build: Callable[[Any], str]
    title: Callable[[Any], str]


BUILDERS: Dict[DocumentType, PromptBuilder] = {
    DocumentType.LATE_RENT: PromptBuilder(
        build_late_rent_prompt, lambda data: f"Late Rent Notice - {data.tenant_name}"),
    DocumentType.LEASE_RENEWAL: PromptBuilder(
        build_lease_renewal_prompt, lambda data: f"Lease Renewal - {data.tenant_name}"),
    DocumentType.DEPOSIT_RETURN: PromptBuilder(
        build_deposit_return_prompt, lambda data: f"Security Deposit Return - {data.tenant_name}"),
    DocumentType.MAINTENANCE: PromptBuilder(
        build_maintenance_prompt, lambda data: f"Maintenance Response - {data.tenant_name}"),
    DocumentType.MOVE_IN_OUT: PromptBuilder(
        build_move_in_out_prompt, _move_in_out_title),
    DocumentType.LEASE_AGREEMENT: PromptBuilder(
        build_lease_agreement_prompt, lambda data: f"Lease Agreement - {data.tenant_name}"),
}

_unregistered = set(DocumentType) - set(BUILDERS)
if _unregistered:
    raise RuntimeError(f"Document types without a prompt builder: {sorted(t.value for t in _unregistered)}")


def get_builder(document_type) -> PromptBuilder:
    """Look up the builder for a document type tag (raises InvalidDocumentType)."""
    return BUILDERS[DocumentType.parse(document_type)]


def build_prompt(document_type, form_data: Dict[str, Any]) -> str:
    """Render the generation request for a document type from raw form data."""
    document_type = DocumentType.parse(document_type)
    data = parse_form_data(document_type, form_data)
    return BUILDERS[document_type].build(data)


def build_title(document_type, form_data: Dict[str, Any]) -> str:
    """Derive the human-readable document title from raw form data."""
    document_type = DocumentType.parse(document_type)
    data = parse_form_data(document_type, form_data)
    return BUILDERS[document_type].title(data)


def render(document_type, form_data: Dict[str, Any]) -> tuple[str, str, FormData]:
    """
    Parse form data once and render both prompt and title.

    Returns:
        tuple: (prompt, title, parsed form record)
    """
    document_type = DocumentType.parse(document_type)
    data = parse_form_data(document_type, form_data)
    builder = BUILDERS[document_type]
    return builder.build(data), builder.title(data), data
