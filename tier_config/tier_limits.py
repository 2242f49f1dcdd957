# tier_config/tier_limits.py
"""
Plan tier limits for document generation.
Easy to modify defaults without code changes.
"""

TIER_DEFAULTS = {
    'free': {
        'max_documents_per_month': 3,
        'allowed_document_types': ('late_rent', 'move_in_out', 'maintenance'),
    },
    'basic': {
        'max_documents_per_month': None,  # Unlimited
        'allowed_document_types': None,  # All types
    },
    'pro': {
        'max_documents_per_month': None,
        'allowed_document_types': None,
    }
}


def get_tier_defaults(tier: str) -> dict:
    """Get the default limits for a tier."""
    return TIER_DEFAULTS.get(tier, TIER_DEFAULTS['free'])


def can_generate_document(tier: str, documents_this_month: int, document_type: str) -> bool:
    """
    Check whether a plan tier allows one more document of the given type.

    Args:
        tier: Subscription tier ('free', 'basic', 'pro')
        documents_this_month: Documents already generated in the current billing cycle
        document_type: DocumentType value being requested
    """
    defaults = get_tier_defaults(tier)

    limit = defaults['max_documents_per_month']
    if limit is not None and documents_this_month >= limit:
        return False

    allowed = defaults['allowed_document_types']
    if allowed is not None and document_type not in allowed:
        return False

    return True
