# tier_config package
from .tier_limits import TIER_DEFAULTS, get_tier_defaults, can_generate_document

__all__ = ['TIER_DEFAULTS', 'get_tier_defaults', 'can_generate_document']
