"""Knowledge augmentation: funding opportunities matched to the student profile."""

from .lookup import LLMOpportunityLookup, NullOpportunityLookup, OpportunityLookup
from .schemas import OpportunityCandidate, OpportunityRecord, OpportunityRequirements, ProfileMatch
from .scoring import score_profile
from .service import AugmentationConfig, AugmentationService, bounded_wait

__all__ = [
    "AugmentationConfig",
    "AugmentationService",
    "bounded_wait",
    "LLMOpportunityLookup",
    "NullOpportunityLookup",
    "OpportunityLookup",
    "OpportunityCandidate",
    "OpportunityRecord",
    "OpportunityRequirements",
    "ProfileMatch",
    "score_profile",
]
