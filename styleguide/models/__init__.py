"""SQLAlchemy models and shared record types."""

from .blog_post import BlogPost, BlogPostMeta
from .brand import BrandDetails, normalize_brand_details, trait_name
from .client_state import ClientState, StateKey
from .profile import Profile, SubscriptionTier
from .research import ResearchNotes, ResearchSource
from .style_guide import PlanType, StyleGuide, StyleGuideMeta

__all__ = [
    "BlogPost",
    "BlogPostMeta",
    "BrandDetails",
    "normalize_brand_details",
    "trait_name",
    "ClientState",
    "StateKey",
    "Profile",
    "SubscriptionTier",
    "ResearchNotes",
    "ResearchSource",
    "PlanType",
    "StyleGuide",
    "StyleGuideMeta",
]
