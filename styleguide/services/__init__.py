"""Service layer exports."""

from .blog.service import BlogService, DuplicateSlugError
from .brand.service import BrandService
from .profile.service import ProfileService
from .state.service import StateService
from .style_guide.service import StyleGuideService

__all__ = [
    "BlogService",
    "BrandService",
    "DuplicateSlugError",
    "ProfileService",
    "StateService",
    "StyleGuideService",
]
