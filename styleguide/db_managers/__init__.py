"""Managers: take a DB session and provide access to models."""

from .blog_manager import BlogManager
from .profile_manager import ProfileManager
from .state_manager import StateManager
from .style_guide_manager import StyleGuideManager

__all__ = ["BlogManager", "ProfileManager", "StateManager", "StyleGuideManager"]
