"""Config for external services: credentials, endpoints and timeouts."""

import os

FIRECRAWL_API_KEY: str = os.environ.get("FIRECRAWL_API_KEY", "")
FIRECRAWL_SEARCH_URL: str = os.environ.get(
    "FIRECRAWL_SEARCH_URL", "https://api.firecrawl.dev/v2/search"
)
FIRECRAWL_TIMEOUT_SECONDS: float = float(os.environ.get("FIRECRAWL_TIMEOUT_SECONDS", "30"))

ADMIN_BLOG_PASSWORD: str = os.environ.get("ADMIN_BLOG_PASSWORD", "")
ADMIN_SESSION_DAYS: int = int(os.environ.get("ADMIN_SESSION_DAYS", "7"))
FLASK_SECRET_KEY: str = os.environ.get("FLASK_SECRET_KEY", "dev-secret-change-me")

WEBSITE_FETCH_TIMEOUT_SECONDS: float = float(os.environ.get("WEBSITE_FETCH_TIMEOUT_SECONDS", "10"))
WEBSITE_SUBPAGE_TIMEOUT_SECONDS: float = float(os.environ.get("WEBSITE_SUBPAGE_TIMEOUT_SECONDS", "3"))
WEBSITE_USER_AGENT: str = os.environ.get(
    "WEBSITE_USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

SUPPORT_EMAIL: str = os.environ.get("SUPPORT_EMAIL", "support@aistyleguide.com")
