"""Curated starter list of companies.

Greenhouse and Lever entries are fetched on refresh. ``custom`` entries are
link-only careers pages: they can be tracked but are never fetched.
"""

from typing import Iterable, List, Optional

from rolewatch.domain.models import Provider, TrackedCompany


def _greenhouse(slug: str, name: str, domain: str) -> TrackedCompany:
    return TrackedCompany(
        id=slug,
        name=name,
        provider=Provider.GREENHOUSE,
        board_slug=slug,
        domain=domain,
        careers_url=f"https://boards.greenhouse.io/{slug}",
    )


def _lever(slug: str, name: str, domain: str) -> TrackedCompany:
    return TrackedCompany(
        id=f"lever:{slug}",
        name=name,
        provider=Provider.LEVER,
        board_slug=slug,
        domain=domain,
        careers_url=f"https://jobs.lever.co/{slug}",
    )


def _custom(name: str, domain: str, careers_url: str) -> TrackedCompany:
    return TrackedCompany(
        id=f"custom:{domain}",
        name=name,
        provider=Provider.CUSTOM,
        domain=domain,
        careers_url=careers_url,
    )


# Early-career role queries offered as suggestions; any text is still accepted
ROLE_TEMPLATES = (
    "Software Engineer Intern",
    "SWE Intern",
    "Backend Intern",
    "Frontend Intern",
    "Full Stack Intern",
    "Data Engineer Intern",
    "Data Scientist Intern",
    "ML Engineer Intern",
    "Machine Learning Intern",
    "Embedded Intern",
    "Hardware Intern",
    "New Grad Software Engineer",
    "University Graduate Software Engineer",
    "Early Career Software Engineer",
)

COMPANY_DIRECTORY = (
    _greenhouse("stripe", "Stripe", "stripe.com"),
    _greenhouse("airbnb", "Airbnb", "airbnb.com"),
    _greenhouse("doordash", "DoorDash", "doordash.com"),
    _greenhouse("figma", "Figma", "figma.com"),
    _greenhouse("coinbase", "Coinbase", "coinbase.com"),
    _greenhouse("twitch", "Twitch", "twitch.tv"),
    _greenhouse("roblox", "Roblox", "roblox.com"),
    _greenhouse("databricks", "Databricks", "databricks.com"),
    _greenhouse("notion", "Notion", "notion.so"),
    _greenhouse("snowflake", "Snowflake", "snowflake.com"),
    _greenhouse("shopify", "Shopify", "shopify.com"),
    _greenhouse("airtable", "Airtable", "airtable.com"),
    _greenhouse("discord", "Discord", "discord.com"),
    _greenhouse("robinhood", "Robinhood", "robinhood.com"),
    _greenhouse("atlassian", "Atlassian", "atlassian.com"),
    _custom("Google", "google.com", "https://careers.google.com/"),
    _custom("Meta", "meta.com", "https://www.metacareers.com/"),
    _custom("Amazon", "amazon.com", "https://www.amazon.jobs/"),
    _custom("Apple", "apple.com", "https://www.apple.com/careers/"),
    _custom("Netflix", "netflix.com", "https://jobs.netflix.com/"),
    _custom("Microsoft", "microsoft.com", "https://careers.microsoft.com/"),
    _custom("NVIDIA", "nvidia.com", "https://nvidia.wd5.myworkdayjobs.com/NVIDIAExternalCareerSite"),
    _custom("Salesforce", "salesforce.com", "https://www.salesforce.com/company/careers/"),
    _custom("Tesla", "tesla.com", "https://www.tesla.com/careers"),
    _custom("OpenAI", "openai.com", "https://openai.com/careers/"),
    _lever("reddit", "Reddit", "reddit.com"),
    _lever("plaid", "Plaid", "plaid.com"),
)


def find_directory_company(text: Optional[str]) -> Optional[TrackedCompany]:
    """Find a directory entry by display name or board slug (case-insensitive)."""
    needle = (text or "").strip().lower()
    if not needle:
        return None

    for company in COMPANY_DIRECTORY:
        if company.name.lower() == needle or (company.board_slug or "") == needle:
            return company
    return None


def suggest_companies(text: Optional[str], exclude_ids: Iterable[str] = ()) -> List[TrackedCompany]:
    """Directory entries whose name, board slug or domain contains the text.

    Args:
        text: Partial company name typed by the user
        exclude_ids: Company ids already tracked, left out of the suggestions

    Returns:
        Matching entries in directory order (empty for blank text)
    """
    needle = (text or "").strip().lower()
    if not needle:
        return []

    excluded = set(exclude_ids)
    return [
        company
        for company in COMPANY_DIRECTORY
        if company.id not in excluded
        and (
            needle in company.name.lower()
            or needle in (company.board_slug or "")
            or needle in (company.domain or "")
        )
    ]


def suggest_role_queries(text: Optional[str]) -> List[str]:
    """Role templates containing the text, or contained in it."""
    needle = (text or "").strip().lower()
    if not needle:
        return []
    return [t for t in ROLE_TEMPLATES if needle in t.lower() or t.lower() in needle]
