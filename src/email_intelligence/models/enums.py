"""
Enumerations for the Email Intelligence data models.

The analysis enums are closed taxonomies: a vendor response carrying any
other value fails schema validation.
"""

from enum import Enum


class EmailCategory(str, Enum):
    """
    Closed set of email categories.

    Single-label: each categorization carries exactly one value.
    """

    NEWSLETTER = "NEWSLETTER"
    MARKETING = "MARKETING"
    CALENDAR = "CALENDAR"
    RECEIPT = "RECEIPT"
    NOTIFICATION = "NOTIFICATION"
    PERSONAL = "PERSONAL"
    WORK = "WORK"
    COLD_EMAIL = "COLD_EMAIL"


class ColdEmailType(str, Enum):
    """Kind of unsolicited outreach. LEGITIMATE marks a non-cold email."""

    SALES = "SALES"
    RECRUITMENT = "RECRUITMENT"
    PARTNERSHIP = "PARTNERSHIP"
    LEGITIMATE = "LEGITIMATE"
    UNKNOWN = "UNKNOWN"


class SuggestedAction(str, Enum):
    """What the mailbox owner should do with a cold-detected email."""

    ARCHIVE = "ARCHIVE"
    LABEL_COLD = "LABEL_COLD"
    ALLOW = "ALLOW"
    REVIEW = "REVIEW"


class AnalysisType(str, Enum):
    """Analyses a batch request can ask for."""

    CATEGORIZE = "categorize"
    CONTEXT = "context"
    COLD_DETECTION = "cold_detection"


class Vendor(str, Enum):
    """LLM vendors with a registered adapter."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class ModelTier(str, Enum):
    """
    Named model tiers.

    DEFAULT is the stronger model used for context extraction, ECONOMY the
    cheaper one used for categorization and cold detection.
    """

    DEFAULT = "default"
    ECONOMY = "economy"
