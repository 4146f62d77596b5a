"""
Tier configuration resolution.

Maps the two named tiers (default, economy) to a vendor, a model and the
vendor's API key. Resolution is a pure lookup over Settings and runs on every
structured call, so a changed environment takes effect without a restart of
the components that hold the resolver.
"""

import structlog

from email_intelligence.config import Settings
from email_intelligence.llm.exceptions import ConfigurationError, UnsupportedProviderError
from email_intelligence.models.enums import ModelTier, Vendor
from email_intelligence.models.llm_models import ModelTiers, TierProfile


logger = structlog.get_logger(__name__)


# Built-in model per vendor and tier
DEFAULT_MODELS: dict[Vendor, dict[ModelTier, str]] = {
    Vendor.ANTHROPIC: {
        ModelTier.DEFAULT: "claude-sonnet-4-5-20250929",
        ModelTier.ECONOMY: "claude-haiku-4-5-20250929",
    },
    Vendor.OPENAI: {
        ModelTier.DEFAULT: "gpt-4o",
        ModelTier.ECONOMY: "gpt-4o-mini",
    },
    Vendor.GOOGLE: {
        ModelTier.DEFAULT: "gemini-2.0-flash-exp",
        ModelTier.ECONOMY: "gemini-2.0-flash-exp",
    },
}

# Settings attribute holding each vendor's key; also the env variable name
API_KEY_SETTINGS: dict[Vendor, str] = {
    Vendor.ANTHROPIC: "ANTHROPIC_API_KEY",
    Vendor.OPENAI: "OPENAI_API_KEY",
    Vendor.GOOGLE: "GOOGLE_AI_API_KEY",
}

VENDOR_DISPLAY_NAMES: dict[Vendor, str] = {
    Vendor.ANTHROPIC: "Anthropic",
    Vendor.OPENAI: "OpenAI",
    Vendor.GOOGLE: "Google AI",
}


def parse_vendor(name: str) -> Vendor:
    """
    Normalize a configured vendor name.

    Raises:
        UnsupportedProviderError: Name is not a known vendor
    """
    try:
        return Vendor(name.strip().lower())
    except ValueError:
        raise UnsupportedProviderError(
            f"Unknown LLM provider: {name}",
            details={"provider": name, "supported": Vendor.values()},
        ) from None


class TierConfigResolver:
    """
    Resolve both model tiers from settings.

    Example:
        >>> tiers = TierConfigResolver(settings).resolve()
        >>> tiers.economy.model_id
        'claude-haiku-4-5-20250929'
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def resolve(self) -> ModelTiers:
        """
        Resolve the default and economy tiers.

        Raises:
            UnsupportedProviderError: A tier names an unknown vendor
            ConfigurationError: The API key for a tier's vendor is missing
        """
        default_vendor = parse_vendor(self.settings.LLM_PROVIDER)
        economy_vendor = (
            parse_vendor(self.settings.ECONOMY_LLM_PROVIDER)
            if self.settings.ECONOMY_LLM_PROVIDER
            else default_vendor
        )

        tiers = ModelTiers(
            default=self._build_profile(
                ModelTier.DEFAULT, default_vendor, self.settings.LLM_MODEL
            ),
            economy=self._build_profile(
                ModelTier.ECONOMY, economy_vendor, self.settings.ECONOMY_LLM_MODEL
            ),
        )
        logger.debug(
            "Resolved model tiers",
            default_vendor=tiers.default.vendor,
            default_model=tiers.default.model_id,
            economy_vendor=tiers.economy.vendor,
            economy_model=tiers.economy.model_id,
        )
        return tiers

    def resolve_tier(self, tier: ModelTier) -> TierProfile:
        return self.resolve().for_tier(tier)

    def _build_profile(
        self, tier: ModelTier, vendor: Vendor, model_override: str | None
    ) -> TierProfile:
        return TierProfile(
            tier=tier,
            vendor=vendor.value,
            model_id=model_override or DEFAULT_MODELS[vendor][tier],
            api_key=self._api_key_for(vendor),
        )

    def _api_key_for(self, vendor: Vendor) -> str:
        setting_name = API_KEY_SETTINGS[vendor]
        secret = getattr(self.settings, setting_name)
        value = secret.get_secret_value().strip() if secret is not None else ""
        if not value:
            raise ConfigurationError(
                f"{setting_name} environment variable is required for "
                f"{VENDOR_DISPLAY_NAMES[vendor]} provider",
                details={"provider": vendor.value, "setting": setting_name},
            )
        return value
