from enum import Enum


class PricingAudience(str, Enum):
    """
    Pricing audience of the signed-in principal.

    The value matches the role string stored with the user profile
    ("retail" or "wholesaler"). Tier tables key their lists by
    "retail" / "wholesale", see tier_key.
    """

    RETAIL = "retail"
    WHOLESALER = "wholesaler"

    @property
    def tier_key(self) -> str:
        return "wholesale" if self == PricingAudience.WHOLESALER else "retail"

    @staticmethod
    def from_role(role: str | None) -> "PricingAudience":
        """Anything that isn't an explicit wholesaler role is priced as retail."""
        if role is not None and role.strip().lower() == PricingAudience.WHOLESALER.value:
            return PricingAudience.WHOLESALER
        return PricingAudience.RETAIL
