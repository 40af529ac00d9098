from dataclasses import asdict, dataclass
from decimal import Decimal


@dataclass(frozen=True)
class MembershipBenefits:
    tier: str
    discount_percent: int
    # None means delivery is always free
    free_delivery_threshold: Decimal | None
    priority: str
    early_access: bool
    custom_cakes: bool
    birthday_special: bool

    def as_dict(self) -> dict:
        return asdict(self)


MEMBERSHIP_BENEFITS: dict[str, MembershipBenefits] = {
    "basic": MembershipBenefits("basic", 10, Decimal("300"), "Standard", False, False, False),
    "premium": MembershipBenefits("premium", 20, Decimal("200"), "Priority", True, True, False),
    "royal": MembershipBenefits("royal", 30, None, "VIP", True, True, True),
}


def benefits_for(tier: str | None) -> MembershipBenefits:
    return MEMBERSHIP_BENEFITS.get(tier or "", MEMBERSHIP_BENEFITS["basic"])
