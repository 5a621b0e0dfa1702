"""
Data models for the billboard pricing engine.

Uses dataclasses for structured, type-safe data representation.
Calculation and quote results are frozen value objects.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional


class DurationKey(str, Enum):
    """Price points carried by a price row."""
    ONE_DAY = "oneDay"
    ONE_MONTH = "oneMonth"
    TWO_MONTHS = "twoMonths"
    THREE_MONTHS = "threeMonths"
    SIX_MONTHS = "sixMonths"
    ONE_YEAR = "oneYear"


class CustomerType(str, Enum):
    """Customer categories with their own price lists."""
    STANDARD = "standard"
    MARKETER = "marketer"
    CORPORATE = "corporate"
    MUNICIPAL = "municipal"

    @classmethod
    def parse(cls, value: str) -> 'CustomerType':
        """Parse an English value or a legacy Arabic label."""
        value = str(value).strip()
        if value in LEGACY_CUSTOMER_LABELS:
            return LEGACY_CUSTOMER_LABELS[value]
        return cls(value)


LEGACY_CUSTOMER_LABELS = {
    "عادي": CustomerType.STANDARD,
    "مسوق": CustomerType.MARKETER,
    "شركات": CustomerType.CORPORATE,
    "المدينة": CustomerType.MUNICIPAL,
}


class PricingMode(str, Enum):
    """How a quote is priced."""
    DAILY = "daily"
    PACKAGE = "package"


@dataclass
class PriceRow:
    """A single price-tier entry keyed by (size, level, customer_type)."""
    size: str
    level: str
    customer_type: CustomerType
    prices: dict[DurationKey, int] = field(default_factory=dict)  # absent = untracked
    id: Optional[int] = None

    @property
    def key(self) -> tuple[str, str, CustomerType]:
        return (self.size, self.level, self.customer_type)

    def price_for(self, duration_key: DurationKey) -> Optional[int]:
        """Get the configured price for a duration, or None if untracked."""
        return self.prices.get(DurationKey(duration_key))

    def to_dict(self) -> dict:
        """Convert to a flat dict using the exchange column names."""
        data = {
            'id': self.id,
            'size': self.size,
            'level': self.level,
            'customerType': self.customer_type.value,
        }
        for key in DurationKey:
            data[key.value] = self.prices.get(key)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'PriceRow':
        """Create PriceRow from a flat dict (inverse of to_dict)."""
        prices = {}
        for key in DurationKey:
            value = data.get(key.value)
            if value is not None:
                prices[key] = int(value)
        return cls(
            size=str(data['size']),
            level=str(data['level']),
            customer_type=CustomerType.parse(data['customerType']),
            prices=prices,
            id=int(data['id']) if data.get('id') is not None else None,
        )


@dataclass(frozen=True)
class PackageOption:
    """A fixed-duration package referencing one of the row's price points."""
    key: DurationKey
    label: str
    duration: int  # days


PACKAGE_OPTIONS: tuple[PackageOption, ...] = (
    PackageOption(DurationKey.ONE_MONTH, "شهر واحد", 30),
    PackageOption(DurationKey.TWO_MONTHS, "2 أشهر", 60),
    PackageOption(DurationKey.THREE_MONTHS, "3 أشهر", 90),
    PackageOption(DurationKey.SIX_MONTHS, "6 أشهر", 180),
    PackageOption(DurationKey.ONE_YEAR, "سنة كاملة", 365),
)


def get_package(key: str) -> PackageOption:
    """Look up a package option by its duration key."""
    for option in PACKAGE_OPTIONS:
        if option.key.value == str(key):
            return option
    raise ValueError(f"Unknown package '{key}'")


@dataclass(frozen=True)
class BillboardAsset:
    """A priceable billboard, supplied by the caller."""
    id: str
    name: str
    size: str
    municipality: str
    level: str
    status: str = ""
    location: str = ""
    image_url: Optional[str] = None


@dataclass(frozen=True)
class PriceCalculation:
    """Computed price breakdown for one billboard."""
    billboard: BillboardAsset
    base_price: int
    daily_price: int
    total_days: int
    subtotal: int
    installation_price: int
    total: int

    def to_dict(self) -> dict:
        return {
            "billboard": {
                "id": self.billboard.id,
                "name": self.billboard.name,
                "size": self.billboard.size,
                "municipality": self.billboard.municipality,
                "level": self.billboard.level,
                "status": self.billboard.status,
                "location": self.billboard.location,
                "imageUrl": self.billboard.image_url,
            },
            "basePrice": self.base_price,
            "dailyPrice": self.daily_price,
            "totalDays": self.total_days,
            "subtotal": self.subtotal,
            "installationPrice": self.installation_price,
            "total": self.total,
        }


@dataclass(frozen=True)
class CustomerInfo:
    """Contact block printed on a quote."""
    name: str
    email: str
    phone: str
    customer_type: CustomerType = CustomerType.STANDARD
    company: Optional[str] = None

    def validate(self) -> list[str]:
        """Return a list of missing required fields."""
        errors = []
        if not self.name.strip():
            errors.append("Customer name is required")
        if not self.email.strip():
            errors.append("Customer email is required")
        if not self.phone.strip():
            errors.append("Customer phone is required")
        return errors


@dataclass(frozen=True)
class CampaignStats:
    """Summary counts for a batch of calculations."""
    total_billboards: int
    total_days: int
    average_daily_price: int
    by_size: dict[str, int] = field(default_factory=dict)
    by_municipality: dict[str, int] = field(default_factory=dict)
    by_level: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Quote:
    """Complete customer-facing quote."""
    id: str
    customer: CustomerInfo
    pricing_mode: PricingMode
    start_date: date
    end_date: Optional[date]
    package_label: Optional[str]
    billboards: tuple[PriceCalculation, ...]
    subtotal: int
    total_installation: int
    tax: int
    grand_total: int
    currency: str
    created_at: datetime
    valid_until: datetime

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dict for renderers."""
        return {
            "id": self.id,
            "customerInfo": {
                "name": self.customer.name,
                "email": self.customer.email,
                "phone": self.customer.phone,
                "company": self.customer.company,
                "customerType": self.customer.customer_type.value,
            },
            "pricingMode": self.pricing_mode.value,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "packageDuration": self.package_label,
            "billboards": [calc.to_dict() for calc in self.billboards],
            "subtotal": self.subtotal,
            "totalInstallation": self.total_installation,
            "tax": self.tax,
            "grandTotal": self.grand_total,
            "currency": self.currency,
            "createdAt": self.created_at.isoformat(),
            "validUntil": self.valid_until.isoformat(),
        }
