"""
Tenant context for the storefront.

A TenantContext identifies the shop serving the current request. It is built
once by the ShopResolver from the shop row and never mutated afterwards.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..models import Seller, Shop


logger = logging.getLogger(__name__)


class ShopResolutionSource(str, Enum):
    """How the tenant context was determined."""

    HOST = "host"        # From the request Host header via the domain mapping
    TEXT_ID = "text_id"  # Direct lookup by text identifier (admin, tooling)
    ID = "id"            # Direct lookup by numeric id


class ShopNotFound(Exception):
    """Raised when a request cannot be bound to a shop."""

    def __init__(self, message: str, domain: Optional[str] = None, text_id: Optional[str] = None):
        self.message = message
        self.domain = domain
        self.text_id = text_id
        super().__init__(message)

    @classmethod
    def for_domain(cls, domain: str) -> "ShopNotFound":
        return cls(
            f"Shop not found for domain: {domain}. "
            f"Please check your domain_mapping configuration.",
            domain=domain,
        )

    @classmethod
    def for_text_id(cls, text_id: str) -> "ShopNotFound":
        return cls(f"Shop with text_id '{text_id}' not found in database.", text_id=text_id)

    @classmethod
    def for_id(cls, shop_id: int) -> "ShopNotFound":
        return cls(f"Shop with id {shop_id} not found in database.")


@dataclass(frozen=True)
class SellerProfile:
    """
    Legal and banking details of the company operating a shop.

    Attributes mirror the sellers table; the payment gateway config is kept
    as the raw JSON string and parsed on demand.
    """

    seller_id: int
    name: str
    email: str
    phone_number: str
    notification_email: str
    company_name: str
    street: str
    city: str
    postal_code: str
    registration_number: str
    vat_number: str = ""
    vat_payer: bool = False
    registry_city: str = ""
    registry_number: str = ""
    bank_account: Optional[str] = None
    bank_account_iban: Optional[str] = None
    bank_account_bic: Optional[str] = None
    gopay_config_raw: Optional[str] = None
    external_sale: bool = False
    supplier_text: Optional[str] = None

    @property
    def full_address(self) -> str:
        return f"{self.street}, {self.postal_code} {self.city}"

    @property
    def payment_gateway_config(self) -> Optional[dict[str, Any]]:
        """Decoded payment gateway config, or None when absent or not a JSON object."""
        if not self.gopay_config_raw:
            return None
        try:
            decoded = json.loads(self.gopay_config_raw)
        except ValueError:
            logger.warning(f"Seller {self.seller_id} has invalid payment gateway config JSON")
            return None
        return decoded if isinstance(decoded, dict) else None

    @classmethod
    def from_row(cls, seller: Seller) -> "SellerProfile":
        return cls(
            seller_id=seller.id,
            name=seller.name,
            email=seller.email,
            phone_number=seller.phone_number,
            notification_email=seller.notification_email,
            company_name=seller.company_name,
            street=seller.street,
            city=seller.city,
            postal_code=seller.postal_code,
            registration_number=seller.registration_number,
            vat_number=seller.vat_number or "",
            vat_payer=bool(seller.vat_payer),
            registry_city=seller.registry_city or "",
            registry_number=seller.registry_number or "",
            bank_account=seller.bank_account,
            bank_account_iban=seller.bank_account_iban,
            bank_account_bic=seller.bank_account_bic,
            gopay_config_raw=seller.gopay_config,
            external_sale=bool(seller.external_sale),
            supplier_text=seller.supplier,
        )


@dataclass(frozen=True)
class TenantContext:
    """
    Immutable context representing the shop serving a request.

    Attributes:
        shop_id: The database ID of the shop (shops.id)
        text_id: Unique text identifier (e.g., "florea"), also names the route table
        domain: The normalized domain the shop was resolved from
        name: Website name shown to customers
        email: Shop contact email
        phone: Shop contact phone, may be None
        seller: Company operating the shop
        source: How this context was determined (for audit logging)
    """

    shop_id: int
    text_id: str
    domain: str
    name: str
    email: str
    seller: SellerProfile
    phone: Optional[str] = None
    source: ShopResolutionSource = ShopResolutionSource.HOST

    def __post_init__(self):
        if self.shop_id <= 0:
            raise ValueError(f"shop_id must be positive, got {self.shop_id}")

    @classmethod
    def from_row(
        cls,
        shop: Shop,
        domain: Optional[str] = None,
        source: ShopResolutionSource = ShopResolutionSource.HOST,
    ) -> "TenantContext":
        return cls(
            shop_id=shop.id,
            text_id=shop.text_id,
            domain=domain or shop.domain,
            name=shop.website_name,
            email=shop.email,
            phone=shop.phone_number,
            seller=SellerProfile.from_row(shop.seller),
            source=source,
        )
