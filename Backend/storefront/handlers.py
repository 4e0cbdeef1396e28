"""
Built-in handlers.

Page rendering lives outside this service; these handlers return the data a
template layer needs, including localized links built through the request
context.
"""

from .core.request_context import RequestContext
from .dispatch import Handler, HandlerRegistry


handlers = HandlerRegistry()


@handlers.register("Home")
class HomeHandler(Handler):
    name = "Home"

    async def action_default(self, ctx: RequestContext) -> dict:
        return {
            "shop": ctx.shop.text_id,
            "site_name": ctx.shop.name,
            "language": ctx.language,
            "languages": {
                code: ctx.link("Home:default", {"lang": code})
                for code in ctx.router.get_supported_languages()
            },
        }


@handlers.register("ShopInfo")
class ShopInfoHandler(Handler):
    name = "ShopInfo"

    async def action_default(self, ctx: RequestContext) -> dict:
        seller = ctx.shop.seller
        return {
            "shop_id": ctx.shop.shop_id,
            "text_id": ctx.shop.text_id,
            "domain": ctx.shop.domain,
            "site_name": ctx.shop.name,
            "email": ctx.shop.email,
            "phone": ctx.shop.phone,
            "language": ctx.language,
            "seller": {
                "company_name": seller.company_name,
                "address": seller.full_address,
                "registration_number": seller.registration_number,
                "vat_number": seller.vat_number,
                "vat_payer": seller.vat_payer,
                "bank_account": seller.bank_account,
                "iban": seller.bank_account_iban,
                "has_payment_gateway": seller.payment_gateway_config is not None,
            },
            "links": {
                "self": ctx.link("this"),
                "home": ctx.link("Home:default"),
            },
        }
