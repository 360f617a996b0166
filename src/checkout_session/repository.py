"""Repository: Stripe API access for checkout-session line items."""

from typing import Any, List, Optional

import stripe
from aws_lambda_powertools import Logger

from shared.errors import UpstreamError
from schemas import LineItem

logger = Logger(service="checkout-session")

PAGE_SIZE = 100


class CheckoutSessionRepository:
    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def list_line_items(self, session_id: str) -> List[LineItem]:
        """
        Lista os itens da sessão com o produto expandido, na ordem da API.

        Raises:
            UpstreamError: Any Stripe SDK error, carrying the provider message.
        """
        try:
            page = stripe.checkout.Session.list_line_items(
                session_id,
                api_key=self.api_key,
                limit=PAGE_SIZE,
                expand=["data.price.product"],
            )
            return [self._to_line_item(item) for item in page.auto_paging_iter()]
        except stripe.StripeError as e:
            message = getattr(e, "user_message", None) or str(e)
            raise UpstreamError(f"Stripe: falha ao listar itens da sessão {session_id}: {message}") from e

    @staticmethod
    def _to_line_item(item: Any) -> LineItem:
        # StripeObject não é dict a partir do stripe 15: só acesso por atributo.
        price = getattr(item, "price", None)
        return LineItem(
            amount_total=getattr(item, "amount_total", None) or 0,
            amount_subtotal=getattr(item, "amount_subtotal", None) or 0,
            description=getattr(item, "description", None),
            product_name=_product_name(getattr(price, "product", None)),
            quantity=getattr(item, "quantity", None),
        )


def _product_name(product: Any) -> Optional[str]:
    # String = referência não expandida; deleted = produto removido no Stripe.
    if product is None or isinstance(product, str):
        return None
    if getattr(product, "deleted", False):
        return None
    return getattr(product, "name", None) or None
