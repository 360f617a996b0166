"""Schemas for the checkout-session notifier: inbound event, line items and outbound message."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PaymentIntentRef(BaseModel):
    """Expanded payment_intent object; only the id is used."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str


class CheckoutSession(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    payment_status: str
    payment_intent: Optional[Union[str, PaymentIntentRef]] = None

    @property
    def payment_intent_id(self) -> Optional[str]:
        """Aceita payment_intent como string ou objeto expandido."""
        if isinstance(self.payment_intent, PaymentIntentRef):
            return self.payment_intent.id
        return self.payment_intent


class EventData(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    object: CheckoutSession


class EventDetail(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    data: EventData


class CheckoutSessionEvent(BaseModel):
    """EventBridge envelope delivered by the Stripe partner event source."""
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    detail_type: str = Field(..., alias="detail-type")
    detail: EventDetail

    @property
    def session(self) -> CheckoutSession:
        return self.detail.data.object


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount_total: int
    amount_subtotal: int
    description: Optional[str] = None
    product_name: Optional[str] = Field(None, description="None quando o produto foi removido ou não expandiu")
    quantity: Optional[int] = None


class NotificationContent(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text_type: str = Field("client-markdown", alias="textType")
    title: str
    description: str
    next_steps: List[str] = Field(default_factory=list, alias="nextSteps")
    keywords: List[str] = Field(default_factory=list)


class NotificationMessage(BaseModel):
    """AWS Chatbot custom notification."""
    model_config = ConfigDict(frozen=True)

    version: str = "1.0"
    source: str = "custom"
    content: NotificationContent

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
