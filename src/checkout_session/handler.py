"""
Handler: disparado por EventBridge (Stripe partner event source).

Recebe checkout.session.completed / checkout.session.async_payment_succeeded,
enriquece com os itens do Stripe e publica a notificação na SNS do AWS Chatbot.
"""

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities.parser import parse
from aws_lambda_powertools.utilities.typing import LambdaContext

from config import load_settings
from schemas import CheckoutSessionEvent
from service import CheckoutNotificationService

logger = Logger(service="checkout-session")

SUPPORTED_EVENT_TYPES = (
    "checkout.session.completed",
    "checkout.session.async_payment_succeeded",
)


@logger.inject_lambda_context
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    event_type = event.get("detail-type")
    if event_type not in SUPPORTED_EVENT_TYPES:
        # Sucesso sem efeito: o EventBridge não deve reenviar
        logger.info("Tipo de evento não suportado, ignorado", extra={"event_type": event_type})
        return {"status": "skipped", "reason": "unsupported_event_type", "event_type": event_type}

    session_id = (((event.get("detail") or {}).get("data") or {}).get("object") or {}).get("id")
    try:
        settings = load_settings()
        payload: CheckoutSessionEvent = parse(event=event, model=CheckoutSessionEvent)
        service = CheckoutNotificationService(settings)
        return service.process(payload)
    except Exception:
        logger.exception("Erro ao processar evento de checkout", extra={"event_type": event_type, "session_id": session_id})
        raise
