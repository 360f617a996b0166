"""
Checkout-session service: secret resolution, Stripe enrichment, message build and SNS publish.

No local retries. Failures propagate to the handler, which logs them with the
session id and event type; EventBridge redelivery decides what happens next.
"""

from typing import Any, Callable, Dict, Optional

from aws_lambda_powertools import Logger

from shared.secrets import resolve_secret
from shared.sns import SnsPublisher
from config import NotificationSettings
from messages import build_notification
from repository import CheckoutSessionRepository
from schemas import CheckoutSessionEvent

logger = Logger(service="checkout-session")

UNPAID = "unpaid"


class CheckoutNotificationService:
    def __init__(
        self,
        settings: NotificationSettings,
        repository_factory: Optional[Callable[[str], CheckoutSessionRepository]] = None,
        publisher: Optional[SnsPublisher] = None,
        secret_resolver: Optional[Callable[..., str]] = None,
    ) -> None:
        self.settings = settings
        self.repository_factory = repository_factory or CheckoutSessionRepository
        self.publisher = publisher or SnsPublisher(settings.sns_topic_arn)
        self.secret_resolver = secret_resolver or resolve_secret

    def process(self, event: CheckoutSessionEvent) -> Dict[str, Any]:
        """
        Run the pipeline for one supported checkout-session event.

        Returns:
            {"status": "skipped", ...} for unpaid sessions, otherwise
            {"status": "published", "message_id": ..., "line_items": n}.

        Raises:
            NotificationError: ConfigurationError, UpstreamError, NotFoundError or PublishError.
        """
        session = event.session
        log_ctx = {"event_type": event.detail_type, "session_id": session.id}

        api_key = self.secret_resolver(self.settings.secret_source)
        logger.debug("Stripe secret resolvido", extra={**log_ctx, "secret_source": self.settings.secret_source.mode})

        if session.payment_status == UNPAID:
            logger.info("Sessão não paga, notificação ignorada", extra=log_ctx)
            return {"status": "skipped", "reason": "unpaid", "session_id": session.id}

        line_items = self.repository_factory(api_key).list_line_items(session.id)
        logger.info("Itens da sessão obtidos", extra={**log_ctx, "line_item_count": len(line_items)})

        message = build_notification(
            event_type=event.detail_type,
            session_id=session.id,
            payment_intent_id=session.payment_intent_id,
            line_items=line_items,
            account_name=self.settings.account_name,
            is_production=self.settings.is_production,
            sandbox_account_id=self.settings.sandbox_account_id,
            language=self.settings.language,
        )

        message_id = self.publisher.publish(message.to_json())
        logger.info("Notificação publicada", extra={**log_ctx, "message_id": message_id})
        return {
            "status": "published",
            "session_id": session.id,
            "message_id": message_id,
            "line_items": len(line_items),
        }
