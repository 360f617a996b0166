import json
import pytest
from unittest.mock import MagicMock, patch

import stripe
from pydantic import ValidationError

from handler import lambda_handler
from shared.errors import ConfigurationError, PublishError, UpstreamError


@pytest.fixture
def env(base_env: dict):
    with patch.dict("os.environ", base_env, clear=True):
        yield base_env


@pytest.fixture
def mock_service():
    """Mock da classe CheckoutNotificationService para isolar o handler."""
    with patch("handler.CheckoutNotificationService") as mock_service_class:
        mock_instance = MagicMock()
        mock_instance.process.return_value = {"status": "published", "message_id": "msg-1"}
        mock_service_class.return_value = mock_instance
        yield mock_instance


class TestCheckoutLambdaHandler:
    @pytest.mark.parametrize(
        "detail_type",
        ["checkout.session.expired", "payment_intent.succeeded", "invoice.paid", None],
    )
    def test_unsupported_event_type_is_skipped_without_external_calls(
        self, detail_type, make_event, lambda_context
    ) -> None:
        event = make_event(detail_type=detail_type)

        with patch("handler.load_settings") as mock_load, patch("handler.CheckoutNotificationService") as mock_cls:
            result = lambda_handler(event, lambda_context)

        assert result["status"] == "skipped"
        assert result["reason"] == "unsupported_event_type"
        mock_load.assert_not_called()
        mock_cls.assert_not_called()

    def test_supported_event_is_delegated_to_service(self, env, mock_service, make_event, lambda_context) -> None:
        result = lambda_handler(make_event(), lambda_context)

        assert result == {"status": "published", "message_id": "msg-1"}
        payload = mock_service.process.call_args[0][0]
        assert payload.detail_type == "checkout.session.completed"
        assert payload.session.id == "cs_test_1"

    def test_missing_configuration_fails_listing_every_key(self, mock_service, make_event, lambda_context) -> None:
        with patch.dict("os.environ", {"APP_ENV": "production"}, clear=True):
            with pytest.raises(ConfigurationError) as exc_info:
                lambda_handler(make_event(), lambda_context)

        for key in ("STRIPE_SECRET_SOURCE", "SNS_TOPIC_ARN", "STRIPE_ACCOUNT_NAME"):
            assert key in str(exc_info.value)
        mock_service.process.assert_not_called()

    def test_malformed_session_raises(self, env, mock_service, lambda_context) -> None:
        event = {"detail-type": "checkout.session.completed", "detail": {"data": {"object": {"id": "cs_1"}}}}

        with pytest.raises(ValidationError):
            lambda_handler(event, lambda_context)
        mock_service.process.assert_not_called()

    @pytest.mark.parametrize("error", [UpstreamError("stripe down"), PublishError("sns down")])
    def test_service_errors_are_reraised(self, env, mock_service, make_event, lambda_context, error) -> None:
        mock_service.process.side_effect = error

        with pytest.raises(type(error)):
            lambda_handler(make_event(), lambda_context)

    def test_service_error_is_logged_once_with_context(self, env, mock_service, make_event, lambda_context) -> None:
        """
        Cenário: service falha ao publicar.
        Esperado: um único log de erro, no handler, com tipo do evento e id da sessão.
        """
        mock_service.process.side_effect = PublishError("sns down")

        with patch("handler.logger") as mock_handler_logger, patch("service.logger") as mock_service_logger:
            with pytest.raises(PublishError):
                lambda_handler(make_event(), lambda_context)

        mock_handler_logger.exception.assert_called_once()
        extra = mock_handler_logger.exception.call_args.kwargs["extra"]
        assert extra == {"event_type": "checkout.session.completed", "session_id": "cs_test_1"}
        mock_service_logger.error.assert_not_called()


class TestCheckoutLambdaHandlerEndToEnd:
    """Handler real com Stripe e SNS substituídos por mocks."""

    @pytest.fixture
    def mock_sns_client(self):
        client = MagicMock()
        client.publish.return_value = {"MessageId": "msg-e2e"}
        with patch("shared.sns.get_sns_client", return_value=client):
            yield client

    @pytest.fixture
    def mock_list_line_items(self):
        page = MagicMock()
        item = stripe.LineItem.construct_from(
            {
                "id": "li_1",
                "object": "item",
                "amount_total": 5000,
                "amount_subtotal": 5000,
                "description": "Plan",
                "quantity": 1,
                "price": {
                    "id": "price_1",
                    "object": "price",
                    "product": {"id": "prod_1", "object": "product", "deleted": True},
                },
            },
            "sk_test_123",
        )
        page.auto_paging_iter.return_value = iter([item])
        with patch("repository.stripe.checkout.Session.list_line_items", return_value=page) as mock_list:
            yield mock_list

    def test_publishes_to_topic(self, env, mock_sns_client, mock_list_line_items, make_event, lambda_context) -> None:
        result = lambda_handler(make_event(payment_intent={"id": "pi_e2e"}), lambda_context)

        assert result["status"] == "published"
        assert result["message_id"] == "msg-e2e"
        mock_list_line_items.assert_called_once()
        assert mock_list_line_items.call_args.kwargs["api_key"] == "sk_test_123"

        kwargs = mock_sns_client.publish.call_args.kwargs
        assert kwargs["TopicArn"] == env["SNS_TOPIC_ARN"]
        body = json.loads(kwargs["Message"])
        assert body["content"]["title"].startswith("[Test] ")
        assert "- Product name: Unknown product" in body["content"]["description"]
        assert "https://dashboard.stripe.com/test/payments/pi_e2e" in body["content"]["nextSteps"][0]

    def test_unpaid_session_skips_stripe_and_sns(
        self, env, mock_sns_client, mock_list_line_items, make_event, lambda_context
    ) -> None:
        result = lambda_handler(make_event(payment_status="unpaid"), lambda_context)

        assert result["status"] == "skipped"
        mock_list_line_items.assert_not_called()
        mock_sns_client.publish.assert_not_called()
