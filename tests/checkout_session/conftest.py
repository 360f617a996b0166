import sys
from pathlib import Path

import pytest

# Lambda imports use sibling modules (schemas, service, ...); need checkout_session dir on path.
_root = Path(__file__).resolve().parents[2]
checkout_path = str(_root / "src" / "checkout_session")
src_path = str(_root / "src")
for path in [checkout_path, src_path]:
    if path in sys.path:
        sys.path.remove(path)
    sys.path.insert(0, path)


TOPIC_ARN = "arn:aws:sns:ap-northeast-1:123456789012:stripe-notifications"


@pytest.fixture
def base_env() -> dict:
    return {
        "APP_ENV": "development",
        "STRIPE_SECRET_SOURCE": "env",
        "STRIPE_SECRET_KEY": "sk_test_123",
        "SNS_TOPIC_ARN": TOPIC_ARN,
        "STRIPE_ACCOUNT_NAME": "Acme",
        "STRIPE_SANDBOX_ACCOUNT_ID": "acct_sandbox_1",
    }


def _make_event(
    detail_type: str = "checkout.session.completed",
    session_id: str = "cs_test_1",
    payment_status: str = "paid",
    payment_intent="pi_123",
) -> dict:
    """Evento EventBridge simulado (Stripe partner event source)."""
    return {
        "version": "0",
        "id": "evt-bridge-1",
        "detail-type": detail_type,
        "source": "aws.partner/stripe.com/ed_test_1",
        "detail": {
            "id": "evt_1",
            "type": detail_type,
            "data": {
                "object": {
                    "id": session_id,
                    "object": "checkout.session",
                    "payment_status": payment_status,
                    "payment_intent": payment_intent,
                }
            },
        },
    }


@pytest.fixture
def make_event():
    return _make_event

