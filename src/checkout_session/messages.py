"""
Notification message templates (en/ja) and the pure message builder.

Output follows the AWS Chatbot custom notification format.
"""

from typing import List, Optional

from schemas import LineItem, NotificationContent, NotificationMessage

DASHBOARD_BASE_URL = "https://dashboard.stripe.com"
TEST_PREFIX = "[Test] "

TEMPLATES = {
    "en": {
        "title": "New payment received",
        "intro": "A payment was made on the {account} account.",
        "session_id": "- *Checkout Session ID*: {value}",
        "payment_intent_id": "- *Payment Intent ID*: {value}",
        "order_detail": "*Order detail*",
        "amount_total": "- Amount total: {value}",
        "amount_subtotal": "- Amount subtotal: {value}",
        "description": "- Description: {value}",
        "product_name": "- Product name: {value}",
        "quantity": "- Quantity: {value}",
        "unknown_product": "Unknown product",
        "next_step": "Check the order on the <{url}|Dashboard>",
        "event_type": "EventType: {value}",
        "sandbox_id": "Sandbox ID: {value}",
        "live_account": "Live account",
    },
    "ja": {
        "title": "新しい決済が発生しました",
        "intro": "{account}アカウントにて決済が発生しました。",
        "session_id": "- *チェックアウトセッションID*: {value}",
        "payment_intent_id": "- *支払いインテントID*: {value}",
        "order_detail": "*注文詳細*",
        "amount_total": "- 合計金額: {value}",
        "amount_subtotal": "- 小計: {value}",
        "description": "- 説明: {value}",
        "product_name": "- 商品名: {value}",
        "quantity": "- 数量: {value}",
        "unknown_product": "不明な商品",
        "next_step": "<{url}|ダッシュボード>で注文を確認する",
        "event_type": "イベントタイプ: {value}",
        "sandbox_id": "サンドボックスID: {value}",
        "live_account": "本番アカウント",
    },
}


def dashboard_url(payment_intent_id: Optional[str], is_production: bool) -> str:
    """https://dashboard.stripe.com[/test]/payments/<payment_intent_id>"""
    parts = [DASHBOARD_BASE_URL, None if is_production else "test", "payments", payment_intent_id]
    return "/".join(p for p in parts if p)


def _format_line_item(item: LineItem, t: dict) -> str:
    return "\n".join([
        t["amount_total"].format(value=item.amount_total),
        t["amount_subtotal"].format(value=item.amount_subtotal),
        t["description"].format(value=item.description or ""),
        t["product_name"].format(value=item.product_name or t["unknown_product"]),
        t["quantity"].format(value=item.quantity if item.quantity is not None else ""),
    ])


def build_notification(
    *,
    event_type: str,
    session_id: str,
    payment_intent_id: Optional[str],
    line_items: List[LineItem],
    account_name: str,
    is_production: bool,
    sandbox_account_id: Optional[str] = None,
    language: str = "en",
) -> NotificationMessage:
    """
    Build the notification for one checkout session.

    Deterministic: the same inputs always give the same message. An empty
    line_items list yields an empty order-detail section.
    """
    t = TEMPLATES[language]
    url = dashboard_url(payment_intent_id, is_production)

    description = "\n".join([
        t["intro"].format(account=account_name),
        t["session_id"].format(value=session_id),
        t["payment_intent_id"].format(value=payment_intent_id or ""),
        "",
        t["order_detail"],
        "\n".join(_format_line_item(item, t) for item in line_items),
    ])

    keywords = [t["event_type"].format(value=event_type)]
    if is_production:
        keywords.append(t["live_account"])
    elif sandbox_account_id:
        keywords.append(t["sandbox_id"].format(value=sandbox_account_id))

    return NotificationMessage(
        content=NotificationContent(
            title=f"{'' if is_production else TEST_PREFIX}{t['title']}",
            description=description,
            next_steps=[t["next_step"].format(url=url)],
            keywords=keywords,
        )
    )
