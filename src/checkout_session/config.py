"""Settings for the checkout-session notifier, read once per invocation from the environment."""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from shared.errors import ConfigurationError
from shared.secrets import REQUIRED_KEYS_BY_SOURCE, SecretSource, secret_source_from_env

PRODUCTION = "production"
DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "ja")
REQUIRED_KEYS = ("STRIPE_SECRET_SOURCE", "SNS_TOPIC_ARN", "STRIPE_ACCOUNT_NAME")


class NotificationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    app_env: str = "development"
    secret_source: SecretSource
    sns_topic_arn: str
    account_name: str
    sandbox_account_id: Optional[str] = None
    language: Literal["en", "ja"] = DEFAULT_LANGUAGE

    @property
    def is_production(self) -> bool:
        return self.app_env == PRODUCTION


def load_settings(environ: Optional[Mapping[str, str]] = None) -> NotificationSettings:
    """
    Assemble NotificationSettings from environment variables.

    Raises:
        ConfigurationError: Listing every missing required key, or an invalid
            secret source / notification language.
    """
    env = os.environ if environ is None else environ

    missing = [key for key in REQUIRED_KEYS if not env.get(key)]
    # Chaves da fonte da secret entram na mesma lista
    mode = (env.get("STRIPE_SECRET_SOURCE") or "").strip()
    missing += [key for key in REQUIRED_KEYS_BY_SOURCE.get(mode, ()) if not env.get(key)]
    if missing:
        raise ConfigurationError(f"Variáveis de ambiente obrigatórias não definidas: {', '.join(missing)}")

    language = (env.get("NOTIFICATION_LANGUAGE") or DEFAULT_LANGUAGE).strip().lower()
    if language not in SUPPORTED_LANGUAGES:
        raise ConfigurationError(
            f"NOTIFICATION_LANGUAGE inválido: {language!r} (esperado: {', '.join(SUPPORTED_LANGUAGES)})"
        )

    return NotificationSettings(
        app_env=env.get("APP_ENV") or "development",
        secret_source=secret_source_from_env(env),
        sns_topic_arn=env["SNS_TOPIC_ARN"],
        account_name=env["STRIPE_ACCOUNT_NAME"],
        sandbox_account_id=env.get("STRIPE_SANDBOX_ACCOUNT_ID") or None,
        language=language,
    )
