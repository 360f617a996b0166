"""
Stripe secret key resolution.

The key comes from exactly one source, selected by STRIPE_SECRET_SOURCE:
- env: literal value in STRIPE_SECRET_KEY
- secretsmanager: STRIPE_SECRET_ARN, optionally a JSON field in STRIPE_SECRET_JSON_KEY
- ssm: SecureString parameter STRIPE_SECRET_PARAMETER_NAME

The value is fetched on every call. Only the boto3 clients are reused.
"""

import json
from typing import Annotated, Literal, Mapping, Optional, Union

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field

from shared.aws_clients import get_secrets_client, get_ssm_client
from shared.errors import ConfigurationError, NotFoundError, UpstreamError

logger = Logger(service="secrets")

SOURCE_ENV = "env"
SOURCE_SECRETS_MANAGER = "secretsmanager"
SOURCE_SSM = "ssm"


class DirectSecret(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["env"] = SOURCE_ENV
    value: str = Field(..., repr=False)


class ManagedSecret(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["secretsmanager"] = SOURCE_SECRETS_MANAGER
    resource_id: str = Field(..., description="ARN ou nome da secret no Secrets Manager")
    json_field: Optional[str] = Field(None, description="Campo da secret quando ela é um documento JSON")


class ParameterSecret(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: Literal["ssm"] = SOURCE_SSM
    name: str = Field(..., description="Nome do parâmetro SecureString")


SecretSource = Annotated[
    Union[DirectSecret, ManagedSecret, ParameterSecret],
    Field(discriminator="mode"),
]

REQUIRED_KEYS_BY_SOURCE = {
    SOURCE_ENV: ("STRIPE_SECRET_KEY",),
    SOURCE_SECRETS_MANAGER: ("STRIPE_SECRET_ARN",),
    SOURCE_SSM: ("STRIPE_SECRET_PARAMETER_NAME",),
}


def secret_source_from_env(environ: Mapping[str, str]) -> SecretSource:
    """
    Build the active secret source from environment variables.

    Raises:
        ConfigurationError: Unknown STRIPE_SECRET_SOURCE or missing parameters for it.
    """
    mode = (environ.get("STRIPE_SECRET_SOURCE") or "").strip()
    if mode not in REQUIRED_KEYS_BY_SOURCE:
        raise ConfigurationError(
            f"STRIPE_SECRET_SOURCE inválido: {mode!r} (esperado: env, secretsmanager ou ssm)"
        )

    missing = [key for key in REQUIRED_KEYS_BY_SOURCE[mode] if not environ.get(key)]
    if missing:
        raise ConfigurationError(
            f"Variáveis obrigatórias para STRIPE_SECRET_SOURCE={mode} não definidas: {', '.join(missing)}"
        )

    if mode == SOURCE_ENV:
        return DirectSecret(value=environ["STRIPE_SECRET_KEY"])
    if mode == SOURCE_SECRETS_MANAGER:
        return ManagedSecret(
            resource_id=environ["STRIPE_SECRET_ARN"],
            json_field=environ.get("STRIPE_SECRET_JSON_KEY") or None,
        )
    return ParameterSecret(name=environ["STRIPE_SECRET_PARAMETER_NAME"])


def resolve_secret(source: SecretSource, secrets_client=None, ssm_client=None) -> str:
    """
    Return the live secret value for the given source.

    Args:
        source: One of DirectSecret, ManagedSecret, ParameterSecret.
        secrets_client: Secrets Manager client (default: shared process-wide client).
        ssm_client: SSM client (default: shared process-wide client).

    Raises:
        ConfigurationError: Unknown source or missing parameter.
        UpstreamError: Backend call failed or returned an empty value.
        NotFoundError: json_field absent from the stored JSON document.
    """
    if isinstance(source, DirectSecret):
        if not source.value:
            raise ConfigurationError("STRIPE_SECRET_KEY vazio")
        return source.value

    if isinstance(source, ManagedSecret):
        return _from_secrets_manager(source, secrets_client or get_secrets_client())

    if isinstance(source, ParameterSecret):
        return _from_parameter_store(source, ssm_client or get_ssm_client())

    raise ConfigurationError(f"Fonte de secret não suportada: {type(source).__name__}")


def _from_secrets_manager(source: ManagedSecret, client) -> str:
    if not source.resource_id:
        raise ConfigurationError("STRIPE_SECRET_ARN vazio")

    try:
        response = client.get_secret_value(SecretId=source.resource_id)
    except (ClientError, BotoCoreError) as e:
        logger.error("Secrets Manager: get_secret_value falhou", extra={"secret_id": source.resource_id})
        raise UpstreamError(f"Falha ao obter secret {source.resource_id}: {e}") from e

    secret_string = response.get("SecretString")
    if not secret_string:
        raise UpstreamError(f"Secret {source.resource_id} sem SecretString")

    if not source.json_field:
        return secret_string

    try:
        document = json.loads(secret_string)
    except json.JSONDecodeError as e:
        raise UpstreamError(f"Secret {source.resource_id} não é um JSON válido") from e
    if not isinstance(document, dict) or source.json_field not in document:
        raise NotFoundError(f"Campo {source.json_field!r} não encontrado na secret {source.resource_id}")

    value = document[source.json_field]
    if not isinstance(value, str) or not value:
        raise UpstreamError(f"Campo {source.json_field!r} da secret {source.resource_id} vazio ou não é string")
    return value


def _from_parameter_store(source: ParameterSecret, client) -> str:
    if not source.name:
        raise ConfigurationError("STRIPE_SECRET_PARAMETER_NAME vazio")

    try:
        response = client.get_parameter(Name=source.name, WithDecryption=True)
    except (ClientError, BotoCoreError) as e:
        logger.error("SSM: get_parameter falhou", extra={"parameter_name": source.name})
        raise UpstreamError(f"Falha ao obter parâmetro {source.name}: {e}") from e

    value = (response.get("Parameter") or {}).get("Value")
    if not value:
        raise UpstreamError(f"Parâmetro {source.name} sem valor")
    return value
