import boto3

_secrets_client = None
_ssm_client = None
_sns_clients: dict = {}


def get_secrets_client():
    global _secrets_client
    if not _secrets_client:
        _secrets_client = boto3.client("secretsmanager")
    return _secrets_client


def get_ssm_client():
    global _ssm_client
    if not _ssm_client:
        _ssm_client = boto3.client("ssm")
    return _ssm_client


def get_sns_client(region: str | None = None):
    """SNS client per region; None uses the default boto3 region."""
    if region not in _sns_clients:
        _sns_clients[region] = boto3.client("sns", region_name=region)
    return _sns_clients[region]


def region_from_arn(arn: str) -> str | None:
    """Extrai a região de um ARN (arn:partition:service:region:account:resource)."""
    parts = (arn or "").split(":")
    if len(parts) < 6:
        return None
    return parts[3] or None
