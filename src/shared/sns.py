"""SNS publisher for AWS Chatbot custom notifications."""

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from shared.aws_clients import get_sns_client, region_from_arn
from shared.errors import PublishError

logger = Logger(service="sns")


class SnsPublisher:
    def __init__(self, topic_arn: str, client=None) -> None:
        self.topic_arn = topic_arn
        # Região da topic; o cliente padrão da Lambda pode estar em outra região.
        self.client = client or get_sns_client(region_from_arn(topic_arn))

    def publish(self, message: str) -> str:
        """
        Publish a message body to the topic.

        Returns:
            SNS MessageId.

        Raises:
            PublishError: On any SNS/botocore failure.
        """
        try:
            response = self.client.publish(TopicArn=self.topic_arn, Message=message)
        except (ClientError, BotoCoreError) as e:
            raise PublishError(f"Falha ao publicar na topic {self.topic_arn}: {e}") from e
        return response.get("MessageId", "")
