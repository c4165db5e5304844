"""
Service category classification.

'IntentClassifier' asks the model, in a single turn without any history, for
up to three social-service categories that match the user's message, and
keeps the first one. Classification is best-effort: whenever no category can
be obtained the message is treated as ordinary chat ('GeneralInquiry'), so a
failing classifier never blocks the conversational reply.
"""

from textwrap import dedent

from loguru import logger

from careai.exceptions import CompletionUnavailableError
from careai.llms.base import LLMMessage, Roles, SamplingConfig
from careai.llms.client import CompletionClient
from careai.utils.validation import require_text

GENERAL_INQUIRY = "GeneralInquiry"

CLASSIFICATION_PROMPT = dedent("""
    You are an AI that helps identify social services based on user needs.
    Analyze the following message and recommend up to 3 relevant social service categories.
    Return only the service names as a comma-separated list.
    Example: 'food assistance, housing support, utility bill help'
""").strip()

CLASSIFICATION_SAMPLING = SamplingConfig(max_tokens=150, temperature=0.3)


def parse_categories(response: str) -> list[str]:
    """Split a comma-separated model answer into trimmed, non-empty category names."""
    categories = []
    for part in response.split(","):
        # The prompt's example is quoted, so models often echo the quotes.
        category = part.strip().strip("'\"").strip()
        if category:
            categories.append(category)
    return categories


class IntentClassifier:
    def __init__(self, client: CompletionClient, sampling: SamplingConfig = CLASSIFICATION_SAMPLING) -> None:
        self.client = client
        self.sampling = sampling

    async def classify(self, user_message: str) -> str:
        """Return the primary service category of 'user_message', or 'GeneralInquiry'."""
        require_text(user_message, "User message")

        if not self.client.enabled:
            logger.warning("OpenAI service is disabled or not properly configured")
            return GENERAL_INQUIRY

        try:
            response = await self.client.complete(
                [
                    LLMMessage(role=Roles.SYSTEM, content=CLASSIFICATION_PROMPT),
                    LLMMessage(role=Roles.USER, content=user_message),
                ],
                self.sampling,
            )
        except CompletionUnavailableError as exc:
            logger.error(f"Error getting service recommendation: {exc}")
            return GENERAL_INQUIRY

        logger.info(f"Received service recommendation: {response!r}")
        categories = parse_categories(response)
        return categories[0] if categories else GENERAL_INQUIRY
