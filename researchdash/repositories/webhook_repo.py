import logging
from typing import Any, Dict, List, Optional

import httpx

from researchdash.core.exceptions import WebhookError

logger = logging.getLogger(__name__)


class N8nWebhookClient:
    """
    Calls the n8n workflow that collects candidate papers for a research area.

    The workflow takes one word per query parameter (`tag1`, `tag2`, ...) plus
    optional `from` / `to` dates and answers with a JSON array of items.
    """

    def __init__(self, client: httpx.AsyncClient, webhook_url: Optional[str]):
        self.client = client
        self.webhook_url = webhook_url

    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    @staticmethod
    def build_params(
        tag: str, date_from: Optional[str] = None, date_to: Optional[str] = None
    ) -> Dict[str, str]:
        params = {f"tag{i}": word for i, word in enumerate(tag.split(), start=1)}
        if date_from:
            params["from"] = date_from
        if date_to:
            params["to"] = date_to
        return params

    async def fetch_papers(
        self, tag: str, date_from: Optional[str] = None, date_to: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Returns the workflow's items; a payload that is not a list yields []."""
        if not self.webhook_url:
            raise WebhookError("Webhook URL not configured")

        params = self.build_params(tag, date_from, date_to)
        logger.info(f"Calling n8n webhook with {params}")
        try:
            response = await self.client.get(self.webhook_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"n8n request failed: {e!r}")
            raise WebhookError(f"Request failed: {e!r}") from e

        if response.is_error:
            raise WebhookError(
                f"n8n returned {response.status_code}", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise WebhookError("Response was not JSON") from e

        if not isinstance(data, list):
            logger.warning(
                f"n8n answered with {type(data).__name__} instead of a list; treating as empty"
            )
            return []
        return [item for item in data if isinstance(item, dict)]
