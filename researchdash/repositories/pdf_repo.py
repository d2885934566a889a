import logging

import httpx

from researchdash.core.exceptions import DownloadError

logger = logging.getLogger(__name__)


class PdfDownloader:
    """Opens a streaming GET on a remote PDF."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def open(self, url: str) -> httpx.Response:
        """
        Returns the response with its body still unread. The caller owns it
        and must `aclose()` it once the body has been relayed.
        """
        try:
            request = self.client.build_request("GET", url)
            response = await self.client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"PDF request to {url} failed: {e!r}")
            raise DownloadError(f"Request failed: {e!r}") from e

        if response.is_error:
            status_code = response.status_code
            await response.aclose()
            logger.error(f"PDF host answered {status_code} for {url}")
            raise DownloadError("Unexpected status", status_code=status_code)
        return response
