"""Push token registration over HTTP."""

import httpx

from voip_bridge.utils.exceptions import TokenForwardError
from voip_bridge.utils.logging import get_logger

logger = get_logger(__name__)


class HttpTokenSink:
    """Reports the VoIP push token to the call server.

    Sends ``{"voipToken": token, "platform": "ios"}`` as JSON. An empty token
    tells the server the previous one was invalidated.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        """Initialize the sink.

        Args:
            url: Registration endpoint
            timeout: Request timeout in seconds
            client: Preconfigured client, mainly for tests
        """
        self.url = url
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)

    def report_push_token(self, token: str) -> None:
        """POST the token to the registration endpoint.

        Raises:
            TokenForwardError: On transport errors or a non-2xx response
        """
        try:
            response = self._client.post(
                self.url,
                json={"voipToken": token, "platform": "ios"},
            )
        except httpx.TimeoutException as e:
            logger.error("token_registration_timeout", url=self.url)
            raise TokenForwardError("token registration timed out", details={"url": self.url}) from e
        except httpx.HTTPError as e:
            logger.error("token_registration_error", url=self.url, error=str(e))
            raise TokenForwardError(
                "token registration failed",
                details={"url": self.url, "error": str(e)},
            ) from e

        if not response.is_success:
            logger.error(
                "token_registration_rejected",
                url=self.url,
                status_code=response.status_code,
            )
            raise TokenForwardError(
                f"token registration rejected: {response.status_code}",
                details={"url": self.url, "status_code": response.status_code},
            )

        logger.info("token_registered", url=self.url, cleared=not token)

    def close(self) -> None:
        self._client.close()
