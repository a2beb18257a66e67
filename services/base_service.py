"""Base service class with shared functionality.

No Rich imports, no console output. Returns structured data; raises
typed exceptions.
"""

import logging
from pathlib import Path

from config_loader import get_api_base, get_timeout, load_config
from tailor_client import TailorClient

logger = logging.getLogger(__name__)


class BaseService:
    """Base class for all services with shared functionality.

    Services log instead of printing.
    """

    def __init__(
        self,
        config: dict | None = None,
        client: TailorClient | None = None,
    ):
        """Initialize the service.

        Args:
            config: Configuration dictionary. If None, loads from config.json.
            client: TailorClient instance. If None, creates one from config.
        """
        self.config = config or load_config()
        self._client = client
        self.output_dir = Path(__file__).parent.parent / "output"

    @property
    def client(self) -> TailorClient:
        """Remote service client, created from config on first use."""
        if self._client is None:
            base_url = get_api_base(self.config)
            logger.debug("Creating TailorClient for %s", base_url)
            self._client = TailorClient(base_url=base_url, timeout=get_timeout(self.config))
        return self._client

    async def aclose(self) -> None:
        """Close the remote client if this service created or was given one."""
        if self._client is not None:
            await self._client.aclose()
