import asyncio
import logging

import aiohttp

from services.models import DeliveredAsset, Failure, MediaKind, ResolvedContent

logger = logging.getLogger(__name__)

USER_AGENT = "TikTokBot/1.0"


class ContentAPI:
    """
    Client for the TikTok resolution API.

    GET <base_url>?endpoint=info&url=..                -> {success, data, error}
    GET <base_url>?endpoint=download&url=..&type=..    -> {success, url, photos, error}

    One attempt per call; every problem comes back as a Failure.
    """

    def __init__(self, base_url: str, timeout: float = 45, session: aiohttp.ClientSession | None = None):
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
        return self._session

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()

    async def _call(self, endpoint: str, **params) -> dict | Failure:
        logger.info(f"Calling API: {endpoint} with params: {params}")
        session = await self._get_session()

        try:
            async with session.get(
                self.base_url,
                params={"endpoint": endpoint, **params},
                timeout=self.timeout,
            ) as resp:
                try:
                    payload = await resp.json(content_type=None)
                except ValueError:
                    payload = None

                if resp.status >= 400:
                    error = payload.get("error") if isinstance(payload, dict) else None
                    return Failure(error or f"HTTP {resp.status}")

        except asyncio.TimeoutError:
            logger.error(f"TikTok API timeout: {endpoint}")
            return Failure("Request timed out")
        except aiohttp.ClientError as e:
            logger.error(f"TikTok API error: {e}")
            return Failure(str(e) or type(e).__name__)

        if not isinstance(payload, dict):
            return Failure("Malformed response from API")

        if not payload.get("success"):
            return Failure(payload.get("error") or "Unknown error")

        return payload

    async def resolve(self, url: str) -> ResolvedContent | Failure:
        payload = await self._call("info", url=url)
        if isinstance(payload, Failure):
            return payload

        data = payload.get("data")
        if not isinstance(data, dict):
            return Failure("Malformed response from API")

        return ResolvedContent.from_api(data)

    async def download(self, url: str, kind: MediaKind) -> DeliveredAsset | Failure:
        kind = MediaKind(kind)
        payload = await self._call("download", url=url, type=kind.value)
        if isinstance(payload, Failure):
            return payload

        return DeliveredAsset.from_api(kind, payload)
