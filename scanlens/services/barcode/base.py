"""
Shared aiohttp transport for HTTP backed product providers.

Architecture Pattern : Template Method + Async/Await
"""

import asyncio
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Dict, List, Optional, Tuple, Type, TypeVar

import aiohttp
import structlog
from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError

from .interfaces import (
    IProductProvider, ProviderTransportError, MissingCredentialError,
    BarcodeRateLimitError
)

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _float_or_none(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _text_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _list_or_empty(value: Any) -> Any:
    return [] if value is None else value


# Provider payloads are loosely typed; unusable values become None (or [] for lists) instead of failing
LenientFloat = Annotated[Optional[float], BeforeValidator(_float_or_none)]
LenientStr = Annotated[Optional[str], BeforeValidator(_text_or_none)]
LenientList = Annotated[List[Any], BeforeValidator(_list_or_empty)]
LenientStrList = Annotated[List[LenientStr], BeforeValidator(_list_or_empty)]


class ProviderPayload(BaseModel):
    """Base for per-provider response models; unknown keys are kept."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Price strings such as "12.99" or "$12.99" to Decimal, None when unusable."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    text = str(value).strip().lstrip("$\N{EURO SIGN}\N{POUND SIGN}").replace(",", "")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


class HttpProductProvider(IProductProvider):
    """
    Base class for providers reached over HTTP with JSON payloads.

    Subclasses declare whether they need a credential and call
    `_get_json` for the single request a lookup makes.
    """

    requires_credential = False

    def __init__(self,
                 credential: Optional[str] = None,
                 timeout: float = 8.0,
                 user_agent: str = "ScanLens/1.0"):
        """
        Args:
            credential: API key or token, when the provider needs one
            timeout: Total request timeout in seconds
            user_agent: User-Agent header sent with every request
        """
        self.credential = credential
        self.timeout = timeout
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.credential) or not self.requires_credential

    def _require_credential(self, barcode: str) -> str:
        if self.requires_credential and not self.credential:
            raise MissingCredentialError(
                f"{self.provider_name} API key not configured",
                provider=self.provider_name,
                barcode=barcode
            )
        return self.credential

    async def _get_session(self) -> aiohttp.ClientSession:
        """Return the HTTP session, creating it on first use."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            headers = {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            }
            self._session = aiohttp.ClientSession(timeout=timeout, headers=headers)
        return self._session

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get_json(self,
                        url: str,
                        barcode: str = "",
                        params: Optional[Dict[str, Any]] = None) -> Tuple[int, Any]:
        """
        Issue a GET and decode the JSON body.

        Returns:
            (status, payload); payload is None for a 404

        Raises:
            BarcodeRateLimitError: on HTTP 429
            ProviderTransportError: on any other failure, an empty 200 body included
        """
        try:
            session = await self._get_session()
            async with session.get(url, params=params) as response:
                if response.status == 404:
                    return 404, None

                if response.status == 429:
                    raise BarcodeRateLimitError(
                        "Rate limit exceeded",
                        provider=self.provider_name,
                        barcode=barcode
                    )

                if response.status != 200:
                    raise ProviderTransportError(
                        f"HTTP {response.status}: {response.reason}",
                        provider=self.provider_name,
                        barcode=barcode
                    )

                # Some providers answer JSON with a text/html content type
                payload = await response.json(content_type=None)

            if payload is None:
                raise ProviderTransportError(
                    "Empty response body",
                    provider=self.provider_name,
                    barcode=barcode
                )
            return 200, payload

        except ValueError as e:
            raise ProviderTransportError(
                f"Malformed JSON: {e}",
                provider=self.provider_name,
                barcode=barcode,
                original_error=e
            )
        except aiohttp.ClientError as e:
            raise ProviderTransportError(
                f"Network error: {str(e)}",
                provider=self.provider_name,
                barcode=barcode,
                original_error=e
            )
        except asyncio.TimeoutError:
            raise ProviderTransportError(
                "Request timeout",
                provider=self.provider_name,
                barcode=barcode
            )

    def _parse_payload(self, model: Type[ModelT], data: Any, barcode: str) -> ModelT:
        """Validate a decoded payload against the provider's response model."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ProviderTransportError(
                f"Unexpected payload shape: {e.error_count()} error(s)",
                provider=self.provider_name,
                barcode=barcode,
                original_error=e
            )
