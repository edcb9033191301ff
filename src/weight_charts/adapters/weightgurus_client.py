"""Weight Gurus API client."""

from dataclasses import dataclass, field

import httpx

from weight_charts.adapters.weightgurus_models import LoginResponse, parse_operations
from weight_charts.domain.entries import RawEntry
from weight_charts.services.charts import EntrySource

DEFAULT_BASE_URL = "https://api.weightgurus.com/v3"


class WeightGurusError(RuntimeError):
    """Raised when the Weight Gurus API rejects a request."""


@dataclass
class HttpxWeightGurusClient(EntrySource):
    """HTTPX-backed entry source for a Weight Gurus account."""

    email: str
    password: str
    http_client: httpx.AsyncClient
    base_url: str = DEFAULT_BASE_URL
    _access_token: str | None = field(default=None, init=False, repr=False)

    @classmethod
    def create(
        cls, email: str, password: str, base_url: str = DEFAULT_BASE_URL
    ) -> "HttpxWeightGurusClient":
        """Create a client with a managed httpx session."""
        return cls(
            email=email,
            password=password,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def login(self) -> str:
        """Authenticate and store the access token."""
        response = await self.http_client.post(
            f"{self.base_url}/account/login",
            json={"email": self.email, "password": self.password},
            timeout=15,
        )
        if response.status_code in {401, 403}:
            raise WeightGurusError("Weight Gurus login was rejected")
        response.raise_for_status()
        login = LoginResponse.model_validate(response.json())
        self._access_token = login.access_token
        return login.access_token

    async def fetch_entries(self) -> list[RawEntry]:
        """Fetch the account's operation log, re-authenticating once on 401."""
        if self._access_token is None:
            await self.login()
        response = await self._get_operations()
        if response.status_code == 401:
            await self.login()
            response = await self._get_operations()
        response.raise_for_status()
        return parse_operations(response.json())

    async def _get_operations(self) -> httpx.Response:
        return await self.http_client.get(
            f"{self.base_url}/operation/",
            headers={"Authorization": f"Bearer {self._access_token}"},
            timeout=15,
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
