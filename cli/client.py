from __future__ import annotations

from typing import Mapping, Optional, Tuple

import httpx


class HarnessError(RuntimeError):
    """A measured request failed; the run cannot produce a complete report."""


class ApiClient:
    """HTTP client that reports how many bytes each response put on the wire."""

    def __init__(self, base_url: str, timeout: float = 120.0) -> None:
        self.base_url = base_url
        self._client = httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def measure(self, path: str, headers: Optional[Mapping[str, str]] = None) -> Tuple[int, int]:
        """GET ``path`` and return ``(status_code, bytes_received)``.

        ``bytes_received`` counts the body as transferred, before any
        content decoding, so gzip savings show up in the number.
        """
        try:
            response = self._client.get(path, headers=dict(headers or {}))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise HarnessError(
                f"GET {path} failed with status {exc.response.status_code}."
            ) from exc
        except httpx.TransportError as exc:
            raise HarnessError(f"GET {path} failed: {exc!r}") from exc
        return response.status_code, response.num_bytes_downloaded
