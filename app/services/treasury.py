"""Treasury collaborator: executes payout transfers outside the ledger."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferResult:
    succeeded: bool
    reference: str | None = None
    failure_reason: str | None = None


class Treasury(Protocol):
    def transfer(self, to: str, amount: int, reference: str) -> TransferResult:
        ...


class HttpTreasury:
    """
    Treasury reached over HTTP.

    POST {base_url}/transfers with {"to", "amount", "reference"}. A 2xx
    response whose body has "status": "succeeded" confirms the transfer;
    anything else, including timeouts, is reported as a failure.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def transfer(self, to: str, amount: int, reference: str) -> TransferResult:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
                response = client.post(
                    f"{self.base_url}/transfers",
                    json={"to": to, "amount": amount, "reference": reference},
                    headers=headers,
                )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            return TransferResult(
                succeeded=False,
                failure_reason=f"Treasury responded with status {e.response.status_code}: {e.response.text}",
            )
        except httpx.RequestError as e:
            return TransferResult(
                succeeded=False,
                failure_reason=f"Treasury request failed: {str(e)}",
            )
        except ValueError:
            return TransferResult(
                succeeded=False,
                failure_reason="Invalid response from treasury: body is not JSON",
            )

        if not isinstance(body, dict) or body.get("status") != "succeeded":
            return TransferResult(
                succeeded=False,
                failure_reason=f"Treasury did not confirm transfer {reference}",
            )

        return TransferResult(
            succeeded=True,
            reference=str(body.get("transfer_id") or reference),
        )


class UnconfiguredTreasury:
    """Used when TREASURY_URL is not set: every transfer fails, nothing is paid."""

    def transfer(self, to: str, amount: int, reference: str) -> TransferResult:
        logger.warning(f"Treasury not configured - cannot transfer {reference}")
        return TransferResult(
            succeeded=False,
            failure_reason="Treasury is not configured",
        )


def build_treasury() -> Treasury:
    if settings.treasury_url:
        return HttpTreasury(
            settings.treasury_url,
            api_key=settings.treasury_api_key,
            timeout=settings.treasury_timeout_seconds,
        )
    return UnconfiguredTreasury()
