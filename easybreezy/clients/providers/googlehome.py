"""Google Home adapter.

Only the OAuth half is wired up; HomeGraph device control is not available
to third-party clients yet, so device operations report that plainly.
"""

from __future__ import annotations

from typing import Any, Iterator, Sequence

from easybreezy.clients.providers.base import ProviderAdapter
from easybreezy.core.errors import UnsupportedOperationError
from easybreezy.schemas.devices import DeviceCommand, NormalizedDevice, NormalizedStatus


class GoogleHomeAdapter(ProviderAdapter):
    key = "googlehome"
    display_name = "Google Home"

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(
            f"{self.display_name} does not support {operation} yet.", provider=self.key
        )

    async def list_devices(self, access_token: str) -> Iterator[NormalizedDevice]:
        return iter(())

    async def fetch_status(self, access_token: str, device_id: str) -> NormalizedStatus:
        raise self._unsupported("device status")

    async def send_command(
        self,
        access_token: str,
        device_id: str,
        commands: Sequence[DeviceCommand],
    ) -> Any:
        raise self._unsupported("device commands")


__all__ = ["GoogleHomeAdapter"]
