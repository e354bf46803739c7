"""
Contacts component port definitions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from folio.core.entities import Contact


class ContactsRemotePort(Protocol):
    async def get_contacts(self) -> list[Contact]: ...
    async def create_contact(self, draft: Mapping[str, Any]) -> Contact: ...
    async def update_contact_status(self, contact_id: str, status: str) -> Contact: ...
    async def delete_contact(self, contact_id: str) -> None: ...


class ContactInboxPort(Protocol):
    """What the public site may do: insert only."""

    async def create_contact(self, draft: Mapping[str, Any]) -> Contact: ...
