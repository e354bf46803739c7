"""
Contacts component - inbox manager and public contact form.

Status lifecycle: new -> read (on first view) -> replied / archived.
Archived rows may be reopened back to read.

Opening a message is two explicit steps, `view()` then `mark_read()`,
so the read side stays free of writes. `open_message()` runs both.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import ValidationError

from folio.components.records import (
    AfterWrite,
    EntityManager,
    MutationOutput,
    RemoteGateway,
    SortOrder,
    WritePolicy,
)
from folio.core.entities import CONTACT_STATUSES, Contact, ContactDraft
from folio.core.ports.feedback import FeedbackPort
from folio.core.ports.notify import ContactMessage, ContactNotifierPort, NotifyResult
from folio.core.ports.remote import RemoteError

from .models import ContactFieldError, ContactSubmitOutput
from .ports import ContactInboxPort, ContactsRemotePort

logger = logging.getLogger(__name__)

NEW = "new"
READ = "read"
REPLIED = "replied"
ARCHIVED = "archived"


class ContactsManager(EntityManager[Contact]):
    label: ClassVar[str] = "Contact"
    plural: ClassVar[str] = "contacts"
    order = SortOrder("created_at", descending=True)
    policy = WritePolicy(AfterWrite.APPEND_IN_PLACE, AfterWrite.REPLACE_IN_PLACE)

    def __init__(
        self,
        remote: ContactsRemotePort,
        feedback: FeedbackPort | None = None,
    ) -> None:
        super().__init__(
            RemoteGateway(
                remote.get_contacts,
                remote.create_contact,
                self._write_status,
                remote.delete_contact,
            ),
            feedback,
        )
        self._remote = remote

    # --- Reads ---

    def view(self, contact_id: str) -> Contact | None:
        """Cached row for the detail pane. Never writes."""
        return self.get(contact_id)

    @property
    def new_count(self) -> int:
        return sum(1 for contact in self._items if contact.status == NEW)

    def by_status(self, status: str | None = None) -> list[Contact]:
        if status is None:
            return list(self._items)
        return [contact for contact in self._items if contact.status == status]

    # --- Status transitions ---

    async def set_status(self, contact_id: str, status: str) -> MutationOutput[Contact]:
        if status not in CONTACT_STATUSES:
            message = f"Unknown contact status '{status}'"
            self._error(message)
            return MutationOutput(success=False, error=message)

        return await self._mutate(
            "update",
            contact_id,
            lambda: self._remote.update_contact_status(contact_id, status),
            self.policy.after_update,
            success_message="Status updated successfully",
            error_message="Failed to update status",
        )

    async def mark_read(self, contact_id: str) -> MutationOutput[Contact]:
        """new -> read. Any other status is left alone."""
        current = self.get(contact_id)
        if current is not None and current.status != NEW:
            return MutationOutput(success=True, item=current)

        return await self._mutate(
            "update",
            contact_id,
            lambda: self._remote.update_contact_status(contact_id, READ),
            self.policy.after_update,
            error_message="Failed to update status",
            announce=False,
        )

    async def open_message(self, contact_id: str) -> Contact | None:
        """Show a message: view it, then flip it to read if it was new."""
        contact = self.view(contact_id)
        if contact is None:
            return None
        result = await self.mark_read(contact_id)
        return result.item if result.success and result.item else contact

    async def mark_replied(self, contact_id: str) -> MutationOutput[Contact]:
        return await self.set_status(contact_id, REPLIED)

    async def archive(self, contact_id: str) -> MutationOutput[Contact]:
        return await self.set_status(contact_id, ARCHIVED)

    async def reopen(self, contact_id: str) -> MutationOutput[Contact]:
        return await self.set_status(contact_id, READ)

    async def _write_status(self, contact_id: str, patch: Mapping[str, Any]) -> Contact:
        unsupported = set(patch) - {"status"}
        if unsupported:
            raise RemoteError(
                f"Contacts only accept status changes, got {sorted(unsupported)}",
                operation="update_contact",
            )
        return await self._remote.update_contact_status(contact_id, str(patch["status"]))


# --- Public contact form ---


def _field_errors(exc: ValidationError) -> list[ContactFieldError]:
    return [
        ContactFieldError(
            field=".".join(str(part) for part in err["loc"]) or "_form",
            message=err["msg"],
        )
        for err in exc.errors()
    ]


class ContactSubmission:
    """
    Stores a public contact message and fires the email notification.

    The stored row is the only thing that decides success; the
    notification outcome is logged and reported but never rolls back
    or fails the submission.
    """

    def __init__(
        self,
        inbox: ContactInboxPort,
        notifier: ContactNotifierPort,
        feedback: FeedbackPort | None = None,
    ) -> None:
        self._inbox = inbox
        self._notifier = notifier
        self._feedback = feedback

    async def submit(self, form: Mapping[str, Any] | ContactDraft) -> ContactSubmitOutput:
        try:
            draft = (
                form
                if isinstance(form, ContactDraft)
                else ContactDraft.model_validate({**form, "status": NEW})
            )
        except ValidationError as exc:
            return ContactSubmitOutput(success=False, errors=_field_errors(exc))

        payload = draft.model_copy(update={"status": NEW}).payload()
        try:
            contact = await self._inbox.create_contact(payload)
        except RemoteError as exc:
            logger.error("Contact form error: %s", exc)
            if self._feedback:
                self._feedback.error("Failed to send message. Please try again.")
            return ContactSubmitOutput(success=False, error=str(exc))

        notification = await self._notify(draft)

        if self._feedback:
            self._feedback.success("Message sent successfully! I'll get back to you soon.")
        return ContactSubmitOutput(success=True, contact=contact, notification=notification)

    async def _notify(self, draft: ContactDraft) -> NotifyResult:
        message = ContactMessage(
            name=draft.name, email=draft.email, subject=draft.subject, message=draft.message
        )
        try:
            result = await self._notifier.notify(message)
        except Exception as exc:
            logger.exception("Email service error")
            return NotifyResult.failed(str(exc))

        if not result.ok:
            logger.error("Email sending failed: %s", result.error)
        return result
