"""
Application context.

Wires adapters and components into one object for the CLI and tests,
either against the hosted backend or the in-process demo backend, and
owns their startup and shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from folio.adapters.auth.session_storage import FileSessionStorage, InMemorySessionStorage
from folio.adapters.clock import SystemClock
from folio.adapters.dev_notifier import DevContactNotifier
from folio.adapters.feedback import LoggingFeedback
from folio.adapters.http import HttpContactNotifier, RestAuthBackend, RestDataClient
from folio.adapters.images import PillowImageOptimizer
from folio.adapters.memory import InMemoryAuthBackend, InMemoryBackend
from folio.app_shell.config import AppConfig
from folio.app_shell.router import RouteGuard
from folio.components.auth import AuthSessionStore
from folio.components.contacts import ContactsManager, ContactSubmission
from folio.components.dashboard import StatsOutput, run_stats
from folio.components.projects import ProjectsManager
from folio.components.settings import SettingsEditor, SettingsStore
from folio.components.skills import SkillsManager
from folio.components.testimonials import TestimonialsManager
from folio.components.uploads import ImageUploader, UploadPolicy
from folio.core.ports.auth import AuthBackendPort
from folio.core.ports.feedback import FeedbackPort
from folio.core.ports.notify import ContactNotifierPort
from folio.core.ports.remote import RemoteDataPort
from folio.core.ports.time import TimePort
from folio.rules.models import Rules

logger = logging.getLogger(__name__)


@dataclass
class AdminConsole:
    """The four entity managers behind the admin views."""

    projects: ProjectsManager
    testimonials: TestimonialsManager
    skills: SkillsManager
    contacts: ContactsManager

    def close(self) -> None:
        for manager in (self.projects, self.testimonials, self.skills, self.contacts):
            manager.close()


@dataclass
class AppContext:
    rules: Rules
    remote: RemoteDataPort
    auth_backend: AuthBackendPort
    notifier: ContactNotifierPort
    clock: TimePort
    feedback: FeedbackPort
    settings: SettingsStore
    settings_editor: SettingsEditor
    auth: AuthSessionStore
    guard: RouteGuard
    uploader: ImageUploader
    contact_form: ContactSubmission
    admin: AdminConsole | None = None
    _closables: list[Any] = field(default_factory=list)

    @classmethod
    def create(cls, config: AppConfig, *, feedback: FeedbackPort | None = None) -> AppContext:
        """Wire the hosted-backend adapters. Raises ConfigError without URL/key."""
        rules = config.rules
        base_url, anon_key = config.require_backend()
        clock = SystemClock()

        storage = (
            FileSessionStorage(config.session_path)
            if config.session_path
            else InMemorySessionStorage()
        )
        auth_backend = RestAuthBackend(
            base_url, anon_key, storage, timeout=rules.backend.timeout_seconds
        )
        remote = RestDataClient(
            base_url,
            anon_key,
            tables=rules.tables,
            timeout=rules.backend.timeout_seconds,
            poll_interval=rules.backend.feed_poll_seconds,
            token_provider=lambda: auth_backend.access_token,
            clock=clock,
        )
        notifier: ContactNotifierPort
        if rules.notifications.enabled:
            notifier = HttpContactNotifier(
                base_url,
                anon_key,
                function_path=rules.notifications.function_path,
                timeout=rules.notifications.timeout_seconds,
            )
        else:
            notifier = DevContactNotifier()

        ctx = cls.wire(rules, remote, auth_backend, notifier, clock=clock, feedback=feedback)
        ctx._closables.extend([remote, auth_backend, notifier])
        return ctx

    @classmethod
    def in_memory(
        cls,
        rules: Rules,
        backend: InMemoryBackend | None = None,
        auth_backend: InMemoryAuthBackend | None = None,
        *,
        feedback: FeedbackPort | None = None,
    ) -> AppContext:
        """Demo/test wiring over the in-process backend."""
        clock = SystemClock()
        return cls.wire(
            rules,
            backend or InMemoryBackend(clock),
            auth_backend or InMemoryAuthBackend(),
            DevContactNotifier(),
            clock=clock,
            feedback=feedback,
        )

    @classmethod
    def wire(
        cls,
        rules: Rules,
        remote: RemoteDataPort,
        auth_backend: AuthBackendPort,
        notifier: ContactNotifierPort,
        *,
        clock: TimePort,
        feedback: FeedbackPort | None = None,
    ) -> AppContext:
        feedback = feedback or LoggingFeedback()
        settings = SettingsStore(
            remote, table=rules.tables.site_settings, defaults=rules.content_defaults
        )
        auth = AuthSessionStore(auth_backend)
        uploads = rules.uploads
        policy = UploadPolicy(
            max_bytes=uploads.max_bytes,
            allowed_types=tuple(uploads.allowed_types),
            max_width=uploads.max_width,
            max_height=uploads.max_height,
            quality=uploads.quality,
        )
        return cls(
            rules=rules,
            remote=remote,
            auth_backend=auth_backend,
            notifier=notifier,
            clock=clock,
            feedback=feedback,
            settings=settings,
            settings_editor=SettingsEditor(remote, settings, feedback),
            auth=auth,
            guard=RouteGuard(auth, rules.admin),
            uploader=ImageUploader(
                remote, clock, optimizer=PillowImageOptimizer(), policy=policy, feedback=feedback
            ),
            contact_form=ContactSubmission(remote, notifier, feedback),
        )

    # --- Lifecycle ---

    async def startup(self) -> None:
        """Restore the session, load settings and follow their changes."""
        await self.auth.initialize()
        await self.settings.fetch_and_replace()
        self.settings.subscribe()
        logger.info("Application context started")

    async def open_admin(self) -> AdminConsole:
        """Load every entity manager; reuses the console once opened."""
        if self.admin is not None:
            return self.admin
        projects, testimonials, skills, contacts = await asyncio.gather(
            ProjectsManager.open(self.remote, self.feedback),
            TestimonialsManager.open(self.remote, self.feedback),
            SkillsManager.open(self.remote, self.feedback),
            ContactsManager.open(self.remote, self.feedback),
        )
        self.admin = AdminConsole(projects, testimonials, skills, contacts)
        return self.admin

    async def stats(self) -> StatsOutput:
        return await run_stats(self.remote)

    async def shutdown(self) -> None:
        if self.admin is not None:
            self.admin.close()
            self.admin = None
        self.settings.teardown()
        self.auth.teardown()
        for closable in self._closables:
            aclose = getattr(closable, "aclose", None)
            if aclose is not None:
                await aclose()
        self._closables.clear()
        logger.info("Application context shut down")
