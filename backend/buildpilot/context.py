# buildpilot/context.py
from __future__ import annotations

from dataclasses import dataclass

from buildpilot.core.config import Settings
from buildpilot.services.accounts import AccountService, ReferralService
from buildpilot.services.cache import ReadThroughCache
from buildpilot.services.credits import CreditLedger
from buildpilot.services.pipeline import AssistantPipeline
from buildpilot.services.projects import ProjectService
from buildpilot.services.rate_limit import RateLimiter
from buildpilot.services.session import SessionRegistry
from buildpilot.services.store import MemoryRecordStore, RecordStore
from buildpilot.services.support import SupportService

@dataclass
class AppContext:
    settings: Settings
    store: RecordStore
    ledger: CreditLedger
    accounts: AccountService
    referrals: ReferralService
    projects: ProjectService
    support: SupportService
    limiter: RateLimiter
    sessions: SessionRegistry

    @staticmethod
    def build(settings: Settings, store: RecordStore | None = None) -> "AppContext":
        if store is None:
            store = _make_store(settings)
        ledger = CreditLedger(store)
        projects = ProjectService(store, ReadThroughCache())
        return AppContext(
            settings=settings,
            store=store,
            ledger=ledger,
            accounts=AccountService(store, ledger),
            referrals=ReferralService(store),
            projects=projects,
            support=SupportService(store),
            limiter=RateLimiter(store, settings.rate_limit_max, settings.rate_limit_window_s),
            sessions=SessionRegistry(
                pipeline=AssistantPipeline(),
                ledger=ledger,
                save_code=projects.save_code,
                quiet_period=settings.autosave_seconds,
                assistant_delay=settings.assistant_delay_seconds,
                idle_timeout=float(settings.session_idle_s),
            ),
        )

def _make_store(settings: Settings) -> RecordStore:
    if settings.store_backend == "rest":
        from buildpilot.services.rest_store import RestRecordStore

        return RestRecordStore(settings)
    return MemoryRecordStore()
