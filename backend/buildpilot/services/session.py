# buildpilot/services/session.py
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Dict, List, Optional

from buildpilot.core.errors import ForbiddenError, NotFoundError, SessionBusyError, SessionClosedError
from buildpilot.core.ids import new_id
from buildpilot.core.snippets import WELCOME_TEMPLATE
from buildpilot.core.templates import main_file_path
from buildpilot.models.editor import SessionState, SubmitResponse
from buildpilot.models.project import Project
from buildpilot.services.conversation import ConversationLog
from buildpilot.services.credits import CreditLedger
from buildpilot.services.debounce import AutosaveDebouncer
from buildpilot.services.pipeline import AssistantPipeline

logger = logging.getLogger(__name__)

class EditorSession:
    # At most one assistant call is in flight. The pipeline runs against the
    # buffer as it is when the simulated latency ends, so direct edits made
    # while waiting are kept. Store calls run in worker threads.
    def __init__(
        self,
        session_id: str,
        user_id: str,
        project: Project,
        pipeline: AssistantPipeline,
        ledger: CreditLedger,
        save_code: Callable[[str, str], bool],
        quiet_period: float = 1.0,
        assistant_delay: float = 1.5,
    ):
        self.session_id = session_id
        self.user_id = user_id
        self.project_id = project.id
        self.project_type = project.type
        self.code = project.code
        self.log = ConversationLog()
        self.pipeline = pipeline
        self.ledger = ledger
        self.assistant_delay = assistant_delay
        self.closed = False
        self.last_seen = time.monotonic()
        self._save_code = save_code
        self._saved_code = project.code
        self._in_flight = False
        self.debouncer = AutosaveDebouncer(lambda: self.code, self._persist, quiet_period)
        self.log.append("assistant", WELCOME_TEMPLATE.format(project_name=project.name))

    @property
    def busy(self) -> bool:
        return self._in_flight

    def touch(self) -> None:
        self.last_seen = time.monotonic()

    async def submit(self, text: str) -> SubmitResponse:
        if self.closed:
            raise SessionClosedError()
        utterance = (text or "").strip()
        if not utterance:
            return SubmitResponse(accepted=False, code=self.code)
        if self._in_flight:
            raise SessionBusyError()

        self._in_flight = True
        try:
            remaining = await asyncio.to_thread(self.ledger.debit, self.user_id, 1, self.project_id)
            charged = remaining is not None
            user_turn = self.log.append("user", utterance)
            try:
                await asyncio.sleep(self.assistant_delay)
            except asyncio.CancelledError:
                await self._refund(charged)
                raise

            if self.closed:
                logger.info("session %s closed while assistant was running; result discarded", self.session_id)
                await self._refund(charged)
                return SubmitResponse(accepted=False, code=self.code)

            result = self.pipeline.run(utterance, self.code)
            if not result.matched:
                await self._refund(charged)
            assistant_turn = self.log.append("assistant", result.reply)
            if result.code != self.code:
                self.code = result.code
                self.debouncer.notify()
            return SubmitResponse(
                accepted=True,
                reply=result.reply,
                code=self.code,
                rule=result.rule,
                messages=[user_turn, assistant_turn],
            )
        finally:
            self._in_flight = False
            self.touch()

    def edit(self, code: str) -> None:
        if self.closed:
            raise SessionClosedError()
        self.code = code
        self.debouncer.notify()

    def close(self) -> None:
        self.closed = True
        self.debouncer.cancel()

    def state(self) -> SessionState:
        return SessionState(
            session_id=self.session_id,
            project_id=self.project_id,
            project_type=self.project_type,
            active_file=main_file_path(self.project_type),
            code=self.code,
            busy=self.busy,
            messages=list(self.log.all()),
        )

    async def _refund(self, charged: bool) -> None:
        if not charged:
            return
        try:
            await asyncio.to_thread(self.ledger.refund, self.user_id, 1, self.project_id)
        except Exception:
            logger.exception("credit refund failed for %s", self.user_id)

    def _persist(self, code: str) -> bool:
        # runs in a worker thread; the debouncer never runs two at once
        if code == self._saved_code:
            return True
        ok = self._save_code(self.project_id, code)
        if ok:
            self._saved_code = code
            logger.debug("autosaved project %s (%d chars)", self.project_id, len(code))
        return ok

class SessionRegistry:
    def __init__(
        self,
        pipeline: AssistantPipeline,
        ledger: CreditLedger,
        save_code: Callable[[str, str], bool],
        quiet_period: float = 1.0,
        assistant_delay: float = 1.5,
        idle_timeout: float = 1800.0,
    ):
        self.pipeline = pipeline
        self.ledger = ledger
        self.save_code = save_code
        self.quiet_period = quiet_period
        self.assistant_delay = assistant_delay
        self.idle_timeout = idle_timeout
        self._sessions: Dict[str, EditorSession] = {}

    def open(self, user_id: str, project: Project) -> EditorSession:
        self.sweep()
        session = EditorSession(
            session_id=new_id(),
            user_id=user_id,
            project=project,
            pipeline=self.pipeline,
            ledger=self.ledger,
            save_code=self.save_code,
            quiet_period=self.quiet_period,
            assistant_delay=self.assistant_delay,
        )
        self._sessions[session.session_id] = session
        logger.info("editor session %s opened on project %s", session.session_id, project.id)
        return session

    def get(self, session_id: str, user_id: Optional[str] = None) -> EditorSession:
        self.sweep()
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Session {session_id} not found")
        if user_id is not None and session.user_id != user_id:
            raise ForbiddenError("You do not have access to this session")
        session.touch()
        return session

    def close(self, session_id: str, user_id: Optional[str] = None) -> None:
        session = self.get(session_id, user_id)
        session.close()
        del self._sessions[session_id]

    def close_all(self) -> None:
        for session in list(self._sessions.values()):
            session.close()
        self._sessions.clear()

    def sweep(self) -> int:
        cutoff = time.monotonic() - self.idle_timeout
        stale = [s for s in self._sessions.values() if s.last_seen < cutoff and not s.busy]
        for session in stale:
            # an idle session's pending autosave is dropped with it
            session.close()
            del self._sessions[session.session_id]
            logger.info("editor session %s expired after %.0fs idle", session.session_id, self.idle_timeout)
        return len(stale)

    def has_open(self, project_id: str) -> bool:
        # read-only; safe to call from a worker thread
        cutoff = time.monotonic() - self.idle_timeout
        return any(
            s.project_id == project_id and (s.last_seen >= cutoff or s.busy)
            for s in list(self._sessions.values())
        )

    def sessions(self) -> List[EditorSession]:
        return list(self._sessions.values())
