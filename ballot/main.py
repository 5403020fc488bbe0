import logging
import uvicorn
from fastapi import FastAPI
from ballot.application.handlers import build_command_bus, build_query_bus
from ballot.config import Settings, get_settings
from ballot.domain.election import Election
from ballot.infrastructure.database import create_session_factory
from ballot.infrastructure.election_repo import InMemoryElectionRepository, SqlElectionRepository
from ballot.interfaces.election_controller import events_router, router as election_router
from ballot.interfaces.managers.event_manager import EventDispatcher, EventLog
from ballot.interfaces.proposal_controller import router as proposal_router
from ballot.interfaces.voter_controller import router as voter_router
from ballot.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_repository(settings: Settings):
    if not settings.DATABASE_URL:
        return InMemoryElectionRepository()
    return SqlElectionRepository(create_session_factory(settings.DATABASE_URL))


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    dispatcher = EventDispatcher()
    event_log = EventLog()
    dispatcher.subscribe(event_log)
    election = Election(settings.ADMIN_ADDRESS, repository=build_repository(settings), sink=dispatcher)

    app = FastAPI(title=settings.APP_NAME)
    app.state.settings = settings
    app.state.election = election
    app.state.events = dispatcher
    app.state.command_bus = build_command_bus(election)
    app.state.query_bus = build_query_bus(election, event_log)

    app.include_router(election_router)
    app.include_router(events_router)
    app.include_router(voter_router)
    app.include_router(proposal_router)

    logger.info("Election ready, administrator %s", settings.ADMIN_ADDRESS)
    return app


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)
