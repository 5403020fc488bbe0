from ballot.application.commands import (
    CastVoteCommand,
    CountVotesCommand,
    EndProposalRegistrationCommand,
    EndVotingSessionCommand,
    RegisterProposalCommand,
    RegisterVoterCommand,
    StartProposalRegistrationCommand,
    StartVotingSessionCommand,
)
from ballot.application.queries import (
    GetEventsQuery,
    GetProposalQuery,
    GetProposalsQuery,
    GetVoterQuery,
    GetWinningProposalIdQuery,
    GetWinningProposalQuery,
    GetWorkflowStatusQuery,
)
from ballot.application.query_bus import QueryBus
from ballot.domain.election import Election


class RegisterVoterHandler:
    def __init__(self, election: Election):
        self.election = election

    def handle(self, command: RegisterVoterCommand):
        self.election.register_voter(command.caller, command.identity)
        return {"message": "Voter registered successfully", "identity": command.identity}


class WorkflowTransitionHandler:
    """Runs one of the administrator's workflow transitions."""

    transitions = {
        StartProposalRegistrationCommand: Election.start_proposal_registration,
        EndProposalRegistrationCommand: Election.end_proposal_registration,
        StartVotingSessionCommand: Election.start_voting_session,
        EndVotingSessionCommand: Election.end_voting_session,
    }

    def __init__(self, election: Election):
        self.election = election

    def handle(self, command):
        transition = self.transitions[type(command)]
        status = transition(self.election, command.caller)
        return {"status": status.value}


class CountVotesHandler:
    def __init__(self, election: Election):
        self.election = election

    def handle(self, command: CountVotesCommand):
        winning_proposal_id = self.election.count_votes(command.caller)
        return {
            "status": self.election.status.value,
            "winning_proposal_id": winning_proposal_id,
        }


class RegisterProposalHandler:
    def __init__(self, election: Election):
        self.election = election

    def handle(self, command: RegisterProposalCommand):
        proposal_id = self.election.register_proposal(command.caller, command.description)
        return {"proposal_id": proposal_id, "description": command.description}


class CastVoteHandler:
    def __init__(self, election: Election):
        self.election = election

    def handle(self, command: CastVoteCommand):
        self.election.cast_vote(command.caller, command.proposal_id)
        return {"message": f"Vote cast successfully for proposal {command.proposal_id}", "proposal_id": command.proposal_id}


class GetWorkflowStatusHandler:
    def __init__(self, election: Election):
        self.election = election

    def handle(self, query: GetWorkflowStatusQuery):
        return {"status": self.election.status.value}


class GetProposalsHandler:
    def __init__(self, election: Election):
        self.election = election

    def handle(self, query: GetProposalsQuery):
        return [
            {
                "proposal_id": proposal_id,
                "description": proposal.description,
                "vote_count": proposal.vote_count,
            }
            for proposal_id, proposal in enumerate(self.election.get_proposals())
        ]


class GetProposalHandler:
    def __init__(self, election: Election):
        self.election = election

    def handle(self, query: GetProposalQuery):
        proposal = self.election.get_proposal(query.proposal_id)
        return {
            "proposal_id": query.proposal_id,
            "description": proposal.description,
            "vote_count": proposal.vote_count,
        }


class GetVoterHandler:
    def __init__(self, election: Election):
        self.election = election

    def handle(self, query: GetVoterQuery):
        record = self.election.get_voter(query.caller, query.identity)
        if record is None:
            return None
        return {
            "identity": query.identity,
            "is_registered": record.is_registered,
            "has_voted": record.has_voted,
            "voted_proposal_id": record.voted_proposal_id,
        }


class GetWinningProposalIdHandler:
    def __init__(self, election: Election):
        self.election = election

    def handle(self, query: GetWinningProposalIdQuery):
        return self.election.get_winning_proposal_id()


class GetWinningProposalHandler:
    def __init__(self, election: Election):
        self.election = election

    def handle(self, query: GetWinningProposalQuery):
        # proposals are frozen once votes are tallied
        proposal_id = self.election.get_winning_proposal_id()
        proposal = self.election.get_proposal(proposal_id)
        return {
            "proposal_id": proposal_id,
            "description": proposal.description,
            "vote_count": proposal.vote_count,
        }


class GetEventsHandler:
    def __init__(self, event_log):
        self.event_log = event_log

    def handle(self, query: GetEventsQuery):
        return [event.model_dump(mode="json") for event in self.event_log.all()]


class CommandBus:
    def __init__(self):
        self.handlers = {}

    def register_handler(self, command_type, handler):
        self.handlers[command_type] = handler

    def handle(self, command):
        handler = self.handlers.get(type(command))
        if handler is None:
            raise ValueError(f"No handler registered for {type(command).__name__}")
        return handler.handle(command)


def build_command_bus(election: Election) -> CommandBus:
    command_bus = CommandBus()
    transition_handler = WorkflowTransitionHandler(election)
    command_bus.register_handler(RegisterVoterCommand, RegisterVoterHandler(election))
    for command_type in WorkflowTransitionHandler.transitions:
        command_bus.register_handler(command_type, transition_handler)
    command_bus.register_handler(CountVotesCommand, CountVotesHandler(election))
    command_bus.register_handler(RegisterProposalCommand, RegisterProposalHandler(election))
    command_bus.register_handler(CastVoteCommand, CastVoteHandler(election))
    return command_bus


def build_query_bus(election: Election, event_log) -> QueryBus:
    query_bus = QueryBus()
    query_bus.register_handler(GetWorkflowStatusQuery, GetWorkflowStatusHandler(election))
    query_bus.register_handler(GetProposalsQuery, GetProposalsHandler(election))
    query_bus.register_handler(GetProposalQuery, GetProposalHandler(election))
    query_bus.register_handler(GetVoterQuery, GetVoterHandler(election))
    query_bus.register_handler(GetWinningProposalIdQuery, GetWinningProposalIdHandler(election))
    query_bus.register_handler(GetWinningProposalQuery, GetWinningProposalHandler(election))
    query_bus.register_handler(GetEventsQuery, GetEventsHandler(event_log))
    return query_bus
