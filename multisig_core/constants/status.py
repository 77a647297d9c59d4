from enum import Enum


class ProcessStatus(str, Enum):
    """Status of process"""

    NOT_STARTED = "not_started"
    LOADING_GROUP = "loading_group"
    VALIDATING = "validating"
    GROUP_CONFIGURED = "group_configured"
    PROPOSAL_CREATED = "proposal_created"
    APPROVAL_RECORDED = "approval_recorded"
    DISPATCHING = "dispatching"
    EXECUTED = "executed"
    GROUP_RECONFIGURED = "group_reconfigured"
    GROUP_CLOSED = "group_closed"
    COMPLETED = "completed"
    FAILED = "failed"
