"""
Status lifecycle rules for volunteers, incidents and assignments.

Each map lists, for every status, the statuses it may move to.
Setting a record to its current status is allowed unless that status is
terminal (it has no outgoing moves).
"""

from enum import Enum

from civil_defence.core.enums import AssignmentStatus, IncidentStatus, VolunteerStatus
from civil_defence.core.exceptions import InvalidStatusTransitionError

VOLUNTEER_TRANSITIONS = {
    VolunteerStatus.PENDING: [VolunteerStatus.APPROVED, VolunteerStatus.REJECTED],
    VolunteerStatus.APPROVED: [VolunteerStatus.REJECTED],
    VolunteerStatus.REJECTED: [VolunteerStatus.PENDING, VolunteerStatus.APPROVED],
}

INCIDENT_TRANSITIONS = {
    IncidentStatus.REPORTED: [
        IncidentStatus.ASSIGNED,
        IncidentStatus.IN_PROGRESS,
        IncidentStatus.CLOSED,
    ],
    IncidentStatus.ASSIGNED: [
        IncidentStatus.IN_PROGRESS,
        IncidentStatus.REPORTED,
        IncidentStatus.CLOSED,
    ],
    IncidentStatus.IN_PROGRESS: [IncidentStatus.RESOLVED, IncidentStatus.ASSIGNED],
    IncidentStatus.RESOLVED: [IncidentStatus.CLOSED, IncidentStatus.IN_PROGRESS],
    IncidentStatus.CLOSED: [],
}

ASSIGNMENT_TRANSITIONS = {
    AssignmentStatus.ASSIGNED: [AssignmentStatus.ACCEPTED, AssignmentStatus.DECLINED],
    AssignmentStatus.ACCEPTED: [AssignmentStatus.IN_PROGRESS, AssignmentStatus.DECLINED],
    AssignmentStatus.IN_PROGRESS: [AssignmentStatus.COMPLETED],
    AssignmentStatus.COMPLETED: [],
    AssignmentStatus.DECLINED: [],
}

_TRANSITIONS = {
    "volunteer": VOLUNTEER_TRANSITIONS,
    "incident": INCIDENT_TRANSITIONS,
    "assignment": ASSIGNMENT_TRANSITIONS,
}


def _value(status) -> str:
    return status.value if isinstance(status, Enum) else status


def _allowed(resource: str, current_status: str):
    for status, allowed in _TRANSITIONS[resource].items():
        if status.value == current_status:
            return {s.value for s in allowed}
    return None


def can_transition(resource: str, current_status: str, new_status: str) -> bool:
    current_status, new_status = _value(current_status), _value(new_status)
    allowed = _allowed(resource, current_status)
    if not allowed:
        return False
    return current_status == new_status or new_status in allowed


def validate_transition(resource: str, current_status: str, new_status: str) -> None:
    """
    Validate a status change for a resource.

    Args:
        resource: "volunteer", "incident" or "assignment"
        current_status: Stored status
        new_status: Requested status

    Raises:
        InvalidStatusTransitionError (400) if the move is not allowed
    """
    if not can_transition(resource, current_status, new_status):
        raise InvalidStatusTransitionError(
            resource=resource,
            current_status=_value(current_status),
            new_status=_value(new_status),
        )
