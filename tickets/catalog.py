from dataclasses import dataclass


@dataclass(frozen=True)
class TicketType:
    value: str
    label: str
    requires_details: bool
    short_label: str


TICKET_TYPES = [
    TicketType('zenox_exam_not_found', 'Zenox Exam Not Found', True, 'Exam Not Found'),
    TicketType('zenox_questions_not_visible', 'Zenox Student Exam – Questions not visible', True,
               'Questions Not Visible'),
    TicketType('technical_issue', 'Technical Issue', False, 'Technical Issue'),
    TicketType('other', 'Other', False, 'Other'),
]

TICKET_TYPES_BY_VALUE = {ticket_type.value: ticket_type for ticket_type in TICKET_TYPES}

# Only ever required together, and only for types flagged requires_details
DETAIL_FIELDS = ('subject_name', 'student_name', 'student_mobile', 'student_reg_number')

STATUS_PENDING = 'pending'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_RESOLVED = 'resolved'
STATUS_CLOSED = 'closed'

TICKET_STATUSES = [STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_RESOLVED, STATUS_CLOSED]

PRIORITY_LOW = 'low'
PRIORITY_MEDIUM = 'medium'
PRIORITY_HIGH = 'high'
PRIORITY_URGENT = 'urgent'

TICKET_PRIORITIES = [PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH, PRIORITY_URGENT]

PRIORITY_ICONS = {
    PRIORITY_LOW: '⚪',
    PRIORITY_MEDIUM: '🔵',
    PRIORITY_HIGH: '🟠',
    PRIORITY_URGENT: '🔴',
}

STATUS_ICONS = {
    STATUS_PENDING: '🟡',
    STATUS_IN_PROGRESS: '🔧',
    STATUS_RESOLVED: '✅',
    STATUS_CLOSED: '🔒',
}


def get_ticket_type(value):
    return TICKET_TYPES_BY_VALUE.get(value)


def type_label(value, short=False):
    ticket_type = get_ticket_type(value)
    if ticket_type is None:
        return value
    return ticket_type.short_label if short else ticket_type.label
