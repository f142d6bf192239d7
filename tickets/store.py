import logging
import uuid

from config import Config
from database.models import Ticket, utc_now
from database.storage import get_storage
from errors import ValidationError
from tickets.catalog import DETAIL_FIELDS, PRIORITY_MEDIUM, STATUS_PENDING, type_label
from validation.rules import is_detail_required, validate_ticket_input

logger = logging.getLogger(__name__)

TICKET_INPUT_FIELDS = ('ticket_type', 'priority', 'remarks') + DETAIL_FIELDS
EDITABLE_TICKET_FIELDS = ('status', 'priority', 'remarks') + DETAIL_FIELDS


class TicketStore:
    """Tickets ordered newest first, persisted as one snapshot"""

    def __init__(self, storage=None, storage_name=Config.TICKET_STORAGE_NAME):
        self.storage = storage or get_storage()
        self.storage_name = storage_name
        self._tickets = []
        self.reload()

    def reload(self):
        snapshot = self.storage.load(self.storage_name, default={}) or {}
        self._tickets = [Ticket.from_dict(item) for item in snapshot.get('tickets', [])]
        logger.debug("🔧 Debug: Loaded %d tickets", len(self._tickets))

    def _persist(self):
        self.storage.save(self.storage_name, {
            'tickets': [ticket.to_dict() for ticket in self._tickets],
        })

    @property
    def tickets(self):
        return [ticket.copy() for ticket in self._tickets]

    def __len__(self):
        return len(self._tickets)

    def create_ticket(self, fields, created_by=None, user_mobile=None):
        data = {key: fields.get(key) for key in TICKET_INPUT_FIELDS}
        data['priority'] = data['priority'] or PRIORITY_MEDIUM

        result = validate_ticket_input(data)
        if not result.ok:
            logger.debug("🔧 Debug: Ticket rejected: %s", result.errors)
            raise ValidationError(result.errors)

        if not is_detail_required(data['ticket_type']):
            for name in DETAIL_FIELDS:
                data[name] = None

        ticket = Ticket(
            id=uuid.uuid4().hex,
            status=STATUS_PENDING,
            created_by=created_by,
            user_mobile=user_mobile,
            created_at=utc_now(),
            **data,
        )
        self._tickets.insert(0, ticket)
        self._persist()
        logger.info("Created ticket %s (%s, %s)", ticket.id, ticket.ticket_type, ticket.priority)
        return ticket.copy()

    def _index_of(self, ticket_id):
        return next((i for i, ticket in enumerate(self._tickets) if ticket.id == ticket_id), None)

    def update_ticket(self, ticket_id, partial_fields):
        """Merge edits into a ticket; unknown ids are ignored"""
        index = self._index_of(ticket_id)
        if index is None:
            logger.debug("🔧 Debug: Update skipped, ticket %s not found", ticket_id)
            return None

        changes = {key: value for key, value in partial_fields.items() if key in EDITABLE_TICKET_FIELDS}
        updated = self._tickets[index].copy(updated_at=utc_now(), **changes)
        self._tickets[index] = updated
        self._persist()
        logger.info("Updated ticket %s: %s", ticket_id, ', '.join(sorted(changes)) or 'no fields')
        return updated.copy()

    def delete_ticket(self, ticket_id):
        index = self._index_of(ticket_id)
        if index is None:
            logger.debug("🔧 Debug: Delete skipped, ticket %s not found", ticket_id)
            return False
        del self._tickets[index]
        self._persist()
        logger.info("Deleted ticket %s", ticket_id)
        return True

    def get_by_id(self, ticket_id):
        index = self._index_of(ticket_id)
        return self._tickets[index].copy() if index is not None else None

    def list_by_status(self, status):
        return [ticket.copy() for ticket in self._tickets if ticket.status == status]

    def search(self, term):
        """Case-insensitive match across the columns shown in the ticket table"""
        term = (term or '').strip().lower()
        if not term:
            return self.tickets

        def haystack(ticket):
            values = (
                ticket.id, type_label(ticket.ticket_type), ticket.priority, ticket.status,
                ticket.created_by, ticket.user_mobile, ticket.subject_name, ticket.student_name,
                ticket.student_mobile, ticket.student_reg_number, ticket.remarks,
            )
            return ' '.join(value for value in values if value).lower()

        return [ticket.copy() for ticket in self._tickets if term in haystack(ticket)]

    def clear(self):
        self._tickets = []
        self._persist()
        logger.info("All tickets cleared")
