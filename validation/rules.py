"""
Validation rules for account and ticket input.

Pure functions only. Each validator walks every rule and reports all the
fields that fail, one message per field, so a form can flag every problem
in a single pass.
"""

import re
from dataclasses import dataclass, field
from typing import Dict

from tickets.catalog import DETAIL_FIELDS, TICKET_PRIORITIES, get_ticket_type

MOBILE_PATTERN = re.compile(r'^[0-9]{10}$')
PASSWORD_SPECIAL_CHARACTERS = '@$!%*?&'

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
REMARKS_MIN_LENGTH = 10
REMARKS_MAX_LENGTH = 500
STUDENT_NAME_MIN_LENGTH = 2

DETAIL_FIELD_LABELS = {
    'subject_name': 'Subject name',
    'student_name': 'Student name',
    'student_mobile': 'Student mobile',
    'student_reg_number': 'Registration number',
}

STRENGTH_LABELS = {
    0: '',
    1: 'Very Weak',
    2: 'Weak',
    3: 'Fair',
    4: 'Good',
    5: 'Strong',
}


@dataclass
class ValidationResult:
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class PasswordStrength:
    score: int
    label: str
    checks: Dict[str, bool]


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


def _is_text(value) -> bool:
    return isinstance(value, str)


def is_valid_mobile(value) -> bool:
    return _is_text(value) and bool(MOBILE_PATTERN.match(value))


def is_detail_required(ticket_type) -> bool:
    """Unknown types never require the detail bundle"""
    entry = get_ticket_type(ticket_type)
    return bool(entry and entry.requires_details)


def password_checks(password) -> Dict[str, bool]:
    password = password or ''
    return {
        'length': len(password) >= PASSWORD_MIN_LENGTH,
        'lowercase': bool(re.search(r'[a-z]', password)),
        'uppercase': bool(re.search(r'[A-Z]', password)),
        'number': bool(re.search(r'\d', password)),
        'special': any(char in PASSWORD_SPECIAL_CHARACTERS for char in password),
    }


def password_strength(password) -> PasswordStrength:
    """Score a password 0-5, one point per satisfied composition rule"""
    if not password:
        return PasswordStrength(score=0, label='', checks=password_checks(''))
    checks = password_checks(password)
    score = sum(1 for passed in checks.values() if passed)
    return PasswordStrength(score=score, label=STRENGTH_LABELS[score], checks=checks)


def _password_error(password):
    if _is_blank(password):
        return 'Password is required'
    if not _is_text(password):
        return 'Password must be text'
    checks = password_checks(password)
    if not checks['length']:
        return f'Password must be at least {PASSWORD_MIN_LENGTH} characters'
    if not all(checks.values()):
        return 'Password must contain uppercase, lowercase, number and special character'
    return None


def validate_account_input(fields) -> ValidationResult:
    """
    Validate signup, profile and password forms.

    Only the keys present in ``fields`` are checked: profile edits send
    username and mobile, password changes send password and confirm_password.
    """
    result = ValidationResult()

    if 'username' in fields:
        username = fields.get('username')
        if _is_blank(username):
            result.errors['username'] = 'Username is required'
        elif not _is_text(username):
            result.errors['username'] = 'Username must be text'
        elif len(username) < USERNAME_MIN_LENGTH:
            result.errors['username'] = f'Username must be at least {USERNAME_MIN_LENGTH} characters'
        elif len(username) > USERNAME_MAX_LENGTH:
            result.errors['username'] = f'Username must not exceed {USERNAME_MAX_LENGTH} characters'

    if 'mobile' in fields:
        mobile = fields.get('mobile')
        if _is_blank(mobile):
            result.errors['mobile'] = 'Mobile number is required'
        elif not is_valid_mobile(mobile):
            result.errors['mobile'] = 'Mobile number must be exactly 10 digits'

    if 'password' in fields:
        error = _password_error(fields.get('password'))
        if error:
            result.errors['password'] = error

    if 'confirm_password' in fields:
        confirm = fields.get('confirm_password')
        if _is_blank(confirm):
            result.errors['confirm_password'] = 'Confirm password is required'
        elif confirm != fields.get('password'):
            result.errors['confirm_password'] = 'Passwords must match'

    return result


def validate_login_input(fields) -> ValidationResult:
    result = ValidationResult()
    mobile = fields.get('mobile')
    if _is_blank(mobile):
        result.errors['mobile'] = 'Mobile number is required'
    elif not is_valid_mobile(mobile):
        result.errors['mobile'] = 'Mobile number must be exactly 10 digits'
    if _is_blank(fields.get('password')):
        result.errors['password'] = 'Password is required'
    return result


def validate_ticket_input(fields) -> ValidationResult:
    """Check a new ticket; detail fields are required only for detail-bearing types"""
    result = ValidationResult()

    ticket_type = fields.get('ticket_type')
    if _is_blank(ticket_type):
        result.errors['ticket_type'] = 'Please select a ticket type'
    elif get_ticket_type(ticket_type) is None:
        result.errors['ticket_type'] = f'Unknown ticket type: {ticket_type}'

    priority = fields.get('priority')
    if _is_blank(priority):
        result.errors['priority'] = 'Please select a priority level'
    elif priority not in TICKET_PRIORITIES:
        result.errors['priority'] = f'Unknown priority: {priority}'

    if is_detail_required(ticket_type):
        for name in DETAIL_FIELDS:
            value = fields.get(name)
            if _is_blank(value):
                result.errors[name] = f'{DETAIL_FIELD_LABELS[name]} is required'
            elif not _is_text(value):
                result.errors[name] = f'{DETAIL_FIELD_LABELS[name]} must be text'

        student_name = fields.get('student_name')
        if 'student_name' not in result.errors and len(student_name.strip()) < STUDENT_NAME_MIN_LENGTH:
            result.errors['student_name'] = (
                f'Student name must be at least {STUDENT_NAME_MIN_LENGTH} characters'
            )
        if 'student_mobile' not in result.errors and not is_valid_mobile(fields.get('student_mobile')):
            result.errors['student_mobile'] = 'Mobile number must be exactly 10 digits'

    remarks = fields.get('remarks')
    if _is_blank(remarks):
        result.errors['remarks'] = 'Remarks are required'
    elif not _is_text(remarks):
        result.errors['remarks'] = 'Remarks must be text'
    elif len(remarks) < REMARKS_MIN_LENGTH:
        result.errors['remarks'] = f'Remarks must be at least {REMARKS_MIN_LENGTH} characters'
    elif len(remarks) > REMARKS_MAX_LENGTH:
        result.errors['remarks'] = f'Remarks must not exceed {REMARKS_MAX_LENGTH} characters'

    return result
