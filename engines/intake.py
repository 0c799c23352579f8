"""
Hawaii Growth Calculator: Intake Validation
Checks the five questionnaire sections before anything is calculated.
Structural problems are reported back to the caller as an IntakeError (HTTP 400);
enum values are NOT checked here, the estimator defaults unknown ones.
"""
import copy
import re

SECTIONS = ('companyInfo', 'techAssessment', 'growthGoals', 'preferences', 'contactInfo')

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
PHONE_RE = re.compile(r'^(\+1)?[\s.-]?\(?[0-9]{3}\)?[\s.-]?[0-9]{3}[\s.-]?[0-9]{4}$')


class IntakeError(ValueError):
    """Submission rejected before calculation."""

    def __init__(self, errors, missing_sections=None):
        self.errors = errors
        self.missing_sections = list(missing_sections or [])
        if self.missing_sections:
            msg = 'Missing required fields'
        else:
            msg = f"Invalid submission: {len(errors)} field error(s)"
        super().__init__(msg)

    def to_dict(self):
        return {'error': str(self), 'missingSections': self.missing_sections, 'errors': self.errors}


# ── Field helpers: each returns an error message or None ──

def _is_number(v):
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _text(v, min_len=1, msg='Required'):
    if not isinstance(v, str) or len(v.strip()) < min_len:
        return msg
    return None


def _string_list(v, msg):
    if not isinstance(v, list) or not v or not all(isinstance(s, str) and s for s in v):
        return msg
    return None


def _score(v):
    if not _is_number(v) or not 1 <= v <= 5:
        return 'Must be a number between 1 and 5'
    return None


# ══════════════════════════════════════════════════════════════
#  SECTION VALIDATORS
# ══════════════════════════════════════════════════════════════

def _check_company(s):
    errors = {}
    for field, err in (
        ('companyName', _text(s.get('companyName'), 2, 'Company name must be at least 2 characters')),
        ('industry', _text(s.get('industry'), msg='Please select an industry')),
        ('companySize', _text(s.get('companySize'), msg='Please select company size')),
        ('location', _text(s.get('location'), msg='Please select location')),
        ('currentPainPoints', _string_list(s.get('currentPainPoints'), 'Please select at least one pain point')),
    ):
        if err: errors[field] = err
    for opt in ('revenueRange', 'growthStage'):
        if s.get(opt) is not None and not isinstance(s.get(opt), str):
            errors[opt] = 'Must be text'
    return errors


def _check_tech(s):
    errors = {}
    tools = s.get('currentTools', {})
    if not isinstance(tools, dict):
        errors['currentTools'] = 'Must map category to a list of tools'
    else:
        for cat, entries in tools.items():
            if not isinstance(entries, list):
                errors[f'currentTools.{cat}'] = 'Must be a list of tools'
                continue
            for i, t in enumerate(entries):
                key = f'currentTools.{cat}[{i}]'
                if not isinstance(t, dict) or not isinstance(t.get('name'), str):
                    errors[key] = 'Tool needs a name'
                elif not _is_number(t.get('monthlyCost')) or t['monthlyCost'] < 0:
                    errors[key] = 'monthlyCost must be 0 or more'
                elif _score(t.get('satisfaction')):
                    errors[key] = 'satisfaction must be between 1 and 5'

    total = s.get('totalMonthlyCost')
    if total is not None and (not _is_number(total) or total < 0):
        errors['totalMonthlyCost'] = 'Must be 0 or more'

    scores = s.get('satisfactionScores', {})
    if not isinstance(scores, dict):
        errors['satisfactionScores'] = 'Must map category to a score'
    else:
        for cat, v in scores.items():
            err = _score(v)
            if err: errors[f'satisfactionScores.{cat}'] = err

    software = s.get('currentSoftware')
    if software is not None and not isinstance(software, list):
        errors['currentSoftware'] = 'Must be a list of tool names'
    return errors


def _check_goals(s):
    errors = {}
    for field, msg in (
        ('businessObjectives', 'Please select at least one objective'),
        ('techBarriers', 'Please select at least one barrier'),
        ('priorityAreas', 'Please select at least one priority area'),
    ):
        err = _string_list(s.get(field), msg)
        if err: errors[field] = err
    return errors


def _check_preferences(s):
    errors = {}
    for field, msg in (
        ('budgetRange', 'Please select a budget range'),
        ('timeline', 'Please select a timeline'),
        ('implementationType', 'Please select implementation type'),
    ):
        err = _text(s.get(field), msg=msg)
        if err: errors[field] = err
    err = _string_list(s.get('decisionMakers'), 'Please select at least one decision maker')
    if err: errors['decisionMakers'] = err
    return errors


def _check_contact(s):
    errors = {}
    for field, label in (('firstName', 'First name'), ('lastName', 'Last name')):
        err = _text(s.get(field), 2, f'{label} must be at least 2 characters')
        if err: errors[field] = err
    email = s.get('email')
    if not isinstance(email, str) or not EMAIL_RE.match(email.strip()):
        errors['email'] = 'Please enter a valid email address'
    phone = s.get('phone')
    if phone not in (None, '') and (not isinstance(phone, str) or not PHONE_RE.match(phone.strip())):
        errors['phone'] = 'Please enter a valid phone number'
    if not isinstance(s.get('marketingConsent'), bool):
        errors['marketingConsent'] = 'Must be true or false'
    return errors


SECTION_CHECKS = {
    'companyInfo': _check_company,
    'techAssessment': _check_tech,
    'growthGoals': _check_goals,
    'preferences': _check_preferences,
    'contactInfo': _check_contact,
}


def validate_section(name, section):
    """Validate one form step. Returns the dict of field errors (empty = valid)."""
    if name not in SECTION_CHECKS:
        raise KeyError(f"Unknown section '{name}'")
    if not isinstance(section, dict):
        return {name: 'Section must be an object'}
    return SECTION_CHECKS[name](section)


def validate_submission(payload):
    """Full submission check. Returns a normalised deep copy; raises IntakeError."""
    if not isinstance(payload, dict):
        raise IntakeError({}, missing_sections=list(SECTIONS))
    missing = [s for s in SECTIONS if not payload.get(s)]
    if missing:
        raise IntakeError({}, missing_sections=missing)

    errors = {}
    for name in SECTIONS:
        for field, msg in validate_section(name, payload[name]).items():
            errors[f'{name}.{field}'] = msg
    if errors:
        raise IntakeError(errors)

    return normalize(payload)


def normalize(payload):
    data = copy.deepcopy(payload)
    tech = data['techAssessment']
    tech.setdefault('currentTools', {})
    tech.setdefault('satisfactionScores', {})
    if tech.get('totalMonthlyCost') is None:
        tech['totalMonthlyCost'] = sum(
            t['monthlyCost'] for entries in tech['currentTools'].values() for t in entries
        )
    contact = data['contactInfo']
    contact['email'] = contact['email'].strip().lower()
    return data
