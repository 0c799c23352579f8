"""
Hawaii Growth Calculator: Lead Delivery
Pushes a finished calculation to HubSpot and e-mails the prospect their results.

Both sinks are best effort: deliver_lead() catches and logs every failure so the
already-computed result is never affected. HubSpot contacts are keyed by e-mail
(search → update, else create), so re-submissions update one record.
"""
import logging
import smtplib
from datetime import datetime, timezone
from email.message import EmailMessage

import requests

from engines.reference_tables import round_half_up

NOTE_TO_CONTACT_ASSOCIATION = 202

TIMELINE_LABELS = {
    'immediate': 'I need help immediately (ASAP)',
    '3-months': 'Within the next 3 months',
    '6-months': 'Just exploring options',
    '12-months': 'Not sure yet',
}


class DeliveryError(RuntimeError):
    """A sink call failed; always caught by deliver_lead()."""


def lead_score(results):
    return round_half_up(results['financials']['threeYearROIPercent'] / 10)


def _joined(items, fallback='Not specified'):
    return ', '.join(items) if items else fallback


# ══════════════════════════════════════════════════════════════
#  HUBSPOT
# ══════════════════════════════════════════════════════════════

def build_note(data, results, tracking_id, now=None):
    """Plain-text engagement note with the full submission and projection."""
    now = now or datetime.now(timezone.utc)
    ci = data['companyInfo']; ta = data['techAssessment']
    gg = data['growthGoals']; pr = data['preferences']
    fin = results['financials']
    scores = list((ta.get('satisfactionScores') or {}).values())
    avg_sat = sum(scores) / len(scores) if scores else 0
    payback = fin['paybackPeriodMonths']
    return '\n'.join([
        'Hawaii Business Growth Calculator Submission',
        '=' * 42,
        'Source: Hawaii Growth Calculator',
        f'Tracking ID: {tracking_id}',
        f'Date: {now.isoformat()}',
        '',
        'Company Information:',
        f"- Industry: {ci.get('industry')}",
        f"- Size: {ci.get('companySize')}",
        f"- Location: {ci.get('location') or 'Hawaii'}",
        f"- Revenue Range: {ci.get('revenueRange') or 'Not specified'}",
        f"- Growth Stage: {ci.get('growthStage') or 'Not specified'}",
        '',
        'Current Technology:',
        f"- Monthly Tech Spend: ${ta.get('totalMonthlyCost', 0):,.0f}",
        f'- Tech Satisfaction Score: {round_half_up(avg_sat)}/5',
        f"- Pain Points: {_joined(ci.get('currentPainPoints'), 'None specified')}",
        '',
        'Growth Goals:',
        f"- Business Objectives: {_joined(gg.get('businessObjectives'))}",
        f"- Tech Barriers: {_joined(gg.get('techBarriers'))}",
        f"- Priority Areas: {_joined(gg.get('priorityAreas'))}",
        '',
        f"Recommended Solution: {results['recommendedSolution']['title']}",
        '',
        'Financial Analysis:',
        f"- Estimated Monthly Savings: ${fin['estimatedMonthlySavings']:,}",
        f"- Estimated Annual Savings: ${fin['estimatedAnnualSavings']:,}",
        f"- 3-Year ROI: {fin['threeYearROIPercent']}%",
        f"- Payback Period: {'Never' if payback >= 999 else f'{payback} months'}",
        f"- Total 3-Year Value: ${fin['totalThreeYearValue']:,}",
        f'- Lead Score: {lead_score(results)}',
        '',
        'Preferences:',
        f"- Budget Range: {pr.get('budgetRange')}",
        f"- Timeline: {TIMELINE_LABELS.get(pr.get('timeline'), pr.get('timeline'))}",
        f"- Implementation Type: {pr.get('implementationType')}",
        f"- Decision Makers: {_joined(pr.get('decisionMakers'))}",
    ])


def contact_properties(data, config):
    ci = data['contactInfo']
    props = {
        'email': ci['email'],
        'firstname': ci.get('firstName'),
        'lastname': ci.get('lastName'),
        'phone': ci.get('phone'),
        'company': data['companyInfo'].get('companyName'),
        'jobtitle': ci.get('title'),
        'hs_lead_status': 'NEW',
        'website': config['siteUrl'],
        'lifecyclestage': 'lead',
    }
    return {k: v for k, v in props.items() if v not in (None, '')}


def _hubspot(method, path, config, payload):
    resp = requests.request(
        method, f"{config['hubspotApiBase']}{path}", json=payload,
        headers={'Authorization': f"Bearer {config['hubspotAccessToken']}"},
        timeout=config['requestTimeout'],
    )
    if resp.status_code >= 400:
        raise DeliveryError(f'HubSpot {method} {path} → {resp.status_code}: {resp.text[:200]}')
    return resp.json() if resp.content else {}


def find_contact_id(email, config):
    body = {
        'filterGroups': [{'filters': [{'propertyName': 'email', 'operator': 'EQ', 'value': email}]}],
        'properties': ['email', 'firstname', 'lastname'],
        'limit': 1,
    }
    found = _hubspot('POST', '/crm/v3/objects/contacts/search', config, body).get('results') or []
    return found[0]['id'] if found else None


def upsert_contact(data, results, tracking_id, config):
    """Create or update the HubSpot contact for this e-mail and attach a note."""
    if not config.get('hubspotAccessToken'):
        raise DeliveryError('HubSpot not configured')
    props = contact_properties(data, config)

    try:
        contact_id = find_contact_id(props['email'], config)
    except (DeliveryError, requests.RequestException) as e:
        logging.warning(f"HubSpot search failed ({e}); creating contact instead")
        contact_id = None

    if contact_id:
        _hubspot('PATCH', f'/crm/v3/objects/contacts/{contact_id}', config, {'properties': props})
        action = 'updated'
    else:
        contact_id = _hubspot('POST', '/crm/v3/objects/contacts', config, {'properties': props})['id']
        action = 'created'
    logging.info(f"HubSpot contact {contact_id} {action} [{tracking_id}]")

    try:
        _hubspot('POST', '/crm/v3/objects/notes', config, {
            'properties': {
                'hs_note_body': build_note(data, results, tracking_id),
                'hs_timestamp': str(int(datetime.now(timezone.utc).timestamp() * 1000)),
            },
            'associations': [{
                'to': {'id': contact_id},
                'types': [{'associationCategory': 'HUBSPOT_DEFINED',
                           'associationTypeId': NOTE_TO_CONTACT_ASSOCIATION}],
            }],
        })
    except (DeliveryError, requests.RequestException) as e:
        logging.warning(f"HubSpot note for contact {contact_id} failed: {e}")

    return {'success': True, 'contactId': contact_id, 'action': action}


def submit_form(data, config):
    """HubSpot forms API: used when no API token is set or the API path fails."""
    portal, form = config.get('hubspotPortalId'), config.get('hubspotFormGuid')
    if not portal or not form:
        raise DeliveryError('HubSpot form not configured')
    ci = data['contactInfo']
    fields = [
        ('email', ci['email']), ('firstname', ci.get('firstName', '')),
        ('lastname', ci.get('lastName', '')), ('phone', ci.get('phone') or ''),
        ('company', data['companyInfo'].get('companyName', '')), ('jobtitle', ci.get('title') or ''),
    ]
    resp = requests.post(
        f"{config['hubspotFormsBase']}/submissions/v3/integration/submit/{portal}/{form}",
        json={
            'fields': [{'name': n, 'value': v} for n, v in fields],
            'context': {'pageUri': config['siteUrl'],
                        'pageName': 'Hawaii Business Growth Calculator Results'},
        },
        timeout=config['requestTimeout'],
    )
    if not resp.ok:
        raise DeliveryError(f'HubSpot form → {resp.status_code}: {resp.text[:200]}')
    return {'success': True}


def send_to_crm(data, results, tracking_id, config):
    if config.get('hubspotAccessToken'):
        try:
            return upsert_contact(data, results, tracking_id, config)
        except (DeliveryError, requests.RequestException) as e:
            logging.error(f"HubSpot API error: {e}")
            if not (config.get('hubspotPortalId') and config.get('hubspotFormGuid')):
                raise
    elif not (config.get('hubspotPortalId') and config.get('hubspotFormGuid')):
        logging.warning('No HubSpot configuration found. Lead not sent to CRM.')
        return {'success': False, 'skipped': True}
    return {**submit_form(data, config), 'via': 'form'}


# ══════════════════════════════════════════════════════════════
#  E-MAIL
# ══════════════════════════════════════════════════════════════

def build_email(data, results, tracking_id, config):
    ci = data['contactInfo']; fin = results['financials']
    name = f"{ci.get('firstName', '')} {ci.get('lastName', '')}".strip()
    company = data['companyInfo'].get('companyName', '')
    payback = fin['paybackPeriodMonths']
    rows = [
        ('Recommended Solution', results['recommendedSolution']['title']),
        ('Monthly Investment', f"${fin['monthlyInvestment']:,}"),
        ('Estimated Monthly Savings', f"${fin['estimatedMonthlySavings']:,}"),
        ('Annual Savings', f"${fin['estimatedAnnualSavings']:,}"),
        ('Payback Period', 'Not reached within horizon' if payback >= 999 else f'{payback} months'),
        ('3-Year ROI', f"{fin['threeYearROIPercent']}%"),
        ('Total 3-Year Value', f"${fin['totalThreeYearValue']:,}"),
    ]
    cell = 'padding: 10px; border-bottom: 1px solid #ddd;'
    table = '\n'.join(
        f'<tr><td style="{cell}"><strong>{k}:</strong></td><td style="{cell}">{v}</td></tr>' for k, v in rows
    )
    html = f"""
<h2>Aloha {name},</h2>
<p>Thank you for using the Hawaii Business Growth Calculator! Based on your assessment, we've identified significant opportunities to transform your business.</p>
<h3>Your Personalized Results:</h3>
<table style="border-collapse: collapse; width: 100%; margin: 20px 0;">
{table}
</table>
<h3>Next Steps:</h3>
<ol>
  <li>Schedule a free consultation to discuss your results in detail</li>
  <li>Get a customized implementation roadmap for your business</li>
  <li>Learn about available incentives and financing options</li>
</ol>
<p><a href="{config['scheduleUrl']}?ref={tracking_id}">Schedule Your Free Consultation</a></p>
<p style="font-size: 14px; color: #666;">Reference ID: {tracking_id}<br>
LeniLani Consulting - Hawaii's Premier AI &amp; Technology Partner</p>
"""
    return {
        'to': ci['email'],
        'subject': f'Your Hawaii Business Growth Calculator Results - {company}',
        'html': html,
    }


def send_results_email(data, results, tracking_id, config):
    message = build_email(data, results, tracking_id, config)
    if not config.get('smtpHost'):
        logging.info(f"Email would be sent to {message['to']}: {message['subject']}")
        return {'success': True, 'sent': False}

    msg = EmailMessage()
    msg['From'] = config['emailFrom']
    msg['To'] = message['to']
    msg['Subject'] = message['subject']
    msg.set_content(f"{message['subject']}\n\nOpen this message in an HTML-capable mail client to view your results.\nReference ID: {tracking_id}")
    msg.add_alternative(message['html'], subtype='html')
    try:
        with smtplib.SMTP(config['smtpHost'], config['smtpPort'], timeout=config['requestTimeout']) as smtp:
            smtp.starttls()
            if config.get('smtpUser'):
                smtp.login(config['smtpUser'], config['smtpPassword'] or '')
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        raise DeliveryError(f'SMTP send failed: {e}') from e
    logging.info(f"Results email sent to {message['to']} [{tracking_id}]")
    return {'success': True, 'sent': True}


# ══════════════════════════════════════════════════════════════
#  ENTRY POINT
# ══════════════════════════════════════════════════════════════

def deliver_lead(data, results, tracking_id, config):
    """Run every sink; never raises. Returns a per-sink status summary."""
    summary = {'trackingId': tracking_id, 'leadScore': lead_score(results)}
    for sink, fn in (('crm', send_to_crm), ('email', send_results_email)):
        try:
            summary[sink] = fn(data, results, tracking_id, config)
        except Exception as e:
            logging.exception(f"{sink} delivery failed [{tracking_id}]")
            summary[sink] = {'success': False, 'error': str(e)}
    return summary
