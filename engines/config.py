"""
Hawaii Growth Calculator: Runtime Configuration
Everything comes from the environment; a local .env file is read first if present.
"""
import os

from dotenv import load_dotenv

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.path.join(ROOT_DIR, 'data')


def load_env_file(path=None):
    """Populate os.environ from a .env file; real env vars always win."""
    path = path or os.path.join(ROOT_DIR, '.env')
    if not os.path.exists(path):
        return False
    return load_dotenv(path, override=False)


def _flag(value, default):
    if value is None:
        return default
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def load_config(env=None):
    env = os.environ if env is None else env
    return {
        'hubspotAccessToken': env.get('HUBSPOT_ACCESS_TOKEN') or None,
        'hubspotPortalId': env.get('HUBSPOT_PORTAL_ID') or None,
        'hubspotFormGuid': env.get('HUBSPOT_FORM_GUID') or None,
        'hubspotApiBase': env.get('HUBSPOT_API_BASE', 'https://api.hubapi.com'),
        'hubspotFormsBase': env.get('HUBSPOT_FORMS_BASE', 'https://api.hsforms.com'),
        'smtpHost': env.get('SMTP_HOST') or None,
        'smtpPort': int(env.get('SMTP_PORT', 587)),
        'smtpUser': env.get('SMTP_USER') or None,
        'smtpPassword': env.get('SMTP_PASSWORD') or None,
        'emailFrom': env.get('EMAIL_FROM', 'calculator@lenilani.com'),
        'siteUrl': env.get('SITE_URL', 'https://hawaii-growth-calculator.vercel.app'),
        'scheduleUrl': env.get('SCHEDULE_URL', 'https://hawaii.lenilani.com/schedule'),
        'referenceTablesPath': env.get('REFERENCE_TABLES_PATH',
                                       os.path.join(DATA_DIR, 'config', 'reference_tables.xlsx')),
        'deliverInBackground': _flag(env.get('DELIVERY_IN_BACKGROUND'), True),
        'requestTimeout': float(env.get('HTTP_TIMEOUT', 10)),
        'logLevel': env.get('LOG_LEVEL', 'INFO').upper(),
    }
