import os
import re
import logging
from datetime import datetime
from typing import List, Dict, Optional, Union

logger = logging.getLogger(__name__)


def validate_email(email: str) -> bool:
    """Validate email address format"""
    if not email:
        return False

    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def validate_phone(phone: str) -> bool:
    """Validate phone number format"""
    if not phone:
        return False

    # Remove spaces, dashes, parentheses
    clean_phone = re.sub(r'[\s\-\(\)]', '', phone)

    pattern = r'^\+?[\d]{7,15}$'
    return bool(re.match(pattern, clean_phone))


def split_full_name(name: Optional[str]) -> tuple[str, str]:
    """Split "Jane van Doe" into ("Jane", "van Doe")"""
    if not name:
        return '', ''

    parts = name.strip().split()
    if not parts:
        return '', ''
    return parts[0], ' '.join(parts[1:])


def normalize_skills(skills: Union[str, List[str], None]) -> List[str]:
    """Accept a list or a comma separated string and return a clean list"""
    if not skills:
        return []

    if isinstance(skills, str):
        skills = skills.split(',')

    return [str(skill).strip() for skill in skills if str(skill).strip()]


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse ISO-8601 timestamps including the trailing 'Z' form"""
    if not value:
        return None
    if isinstance(value, datetime):
        return value

    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    # Columns are naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed


def truncate_text(text: str, max_length: int = 200) -> str:
    """Truncate text to specified length with ellipsis"""
    if not text or len(text) <= max_length:
        return text

    return text[:max_length - 3] + "..."


def redact_binary(payload: Dict, keys=('resume_binary', 'resume_file')) -> Dict:
    """Copy of payload safe for logging: binary resume content replaced by a marker"""
    safe = dict(payload or {})
    for key in keys:
        if key in safe:
            safe[key] = '[BINARY_DATA_PRESENT]' if safe[key] else '[NO_RESUME]'
    return safe


def log_processing_time(func):
    """Decorator to log function processing time"""
    def wrapper(*args, **kwargs):
        start_time = datetime.now()

        try:
            result = func(*args, **kwargs)
            processing_time = (datetime.now() - start_time).total_seconds()

            logger.info(f"{func.__name__} completed in {processing_time:.2f} seconds")
            return result

        except Exception as e:
            processing_time = (datetime.now() - start_time).total_seconds()

            logger.error(f"{func.__name__} failed after {processing_time:.2f} seconds: {e}")
            raise

    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper


class ConfigHelper:
    """Helper class for configuration management"""

    @staticmethod
    def get_workflow_config():
        """Workflow engine (n8n) connection settings"""
        base_url = os.getenv('WORKFLOW_BASE_URL', 'http://localhost:5678').rstrip('/')
        return {
            'base_url': base_url,
            'timeout': float(os.getenv('WORKFLOW_TIMEOUT', '30')),
            'mass_email_url': os.getenv('WORKFLOW_MASS_EMAIL_URL'),
            'ai_scheduler_endpoint': os.getenv('WORKFLOW_AI_SCHEDULER_ENDPOINT',
                                               '/0c8f9f17-f5f3-4b5d-85e7-071ced0213ae'),
        }

    @staticmethod
    def get_smtp_config():
        """SMTP settings used for scheduled reports"""
        return {
            'enabled': os.getenv('SMTP_ENABLED', 'false').lower() == 'true',
            'smtp_server': os.getenv('SMTP_SERVER', 'smtp.gmail.com'),
            'smtp_port': int(os.getenv('SMTP_PORT', '587')),
            'smtp_user': os.getenv('SMTP_USER', ''),
            'smtp_password': os.getenv('SMTP_PASSWORD', ''),
            'recipients': [r.strip() for r in os.getenv('REPORT_RECIPIENTS', '').split(',') if r.strip()],
        }

    @staticmethod
    def get_gmail_config():
        """Get Gmail OAuth configuration from environment"""
        return {
            'client_id': os.getenv('GMAIL_CLIENT_ID', ''),
            'client_secret': os.getenv('GMAIL_CLIENT_SECRET', ''),
            'scopes': 'https://www.googleapis.com/auth/gmail.send https://www.googleapis.com/auth/userinfo.email',
        }

    @staticmethod
    def get_public_base_url():
        """Base URL used when building candidate application links"""
        return os.getenv('PUBLIC_BASE_URL', 'http://localhost:5000').rstrip('/')


# Validation helpers
def validate_candidate_data(data: Dict, partial: bool = False) -> List[str]:
    """Validate candidate data and return list of errors"""
    errors = []

    if not partial:
        if not data.get('first_name'):
            errors.append("First name is required")
        if not data.get('email'):
            errors.append("Email is required")
        if not data.get('position'):
            errors.append("Position is required")

    email = data.get('email')
    if email and not validate_email(email):
        errors.append("Invalid email format")

    phone = data.get('phone')
    if phone and not validate_phone(phone):
        errors.append("Invalid phone number format")

    rating = data.get('rating')
    if rating is not None:
        try:
            if not 0 <= float(rating) <= 5:
                errors.append("Rating must be between 0 and 5")
        except (TypeError, ValueError):
            errors.append("Rating must be a number")

    return errors


def validate_job_data(data: Dict, partial: bool = False) -> List[str]:
    """Validate job data and return list of errors"""
    errors = []

    if not partial:
        if not data.get('title'):
            errors.append("Job title is required")
        if not data.get('description'):
            errors.append("Job description is required")

    requirements = data.get('requirements')
    if requirements is not None and not isinstance(requirements, (list, str)):
        errors.append("Job requirements must be a list")

    return errors
