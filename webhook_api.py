"""
Inbound webhook proxy. Each handler maps a request payload onto a workflow
engine call and returns ``(data, error)`` where ``error`` is None on success.
"""

import logging

from utils import normalize_skills, redact_binary, split_full_name, truncate_text
from workflow_client import WorkflowError, get_workflow_client

logger = logging.getLogger(__name__)


def _checked(result, default_error):
    if result.get('success') is False:
        raise WorkflowError(result.get('error') or default_error)
    return result


def handle_candidates(data):
    logger.info(f"Webhook: processing candidates request: {truncate_text(str(data))}")
    try:
        client = get_workflow_client()
        action = (data or {}).get('action', 'get_all')
        if action == 'update':
            result = client.update_candidate(data.get('candidate_id'),
                                             {k: v for k, v in data.items() if k not in ('action', 'candidate_id')})
        else:
            result = client.get_candidates()
        return _checked(result, 'Failed to process candidates webhook'), None
    except WorkflowError as e:
        logger.error(f"Webhook: candidates error: {e}")
        return None, str(e)


def handle_jobs(data):
    logger.info(f"Webhook: processing jobs request: {truncate_text(str(data))}")
    data = data or {}
    client = get_workflow_client()
    action = data.get('action')

    try:
        if action == 'get_all':
            result = client.get_jobs()
        elif action == 'create':
            result = client.create_job({k: v for k, v in data.items() if k != 'action'})
        elif action == 'update':
            updates = {k: v for k, v in data.items() if k not in ('action', 'job_id')}
            result = client.update_job(data.get('job_id'), updates)
        elif action == 'delete':
            result = client.delete_job(data.get('job_id'))
        else:
            return None, f"Unknown jobs action: {action}"

        return _checked(result, 'Failed to process jobs webhook'), None
    except WorkflowError as e:
        logger.error(f"Webhook: jobs error: {e}")
        return None, str(e)


def map_recruitment_form(data):
    """Normalize the public application form into the screener's fields"""
    first_name, last_name = split_full_name(data.get('name'))
    return {
        'first_name': data.get('first_name') or first_name,
        'last_name': data.get('last_name') or last_name,
        'email': data.get('email') or '',
        'phone': data.get('phone') or '',
        'position': data.get('position') or '',
        'experience': data.get('experience') or '',
        'skills': normalize_skills(data.get('skills')),
        'cover_letter': data.get('cover_letter') or '',
        'resume_file': data.get('resume_file') or data.get('resume_binary'),
        'resume_filename': data.get('resume_filename'),
        'job_id': data.get('job_id') or data.get('target_job_id'),
    }


def handle_recruitment_form(data):
    logger.info(f"Webhook: processing recruitment form submission: {redact_binary(data)}")
    try:
        form_data = map_recruitment_form(data or {})
        result = _checked(get_workflow_client().trigger_resume_screener(form_data),
                          'Failed to process recruitment form')
        screening = result.get('data') or {}
        return {
            **result,
            'success': True,
            'candidate_id': screening.get('candidate_id'),
            'screening_result': screening.get('screening_result'),
            'message': 'Application submitted successfully',
        }, None
    except WorkflowError as e:
        logger.error(f"Webhook: recruitment form error: {e}")
        return None, str(e)


def handle_ats(data):
    logger.info(f"Webhook: processing ATS request: {truncate_text(str(data))}")
    data = data or {}
    client = get_workflow_client()
    action = data.get('action')

    try:
        if action == 'get_applications':
            result = client.get_applications()
        elif action == 'update_status':
            result = client.update_application_status(
                data.get('application_id'),
                data.get('status'),
                data.get('stage'),
                data.get('notes'),
            )
        elif action == 'get_stats':
            result = client.get_dashboard_stats()
        else:
            return None, f"Unknown ATS action: {action}"

        return _checked(result, 'Failed to process ATS webhook'), None
    except WorkflowError as e:
        logger.error(f"Webhook: ATS error: {e}")
        return None, str(e)


def handle_interview(data):
    logger.info(f"Webhook: processing interview request: {truncate_text(str(data))}")
    try:
        result = get_workflow_client().schedule_interview(data or {})
        return _checked(result, 'Failed to schedule interview'), None
    except WorkflowError as e:
        logger.error(f"Webhook: interview error: {e}")
        return None, str(e)


def handle_generic(endpoint, data):
    logger.info(f"Webhook: processing generic request for {endpoint}")
    try:
        return get_workflow_client().make_request(endpoint, data), None
    except WorkflowError as e:
        logger.error(f"Webhook: generic error for {endpoint}: {e}")
        return None, str(e)


def health_check():
    return get_workflow_client().health_check(), None
