import json
import logging
import uuid
from datetime import datetime

import requests
from flask import current_app, has_app_context

from fallbacks import fallback_questions, fallback_exercise
from utils import ConfigHelper, redact_binary

logger = logging.getLogger(__name__)

EMPTY_RESPONSE = {'success': True, 'message': 'Request processed successfully'}

RESUME_SCREENER_WORKFLOW = 'HR Resume Screener - Supabase Complete (Binary Fixed Final)'

RESUME_SCREENER_ENDPOINTS = [
    '/form-test/automation-specialist-supabase',
    '/hr-resume-screener-supabase-complete-binary-fixed-final',
    '/hr-resume-screener-complete',
    '/hr-screener-supabase-complete',
    '/resume-screener-binary-fixed',
    '/easyhrtools-resume-screener',
]

EMAIL_ENDPOINTS = [
    '/send-screening-invitation',
    '/send-bulk-email',
    '/easyhrtools-email',
    '/screening-email-sender',
    '/send-email',
]


class WorkflowError(Exception):
    """Raised when the workflow engine rejects a request or cannot be reached"""

    def __init__(self, message, status=None, code=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class WorkflowClient:
    """Client for the webhook workflow engine (n8n).

    Every call is a JSON POST to a named webhook; most webhooks multiplex
    several operations on an ``action`` field.
    """

    def __init__(self, base_url=None, timeout=None, session=None):
        config = ConfigHelper.get_workflow_config()
        self.base_url = (base_url if base_url is not None else config['base_url']).rstrip('/')
        self.timeout = timeout if timeout is not None else config['timeout']
        self.mass_email_url = config['mass_email_url'] or f"{self.base_url}/webhook/send-emails"
        self.ai_scheduler_endpoint = config['ai_scheduler_endpoint']
        self.session = session or requests.Session()
        self.logger = logger

    def build_url(self, endpoint):
        """Resolve an endpoint name to a full webhook URL"""
        if endpoint.startswith('http'):
            return endpoint

        clean_endpoint = endpoint if endpoint.startswith('/') else f'/{endpoint}'
        if clean_endpoint.startswith('/webhook'):
            return f"{self.base_url}{clean_endpoint}"
        return f"{self.base_url}/webhook{clean_endpoint}"

    def _post(self, url, data):
        return self.session.post(
            url,
            json=data or {},
            headers={'Content-Type': 'application/json'},
            timeout=self.timeout,
        )

    @staticmethod
    def _parse_body(text):
        if not text or text.strip() == '':
            return dict(EMPTY_RESPONSE)

        try:
            decoded = json.loads(text)
        except ValueError:
            # Plain text replies count as success
            return {'success': True, 'message': text}

        # Webhooks often answer with a bare array of rows
        if not isinstance(decoded, dict):
            return {'success': True, 'data': decoded}
        return decoded

    def make_request(self, endpoint, data=None):
        """POST ``data`` to ``endpoint`` and return the decoded reply"""
        url = self.build_url(endpoint)
        clean_endpoint = endpoint if endpoint.startswith('/') else f'/{endpoint}'
        self.logger.debug(f"Workflow request: {url} {redact_binary(data)}")

        try:
            response = self._post(url, data)
        except requests.RequestException as e:
            self.logger.error(f"Workflow API error for {endpoint}: {e}")
            raise WorkflowError(str(e)) from e

        self.logger.debug(f"Workflow response status: {response.status_code}")

        if not response.ok:
            error_text = response.text
            self.logger.error(f"Workflow error response for {endpoint}: "
                              f"status={response.status_code} body={error_text}")

            if response.status_code == 500 and not endpoint.startswith('http'):
                # Some webhooks are mounted without the /webhook prefix
                fallback_url = f"{self.base_url}{clean_endpoint}"
                self.logger.info(f"Retrying with fallback URL {fallback_url}")
                try:
                    fallback_response = self._post(fallback_url, data)
                    if fallback_response.ok:
                        return self._parse_body(fallback_response.text)
                except requests.RequestException as fallback_error:
                    self.logger.error(f"Fallback also failed: {fallback_error}")

            raise WorkflowError(
                f"HTTP error! status: {response.status_code}, message: {error_text}",
                status=response.status_code,
            )

        return self._parse_body(response.text)

    def try_endpoints(self, endpoints, payload):
        """Return (result, endpoint) for the first endpoint that does not fail"""
        for endpoint in endpoints:
            try:
                self.logger.info(f"Trying endpoint: {endpoint}")
                result = self.make_request(endpoint, payload)
                if result.get('success') is not False:
                    self.logger.info(f"Endpoint {endpoint} succeeded")
                    return result, endpoint
                self.logger.warning(f"Endpoint {endpoint} reported failure: {result.get('error')}")
            except WorkflowError as e:
                self.logger.warning(f"Endpoint {endpoint} failed: {e}")

        tried = ', '.join(self.build_url(endpoint) for endpoint in endpoints)
        raise WorkflowError(f"All workflow endpoints failed. Tried: {tried}")

    # Candidate management
    def submit_candidate_application(self, candidate):
        return self.make_request('/new-candidate-trigger', candidate)

    def get_candidates(self):
        return self.make_request('/easyhrtools-candidates', {'action': 'get_all'})

    def update_candidate(self, candidate_id, updates):
        return self.make_request('/easyhrtools-candidates', {
            'action': 'update',
            'candidate_id': candidate_id,
            **(updates or {}),
        })

    # Job management
    def create_job(self, job):
        return self.make_request('/easyhrtools-jobs', {'action': 'create', **(job or {})})

    def get_jobs(self):
        return self.make_request('/easyhrtools-jobs', {'action': 'get_all'})

    def update_job(self, job_id, updates):
        return self.make_request('/easyhrtools-jobs', {
            'action': 'update',
            'job_id': job_id,
            **(updates or {}),
        })

    def delete_job(self, job_id):
        return self.make_request('/easyhrtools-jobs', {'action': 'delete', 'job_id': job_id})

    # ATS
    def get_applications(self):
        return self.make_request('/easyhrtools-ats', {'action': 'get_applications'})

    def update_application_status(self, application_id, status, stage, notes=None):
        return self.make_request('/easyhrtools-ats', {
            'action': 'update_status',
            'application_id': application_id,
            'status': status,
            'stage': stage,
            'notes': notes,
        })

    def get_dashboard_stats(self):
        return self.make_request('/easyhrtools-ats', {'action': 'get_stats'})

    def get_interview_schedules(self):
        return self.make_request('/easyhrtools-ats', {'action': 'get_interviews'})

    def update_interview_status(self, interview_id, status):
        return self.make_request('/easyhrtools-ats', {
            'action': 'update_interview_status',
            'interview_id': interview_id,
            'status': status,
        })

    # AI screening
    def screen_resume(self, candidate_id, job_id):
        return self.make_request('/ai-resume-screening', {
            'candidate_id': candidate_id,
            'job_id': job_id,
        })

    def trigger_resume_screener(self, form_data):
        """Submit an application to the resume screener workflow.

        The workflow has been published under several webhook names over
        time, so each known name is probed in order.
        """
        skills = form_data.get('skills') or ''
        if isinstance(skills, (list, tuple)):
            skills = ', '.join(skills)

        payload = {
            'first_name': form_data.get('first_name', ''),
            'last_name': form_data.get('last_name', ''),
            'email': form_data.get('email', ''),
            'phone': form_data.get('phone') or '',
            'position': form_data.get('position', ''),
            'experience': form_data.get('experience') or '',
            'skills': skills,
            'cover_letter': form_data.get('cover_letter') or '',
            'resume_binary': form_data.get('resume_file'),
            'resume_filename': form_data.get('resume_filename') or 'resume.pdf',
            'target_job_id': form_data.get('job_id') or '',
            'workflow_name': RESUME_SCREENER_WORKFLOW,
            'trigger_source': 'easyhr_frontend',
            'submitted_at': datetime.utcnow().isoformat(),
        }
        self.logger.info(f"Triggering resume screener: {redact_binary(payload)}")

        result, endpoint = self.try_endpoints(RESUME_SCREENER_ENDPOINTS, payload)
        data = result.get('data') or {}
        if not isinstance(data, dict):
            data = {'result': data}

        return {
            'success': True,
            'data': {
                'candidate_id': data.get('candidate_id') or data.get('id') or str(uuid.uuid4()),
                'screening_result': data.get('screening_result') or data.get('analysis') or data or None,
            },
            'message': result.get('message') or f"{RESUME_SCREENER_WORKFLOW} completed via {endpoint}",
        }

    def submit_public_screening(self, form_data):
        result = self.make_request('/public-hr-screening', {
            **(form_data or {}),
            'submitted_at': datetime.utcnow().isoformat(),
            'source': 'public_form',
        })
        return {
            'success': True,
            'message': 'Application submitted successfully. You will be contacted soon.',
            'data': result,
        }

    # Email
    def send_screening_invitation(self, invitation):
        result, _ = self.try_endpoints(EMAIL_ENDPOINTS, invitation)
        return result

    def send_mass_email(self, emails, subject, body, link, sender_name):
        payload = {
            'emails': ', '.join(emails),
            'subject': subject,
            'message': body,
            'link': link,
            'sender_name': sender_name,
        }
        self.logger.info(f"Sending mass email to {len(emails)} recipients")

        result = self.make_request(self.mass_email_url, payload)
        if result.get('success') is False:
            raise WorkflowError(result.get('error') or 'The mass email workflow returned an error.')

        return {'success': True, 'message': 'Mass email campaign started successfully.', 'data': result}

    # Scheduled workflows
    def schedule_workflow(self, workflow):
        return self.make_request('/easyhrtools-scheduler', {'action': 'schedule_workflow', **(workflow or {})})

    def get_scheduled_workflows(self):
        return self.make_request('/easyhrtools-scheduler', {'action': 'get_workflows'})

    def update_workflow_status(self, workflow_id, is_active):
        return self.make_request('/easyhrtools-scheduler', {
            'action': 'update_status',
            'workflow_id': workflow_id,
            'is_active': is_active,
        })

    def delete_scheduled_workflow(self, workflow_id):
        return self.make_request('/easyhrtools-scheduler', {
            'action': 'delete_workflow',
            'workflow_id': workflow_id,
        })

    def trigger_workflow(self, workflow_id, data=None):
        return self.make_request('/easyhrtools-scheduler', {
            'action': 'trigger_workflow',
            'workflow_id': workflow_id,
            'data': data,
        })

    # Interviews
    def schedule_interview(self, interview):
        questions = interview.get('questions') or []
        payload = {
            # Fields the scheduling workflow validates
            'application_id': interview.get('application_id') or str(uuid.uuid4()),
            'scheduled_at': interview.get('scheduled_date'),
            'interviewer_id': interview.get('interviewer_email'),

            'duration': 60,
            'interview_type': interview.get('interview_type') or 'video',
            'candidate_email': interview.get('candidate_email'),
            'interviewer_email': interview.get('interviewer_email'),
            'candidate_name': interview.get('candidate_name'),
            'job_title': interview.get('job_title'),
            'meeting_url': '',
            'notes': f"Questions: {json.dumps(questions)}" if questions else '',
            'questions': questions,
            'exercise': interview.get('exercise'),
        }

        result = self.make_request('/schedule-interview', payload)
        data = result.get('data') or {}
        return {
            'success': True,
            'data': {
                'interview_id': (data.get('interview_id') if isinstance(data, dict) else None) or str(uuid.uuid4()),
                'application_id': payload['application_id'],
            },
        }

    @staticmethod
    def build_scheduling_message(interview):
        questions = interview.get('questions') or []
        return (
            "Hi! I need to schedule an interview. Here are the details:\n\n"
            f"Candidate: {interview.get('candidate_name')}\n"
            f"Email: {interview.get('candidate_email')}\n"
            f"Job Title: {interview.get('job_title')}\n"
            f"Interview Type: {interview.get('interview_type')}\n"
            f"Interviewer Email: {interview.get('interviewer_email')}\n\n"
            "Please generate multiple time slot options and create a scheduling link for the "
            "candidate to choose their preferred time. Include the interview questions and any "
            "technical exercises in the scheduling email.\n\n"
            "Additional Details:\n"
            f"- Application ID: {interview.get('application_id')}\n"
            f"- Interview Questions: {len(questions)} questions prepared\n"
            f"- Technical Exercise: {'Yes' if interview.get('exercise') else 'No'}\n"
            "- Scheduling Mode: Self-scheduling with AI assistance"
        )

    def schedule_interview_with_ai(self, interview):
        """Hand the interview to the chat-driven calendar scheduling workflow"""
        result = self.make_request(self.ai_scheduler_endpoint, {
            'chatInput': self.build_scheduling_message(interview),
        })
        data = result.get('data') or {}
        if not isinstance(data, dict):
            data = {}

        return {
            'success': True,
            'data': {
                'interview_id': data.get('interview_id') or str(uuid.uuid4()),
                'scheduling_link': data.get('scheduling_link') or data.get('link'),
            },
            'message': result.get('message') or data.get('response'),
        }

    def send_interview_email(self, interview_id, email_data):
        payload = {
            'interview_id': interview_id,
            'candidate_email': email_data.get('candidate_email'),
            'candidate_name': email_data.get('candidate_name'),
            'job_title': email_data.get('job_title'),
            'interviewer_email': email_data.get('interviewer_email'),
            'interviewer_name': email_data.get('interviewer_name'),
            'interview_date': email_data.get('interview_date'),
            'questions': email_data.get('questions') or [],
            'exercise': email_data.get('exercise'),
            'email_type': 'interview_invitation',
        }

        try:
            return self.make_request('/schedule-interview', {'action': 'send_email', **payload})
        except WorkflowError as e:
            self.logger.error(f"Interview email sending failed: {e}")

        try:
            return self.make_request('/send-interview-email', payload)
        except WorkflowError as e:
            self.logger.error(f"Fallback interview email sending failed: {e}")
            return {'success': False, 'error': 'Failed to send interview email'}

    def get_interview_questions(self, job_position, skills):
        try:
            return self.make_request('/ai-interview-questions', {
                'action': 'generate_questions',
                'job_position': job_position,
                'skills': skills,
                'question_types': ['technical', 'behavioral', 'situational'],
                'difficulty': 'medium',
                'count': 5,
            })
        except WorkflowError:
            self.logger.warning(f"AI questions unavailable, using fallback questions for {job_position}")
            return fallback_questions(job_position, skills)

    def get_technical_exercise(self, skills, difficulty='medium'):
        try:
            return self.make_request('/ai-interview-questions', {
                'action': 'generate_exercise',
                'skills': skills,
                'difficulty': difficulty,
                'exercise_type': 'coding_challenge',
                'time_limit': 60,
                'programming_language': 'python' if 'Python' in (skills or []) else 'javascript',
            })
        except WorkflowError:
            self.logger.warning(f"AI exercise unavailable, using fallback exercise for {skills}")
            return fallback_exercise(skills, difficulty)

    def health_check(self):
        try:
            result = self.get_dashboard_stats()
            return {
                'status': 'healthy',
                'workflow_connected': result.get('success') is not False,
                'timestamp': datetime.utcnow().isoformat(),
            }
        except WorkflowError as e:
            self.logger.error(f"Workflow health check failed: {e}")
            return {
                'status': 'unhealthy',
                'workflow_connected': False,
                'error': str(e),
                'timestamp': datetime.utcnow().isoformat(),
            }


workflow_client = WorkflowClient()


def get_workflow_client():
    """Client registered on the current app, or the module default"""
    if has_app_context():
        client = current_app.extensions.get('workflow_client')
        if client is not None:
            return client
    return workflow_client
