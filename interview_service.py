import logging
from datetime import datetime

from database import db
from models import InterviewSchedule, InterviewStatus, InterviewType, SchedulingMode
from ats_service import NotFoundError, ValidationError, parse_datetime, parse_enum
from utils import validate_email
from workflow_client import WorkflowError, get_workflow_client

logger = logging.getLogger(__name__)


def _build_record(data):
    candidate_email = data.get('candidate_email')
    if not candidate_email or not validate_email(candidate_email):
        raise ValidationError('A valid candidate_email is required')

    interviewer_email = data.get('interviewer_email')
    if interviewer_email and not validate_email(interviewer_email):
        raise ValidationError('Invalid interviewer_email')

    return InterviewSchedule(
        application_id=data.get('application_id'),
        candidate_id=data.get('candidate_id'),
        job_id=data.get('job_id'),
        candidate_name=data.get('candidate_name'),
        candidate_email=candidate_email,
        job_title=data.get('job_title'),
        interviewer_email=interviewer_email,
        scheduled_date=parse_datetime(data.get('scheduled_date'), 'scheduled_date'),
        interview_type=parse_enum(InterviewType, data.get('interview_type') or 'video', 'interview_type'),
        questions=data.get('questions') or [],
        exercise=data.get('exercise'),
    )


def schedule_interview(data):
    """Schedule through the workflow engine, keeping a local record.

    When the engine is unreachable the interview is still stored, with
    ``synced`` False, so the recruiter's schedule stays complete.
    """
    interview = _build_record(data)
    interview.status = InterviewStatus.SCHEDULED
    interview.scheduling_mode = SchedulingMode.MANUAL

    try:
        result = get_workflow_client().schedule_interview(data)
        interview.id = result['data']['interview_id']
        interview.application_id = interview.application_id or result['data'].get('application_id')
        interview.synced = True
    except WorkflowError as e:
        logger.warning(f"Interview for {interview.candidate_email} stored offline: {e}")
        interview.synced = False

    db.session.add(interview)
    db.session.commit()
    return interview


def schedule_interview_with_ai(data):
    """Let the candidate pick a slot through the AI scheduling workflow"""
    interview = _build_record(data)
    interview.status = InterviewStatus.PENDING_CANDIDATE_SELECTION
    interview.scheduling_mode = SchedulingMode.SELF_SCHEDULE

    try:
        result = get_workflow_client().schedule_interview_with_ai(data)
        interview.id = result['data']['interview_id']
        interview.scheduling_link = result['data'].get('scheduling_link')
        interview.synced = True
    except WorkflowError as e:
        logger.warning(f"AI scheduling for {interview.candidate_email} stored offline: {e}")
        interview.synced = False

    db.session.add(interview)
    db.session.commit()
    return interview


def get_local_interviews():
    return InterviewSchedule.query.order_by(InterviewSchedule.created_at.desc()).all()


def get_interviews():
    """Interviews from the engine, or the local records when it is down.

    Returns (interviews, source) where source is 'workflow' or 'local'.
    """
    try:
        result = get_workflow_client().get_interview_schedules()
        if result.get('success') is not False and isinstance(result.get('data'), list):
            return result['data'], 'workflow'
        logger.warning(f"Unexpected interview listing from workflow: {result.get('error')}")
    except WorkflowError as e:
        logger.warning(f"Interview fetch failed, serving local records: {e}")

    return [interview.to_dict() for interview in get_local_interviews()], 'local'


def update_interview_status(interview_id, status):
    new_status = parse_enum(InterviewStatus, status, 'status')
    interview = db.session.get(InterviewSchedule, interview_id)

    synced = False
    try:
        result = get_workflow_client().update_interview_status(interview_id, new_status.value)
        synced = result.get('success') is not False
    except WorkflowError as e:
        logger.warning(f"Interview {interview_id} status not synced: {e}")

    if interview is None:
        if not synced:
            raise NotFoundError(f"Interview {interview_id} not found")
        return None, synced

    interview.status = new_status
    interview.updated_at = datetime.utcnow()
    db.session.commit()
    return interview, synced


def send_interview_email(interview_id, email_data):
    interview = db.session.get(InterviewSchedule, interview_id)
    if interview is not None:
        email_data = {**{
            'candidate_email': interview.candidate_email,
            'candidate_name': interview.candidate_name,
            'job_title': interview.job_title,
            'interviewer_email': interview.interviewer_email,
            'interview_date': interview.scheduled_date.isoformat() if interview.scheduled_date else None,
            'questions': interview.questions or [],
            'exercise': interview.exercise,
        }, **(email_data or {})}

    result = get_workflow_client().send_interview_email(interview_id, email_data)
    if interview is not None and result.get('success') is not False:
        interview.status = InterviewStatus.SENT
        db.session.commit()
    return result
