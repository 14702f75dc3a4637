import pytest
import requests

import interview_service
from ats_service import NotFoundError, ValidationError
from models import InterviewSchedule, InterviewStatus, SchedulingMode

from conftest import FakeResponse, webhook

INTERVIEW = {
    'candidate_name': 'Ada Lovelace',
    'candidate_email': 'ada@example.com',
    'job_title': 'Analyst',
    'interviewer_email': 'lead@example.com',
    'scheduled_date': '2026-03-02T14:30:00Z',
    'interview_type': 'technical',
    'questions': ['Explain the engine'],
}


def test_schedule_interview_syncs_with_engine(app_ctx, session):
    session.respond(webhook('/schedule-interview'),
                    FakeResponse(200, {'success': True, 'data': {'interview_id': 'wf-int-1'}}))

    interview = interview_service.schedule_interview(INTERVIEW)

    assert interview.id == 'wf-int-1'
    assert interview.synced is True
    assert interview.status == InterviewStatus.SCHEDULED
    assert interview.application_id
    assert interview.scheduled_date.hour == 14


def test_schedule_interview_accepts_array_reply(app_ctx, session):
    session.respond(webhook('/schedule-interview'), FakeResponse(200, [{'row_number': 4}]))

    interview = interview_service.schedule_interview(INTERVIEW)

    assert interview.synced is True
    assert interview.id
    assert InterviewSchedule.query.count() == 1


def test_schedule_interview_rejects_malformed_date(app_ctx, session):
    with pytest.raises(ValidationError, match='Invalid scheduled_date'):
        interview_service.schedule_interview({**INTERVIEW, 'scheduled_date': 'tomorrow'})

    assert session.calls == []
    assert InterviewSchedule.query.count() == 0


def test_schedule_interview_stored_offline_when_engine_down(app_ctx, session):
    session.default = requests.ConnectionError('engine down')

    interview = interview_service.schedule_interview(INTERVIEW)

    assert interview.synced is False
    assert InterviewSchedule.query.count() == 1

    interviews, source = interview_service.get_interviews()
    assert source == 'local'
    assert interviews[0]['candidate_email'] == 'ada@example.com'


def test_schedule_interview_requires_candidate_email(app_ctx):
    with pytest.raises(ValidationError):
        interview_service.schedule_interview({**INTERVIEW, 'candidate_email': 'nope'})

    with pytest.raises(ValidationError, match='interview_type'):
        interview_service.schedule_interview({**INTERVIEW, 'interview_type': 'carrier-pigeon'})


def test_ai_scheduling_waits_for_candidate(app_ctx, session):
    session.default = FakeResponse(200, {'data': {'interview_id': 'ai-1', 'scheduling_link': 'https://cal/x'}})

    interview = interview_service.schedule_interview_with_ai(INTERVIEW)

    assert interview.status == InterviewStatus.PENDING_CANDIDATE_SELECTION
    assert interview.scheduling_mode == SchedulingMode.SELF_SCHEDULE
    assert interview.scheduling_link == 'https://cal/x'


def test_get_interviews_prefers_engine(app_ctx, session):
    session.respond(webhook('/easyhrtools-ats'), FakeResponse(200, {'success': True, 'data': [{'id': 'remote'}]}))

    interviews, source = interview_service.get_interviews()

    assert source == 'workflow'
    assert interviews == [{'id': 'remote'}]


def test_update_status_offline(app_ctx, session):
    session.default = requests.ConnectionError('engine down')
    interview = interview_service.schedule_interview(INTERVIEW)

    updated, synced = interview_service.update_interview_status(interview.id, 'completed')

    assert synced is False
    assert updated.status == InterviewStatus.COMPLETED

    with pytest.raises(NotFoundError):
        interview_service.update_interview_status('unknown', 'completed')


def test_update_status_for_remote_only_interview(app_ctx):
    updated, synced = interview_service.update_interview_status('remote-only', 'cancelled')

    assert updated is None
    assert synced is True


def test_send_interview_email_merges_local_record(app_ctx, session):
    interview = interview_service.schedule_interview(INTERVIEW)

    result = interview_service.send_interview_email(interview.id, {'interviewer_name': 'Lead'})

    assert result.get('success') is not False
    assert interview.status == InterviewStatus.SENT

    payload = [p for p in session.payloads_for(webhook('/schedule-interview')) if p.get('action') == 'send_email'][0]
    assert payload['candidate_email'] == 'ada@example.com'
    assert payload['interviewer_name'] == 'Lead'
    assert payload['interview_date'] == '2026-03-02T14:30:00'
