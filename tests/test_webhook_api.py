import requests

import webhook_api
from workflow_client import RESUME_SCREENER_ENDPOINTS

from conftest import BASE_URL, FakeResponse, webhook


def test_jobs_actions_are_forwarded(app_ctx, session):
    data, error = webhook_api.handle_jobs({'action': 'create', 'title': 'SRE', 'location': 'Remote'})

    assert error is None
    assert data['success'] is True
    assert session.calls == [(webhook('/easyhrtools-jobs'), {'action': 'create', 'title': 'SRE', 'location': 'Remote'})]


def test_jobs_update_moves_job_id(app_ctx, session):
    webhook_api.handle_jobs({'action': 'update', 'job_id': 'j1', 'status': 'paused'})

    assert session.calls[0][1] == {'action': 'update', 'job_id': 'j1', 'status': 'paused'}


def test_unknown_actions_are_rejected(app_ctx, session):
    assert webhook_api.handle_jobs({'action': 'archive'}) == (None, 'Unknown jobs action: archive')
    assert webhook_api.handle_ats({'action': 'purge'}) == (None, 'Unknown ATS action: purge')
    assert session.calls == []


def test_candidates_default_to_get_all(app_ctx, session):
    session.default = FakeResponse(200, {'success': True, 'data': []})

    data, error = webhook_api.handle_candidates({})

    assert error is None
    assert session.calls[0][1] == {'action': 'get_all'}


def test_engine_failure_is_reported_as_error(app_ctx, session):
    session.default = requests.ConnectionError('refused')

    data, error = webhook_api.handle_ats({'action': 'get_stats'})

    assert data is None
    assert 'refused' in error


def test_workflow_reported_failure_is_an_error(app_ctx, session):
    session.default = FakeResponse(200, {'success': False, 'error': 'table locked'})

    assert webhook_api.handle_candidates({'action': 'get_all'}) == (None, 'table locked')


def test_recruitment_form_mapping():
    form = webhook_api.map_recruitment_form({
        'name': 'Mary Ann Evans',
        'email': 'mary@example.com',
        'skills': 'Writing, Editing ,',
        'resume_binary': 'JVBERi0=',
        'target_job_id': 'job-7',
    })

    assert form['first_name'] == 'Mary'
    assert form['last_name'] == 'Ann Evans'
    assert form['skills'] == ['Writing', 'Editing']
    assert form['resume_file'] == 'JVBERi0='
    assert form['job_id'] == 'job-7'


def test_recruitment_form_submission(app_ctx, session):
    session.respond(webhook(RESUME_SCREENER_ENDPOINTS[0]), FakeResponse(200, {
        'success': True, 'data': {'candidate_id': 'cand-1', 'screening_result': {'match_score': 70}},
    }))

    data, error = webhook_api.handle_recruitment_form({'name': 'Mary Evans', 'email': 'mary@example.com'})

    assert error is None
    assert data['candidate_id'] == 'cand-1'
    assert data['screening_result'] == {'match_score': 70}
    assert data['message'] == 'Application submitted successfully'


def test_generic_passes_endpoint_through(app_ctx, session):
    webhook_api.handle_generic('custom-flow', {'x': 1})

    assert session.calls == [(webhook('/custom-flow'), {'x': 1})]


def test_health_check_reports_connection(app_ctx, session):
    data, error = webhook_api.health_check()

    assert error is None
    assert data['workflow_connected'] is True
    assert session.urls == [f"{BASE_URL}/webhook/easyhrtools-ats"]
