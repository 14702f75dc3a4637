import requests

import recruitment_service
from models import InterviewSchedule, RecruitmentCandidate

from conftest import FakeResponse, webhook


def test_api_test_is_public(client):
    response = client.get('/api/test')

    assert response.status_code == 200
    assert response.get_json()['success'] is True


def test_protected_endpoints_require_login(client):
    response = client.get('/api/candidates')

    assert response.status_code == 401
    assert response.get_json() == {'success': False, 'error': 'Authentication required'}


def test_login_rejects_bad_password(client):
    response = client.post('/login', json={'username': 'admin', 'password': 'wrong'})

    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_me_returns_seeded_admin(auth_client):
    user = auth_client.get('/api/me').get_json()['user']

    assert user['username'] == 'admin'
    assert user['role'] == 'admin'


def test_candidate_endpoints(auth_client):
    response = auth_client.post('/api/candidates', json={
        'first_name': 'Barbara', 'last_name': 'Liskov', 'email': 'barbara@example.com',
        'position': 'Architect', 'rating': 5,
    })
    assert response.status_code == 201
    candidate_id = response.get_json()['candidate']['id']

    listing = auth_client.get('/api/candidates?search=Lisk').get_json()
    assert listing['count'] == 1

    response = auth_client.post(f'/api/candidates/{candidate_id}/status', json={'status': 'placed'})
    assert response.get_json()['candidate']['status'] == 'placed'

    assert auth_client.get('/api/candidates?status=active').get_json()['count'] == 0
    assert auth_client.delete(f'/api/candidates/{candidate_id}').status_code == 200
    assert auth_client.get(f'/api/candidates/{candidate_id}').status_code == 404


def test_candidate_validation_errors(auth_client):
    response = auth_client.post('/api/candidates', json={'first_name': 'No', 'email': 'bad', 'rating': 9})

    assert response.status_code == 400
    errors = response.get_json()['errors']
    assert 'Position is required' in errors
    assert 'Invalid email format' in errors
    assert 'Rating must be between 0 and 5' in errors


def test_invalid_enum_is_a_bad_request(auth_client):
    response = auth_client.get('/api/candidates?status=retired')

    assert response.status_code == 400
    assert 'Invalid status' in response.get_json()['error']


def test_job_endpoints(auth_client):
    response = auth_client.post('/api/jobs', json={'title': 'Writer', 'description': 'Docs', 'employment_type': 'remote'})
    assert response.status_code == 201
    job = response.get_json()['job']
    assert job['employment_type'] == 'remote'

    toggled = auth_client.post(f"/api/jobs/{job['id']}/toggle").get_json()['job']
    assert toggled['status'] == 'paused'

    assert auth_client.get('/api/jobs?status=paused').get_json()['count'] == 1
    assert auth_client.put('/api/jobs/missing', json={'title': 'X'}).status_code == 404
    assert auth_client.post('/api/jobs', json={'title': 'No description'}).status_code == 400


def test_invitation_and_public_application_flow(app, auth_client, session):
    session.respond(webhook('/form-test/automation-specialist-supabase'), FakeResponse(200, {
        'success': True, 'data': {'candidate_id': 'wf-1', 'screening_result': {'match_score': 91}},
    }))

    invited = auth_client.post('/api/recruitment/candidates', json={
        'first_name': 'Edsger', 'email': 'edsger@example.com', 'position': 'Researcher',
    }).get_json()
    token = invited['candidate']['token']
    assert invited['application_link'].endswith(f'/apply/{token}')

    public = app.test_client()
    loaded = public.get(f'/api/recruitment/candidates/token/{token}').get_json()
    assert loaded['candidate']['email'] == 'edsger@example.com'

    applied = public.post(f'/api/recruitment/candidates/{token}/apply', json={'experience': '40 years'}).get_json()
    assert applied['candidate']['status'] == 'ai_analyzed'
    assert applied['candidate']['match_score'] == 91

    stats = auth_client.get('/api/recruitment/candidates/stats').get_json()['stats']
    assert stats['high_match'] == 1

    assert public.get('/api/recruitment/candidates/token/unknown').status_code == 404
    assert public.post('/api/recruitment/candidates/unknown/apply', json={}).status_code == 404


def test_bulk_invite_endpoint(app, auth_client):
    response = auth_client.post('/api/recruitment/candidates/bulk', json={'candidates': [
        {'first_name': 'A', 'email': 'a@example.com', 'position': 'Dev'},
        {'first_name': 'B', 'email': 'b@example.com'},
    ]})

    assert response.status_code == 400
    assert response.get_json()['error'].startswith('Row 2')

    with app.app_context():
        assert RecruitmentCandidate.query.count() == 0


def test_send_bulk_endpoint(app, auth_client):
    with app.app_context():
        candidate = recruitment_service.create_candidate(
            {'first_name': 'Alan', 'email': 'alan@example.com', 'position': 'Cryptanalyst'})
        candidate_id = candidate.id
        template_id = recruitment_service.get_email_templates()[0].id

    response = auth_client.post('/api/email/send-bulk', json={'candidate_ids': [candidate_id], 'template_id': template_id})

    body = response.get_json()
    assert body['sent'] == 1
    assert body['batch']['status'] == 'completed'
    assert auth_client.get('/api/email/batches').get_json()['batches'][0]['created_by'] == 'admin'


def test_workflow_read_falls_back_to_demo_data(auth_client, session):
    session.default = requests.ConnectionError('engine down')

    body = auth_client.get('/api/workflow/jobs').get_json()

    assert body['success'] is True
    assert body['demo'] is True
    assert body['jobs']

    stats = auth_client.get('/api/ats/stats').get_json()
    assert stats['demo'] is True


def test_workflow_read_accepts_array_reply(auth_client, session):
    session.respond(webhook('/easyhrtools-jobs'), FakeResponse(200, [{'id': 'j1'}]))

    response = auth_client.get('/api/workflow/jobs')

    assert response.status_code == 200
    body = response.get_json()
    assert body['jobs'] == [{'id': 'j1'}]
    assert body['demo'] is False


def test_webhook_routes(auth_client, session):
    assert auth_client.post('/api/webhook/jobs', json={'action': 'archive'}).status_code == 400

    session.default = requests.ConnectionError('engine down')
    response = auth_client.post('/api/webhook/ats', json={'action': 'get_stats'})
    assert response.status_code == 502
    assert response.get_json()['success'] is False


def test_webhook_health_is_public(client):
    body = client.get('/api/webhook/health').get_json()

    assert body['success'] is True
    assert body['data']['status'] == 'healthy'


def test_application_status_is_validated(auth_client, session):
    response = auth_client.post('/api/applications/app-1/status', json={'status': 'promoted'})
    assert response.status_code == 400
    assert session.calls == []

    response = auth_client.post('/api/applications/app-1/status', json={'status': 'offer'})
    assert response.status_code == 200
    assert session.calls[0][1]['stage'] == 'offer'


def test_interview_scheduled_offline(auth_client, session):
    session.default = requests.ConnectionError('engine down')

    response = auth_client.post('/api/interviews', json={
        'candidate_email': 'ada@example.com', 'scheduled_date': '2026-02-01T09:00:00Z',
    })

    assert response.status_code == 201
    assert response.get_json()['offline'] is True

    listing = auth_client.get('/api/interviews').get_json()
    assert listing['source'] == 'local'
    assert len(listing['interviews']) == 1


def test_interview_scheduled_when_engine_answers_with_array(app, auth_client, session):
    session.respond(webhook('/schedule-interview'), FakeResponse(200, [{'ok': True}]))

    response = auth_client.post('/api/interviews', json={
        'candidate_email': 'ada@example.com', 'scheduled_date': '2026-02-01T09:00:00Z',
    })

    assert response.status_code == 201
    body = response.get_json()
    assert body['offline'] is False
    assert body['interview']['id']
    with app.app_context():
        stored = InterviewSchedule.query.one()
        assert stored.synced is True
        assert stored.id == body['interview']['id']


def test_malformed_dates_are_bad_requests(auth_client, session):
    response = auth_client.post('/api/jobs', json={'title': 'X', 'description': 'Y', 'deadline': 'next friday'})
    assert response.status_code == 400
    assert 'Invalid deadline' in response.get_json()['error']

    response = auth_client.post('/api/interviews', json={
        'candidate_email': 'ada@example.com', 'scheduled_date': 'tomorrow',
    })
    assert response.status_code == 400
    assert 'Invalid scheduled_date' in response.get_json()['error']
    assert session.calls == []


def test_interview_questions_fallback(auth_client, session):
    session.default = requests.ConnectionError('engine down')

    body = auth_client.post('/api/interviews/questions', json={'job_position': 'Tester', 'skills': ['pytest']}).get_json()

    assert body['fallback'] is True
    assert auth_client.post('/api/interviews/exercise', json={'difficulty': 'extreme'}).status_code == 400


def test_dashboard(auth_client):
    body = auth_client.get('/api/dashboard').get_json()

    assert body['success'] is True
    assert body['stats']['total_candidates'] == 0
    assert body['recruitment_stats']['total_candidates'] == 0
    assert body['recent_candidates'] == []
