import logging
from datetime import datetime
from flask import request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from werkzeug.security import check_password_hash
from database import db
from models import (User, Candidate, RecruitmentCandidate, CandidateStatus, ApplicationStatus)
import ats_service
import recruitment_service
import interview_service
import email_api
import webhook_api
from ats_service import NotFoundError, ValidationError, parse_enum
from email_api import GmailError
from fallbacks import DEMO_JOBS, DEMO_CANDIDATES, demo_dashboard_stats
from utils import ConfigHelper, validate_candidate_data, validate_job_data
from workflow_client import WorkflowError, get_workflow_client

logger = logging.getLogger(__name__)


def _error(message, status):
    return jsonify({'success': False, 'error': message}), status


def _handle_exception(e, action):
    """Map service exceptions onto HTTP responses"""
    if isinstance(e, NotFoundError):
        return _error(str(e), 404)
    if isinstance(e, ValidationError):
        db.session.rollback()
        return _error(str(e), 400)
    if isinstance(e, (WorkflowError, GmailError)):
        logger.error(f"{action} failed upstream: {e}")
        return _error(str(e), 502)

    db.session.rollback()
    logger.error(f"Error {action}: {e}")
    return _error(str(e), 500)


def _webhook_response(data, error):
    if error:
        return _error(error, 400 if error.startswith('Unknown') else 502)
    return jsonify({'success': True, 'data': data})


def _json_body():
    return request.get_json(silent=True) or {}


def register_routes(app):
    @app.route('/api/test', methods=['GET'])
    def api_test():
        """Simple test endpoint to verify API is working"""
        return jsonify({
            'success': True,
            'message': 'API is working correctly',
            'timestamp': datetime.now().isoformat()
        })

    @app.route('/login', methods=['POST'])
    def login():
        data = request.get_json(silent=True) or request.form
        username = data.get('username', '')
        password = data.get('password', '')

        user = User.query.filter_by(username=username).first()

        if user and check_password_hash(user.password_hash, password):
            login_user(user)
            logger.info(f"User {username} logged in")
            return jsonify({'success': True, 'user': user.to_dict()})

        return _error('Invalid username or password', 401)

    @app.route('/logout', methods=['POST', 'GET'])
    @login_required
    def logout():
        logout_user()
        return jsonify({'success': True})

    @app.route('/api/me')
    @login_required
    def api_me():
        return jsonify({'success': True, 'user': current_user.to_dict()})

    # Dashboard
    @app.route('/api/dashboard')
    @login_required
    def api_dashboard():
        try:
            recent_candidates = Candidate.query.order_by(Candidate.created_at.desc()).limit(5).all()
            top_matches = RecruitmentCandidate.query\
                .filter(RecruitmentCandidate.match_score >= 70)\
                .order_by(RecruitmentCandidate.match_score.desc())\
                .limit(10).all()

            return jsonify({
                'success': True,
                'stats': ats_service.get_dashboard_stats(),
                'recruitment_stats': recruitment_service.get_recruitment_stats(),
                'recent_candidates': [c.to_dict() for c in recent_candidates],
                'top_matches': [c.to_dict() for c in top_matches],
            })
        except Exception as e:
            return _handle_exception(e, 'loading dashboard')

    @app.route('/api/stats')
    @login_required
    def api_stats():
        """Candidate and job statistics from the database"""
        try:
            return jsonify({'success': True, 'stats': ats_service.get_dashboard_stats()})
        except Exception as e:
            return _handle_exception(e, 'loading stats')

    @app.route('/api/ats/stats')
    @login_required
    def api_ats_stats():
        """Pipeline statistics from the workflow engine, demo data when it is down"""
        try:
            result = get_workflow_client().get_dashboard_stats()
            if result.get('success') is False:
                raise WorkflowError(result.get('error') or 'Failed to fetch stats')
            return jsonify({'success': True, 'stats': result.get('data', result), 'demo': False})
        except WorkflowError as e:
            logger.warning(f"Workflow stats unavailable, serving demo stats: {e}")
            return jsonify({'success': True, 'stats': demo_dashboard_stats(), 'demo': True})

    # Candidates
    @app.route('/api/candidates', methods=['GET'])
    @login_required
    def api_candidates():
        status_filter = request.args.get('status', '')
        position = request.args.get('position', '')
        search = request.args.get('search', '')

        try:
            query = Candidate.query

            if status_filter and status_filter != 'all':
                query = query.filter(Candidate.status == parse_enum(CandidateStatus, status_filter, 'status'))

            if position:
                query = query.filter(Candidate.position == position)

            if search:
                search_term = f"%{search}%"
                query = query.filter(
                    db.or_(
                        Candidate.first_name.like(search_term),
                        Candidate.last_name.like(search_term),
                        Candidate.email.like(search_term),
                        Candidate.position.like(search_term)
                    )
                )

            candidates = query.order_by(Candidate.created_at.desc()).all()
            return jsonify({
                'success': True,
                'candidates': [c.to_dict() for c in candidates],
                'count': len(candidates)
            })
        except Exception as e:
            return _handle_exception(e, 'listing candidates')

    @app.route('/api/candidates', methods=['POST'])
    @login_required
    def api_create_candidate():
        data = _json_body()
        errors = validate_candidate_data(data)
        if errors:
            return jsonify({'success': False, 'error': errors[0], 'errors': errors}), 400

        try:
            candidate = ats_service.create_candidate(data)
            return jsonify({'success': True, 'candidate': candidate.to_dict()}), 201
        except Exception as e:
            return _handle_exception(e, 'creating candidate')

    @app.route('/api/candidates/<candidate_id>', methods=['GET'])
    @login_required
    def api_candidate_detail(candidate_id):
        try:
            candidate = ats_service.get_candidate(candidate_id)
            return jsonify({'success': True, 'candidate': candidate.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'loading candidate')

    @app.route('/api/candidates/<candidate_id>', methods=['PUT', 'PATCH'])
    @login_required
    def api_update_candidate(candidate_id):
        data = _json_body()
        errors = validate_candidate_data(data, partial=True)
        if errors:
            return jsonify({'success': False, 'error': errors[0], 'errors': errors}), 400

        try:
            candidate = ats_service.update_candidate(candidate_id, data)
            return jsonify({'success': True, 'candidate': candidate.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'updating candidate')

    @app.route('/api/candidates/<candidate_id>', methods=['DELETE'])
    @login_required
    def api_delete_candidate(candidate_id):
        try:
            ats_service.delete_candidate(candidate_id)
            return jsonify({'success': True})
        except Exception as e:
            return _handle_exception(e, 'deleting candidate')

    @app.route('/api/candidates/<candidate_id>/status', methods=['POST'])
    @login_required
    def api_update_candidate_status(candidate_id):
        data = _json_body()
        if not data.get('status'):
            return _error('status is required', 400)

        try:
            candidate = ats_service.update_candidate_status(candidate_id, data['status'], data.get('notes'))
            return jsonify({'success': True, 'candidate': candidate.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'updating candidate status')

    # Jobs
    @app.route('/api/jobs', methods=['GET'])
    @login_required
    def api_jobs():
        try:
            jobs = ats_service.get_jobs(request.args.get('status'))
            return jsonify({
                'success': True,
                'jobs': [job.to_dict() for job in jobs],
                'count': len(jobs)
            })
        except Exception as e:
            return _handle_exception(e, 'listing jobs')

    @app.route('/api/jobs', methods=['POST'])
    @login_required
    def api_create_job():
        data = _json_body()
        errors = validate_job_data(data)
        if errors:
            return jsonify({'success': False, 'error': errors[0], 'errors': errors}), 400

        try:
            job = ats_service.create_job(data)
            return jsonify({'success': True, 'job': job.to_dict()}), 201
        except Exception as e:
            return _handle_exception(e, 'creating job')

    @app.route('/api/jobs/<job_id>', methods=['GET'])
    @login_required
    def api_job_detail(job_id):
        try:
            job = ats_service.get_job(job_id)
            return jsonify({'success': True, 'job': job.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'loading job')

    @app.route('/api/jobs/<job_id>', methods=['PUT', 'PATCH'])
    @login_required
    def api_update_job(job_id):
        data = _json_body()
        errors = validate_job_data(data, partial=True)
        if errors:
            return jsonify({'success': False, 'error': errors[0], 'errors': errors}), 400

        try:
            job = ats_service.update_job(job_id, data)
            return jsonify({'success': True, 'job': job.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'updating job')

    @app.route('/api/jobs/<job_id>', methods=['DELETE'])
    @login_required
    def api_delete_job(job_id):
        try:
            ats_service.delete_job(job_id)
            return jsonify({'success': True})
        except Exception as e:
            return _handle_exception(e, 'deleting job')

    @app.route('/api/jobs/<job_id>/toggle', methods=['POST'])
    @login_required
    def api_toggle_job(job_id):
        try:
            job = ats_service.toggle_job_status(job_id)
            return jsonify({'success': True, 'job': job.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'toggling job')

    @app.route('/api/jobs/<job_id>/candidates', methods=['GET'])
    @login_required
    def api_job_candidates(job_id):
        try:
            candidates = ats_service.get_candidates_by_job(job_id)
            return jsonify({
                'success': True,
                'candidates': [c.to_dict() for c in candidates],
                'count': len(candidates)
            })
        except Exception as e:
            return _handle_exception(e, 'listing job candidates')

    # Workflow-held records, demo data when the engine is down
    @app.route('/api/workflow/jobs', methods=['GET'])
    @login_required
    def api_workflow_jobs():
        try:
            result = get_workflow_client().get_jobs()
            if result.get('success') is False:
                raise WorkflowError(result.get('error') or 'Failed to fetch jobs')
            return jsonify({'success': True, 'jobs': result.get('data', []), 'demo': False})
        except WorkflowError as e:
            logger.warning(f"Workflow jobs unavailable, serving demo jobs: {e}")
            return jsonify({'success': True, 'jobs': DEMO_JOBS, 'demo': True})

    @app.route('/api/workflow/candidates', methods=['GET'])
    @login_required
    def api_workflow_candidates():
        try:
            result = get_workflow_client().get_candidates()
            if result.get('success') is False:
                raise WorkflowError(result.get('error') or 'Failed to fetch candidates')
            return jsonify({'success': True, 'candidates': result.get('data', []), 'demo': False})
        except WorkflowError as e:
            logger.warning(f"Workflow candidates unavailable, serving demo candidates: {e}")
            return jsonify({'success': True, 'candidates': DEMO_CANDIDATES, 'demo': True})

    @app.route('/api/workflow/candidates', methods=['POST'])
    @login_required
    def api_workflow_submit_candidate():
        """Hand a candidate to the engine's new-candidate trigger"""
        data = _json_body()
        errors = validate_candidate_data(data)
        if errors:
            return jsonify({'success': False, 'error': errors[0], 'errors': errors}), 400

        try:
            return jsonify(get_workflow_client().submit_candidate_application(data)), 201
        except Exception as e:
            return _handle_exception(e, 'submitting candidate to workflow')

    # Invited (recruitment) candidates
    @app.route('/api/recruitment/candidates', methods=['GET'])
    @login_required
    def api_recruitment_candidates():
        try:
            candidates = recruitment_service.get_candidates(request.args.get('status'))
            return jsonify({
                'success': True,
                'candidates': [c.to_dict() for c in candidates],
                'count': len(candidates)
            })
        except Exception as e:
            return _handle_exception(e, 'listing recruitment candidates')

    @app.route('/api/recruitment/candidates', methods=['POST'])
    @login_required
    def api_invite_candidate():
        try:
            candidate = recruitment_service.create_candidate(_json_body(), invited_by=current_user.username)
            return jsonify({
                'success': True,
                'candidate': candidate.to_dict(),
                'application_link': email_api.application_link(candidate)
            }), 201
        except Exception as e:
            return _handle_exception(e, 'inviting candidate')

    @app.route('/api/recruitment/candidates/bulk', methods=['POST'])
    @login_required
    def api_bulk_invite():
        data = _json_body()
        rows = data.get('candidates')
        if not isinstance(rows, list) or not rows:
            return _error('candidates must be a non-empty list', 400)

        try:
            candidates = recruitment_service.bulk_create_candidates(rows, current_user.username)
            return jsonify({
                'success': True,
                'candidates': [c.to_dict() for c in candidates],
                'count': len(candidates)
            }), 201
        except Exception as e:
            return _handle_exception(e, 'bulk importing candidates')

    @app.route('/api/recruitment/candidates/stats', methods=['GET'])
    @login_required
    def api_recruitment_stats():
        try:
            return jsonify({'success': True, 'stats': recruitment_service.get_recruitment_stats()})
        except Exception as e:
            return _handle_exception(e, 'loading recruitment stats')

    @app.route('/api/recruitment/candidates/<candidate_id>', methods=['PUT', 'PATCH'])
    @login_required
    def api_update_recruitment_candidate(candidate_id):
        try:
            candidate = recruitment_service.update_candidate(candidate_id, _json_body())
            return jsonify({'success': True, 'candidate': candidate.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'updating recruitment candidate')

    @app.route('/api/recruitment/candidates/token/<token>', methods=['GET'])
    def api_candidate_by_token(token):
        """Public: the application page loads the invitation by token"""
        candidate = recruitment_service.get_candidate_by_token(token)
        if candidate is None:
            return _error('Invalid application token', 404)
        return jsonify({'success': True, 'candidate': candidate.to_dict()})

    @app.route('/api/recruitment/candidates/token/<token>', methods=['PUT', 'PATCH'])
    @login_required
    def api_update_candidate_by_token(token):
        try:
            candidate = recruitment_service.update_candidate_by_token(token, _json_body())
            return jsonify({'success': True, 'candidate': candidate.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'updating candidate by token')

    @app.route('/api/recruitment/candidates/<token>/apply', methods=['POST'])
    def api_submit_application(token):
        """Public: candidate submits the application behind their invitation link"""
        try:
            candidate = recruitment_service.submit_application(token, _json_body())
            return jsonify({'success': True, 'candidate': candidate.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'submitting application')

    # Email
    @app.route('/api/email/templates', methods=['GET'])
    @login_required
    def api_email_templates():
        try:
            templates = recruitment_service.get_email_templates()
            return jsonify({'success': True, 'templates': [t.to_dict() for t in templates]})
        except Exception as e:
            return _handle_exception(e, 'listing email templates')

    @app.route('/api/email/templates', methods=['POST'])
    @login_required
    def api_create_email_template():
        try:
            template = recruitment_service.create_email_template(_json_body())
            return jsonify({'success': True, 'template': template.to_dict()}), 201
        except Exception as e:
            return _handle_exception(e, 'creating email template')

    @app.route('/api/email/templates/<template_id>', methods=['PUT', 'PATCH'])
    @login_required
    def api_update_email_template(template_id):
        try:
            template = recruitment_service.update_email_template(template_id, _json_body())
            return jsonify({'success': True, 'template': template.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'updating email template')

    @app.route('/api/email/send-bulk', methods=['POST'])
    @login_required
    def api_send_bulk_email():
        data = _json_body()
        candidate_ids = data.get('candidate_ids') or []
        template_id = data.get('template_id')
        if not template_id:
            return _error('template_id is required', 400)

        try:
            batch = email_api.send_bulk_emails(candidate_ids, template_id, created_by=current_user.username)
            return jsonify({
                'success': True,
                'batch': batch.to_dict(),
                'sent': batch.sent_count,
                'failed': batch.failed_count
            })
        except Exception as e:
            return _handle_exception(e, 'sending bulk email')

    @app.route('/api/email/mass', methods=['POST'])
    @login_required
    def api_mass_email():
        data = _json_body()
        emails = data.get('emails') or []
        if isinstance(emails, str):
            emails = [e.strip() for e in emails.split(',') if e.strip()]
        if not emails or not data.get('subject'):
            return _error('emails and subject are required', 400)

        try:
            result = get_workflow_client().send_mass_email(
                emails,
                data['subject'],
                data.get('body', ''),
                data.get('link', ''),
                data.get('sender_name') or current_user.username,
            )
            return jsonify(result)
        except Exception as e:
            return _handle_exception(e, 'sending mass email')

    @app.route('/api/email/batches', methods=['GET'])
    @login_required
    def api_email_batches():
        try:
            batches = recruitment_service.get_email_batches()
            return jsonify({'success': True, 'batches': [b.to_dict() for b in batches]})
        except Exception as e:
            return _handle_exception(e, 'listing email batches')

    @app.route('/api/email/batches/<batch_id>', methods=['PUT', 'PATCH'])
    @login_required
    def api_update_email_batch(batch_id):
        try:
            batch = recruitment_service.update_email_batch(batch_id, _json_body())
            return jsonify({'success': True, 'batch': batch.to_dict()})
        except Exception as e:
            return _handle_exception(e, 'updating email batch')

    @app.route('/api/email/oauth/url', methods=['GET'])
    @login_required
    def api_gmail_oauth_url():
        redirect_uri = request.args.get('redirect_uri') or \
            f"{ConfigHelper.get_public_base_url()}/auth/gmail/callback"
        return jsonify({'success': True, 'url': email_api.get_oauth_url(redirect_uri)})

    @app.route('/api/email/oauth/exchange', methods=['POST'])
    @login_required
    def api_gmail_oauth_exchange():
        data = _json_body()
        if not data.get('code'):
            return _error('code is required', 400)
        redirect_uri = data.get('redirect_uri') or \
            f"{ConfigHelper.get_public_base_url()}/auth/gmail/callback"

        try:
            return jsonify({'success': True, 'oauth': email_api.exchange_code(data['code'], redirect_uri)})
        except Exception as e:
            return _handle_exception(e, 'exchanging OAuth code')

    @app.route('/api/email/send-gmail', methods=['POST'])
    @login_required
    def api_send_gmail():
        data = _json_body()
        missing = [f for f in ('to', 'subject', 'body', 'access_token') if not data.get(f)]
        if missing:
            return _error(f"Missing required field(s): {', '.join(missing)}", 400)

        try:
            result = email_api.send_email_via_gmail(data['to'], data['subject'], data['body'],
                                                    data['access_token'])
            return jsonify({'success': True, **result})
        except Exception as e:
            return _handle_exception(e, 'sending Gmail message')

    # Webhook proxy
    @app.route('/api/webhook/health', methods=['GET'])
    def api_webhook_health():
        data, _ = webhook_api.health_check()
        return jsonify({'success': True, 'data': data})

    @app.route('/api/webhook/candidates', methods=['POST'])
    @login_required
    def api_webhook_candidates():
        return _webhook_response(*webhook_api.handle_candidates(_json_body()))

    @app.route('/api/webhook/jobs', methods=['POST'])
    @login_required
    def api_webhook_jobs():
        return _webhook_response(*webhook_api.handle_jobs(_json_body()))

    @app.route('/api/webhook/form-test/automation-specialist-supabase', methods=['POST'])
    def api_webhook_recruitment_form():
        """Public: the open application form posts here"""
        return _webhook_response(*webhook_api.handle_recruitment_form(_json_body()))

    @app.route('/api/webhook/ats', methods=['POST'])
    @login_required
    def api_webhook_ats():
        return _webhook_response(*webhook_api.handle_ats(_json_body()))

    @app.route('/api/webhook/interview', methods=['POST'])
    @login_required
    def api_webhook_interview():
        return _webhook_response(*webhook_api.handle_interview(_json_body()))

    @app.route('/api/webhook/<path:endpoint>', methods=['POST'])
    @login_required
    def api_webhook_generic(endpoint):
        return _webhook_response(*webhook_api.handle_generic(endpoint, _json_body()))

    @app.route('/api/public/screening', methods=['POST'])
    def api_public_screening():
        """Public: screening form that needs no invitation"""
        data = _json_body()
        if not data.get('email'):
            return _error('email is required', 400)

        try:
            return jsonify(get_workflow_client().submit_public_screening(data))
        except Exception as e:
            return _handle_exception(e, 'submitting public screening')

    # Interviews
    @app.route('/api/interviews', methods=['GET'])
    @login_required
    def api_interviews():
        interviews, source = interview_service.get_interviews()
        return jsonify({'success': True, 'interviews': interviews, 'source': source})

    @app.route('/api/interviews', methods=['POST'])
    @login_required
    def api_schedule_interview():
        try:
            interview = interview_service.schedule_interview(_json_body())
            return jsonify({
                'success': True,
                'interview': interview.to_dict(),
                'offline': not interview.synced
            }), 201
        except Exception as e:
            return _handle_exception(e, 'scheduling interview')

    @app.route('/api/interviews/ai', methods=['POST'])
    @login_required
    def api_schedule_interview_ai():
        try:
            interview = interview_service.schedule_interview_with_ai(_json_body())
            return jsonify({
                'success': True,
                'interview': interview.to_dict(),
                'offline': not interview.synced
            }), 201
        except Exception as e:
            return _handle_exception(e, 'starting AI interview scheduling')

    @app.route('/api/interviews/<interview_id>/status', methods=['POST'])
    @login_required
    def api_interview_status(interview_id):
        data = _json_body()
        if not data.get('status'):
            return _error('status is required', 400)

        try:
            interview, synced = interview_service.update_interview_status(interview_id, data['status'])
            return jsonify({
                'success': True,
                'interview': interview.to_dict() if interview else None,
                'synced': synced
            })
        except Exception as e:
            return _handle_exception(e, 'updating interview status')

    @app.route('/api/interviews/<interview_id>/email', methods=['POST'])
    @login_required
    def api_interview_email(interview_id):
        try:
            result = interview_service.send_interview_email(interview_id, _json_body())
            if result.get('success') is False:
                return _error(result.get('error') or 'Failed to send interview email', 502)
            return jsonify({'success': True, 'data': result})
        except Exception as e:
            return _handle_exception(e, 'sending interview email')

    @app.route('/api/interviews/questions', methods=['POST'])
    @login_required
    def api_interview_questions():
        data = _json_body()
        if not data.get('job_position'):
            return _error('job_position is required', 400)
        result = get_workflow_client().get_interview_questions(data['job_position'], data.get('skills') or [])
        return jsonify(result)

    @app.route('/api/interviews/exercise', methods=['POST'])
    @login_required
    def api_interview_exercise():
        data = _json_body()
        difficulty = data.get('difficulty', 'medium')
        if difficulty not in ('easy', 'medium', 'hard'):
            return _error('difficulty must be easy, medium or hard', 400)
        result = get_workflow_client().get_technical_exercise(data.get('skills') or [], difficulty)
        return jsonify(result)

    # Applications held by the workflow engine's ATS
    @app.route('/api/applications', methods=['GET'])
    @login_required
    def api_applications():
        try:
            result = get_workflow_client().get_applications()
            return jsonify({'success': result.get('success') is not False, 'data': result.get('data', [])})
        except Exception as e:
            return _handle_exception(e, 'listing applications')

    @app.route('/api/applications/<application_id>/status', methods=['POST'])
    @login_required
    def api_application_status(application_id):
        data = _json_body()
        try:
            status = parse_enum(ApplicationStatus, data.get('status'), 'status')
            result = get_workflow_client().update_application_status(
                application_id, status.value, data.get('stage') or status.value, data.get('notes'))
            return jsonify(result)
        except Exception as e:
            return _handle_exception(e, 'updating application status')

    # Scheduled workflows
    @app.route('/api/workflows', methods=['GET'])
    @login_required
    def api_workflows():
        try:
            return jsonify(get_workflow_client().get_scheduled_workflows())
        except Exception as e:
            return _handle_exception(e, 'listing workflows')

    @app.route('/api/workflows', methods=['POST'])
    @login_required
    def api_schedule_workflow():
        data = _json_body()
        missing = [f for f in ('name', 'type', 'schedule') if not data.get(f)]
        if missing:
            return _error(f"Missing required field(s): {', '.join(missing)}", 400)

        try:
            return jsonify(get_workflow_client().schedule_workflow(data)), 201
        except Exception as e:
            return _handle_exception(e, 'scheduling workflow')

    @app.route('/api/workflows/<workflow_id>/status', methods=['POST'])
    @login_required
    def api_workflow_status(workflow_id):
        data = _json_body()
        try:
            return jsonify(get_workflow_client().update_workflow_status(workflow_id, bool(data.get('is_active'))))
        except Exception as e:
            return _handle_exception(e, 'updating workflow status')

    @app.route('/api/workflows/<workflow_id>', methods=['DELETE'])
    @login_required
    def api_delete_workflow(workflow_id):
        try:
            return jsonify(get_workflow_client().delete_scheduled_workflow(workflow_id))
        except Exception as e:
            return _handle_exception(e, 'deleting workflow')

    @app.route('/api/workflows/<workflow_id>/trigger', methods=['POST'])
    @login_required
    def api_trigger_workflow(workflow_id):
        try:
            return jsonify(get_workflow_client().trigger_workflow(workflow_id, _json_body().get('data')))
        except Exception as e:
            return _handle_exception(e, 'triggering workflow')

    @app.route('/api/resume/screen', methods=['POST'])
    @login_required
    def api_screen_resume():
        data = _json_body()
        if not data.get('candidate_id') or not data.get('job_id'):
            return _error('candidate_id and job_id are required', 400)

        try:
            return jsonify(get_workflow_client().screen_resume(data['candidate_id'], data['job_id']))
        except Exception as e:
            return _handle_exception(e, 'screening resume')
