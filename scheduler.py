import time
import logging
import schedule
import smtplib
from datetime import datetime, timedelta
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from database import db
from models import (Candidate, Job, RecruitmentCandidate, EmailBatch, InterviewSchedule,
                    RecruitmentStatus, BatchStatus, JobStatus)
from utils import ConfigHelper

logger = logging.getLogger(__name__)

BATCH_RETENTION_DAYS = 30


def generate_daily_report(app):
    """Generate daily recruitment report"""
    with app.app_context():
        try:
            today = datetime.utcnow().date()
            yesterday = datetime.utcnow() - timedelta(days=1)

            new_candidates = Candidate.query.filter(Candidate.created_at >= yesterday).count()
            invitations_sent = RecruitmentCandidate.query.filter(
                RecruitmentCandidate.invited_at >= yesterday
            ).count()
            applications_received = RecruitmentCandidate.query.filter(
                RecruitmentCandidate.applied_at >= yesterday
            ).count()
            interviews_scheduled = InterviewSchedule.query.filter(
                InterviewSchedule.created_at >= yesterday
            ).count()

            top_matches = RecruitmentCandidate.query\
                .filter(RecruitmentCandidate.applied_at >= yesterday)\
                .filter(RecruitmentCandidate.match_score >= 70)\
                .order_by(RecruitmentCandidate.match_score.desc())\
                .limit(10).all()

            report = {
                'date': today.strftime('%Y-%m-%d'),
                'new_candidates': new_candidates,
                'invitations_sent': invitations_sent,
                'applications_received': applications_received,
                'interviews_scheduled': interviews_scheduled,
                'top_matches': [
                    {
                        'candidate': c.full_name,
                        'position': c.position,
                        'score': c.match_score,
                        'email': c.email
                    }
                    for c in top_matches
                ]
            }

            logger.info(f"Generated daily report: {new_candidates} new candidates, "
                        f"{applications_received} applications")

            if ConfigHelper.get_smtp_config()['enabled']:
                send_report_email(f"Daily Recruitment Report - {report['date']}", render_daily_report(report))

            return report

        except Exception as e:
            logger.error(f"Error generating daily report: {e}")
            return None


def render_daily_report(report):
    rows = ''.join(
        f"<tr><td>{m['candidate']}</td><td>{m['position']}</td><td>{m['score']}%</td><td>{m['email']}</td></tr>"
        for m in report['top_matches']
    )
    return f"""
    <html>
    <body style="font-family: Arial, sans-serif;">
        <h2>Daily Recruitment Report</h2>
        <p>Report Date: {report['date']}</p>
        <ul>
            <li>New candidates: {report['new_candidates']}</li>
            <li>Invitations sent: {report['invitations_sent']}</li>
            <li>Applications received: {report['applications_received']}</li>
            <li>Interviews scheduled: {report['interviews_scheduled']}</li>
        </ul>
        <h3>Top Matches (Score 70+)</h3>
        <table>
            <thead><tr><th>Candidate</th><th>Position</th><th>Match Score</th><th>Email</th></tr></thead>
            <tbody>{rows}</tbody>
        </table>
        <p><em>This is an automated report from EasyHR Tools.</em></p>
    </body>
    </html>
    """


def generate_weekly_report(app):
    """Generate weekly recruitment report"""
    with app.app_context():
        try:
            today = datetime.utcnow().date()
            week_ago = datetime.utcnow() - timedelta(days=7)

            avg_match_score = db.session.query(db.func.avg(RecruitmentCandidate.match_score)).scalar() or 0

            pipeline = {
                status.value: RecruitmentCandidate.query.filter_by(status=status).count()
                for status in RecruitmentStatus
            }

            report = {
                'week_ending': today.strftime('%Y-%m-%d'),
                'new_candidates_week': Candidate.query.filter(Candidate.created_at >= week_ago).count(),
                'applications_week': RecruitmentCandidate.query.filter(
                    RecruitmentCandidate.applied_at >= week_ago
                ).count(),
                'total_candidates': Candidate.query.count(),
                'active_jobs': Job.query.filter_by(status=JobStatus.ACTIVE).count(),
                'emails_sent_week': db.session.query(db.func.sum(EmailBatch.sent_count))
                .filter(EmailBatch.created_at >= week_ago).scalar() or 0,
                'avg_match_score': round(float(avg_match_score), 1),
                'pipeline': pipeline,
            }

            logger.info(f"Generated weekly report: {report['new_candidates_week']} new candidates this week")

            if ConfigHelper.get_smtp_config()['enabled']:
                send_report_email(f"Weekly Recruitment Report - Week Ending {report['week_ending']}",
                                  render_weekly_report(report))

            return report

        except Exception as e:
            logger.error(f"Error generating weekly report: {e}")
            return None


def render_weekly_report(report):
    pipeline = ''.join(f"<li>{status}: {count}</li>" for status, count in report['pipeline'].items())
    return f"""
    <html>
    <body style="font-family: Arial, sans-serif;">
        <h2>Weekly Recruitment Report</h2>
        <p>Week Ending: {report['week_ending']}</p>
        <ul>
            <li>New candidates this week: {report['new_candidates_week']}</li>
            <li>Applications this week: {report['applications_week']}</li>
            <li>Total candidates: {report['total_candidates']}</li>
            <li>Active jobs: {report['active_jobs']}</li>
            <li>Invitation emails sent: {report['emails_sent_week']}</li>
            <li>Average match score: {report['avg_match_score']}%</li>
        </ul>
        <h3>Pipeline</h3>
        <ul>{pipeline}</ul>
        <p><em>This is an automated weekly report from EasyHR Tools.</em></p>
    </body>
    </html>
    """


def send_report_email(subject, html_content):
    """Send a report via SMTP. Returns True when the message went out."""
    config = ConfigHelper.get_smtp_config()

    if not config['smtp_user'] or not config['recipients']:
        logger.warning("SMTP credentials or recipients not configured for reports")
        return False

    try:
        msg = MIMEMultipart()
        msg['From'] = config['smtp_user']
        msg['To'] = ', '.join(config['recipients'])
        msg['Subject'] = subject
        msg.attach(MIMEText(html_content, 'html'))

        with smtplib.SMTP(config['smtp_server'], config['smtp_port']) as server:
            server.starttls()
            server.login(config['smtp_user'], config['smtp_password'])
            server.send_message(msg)

        logger.info(f"Report '{subject}' sent to {len(config['recipients'])} recipients")
        return True

    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Error sending report email: {e}")
        return False


def cleanup_old_batches(app):
    """Delete finished email batches older than the retention window"""
    with app.app_context():
        try:
            cutoff_date = datetime.utcnow() - timedelta(days=BATCH_RETENTION_DAYS)

            deleted = EmailBatch.query.filter(
                EmailBatch.created_at < cutoff_date,
                EmailBatch.status.in_([BatchStatus.COMPLETED, BatchStatus.FAILED])
            ).delete(synchronize_session=False)

            db.session.commit()

            logger.info(f"Cleaned up {deleted} email batches")
            return deleted

        except Exception as e:
            logger.error(f"Error cleaning up old batches: {e}")
            db.session.rollback()
            return 0


def schedule_tasks(app):
    """Schedule all background tasks"""
    # Daily report at 8 AM
    schedule.every().day.at("08:00").do(generate_daily_report, app)

    # Weekly report on Monday at 9 AM
    schedule.every().monday.at("09:00").do(generate_weekly_report, app)

    # Clean up batches every Sunday at 2 AM
    schedule.every().sunday.at("02:00").do(cleanup_old_batches, app)

    logger.info("Scheduled tasks configured")


def run_scheduler():
    """Run the scheduler loop"""
    logger.info("Starting scheduler...")

    while True:
        try:
            schedule.run_pending()
            time.sleep(60)
        except KeyboardInterrupt:
            logger.info("Scheduler stopped")
            break
        except Exception as e:
            logger.error(f"Scheduler error: {e}")
            time.sleep(300)


def start_background_services(app):
    """Start all background services"""
    logger.info("Starting background services...")

    schedule_tasks(app)
    run_scheduler()
