from fallbacks import DEMO_CANDIDATES, demo_dashboard_stats, fallback_exercise, fallback_questions


def test_fallback_questions_lead_with_technical():
    result = fallback_questions('Data Engineer', ['Python', 'Spark', 'Airflow'])

    questions = result['data']
    assert len(questions) == 5
    assert [q['category'] for q in questions] == ['technical', 'technical', 'behavioral', 'behavioral', 'behavioral']
    assert questions[0]['skills'] == ['Python', 'Spark']
    assert 'Data Engineer' in questions[0]['question']
    assert result['fallback'] is True


def test_fallback_questions_without_skills():
    questions = fallback_questions('Recruiter', [])['data']

    assert 'relevant technologies' in questions[0]['question']
    assert questions[0]['skills'] == []


def test_fallback_exercise_uses_primary_skill():
    exercise = fallback_exercise(['Python', 'Django'], 'medium')['data']

    assert exercise['title'] == 'Python Medium Algorithm Challenge'
    assert exercise['time_limit'] == 60
    assert 'def solution' in exercise['starter_code']
    assert len(exercise['test_cases']) == 4


def test_fallback_exercise_defaults_to_javascript():
    exercise = fallback_exercise(['Go'], 'easy')['data']

    assert exercise['title'] == 'JavaScript Easy Function Challenge'
    assert exercise['time_limit'] == 30


def test_demo_stats_cover_demo_candidates():
    stats = demo_dashboard_stats()

    assert stats['total_candidates'] == len(DEMO_CANDIDATES)
    assert stats['high_rating'] + stats['medium_rating'] + stats['low_rating'] == len(DEMO_CANDIDATES)
