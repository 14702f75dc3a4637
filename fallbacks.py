"""
Static content served when the workflow engine cannot be reached.

Interview questions and technical exercises are normally generated by the
engine's AI workflow; the functions below produce job-specific stand-ins so
the interview tooling keeps working. The demo records keep the dashboards
populated while the engine is down and are always flagged ``demo``.
"""

import time
from datetime import datetime

FALLBACK_EXERCISES = {
    'React': {
        'title': 'React {difficulty} Component Challenge',
        'description': 'Build a reusable React component with proper state management.',
        'starter_code': (
            "import React, { useState } from 'react';\n\n"
            "function Component() {\n"
            "  // Your implementation here\n"
            "  return <div>Hello World</div>;\n"
            "}\n\n"
            "export default Component;"
        ),
    },
    'Python': {
        'title': 'Python {difficulty} Algorithm Challenge',
        'description': 'Implement an efficient algorithm using Python best practices.',
        'starter_code': (
            "def solution(input_data):\n"
            "    \"\"\"\n"
            "    Your implementation here\n"
            "    \"\"\"\n"
            "    pass\n\n"
            "if __name__ == \"__main__\":\n"
            "    print(solution([]))"
        ),
    },
    'JavaScript': {
        'title': 'JavaScript {difficulty} Function Challenge',
        'description': 'Create a JavaScript function that demonstrates modern ES6+ features.',
        'starter_code': (
            "function solution(data) {\n"
            "  // Your implementation here\n"
            "  return null;\n"
            "}\n\n"
            "export default solution;"
        ),
    },
}

TIME_LIMITS = {'easy': 30, 'medium': 60, 'hard': 90}


def fallback_questions(job_title, skills):
    """Five templated questions; the first two are technical"""
    skills = list(skills or [])
    primary_skill = skills[0] if skills else 'relevant technologies'
    paired_skills = ' and '.join(skills[:2]) if skills else primary_skill

    questions = [
        f"Tell me about your experience with {primary_skill} in {job_title} roles.",
        f"How would you approach a challenging {job_title} project using {paired_skills}?",
        f"Describe a time when you had to solve a complex problem in your {job_title} work.",
        f"What interests you most about this {job_title} position at our company?",
        f"How do you stay current with {primary_skill} trends and best practices?",
    ]

    return {
        'success': True,
        'data': [
            {
                'id': str(i + 1),
                'question': question,
                'category': 'technical' if i < 2 else 'behavioral',
                'skills': skills[:2] if i < 2 else [],
            }
            for i, question in enumerate(questions)
        ],
        'fallback': True,
    }


def fallback_exercise(skills, difficulty='medium'):
    skills = list(skills or [])
    primary_skill = skills[0] if skills else 'Programming'
    exercise = FALLBACK_EXERCISES.get(primary_skill, FALLBACK_EXERCISES['JavaScript'])

    return {
        'success': True,
        'data': {
            'id': str(int(time.time() * 1000)),
            'title': exercise['title'].format(difficulty=difficulty.capitalize()),
            'description': exercise['description'],
            'skills': skills,
            'difficulty': difficulty,
            'time_limit': TIME_LIMITS.get(difficulty, 60),
            'instructions': (
                f"{exercise['description']}\n\n"
                "Requirements:\n"
                f"1. Use {primary_skill} best practices\n"
                "2. Write clean, readable code\n"
                "3. Handle edge cases appropriately\n"
                "4. Include proper error handling\n\n"
                f"Focus on demonstrating your {primary_skill} expertise."
            ),
            'starter_code': exercise['starter_code'],
            'test_cases': [
                'Code runs without errors',
                'Handles normal input correctly',
                'Handles edge cases properly',
                f'Follows {primary_skill} best practices',
            ],
        },
        'fallback': True,
    }


DEMO_JOBS = [
    {
        'id': 'demo-job-1',
        'title': 'Senior Frontend Developer',
        'company': 'EasyHR Tools',
        'location': 'Remote',
        'employment_type': 'full-time',
        'salary_range': '$90,000 - $120,000',
        'description': 'Build and maintain recruiter-facing dashboards.',
        'requirements': ['5+ years React', 'TypeScript', 'REST APIs'],
        'status': 'active',
        'applicants_count': 12,
    },
    {
        'id': 'demo-job-2',
        'title': 'Automation Specialist',
        'company': 'EasyHR Tools',
        'location': 'Berlin',
        'employment_type': 'contract',
        'salary_range': '$60/hour',
        'description': 'Design workflow automations for screening and outreach.',
        'requirements': ['n8n or Zapier', 'JavaScript', 'API integrations'],
        'status': 'active',
        'applicants_count': 5,
    },
]

DEMO_CANDIDATES = [
    {
        'id': 'demo-candidate-1',
        'first_name': 'Alex',
        'last_name': 'Morgan',
        'email': 'alex.morgan@example.com',
        'position': 'Senior Frontend Developer',
        'skills': ['React', 'TypeScript', 'GraphQL'],
        'status': 'active',
        'rating': 4.5,
        'match_score': 88,
    },
    {
        'id': 'demo-candidate-2',
        'first_name': 'Sam',
        'last_name': 'Lee',
        'email': 'sam.lee@example.com',
        'position': 'Automation Specialist',
        'skills': ['n8n', 'Python', 'REST'],
        'status': 'active',
        'rating': 3.5,
        'match_score': 72,
    },
]


def demo_dashboard_stats():
    positions = {}
    for candidate in DEMO_CANDIDATES:
        positions[candidate['position']] = positions.get(candidate['position'], 0) + 1

    return {
        'total_candidates': len(DEMO_CANDIDATES),
        'active_candidates': len(DEMO_CANDIDATES),
        'placed_candidates': 0,
        'inactive_candidates': 0,
        'high_rating': sum(1 for c in DEMO_CANDIDATES if c['rating'] >= 4),
        'medium_rating': sum(1 for c in DEMO_CANDIDATES if 3 <= c['rating'] < 4),
        'low_rating': sum(1 for c in DEMO_CANDIDATES if c['rating'] < 3),
        'recent_applications': len(DEMO_CANDIDATES),
        'positions': positions,
        'last_updated': datetime.utcnow().isoformat(),
    }
