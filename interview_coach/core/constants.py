APP_TITLE = "AI Interview Coach"

NUM_QUESTIONS_OPTIONS = [3, 5, 7]
DEFAULT_NUM_QUESTIONS = 3

PLACEHOLDER_JOB_DESCRIPTION = """Job Title: Senior Backend Engineer

Responsibilities:
- Design, build and operate Python services backed by PostgreSQL and Redis.
- Collaborate with product managers, designers and frontend engineers.
- Write clean, maintainable and well-tested code.
- Own performance and reliability of production systems.

Requirements:
- 5+ years of experience in backend development.
- Strong proficiency in Python and at least one web framework (FastAPI, Django).
- Experience with SQL databases, caching and message queues.
- Familiarity with testing frameworks such as pytest.
- Excellent problem-solving and communication skills."""
