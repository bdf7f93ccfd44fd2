from partyquiz.db.connection import engine, get_session, init_db
from partyquiz.db.models import Quiz, QuizStatus
from partyquiz.db.repositories.quiz import quiz_repo

__all__ = [
    "engine",
    "get_session",
    "init_db",
    "Quiz",
    "QuizStatus",
    "quiz_repo",
]
