from partyquiz.db.repositories.quiz import quiz_repo

__all__ = [
    "quiz_repo",
]
