"""
quizzes 테이블 접근: 생성, 조회, 상태 전이(ready / failed / generating 리셋).
"""

from typing import Any

from sqlmodel import Session

from partyquiz.db.models import Quiz, QuizStatus


class QuizRepo:
    def create(self, session: Session, *, theme: str, generation_params: dict[str, Any]) -> Quiz:
        quiz = Quiz(
            theme=theme,
            status=QuizStatus.GENERATING.value,
            generation_params=generation_params,
        )
        session.add(quiz)
        session.commit()
        session.refresh(quiz)
        return quiz

    def get_by_id(self, session: Session, quiz_id: int) -> Quiz | None:
        return session.get(Quiz, quiz_id)

    def mark_ready(self, session: Session, quiz_id: int, quiz_data: dict[str, Any]) -> None:
        quiz = session.get(Quiz, quiz_id)
        if quiz:
            quiz.status = QuizStatus.READY.value
            quiz.quiz_data = quiz_data
            quiz.error_message = None
            session.add(quiz)
            session.commit()

    def mark_failed(self, session: Session, quiz_id: int, error_message: str) -> None:
        quiz = session.get(Quiz, quiz_id)
        if quiz:
            quiz.status = QuizStatus.FAILED.value
            quiz.error_message = error_message
            quiz.quiz_data = None
            session.add(quiz)
            session.commit()

    def reset_for_generation(
        self,
        session: Session,
        quiz: Quiz,
        generation_params: dict[str, Any] | None = None,
    ) -> Quiz:
        """재생성: generating으로 되돌리고 quiz_data/error_message 비움. 새 파라미터가 있으면 교체."""
        if generation_params is not None:
            quiz.generation_params = generation_params
            quiz.theme = generation_params.get("theme", quiz.theme)
        quiz.status = QuizStatus.GENERATING.value
        quiz.quiz_data = None
        quiz.error_message = None
        session.add(quiz)
        session.commit()
        session.refresh(quiz)
        return quiz

    def update_quiz_data(self, session: Session, quiz: Quiz, quiz_data: dict[str, Any]) -> Quiz:
        quiz.quiz_data = quiz_data
        session.add(quiz)
        session.commit()
        session.refresh(quiz)
        return quiz


quiz_repo = QuizRepo()
