from partyquiz.services.llm import LLMError, OpenAIChatClient
from partyquiz.services.quiz_records import quiz_record_service
from partyquiz.services.schema_validator import parse_quiz, quiz_json_schema, validate_quiz
from partyquiz.services.wikimedia_search import WikimediaSearchService
from partyquiz.services.youtube_search import SearchError, YoutubeSearchService

__all__ = [
    "LLMError",
    "OpenAIChatClient",
    "SearchError",
    "WikimediaSearchService",
    "YoutubeSearchService",
    "parse_quiz",
    "quiz_json_schema",
    "quiz_record_service",
    "validate_quiz",
]
