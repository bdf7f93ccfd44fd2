"""
퀴즈 생성 CLI (DB 저장 없이 생성 결과만 출력).

사용 예:
  python -m partyquiz.main -i params.json --pretty
  echo '{"theme": "90s music"}' | python -m partyquiz.main --stdin --rounds 2 --allowed-types audio,text
로그는 stderr, JSON 결과는 stdout으로 출력된다.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from partyquiz.quiz.generator import GenerationError, build_quiz_generator
from partyquiz.schema.request import GenerationRequest

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def parse_allowed_types(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_payload(input_path: Path | None, use_stdin: bool) -> dict:
    if use_stdin:
        raw = sys.stdin.read()
        if not raw.strip():
            raise ValueError("stdin이 비어 있습니다.")
        return json.loads(raw)

    if not input_path:
        raise ValueError("--input 또는 --stdin 중 하나는 필요합니다.")

    if not input_path.exists():
        raise FileNotFoundError(f"파일을 찾을 수 없습니다: {input_path}")
    return json.loads(input_path.read_text(encoding="utf-8"))


def apply_overrides(payload: dict, args: argparse.Namespace) -> dict:
    update = dict(payload)
    if args.theme is not None:
        update["theme"] = args.theme
    if args.rounds is not None:
        update["rounds"] = args.rounds
    if args.questions_per_round is not None:
        update["questions_per_round"] = args.questions_per_round
    if args.brainrot_level is not None:
        update["brainrot_level"] = args.brainrot_level
    if args.allowed_types is not None:
        update["allowed_types"] = parse_allowed_types(args.allowed_types)
    return update


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="테마/참가자 파라미터 JSON으로 파티 퀴즈를 생성합니다.")
    parser.add_argument("-i", "--input", help="생성 파라미터 JSON 파일 경로")
    parser.add_argument("--stdin", action="store_true", help="표준 입력에서 JSON 읽기")
    parser.add_argument("--output", help="결과 JSON 저장 경로 (없으면 stdout)")
    parser.add_argument("--theme", help="퀴즈 테마")
    parser.add_argument("--rounds", type=int, help="라운드 수")
    parser.add_argument("--questions-per-round", type=int, help="라운드당 문항 수")
    parser.add_argument("--brainrot-level", choices=["low", "medium", "high"], help="말투 수준")
    parser.add_argument(
        "--allowed-types",
        help="문항 유형 CSV (text,audio,video,image,true_false,multiple_choice)",
    )
    parser.add_argument("--pretty", action="store_true", help="예쁘게 출력")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    try:
        input_path = Path(args.input).expanduser() if args.input else None
        if input_path is None and not args.stdin and args.theme:
            payload = {}
        else:
            payload = load_payload(input_path, args.stdin)
        req = GenerationRequest.model_validate(apply_overrides(payload, args))
    except (ValueError, FileNotFoundError, json.JSONDecodeError, ValidationError) as exc:
        print(f"입력 처리 실패: {exc}", file=sys.stderr)
        sys.exit(1)

    logger.info(
        "퀴즈 생성 시작 theme=%r rounds=%d questions_per_round=%d types=%s",
        req.theme,
        req.rounds,
        req.questions_per_round,
        req.allowed_types,
    )
    try:
        result = build_quiz_generator().generate(req)
    except GenerationError as e:
        logger.error("퀴즈 생성 실패: %s", e)
        sys.exit(1)

    output = json.dumps(
        result.to_json_dict(),
        ensure_ascii=False,
        indent=2 if args.pretty else None,
    )

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
    else:
        print(output)


if __name__ == "__main__":
    main()
