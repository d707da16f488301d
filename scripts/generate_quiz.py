"""
Quiz generation CLI.
Builds a prompt, runs the generation pipeline and prints the questions as JSON.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from quizbuilder.core.config import settings
from quizbuilder.core.logging_config import get_logger, setup_logging
from quizbuilder.core.prompt_builder import build_prompt
from quizbuilder.schemas import GenerateOptions, QuizConfig
from quizbuilder.services.generation_client import GenerationClient, LocalGenerationClient
from quizbuilder.services.quiz_service import generate_quiz_questions

logger = get_logger(__name__)


async def run(args: argparse.Namespace) -> list:
    reference = Path(args.reference_file).read_text(encoding="utf-8") if args.reference_file else None
    
    config = QuizConfig(
        topic=args.topic,
        count=args.count,
        allowedTypes=args.types,
        reference=reference,
        withAnswers=not args.no_answers,
    )
    prompt = build_prompt(config)
    logger.debug(f"Prompt ({len(prompt)} chars):\n{prompt}")
    
    client = LocalGenerationClient() if args.local else GenerationClient(endpoint=args.endpoint)
    questions = await generate_quiz_questions(
        prompt,
        GenerateOptions(
            count=config.count,
            allowedTypes=config.allowedTypes,
            enforceExactCount=not args.no_enforce,
            topic=config.topic,
        ),
        client=client,
    )
    return [q.model_dump(exclude_none=True) for q in questions]


def main():
    """Generate a quiz from the command line."""
    
    parser = argparse.ArgumentParser(description="Generate quiz questions")
    parser.add_argument("--topic", default="", help="Quiz topic")
    parser.add_argument(
        "--count",
        type=int,
        default=settings.DEFAULT_QUESTION_COUNT,
        help=f"Exact number of questions (default: {settings.DEFAULT_QUESTION_COUNT})"
    )
    parser.add_argument(
        "--types",
        nargs="+",
        default=["multiple-choice", "written", "matching"],
        help="Allowed question types"
    )
    parser.add_argument("--reference-file", help="Text file with reference material")
    parser.add_argument("--no-answers", action="store_true", help="Do not ask for answer keys")
    parser.add_argument("--no-enforce", action="store_true", help="Do not pad/deduplicate to the exact count")
    parser.add_argument("--endpoint", default=None, help="Transport endpoint URL")
    parser.add_argument("--local", action="store_true", help="Call the LLM in-process instead of the endpoint")
    parser.add_argument("--log-level", default="WARNING")
    
    args = parser.parse_args()
    setup_logging("development", args.log_level)
    
    if args.local and not settings.OPENAI_API_KEY:
        print("❌ Error: OPENAI_API_KEY not set in .env", file=sys.stderr)
        sys.exit(1)
    
    questions = asyncio.run(run(args))
    print(json.dumps(questions, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
