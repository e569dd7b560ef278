"""
HR Buddy - CLI Entry Point.

Commands:
    python main.py serve [port]          Run the API server
    python main.py search "<query>"      Show how a search query is interpreted
    python main.py analyze <resume.pdf>  Analyze a resume with Gemini
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from hrbuddy.errors import GenerationError  # noqa: E402
from hrbuddy.services.ai_service import analyze_resume, process_natural_language_query  # noqa: E402
from hrbuddy.tools.pdf_parser import parse_pdf_from_path  # noqa: E402

USAGE = __doc__.split("Commands:")[1]


def serve(port: int = 8000):
    import uvicorn

    uvicorn.run("hrbuddy.api.app:app", host="0.0.0.0", port=port)


def search(query: str):
    print(f"Interpreting: {query}")
    result = asyncio.run(process_natural_language_query(query))
    print(json.dumps(result, indent=2))


def analyze(path: str):
    resume_path = Path(path)
    if not resume_path.exists() or resume_path.suffix.lower() != ".pdf":
        print(f"Error: {resume_path} is not a valid PDF")
        return

    resume_text = parse_pdf_from_path(str(resume_path))
    print(f"Extracted {len(resume_text)} chars")
    if not resume_text.strip():
        print("Error: PDF appears to be empty or unreadable")
        return

    result = asyncio.run(analyze_resume(resume_text))
    print(json.dumps(result, indent=2))


def main():
    """Run the HR Buddy CLI."""
    logging.basicConfig(level=logging.INFO)

    if len(sys.argv) < 2:
        print(f"Usage:{USAGE}")
        return

    command, args = sys.argv[1], sys.argv[2:]
    try:
        if command == "serve":
            serve(int(args[0]) if args else 8000)
        elif command == "search" and args:
            search(" ".join(args))  # Join all args for unquoted queries
        elif command == "analyze" and args:
            analyze(" ".join(args))  # Handle filenames with spaces
        else:
            print(f"Usage:{USAGE}")
    except GenerationError as e:
        print(f"Error: {e}")


if __name__ == "__main__":
    main()
