"""PageGenie command line.

Run the source finder or a single AI task from the terminal, or serve the API.
"""

import argparse
import asyncio
import json

from pagegenie.errors import PageGenieError
from pagegenie.services import sources
from pagegenie.services.directive_pipeline import DirectiveOptions, PromptDirectivePipeline, Task


async def run_sources(text: str, url: str | None, limit: int | None):
    print(f"Finding sources for: {url or text[:80]}")
    print("-" * 50)
    items = await sources.find_sources(text, url, size=limit)
    if not items:
        print("[!] No sources found.")
        return
    for i, item in enumerate(items, 1):
        print(f"  {i}. {item.title}")
        print(f"     {item.url}")
        print(f"     {item.reason}")


async def run_task(task: str, text: str, persona: str | None, target_lang: str, structured: bool):
    output = await PromptDirectivePipeline().run(
        task,
        text,
        DirectiveOptions(persona=persona, target_lang=target_lang, structured=structured),
    )
    if isinstance(output, dict):
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        print(output)


def main():
    parser = argparse.ArgumentParser(description="PageGenie reading assistant")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sources_parser = subparsers.add_parser("sources", help="Find corroborating web sources")
    sources_parser.add_argument("--text", "-t", default="", help="Passage to corroborate")
    sources_parser.add_argument("--url", "-u", help="Page the passage came from")
    sources_parser.add_argument("--limit", "-n", type=int, help="Maximum number of sources")

    run_parser = subparsers.add_parser("run", help="Run one AI task over a passage")
    run_parser.add_argument("--task", required=True, choices=[t.value for t in Task])
    run_parser.add_argument("--text", "-t", required=True, help="Input text")
    run_parser.add_argument("--persona", "-p", help="student | researcher | editor | general")
    run_parser.add_argument("--target-lang", default="", help="Target language for translate")
    run_parser.add_argument("--structured", action="store_true", help="JSON bullets for summarize/explain")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    if args.command == "serve":
        import uvicorn

        uvicorn.run("pagegenie.main:app", host=args.host, port=args.port)
        return

    try:
        if args.command == "sources":
            asyncio.run(run_sources(args.text, args.url, args.limit))
        else:
            asyncio.run(
                run_task(args.task, args.text, args.persona, args.target_lang, args.structured)
            )
    except PageGenieError as e:
        print(f"\n[!] {e.code}: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
