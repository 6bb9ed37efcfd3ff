"""CLI entry point for Lead Scout."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from leadscout.config import settings
from leadscout.errors import LeadScoutError
from leadscout.models import SearchResponse
from leadscout.models.database import init_db
from leadscout.search import PromptTemplateStore, build_service, canonicalize, write_leads_csv

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


async def run_search(
    query: str,
    desired_count: Optional[int] = None,
    output_path: Optional[Path] = None,
    use_mock: bool = False,
    concurrency: Optional[int] = None,
) -> SearchResponse:
    """Run a search against the local database and report the results."""
    session_factory = init_db()
    service = build_service(session_factory, use_mock=use_mock, concurrency=concurrency)

    if use_mock:
        logger.info("Using mock connector for testing")

    response = await service.search(query, desired_count)
    logger.info(
        f"{len(response.leads)} leads for {query!r}"
        f"{' (from cache)' if response.cached else ''}"
    )

    if output_path:
        cached = service.cache.resolve(canonicalize(query))
        export_to_csv(cached.leads if cached else [], output_path)
        logger.info(f"Results exported to {output_path}")

    print_summary(response)
    return response


def export_to_csv(leads: list, output_path: Path):
    """Export leads to a CSV file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        write_leads_csv(leads, f)


def print_summary(response: SearchResponse):
    """Print a summary of results to console."""
    print("\n" + "=" * 60)
    print("LEAD SCOUT - RESULTS SUMMARY")
    print("=" * 60)

    leads = response.leads
    print(f"\nQuery: {response.query}")
    print(f"Leads: {len(leads)}{' (cached)' if response.cached else ''}")

    failed = [lead for lead in leads if lead.get("error")]
    if failed:
        print(f"With enrichment errors: {len(failed)}")

    if leads:
        print("\n" + "-" * 60)
        print("TOP 10 LEADS")
        print("-" * 60)

        for rank, lead in enumerate(leads[:10], 1):
            score = lead["score"]
            print(f"\n#{rank} {lead['name']}")
            print(
                f"   General: {score['general_percent']}% | "
                f"Marketing: {score['marketing_percent']}%"
            )
            if lead.get("final_url") or lead.get("website_uri"):
                print(f"   Website: {lead.get('final_url') or lead.get('website_uri')} [{lead['website_status']}]")
            if lead.get("emails"):
                print(f"   Emails: {', '.join(lead['emails'][:3])}")
            if score["general_rationale"]:
                print(f"   Why: {', '.join(r['parameter'] for r in score['general_rationale'])}")

    print("\n" + "=" * 60)


def set_template(category: str, template_path: Path) -> int:
    """Store a prompt template for a business category."""
    content = template_path.read_text(encoding="utf-8")
    store = PromptTemplateStore(init_db())
    version = store.add(category, content)
    print(f"Stored template for '{category}' as version {version}")
    return version


def serve(host: str, port: int):
    """Run the HTTP API."""
    import uvicorn

    from leadscout.api import create_app

    uvicorn.run(create_app(), host=host, port=port, log_level="info")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Lead Scout - Find, enrich and rank local business leads"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Search for leads")
    search_parser.add_argument("query", help='Free-text search, e.g. "plumbers in Austin"')
    search_parser.add_argument(
        "--count", "-n",
        type=int,
        default=None,
        help=f"Number of businesses to discover (default: {settings.default_result_count}, "
             f"max: {settings.max_result_count})",
    )
    search_parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Also export the leads to this CSV path",
    )
    search_parser.add_argument(
        "--concurrency", "-c",
        type=int,
        default=None,
        help=f"Concurrent enrichments (default: {settings.enrichment_concurrency})",
    )
    search_parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock connector for testing",
    )

    template_parser = subparsers.add_parser(
        "set-template",
        help="Store an insight prompt template for a business category",
    )
    template_parser.add_argument("category", help='Business category, e.g. "plumber"')
    template_parser.add_argument("path", type=Path, help="Path to the template text file")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "set-template":
        if not args.path.exists():
            logger.error(f"Template file not found: {args.path}")
            sys.exit(1)
        try:
            set_template(args.category, args.path)
        except LeadScoutError as e:
            logger.error(f"Failed to store template: {e}")
            sys.exit(1)
        return

    if args.command == "serve":
        serve(args.host, args.port)
        return

    if not args.query.strip():
        logger.error("Query must not be blank")
        sys.exit(1)

    if args.count is not None and args.count <= 0:
        logger.error("--count must be a positive number")
        sys.exit(1)

    try:
        asyncio.run(run_search(
            query=args.query,
            desired_count=args.count,
            output_path=args.output,
            use_mock=args.mock,
            concurrency=args.concurrency,
        ))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    except LeadScoutError as e:
        logger.error(f"Search failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
