#!/usr/bin/env python3
"""
Courseware Build CLI - Turn a source document into formatted courseware

This script runs the full pipeline on a single file without the web UI:
- Import the source (.txt or .docx, embedded images included)
- Optional suggestion pass (tags key points, warnings, images, ...)
- Structuring into content blocks
- Estimated page numbers for the table of contents
- Word (.doc) export and a printable HTML view

Usage:
    python build_courseware.py input.docx
    python build_courseware.py notes.txt --name "Service Basics" --suggest
    python build_courseware.py --project-id proj_1700000000000_abc1234

Examples:
    # Basic usage (writes <name>.doc and <name>.html into data/output)
    python build_courseware.py "Onboarding Guide.docx"

    # Re-export a stored project without calling the AI again
    python build_courseware.py --project-id proj_1700000000000_abc1234 --skip-ai
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

# Load environment variables
load_dotenv()

from ai_providers import GeminiProvider
from config.logging_config import get_logger
from config.settings import settings
from core.errors import CoursewareError
from core.formatting.pagination import FlowEstimateMeasurer, headings_without_page
from core.formatting.exporters import word_filename
from core.formatting.toc_generator import TocGenerator
from core.project import EditorSession, ProjectRepository, new_project

logger = get_logger(__name__)


async def build(args) -> int:
    if args.show_config:
        settings.print_config()

    repo = ProjectRepository()

    if args.project_id:
        project = repo.load(args.project_id)
        if args.name:
            project = project.with_updates(name=args.name)
    else:
        if not args.input:
            print("❌ Error: INPUT is required unless --project-id is given", file=sys.stderr)
            return 2
        input_path = Path(args.input)
        if not input_path.exists():
            print(f"❌ Error: File not found: {input_path}", file=sys.stderr)
            return 1
        project = new_project(args.name or input_path.stem, raw_content="")

    provider = None if args.skip_ai else GeminiProvider.from_settings()
    session = EditorSession(project, provider=provider)

    if args.input and not args.project_id:
        input_path = Path(args.input)
        print(f"📁 Importing {input_path.name}...")
        await session.import_file(input_path.name, input_path.read_bytes())

    if provider is not None:
        if args.suggest:
            print("🤖 Step 1: suggesting structure tags...")
            await session.analyze()
        print("🤖 Step 2: structuring content...")
        await session.generate()
        if session.status_message:
            print(f"⚠️  {session.status_message}")

    project = session.project
    measurer = FlowEstimateMeasurer(project.blocks, project.styles, project.images)
    outcome = session.calculate_page_numbers(measurer)
    print(f"📄 Page numbers estimated for {outcome.updated_count} headings (about {measurer.page_count} pages)")
    missing = headings_without_page(session.project.blocks)
    if missing:
        print(f"⚠️  {len(missing)} headings have no page number")

    toc = session.toc()
    if toc:
        print()
        print(TocGenerator().to_plain_text(toc))
        print()

    repo.save(session.project)
    print(f"💾 Saved project {session.project.id}")

    output_dir = Path(args.output_dir) if args.output_dir else settings.output_dir
    doc_path = session.export_word().write_to(output_dir)
    html_path = output_dir / (Path(word_filename(session.project.name)).stem + ".html")
    html_path.write_text(session.render_print_view(auto_print=False), encoding="utf-8")

    report = session.word_count_report()
    print(f"\n✅ Word export: {doc_path}")
    print(f"✅ Print view: {html_path}")
    print(f"   Words: {report.generated_count}/{report.raw_count} ({report.ratio:.0%})")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Structure a source document into courseware and export it",
        epilog="""
Examples:
  %(prog)s "Onboarding Guide.docx"
  %(prog)s notes.txt --name "Service Basics" --suggest
  %(prog)s --project-id proj_1700000000000_abc1234 --skip-ai
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'input',
        nargs='?',
        help='Source file (.txt or .docx)'
    )

    parser.add_argument(
        '-n', '--name',
        help='Project name (default: input file name)'
    )

    parser.add_argument(
        '-o', '--output-dir',
        help=f'Directory for exported files (default: {settings.output_dir})'
    )

    parser.add_argument(
        '--suggest',
        action='store_true',
        help='Run the suggestion pass before structuring'
    )

    parser.add_argument(
        '--skip-ai',
        action='store_true',
        help='Do not call the AI collaborator (re-export stored blocks)'
    )

    parser.add_argument(
        '--project-id',
        help='Use a stored project instead of creating a new one'
    )

    parser.add_argument(
        '--show-config',
        action='store_true',
        help='Print the active configuration before building'
    )

    args = parser.parse_args()

    try:
        return asyncio.run(build(args))
    except CoursewareError as e:
        print(f"\n❌ Error: {e.user_message}", file=sys.stderr)
        if e.detail:
            logger.debug(f"Error detail: {e.detail}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
