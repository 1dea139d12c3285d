#!/usr/bin/env python3
"""
Example: Run one Teams meeting transcript through the task pipeline by hand.

This script demonstrates:
1. Building the pipeline from a cached Microsoft token and config.json
2. Processing a single transcript without the webhook service
3. Printing what was auto-created and what was sent for review

Prerequisites:
    - A token cache (.tokens.json) from a prior sign-in
    - A config.json with at least "oversightPerson"
    - Set environment variables:
        OPENAI_API_KEY=your_key
        AZURE_CLIENT_ID=your_app_id
        AZURE_TENANT_ID=your_tenant
        MY_USER_ID=your_directory_id

Usage:
    python examples/process_transcript.py <meeting_id> <transcript_id>
"""

import asyncio
import os
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from dotenv import load_dotenv

# Load environment variables
env_file = Path(__file__).parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)

from transcript_tasks.app_config import load_app_config
from transcript_tasks.auth.oauth import TokenProvider
from transcript_tasks.clients.graph_client import GraphClient
from transcript_tasks.clients.meetings import MeetingsClient
from transcript_tasks.clients.openai_client import OpenAIClient
from transcript_tasks.errors import TranscriptTasksError
from transcript_tasks.pipeline import TranscriptTaskPipeline

REQUIRED_ENV = ('OPENAI_API_KEY', 'AZURE_CLIENT_ID', 'AZURE_TENANT_ID', 'MY_USER_ID')


async def main(meeting_id: str, transcript_id: str) -> int:
    """Process one transcript and print the outcome."""
    print("=" * 60)
    print("Transcript Task Pipeline Example")
    print("=" * 60)

    missing = [name for name in REQUIRED_ENV if not os.getenv(name)]
    if missing:
        print(f"ERROR: missing environment variables: {', '.join(missing)}")
        return 1

    app_config = load_app_config(os.getenv('APP_CONFIG_PATH', './config.json'))

    token_provider = TokenProvider(
        client_id=os.environ['AZURE_CLIENT_ID'],
        tenant_id=os.environ['AZURE_TENANT_ID'],
        cache_path=os.getenv('TOKEN_CACHE_PATH', './.tokens.json'),
    )
    graph = GraphClient(token_provider)
    openai = OpenAIClient()

    try:
        pipeline = TranscriptTaskPipeline.build(
            openai_client=openai,
            graph_client=graph,
            app_config=app_config,
            sender_id=os.environ['MY_USER_ID'],
        )

        meeting = await MeetingsClient(graph).get_meeting_details(meeting_id)
        print(f"\nMeeting: {meeting.subject}")
        print(f"Participants: {', '.join(p.display_name for p in meeting.everyone)}")

        result = await pipeline.process_transcript(meeting_id, transcript_id, meeting)
        await pipeline.filer.drain()

        print(f"\nResult:")
        print(f"  Tasks extracted: {result.total_extracted}")
        print(f"  Created in Planner: {result.created}")
        print(f"  Sent for review: {result.queued}")
        print(f"  Processing time: {result.processing_time_ms}ms")

        for task in result.created_tasks:
            print(f"    ✅ {task.title}")
        for task in result.review_tasks:
            print(f"    📋 {task.title}")
        for warning in result.warnings:
            print(f"    ⚠️  {warning}")

        return 0

    except TranscriptTasksError as e:
        print(f"\nERROR: {e}")
        return 1

    finally:
        await graph.close()
        await token_provider.close()
        await openai.close()


if __name__ == '__main__':
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1], sys.argv[2])))
