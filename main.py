#!/usr/bin/env python3
"""
ChoreMatch command line driver.

Usage:
    python main.py init-db
    python main.py serve
    python main.py recommend --user-id <uuid> [--limit 6]
    python main.py assign --task-ids <uuid> [<uuid> ...] [--dry-run]
"""

import argparse
import json
import logging
import sys

from core.assignment import AssignmentOrchestrator
from core.config_loader import AppConfig, configure_logging, load_config
from core.exceptions import ChoreMatchError
from core.ranking import RankingService
from core.scorer import ScoringService
from database.database import build_engine, build_session_factory
from database.init_db import init_db
from database.uow import uow_factory

logger = logging.getLogger(__name__)


def build_orchestrator(config: AppConfig) -> AssignmentOrchestrator:
    """Wire the scoring, ranking and assignment services for a CLI run."""
    engine = build_engine(config.database)
    session_factory = build_session_factory(engine)

    scoring = ScoringService(config.matching.scorer)
    ranking = RankingService(scoring, config.matching.ranking)
    return AssignmentOrchestrator(uow_factory(session_factory), ranking=ranking, scoring=scoring)


def run_init_db(config: AppConfig, args) -> int:
    init_db(build_engine(config.database))
    return 0


def run_serve(config: AppConfig, args) -> int:
    import uvicorn
    from web.backend.app import create_app

    init_db(build_engine(config.database))
    host = args.host or config.web.host
    port = args.port or config.web.port

    logger.info(f"Starting ChoreMatch API on {host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port, log_level=config.logging.level.lower())
    return 0


def run_recommend(config: AppConfig, args) -> int:
    orchestrator = build_orchestrator(config)
    recommendations = orchestrator.recommend_tasks(args.user_id, limit=args.limit)

    if not recommendations:
        logger.info("No unassigned tasks to recommend")
    for rank, rec in enumerate(recommendations, start=1):
        print(f"{rank}. {rec.task.name} ({rec.task.task_code}) score={rec.result.final_score:.2f}")
    return 0


def run_assign(config: AppConfig, args) -> int:
    orchestrator = build_orchestrator(config)
    batch = orchestrator.assign_tasks(args.task_ids, auto_assign=not args.dry_run)

    for outcome in batch.results:
        best = outcome.best_match
        action = "previewed" if args.dry_run else "assigned"
        print(f"{outcome.task_name}: {action} to {best.user_name} (score={best.match_score:.2f})")
        for alt in outcome.alternatives:
            print(f"    {alt.user_name}: {alt.match_score:.2f}")
    for skipped in batch.skipped:
        print(f"skipped {skipped.task_id}: {skipped.reason}")
    for error in batch.errors:
        print(f"error {error.task_id}: {error.type}: {error.error}")

    if args.json:
        print(json.dumps({
            'results': len(batch.results),
            'skipped': len(batch.skipped),
            'errors': len(batch.errors),
        }))
    return 1 if batch.errors else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ChoreMatch household task matching")
    parser.add_argument('--config', type=str, default='config.yaml',
                        help='Path to the YAML config file (default: config.yaml)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    init_parser = subparsers.add_parser('init-db', help='Create database tables')
    init_parser.set_defaults(handler=run_init_db)

    serve_parser = subparsers.add_parser('serve', help='Run the HTTP API')
    serve_parser.add_argument('--host', type=str, default=None)
    serve_parser.add_argument('--port', type=int, default=None)
    serve_parser.set_defaults(handler=run_serve)

    recommend_parser = subparsers.add_parser('recommend', help='Recommend tasks for a user')
    recommend_parser.add_argument('--user-id', required=True)
    recommend_parser.add_argument('--limit', type=int, default=None,
                                  help='Number of recommendations (default: config value)')
    recommend_parser.set_defaults(handler=run_recommend)

    assign_parser = subparsers.add_parser('assign', help='Auto-assign tasks to their best users')
    assign_parser.add_argument('--task-ids', nargs='+', required=True)
    assign_parser.add_argument('--dry-run', action='store_true',
                               help='Only preview the best matches, persist nothing')
    assign_parser.add_argument('--json', action='store_true', help='Print a JSON summary line')
    assign_parser.set_defaults(handler=run_assign)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    configure_logging(config.logging)

    logger.info(f"ChoreMatch {args.command} starting...")
    try:
        return args.handler(config, args)
    except ChoreMatchError as e:
        logger.error(f"{args.command} failed: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
