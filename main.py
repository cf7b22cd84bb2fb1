import logging
import argparse

from core.config_loader import get_config
from core.applications import close_expired_jobs
from core.students import StudentProfileService
from database.init_db import init_db
from database.uow import placement_uow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_serve(args):
    import uvicorn

    config = get_config()
    host = args.host or config.web.host
    port = args.port or config.web.port

    logger.info(f"Starting Placement Scout API on {host}:{port}")
    uvicorn.run(
        "web.backend.app:app",
        host=host,
        port=port,
        reload=False,
        log_level="info"
    )


def run_init_db(args):
    init_db()


def run_close_expired_jobs(args):
    with placement_uow() as uow:
        closed = [str(job.id) for job in close_expired_jobs(uow)]
    logger.info(f"Closed jobs: {closed}")


def run_recompute_aggregates(args):
    with placement_uow() as uow:
        changed = StudentProfileService(uow).recompute_all()
    logger.info(f"Aggregate recompute finished, {changed} profile(s) updated")


def main():
    parser = argparse.ArgumentParser(description="Placement Scout")
    subparsers = parser.add_subparsers(dest='command', required=True)

    serve = subparsers.add_parser('serve', help='Run the HTTP API')
    serve.add_argument('--host', type=str, default=None, help='Bind address (default from config)')
    serve.add_argument('--port', type=int, default=None, help='Port (default from config)')
    serve.set_defaults(func=run_serve)

    subparsers.add_parser('init-db', help='Create database tables').set_defaults(func=run_init_db)
    subparsers.add_parser('close-expired-jobs', help='Close open jobs past their deadline').set_defaults(
        func=run_close_expired_jobs)
    subparsers.add_parser('recompute-aggregates', help='Recompute every aggregate score').set_defaults(
        func=run_recompute_aggregates)

    args = parser.parse_args()
    logger.info(f"Placement Scout starting: {args.command}")
    args.func(args)


if __name__ == "__main__":
    main()
