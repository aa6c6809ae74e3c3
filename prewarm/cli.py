#!/usr/bin/env python
"""
prewarm CLI - fire warm calls at a prediction API from the command line.
"""

from functools import wraps
import typer
from loguru import logger
from prewarm.entrypoint.warm import simulate_interactions, warm_once
from prewarm.exception import PrewarmError

app = typer.Typer(no_args_is_help=True)


def handle_errors(func):
    """
    Decorator to handle common exceptions in CLI commands.

    Converts PrewarmError exceptions into clean user-facing messages
    and proper exit codes.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PrewarmError as e:
            logger.error(str(e))
            raise typer.Exit(1)
        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            raise typer.Exit(130)  # Standard SIGINT exit code
        except Exception as e:
            logger.exception(f"Unexpected error: {e}")
            raise typer.Exit(1)
    return wrapper


app.command(name="warm", help="Send one warm call and wait for it to finish.")(
    handle_errors(warm_once)
)
app.command(name="trigger", help="Simulate interaction signals through the cooldown gate.")(
    handle_errors(simulate_interactions)
)

if __name__ == "__main__":
    app()
