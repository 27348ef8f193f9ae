"""Main entry point for quizsmith CLI."""

from quizsmith.cli.app import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
