"""
Module entry point for: python -m resume_parser

Allows running the parser directly as a module:
    python -m resume_parser parse <pdf_path> [options]
    python -m resume_parser batch <directory> [options]
    python -m resume_parser inspect <pdf_path>
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
