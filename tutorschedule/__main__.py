"""
Package entry point.

Allows running the application via:

    python -m tutorschedule

This simply forwards execution to tutorschedule.cli.main().
"""

from tutorschedule.cli import main

if __name__ == "__main__":
    main()
