"""GitGuide - README generator for any project directory or GitHub repository."""

__version__ = "1.0.0"
