"""Developer portfolio editor: profile, projects, skills, theme and publishing."""

__version__ = "0.1.0"
