"""closure-watch: school closure announcements scraped, classified and served."""

__version__ = "0.1.0"
