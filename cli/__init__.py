"""closure-watch command-line interface."""
