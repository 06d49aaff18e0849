"""
Git Summary AI

AI-generated commit summaries, commits, pushes and pull requests from a git diff.
"""

__version__ = "1.0.0"

APP_NAME = "git-summary-ai"

# Directory under the user's home that holds config.json, models-cache.json,
# token-usage.json and the global .env file
APP_DIR_NAME = ".git-summary-ai"
