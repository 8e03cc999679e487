"""setuptools setup for JournalQuest.

Install for development:
    pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="JournalQuest",
    version="0.1.0",
    description="XP, streaks, quests and achievements for a journaling app",
    packages=find_packages(include=["journalquest", "journalquest.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.4",
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["journalquest=journalquest.__main__:main"],
    },
)
