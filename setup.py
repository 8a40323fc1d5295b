"""setuptools setup for RollCall.

Install for development:
    pip install -e ".[test]"
    pytest
"""

from setuptools import setup, find_packages

setup(
    name="rollcall",
    version="0.1.0",
    description="Attendance statistics for student groups",
    packages=find_packages(include=["rollcall", "rollcall.*"]),
    python_requires=">=3.10",
    install_requires=[
        "SQLAlchemy>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["rollcall=rollcall.__main__:main"],
    },
)
