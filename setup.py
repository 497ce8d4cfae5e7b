"""
Setup script for intelligent-textbook.

Generates a complete MkDocs textbook site from a single topic by running a
fixed sequence of Claude-backed generation stages: course description,
learning graph, chapters, simulations, glossary, FAQ, quizzes, references,
site configuration, metrics and README.

The 'textbook' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="intelligent-textbook",
    version="0.1.0",
    description="Generate intelligent textbook sites with Claude and MkDocs Material",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Generation
        "anthropic>=0.40.0",
        # Site configuration
        "pyyaml>=6.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "textbook=textbook.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Text Processing :: Markup :: Markdown",
    ],
    keywords="textbook education mkdocs claude llm curriculum",
)
