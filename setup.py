"""
Setup script for Trend Search - trend collection, aggregation and serving.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="trend-search",
    version="1.0.0",
    description="Collects, deduplicates, clusters and ranks trending news and social topics",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Trend Search Team",
    packages=find_packages(include=["trend_search", "trend_search.*", "api", "api.*"]),
    python_requires=">=3.11",
    install_requires=[
        # HTTP client
        "aiohttp>=3.9.0",

        # OAuth 1.0a request signing (X/Twitter user context)
        "oauthlib>=3.2.0",

        # Feed parsing and scraping
        "feedparser>=6.0.10",
        "beautifulsoup4>=4.12.0",

        # Data validation
        "pydantic>=2.5.0",

        # Scheduling
        "apscheduler>=3.10.0,<4",

        # API server
        "fastapi>=0.109.0",
        "uvicorn>=0.27.0",

        # Monitoring and observability
        "prometheus-client>=0.19.0",

        # Utilities
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.26.0",
        ],
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.26.0",
            "black>=23.12.0",
            "mypy>=1.7.0",
            "ruff>=0.1.8",
        ],
    },
    entry_points={
        "console_scripts": [
            "trend-search=trend_search.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
        "Topic :: Text Processing :: Linguistic",
    ],
    include_package_data=True,
    zip_safe=False,
)
