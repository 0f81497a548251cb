# setup.py
from setuptools import setup, find_packages

setup(
    name="seo_scout",
    version="0.1.0",
    description="Google Search Console OAuth, sitemap crawl and page metrics toolkit",
    packages=find_packages(include=["seo_scout", "seo_scout.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
        "lxml>=5.0",
        "openai>=1.30",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["seo-scout=seo_scout.cli:main"],
    },
    python_requires=">=3.11",
)
