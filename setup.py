"""
Setup script for the curriculo project.

Allows development installation with `pip install -e .`
Browser binaries are installed separately: `playwright install chromium`
"""

from setuptools import setup, find_packages

setup(
    name="curriculo",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["version"],
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "pydantic>=2.5",
        "playwright>=1.40",
        "PyPDF2>=3.0",
        "requests>=2.31",
        "tenacity>=8.2",
        "python-dotenv>=1.0",
        "json-repair>=0.25",
        "pymongo>=4.6",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.25",
        ],
    },
)
