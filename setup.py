"""
Setup script for the HTML to PDF service.

Allows development installation with `pip install -e .`
"""

from setuptools import setup, find_packages

setup(
    name="html-to-pdf-service",
    version="0.1.0",
    packages=find_packages(include=["html_pdf_service", "html_pdf_service.*"]),
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.29",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "python-dotenv>=1.0",
        "playwright>=1.40",
        "tenacity>=8.2",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "httpx>=0.25",
        ],
    },
    entry_points={
        "console_scripts": [
            "html-to-pdf-service=html_pdf_service.main:main",
        ],
    },
)
