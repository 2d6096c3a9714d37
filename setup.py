#!/usr/bin/env python3
"""
Setup script for the service mesh packages

Installs the shared library and the four services from ``backend/``.
"""

from setuptools import setup, find_packages

setup(
    name="mesh-services",
    version="0.1.0",
    package_dir={"": "backend"},
    packages=find_packages("backend", exclude=["tests", "tests.*", "*.tests", "*.tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        # 🚀 Web Framework - MSA Core Stack
        "fastapi>=0.104.1",
        "uvicorn[standard]>=0.24.0",
        "httpx>=0.25.2",

        # 📋 Data Validation & Settings
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-dotenv>=1.0.0",

        # 🔐 Authentication & Security
        "python-jose[cryptography]>=3.3.0",
        "passlib[bcrypt]>=1.7.4",
        "bcrypt>=4.0.1,<5",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    package_data={
        "shared": ["py.typed", "errors/catalogs/*.errors.json"],
    },
)
