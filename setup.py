from setuptools import setup, find_packages

setup(
    name="acceptance-core",
    version="0.1.0",
    description="Markdown acceptance criteria to executable mobile UI checks, with testability reporting",
    author="Marcos Remar",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "httpx>=0.25.0",
        "python-dotenv>=1.0.0",
        "structlog>=23.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "acceptance-core=acceptance_core.cli:main",
        ],
    },
)
