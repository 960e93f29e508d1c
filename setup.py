from setuptools import setup, find_packages

# Import version from the package
from agentns.version import __version__

setup(
    name="agentns",
    version=__version__,
    packages=find_packages(include=["agentns", "agentns.*"]),
    install_requires=[
        "lark>=1.1.5",
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "typer>=0.9.0",
        "pydantic>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "agentns=agentns.main:app",
        ],
    },
    python_requires=">=3.9",
)
