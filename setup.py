"""
Setup script for the rps-client package.

Builds the pure-Python client library and the ``rps-client`` developer
console. Internal modules (``_shared``, ``_session``) ship as source next
to the public API (client.py, commands.py, events.py, errors.py, types.py).
"""

from setuptools import setup, find_packages

setup(
    name="rps-client",
    version="1.0.0",
    description="Rock-Paper-Scissors game client - WebSocket session state machine and envelope codec",
    author="Paper Game Team",
    license="MIT",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
        "websockets>=12.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
        "dev": [
            "pytest>=7.4",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "rps-client=rps_client.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Games/Entertainment",
    ],
)
