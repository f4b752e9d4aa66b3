"""
ChatBoard Setup Script
"""

from pathlib import Path

from setuptools import setup, find_packages

readme = Path(__file__).parent / "README.md"
long_description = readme.read_text(encoding="utf-8") if readme.exists() else ""

setup(
    name="chatboard",
    version="0.1.0",
    author="ChatBoard Project",
    description="Minimal persistent message board on SQLite",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Communications :: Chat",
    ],
    python_requires=">=3.9",
    install_requires=[
        "tomli>=2.0.0;python_version<'3.11'",
        "toml>=0.10.2",
    ],
    extras_require={
        "web": ["flask>=3.0.0"],
        "dev": [
            "pytest>=7.0.0",
            "flask>=3.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "chatboard=chatboard.__main__:main",
        ],
    },
)
