#!/usr/bin/env python3
"""
Setup configuration for yt2jellyfin
Download YouTube audio as MP3 with full metadata for Jellyfin
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "yt-dlp>=2023.12.30",
    "mutagen>=1.47.0",
    "click>=8.1.7",
    "rich-click>=1.7.0",
    "pyyaml>=6.0.1",
    "colorama>=0.4.6",
    "python-dotenv>=1.0.0",
]

setup(
    name="yt2jellyfin",
    version="1.0.0",
    author="yt2jellyfin",
    description="Download YouTube audio as MP3 with metadata and artwork, organized for Jellyfin",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["yt2jellyfin", "yt2jellyfin.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: MacOS",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
        "test": [
            "pytest>=7.4.3",
        ],
    },
    entry_points={
        "console_scripts": [
            "yt2jellyfin=yt2jellyfin.cli:main",
            "yt2jellyfin-setup=yt2jellyfin.installer:main",
        ],
    },
    keywords="youtube jellyfin music download mp3 yt-dlp cli",
)
