"""setup.py for crmsearch."""

from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).resolve().parent
README = (ROOT / "README.md").read_text(encoding="utf-8")

about: dict[str, str] = {}
exec((ROOT / "crmsearch" / "__init__.py").read_text(encoding="utf-8"), about)

setup(
    name="crmsearch",
    version=about["__version__"],
    description="Fuzzy record search, service-taxonomy matching and duplicate detection for CRM exports",
    long_description=README,
    long_description_content_type="text/markdown",
    python_requires=">=3.9",
    packages=find_packages(include=["crmsearch", "crmsearch.*"]),
    include_package_data=True,
    package_data={"crmsearch": ["data/*.yaml"]},
    install_requires=[
        "pyyaml>=6.0",
        "rapidfuzz>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "crmsearch=crmsearch.cli:main",
            "crmsearch-filter=crmsearch.fuzzy.cli:main",
            "crmsearch-services=crmsearch.services.cli:main",
            "crmsearch-duplicates=crmsearch.duplicates.cli:main",
        ]
    },
)
