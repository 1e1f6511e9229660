"""
AccessAudit - accessibility audits with UK compliance scoring
"""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

with open("requirements-dev.txt", "r", encoding="utf-8") as fh:
    dev_requirements = [
        line.strip() for line in fh if line.strip() and not line.startswith("#") and not line.startswith("-r")
    ]

setup(
    name="accessaudit",
    version="0.1.0",
    description="Accessibility audit aggregation and scoring for care-sector websites",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["core", "core.*", "d0_browser", "d0_browser.*", "d3_assessment", "d3_assessment.*", "d5_scoring", "d5_scoring.*", "d11_orchestration", "d11_orchestration.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Quality Assurance",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={"test": dev_requirements},
    entry_points={
        "console_scripts": [
            "accessaudit=core.cli:main",
        ],
    },
    include_package_data=True,
    package_data={
        "d0_browser": ["browsers.yaml"],
    },
)
