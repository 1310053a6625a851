"""
nestgen - NestJS resource generator for Prisma schemas
Install: pip install -e .
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="nestgen",
    version="0.2.0",
    author="nestgen contributors",
    author_email="",
    description="Generate NestJS DTOs, services and controllers from a Prisma schema",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "nestgen": [
            "resource_templates/*.template",
            "resource_templates/dto/*.template",
        ],
    },
    include_package_data=True,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Code Generators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=23.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "nestgen=nestgen.cli:main",
            "nestgen-scaffold=nestgen.scaffold:main",
        ],
    },
    keywords="nestjs, prisma, generator, dto, class-validator, code-generator, crud",
)
