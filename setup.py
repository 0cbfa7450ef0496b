"""
Setup script for the Gemini structured-generation pipeline for hiring workflows
"""

from setuptools import find_packages, setup

with open("README.md", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", encoding="utf-8") as fh:
    requirements = [
        line.strip() for line in fh if line.strip() and not line.startswith("#")
    ]

setup(
    name="gemini-hiring",
    version="0.1.0",
    author="Sean Brar",
    author_email="hello@seanbrar.com",
    description="Schema-validated Gemini generation for recruitment workflows",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/seanbrar/gemini-hiring",
    packages=find_packages("src"),
    package_dir={"": "src"},
    package_data={"gemini_hiring": ["prompts/templates/*.j2"]},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.13",
    ],
    python_requires=">=3.13",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.24",
        ],
    },
)
