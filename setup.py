"""Setup script for deptrace."""

from pathlib import Path

from setuptools import find_packages, setup


def read_readme():
    """Read the long description, if the checkout ships one."""
    readme = Path(__file__).parent / "README.md"
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="deptrace",
    version="0.1.0",
    description="Provenance tracing for dependency-resolution engines",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    packages=find_packages(include=["deptrace", "deptrace.*"]),
    install_requires=[
        "dependency-injector>=4.41",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "tomli>=2.0; python_version < '3.11'",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
)
