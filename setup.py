"""Setuptools configuration for the idea board."""

from setuptools import find_packages, setup


setup(
    name="idea-board",
    version="0.1.0",
    description="Idea discussion board over a single JSON document store",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"board": ["templates/*.html", "templates/pages/*.html"]},
    py_modules=[
        "board_client",
        "documents",
        "gateway",
        "run",
        "store_config",
        "view_state",
    ],
    install_requires=["flask"],
    extras_require={
        "test": ["pytest"],
        "docs": ["sphinx"],
    },
)
