#!/usr/bin/env python3

from setuptools import setup
import os

directory = os.path.dirname(os.path.realpath(__file__))


def read_long_description():
    path = os.path.join(directory, "README.md")
    if not os.path.exists(path):
        return ""
    with open(path, "r", encoding="utf8") as f:
        return f.read()


if __name__ == "__main__":
    setup(
        name="assetlink",
        packages=[
            "assetlink",
            "assetlink.assets",
            "assetlink.core",
            "assetlink.loaders",
            "assetlink.project",
            "assetlink.scene",
        ],
        python_requires='>=3.10',
        version="0.1.0",
        license="MIT",
        description="Project asset resolution for scene documents",
        long_description=read_long_description(),
        long_description_content_type="text/markdown",
        keywords=["scene", "assets", "loader"],
        classifiers=[],
        include_package_data=True,
        install_requires=[
            "numpy",
            "Pillow>=9.0",
        ],
        extras_require={
            "test": [
                "pytest",
            ],
        },
        zip_safe=False,
    )
