"""
Setup file.
"""

import os

from setuptools import find_packages, setup

KEYWORDS = "android aspectj ajc weaving bytecode build transform"
HERE = os.path.dirname(os.path.abspath(__file__))


if __name__ == "__main__":
    setup(
        name="aspectweave",
        version="0.1.0",
        description="AspectJ binary weaving step for Android builds",
        keywords=KEYWORDS,
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=[
            "requests>=2.28",
            "tqdm>=4.64",
        ],
        extras_require={
            "test": ["pytest>=7.0"],
        },
        entry_points={
            "console_scripts": [
                "aspectweave=aspectweave.cli:main",
            ],
        },
        include_package_data=True)
