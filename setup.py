from setuptools import setup, find_packages


setup(
    name="jagarchive",
    version="0.1",
    packages=find_packages(include=["jagarchive", "jagarchive.*"]),
    description="Reader/writer and CLI for JAG cache archives (.jag/.mem).",
    author="vercingetorx",
    python_requires=">=3.8",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "jagarchive=jagarchive.cli:main",
        ]
    },
)
