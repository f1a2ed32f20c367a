# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="distmerge",
    version="0.1.0",
    description="Builds two front-end variants and merges them into one deployable directory",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["distmerge", "distmerge.*"]),
    package_data={
        "distmerge.interface": ["locales/*.json"],
    },
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'distmerge=distmerge.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
